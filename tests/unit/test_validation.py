"""
Unit tests for prospectcrm/engine/validation.py.
"""

import pytest

from prospectcrm.engine.validation import (
    is_valid_email, validate_appointment, validate_contact, validate_contract,
    validate_document, validate_organization,
)
from prospectcrm.models import Appointment, Contact, Contract, CRMDocument, Organization


@pytest.mark.parametrize('value,ok', [
    ('info@hotel.mu', True),
    (' info@hotel.mu ', True),
    ('info@hotel', False),
    ('hotel.mu', False),
])
def test_is_valid_email(value, ok):
    assert is_valid_email(value) is ok


def test_organization_rules():
    assert validate_organization(Organization(name='Hotel', nb_chambres=0)) == []
    assert validate_organization(Organization(name='Hotel', nb_chambres=10000)) == []
    assert validate_organization(Organization(name='   ')) == ['Organization name is required']
    assert validate_organization(Organization(name='Hotel', nb_chambres=-1)) == [
        'Number of rooms must be between 0 and 10000']


def test_contact_needs_name_or_email():
    assert validate_contact(Contact(email='a@b.mu')) == []
    assert validate_contact(Contact()) == ['Contact needs a name or an email address']


def test_appointment_requires_title_date_time():
    errors = validate_appointment(Appointment())
    assert errors == ['Appointment title is required', 'Appointment date is required',
                      'Appointment time is required']
    assert validate_appointment(Appointment(title='x', appointment_date='2030-01-01',
                                            appointment_time='09:00', type='Lunch')) == [
        'Unknown appointment type: Lunch']


def test_contract_requires_status():
    assert validate_contract(Contract(description='Offer')) == ['Contract status is required']
    assert validate_contract(Contract(description='Offer', status='pending')) == [
        'Unknown contract status: pending']
    assert validate_contract(Contract(title='Offer', status='contrat_envoye')) == []


def test_document_rules():
    assert validate_document(CRMDocument(title='Deck', file_path='a', category='contrat')) == []
    assert validate_document(CRMDocument(category='other')) == [
        'Document title is required', 'Document file path is required', 'Unknown document category: other']


def test_room_count_given_as_text_is_checked_as_a_number():
    assert validate_organization(Organization(name='Hotel', nb_chambres='120')) == []
    assert validate_organization(Organization(name='Hotel', nb_chambres='20000')) == [
        'Number of rooms must be between 0 and 10000']
