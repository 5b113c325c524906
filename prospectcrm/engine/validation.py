"""
Input validation for records created through the facade.
Each validator returns a list of human-readable problems (empty = valid).
"""

import re
from typing import List

from prospectcrm.models import (
    APPOINTMENT_STATUSES, APPOINTMENT_TYPES, CONTRACT_STATUSES, DOCUMENT_CATEGORIES, REGIONS,
    Admin, Appointment, Commercial, Contact, Contract, CRMDocument, Organization,
)

EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MAX_ROOMS = 10000


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def validate_organization(org: Organization) -> List[str]:
    errors = []
    if not (org.name or '').strip():
        errors.append("Organization name is required")
    if org.email and not is_valid_email(org.email):
        errors.append(f"Invalid email address: {org.email}")
    if org.nb_chambres is not None and not (0 <= org.nb_chambres <= MAX_ROOMS):
        errors.append(f"Number of rooms must be between 0 and {MAX_ROOMS}")
    return errors


def validate_contact(contact: Contact) -> List[str]:
    errors = []
    if not (contact.full_name or '').strip() and not (contact.email or '').strip():
        errors.append("Contact needs a name or an email address")
    if contact.email and not is_valid_email(contact.email):
        errors.append(f"Invalid email address: {contact.email}")
    return errors


def validate_appointment(appointment: Appointment) -> List[str]:
    errors = []
    if not (appointment.title or '').strip():
        errors.append("Appointment title is required")
    if not appointment.appointment_date:
        errors.append("Appointment date is required")
    if not appointment.appointment_time:
        errors.append("Appointment time is required")
    if appointment.type and appointment.type not in APPOINTMENT_TYPES:
        errors.append(f"Unknown appointment type: {appointment.type}")
    if appointment.status and appointment.status not in APPOINTMENT_STATUSES:
        errors.append(f"Unknown appointment status: {appointment.status}")
    return errors


def validate_contract(contract: Contract) -> List[str]:
    errors = []
    if not (contract.title or '').strip() and not (contract.description or '').strip():
        errors.append("Contract title or description is required")
    if not contract.status:
        errors.append("Contract status is required")
    elif contract.status not in CONTRACT_STATUSES:
        errors.append(f"Unknown contract status: {contract.status}")
    return errors


def validate_document(document: CRMDocument) -> List[str]:
    errors = []
    if not (document.title or '').strip():
        errors.append("Document title is required")
    if not document.file_path:
        errors.append("Document file path is required")
    if document.category not in DOCUMENT_CATEGORIES:
        errors.append(f"Unknown document category: {document.category}")
    return errors


def _validate_person(kind: str, person) -> List[str]:
    errors = []
    if not (person.full_name or '').strip() and not (person.email or '').strip():
        errors.append(f"{kind} needs a name or an email address")
    if person.email and not is_valid_email(person.email):
        errors.append(f"Invalid email address: {person.email}")
    return errors


def validate_admin(admin: Admin) -> List[str]:
    return _validate_person("Admin", admin)


def validate_commercial(commercial: Commercial) -> List[str]:
    errors = _validate_person("Salesperson", commercial)
    if commercial.region and commercial.region not in REGIONS:
        errors.append(f"Unknown region: {commercial.region}")
    return errors
