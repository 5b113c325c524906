"""
Unit tests for RemoteBackend (prospectcrm/backends/remote.py).

The requests.Session is a MagicMock; each test sets what session.request
returns and then inspects the call it received.
"""

from unittest.mock import MagicMock

import pytest
import requests

from prospectcrm.backends.remote import RemoteBackend
from prospectcrm.config import BackendSettings
from prospectcrm.errors import BackendError

URL = 'https://crm.example.co'


def make_response(status=200, json_body=None, content=None, text=''):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = json_body
    if content is None:
        content = b'' if json_body is None else b'json'
    resp.content = content
    resp.text = text
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def backend(session):
    return RemoteBackend(BackendSettings(URL, 'secret'), session=session, timeout=3)


def test_auth_headers_set_on_session(backend, session):
    assert session.headers['apikey'] == 'secret'
    assert session.headers['Authorization'] == 'Bearer secret'


def test_select_builds_query(backend, session):
    session.request.return_value = make_response(json_body=[{'id': 'a'}])

    rows = backend.select('crm_documents', filters={'category': 'contrat', 'is_active': True},
                          order_by='updated_at', ascending=False)

    assert rows == [{'id': 'a'}]
    method, url = session.request.call_args[0]
    kwargs = session.request.call_args[1]
    assert (method, url) == ('GET', f'{URL}/rest/v1/crm_documents')
    assert kwargs['timeout'] == 3
    assert kwargs['params'] == {
        'select': '*', 'order': 'updated_at.desc', 'category': 'eq.contrat', 'is_active': 'eq.true',
    }


def test_select_ascending_and_unordered(backend, session):
    session.request.return_value = make_response(json_body=[])
    backend.select('appointments', order_by='appointment_date', ascending=True)
    assert session.request.call_args[1]['params']['order'] == 'appointment_date.asc'

    backend.select('organizations', filters={'id': 'x'}, order_by=None)
    assert 'order' not in session.request.call_args[1]['params']


def test_insert_returns_stored_row(backend, session):
    session.request.return_value = make_response(status=201, json_body=[{'id': 'new', 'name': 'A'}])
    row = backend.insert('organizations', {'name': 'A'})
    assert row == {'id': 'new', 'name': 'A'}
    kwargs = session.request.call_args[1]
    assert kwargs['json'] == {'name': 'A'}
    assert kwargs['headers']['Prefer'] == 'return=representation'


def test_insert_without_returned_row_is_an_error(backend, session):
    session.request.return_value = make_response(status=201)
    with pytest.raises(BackendError):
        backend.insert('organizations', {'name': 'A'})


def test_update_missing_row_returns_none(backend, session):
    session.request.return_value = make_response(json_body=[])
    assert backend.update('contracts', 'nope', {'status': 'signed'}) is None
    assert session.request.call_args[1]['params'] == {'id': 'eq.nope'}
    assert session.request.call_args[0][0] == 'PATCH'


def test_delete_sends_id_filter(backend, session):
    session.request.return_value = make_response(status=204)
    backend.delete('contacts', 'c1')
    assert session.request.call_args[0] == ('DELETE', f'{URL}/rest/v1/contacts')
    assert session.request.call_args[1]['params'] == {'id': 'eq.c1'}


def test_service_error_message_is_passed_through(backend, session):
    session.request.return_value = make_response(
        status=401, json_body={'message': 'JWT expired'}, content=b'{}')
    with pytest.raises(BackendError, match='^JWT expired$') as exc_info:
        backend.select('organizations')
    assert exc_info.value.status_code == 401


def test_error_without_json_uses_text(backend, session):
    resp = make_response(status=500, content=b'boom', text='Internal error')
    resp.json.side_effect = ValueError('no json')
    session.request.return_value = resp
    with pytest.raises(BackendError, match='Internal error'):
        backend.select('organizations')


def test_success_with_non_json_body_is_a_backend_error(backend, session):
    resp = make_response(status=200, content=b'<html>', text='<html>gateway</html>')
    resp.json.side_effect = ValueError('Expecting value')
    session.request.return_value = resp
    with pytest.raises(BackendError, match='Invalid JSON from service') as exc_info:
        backend.select('organizations')
    assert exc_info.value.status_code == 200


def test_network_failure_becomes_backend_error(backend, session):
    session.request.side_effect = requests.ConnectionError('refused')
    with pytest.raises(BackendError, match='Service unreachable'):
        backend.select('organizations')


def test_storage_round_trip_calls(backend, session):
    session.request.return_value = make_response(content=b'%PDF')

    assert backend.upload_file('contract-documents', 'k1/1_a.pdf', b'%PDF', 'application/pdf') == 'k1/1_a.pdf'
    method, url = session.request.call_args[0]
    assert (method, url) == ('POST', f'{URL}/storage/v1/object/contract-documents/k1/1_a.pdf')
    assert session.request.call_args[1]['headers']['Content-Type'] == 'application/pdf'

    assert backend.download_file('contract-documents', 'k1/1_a.pdf') == b'%PDF'

    backend.remove_file('crm-documents', 'deck.pdf')
    assert session.request.call_args[0] == ('DELETE', f'{URL}/storage/v1/object/crm-documents')
    assert session.request.call_args[1]['json'] == {'prefixes': ['deck.pdf']}


def test_close_closes_session(session):
    with RemoteBackend(BackendSettings(URL, 'k'), session=session):
        pass
    session.close.assert_called_once()
