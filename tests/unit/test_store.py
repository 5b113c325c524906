"""
Unit tests for LocalStore (prospectcrm/store.py).
Real files under tmp_path; no mocking needed.
"""

import json

import pytest

from prospectcrm.store import LocalStore


def test_in_memory_store_basic_operations():
    store = LocalStore()
    assert store.get_item('demo_contacts') is None
    store.set_item('demo_contacts', '[]')
    assert store.get_item('demo_contacts') == '[]'
    assert 'demo_contacts' in store
    assert len(store) == 1
    store.remove_item('demo_contacts')
    store.remove_item('demo_contacts')  # missing key: no error
    assert len(store) == 0


def test_values_must_be_strings():
    with pytest.raises(TypeError):
        LocalStore().set_item('demo_contacts', [])


def test_set_item_persists_immediately(tmp_path):
    path = tmp_path / 'data' / 'store.json'
    store = LocalStore.open(path)
    store.set_item('demo_organizations', '[{"id": "a"}]')

    assert json.loads(path.read_text(encoding='utf-8')) == {'demo_organizations': '[{"id": "a"}]'}
    assert not (path.parent / 'store.json.tmp').exists()


def test_reopen_reads_previous_values(tmp_path):
    path = tmp_path / 'store.json'
    with LocalStore.open(path) as store:
        store.set_item('demo_deals', '["é"]')

    reopened = LocalStore.open(path)
    assert reopened.get_item('demo_deals') == '["é"]'


def test_autoflush_off_writes_on_close(tmp_path):
    path = tmp_path / 'store.json'
    store = LocalStore.open(path, autoflush=False)
    store.set_item('k', 'v')
    assert not path.exists()
    store.close()
    assert json.loads(path.read_text(encoding='utf-8')) == {'k': 'v'}


def test_closed_store_rejects_access(tmp_path):
    store = LocalStore.open(tmp_path / 'store.json')
    store.close()
    store.close()  # second close is harmless
    with pytest.raises(RuntimeError):
        store.get_item('k')
    with pytest.raises(RuntimeError):
        store.set_item('k', 'v')


def test_corrupted_file_is_backed_up(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('{not json', encoding='utf-8')

    store = LocalStore.open(path)

    assert len(store) == 0
    backups = list(tmp_path.glob('store.json.backup.*'))
    assert len(backups) == 1
    assert backups[0].read_text(encoding='utf-8') == '{not json'


def test_non_object_file_is_rejected(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('[1, 2]', encoding='utf-8')
    with pytest.raises(ValueError):
        LocalStore.open(path)


def test_non_string_values_on_disk_are_serialized(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text(json.dumps({'demo_contacts': [{'id': 'x'}]}), encoding='utf-8')
    store = LocalStore.open(path)
    assert json.loads(store.get_item('demo_contacts')) == [{'id': 'x'}]


def test_clear_and_keys(tmp_path):
    store = LocalStore.open(tmp_path / 'store.json')
    store.set_item('a', '1')
    store.set_item('b', '2')
    assert sorted(store.keys()) == ['a', 'b']
    store.clear()
    assert list(store.keys()) == []
