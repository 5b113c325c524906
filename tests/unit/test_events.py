"""
Unit tests for the EventBus (prospectcrm/bus/events.py).
No mocking required, pure Python.
"""

import pytest

from prospectcrm.bus import events as event_module
from prospectcrm.bus.events import EventBus


@pytest.fixture
def bus():
    """Fresh EventBus for each test; never share state between tests."""
    return EventBus()


def test_handlers_receive_data_in_registration_order(bus):
    calls = []
    bus.on('organization_created', lambda d: calls.append(('a', d['id'])))
    bus.on('organization_created', lambda d: calls.append(('b', d['id'])))
    bus.emit('organization_created', {'id': 'demo-org-1'})
    assert calls == [('a', 'demo-org-1'), ('b', 'demo-org-1')]


def test_emit_without_handlers_or_data(bus):
    received = []
    bus.emit('nobody_listens')
    bus.on('evt', received.append)
    bus.emit('evt')
    assert received == [{}]


def test_failing_handler_does_not_stop_others(bus):
    good = []

    def bad(data):
        raise RuntimeError('handler exploded')

    bus.on('contract_updated', bad)
    bus.on('contract_updated', lambda d: good.append(True))
    bus.emit('contract_updated', {})
    assert good == [True]


def test_off_removes_only_that_handler(bus):
    calls = []

    def first(d):
        calls.append('first')

    bus.on('evt', first)
    bus.on('evt', lambda d: calls.append('second'))
    bus.off('evt', first)
    bus.off('evt', first)  # already gone: ignored
    bus.emit('evt', {})
    assert calls == ['second']


def test_handler_may_unregister_itself_during_emit(bus):
    calls = []

    def once(d):
        calls.append('once')
        bus.off('evt', once)

    bus.on('evt', once)
    bus.on('evt', lambda d: calls.append('always'))
    bus.emit('evt', {})
    bus.emit('evt', {})
    assert calls == ['once', 'always', 'always']


def test_clear_removes_everything(bus):
    calls = []
    bus.on('evt', lambda d: calls.append(1))
    bus.clear()
    bus.emit('evt', {})
    assert calls == []


def test_event_names_are_unique_strings():
    names = [v for k, v in vars(event_module).items() if k.startswith('EVENT_')]
    assert len(names) == 27
    assert all(isinstance(n, str) and n for n in names)
    assert len(names) == len(set(names))
