"""
Shared fixtures for unit tests.

- store: in-memory LocalStore (nothing touches disk)
- demo_crm: CRM forced into demo mode on that store, with its own EventBus
- env_settings: mutable settings the CRM re-reads on every call
"""

import pytest

from prospectcrm.bus.events import EventBus
from prospectcrm.config import BackendSettings
from prospectcrm.engine.crm import CRM
from prospectcrm.store import LocalStore


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def env_settings():
    """Dict the settings loader reads; tests flip url/key to switch mode."""
    return {'url': '', 'key': ''}


@pytest.fixture
def demo_crm(store, events, env_settings):
    return CRM(
        store,
        settings_loader=lambda: BackendSettings(env_settings['url'], env_settings['key']),
        events=events,
    )
