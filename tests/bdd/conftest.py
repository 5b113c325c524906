"""
Shared fixtures and step definitions for BDD tests.

- runner, crm, context: available to all scenario files in this directory
- crm is a demo-mode CRM on an in-memory store, seeded on first read
- no_logging: autouse, prevents log file creation during tests
- 'the output contains' steps: shared across all feature files
"""

import pytest
from unittest.mock import patch
from click.testing import CliRunner
from pytest_bdd import then, parsers

from prospectcrm.bus.events import EventBus
from prospectcrm.config import BackendSettings
from prospectcrm.engine.crm import CRM
from prospectcrm.store import LocalStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def crm():
    return CRM(LocalStore(), settings_loader=lambda: BackendSettings('', ''), events=EventBus())


@pytest.fixture
def context():
    """Mutable dict shared between Given/When/Then steps within a scenario."""
    return {}


@pytest.fixture(autouse=True)
def no_logging():
    with patch("prospectcrm.cli.main.configure_logging"):
        yield


@then(parsers.parse('the output contains "{text}"'))
def output_contains(context, text):
    assert text in context["result"].output, (
        f"Expected {text!r} in output:\n{context['result'].output}"
    )


@then(parsers.parse('the output does not contain "{text}"'))
def output_does_not_contain(context, text):
    assert text not in context["result"].output, (
        f"Did not expect {text!r} in output:\n{context['result'].output}"
    )


@then(parsers.parse("the command fails"))
def command_fails(context):
    assert context["result"].exit_code == 1, context["result"].output
