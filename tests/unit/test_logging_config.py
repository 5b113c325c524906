"""
Unit tests for prospectcrm/logging_config.py.

configure_logging: handler setup, idempotency, level from LOG_LEVEL, and that
module loggers (prospectcrm.engine.crm etc.) end up in the same file.
log_call: CALL/OK/FAIL records around CLI-style command functions.
"""

import logging
import logging.handlers
import os
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from prospectcrm.cli.main import cli
from prospectcrm.errors import BackendError, ValidationError
from prospectcrm.logging_config import LOGGER_NAME, configure_logging, log_call


def _reset_logger():
    logger = logging.getLogger(LOGGER_NAME)
    for h in logger.handlers[:]:
        h.close()
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def log_dir(tmp_path):
    _reset_logger()
    target = tmp_path / 'logs'
    with patch('prospectcrm.logging_config._LOG_DIR', target), \
         patch('prospectcrm.logging_config._LOG_FILE', target / 'prospectcrm.log'):
        yield target
    _reset_logger()


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------

class TestConfigureLogging:

    def test_creates_dir_and_rotating_handler(self, log_dir):
        logger = configure_logging()
        assert log_dir.is_dir()
        assert logger.name == 'prospectcrm'
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 5 * 1024 * 1024
        assert handler.backupCount == 3

    def test_repeated_calls_keep_one_handler(self, log_dir):
        for _ in range(3):
            configure_logging()
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_level_defaults_to_info(self, log_dir):
        env = {k: v for k, v in os.environ.items() if k != 'LOG_LEVEL'}
        with patch.dict(os.environ, env, clear=True):
            configure_logging()
        assert logging.getLogger(LOGGER_NAME).level == logging.INFO

    @pytest.mark.parametrize('value,expected', [
        ('debug', logging.DEBUG),
        ('ERROR', logging.ERROR),
        ('nonsense', logging.INFO),
    ])
    def test_level_from_env(self, log_dir, value, expected):
        with patch.dict(os.environ, {'LOG_LEVEL': value}):
            configure_logging()
        assert logging.getLogger(LOGGER_NAME).level == expected

    def test_module_loggers_write_to_the_file(self, log_dir):
        configure_logging()
        logging.getLogger('prospectcrm.engine.crm').warning('store rewritten')
        for h in logging.getLogger(LOGGER_NAME).handlers:
            h.flush()
        content = (log_dir / 'prospectcrm.log').read_text(encoding='utf-8')
        assert 'WARNING' in content
        assert 'store rewritten' in content


# ---------------------------------------------------------------------------
# log_call
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_logger():
    logger = MagicMock()
    with patch('prospectcrm.logging_config.logging') as mock_logging:
        mock_logging.getLogger.return_value = logger
        mock_logging.WARNING = logging.WARNING
        mock_logging.ERROR = logging.ERROR
        yield logger


class TestLogCall:

    def test_returns_result_and_keeps_name(self):
        @log_call
        def orgs_list(region=None):
            return ['demo-org-1']

        assert orgs_list(region='Nord') == ['demo-org-1']
        assert orgs_list.__name__ == 'orgs_list'

    def test_call_record_lists_arguments(self, mock_logger):
        @log_call
        def orgs_show(org_id, verbose=False):
            pass

        orgs_show('demo-org-1', verbose=True)

        msg = mock_logger.debug.call_args[0][0]
        assert msg.startswith('CALL orgs_show')
        assert "'demo-org-1'" in msg
        assert 'verbose=True' in msg

    def test_call_without_arguments_uses_placeholder(self, mock_logger):
        @log_call
        def dashboard():
            pass

        dashboard()
        assert 'args=(-)' in mock_logger.debug.call_args[0][0]

    def test_ok_record_has_duration(self, mock_logger):
        @log_call
        def mode():
            pass

        mode()
        msg = mock_logger.info.call_args[0][0]
        assert msg.startswith('OK   mode')
        assert msg.endswith('ms')

    def test_failure_is_logged_and_reraised(self, mock_logger):
        @log_call
        def contracts_download(contract_id):
            raise BackendError('File download not available in demo mode')

        with pytest.raises(BackendError, match='demo mode'):
            contracts_download('demo-contract-1')

        level, msg = mock_logger.log.call_args[0]
        assert level == logging.ERROR
        assert 'FAIL contracts_download' in msg
        assert 'BackendError: File download not available in demo mode' in msg
        mock_logger.info.assert_not_called()

    def test_service_status_is_part_of_the_failure(self, mock_logger):
        @log_call
        def orgs_list():
            raise BackendError('JWT expired', status_code=401)

        with pytest.raises(BackendError):
            orgs_list()
        level, msg = mock_logger.log.call_args[0]
        assert level == logging.ERROR
        assert 'BackendError(401): JWT expired' in msg

    def test_rejected_input_is_a_warning_listing_every_error(self, mock_logger):
        @log_call
        def orgs_add():
            raise ValidationError(['Organization name is required', 'Invalid email address: x'])

        with pytest.raises(ValidationError):
            orgs_add()
        level, msg = mock_logger.log.call_args[0]
        assert level == logging.WARNING
        assert 'ValidationError: 2 error(s): Organization name is required; Invalid email address: x' in msg

    def test_crm_argument_is_logged_as_its_mode(self, mock_logger, demo_crm):
        @log_call
        def orgs_show(crm, org_id):
            return crm.get_organization(org_id)

        assert orgs_show(demo_crm, 'demo-org-1').id == 'demo-org-1'
        call_msg = mock_logger.debug.call_args_list[0][0][0]
        assert call_msg == "CALL orgs_show [demo] | args=('demo-org-1')"
        assert mock_logger.info.call_args[0][0].startswith('OK   orgs_show [demo] |')

    def test_mock_first_argument_is_not_taken_for_a_crm(self, mock_logger):
        @log_call
        def helper(obj):
            pass

        helper(MagicMock())
        assert mock_logger.debug.call_args[0][0].startswith('CALL helper | args=(<MagicMock')

    def test_cli_failure_is_logged_before_exit(self, mock_logger, demo_crm):
        with patch('prospectcrm.cli.main.configure_logging'):
            result = CliRunner().invoke(cli, ['contracts', 'attach', 'nope', __file__], obj=demo_crm)

        assert result.exit_code == 1
        level, msg = mock_logger.log.call_args[0]
        assert (level, msg.split(' | ')[:2]) == (logging.WARNING, ['FAIL contracts_attach [demo]',
                                                                   'NotFoundError: Contract not found'])
