"""
Logging configuration for Prospect CRM.

Everything logs under the 'prospectcrm' logger; module loggers
(prospectcrm.engine.crm, prospectcrm.backends.remote, ...) propagate to it and
end up in one rotating file, logs/prospectcrm.log (5 MB, 3 backups).
LOG_LEVEL picks the level, INFO when unset or unknown.

CLI commands are wrapped with @log_call. The CRM handed to a command is
logged as its data mode rather than as an object repr, so every record says
whether it touched the hosted service or the demo store:

    2026-10-17 09:12:44 | DEBUG    | CALL orgs_show [demo] | args=('demo-org-1')
    2026-10-17 09:12:44 | INFO     | OK   orgs_show [demo] | 12ms
    2026-10-17 09:12:45 | ERROR    | FAIL orgs_list [remote] | BackendError(401): JWT expired | 240ms
    2026-10-17 09:12:46 | WARNING  | FAIL users_add [demo] | ValidationError: 1 error(s): Admin needs a name... | 3ms
"""

import functools
import logging
import logging.handlers
import os
import time
from pathlib import Path

from prospectcrm.errors import BackendError, NotFoundError, ValidationError

_LOG_DIR = Path(__file__).parent.parent / "logs"
_LOG_FILE = _LOG_DIR / "prospectcrm.log"
_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3

LOGGER_NAME = "prospectcrm"


def configure_logging() -> logging.Logger:
    """Attach the rotating file handler once; later calls return the same logger."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    _LOG_DIR.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    handler = logging.handlers.RotatingFileHandler(
        _LOG_FILE, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    return logger


def _crm_mode(args) -> str:
    """' [demo]' or ' [remote]' when the first argument is a CRM, else ''."""
    if args and isinstance(getattr(type(args[0]), "mode", None), property):
        return f" [{args[0].mode}]"
    return ""


def _describe_failure(exc: Exception):
    """(level, text) for a failed command."""
    if isinstance(exc, ValidationError):
        # bad input is the user's problem, not the service's
        return logging.WARNING, f"ValidationError: {len(exc.errors)} error(s): {'; '.join(exc.errors)}"
    if isinstance(exc, NotFoundError):
        return logging.WARNING, f"NotFoundError: {exc}"
    if isinstance(exc, BackendError) and exc.status_code is not None:
        return logging.ERROR, f"BackendError({exc.status_code}): {exc}"
    return logging.ERROR, f"{type(exc).__name__}: {exc}"


def log_call(func):
    """
    Log a command's arguments (DEBUG), its duration when it returns (INFO)
    and the error when it raises. The exception is always re-raised.
    SystemExit from handle_errors passes through unlogged; the error was
    already logged when it was caught.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(LOGGER_NAME)
        mode = _crm_mode(args)
        tag = f"{func.__name__}{mode}"
        shown = args[1:] if mode else args

        parts = [repr(a) for a in shown] + [f"{k}={v!r}" for k, v in kwargs.items()]
        logger.debug(f"CALL {tag} | args=({', '.join(parts) or '-'})")

        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            level, text = _describe_failure(exc)
            logger.log(level, f"FAIL {tag} | {text} | {int((time.perf_counter() - start) * 1000)}ms")
            raise
        logger.info(f"OK   {tag} | {int((time.perf_counter() - start) * 1000)}ms")
        return result

    return wrapper
