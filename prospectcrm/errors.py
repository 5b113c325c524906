"""
Error types raised by the data layer.

Messages are meant for humans; there are no error codes. Callers that need to
distinguish cases catch the class, not the text.
"""

from typing import List, Optional


class CRMError(Exception):
    """Base class for all data layer errors."""


class BackendError(CRMError, RuntimeError):
    """The remote service (or a storage call) reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(CRMError, LookupError):
    """Demo-mode update on an id that is not in the store."""


class ValidationError(CRMError, ValueError):
    """Input rejected before it reached a backend."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
