"""Key store error types.

Each error carries a stable code and the HTTP status the API layer maps it to.
A missing record is not an error: stores return None or False for that.
"""

from typing import Any, Optional


class KeyStoreError(Exception):
    """Base error for all key store failures."""

    code: str = "internal_error"
    message: str = "An internal error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(KeyStoreError):
    """Required input missing or blank (400)."""

    code = "validation_error"
    message = "'name' and 'value' are required"
    status_code = 400


class PersistenceFailure(KeyStoreError):
    """I/O or query error on the active backend (500)."""

    code = "persistence_failure"
    message = "Key storage operation failed"
    status_code = 500


class BackendUnavailable(KeyStoreError):
    """Remote backend required but not configured or not constructible (503)."""

    code = "backend_unavailable"
    message = "API not configured"
    status_code = 503
