"""
Errors raised when talking to the backend REST API.
"""
from typing import Any, Optional


class BackendError(Exception):
    """Backend answered with a non-OK status"""

    def __init__(self, status_code: int, message: str, payload: Optional[Any] = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"[{status_code}] {message}")

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class BackendUnavailableError(BackendError):
    """Network error or timeout, the backend could not be reached"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(503, message)


class AuthenticationError(Exception):
    """Login rejected by the backend"""
    pass


class NotAuthenticatedError(Exception):
    """No bearer token in the session"""
    pass
