# Backend REST API client
from .client import BackendClient, create_backend_client
from .errors import AuthenticationError, BackendError, BackendUnavailableError, NotAuthenticatedError

__all__ = [
    "BackendClient",
    "create_backend_client",
    "AuthenticationError",
    "BackendError",
    "BackendUnavailableError",
    "NotAuthenticatedError",
]
