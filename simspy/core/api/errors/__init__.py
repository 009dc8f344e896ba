"""Gateway errors and exceptions."""
from .api_errors import (
    GatewayError,
    NetworkError,
    UnauthorizedError,
    ApplicationError,
    APIStatusCodes,
)

__all__ = [
    'GatewayError',
    'NetworkError',
    'UnauthorizedError',
    'ApplicationError',
    'APIStatusCodes',
]
