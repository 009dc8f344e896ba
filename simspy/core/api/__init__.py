"""SIMS PPOB API gateway module."""
from .errors import (
    GatewayError,
    NetworkError,
    UnauthorizedError,
    ApplicationError,
    APIStatusCodes,
)
from .events import EventEmitter
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig
from .async_client import AsyncAPIClient, unauthorized_interceptor
from .async_auth import AsyncAuthService, AuthResult

__all__ = [
    # Gateway
    'AsyncAPIClient',
    'unauthorized_interceptor',
    
    # Auth
    'AsyncAuthService',
    'AuthResult',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    
    # Errors
    'GatewayError',
    'NetworkError',
    'UnauthorizedError',
    'ApplicationError',
    'APIStatusCodes',
    
    # Events
    'EventEmitter',
]
