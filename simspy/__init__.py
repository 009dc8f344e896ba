"""
simspy - Async Python client for the SIMS PPOB payment service.

Usage:
    >>> from simspy import SimsClient
    >>>
    >>> async with SimsClient("account") as sims:
    ...     await sims.login("user@example.com", "secret123")
    ...     await sims.load_home()
    ...     print(sims.cache.get_balance())
"""
import logging
from .client import SimsClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncAPIClient,
    AsyncAuthService,
    AuthResult,
)

# Errors
from .core.exceptions import SimsException, ValidationError, StaleResponseError
from .core.api.errors import (
    GatewayError,
    NetworkError,
    UnauthorizedError,
    ApplicationError,
)

# Session management
from .core.session import (
    CredentialStore,
    MemoryCredentialStore,
    SQLiteCredentialStore,
    SessionManager,
    SessionState,
)

# Resources
from .core.resources import (
    Profile,
    Balance,
    Service,
    Banner,
    TransactionType,
    TransactionRecord,
    ResourceCache,
)
from .core.history import HistoryPaginator, HistoryPage
from .core.account import AccountService, PaymentResult
from .core.access import AccessGuard

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for simspy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'simspy',
        'simspy.client',
        'simspy.api',
        'simspy.session',
        'simspy.session.store',
        'simspy.cache',
        'simspy.history',
        'simspy.account',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'SimsClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AsyncAPIClient',
    'AsyncAuthService',
    'AuthResult',
    'SimsException',
    'ValidationError',
    'StaleResponseError',
    'GatewayError',
    'NetworkError',
    'UnauthorizedError',
    'ApplicationError',
    'CredentialStore',
    'MemoryCredentialStore',
    'SQLiteCredentialStore',
    'SessionManager',
    'SessionState',
    'Profile',
    'Balance',
    'Service',
    'Banner',
    'TransactionType',
    'TransactionRecord',
    'ResourceCache',
    'HistoryPaginator',
    'HistoryPage',
    'AccountService',
    'PaymentResult',
    'AccessGuard',
    'setup_logging',
    '__version__',
]
