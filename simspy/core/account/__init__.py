"""Account mutation flows."""
from .service import AccountService, PaymentResult
from .file_service import FileValidator, AsyncFileReader

__all__ = [
    'AccountService',
    'PaymentResult',
    'FileValidator',
    'AsyncFileReader',
]
