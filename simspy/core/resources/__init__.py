"""Session-scoped resources and their cache."""
from .models import (
    Profile,
    Balance,
    Service,
    Banner,
    TransactionType,
    TransactionRecord,
)
from .resource_cache import ResourceCache, CachedResource

__all__ = [
    'Profile',
    'Balance',
    'Service',
    'Banner',
    'TransactionType',
    'TransactionRecord',
    'ResourceCache',
    'CachedResource',
]
