"""
In-memory credential storage implementation.

Provides non-persistent token storage for testing and temporary use.
"""
from typing import Optional

from .protocols import CredentialStore


class MemoryCredentialStore(CredentialStore):
    """
    In-memory credential storage.
    
    The token is lost when the object is destroyed.
    
    Example:
        >>> store = MemoryCredentialStore()
        >>> store.save("token")
        >>> store.load()
        'token'
    """
    
    def __init__(self, token: Optional[str] = None):
        """
        Initialize memory storage.
        
        Args:
            token: Optional token to start with (simulates a previous run)
        """
        self._token = token
    
    def load(self) -> Optional[str]:
        return self._token
    
    def save(self, token: str) -> None:
        self._token = token
    
    def clear(self) -> None:
        self._token = None
    
    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass
    
    def __enter__(self) -> 'MemoryCredentialStore':
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
