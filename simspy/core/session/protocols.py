"""
Credential storage protocols.

Defines the interface for persisting the single session token.
"""
from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class CredentialStore(Protocol):
    """
    Protocol for credential storage implementations.
    
    Implementations hold at most one token. Storage failures must degrade
    to "no persisted token" instead of raising into the caller.
    """
    
    def load(self) -> Optional[str]:
        """
        Load the persisted token.
        
        Returns:
            Token if one is stored, None otherwise
        """
        ...
    
    def save(self, token: str) -> None:
        """
        Persist a token, replacing any previous one.
        
        Args:
            token: Bearer token to save
        """
        ...
    
    def clear(self) -> None:
        """Remove the persisted token."""
        ...
    
    def close(self) -> None:
        """Close storage and release resources."""
        ...
