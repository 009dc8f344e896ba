"""
Session manager.

Owns the Anonymous/Authenticated state machine, the bearer token and the
generation counter used to discard responses that outlive their session.
"""
from enum import Enum
from typing import Callable, Optional

from .protocols import CredentialStore
from .memory_session import MemoryCredentialStore
from ..api.events import EventEmitter
from ..logging import get_logger


class SessionState(Enum):
    """Session states."""
    ANONYMOUS = 'anonymous'
    AUTHENTICATED = 'authenticated'


class SessionManager:
    """
    Process-wide session state, injected into every component that needs it.
    
    Events:
        login(token): emitted after a token is set and persisted
        logout(): emitted after the token is cleared; dependent caches
            subscribe to this to drop personal data
    
    Example:
        >>> session = SessionManager(SQLiteCredentialStore("account"))
        >>> session.is_authenticated()
        False
        >>> session.login("abc")
        >>> session.current_token()
        'abc'
    """
    
    def __init__(self, store: Optional[CredentialStore] = None):
        """
        Initialize session from the credential store.
        
        Args:
            store: Credential store (in-memory if not provided)
        """
        self._store = store or MemoryCredentialStore()
        self._events = EventEmitter(('login', 'logout'))
        self._logger = get_logger('simspy.session')
        self._token: Optional[str] = self._store.load() or None
        self._generation = 0
        
        if self._token:
            self._logger.info("Restored persisted session")
    
    @property
    def store(self) -> CredentialStore:
        """Credential store backing this session."""
        return self._store
    
    @property
    def state(self) -> SessionState:
        """Current state."""
        return SessionState.AUTHENTICATED if self._token else SessionState.ANONYMOUS
    
    @property
    def generation(self) -> int:
        """Monotonic counter bumped on every login and logout."""
        return self._generation
    
    def is_authenticated(self) -> bool:
        return self._token is not None
    
    def current_token(self) -> Optional[str]:
        return self._token
    
    def on(self, event: str, callback: Callable) -> 'SessionManager':
        """Register a handler for ``login`` or ``logout``."""
        self._events.on(event, callback)
        return self
    
    def off(self, event: str, callback: Optional[Callable] = None) -> 'SessionManager':
        """Remove a handler."""
        self._events.off(event, callback)
        return self
    
    def login(self, token: str) -> None:
        """
        Enter the Authenticated state.
        
        Cache population is left to the caller so a failed post-login fetch
        cannot corrupt session state.
        
        Args:
            token: Bearer token returned by the login endpoint
            
        Raises:
            ValueError: If token is empty
        """
        if not token:
            raise ValueError("Token must be a non-empty string")
        
        self._token = token
        self._generation += 1
        self._store.save(token)
        self._logger.info("Session authenticated")
        self._events.emit('login', token)
    
    def logout(self) -> None:
        """
        Enter the Anonymous state and drop everything tied to the old session.
        
        Safe to call in any state. Listeners run after the token is gone,
        so anything they read already observes the anonymous session.
        """
        was_authenticated = self._token is not None
        self._token = None
        self._generation += 1
        self._store.clear()
        if was_authenticated:
            self._logger.info("Session ended")
        self._events.emit('logout')
    
    def close(self) -> None:
        """Close the credential store."""
        self._store.close()
