"""Route access predicates over the session state."""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import SessionManager


class AccessGuard:
    """
    Stateless access checks consulted by routing.
    
    Never caches a result; every call reads the session.
    """
    
    def __init__(self, session: 'SessionManager'):
        self._session = session
    
    def can_access_private(self) -> bool:
        """Views that need a logged-in user."""
        return self._session.is_authenticated()
    
    def can_access_public_only(self) -> bool:
        """Views that only make sense logged out (login, registration)."""
        return not self._session.is_authenticated()
