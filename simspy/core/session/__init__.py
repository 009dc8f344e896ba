"""
Session module.

Holds the session state machine and the persistent credential storage
it is built on.
"""
from .protocols import CredentialStore
from .memory_session import MemoryCredentialStore
from .sqlite_session import SQLiteCredentialStore
from .session_manager import SessionManager, SessionState

__all__ = [
    'CredentialStore',
    'MemoryCredentialStore',
    'SQLiteCredentialStore',
    'SessionManager',
    'SessionState',
]
