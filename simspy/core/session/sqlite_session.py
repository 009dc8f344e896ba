"""
SQLite credential storage implementation.

Persists the session token in a local SQLite file so a restarted
process comes back authenticated.
"""
import sqlite3
from pathlib import Path
from datetime import datetime
from typing import Optional, Union
from contextlib import contextmanager

from .protocols import CredentialStore
from ..logging import get_logger


class SQLiteCredentialStore(CredentialStore):
    """
    SQLite-based credential storage.
    
    Stores a single token row in ``<name>.session``. Any sqlite or
    filesystem failure is logged and treated as "no persisted token".
    
    Example:
        >>> store = SQLiteCredentialStore("my_account")
        >>> # Creates my_account.session file
        >>> store.save("eyJhbGciOi...")
        >>> store.load()
        'eyJhbGciOi...'
    """
    
    EXTENSION = '.session'
    SCHEMA_VERSION = 1
    
    def __init__(
        self,
        session_name: Union[str, Path],
        base_path: Optional[Path] = None
    ):
        """
        Initialize SQLite credential storage.
        
        Args:
            session_name: Session name (without extension) or full path
            base_path: Optional base directory for session files
        """
        self._logger = get_logger('simspy.session.store')
        self._conn: Optional[sqlite3.Connection] = None
        
        if isinstance(session_name, Path) or session_name.endswith(self.EXTENSION):
            self._path = Path(session_name)
        elif base_path:
            self._path = base_path / f"{session_name}{self.EXTENSION}"
        else:
            self._path = Path(f"{session_name}{self.EXTENSION}")
        
        self._available = self._init_db()
    
    @property
    def path(self) -> Path:
        """Get session file path."""
        return self._path
    
    @property
    def available(self) -> bool:
        """Whether the backing file could be opened."""
        return self._available
    
    @contextmanager
    def _get_connection(self):
        """Get the lazily opened database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._path))
            self._conn.row_factory = sqlite3.Row
        yield self._conn
    
    def _init_db(self) -> bool:
        """Initialize database schema; returns False if storage is unavailable."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._get_connection() as conn:
                cursor = conn.cursor()
                
                cursor.execute('''
                    CREATE TABLE IF NOT EXISTS version (
                        version INTEGER PRIMARY KEY
                    )
                ''')
                
                cursor.execute('''
                    CREATE TABLE IF NOT EXISTS credential (
                        id INTEGER PRIMARY KEY,
                        token TEXT NOT NULL,
                        saved_at TEXT NOT NULL
                    )
                ''')
                
                cursor.execute('SELECT version FROM version LIMIT 1')
                if cursor.fetchone() is None:
                    cursor.execute(
                        'INSERT INTO version (version) VALUES (?)',
                        (self.SCHEMA_VERSION,)
                    )
                
                conn.commit()
            return True
        except (sqlite3.Error, OSError) as e:
            self._logger.warning(f"Credential storage unavailable at {self._path}: {e}")
            return False
    
    def load(self) -> Optional[str]:
        """
        Load the persisted token.
        
        Returns:
            Token if stored and readable, None otherwise
        """
        if not self._available:
            return None
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute('SELECT token FROM credential LIMIT 1')
                row = cursor.fetchone()
                return row['token'] if row else None
        except sqlite3.Error as e:
            self._logger.warning(f"Failed to load credential: {e}")
            return None
    
    def save(self, token: str) -> None:
        """
        Persist a token, replacing any previous one.
        
        Args:
            token: Bearer token to save
        """
        if not self._available:
            return
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute('DELETE FROM credential')
                cursor.execute(
                    'INSERT INTO credential (token, saved_at) VALUES (?, ?)',
                    (token, datetime.now().isoformat())
                )
                conn.commit()
        except sqlite3.Error as e:
            self._logger.warning(f"Failed to save credential: {e}")
    
    def clear(self) -> None:
        """Delete the persisted token."""
        if not self._available:
            return
        try:
            with self._get_connection() as conn:
                conn.execute('DELETE FROM credential')
                conn.commit()
        except sqlite3.Error as e:
            self._logger.warning(f"Failed to clear credential: {e}")
    
    def exists(self) -> bool:
        """Check whether a token is persisted."""
        return self.load() is not None
    
    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
    
    def delete_file(self) -> None:
        """Delete the session file completely."""
        self.close()
        if self._path.exists():
            self._path.unlink()
    
    def __enter__(self) -> 'SQLiteCredentialStore':
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
