"""
SimsClient - High-level async client for SIMS PPOB.

Example:
    >>> async with SimsClient("account") as sims:
    ...     if not sims.is_logged_in():
    ...         await sims.login("user@example.com", "secret123")
    ...     await sims.cache.refresh_all()
    ...     print(sims.cache.get_balance())
"""
from pathlib import Path
from typing import Dict, Optional, Union

from .core.api import (
    AsyncAPIClient,
    AsyncAuthService,
    AuthResult,
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
)
from .core.access import AccessGuard
from .core.account import AccountService
from .core.history import HistoryPaginator
from .core.logging import get_logger
from .core.resources import ResourceCache
from .core.session import (
    CredentialStore,
    MemoryCredentialStore,
    SQLiteCredentialStore,
    SessionManager,
)


class SimsClient:
    """
    Composition root wiring session, gateway, cache, history and flows.

    One ``SessionManager`` is created per client and shared by every
    component; the cache and the history paginator subscribe to its
    logout event.

    Supports two storage modes:

    1. Session mode, token persisted to ``<name>.session``:
        >>> client = SimsClient("my_account")
        >>> await client.start()   # comes back authenticated after a restart

    2. Ephemeral mode, nothing written to disk:
        >>> async with SimsClient() as sims:
        ...     await sims.login(email, password)
    """

    def __init__(
        self,
        session: Optional[Union[str, Path, CredentialStore]] = None,
        *,
        config: Optional[APIConfig] = None,
        base_path: Optional[Path] = None
    ):
        """
        Initialize client.

        Args:
            session: Session name / path (SQLite file) or a custom credential
                store; in-memory storage when omitted
            config: Optional API configuration
            base_path: Base directory for session files
        """
        self._config = config or APIConfig.default()
        self._logger = get_logger('simspy.client')

        if session is None:
            store: CredentialStore = MemoryCredentialStore()
        elif isinstance(session, (str, Path)):
            store = SQLiteCredentialStore(session, base_path)
        else:
            store = session

        self.session = SessionManager(store)
        self.api = AsyncAPIClient(self.session, self._config)
        self.auth = AsyncAuthService(self.api, self.session)
        self.cache = ResourceCache(self.api, self.session)
        self.history = HistoryPaginator(
            self.api, self.session, page_size=self._config.history_page_size
        )
        self.account = AccountService(self.api, self.session, self.cache, self._config)
        self.guard = AccessGuard(self.session)

    @staticmethod
    def create_config(
        base_url: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: float = 30,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        history_page_size: int = 5
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            base_url: API base URL
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Total request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string
            history_page_size: Records per history page

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(url=proxy, username=proxy_user, password=proxy_pass)

        config = APIConfig(
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            ssl=SSLConfig(verify=verify_ssl, check_hostname=verify_ssl),
            history_page_size=history_page_size,
        )
        if base_url:
            config.base_url = base_url
        if user_agent:
            config.user_agent = user_agent
        return config

    @property
    def config(self) -> APIConfig:
        return self._config

    def is_logged_in(self) -> bool:
        return self.session.is_authenticated()

    async def start(self) -> 'SimsClient':
        """
        Open the HTTP session.

        A token persisted by a previous run is already active; it is only
        checked lazily, on the first request (a 401 ends the session).
        """
        await self.api.__aenter__()
        if self.session.is_authenticated():
            self._logger.info("Resumed persisted session")
        return self

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Login, ending any current session first so no data of a previous
        user survives into the new one.
        """
        if self.session.is_authenticated():
            self.session.logout()
        result = await self.auth.login(email, password)
        self._logger.info(f"Logged in as {result.email}")
        return result

    async def register(self, email: str, first_name: str, last_name: str, password: str) -> None:
        await self.auth.register(email, first_name, last_name, password)

    def logout(self) -> None:
        """End the session; cache and history are cleared by the session."""
        self.auth.logout()

    async def load_home(self) -> Dict[str, BaseException]:
        """Refresh profile, balance, services and banners concurrently."""
        return await self.cache.refresh_all()

    async def close(self) -> None:
        await self.api.close()
        self.session.close()

    async def __aenter__(self) -> 'SimsClient':
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
