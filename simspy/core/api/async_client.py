"""
Async SIMS PPOB API client.

Every resource fetch and mutation goes through this gateway. It attaches
the bearer token, classifies failures and ends the session on HTTP 401.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TYPE_CHECKING

import aiohttp

from .config import APIConfig
from .errors import NetworkError, UnauthorizedError
from .request import RequestBuilder, ResponseHandler
from ..logging import get_logger

if TYPE_CHECKING:
    from ..session import SessionManager


# (method, url, headers, payload kwargs) -> (http status, body text)
Transport = Callable[..., Awaitable[Tuple[int, str]]]


def unauthorized_interceptor(
    send: Transport,
    session: 'SessionManager',
    logger: logging.Logger
) -> Transport:
    """
    Wrap a transport so that HTTP 401 ends the session before raising.

    The session is only ended when the rejected request carried the token
    of the session that is still current; a 401 for an anonymous call or
    for a token that was already replaced leaves the new session alone.

    Args:
        send: Raw transport coroutine
        session: Session to end on 401
        logger: Logger for forced logouts

    Returns:
        Wrapped transport with the same signature
    """
    async def intercepted(method: str, url: str, headers: Dict[str, str], **kwargs) -> Tuple[int, str]:
        generation = session.generation
        carried_token = 'Authorization' in headers

        status, text = await send(method, url, headers, **kwargs)

        if status == 401:
            message = ResponseHandler.extract_message(text) or 'Unauthorized'
            if carried_token and session.generation == generation and session.is_authenticated():
                logger.warning(f"{method} {url} rejected with 401, ending session")
                session.logout()
            raise UnauthorizedError(message)

        return status, text

    return intercepted


class AsyncAPIClient:
    """
    Asynchronous API gateway.

    Features:
    - Full async/await support
    - Bearer token taken from the shared session on every call
    - Centralized 401 handling (forced logout)
    - Envelope decoding: ``status == 0`` is success regardless of HTTP code
    - Configurable proxy, SSL, timeouts, connection pooling

    Example:
        >>> session = SessionManager()
        >>> async with AsyncAPIClient(session) as api:
        ...     balance = await api.get_balance()
    """

    def __init__(self, session: 'SessionManager', config: Optional[APIConfig] = None):
        """
        Initialize async API client.

        Args:
            session: Shared session manager supplying the token
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session_manager = session
        self._http: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False

        self._logger = get_logger('simspy.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

        self._send = unauthorized_interceptor(self._transport, session, self._logger)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def session(self) -> 'SessionManager':
        """Session manager this gateway reads the token from."""
        return self._session_manager

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> 'AsyncAPIClient':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure the HTTP session is created and open."""
        if self._http is None or self._http.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._http = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._http

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._http and not self._http.closed:
            await self._http.close()
            self._http = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
            self._connector = None

    async def _transport(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        **kwargs
    ) -> Tuple[int, str]:
        """
        Raw HTTP call.

        Returns:
            Tuple of (HTTP status, response text)

        Raises:
            NetworkError: On connection failure or timeout
        """
        http = await self._ensure_session()
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

        try:
            async with http.request(method, url, headers=headers, proxy=proxy, **kwargs) as response:
                text = await response.text()
                self._logger.debug(f"{method} {url} -> {response.status}")
                return response.status, text
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise NetworkError(f"Network error: {e}") from e

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Tuple[str, bytes]]] = None,
        authenticated: bool = True
    ) -> Any:
        """
        Make a request to the API.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            body: JSON body
            params: Query string parameters
            files: Multipart file fields ``{field: (filename, content)}``
            authenticated: Attach the session token when one is present

        Returns:
            The ``data`` payload of the response envelope

        Raises:
            NetworkError: No usable response
            UnauthorizedError: HTTP 401 (session already ended)
            ApplicationError: Envelope ``status != 0``
        """
        if self._closed:
            raise NetworkError("Client is closed")

        token = self._session_manager.current_token() if authenticated else None
        builder = RequestBuilder(self._config, token)
        url = builder.build_url(path, params)

        self._logger.debug(f"{method} {url}")

        status, text = await self._send(
            method,
            url,
            builder.build_headers(),
            **builder.build_payload(body, files)
        )
        return ResponseHandler.process_response(status, text)

    # Endpoint helpers

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """POST /login; returns ``{token}``."""
        return await self.request(
            'POST', 'login',
            {'email': email, 'password': password},
            authenticated=False
        )

    async def register(self, email: str, first_name: str, last_name: str, password: str) -> Any:
        """POST /registration."""
        return await self.request(
            'POST', 'registration',
            {
                'email': email,
                'first_name': first_name,
                'last_name': last_name,
                'password': password,
            },
            authenticated=False
        )

    async def get_profile(self) -> Dict[str, Any]:
        return await self.request('GET', 'profile')

    async def update_profile(self, first_name: str, last_name: str) -> Dict[str, Any]:
        return await self.request(
            'PUT', 'profile/update',
            {'first_name': first_name, 'last_name': last_name}
        )

    async def upload_profile_image(self, filename: str, content: bytes) -> Dict[str, Any]:
        return await self.request(
            'PUT', 'profile/image',
            files={'file': (filename, content)}
        )

    async def get_balance(self) -> Dict[str, Any]:
        return await self.request('GET', 'balance')

    async def get_services(self) -> Any:
        return await self.request('GET', 'services')

    async def get_banners(self) -> Any:
        return await self.request('GET', 'banner')

    async def top_up(self, amount: int) -> Dict[str, Any]:
        """POST /topup; returns the new ``{balance}``."""
        return await self.request('POST', 'topup', {'top_up_amount': amount})

    async def pay(self, service_code: str) -> Dict[str, Any]:
        """POST /transaction; returns the transaction including the new balance."""
        return await self.request('POST', 'transaction', {'service_code': service_code})

    async def get_history(self, offset: int, limit: int) -> Dict[str, Any]:
        """GET /transaction/history; returns ``{offset, limit, records}``."""
        return await self.request(
            'GET', 'transaction/history',
            params={'offset': offset, 'limit': limit}
        )
