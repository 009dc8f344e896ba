"""
Client configuration.

Transport settings (base URL, proxy, TLS, timeouts, pooling) and the
client-side limits enforced before a request is sent. Every field has a
working default, so ``APIConfig()`` talks to the public SIMS PPOB service.
"""
import os
import ssl
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import aiohttp


DEFAULT_BASE_URL = 'https://take-home-test-api.nutech-integrasi.com'

# Environment variables read by APIConfig.from_env()
ENV_BASE_URL = 'SIMSPY_BASE_URL'
ENV_PROXY = 'SIMSPY_PROXY'
ENV_VERIFY_SSL = 'SIMSPY_VERIFY_SSL'
ENV_TIMEOUT = 'SIMSPY_TIMEOUT'

_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass
class ProxyConfig:
    """HTTP(S) proxy, optionally with basic credentials."""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Proxy URL with credentials inlined, as aiohttp expects it."""
        if not self.url:
            return None
        scheme, sep, rest = self.url.partition('://')
        if sep and self.username and self.password:
            return f"{scheme}://{self.username}:{self.password}@{rest}"
        return self.url


@dataclass
class SSLConfig:
    """TLS verification settings."""
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """``False`` turns verification off; otherwise a default context."""
        if not self.verify:
            return False
        context = ssl.create_default_context(cafile=self.ca_file)
        context.check_hostname = self.check_hostname
        return context


@dataclass
class TimeoutConfig:
    """Request timeouts in seconds."""
    total: float = 30.0
    connect: float = 10.0
    sock_read: float = 20.0

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=min(self.connect, self.total),
            sock_read=min(self.sock_read, self.total),
        )


@dataclass
class APIConfig:
    """
    Complete client configuration.

    Attributes:
        base_url: Service root; endpoint paths are joined onto it
        user_agent: Sent with every request
        keepalive: Reuse connections between requests
        proxy: Optional proxy
        ssl: TLS settings
        timeout: Request timeouts
        extra_headers: Added to every request
        log_level: Level for the gateway logger when logging is unconfigured
        limit / limit_per_host: Connection pool size
        history_page_size: Records per history page
        max_avatar_bytes: Largest accepted avatar file
        min_top_up_amount / max_top_up_amount: Accepted top-up range

    Raises:
        ValueError: A limit is not positive or the top-up range is empty
    """
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = 'simspy/1.0.0'
    keepalive: bool = True

    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)

    log_level: int = 20  # logging.INFO

    limit_per_host: int = 10
    limit: int = 100

    history_page_size: int = 5
    max_avatar_bytes: int = 100 * 1024
    min_top_up_amount: int = 10_000
    max_top_up_amount: int = 1_000_000

    def __post_init__(self):
        if self.history_page_size <= 0:
            raise ValueError(f"history_page_size must be positive, got {self.history_page_size}")
        if self.max_avatar_bytes <= 0:
            raise ValueError(f"max_avatar_bytes must be positive, got {self.max_avatar_bytes}")
        if not 0 < self.min_top_up_amount <= self.max_top_up_amount:
            raise ValueError(
                f"Invalid top-up range {self.min_top_up_amount}..{self.max_top_up_amount}"
            )

    @classmethod
    def default(cls) -> 'APIConfig':
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Configuration routed through ``proxy_url``."""
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Configuration with TLS verification disabled (local test servers)."""
        return cls(ssl=SSLConfig(verify=False, check_hostname=False), **kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **kwargs) -> 'APIConfig':
        """
        Build a configuration from ``SIMSPY_*`` environment variables.

        Recognized: ``SIMSPY_BASE_URL``, ``SIMSPY_PROXY``,
        ``SIMSPY_VERIFY_SSL`` (``0``/``false``/``no``/``off`` disables) and
        ``SIMSPY_TIMEOUT`` (total seconds). Explicit ``kwargs`` win.

        Raises:
            ValueError: ``SIMSPY_TIMEOUT`` is not a number
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        if env.get(ENV_BASE_URL):
            values['base_url'] = env[ENV_BASE_URL]
        if env.get(ENV_PROXY):
            values['proxy'] = ProxyConfig(url=env[ENV_PROXY])
        if env.get(ENV_VERIFY_SSL, '').strip().lower() in _FALSE_VALUES:
            values['ssl'] = SSLConfig(verify=False, check_hostname=False)
        if env.get(ENV_TIMEOUT):
            values['timeout'] = TimeoutConfig(total=float(env[ENV_TIMEOUT]))

        values.update(kwargs)
        return cls(**values)

    def url_for(self, path: str) -> str:
        """Join the base URL with an endpoint path."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``aiohttp.TCPConnector``."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
            'force_close': not self.keepalive,
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``aiohttp.ClientSession``."""
        return {
            'headers': {
                'User-Agent': self.user_agent,
                'Accept': 'application/json',
                **self.extra_headers,
            },
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
