"""
Resource cache.

In-memory store for profile, balance, service catalog and banners with
read-through refresh and write-through updates from mutations.
"""
import asyncio
import itertools
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, Tuple, TypeVar, TYPE_CHECKING

from .models import Profile, Balance, Service, Banner
from ..api.events import EventEmitter
from ..exceptions import StaleResponseError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..api import AsyncAPIClient
    from ..session import SessionManager


T = TypeVar('T')


class CachedResource(Generic[T]):
    """
    One cache slot.

    ``applied`` is the sequence number of the write currently held; a write
    carrying an older sequence number is ignored.
    """

    def __init__(self, name: str):
        self.name = name
        self.value: Optional[T] = None
        self.applied = 0

    @property
    def loaded(self) -> bool:
        return self.value is not None

    def store(self, value: T, sequence: int) -> bool:
        """Store value if ``sequence`` is newer than the held write."""
        if sequence <= self.applied:
            return False
        self.value = value
        self.applied = sequence
        return True

    def clear(self) -> None:
        self.value = None

    def __repr__(self) -> str:
        return f"CachedResource({self.name!r}, loaded={self.loaded})"


class ResourceCache:
    """
    Single source of truth for session-scoped resources.

    Reads are synchronous and return ``None`` until a resource is loaded.
    ``refresh_*`` always goes to the network; on failure the previous value
    stays in place and the error propagates. Concurrent refreshes of the
    same resource resolve to the most recently *issued* request: each call
    takes a number from a monotonic counter and a response older than the
    value already held is dropped. Mutation results written through
    ``apply_*`` take a number from the same counter.

    Responses that arrive after the session they were issued under has
    ended raise ``StaleResponseError`` and leave the cache untouched.

    Events:
        changed(name, value): a slot received a new value
        invalidated(): every slot was cleared

    Example:
        >>> cache = ResourceCache(api, session)
        >>> await cache.refresh_balance()
        Balance(amount=50000)
        >>> cache.get_balance()
        Balance(amount=50000)
    """

    PROFILE = 'profile'
    BALANCE = 'balance'
    SERVICES = 'services'
    BANNERS = 'banners'

    RESOURCES = (PROFILE, BALANCE, SERVICES, BANNERS)

    def __init__(self, api: 'AsyncAPIClient', session: 'SessionManager'):
        """
        Initialize cache and subscribe to session logout.

        Args:
            api: API gateway used for refreshes
            session: Shared session manager
        """
        self._api = api
        self._session = session
        self._slots: Dict[str, CachedResource] = {
            name: CachedResource(name) for name in self.RESOURCES
        }
        self._sequence = itertools.count(1)
        self._events = EventEmitter(('changed', 'invalidated'))
        self._logger = get_logger('simspy.cache')

        session.on('logout', self.invalidate_all)

    def on(self, event: str, callback: Callable) -> 'ResourceCache':
        """Register a handler for ``changed`` or ``invalidated``."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'ResourceCache':
        self._events.off(event, callback)
        return self

    def slot(self, name: str) -> CachedResource:
        """Get a slot by resource name."""
        return self._slots[name]

    # Reads

    def get_profile(self) -> Optional[Profile]:
        return self._slots[self.PROFILE].value

    def get_balance(self) -> Optional[Balance]:
        return self._slots[self.BALANCE].value

    def get_services(self) -> Optional[Tuple[Service, ...]]:
        return self._slots[self.SERVICES].value

    def get_banners(self) -> Optional[Tuple[Banner, ...]]:
        return self._slots[self.BANNERS].value

    def find_service(self, code: str) -> Optional[Service]:
        """Look up a loaded service by code."""
        for service in self.get_services() or ():
            if service.code == code:
                return service
        return None

    def is_loaded(self, name: str) -> bool:
        return self._slots[name].loaded

    # Refreshes

    async def _refresh(
        self,
        name: str,
        fetch: Callable[[], Awaitable[Any]],
        parse: Callable[[Any], T]
    ) -> Optional[T]:
        """
        Fetch, parse and store one resource.

        Returns:
            The value held after this call (a newer write may have won)

        Raises:
            GatewayError: Fetch failed; cached value kept
            StaleResponseError: Session changed while the call was in flight
        """
        sequence = next(self._sequence)
        generation = self._session.generation

        data = await fetch()

        if self._session.generation != generation:
            self._logger.debug(f"Discarding stale {name} response (#{sequence})")
            raise StaleResponseError(generation, self._session.generation)

        self._store(name, parse(data), sequence)
        return self._slots[name].value

    def _store(self, name: str, value: Any, sequence: int) -> None:
        slot = self._slots[name]
        if slot.store(value, sequence):
            self._events.emit('changed', name, value)
        else:
            self._logger.debug(
                f"Ignoring out-of-order {name} write #{sequence} (holding #{slot.applied})"
            )

    async def refresh_profile(self) -> Optional[Profile]:
        return await self._refresh(self.PROFILE, self._api.get_profile, Profile.from_dict)

    async def refresh_balance(self) -> Optional[Balance]:
        return await self._refresh(self.BALANCE, self._api.get_balance, Balance.from_dict)

    async def refresh_services(self) -> Optional[Tuple[Service, ...]]:
        return await self._refresh(
            self.SERVICES,
            self._api.get_services,
            lambda data: tuple(Service.from_dict(item) for item in data or ())
        )

    async def refresh_banners(self) -> Optional[Tuple[Banner, ...]]:
        return await self._refresh(
            self.BANNERS,
            self._api.get_banners,
            lambda data: tuple(Banner.from_dict(item) for item in data or ())
        )

    async def refresh_all(self) -> Dict[str, BaseException]:
        """
        Refresh every resource concurrently.

        Returns:
            Errors keyed by resource name; empty when everything loaded
        """
        results = await asyncio.gather(
            self.refresh_profile(),
            self.refresh_balance(),
            self.refresh_services(),
            self.refresh_banners(),
            return_exceptions=True
        )
        errors = {
            name: result
            for name, result in zip(self.RESOURCES, results)
            if isinstance(result, BaseException)
        }
        for name, error in errors.items():
            self._logger.warning(f"Failed to refresh {name}: {error}")
        return errors

    # Write-through

    def apply_balance(self, balance: Any) -> Balance:
        """
        Replace the cached balance with a value returned by a mutation.

        Args:
            balance: ``Balance`` or amount in minor units

        Returns:
            The stored balance
        """
        if not isinstance(balance, Balance):
            balance = Balance(int(balance))
        self._store(self.BALANCE, balance, next(self._sequence))
        return balance

    def apply_profile(self, profile: Any) -> Profile:
        """
        Replace the cached profile with one returned by a mutation.

        Args:
            profile: ``Profile`` or its wire dict
        """
        if not isinstance(profile, Profile):
            profile = Profile.from_dict(profile)
        self._store(self.PROFILE, profile, next(self._sequence))
        return profile

    def invalidate_all(self) -> None:
        """Clear every slot. Wired to the session ``logout`` event."""
        for slot in self._slots.values():
            slot.clear()
        self._logger.debug("Resource cache invalidated")
        self._events.emit('invalidated')
