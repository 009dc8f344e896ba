"""Event emitter implementation using Observer Pattern."""
from typing import Callable, Dict, Iterable, List, Optional


class EventEmitter:
    """
    Synchronous observer registry.

    The owner declares its event names up front; subscribing to or emitting
    any other name raises ``ValueError`` so a misspelled event fails loudly
    instead of never firing. Handlers run in registration order and their
    exceptions propagate to the emitter.

    Example:
        >>> events = EventEmitter(('login', 'logout'))
        >>> events.on('logout', cache.invalidate_all)
        >>> events.emit('logout')
    """

    def __init__(self, events: Iterable[str]):
        self._events: Dict[str, List[Callable]] = {name: [] for name in events}

    def _handlers(self, event: str) -> List[Callable]:
        try:
            return self._events[event]
        except KeyError:
            raise ValueError(
                f"Unknown event {event!r}, expected one of {sorted(self._events)}"
            ) from None

    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers an event handler."""
        self._handlers(event).append(callback)
        return self

    def emit(self, event: str, *args, **kwargs) -> None:
        """Calls every handler of ``event``; handlers added meanwhile wait for the next emit."""
        for callback in list(self._handlers(event)):
            callback(*args, **kwargs)

    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Removes one handler, or all of them when ``callback`` is omitted."""
        handlers = self._handlers(event)
        if callback is None:
            handlers.clear()
        else:
            handlers[:] = [cb for cb in handlers if cb != callback]
        return self

    def listeners(self, event: str) -> List[Callable]:
        """Returns the handlers registered for an event."""
        return list(self._handlers(event))
