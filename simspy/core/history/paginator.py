"""
Transaction history paginator.

Incremental, offset-based loading of the transaction list. Records are
appended in server order and never re-sorted or dropped.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..resources.models import TransactionRecord
from ..exceptions import StaleResponseError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..api import AsyncAPIClient
    from ..session import SessionManager


class PaginatorState(Enum):
    """Paginator states."""
    IDLE = 'idle'
    LOADING = 'loading'
    EXHAUSTED = 'exhausted'


@dataclass(frozen=True)
class HistoryPage:
    """Read-only snapshot of the loaded history."""
    records: Tuple[TransactionRecord, ...]
    next_offset: int
    exhausted: bool
    loading: bool = False


class HistoryPaginator:
    """
    Offset-based loader for ``GET /transaction/history``.
    
    A page shorter than the requested size means the server has no more
    data. A final page that is exactly full cannot be told apart from "more
    data exists", so one extra empty call is made in that case.
    
    On error the state goes back to idle with nothing changed, so the next
    call retries the same offset.
    
    Example:
        >>> history = HistoryPaginator(api, session, page_size=5)
        >>> await history.load_next_page()
        >>> len(history.records)
        5
    """
    
    def __init__(
        self,
        api: 'AsyncAPIClient',
        session: 'SessionManager',
        page_size: int = 5
    ):
        """
        Initialize paginator and subscribe to session logout.
        
        Args:
            api: API gateway
            session: Shared session manager
            page_size: Default number of records per page
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        
        self._api = api
        self._session = session
        self._page_size = page_size
        self._logger = get_logger('simspy.history')
        
        self._records: List[TransactionRecord] = []
        self._next_offset = 0
        self._state = PaginatorState.IDLE
        # Bumped by reset(); responses from an older epoch are dropped
        self._epoch = 0
        
        session.on('logout', self.reset)
    
    @property
    def records(self) -> Tuple[TransactionRecord, ...]:
        return tuple(self._records)
    
    @property
    def next_offset(self) -> int:
        return self._next_offset
    
    @property
    def exhausted(self) -> bool:
        return self._state is PaginatorState.EXHAUSTED
    
    @property
    def loading(self) -> bool:
        return self._state is PaginatorState.LOADING
    
    @property
    def state(self) -> PaginatorState:
        return self._state
    
    @property
    def page_size(self) -> int:
        return self._page_size
    
    def snapshot(self) -> HistoryPage:
        """Current state as an immutable value."""
        return HistoryPage(
            records=tuple(self._records),
            next_offset=self._next_offset,
            exhausted=self.exhausted,
            loading=self.loading,
        )
    
    def reset(self) -> None:
        """Drop loaded records and start again from offset 0."""
        self._records = []
        self._next_offset = 0
        self._state = PaginatorState.IDLE
        self._epoch += 1
    
    async def load_next_page(self, page_size: Optional[int] = None) -> List[TransactionRecord]:
        """
        Load the next page and append it.
        
        Args:
            page_size: Records to request (defaults to the paginator's size)
            
        Returns:
            Records appended by this call; empty when the call was a no-op
            
        Raises:
            GatewayError: Request failed; state unchanged
            StaleResponseError: Session ended while the page was loading
        """
        size = self._page_size if page_size is None else page_size
        if size <= 0:
            raise ValueError(f"page_size must be positive, got {size}")
        
        if self._state is not PaginatorState.IDLE:
            return []
        
        epoch = self._epoch
        generation = self._session.generation
        offset = self._next_offset
        self._state = PaginatorState.LOADING
        
        try:
            data = await self._api.get_history(offset, size)
        except Exception:
            if self._epoch == epoch:
                self._state = PaginatorState.IDLE
            raise
        
        if self._session.generation != generation:
            self._logger.debug(f"Discarding history page at offset {offset}: session changed")
            if self._epoch == epoch:
                self._state = PaginatorState.IDLE
            raise StaleResponseError(generation, self._session.generation)
        
        if self._epoch != epoch:
            self._logger.debug(f"Discarding history page at offset {offset}: paginator reset")
            return []
        
        try:
            page = [TransactionRecord.from_dict(item) for item in (data or {}).get('records') or ()]
        except (KeyError, ValueError, TypeError):
            self._state = PaginatorState.IDLE
            raise
        
        self._records.extend(page)
        self._next_offset += len(page)
        self._state = PaginatorState.EXHAUSTED if len(page) < size else PaginatorState.IDLE
        
        self._logger.debug(
            f"Loaded {len(page)} records at offset {offset} "
            f"(total {len(self._records)}, exhausted={self.exhausted})"
        )
        return page
