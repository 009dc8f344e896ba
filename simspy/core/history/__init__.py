"""Transaction history pagination."""
from .paginator import HistoryPaginator, HistoryPage, PaginatorState

__all__ = [
    'HistoryPaginator',
    'HistoryPage',
    'PaginatorState',
]
