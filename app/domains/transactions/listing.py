import math
from enum import Enum
from typing import Iterable

from app.domains.transactions.models import TransactionPage


class SortKey(str, Enum):
    AMOUNT = "amount"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def sort_transactions(transactions: Iterable, sort_by: SortKey = SortKey.DATE,
                      direction: SortDirection = SortDirection.DESC) -> list:
    """Stable sort; transactions with equal keys keep their input order in either direction."""
    key = SortKey(sort_by).value
    return sorted(
        transactions,
        key=lambda tx: getattr(tx, key),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def paginate(transactions: Iterable, sort_by: SortKey = SortKey.DATE,
             direction: SortDirection = SortDirection.DESC,
             page_size: int = 10, page: int = 0) -> TransactionPage:
    """
    Sort transactions and cut out one zero-indexed page.

    A page past the end of the data is returned empty rather than rejected.

    Raises:
        ValueError: If page_size < 1 or page < 0
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if page < 0:
        raise ValueError(f"page must not be negative, got {page}")

    ordered = sort_transactions(transactions, sort_by, direction)
    total_items = len(ordered)
    total_pages = math.ceil(total_items / page_size)
    start = page * page_size

    return TransactionPage(
        items=ordered[start:start + page_size],
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        has_previous=page > 0,
        has_next=page + 1 < total_pages,
    )
