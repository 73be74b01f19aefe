"""Pagination gate: the shared offset/limit window.

WHY: A catalog can hold hundreds of thousands of songs. Every collection
call narrows its id list through the same window before any entity is
loaded, so a single request can never produce an unbounded document.

HOW: ``window()`` slices by position. It only copies when it has to,
when the input is longer than the limit or an offset is set, and
otherwise hands the original sequence back.

RULES:
- Result is exactly ids[offset:offset + limit] when the gate applies
- Offsets past the end yield an empty list, never an error
- Order is preserved; elements are only removed, never reordered
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

DEFAULT_OFFSET = 0


@dataclass
class PaginationWindow:
    """Offset/limit pair applied to id collections before formatting."""

    offset: int = DEFAULT_OFFSET
    limit: int = 5000

    def apply(self, ids: Sequence[T]) -> Sequence[T]:
        return window(ids, self.offset, self.limit)


def window(ids: Sequence[T], offset: int, limit: int) -> Sequence[T]:
    """Narrow ``ids`` to the positions ``[offset, offset + limit)``.

    Args:
        ids: Ordered id collection (any sequence).
        offset: Number of leading elements to drop.
        limit: Maximum number of elements to keep.

    Returns:
        The input itself when ``len(ids) <= limit`` and ``offset == 0``,
        otherwise a new list holding the windowed slice.
    """
    if len(ids) > limit or offset > 0:
        return list(ids[offset:offset + limit])
    return ids
