"""Protocols for the services the serializer consumes.

WHY: Loading entities, looking up ratings and votes, and building stream
or art URLs all belong to the surrounding application. The serializer
only needs a narrow, synchronous view of each, so any backend (database,
snapshot file, test double) can plug in.

HOW: typing.Protocol classes — structural, nothing to inherit. Optional
batch hints (``preload``, ``warm_cache``) are looked up with getattr by
the facade, so implementations may leave them out.

RULES:
- load_entity returns None for unknown ids; it never raises for "not found"
- Rating lookups return None or a number; None renders as 0
- All calls are synchronous and side-effect free from our point of view
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from catalog_serializer.core.ir import EntityKind


class CatalogStore(Protocol):
    def load_entity(self, kind: EntityKind, entity_id: int) -> Optional[Any]:
        """Return the projection for ``(kind, entity_id)`` or None."""

    # Optional: def preload(self, kind: EntityKind, ids: Sequence[int]) -> None


class RatingService(Protocol):
    def get_user_rating(self, entity_id: int, kind: EntityKind) -> Optional[float]:
        ...

    def get_average_rating(self, entity_id: int, kind: EntityKind) -> Optional[float]:
        ...

    # Optional: def warm_cache(self, kind: EntityKind, ids: Sequence[int]) -> None


class UrlResolver(Protocol):
    def stream_url(self, kind: EntityKind, entity_id: int, token: str) -> str:
        ...

    def art_url(self, entity_id: int, kind: EntityKind, token: str) -> str:
        ...


class VoteService(Protocol):
    def get_vote_count(self, row_id: int) -> int:
        ...


def batch_hint(service: Any, method: str, kind: EntityKind, ids: Sequence[int]) -> None:
    """Call an optional batch-warming method on ``service`` if it exists."""
    hint = getattr(service, method, None)
    if hint is not None and ids:
        hint(kind, list(ids))
