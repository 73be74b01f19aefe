"""Typed schema for catalog snapshot files.

WHY: The CLI (and the test suite) render documents from a JSON catalog
snapshot instead of a live database. A snapshot is hand-edited or
exported by other tools, so it needs field-level validation with useful
error paths before any of it reaches the formatters.

HOW: CatalogSnapshot is a plain dataclass whose lists hold the IR entity
dataclasses directly. pydantic's TypeAdapter validates and coerces a
parsed JSON document into it, with no parallel model hierarchy to keep in
sync with ir.py.

RULES:
- Every list is optional and defaults to empty
- Ratings are keyed by (object_type, object_id)
- Votes are keyed by democratic row id
- Unknown object_type strings fail validation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pydantic import TypeAdapter

from catalog_serializer.core.ir import (
    Activity,
    Album,
    Artist,
    DemocraticRow,
    EntityKind,
    Playlist,
    PodcastChannel,
    PodcastEpisode,
    Shout,
    Song,
    Tag,
    User,
    Video,
)


@dataclass
class RatingRow:
    object_type: EntityKind
    object_id: int
    user_rating: float = 0
    average_rating: float = 0


@dataclass
class VoteRow:
    row_id: int
    votes: int = 0


@dataclass
class CatalogSnapshot:
    artists: List[Artist] = field(default_factory=list)
    albums: List[Album] = field(default_factory=list)
    songs: List[Song] = field(default_factory=list)
    videos: List[Video] = field(default_factory=list)
    playlists: List[Playlist] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    shouts: List[Shout] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)
    podcasts: List[PodcastChannel] = field(default_factory=list)
    podcast_episodes: List[PodcastEpisode] = field(default_factory=list)
    democratic: List[DemocraticRow] = field(default_factory=list)
    ratings: List[RatingRow] = field(default_factory=list)
    votes: List[VoteRow] = field(default_factory=list)


SNAPSHOT_ADAPTER = TypeAdapter(CatalogSnapshot)
