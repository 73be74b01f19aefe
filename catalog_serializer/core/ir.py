"""Intermediate representation dataclasses for catalog entities and records.

WHY: The serializer never touches storage. The catalog store hands it
read-only projections of artists, albums, songs and the rest, already
joined with artist/album names. Formatters then turn each projection into
an EntityRecord that JSON and XML rendering share.

HOW: Two layers of plain dataclasses:
  Entities    — Artist, Album, Song, Video, Playlist, Tag, User, Shout,
                Activity, PodcastChannel, PodcastEpisode (+ small helpers)
  Decorations — TagAggregate, RatingInfo, Ref, and the EntityRecord that
                carries one rendered object's ordered fields

RULES:
- Every entity field has a zero-value default so a partially joined row
  still formats (0 for numbers, "" for text, [] for lists)
- EntityKind is the closed set of runtime type tags; unknown strings fail
  at parse time rather than being dispatched dynamically
- Field order in EntityRecord.fields is the public wire order
- Python 3.9 compatible: typing.List/Optional, no X | Y unions, because
  pydantic evaluates these annotations when a snapshot is loaded
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class EntityKind(str, Enum):
    """Runtime type tags for catalog objects."""

    artist = "artist"
    album = "album"
    song = "song"
    video = "video"
    playlist = "playlist"
    tag = "tag"
    user = "user"
    shout = "shout"
    activity = "activity"
    podcast = "podcast"
    podcast_episode = "podcast_episode"


# ---------------------------------------------------------------------------
# Entities (as supplied by the catalog store)
# ---------------------------------------------------------------------------


@dataclass
class TagAssociation:
    """One tag attached to one entity. Lists may contain duplicates."""

    id: int
    name: str = ""


@dataclass
class Artist:
    id: int
    name: str = ""
    tags: List[TagAssociation] = field(default_factory=list)
    albums: int = 0
    songs: int = 0
    mbid: str = ""
    summary: str = ""
    yearformed: int = 0
    placeformed: str = ""


@dataclass
class Album:
    """An album row joined with its artist.

    artist_count is the number of distinct artists across the album's
    songs; anything other than 1 renders as "Various".
    """

    id: int
    name: str = ""
    artist_id: int = 0
    artist_name: str = ""
    artist_count: int = 1
    year: int = 0
    song_count: int = 0
    disk: int = 0
    tags: List[TagAssociation] = field(default_factory=list)
    mbid: str = ""


@dataclass
class Song:
    id: int
    title: str = ""
    artist_id: int = 0
    artist_name: str = ""
    album_id: int = 0
    album_name: str = ""
    album_artist_id: int = 0
    album_artist_name: str = ""
    file: str = ""
    track: int = 0
    time: int = 0
    year: int = 0
    bitrate: int = 0
    rate: int = 0
    mode: str = ""
    mime: str = ""
    size: int = 0
    mbid: str = ""
    album_mbid: str = ""
    artist_mbid: str = ""
    albumartist_mbid: str = ""
    composer: str = ""
    channels: int = 0
    comment: str = ""
    label: str = ""
    language: str = ""
    replaygain_album_gain: float = 0.0
    replaygain_album_peak: float = 0.0
    replaygain_track_gain: float = 0.0
    replaygain_track_peak: float = 0.0
    tags: List[TagAssociation] = field(default_factory=list)
    link: str = ""
    addition_time: int = 0
    description: str = ""


@dataclass
class Video:
    id: int
    title: str = ""
    mime: str = ""
    resolution_x: int = 0
    resolution_y: int = 0
    size: int = 0
    time: int = 0
    tags: List[TagAssociation] = field(default_factory=list)
    link: str = ""
    addition_time: int = 0
    description: str = ""


@dataclass
class PlaylistItem:
    object_type: EntityKind
    object_id: int
    track: int = 0


@dataclass
class Playlist:
    id: int
    name: str = ""
    owner_name: str = ""
    type: str = "public"
    items: List[PlaylistItem] = field(default_factory=list)


@dataclass
class Tag:
    """A tag with per-kind usage counts (album, artist, song, ...)."""

    id: int
    name: str = ""
    counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class User:
    id: int
    username: str = ""
    fullname: str = ""
    fullname_public: bool = False
    create_date: int = 0
    last_seen: int = 0
    website: str = ""
    state: str = ""
    city: str = ""

    @property
    def display_name(self) -> str:
        """Full name when the user made it public, username otherwise."""
        if self.fullname_public and self.fullname:
            return self.fullname
        return self.username


@dataclass
class Shout:
    id: int
    user_id: int = 0
    text: str = ""
    date: int = 0


@dataclass
class Activity:
    id: int
    user_id: int = 0
    object_type: str = ""
    object_id: int = 0
    action: str = ""
    activity_date: int = 0


@dataclass
class DemocraticRow:
    """One row of the democratic play queue, pointing at a playable object."""

    row_id: int
    object_type: EntityKind
    object_id: int


@dataclass
class MediaRef:
    object_type: EntityKind
    object_id: int


@dataclass
class PodcastEpisode:
    id: int
    title: str = ""
    author: str = ""
    link: str = ""
    addition_time: int = 0
    description: str = ""
    time: int = 0
    mime: str = ""
    size: int = 0


@dataclass
class PodcastChannel:
    """A feed-owning entity and the ordered media it publishes."""

    id: int
    title: str = ""
    link: str = ""
    description: str = ""
    owner_id: int = 0
    has_art: bool = False
    episodes: List[MediaRef] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Decorations and rendered records
# ---------------------------------------------------------------------------


@dataclass
class TagAggregate:
    """Grouped tag usage for one entity: one row per distinct tag id."""

    id: int
    name: str
    count: int


@dataclass
class RatingInfo:
    user_rating: float = 0
    average_rating: float = 0


@dataclass
class Ref:
    """A nested {id, name} reference, e.g. a song's artist or album."""

    id: int
    name: str = ""


@dataclass
class EntityRecord:
    """The format-agnostic field set for one rendered catalog object.

    WHY: JSON and the XML dialects need exactly the same fields in the same
    order; only the spelling differs. Formatters build one EntityRecord
    per object and hand it to whichever document renderer is active.

    RULES:
    - kind: element / wrapper-key name ("song", "album", ...)
    - id: rendered as an XML attribute and as the first JSON key
    - fields: ordered; values are scalars, Ref, lists of TagAggregate or
      str, or None (None means "omit this field")
    """

    kind: str
    id: int
    fields: Dict[str, Any] = field(default_factory=dict)
