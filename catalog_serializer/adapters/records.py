"""Entity formatters: catalog projections to format-agnostic EntityRecords.

WHY: Every output dialect shows the same fields for an artist, an album
or a song; only the spelling differs (XML elements vs JSON keys). Doing
the field selection, defaulting and joining once, here, keeps the XML
and JSON renderers dumb and keeps the field names (a public
wire contract) in one place.

HOW: One pure function per entity kind, each taking the projection and a
Decorations bundle (ratings, URLs, vote count, playlist context) that
the facade fetched from collaborators. RECORD_FORMATTERS and
DEMOCRATIC_FORMATTERS are closed dispatch tables keyed by EntityKind.

RULES:
- Formatters never raise for a well-formed but incomplete entity;
  missing joined values render as 0 or ""
- Field order in each record is the wire order
- An album with artist_count != 1 renders artist Ref(0, "Various")
- A song's album artist is included only when set and distinct from the
  primary artist
- A song's playlisttrack is included only when playlist context is given
- Optional fields (user fullname, author usernames) are omitted with None
- Adapters must not modify the source projections
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from catalog_serializer.core.ir import (
    Activity,
    Album,
    Artist,
    EntityKind,
    EntityRecord,
    Playlist,
    PlaylistItem,
    RatingInfo,
    Ref,
    Shout,
    Song,
    Tag,
    User,
    Video,
)
from catalog_serializer.core.tags import aggregate, tag_names
from catalog_serializer.errors import UnsupportedEntityKindError

VARIOUS_ARTISTS = "Various"

# Keys of Tag.counts, in output order, with the record field each feeds.
TAG_COUNT_FIELDS = (
    ("albums", "album"),
    ("artists", "artist"),
    ("songs", "song"),
    ("videos", "video"),
    ("playlists", "playlist"),
    ("stream", "live_stream"),
)


@dataclass
class Decorations:
    """Supplementary values merged into a record during formatting.

    Everything here comes from a collaborator (rating service, URL
    resolver, vote service, the store) and defaults to its zero value.
    """

    rating: Optional[RatingInfo] = None
    stream_url: str = ""
    art_url: str = ""
    vote_count: int = 0
    playlist_items: Optional[List[PlaylistItem]] = None
    author: Optional[User] = None


def _rating_fields(rating: Optional[RatingInfo]) -> Dict[str, Any]:
    rating = rating or RatingInfo()
    user_rating = rating.user_rating or 0
    return {
        "preciserating": user_rating,
        "rating": user_rating,
        "averagerating": rating.average_rating or 0,
    }


def playlist_track(song_id: int, items: Optional[List[PlaylistItem]]) -> int:
    """Position of ``song_id`` in the supplied playlist items, or 0."""
    for item in items or []:
        if item.object_type == EntityKind.song and item.object_id == song_id:
            return item.track or 0
    return 0


def resolution_label(video: Video) -> str:
    if video.resolution_x and video.resolution_y:
        return "{}x{}".format(video.resolution_x, video.resolution_y)
    return ""


def artist_record(artist: Artist, deco: Decorations) -> EntityRecord:
    fields: Dict[str, Any] = {
        "name": artist.name or "",
        "tags": aggregate(artist.tags),
        "albums": artist.albums or 0,
        "songs": artist.songs or 0,
    }
    fields.update(_rating_fields(deco.rating))
    fields.update({
        "mbid": artist.mbid or "",
        "summary": artist.summary or "",
        "yearformed": artist.yearformed or 0,
        "placeformed": artist.placeformed or "",
    })
    return EntityRecord(kind="artist", id=artist.id, fields=fields)


def album_record(album: Album, deco: Decorations) -> EntityRecord:
    if album.artist_count != 1:
        artist = Ref(id=0, name=VARIOUS_ARTISTS)
    else:
        artist = Ref(id=album.artist_id or 0, name=album.artist_name or "")

    fields: Dict[str, Any] = {
        "name": album.name or "",
        "artist": artist,
        "year": album.year or 0,
        "tracks": album.song_count or 0,
        "disk": album.disk or 0,
        "tags": aggregate(album.tags),
        "art": deco.art_url or "",
    }
    fields.update(_rating_fields(deco.rating))
    fields["mbid"] = album.mbid or ""
    return EntityRecord(kind="album", id=album.id, fields=fields)


def song_record(song: Song, deco: Decorations) -> EntityRecord:
    """Build the full song record.

    The field set mirrors what players expect from a song listing:
    identity, file properties, MusicBrainz ids, ratings, tagging extras
    and replay gain, followed by the tag name list.
    """
    fields: Dict[str, Any] = {
        "title": song.title or "",
        "artist": Ref(id=song.artist_id or 0, name=song.artist_name or ""),
        "album": Ref(id=song.album_id or 0, name=song.album_name or ""),
    }
    if song.album_artist_id and song.album_artist_id != song.artist_id:
        fields["albumartist"] = Ref(id=song.album_artist_id, name=song.album_artist_name or "")

    fields.update({
        "filename": song.file or "",
        "track": song.track or 0,
        "time": song.time or 0,
        "year": song.year or 0,
        "bitrate": song.bitrate or 0,
        "rate": song.rate or 0,
        "mode": song.mode or "",
        "mime": song.mime or "",
        "url": deco.stream_url or "",
        "size": song.size or 0,
        "mbid": song.mbid or "",
        "album_mbid": song.album_mbid or "",
        "artist_mbid": song.artist_mbid or "",
        "albumartist_mbid": song.albumartist_mbid or "",
        "art": deco.art_url or "",
    })
    fields.update(_rating_fields(deco.rating))
    fields.update({
        "composer": song.composer or "",
        "channels": song.channels or 0,
        "comment": song.comment or "",
        "publisher": song.label or "",
        "language": song.language or "",
        "replaygain_album_gain": song.replaygain_album_gain or 0,
        "replaygain_album_peak": song.replaygain_album_peak or 0,
        "replaygain_track_gain": song.replaygain_track_gain or 0,
        "replaygain_track_peak": song.replaygain_track_peak or 0,
        "tags": tag_names(song.tags),
    })
    if deco.playlist_items is not None:
        fields["playlisttrack"] = playlist_track(song.id, deco.playlist_items)
    return EntityRecord(kind="song", id=song.id, fields=fields)


def video_record(video: Video, deco: Decorations) -> EntityRecord:
    return EntityRecord(kind="video", id=video.id, fields={
        "title": video.title or "",
        "mime": video.mime or "",
        "resolution": resolution_label(video),
        "size": video.size or 0,
        "tags": aggregate(video.tags),
        "url": deco.stream_url or "",
    })


def playlist_record(playlist: Playlist, deco: Decorations) -> EntityRecord:
    song_items = [i for i in playlist.items if i.object_type == EntityKind.song]
    return EntityRecord(kind="playlist", id=playlist.id, fields={
        "name": playlist.name or "",
        "owner": playlist.owner_name or "",
        "items": len(song_items),
        "type": playlist.type or "",
    })


def tag_record(tag: Tag, deco: Decorations) -> EntityRecord:
    fields: Dict[str, Any] = {"name": tag.name or ""}
    counts = tag.counts or {}
    for field_name, count_key in TAG_COUNT_FIELDS:
        fields[field_name] = int(counts.get(count_key) or 0)
    return EntityRecord(kind="tag", id=tag.id, fields=fields)


def user_record(user: User, deco: Decorations) -> EntityRecord:
    return EntityRecord(kind="user", id=user.id, fields={
        "username": user.username or "",
        "create_date": user.create_date or 0,
        "last_seen": user.last_seen or 0,
        "website": user.website or "",
        "state": user.state or "",
        "city": user.city or "",
        "fullname": (user.fullname or "") if user.fullname_public else None,
    })


def _author_name(author: Optional[User]) -> Optional[str]:
    if author is None or not author.id:
        return None
    return author.username or ""


def shout_record(shout: Shout, deco: Decorations) -> EntityRecord:
    return EntityRecord(kind="shout", id=shout.id, fields={
        "date": shout.date or 0,
        "text": shout.text or "",
        "username": _author_name(deco.author),
    })


def activity_record(activity: Activity, deco: Decorations) -> EntityRecord:
    return EntityRecord(kind="activity", id=activity.id, fields={
        "date": activity.activity_date or 0,
        "object_type": activity.object_type or "",
        "object_id": activity.object_id or 0,
        "action": activity.action or "",
        "username": _author_name(deco.author),
    })


def democratic_song_record(song: Song, deco: Decorations) -> EntityRecord:
    """Song record plus the queue vote count and a first-tag genre.

    The genre is simply the first tag on the song (Ref(0, "") when the
    song is untagged); it is placed right after the album reference.
    """
    record = song_record(song, deco)
    first = song.tags[0] if song.tags else None
    genre = Ref(id=first.id, name=first.name or "") if first else Ref(id=0, name="")

    fields: Dict[str, Any] = {}
    for key, value in record.fields.items():
        fields[key] = value
        if key == "album":
            fields["genre"] = genre
    fields["vote"] = deco.vote_count or 0
    record.fields = fields
    return record


def democratic_video_record(video: Video, deco: Decorations) -> EntityRecord:
    record = video_record(video, deco)
    record.fields["vote"] = deco.vote_count or 0
    return record


Formatter = Callable[[Any, Decorations], EntityRecord]

RECORD_FORMATTERS: Dict[EntityKind, Formatter] = {
    EntityKind.artist: artist_record,
    EntityKind.album: album_record,
    EntityKind.song: song_record,
    EntityKind.video: video_record,
    EntityKind.playlist: playlist_record,
    EntityKind.tag: tag_record,
    EntityKind.user: user_record,
    EntityKind.shout: shout_record,
    EntityKind.activity: activity_record,
}

DEMOCRATIC_FORMATTERS: Dict[EntityKind, Formatter] = {
    EntityKind.song: democratic_song_record,
    EntityKind.video: democratic_video_record,
}


def format_entity(
    kind: EntityKind,
    entity: Any,
    deco: Optional[Decorations] = None,
    table: Optional[Dict[EntityKind, Formatter]] = None,
    context: str = "record",
) -> EntityRecord:
    """Dispatch ``entity`` to the formatter registered for ``kind``.

    Raises:
        UnsupportedEntityKindError: If ``kind`` has no entry in ``table``.
    """
    formatters = RECORD_FORMATTERS if table is None else table
    formatter = formatters.get(kind)
    if formatter is None:
        raise UnsupportedEntityKindError(kind, context)
    return formatter(entity, deco or Decorations())
