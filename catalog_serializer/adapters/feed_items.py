"""Adapter: playable catalog media to podcast feed items.

WHY: A podcast channel can publish songs, videos or dedicated podcast
episodes. The feed renderer should not care which; it needs a title,
an author, a link, a date, a description, a duration label and, when
the media type is known, an enclosure.

HOW: One small function per supported EntityKind, selected through the
closed EPISODE_ADAPTERS table. Unknown kinds are refused with
UnsupportedEntityKindError instead of being constructed by name.

RULES:
- guid always equals link
- Duration label is "M:SS" (minutes are not wrapped into hours)
- An enclosure is produced only when a mime type is known
- Adapters are pure; the stream URL is passed in by the caller
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from catalog_serializer.core.ir import EntityKind, PodcastEpisode, Song, Video
from catalog_serializer.errors import UnsupportedEntityKindError


@dataclass
class Enclosure:
    mime: str
    size: int
    url: str


@dataclass
class FeedItem:
    """One <item> of a podcast feed."""

    title: str
    link: str
    duration: str
    author: str = ""
    pub_date: int = 0
    description: str = ""
    enclosure: Optional[Enclosure] = None

    @property
    def guid(self) -> str:
        return self.link


def duration_label(seconds: int) -> str:
    """Format a duration in seconds as ``M:SS``."""
    seconds = max(int(seconds or 0), 0)
    return "{}:{:02d}".format(seconds // 60, seconds % 60)


def _enclosure(mime: str, size: int, url: str) -> Optional[Enclosure]:
    if not mime:
        return None
    return Enclosure(mime=mime, size=size or 0, url=url)


def item_from_song(song: Song, stream_url: str) -> FeedItem:
    return FeedItem(
        title=song.title or "",
        author=song.artist_name or "",
        link=song.link or "",
        pub_date=song.addition_time or 0,
        description=song.description or "",
        duration=duration_label(song.time),
        enclosure=_enclosure(song.mime, song.size, stream_url),
    )


def item_from_video(video: Video, stream_url: str) -> FeedItem:
    return FeedItem(
        title=video.title or "",
        link=video.link or "",
        pub_date=video.addition_time or 0,
        description=video.description or "",
        duration=duration_label(video.time),
        enclosure=_enclosure(video.mime, video.size, stream_url),
    )


def item_from_episode(episode: PodcastEpisode, stream_url: str) -> FeedItem:
    return FeedItem(
        title=episode.title or "",
        author=episode.author or "",
        link=episode.link or "",
        pub_date=episode.addition_time or 0,
        description=episode.description or "",
        duration=duration_label(episode.time),
        enclosure=_enclosure(episode.mime, episode.size, stream_url),
    )


EPISODE_ADAPTERS: Dict[EntityKind, Callable[[Any, str], FeedItem]] = {
    EntityKind.song: item_from_song,
    EntityKind.video: item_from_video,
    EntityKind.podcast_episode: item_from_episode,
}


def to_feed_item(kind: EntityKind, media: Any, stream_url: str) -> FeedItem:
    adapter = EPISODE_ADAPTERS.get(kind)
    if adapter is None:
        raise UnsupportedEntityKindError(kind, "podcast episode")
    return adapter(media, stream_url)
