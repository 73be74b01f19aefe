"""Serializer facade: one entry point per catalog collection.

WHY: Callers (API handlers, feed endpoints, the CLI) want "give me these
albums as XSPF" without knowing about windows, rating caches, record
adapters or envelopes. The facade runs the whole pipeline per call and
returns the finished document string.

HOW: Every collection method follows the same four steps:
  1. Narrow the id list through the pagination window
  2. Warm the store and rating caches for the windowed ids (batch hints)
  3. Load each entity and turn it into an EntityRecord with decorations
  4. Hand the records to the formatter selected by the output mode

RULES:
- One CatalogSerializer holds one SerializerConfig; nothing is global
- Zero ids and ids the store cannot load are skipped; the rest of the
  batch still renders in its original relative order
- Missing ratings, URLs, votes or authors render as zero values
- rss_feed always uses the RSS envelope; podcast ignores the mode
- Queue rows and podcast episodes are dispatched through closed
  EntityKind tables; unknown kinds raise UnsupportedEntityKindError
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from catalog_serializer.adapters.feed_items import EPISODE_ADAPTERS, FeedItem, to_feed_item
from catalog_serializer.adapters.records import (
    DEMOCRATIC_FORMATTERS,
    Decorations,
    format_entity,
)
from catalog_serializer.config import OutputMode, SerializerConfig
from catalog_serializer.core.collaborators import (
    CatalogStore,
    RatingService,
    UrlResolver,
    VoteService,
    batch_hint,
)
from catalog_serializer.core.ir import (
    DemocraticRow,
    EntityKind,
    EntityRecord,
    PlaylistItem,
    PodcastChannel,
    RatingInfo,
    User,
)
from catalog_serializer.errors import UnsupportedEntityKindError
from catalog_serializer.formatters import formatter_for
from catalog_serializer.formatters.base import BaseFormatter, FormatterOutput
from catalog_serializer.formatters.envelopes import RssEnvelope, envelope_for
from catalog_serializer.formatters.json_document import dumps, error_document
from catalog_serializer.formatters.podcast import PodcastFormatter, make_channel_info, rfc2822
from catalog_serializer.formatters.xml_document import XmlDocumentFormatter, write_mapping
from catalog_serializer.formatters.xml_writer import XmlWriter

logger = logging.getLogger(__name__)


class CatalogSerializer:
    """Renders catalog collections in the configured output mode.

    Args:
        store: Loads entity projections by kind and id.
        ratings: Optional rating service; ratings render as 0 without it.
        urls: Optional URL resolver; stream/art URLs render as "" without it.
        votes: Optional vote service for the democratic queue.
        config: Per-render settings; a fresh default config when omitted.
    """

    def __init__(
        self,
        store: CatalogStore,
        ratings: Optional[RatingService] = None,
        urls: Optional[UrlResolver] = None,
        votes: Optional[VoteService] = None,
        config: Optional[SerializerConfig] = None,
    ) -> None:
        self.store = store
        self.ratings = ratings
        self.urls = urls
        self.votes = votes
        self.config = config or SerializerConfig()
        # The most recent collection or feed document, with its suffix and media type.
        self.last_output: Optional[FormatterOutput] = None

    # ------------------------------------------------------------------
    # Configuration passthrough
    # ------------------------------------------------------------------

    def set_offset(self, offset: Any) -> bool:
        return self.config.set_offset(offset)

    def set_limit(self, limit: Any) -> bool:
        return self.config.set_limit(limit)

    def set_type(self, mode: Any) -> bool:
        return self.config.set_type(mode)

    @property
    def mode(self) -> OutputMode:
        return self.config.mode

    def formatter(self) -> BaseFormatter:
        return formatter_for(self.config.mode, self.config.site)

    # ------------------------------------------------------------------
    # Small documents
    # ------------------------------------------------------------------

    def error(self, code: int, message: str) -> str:
        return error_document(code, message)

    def header(self, title: Optional[str] = None) -> str:
        if self.config.mode == OutputMode.json:
            return ""
        return envelope_for(self.config.mode, self.config.site).header(title)

    def footer(self) -> str:
        if self.config.mode == OutputMode.json:
            return ""
        return envelope_for(self.config.mode, self.config.site).footer()

    def single_string(self, key: str, value: str = "") -> str:
        return self.formatter().render_single(key, value).content

    def keyed_array(self, data: Mapping[str, Any]) -> str:
        """Render arbitrary keyed data as elements inside the active envelope."""
        formatter = self.formatter()
        if isinstance(formatter, XmlDocumentFormatter):
            return formatter.render_mapping(data).content
        return dumps(dict(data))

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------

    def _window(self, kind: EntityKind, ids: Sequence[Any]) -> Sequence[Any]:
        windowed = self.config.window.apply(ids)
        if len(windowed) != len(ids):
            logger.debug(
                "Windowed %d %s ids to %d (offset=%d, limit=%d)",
                len(ids), kind.value, len(windowed),
                self.config.window.offset, self.config.window.limit,
            )
        return windowed

    def _warm(self, kind: EntityKind, ids: Sequence[int]) -> None:
        batch_hint(self.store, "preload", kind, ids)
        if self.ratings is not None:
            batch_hint(self.ratings, "warm_cache", kind, ids)

    def _load(self, kind: EntityKind, entity_id: Any) -> Optional[Any]:
        if not entity_id:
            return None
        entity = self.store.load_entity(kind, entity_id)
        if entity is None or not getattr(entity, "id", None):
            return None
        return entity

    def _entities(self, kind: EntityKind, ids: Sequence[Any]) -> Iterator[Any]:
        """Window, warm and load ``ids``, skipping anything that fails to load."""
        windowed = self._window(kind, ids)
        self._warm(kind, [i for i in windowed if i])
        skipped = 0
        for entity_id in windowed:
            entity = self._load(kind, entity_id)
            if entity is None:
                skipped += 1
                continue
            yield entity
        if skipped:
            logger.info("Skipped %d invalid %s id(s)", skipped, kind.value)

    def _rating(self, kind: EntityKind, entity_id: int) -> RatingInfo:
        if self.ratings is None:
            return RatingInfo()
        return RatingInfo(
            user_rating=self.ratings.get_user_rating(entity_id, kind) or 0,
            average_rating=self.ratings.get_average_rating(entity_id, kind) or 0,
        )

    def _stream_url(self, kind: EntityKind, entity_id: int) -> str:
        if self.urls is None:
            return ""
        return self.urls.stream_url(kind, entity_id, self.config.auth) or ""

    def _art_url(self, entity_id: int, kind: EntityKind) -> str:
        if self.urls is None or not entity_id:
            return ""
        return self.urls.art_url(entity_id, kind, self.config.auth) or ""

    def _author(self, user_id: int) -> Optional[User]:
        return self._load(EntityKind.user, user_id)

    def _render(
        self,
        records: List[EntityRecord],
        container: Optional[str] = None,
        title: Optional[str] = None,
    ) -> str:
        self.last_output = self.formatter().render(records, container=container, title=title)
        return self.last_output.content

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def artists(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.artist, artist, Decorations(
                rating=self._rating(EntityKind.artist, artist.id),
            ))
            for artist in self._entities(EntityKind.artist, ids)
        ]
        return self._render(records)

    def albums(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.album, album, Decorations(
                rating=self._rating(EntityKind.album, album.id),
                art_url=self._art_url(album.id, EntityKind.album),
            ))
            for album in self._entities(EntityKind.album, ids)
        ]
        return self._render(records)

    def songs(
        self,
        ids: Sequence[int],
        playlist_items: Optional[Sequence[PlaylistItem]] = None,
        title: Optional[str] = None,
    ) -> str:
        """Render songs; with ``playlist_items`` each song carries its position."""
        items = list(playlist_items) if playlist_items is not None else None
        records = [
            format_entity(EntityKind.song, song, Decorations(
                rating=self._rating(EntityKind.song, song.id),
                stream_url=self._stream_url(EntityKind.song, song.id),
                art_url=self._art_url(song.album_id, EntityKind.album),
                playlist_items=items,
            ))
            for song in self._entities(EntityKind.song, ids)
        ]
        return self._render(records, title=title)

    def videos(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.video, video, Decorations(
                stream_url=self._stream_url(EntityKind.video, video.id),
            ))
            for video in self._entities(EntityKind.video, ids)
        ]
        return self._render(records)

    def playlists(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.playlist, playlist)
            for playlist in self._entities(EntityKind.playlist, ids)
        ]
        return self._render(records)

    def tags(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.tag, tag)
            for tag in self._entities(EntityKind.tag, ids)
        ]
        return self._render(records)

    def user(self, user_id: int) -> str:
        user = self._load(EntityKind.user, user_id)
        records = [format_entity(EntityKind.user, user)] if user is not None else []
        return self._render(records)

    def users(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.user, user)
            for user in self._entities(EntityKind.user, ids)
        ]
        return self._render(records, container="users")

    def shouts(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.shout, shout, Decorations(author=self._author(shout.user_id)))
            for shout in self._entities(EntityKind.shout, ids)
        ]
        return self._render(records, container="shouts")

    def timeline(self, ids: Sequence[int]) -> str:
        records = [
            format_entity(EntityKind.activity, activity, Decorations(
                author=self._author(activity.user_id),
            ))
            for activity in self._entities(EntityKind.activity, ids)
        ]
        return self._render(records, container="timeline")

    def democratic(self, rows: Optional[Sequence[DemocraticRow]] = None) -> str:
        """Render the democratic play queue with per-row vote counts.

        Raises:
            UnsupportedEntityKindError: If a row points at a kind that
                cannot be queued (anything but song and video).
        """
        windowed = self._window(EntityKind.song, list(rows or []))
        for row in windowed:
            if row.object_type not in DEMOCRATIC_FORMATTERS:
                raise UnsupportedEntityKindError(row.object_type, "democratic")

        for kind in DEMOCRATIC_FORMATTERS:
            self._warm(kind, [r.object_id for r in windowed if r.object_type == kind and r.object_id])

        records: List[EntityRecord] = []
        for row in windowed:
            entity = self._load(row.object_type, row.object_id)
            if entity is None:
                logger.info("Skipped democratic row %s (%s %s)", row.row_id, row.object_type.value, row.object_id)
                continue
            art = ""
            if row.object_type == EntityKind.song:
                art = self._art_url(entity.album_id, EntityKind.album)
            deco = Decorations(
                rating=self._rating(row.object_type, entity.id),
                stream_url=self._stream_url(row.object_type, entity.id),
                art_url=art,
                vote_count=self.votes.get_vote_count(row.row_id) if self.votes is not None else 0,
            )
            records.append(format_entity(
                row.object_type, entity, deco, table=DEMOCRATIC_FORMATTERS, context="democratic",
            ))
        return self._render(records)

    # ------------------------------------------------------------------
    # Feeds
    # ------------------------------------------------------------------

    def rss_feed(
        self,
        items: Sequence[Mapping[str, Any]],
        title: str,
        description: str = "",
        date: Optional[int] = None,
    ) -> str:
        """Wrap keyed records into an RSS channel, one <item> per record."""
        writer = XmlWriter()
        RssEnvelope(self.config.site).open(writer)
        writer.element("title", title)
        writer.element("link", self.config.site.web_path, cdata_text=False)
        if description:
            writer.element("description", description)
        if date:
            writer.element("pubDate", rfc2822(date), cdata_text=False)
        for item in items:
            writer.start("item")
            write_mapping(writer, item)
            writer.end("item")
        self.last_output = FormatterOutput(
            suffix=".xml", content=writer.close(), media_type=RssEnvelope.media_type,
        )
        return self.last_output.content

    def _episode_items(self, channel: PodcastChannel) -> List[FeedItem]:
        refs = self._window(EntityKind.podcast_episode, list(channel.episodes))
        for ref in refs:
            if ref.object_type not in EPISODE_ADAPTERS:
                raise UnsupportedEntityKindError(ref.object_type, "podcast episode")

        items: List[FeedItem] = []
        for ref in refs:
            media = self._load(ref.object_type, ref.object_id)
            if media is None:
                continue
            items.append(to_feed_item(
                ref.object_type, media, self._stream_url(ref.object_type, ref.object_id),
            ))
        return items

    def podcast(self, channel_id: int) -> str:
        """Render the full podcast feed for one channel and its episodes."""
        channel = self._load(EntityKind.podcast, channel_id)
        if channel is None:
            logger.info("Podcast channel %s not found; rendering an empty feed", channel_id)
            channel = PodcastChannel(id=channel_id)

        owner = self._author(channel.owner_id)
        info = make_channel_info(
            name=channel.title,
            link=channel.link,
            generator=self.config.site.app_name,
            image_url=self._art_url(channel.id, EntityKind.podcast) if channel.has_art else None,
            description=channel.description,
            owner_name=owner.display_name if owner is not None else None,
        )
        self.last_output = PodcastFormatter().render(info, self._episode_items(channel))
        return self.last_output.content

