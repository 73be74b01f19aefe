"""Adapter modules for converting catalog projections into renderable shapes.

WHY: The store's projections (Artist, Song, PodcastEpisode, ...) are not
what documents show. Adapters select, default and join the fields each
document needs, so renderers only deal with records and feed items.

HOW: records.py maps every entity kind to an EntityRecord; feed_items.py
maps playable media to podcast FeedItems. Both dispatch through closed
tables keyed by EntityKind.

RULES:
- Adapters are pure data transformations — no I/O, no side effects.
- Adapters must not modify the source projections.
"""

from catalog_serializer.adapters.feed_items import FeedItem, to_feed_item
from catalog_serializer.adapters.records import Decorations, format_entity

__all__ = ["Decorations", "FeedItem", "format_entity", "to_feed_item"]
