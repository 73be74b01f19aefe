"""Catalog Serializer — multi-format media-catalog document hub.

WHY: A music catalog has to be published in many dialects at once: a
generic XML and JSON API, RSS, XSPF playlists, an iTunes-style property
list and podcast feeds. Each dialect wants the same entity fields but a
different envelope and different escaping.

HOW: Three stages — window the requested ids (pagination gate), turn each
loaded entity into a format-agnostic record (adapters), render the
records inside the active envelope (formatters). The CatalogSerializer
facade runs all three per call.

RULES:
- All formatters consume the same EntityRecord objects
- Adding a new envelope = one new Envelope subclass, no adapter changes
- Loading, ratings, votes and URLs come from collaborators, never from here
"""

__version__ = "0.1.0"
