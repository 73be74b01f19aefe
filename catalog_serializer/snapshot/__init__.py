"""File-backed collaborators for rendering without a database.

WHY: The serializer only needs projections, ratings, votes and URLs. A
JSON snapshot of a catalog is enough to supply all of them, which lets
the CLI and the tests drive the real pipeline end to end.
"""

from catalog_serializer.snapshot.catalog import (
    SnapshotCatalog,
    WebPathUrlResolver,
    load_snapshot,
    parse_snapshot,
)
from catalog_serializer.snapshot.models import CatalogSnapshot

__all__ = [
    "CatalogSnapshot",
    "SnapshotCatalog",
    "WebPathUrlResolver",
    "load_snapshot",
    "parse_snapshot",
]
