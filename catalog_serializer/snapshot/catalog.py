"""Snapshot-backed collaborators: store, ratings, votes and URLs.

WHY: The serializer talks to four collaborator Protocols. For the CLI and
for tests we need real implementations that do not require a database:
an in-memory index over a CatalogSnapshot, and a URL resolver that
builds links under the site's web path.

HOW: load_snapshot() reads and validates the file. SnapshotCatalog
indexes every entity list by (kind, id) and implements CatalogStore,
RatingService and VoteService. WebPathUrlResolver implements UrlResolver.

RULES:
- load_snapshot raises SnapshotError for unreadable or invalid files
- Lookups for unknown ids return None (entities, ratings) or 0 (votes)
- warm_cache/preload record the batches they were asked for and do no
  other work; everything is already in memory
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from pydantic import ValidationError

from catalog_serializer.core.ir import EntityKind
from catalog_serializer.errors import SnapshotError
from catalog_serializer.snapshot.models import SNAPSHOT_ADAPTER, CatalogSnapshot

logger = logging.getLogger(__name__)

# Snapshot list attribute for each entity kind.
SNAPSHOT_LISTS: Dict[EntityKind, str] = {
    EntityKind.artist: "artists",
    EntityKind.album: "albums",
    EntityKind.song: "songs",
    EntityKind.video: "videos",
    EntityKind.playlist: "playlists",
    EntityKind.tag: "tags",
    EntityKind.user: "users",
    EntityKind.shout: "shouts",
    EntityKind.activity: "activities",
    EntityKind.podcast: "podcasts",
    EntityKind.podcast_episode: "podcast_episodes",
}


def parse_snapshot(data: Any) -> CatalogSnapshot:
    """Validate an already-parsed JSON document into a CatalogSnapshot."""
    try:
        return SNAPSHOT_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise SnapshotError("Invalid catalog snapshot:\n{}".format(exc)) from exc


def load_snapshot(path: Union[str, Path]) -> CatalogSnapshot:
    """Read and validate a catalog snapshot JSON file.

    Raises:
        SnapshotError: If the file is missing, not JSON, or fails validation.
    """
    snapshot_path = Path(path)
    try:
        data = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SnapshotError("Cannot read snapshot {}: {}".format(snapshot_path, exc)) from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError("Snapshot {} is not valid JSON: {}".format(snapshot_path, exc)) from exc
    snapshot = parse_snapshot(data)
    logger.info("Loaded snapshot %s", snapshot_path)
    return snapshot


class SnapshotCatalog:
    """In-memory CatalogStore, RatingService and VoteService over a snapshot."""

    def __init__(self, snapshot: CatalogSnapshot) -> None:
        self.snapshot = snapshot
        self._entities: Dict[Tuple[EntityKind, int], Any] = {}
        for kind, attr in SNAPSHOT_LISTS.items():
            for entity in getattr(snapshot, attr):
                self._entities[(kind, entity.id)] = entity
        self._ratings = {(r.object_type, r.object_id): r for r in snapshot.ratings}
        self._votes = {v.row_id: v.votes for v in snapshot.votes}
        self.preloaded: List[Tuple[EntityKind, List[int]]] = []
        self.warmed: List[Tuple[EntityKind, List[int]]] = []

    # -- CatalogStore ---------------------------------------------------------

    def load_entity(self, kind: EntityKind, entity_id: int) -> Optional[Any]:
        return self._entities.get((kind, entity_id))

    def preload(self, kind: EntityKind, ids: Sequence[int]) -> None:
        self.preloaded.append((kind, list(ids)))

    def ids(self, kind: EntityKind) -> List[int]:
        """Every id of ``kind`` in snapshot order."""
        return [entity.id for entity in getattr(self.snapshot, SNAPSHOT_LISTS[kind])]

    # -- RatingService --------------------------------------------------------

    def get_user_rating(self, entity_id: int, kind: EntityKind) -> Optional[float]:
        row = self._ratings.get((kind, entity_id))
        return row.user_rating if row is not None else None

    def get_average_rating(self, entity_id: int, kind: EntityKind) -> Optional[float]:
        row = self._ratings.get((kind, entity_id))
        return row.average_rating if row is not None else None

    def warm_cache(self, kind: EntityKind, ids: Sequence[int]) -> None:
        self.warmed.append((kind, list(ids)))

    # -- VoteService ----------------------------------------------------------

    def get_vote_count(self, row_id: int) -> int:
        return self._votes.get(row_id, 0)


class WebPathUrlResolver:
    """Builds stream and art URLs under the site web path."""

    def __init__(self, web_path: str) -> None:
        self.web_path = web_path.rstrip("/")

    def stream_url(self, kind: EntityKind, entity_id: int, token: str) -> str:
        query = {"type": kind.value, "oid": entity_id}
        if token:
            query["ssid"] = token
        return "{}/play/index.php?{}".format(self.web_path, urlencode(query))

    def art_url(self, entity_id: int, kind: EntityKind, token: str) -> str:
        query = {"object_id": entity_id, "object_type": kind.value}
        if token:
            query["auth"] = token
        return "{}/image.php?{}".format(self.web_path, urlencode(query))
