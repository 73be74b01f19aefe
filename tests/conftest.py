"""Shared test fixtures for the catalog_serializer test suite.

WHY: Most test modules need the same small but realistic catalog: an
artist with duplicate tags, a single-artist and a compilation album,
songs with and without album artists, a playlist, users with public and
private full names, shouts, a podcast channel and a democratic queue.
Centralizing it here keeps every test reading the same data.

HOW: ``SAMPLE_SNAPSHOT`` is the raw JSON-shaped dict (exactly what a
snapshot file would contain). Fixtures validate it into a
SnapshotCatalog and build CatalogSerializer instances with fixed site
metadata so headers are reproducible.

RULES:
- Site metadata is fixed (Test Catalog / http://localhost), never read
  from the environment
- Song 100 is the "known values" song (Test Song, track 3, 320 kbps)
- Id 999 never exists in any list
"""

import copy
from typing import Any, Dict, Optional

import pytest

from catalog_serializer.config import SerializerConfig, SiteInfo
from catalog_serializer.core.ir import EntityKind, Song
from catalog_serializer.serializer import CatalogSerializer
from catalog_serializer.snapshot import SnapshotCatalog, WebPathUrlResolver, parse_snapshot

WEB_PATH = "http://localhost"
AUTH_TOKEN = "tok"


# ---------------------------------------------------------------------------
# Sample catalog
# ---------------------------------------------------------------------------

SAMPLE_SNAPSHOT: Dict[str, Any] = {
    "artists": [
        {
            "id": 1,
            "name": "Boards of Canada",
            "tags": [
                {"id": 1, "name": "electronic"},
                {"id": 2, "name": "ambient"},
                {"id": 1, "name": "electronic"},
            ],
            "albums": 2,
            "songs": 20,
            "mbid": "69158f97-4c07-4c4e-baf8-4e4ab1ed666e",
            "summary": "Scottish duo of brothers.",
            "yearformed": 1986,
            "placeformed": "Edinburgh",
        },
        {"id": 2, "name": "Autechre"},
    ],
    "albums": [
        {
            "id": 10,
            "name": "Music Has the Right to Children",
            "artist_id": 1,
            "artist_name": "Boards of Canada",
            "artist_count": 1,
            "year": 1998,
            "song_count": 17,
            "disk": 1,
            "tags": [{"id": 1, "name": "electronic"}],
            "mbid": "f3a5a43c-2a3a-4c27-a5d3-1d5b8ea3ec2e",
        },
        {
            "id": 11,
            "name": "Warp 20 (Recreated)",
            "artist_id": 2,
            "artist_name": "Autechre",
            "artist_count": 3,
            "year": 2009,
            "song_count": 20,
        },
    ],
    "songs": [
        {
            "id": 100,
            "title": "Test Song",
            "artist_id": 1,
            "artist_name": "Boards of Canada",
            "album_id": 10,
            "album_name": "Music Has the Right to Children",
            "file": "/music/boc/03 - test.mp3",
            "track": 3,
            "time": 151,
            "year": 1998,
            "bitrate": 320000,
            "rate": 44100,
            "mode": "cbr",
            "mime": "audio/mpeg",
            "size": 6045000,
            "composer": "Sandison",
            "channels": 2,
            "label": "Warp",
            "language": "en",
            "replaygain_track_gain": -6.5,
            "tags": [{"id": 1, "name": "electronic"}, {"id": 2, "name": "ambient"}],
            "link": "http://localhost/song.php?song_id=100",
            "addition_time": 1500000000,
        },
        {
            "id": 101,
            "title": "Roygbiv",
            "artist_id": 1,
            "artist_name": "Boards of Canada",
            "album_id": 11,
            "album_name": "Warp 20 (Recreated)",
            "album_artist_id": 7,
            "album_artist_name": "Various Warp",
            "track": 5,
            "mime": "audio/mpeg",
        },
        {"id": 102, "title": "Aquarius", "artist_id": 1, "artist_name": "Boards of Canada"},
    ],
    "videos": [
        {
            "id": 200,
            "title": "Dayvan Cowboy",
            "mime": "video/mp4",
            "resolution_x": 1920,
            "resolution_y": 1080,
            "size": 104857600,
            "tags": [{"id": 2, "name": "ambient"}, {"id": 2, "name": "ambient"}],
        },
    ],
    "playlists": [
        {
            "id": 300,
            "name": "Favourites",
            "owner_name": "alice",
            "type": "public",
            "items": [
                {"object_type": "song", "object_id": 101, "track": 1},
                {"object_type": "song", "object_id": 100, "track": 2},
                {"object_type": "video", "object_id": 200, "track": 3},
            ],
        },
    ],
    "tags": [
        {"id": 1, "name": "electronic", "counts": {"album": 2, "artist": 1, "song": 5, "live_stream": 1}},
        {"id": 2, "name": "ambient"},
    ],
    "users": [
        {
            "id": 1000,
            "username": "alice",
            "fullname": "Alice Liddell",
            "fullname_public": True,
            "create_date": 1400000000,
            "last_seen": 1600000000,
            "website": "https://alice.example",
            "state": "Oxfordshire",
            "city": "Oxford",
        },
        {"id": 1001, "username": "bob", "fullname": "Robert Paulson", "fullname_public": False},
    ],
    "shouts": [
        {"id": 400, "user_id": 1000, "text": "Great <album> & more ]]> here", "date": 1500000000},
        {"id": 401, "user_id": 999, "text": "orphaned shout", "date": 1500000001},
    ],
    "activities": [
        {
            "id": 500,
            "user_id": 1001,
            "object_type": "song",
            "object_id": 100,
            "action": "play",
            "activity_date": 1500000100,
        },
    ],
    "podcasts": [
        {
            "id": 600,
            "title": "Warp Radio",
            "link": "http://localhost/podcast/600",
            "description": "Weekly mixes & interviews",
            "owner_id": 1000,
            "has_art": True,
            "episodes": [
                {"object_type": "podcast_episode", "object_id": 700},
                {"object_type": "song", "object_id": 100},
                {"object_type": "podcast_episode", "object_id": 701},
                {"object_type": "podcast_episode", "object_id": 999},
            ],
        },
        {"id": 601, "title": "Bare Feed"},
    ],
    "podcast_episodes": [
        {
            "id": 700,
            "title": "Episode 1",
            "author": "DJ A",
            "link": "http://localhost/episode/700",
            "addition_time": 1500000000,
            "description": "First show",
            "time": 3725,
            "mime": "audio/mpeg",
            "size": 12345,
        },
        {"id": 701, "title": "Episode 2", "link": "http://localhost/episode/701", "time": 59},
    ],
    "democratic": [
        {"row_id": 1, "object_type": "song", "object_id": 100},
        {"row_id": 2, "object_type": "song", "object_id": 999},
        {"row_id": 3, "object_type": "song", "object_id": 102},
    ],
    "ratings": [
        {"object_type": "song", "object_id": 100, "user_rating": 4, "average_rating": 3.5},
        {"object_type": "album", "object_id": 10, "user_rating": 5, "average_rating": 4.25},
        {"object_type": "artist", "object_id": 1, "user_rating": 3, "average_rating": 2.5},
    ],
    "votes": [
        {"row_id": 1, "votes": 3},
    ],
}


class GeneratedSongStore:
    """A store that fabricates a song for every positive id.

    Used for large-window tests where building a snapshot would be noise.
    """

    def load_entity(self, kind: EntityKind, entity_id: int) -> Optional[Song]:
        if kind != EntityKind.song or entity_id <= 0:
            return None
        return Song(id=entity_id, title="Song {}".format(entity_id))


@pytest.fixture
def sample_snapshot_data():
    """A deep copy of the raw snapshot dict, safe to mutate per test."""
    return copy.deepcopy(SAMPLE_SNAPSHOT)


@pytest.fixture
def site():
    return SiteInfo(
        title="Test Catalog",
        web_path=WEB_PATH,
        charset="UTF-8",
        app_name="Catalog Serializer",
        version="0.1.0",
    )


@pytest.fixture
def catalog(sample_snapshot_data):
    return SnapshotCatalog(parse_snapshot(sample_snapshot_data))


@pytest.fixture
def make_serializer(catalog, site):
    """Factory: a CatalogSerializer over the sample catalog in a given mode."""

    def _make(mode: str = "generic", with_urls: bool = True) -> CatalogSerializer:
        config = SerializerConfig(auth=AUTH_TOKEN, site=site)
        assert config.set_type(mode)
        return CatalogSerializer(
            store=catalog,
            ratings=catalog,
            urls=WebPathUrlResolver(WEB_PATH) if with_urls else None,
            votes=catalog,
            config=config,
        )

    return _make
