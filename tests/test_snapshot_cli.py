"""Tests for snapshot loading, the snapshot collaborators and the CLI.

WHY: The CLI is the only way to render documents without embedding the
library, and a snapshot file is hand-edited input. Bad files must fail
with a SnapshotError and a non-zero exit code, never a traceback.

HOW: Snapshots are written to tmp_path; main() is called with argv lists
and its return code, stdout (capsys) and --output files are inspected.
"""

import json
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

from catalog_serializer.cli import build_parser, main, split_ids
from catalog_serializer.core.ir import EntityKind, Song
from catalog_serializer.errors import SnapshotError
from catalog_serializer.snapshot import WebPathUrlResolver, load_snapshot, parse_snapshot

from conftest import SAMPLE_SNAPSHOT


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(SAMPLE_SNAPSHOT), encoding="utf-8")
    return path


class TestSnapshotLoading:

    def test_load(self, snapshot_file):
        snapshot = load_snapshot(snapshot_file)
        assert [s.id for s in snapshot.songs] == [100, 101, 102]
        assert isinstance(snapshot.songs[0], Song)
        assert snapshot.democratic[0].object_type == EntityKind.song

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError):
            load_snapshot(tmp_path / "missing.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError):
            load_snapshot(path)

    def test_unknown_object_type(self):
        with pytest.raises(SnapshotError) as excinfo:
            parse_snapshot({"democratic": [{"row_id": 1, "object_type": "radio", "object_id": 2}]})
        assert "democratic" in str(excinfo.value)

    def test_empty_snapshot(self):
        snapshot = parse_snapshot({})
        assert snapshot.songs == []

    def test_catalog_lookups(self, catalog):
        assert catalog.load_entity(EntityKind.song, 100).title == "Test Song"
        assert catalog.load_entity(EntityKind.song, 999) is None
        assert catalog.get_user_rating(100, EntityKind.song) == 4
        assert catalog.get_average_rating(100, EntityKind.album) is None
        assert catalog.get_vote_count(1) == 3
        assert catalog.get_vote_count(2) == 0
        assert catalog.ids(EntityKind.user) == [1000, 1001]


class TestUrlResolver:

    def test_stream_url(self):
        resolver = WebPathUrlResolver("http://music.example/")
        assert resolver.stream_url(EntityKind.song, 5, "abc") == (
            "http://music.example/play/index.php?type=song&oid=5&ssid=abc"
        )
        assert resolver.stream_url(EntityKind.video, 6, "") == (
            "http://music.example/play/index.php?type=video&oid=6"
        )

    def test_art_url(self):
        resolver = WebPathUrlResolver("http://music.example")
        assert resolver.art_url(10, EntityKind.album, "") == (
            "http://music.example/image.php?object_id=10&object_type=album"
        )


class TestCli:

    def test_split_ids(self):
        assert split_ids("1, 2,,3 ") == [1, 2, 3]
        with pytest.raises(ValueError):
            split_ids("1,x")

    def test_parser_rejects_unknown_collection(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["catalog.json", "genres"])

    def test_json_to_output_file(self, snapshot_file, tmp_path):
        out = tmp_path / "songs.json"
        code = main([str(snapshot_file), "songs", "--mode", "json", "--output", str(out)])
        assert code == 0
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert [entry["song"]["id"] for entry in doc] == [100, 101, 102]

    def test_output_dir_uses_document_suffix(self, snapshot_file, tmp_path, capsys):
        out_dir = tmp_path / "out"
        assert main([str(snapshot_file), "podcast", "--ids", "600", "--output-dir", str(out_dir)]) == 0
        assert main([str(snapshot_file), "albums", "--mode", "json", "--output-dir", str(out_dir)]) == 0
        assert main([str(snapshot_file), "songs", "--mode", "xspf", "--output-dir", str(out_dir)]) == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ["albums.json", "podcast.rss", "songs.xml"]
        err = capsys.readouterr().err
        assert "application/rss+xml" in err
        assert "application/json" in err
        assert "application/xspf+xml" in err
        assert ET.fromstring((out_dir / "podcast.rss").read_bytes()).tag == "rss"

    def test_output_and_output_dir_are_exclusive(self, snapshot_file, tmp_path):
        with pytest.raises(SystemExit):
            build_parser().parse_args([
                str(snapshot_file), "songs", "--output", "a.xml", "--output-dir", str(tmp_path),
            ])

    def test_ids_and_window(self, snapshot_file, capsys):
        code = main([str(snapshot_file), "songs", "--ids", "100,101,102", "--offset", "1", "--limit", "1"])
        assert code == 0
        root = ET.fromstring(capsys.readouterr().out.encode("utf-8"))
        assert [s.get("id") for s in root.findall("song")] == ["101"]

    def test_playlist_context(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "songs", "--mode", "json", "--playlist", "300"]) == 0
        doc = json.loads(capsys.readouterr().out)
        assert [entry["song"]["playlisttrack"] for entry in doc] == [2, 1, 0]

    def test_invalid_limit_is_reported_and_ignored(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "tags", "--limit", "0"]) == 0
        captured = capsys.readouterr()
        assert "Ignoring invalid limit: 0" in captured.err
        assert len(ET.fromstring(captured.out.encode("utf-8")).findall("tag")) == 2

    def test_democratic(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "democratic", "--mode", "json"]) == 0
        doc = json.loads(capsys.readouterr().out)
        assert [entry["song"]["vote"] for entry in doc] == [3, 0]

    def test_podcast(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "podcast", "--ids", "600"]) == 0
        root = ET.fromstring(capsys.readouterr().out.encode("utf-8"))
        assert root.tag == "rss"
        assert len(root.find("channel").findall("item")) == 3

    def test_podcast_needs_one_id(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "podcast"]) == 1
        assert "exactly one channel id" in capsys.readouterr().err

    def test_bad_ids(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "songs", "--ids", "1,x"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_snapshot(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json"), "songs"]) == 1
        assert "Cannot read snapshot" in capsys.readouterr().err


class TestPackaging:

    def test_project_metadata(self):
        tomllib = pytest.importorskip("tomllib")
        pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
        project = tomllib.loads(pyproject.read_text(encoding="utf-8"))["project"]
        assert "readme" not in project
        assert project["scripts"]["catalog-serializer"] == "catalog_serializer.cli:main"
