"""Command-line interface for the Catalog Serializer.

WHY: Operators and feed generators need to render catalog documents
without a web stack: to publish a static podcast feed, to inspect what
an API response looks like, or to diff two catalog exports. The CLI
wires a snapshot file to the serializer facade behind a single command.

HOW: Uses argparse to accept a snapshot path, a collection name, an id
list and the render settings (mode, offset, limit, title, playlist
context, auth token). Loads the snapshot, builds a CatalogSerializer
with snapshot-backed collaborators, and writes the document to stdout or
--output. Status messages go to stderr.

RULES:
- Positional arguments: snapshot path, collection name
- --ids: comma-separated; default is every id of that kind in the snapshot
- democratic renders the snapshot's queue rows; podcast needs one --ids value
- --output-dir names the file <collection><suffix> from the rendered document
- Invalid --offset/--limit/--mode values are reported and the defaults kept
- Exit code 1 on snapshot errors or bad ids
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from catalog_serializer import __version__
from catalog_serializer.config import OutputMode, SerializerConfig, SiteInfo
from catalog_serializer.core.ir import EntityKind
from catalog_serializer.errors import SnapshotError
from catalog_serializer.formatters.base import FormatterOutput
from catalog_serializer.serializer import CatalogSerializer
from catalog_serializer.snapshot import SnapshotCatalog, WebPathUrlResolver, load_snapshot

# Collection name -> (entity kind used for default ids, facade method name).
COLLECTIONS: Dict[str, Tuple[EntityKind, str]] = {
    "artists": (EntityKind.artist, "artists"),
    "albums": (EntityKind.album, "albums"),
    "songs": (EntityKind.song, "songs"),
    "videos": (EntityKind.video, "videos"),
    "playlists": (EntityKind.playlist, "playlists"),
    "tags": (EntityKind.tag, "tags"),
    "users": (EntityKind.user, "users"),
    "shouts": (EntityKind.shout, "shouts"),
    "timeline": (EntityKind.activity, "timeline"),
    "democratic": (EntityKind.song, "democratic"),
    "podcast": (EntityKind.podcast, "podcast"),
}


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def split_ids(raw: str) -> List[int]:
    """Parse a comma separated id list; blank entries are ignored.

    Raises:
        ValueError: If an entry is not an integer.
    """
    return [int(part) for part in raw.split(",") if part.strip()]


def build_serializer(catalog: SnapshotCatalog, args: argparse.Namespace) -> CatalogSerializer:
    site = SiteInfo()
    config = SerializerConfig(auth=args.auth or "", site=site)
    if args.mode is not None and not config.set_type(args.mode):
        _status("Ignoring unknown output mode: {}".format(args.mode))
    if args.offset is not None and not config.set_offset(args.offset):
        _status("Ignoring invalid offset: {}".format(args.offset))
    if args.limit is not None and not config.set_limit(args.limit):
        _status("Ignoring invalid limit: {}".format(args.limit))
    return CatalogSerializer(
        store=catalog,
        ratings=catalog,
        urls=WebPathUrlResolver(site.web_path),
        votes=catalog,
        config=config,
    )


def render(catalog: SnapshotCatalog, args: argparse.Namespace) -> FormatterOutput:
    """Render the requested collection and return the finished document."""
    serializer = build_serializer(catalog, args)
    _render_collection(serializer, catalog, args)
    return serializer.last_output


def _render_collection(
    serializer: CatalogSerializer, catalog: SnapshotCatalog, args: argparse.Namespace,
) -> str:
    kind, method_name = COLLECTIONS[args.collection]
    ids = split_ids(args.ids) if args.ids else catalog.ids(kind)

    if args.collection == "democratic":
        return serializer.democratic(catalog.snapshot.democratic)
    if args.collection == "podcast":
        if len(ids) != 1:
            raise ValueError("podcast needs exactly one channel id (--ids)")
        return serializer.podcast(ids[0])
    if args.collection == "songs":
        playlist_items = None
        if args.playlist is not None:
            playlist = catalog.load_entity(EntityKind.playlist, args.playlist)
            playlist_items = playlist.items if playlist is not None else []
        return serializer.songs(ids, playlist_items=playlist_items, title=args.title)

    method: Callable[[List[int]], str] = getattr(serializer, method_name)
    return method(ids)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog-serializer",
        description="Render catalog entities from a snapshot file as JSON, XML, "
                    "RSS, XSPF, iTunes plist or podcast documents.",
    )
    parser.add_argument("snapshot", help="Path to a catalog snapshot JSON file.")
    parser.add_argument(
        "collection",
        choices=sorted(COLLECTIONS),
        help="Which collection to render.",
    )
    parser.add_argument(
        "--ids",
        default=None,
        help="Comma-separated ids to render (default: every id in the snapshot).",
    )
    parser.add_argument(
        "--mode",
        default=None,
        help="Output mode: {} (default: generic).".format(", ".join(m.value for m in OutputMode)),
    )
    parser.add_argument("--offset", default=None, help="Pagination offset.")
    parser.add_argument("--limit", default=None, help="Pagination limit (positive).")
    parser.add_argument("--title", default=None, help="Document title (XSPF playlists).")
    parser.add_argument(
        "--playlist",
        type=int,
        default=None,
        help="Playlist id giving songs their playlist position.",
    )
    parser.add_argument("--auth", default=None, help="Auth token appended to stream/art URLs.")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--output", default=None, help="Write the document to this file.")
    output.add_argument(
        "--output-dir",
        default=None,
        help="Write the document to DIR/<collection><suffix>, e.g. albums.xml or podcast.rss.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``python -m catalog_serializer`` and ``catalog-serializer``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        catalog = SnapshotCatalog(load_snapshot(args.snapshot))
        output = render(catalog, args)
    except SnapshotError as e:
        _status("Error: {}".format(e))
        return 1
    except ValueError as e:
        _status("Error: {}".format(e))
        return 1

    path = None
    if args.output:
        path = Path(args.output)
    elif args.output_dir:
        path = Path(args.output_dir) / "{}{}".format(args.collection, output.suffix)
        path.parent.mkdir(parents=True, exist_ok=True)

    if path is None:
        sys.stdout.write(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
        _status("Wrote {} ({}, {} chars)".format(path, output.media_type, len(output.content)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
