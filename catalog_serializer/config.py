"""Configuration constants, output modes, and .env loading.

WHY: Every document the serializer renders carries site metadata (title,
web path, character set, generator version) and is shaped by a small
amount of per-render state (pagination window, output mode, auth token).
Keeping all of it here makes the defaults easy to find and override.

HOW: python-dotenv loads the .env file on import. Site constants are
read from the environment with documented fallbacks. SerializerConfig is
a plain dataclass handed to one CatalogSerializer instance, so two
renders never share a window or a mode.

RULES:
- Setters on SerializerConfig never raise; an invalid value is logged
  and the prior value is kept (fail closed)
- Default pagination limit is 5000, default offset 0
- Default output mode is "generic" (plain XML under <root>)
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from dotenv import load_dotenv

from catalog_serializer import __version__
from catalog_serializer.core.pagination import PaginationWindow

# Load .env from the project root (where the script is run from)
load_dotenv()

logger = logging.getLogger(__name__)


def positive_int_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``.

    Zero, negatives and non-numeric values are logged and ignored, the same
    way SerializerConfig.set_limit rejects them.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value.isdigit() or int(value) <= 0:
        logger.warning("Ignoring %s=%r; using %d", name, raw, default)
        return default
    return int(value)


# ---------------------------------------------------------------------------
# Site defaults
# ---------------------------------------------------------------------------

SITE_TITLE = os.getenv("CATALOG_SITE_TITLE", "Catalog")
WEB_PATH = os.getenv("CATALOG_WEB_PATH", "http://localhost")
SITE_CHARSET = os.getenv("CATALOG_SITE_CHARSET", "UTF-8")
APP_NAME = os.getenv("CATALOG_APP_NAME", "Catalog Serializer")
DEFAULT_LIMIT = positive_int_env("CATALOG_DEFAULT_LIMIT", 5000)
VALIDATE_JSON = os.getenv("CATALOG_VALIDATE_JSON", "true").lower() == "true"


class OutputMode(str, Enum):
    """Output modes understood by the envelope state machine.

    JSON bypasses the envelope entirely; the other four select an XML
    header/footer pair.
    """

    generic = "generic"
    rss = "rss"
    xspf = "xspf"
    itunes = "itunes"
    json = "json"


@dataclass
class SiteInfo:
    """Site metadata printed into document headers and feed channels."""

    title: str = SITE_TITLE
    web_path: str = WEB_PATH
    charset: str = SITE_CHARSET
    app_name: str = APP_NAME
    version: str = __version__


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


@dataclass
class SerializerConfig:
    """Per-render settings: pagination window, output mode, auth token.

    WHY: The surrounding application sets the window and mode right before
    asking for a document. Holding them on an explicit value (instead of a
    module-level static) keeps concurrent renders from seeing each other's
    settings while preserving the "set, then render" ergonomics.

    RULES:
    - set_offset accepts non-negative integers (or digit strings)
    - set_limit accepts positive integers; 0, None and negatives are rejected
    - set_type accepts OutputMode values only
    - Every setter returns True when applied, False when the value was kept
    """

    window: PaginationWindow = field(
        default_factory=lambda: PaginationWindow(offset=0, limit=DEFAULT_LIMIT)
    )
    mode: OutputMode = OutputMode.generic
    auth: str = ""
    site: SiteInfo = field(default_factory=SiteInfo)

    def set_offset(self, offset: Any) -> bool:
        value = _as_int(offset)
        if value is None or value < 0:
            logger.warning("Rejected pagination offset %r; keeping %d", offset, self.window.offset)
            return False
        self.window.offset = value
        return True

    def set_limit(self, limit: Any) -> bool:
        value = _as_int(limit)
        if not value or value < 0:
            logger.warning("Rejected pagination limit %r; keeping %d", limit, self.window.limit)
            return False
        self.window.limit = value
        return True

    def set_type(self, mode: Any) -> bool:
        try:
            self.mode = OutputMode(mode)
        except ValueError:
            logger.warning("Rejected output mode %r; keeping %s", mode, self.mode.value)
            return False
        return True
