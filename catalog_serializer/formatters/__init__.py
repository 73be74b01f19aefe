"""Output formatter registry — pluggable document hub.

WHY: The facade and the CLI need a single lookup to find the right
formatter for an output mode. JSON has its own formatter; the four XML
modes share one formatter parameterised by an envelope.

HOW: ``formatter_for(mode, site)`` returns a ready instance. FORMATTERS
maps the two document families to their classes and ENVELOPES (see
envelopes.py) maps XML modes to envelope classes.

RULES:
- Every OutputMode resolves to exactly one formatter
- Every formatter listed here must be importable without side effects
- The podcast formatter is not mode-driven and is used directly
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from catalog_serializer.config import OutputMode, SiteInfo
from catalog_serializer.formatters.base import BaseFormatter, FormatterOutput
from catalog_serializer.formatters.envelopes import ENVELOPES, envelope_for
from catalog_serializer.formatters.json_document import JsonDocumentFormatter
from catalog_serializer.formatters.xml_document import XmlDocumentFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "json": JsonDocumentFormatter,
    "xml": XmlDocumentFormatter,
}


def formatter_for(mode: OutputMode, site: Optional[SiteInfo] = None) -> BaseFormatter:
    """Return the formatter that renders documents for ``mode``."""
    if mode == OutputMode.json:
        return FORMATTERS["json"]()
    return FORMATTERS["xml"](envelope_for(mode, site or SiteInfo()))


__all__ = [
    "ENVELOPES",
    "FORMATTERS",
    "BaseFormatter",
    "FormatterOutput",
    "formatter_for",
]
