"""Abstract base formatter and output container.

WHY: Every output dialect consumes the same EntityRecords but produces
different document text. This base class gives the facade and the CLI
one interface for any of them.

HOW: BaseFormatter is an ABC with a ``name`` property, ``render()`` for
record collections and ``render_single()`` for one-value documents.
FormatterOutput bundles the content with its MIME type and a file suffix.

RULES:
- Subclasses MUST implement ``name``, ``render()`` and ``render_single()``
- ``suffix`` starts with a dot, e.g. ``".xml"``; the CLI names --output-dir
  files ``<collection><suffix>``
- ``container`` is an optional wrapper element (XML only)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from catalog_serializer.core.ir import EntityRecord


@dataclass
class FormatterOutput:
    """One rendered document.

    Attributes:
        suffix: File suffix for the document, e.g. ``".json"``.
        content: The document text.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all record document formatters.

    To add a new output dialect:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter (or add an Envelope for an XML dialect)
    3. Implement name, render() and render_single()
    4. Register it in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Generic XML'."""

    @abstractmethod
    def render(
        self,
        records: Sequence[EntityRecord],
        container: Optional[str] = None,
        title: Optional[str] = None,
    ) -> FormatterOutput:
        """Render a collection of records into one document.

        Args:
            records: Already windowed and formatted entity records.
            container: Optional element wrapping all records (XML only).
            title: Optional document title (used by XSPF).
        """

    @abstractmethod
    def render_single(self, key: str, value: str = "") -> FormatterOutput:
        """Render a document holding a single keyed string value."""
