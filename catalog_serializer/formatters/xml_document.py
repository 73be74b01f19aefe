"""XML document formatter: records inside the active envelope.

WHY: The generic XML API, RSS, XSPF and iTunes outputs all carry the same
entity fragments; only the envelope differs. This formatter writes the
fragments and delegates the envelope to an Envelope instance.

HOW: Each EntityRecord becomes ``<kind id="...">`` with one child per
field. Nested references carry their id as an attribute, tag aggregates
become repeated ``<tag id count>`` elements, free text goes into CDATA
(the XmlWriter decides that). ``write_mapping`` renders arbitrary keyed
data for RSS items.

RULES:
- Record ids and reference ids are attributes with plain integers
- None fields are omitted
- List fields repeat the singular element (tags -> <tag>)
- Every tag aggregate is written, not just the last one
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from catalog_serializer.core.ir import EntityRecord, Ref, TagAggregate
from catalog_serializer.formatters.base import BaseFormatter, FormatterOutput
from catalog_serializer.formatters.envelopes import Envelope
from catalog_serializer.formatters.xml_writer import XmlWriter

_LIST_ITEM_TAGS = {"tags": "tag"}


def _write_value(writer: XmlWriter, key: str, value: Any) -> None:
    if isinstance(value, Ref):
        writer.element(key, value.name, {"id": value.id})
    elif isinstance(value, TagAggregate):
        writer.element(key, value.name, {"id": value.id, "count": value.count})
    elif isinstance(value, (list, tuple)):
        item_tag = _LIST_ITEM_TAGS.get(key, key)
        for item in value:
            _write_value(writer, item_tag, item)
    else:
        writer.element(key, value)


def write_record(writer: XmlWriter, record: EntityRecord) -> None:
    """Write one ``<kind id="...">...</kind>`` fragment."""
    writer.start(record.kind, {"id": record.id})
    for key, value in record.fields.items():
        if value is None:
            continue
        _write_value(writer, key, value)
    writer.end(record.kind)


def write_mapping(writer: XmlWriter, data: Mapping[str, Any]) -> None:
    """Recursively write keyed data as elements.

    Nested mappings become child elements, sequences repeat their key,
    scalars become text (CDATA for strings).
    """
    for key, value in data.items():
        if isinstance(value, Mapping):
            writer.start(key)
            write_mapping(writer, value)
            writer.end(key)
        elif isinstance(value, (list, tuple)):
            for item in value:
                write_mapping(writer, {key: item})
        else:
            writer.element(key, value)


class XmlDocumentFormatter(BaseFormatter):
    """Formatter that renders records between an envelope's header and footer."""

    def __init__(self, envelope: Envelope) -> None:
        self.envelope = envelope

    @property
    def name(self) -> str:
        return "{} XML".format(self.envelope.mode.value.upper())

    def _output(self, writer: XmlWriter) -> FormatterOutput:
        return FormatterOutput(
            suffix=".xml",
            content=writer.close(),
            media_type=self.envelope.media_type,
        )

    def render(
        self,
        records: Sequence[EntityRecord],
        container: Optional[str] = None,
        title: Optional[str] = None,
    ) -> FormatterOutput:
        writer = XmlWriter()
        self.envelope.open(writer, title)
        if container:
            writer.start(container)
        for record in records:
            write_record(writer, record)
        return self._output(writer)

    def render_single(self, key: str, value: str = "") -> FormatterOutput:
        writer = XmlWriter()
        self.envelope.open(writer)
        writer.element(key, value)
        return self._output(writer)

    def render_mapping(self, data: Mapping[str, Any], title: Optional[str] = None) -> FormatterOutput:
        writer = XmlWriter()
        self.envelope.open(writer, title)
        write_mapping(writer, data)
        return self._output(writer)
