"""Streaming XML writer with explicit open/close calls.

WHY: Catalog documents are built incrementally: an envelope opens a few
elements, every entity adds a fragment, the envelope closes again.
Writing those pieces as hand-matched string literals is how unbalanced
documents and broken CDATA sections happen. The writer keeps a stack of
open elements and owns all escaping, so callers cannot get either wrong.

HOW: ``start()`` pushes a tag, ``end()`` pops it (and refuses a
mismatched name), ``element()`` writes a complete leaf, and
``close_all()`` unwinds whatever is still open. Free text goes into
CDATA sections; numbers and attribute values are entity-escaped.

RULES:
- Indentation is one tab per open element
- str values are wrapped in CDATA (split around any "]]>" they contain)
  unless cdata_text=False; numbers are written plainly; bools as 1/0
- None or "" writes a self-closing element
- Characters that XML 1.0 forbids are dropped from text and attributes
- Nothing may be written after close(); XmlWriterError otherwise
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional
from xml.sax.saxutils import escape, quoteattr

from catalog_serializer.errors import XmlWriterError

# Control characters, lone surrogates and non-characters outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def clean_text(value: str) -> str:
    """Drop characters that may not appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", value)


def cdata(value: str) -> str:
    """Wrap ``value`` in a CDATA section, splitting any embedded ``]]>``."""
    return "<![CDATA[" + clean_text(value).replace("]]>", "]]]]><![CDATA[>") + "]]>"


def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class XmlWriter:
    """Incremental XML builder enforcing balanced elements."""

    def __init__(self, indent: str = "\t") -> None:
        self._indent = indent
        self._parts: List[str] = []
        self._stack: List[str] = []
        self._closed = False

    # -- prolog -------------------------------------------------------------

    def declaration(self, encoding: str = "UTF-8") -> None:
        self._write('<?xml version="1.0" encoding={} ?>\n'.format(quoteattr(encoding)))

    def comment(self, text: str) -> None:
        self._write("<!-- {} -->\n".format(clean_text(text).replace("--", "- -")))

    def doctype(self, name: str, public_id: str, system_id: str) -> None:
        self._write('<!DOCTYPE {} PUBLIC "{}"\n"{}">\n'.format(name, public_id, system_id))

    # -- elements -----------------------------------------------------------

    def start(self, tag: str, attrs: Optional[Mapping[str, Any]] = None) -> None:
        self._write("{}<{}{}>\n".format(self._pad(), tag, self._attrs(attrs)))
        self._stack.append(tag)

    def end(self, tag: Optional[str] = None) -> None:
        if not self._stack:
            raise XmlWriterError("end({!r}) with no open element".format(tag))
        if tag is not None and self._stack[-1] != tag:
            raise XmlWriterError(
                "end({!r}) does not match open element {!r}".format(tag, self._stack[-1])
            )
        top = self._stack.pop()
        self._write("{}</{}>\n".format(self._pad(), top))

    def element(
        self,
        tag: str,
        value: Any = None,
        attrs: Optional[Mapping[str, Any]] = None,
        cdata_text: bool = True,
    ) -> None:
        """Write a complete leaf element ``<tag attrs>value</tag>``."""
        attr_text = self._attrs(attrs)
        if value is None or value == "":
            self._write("{}<{}{} />\n".format(self._pad(), tag, attr_text))
            return
        if isinstance(value, str):
            body = cdata(value) if cdata_text else escape(clean_text(value))
        else:
            body = escape(format_scalar(value))
        self._write("{}<{}{}>{}</{}>\n".format(self._pad(), tag, attr_text, body, tag))

    def close_all(self) -> None:
        while self._stack:
            self.end()

    def close(self) -> str:
        """Close every open element and return the finished document."""
        self.close_all()
        self._closed = True
        return self.getvalue()

    # -- output -------------------------------------------------------------

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def open_tags(self) -> List[str]:
        return list(self._stack)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def detach(self) -> str:
        """Return the text written so far and clear the buffer.

        The stack of open elements is kept, so the remainder can still be
        written and closed. Used to render an envelope's footer alone.
        """
        text = self.getvalue()
        self._parts = []
        return text

    # -- internals ----------------------------------------------------------

    def _pad(self) -> str:
        return self._indent * len(self._stack)

    def _attrs(self, attrs: Optional[Mapping[str, Any]]) -> str:
        if not attrs:
            return ""
        return "".join(
            " {}={}".format(name, quoteattr(clean_text(format_scalar(value))))
            for name, value in attrs.items()
        )

    def _write(self, text: str) -> None:
        if self._closed:
            raise XmlWriterError("document already closed")
        self._parts.append(text)
