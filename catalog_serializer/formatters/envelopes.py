"""Envelope selector: header/footer pairs for each XML output mode.

WHY: The same entity fragments are served as a plain XML API response,
an RSS channel, an XSPF playlist or an iTunes property list. What
changes is the envelope: the prolog, namespaces and metadata before
the fragments and the closing tags after them.

HOW: One Envelope subclass per OutputMode writes its opening elements
into an XmlWriter. The footer is never spelled out: it is whatever the
writer has to close to unwind the elements the header opened, so header
and footer can not drift apart.

RULES:
- generic: <root>
- rss:     <rss version="2.0"><channel>, with a generator comment
- xspf:    <playlist xmlns="http://xspf.org/ns/0/"><trackList>, with
           title (custom or "<site> XSPF Playlist"), creator, annotation,
           info
- itunes:  plist DOCTYPE, <plist><dict> header keys, then <dict> for Tracks
- Every state renders a declaration with the site charset (XSPF: utf-8)
- The mode is fixed for one document; JSON never consults this module
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from email.utils import formatdate
from typing import Dict, Optional, Type

from catalog_serializer.config import OutputMode, SiteInfo
from catalog_serializer.formatters.xml_writer import XmlWriter

XSPF_NAMESPACE = "http://xspf.org/ns/0/"
PLIST_PUBLIC_ID = "-//Apple Computer//DTD PLIST 1.0//EN"
PLIST_SYSTEM_ID = "http://www.apple.com/DTDs/PropertyList-1.0.dtd"


class Envelope(ABC):
    """Base envelope. Subclasses implement ``open()``."""

    mode: OutputMode = OutputMode.generic
    media_type = "application/xml"

    def __init__(self, site: SiteInfo) -> None:
        self.site = site

    @abstractmethod
    def open(self, writer: XmlWriter, title: Optional[str] = None) -> None:
        """Write the prolog and open the envelope elements into ``writer``."""

    def header(self, title: Optional[str] = None) -> str:
        writer = XmlWriter()
        self.open(writer, title)
        return writer.getvalue()

    def footer(self) -> str:
        writer = XmlWriter()
        self.open(writer)
        writer.detach()
        return writer.close()

    def _generator_comment(self, label: str) -> str:
        return "{} Generated by {} v.{}".format(label, self.site.app_name, self.site.version)


class GenericEnvelope(Envelope):
    mode = OutputMode.generic

    def open(self, writer: XmlWriter, title: Optional[str] = None) -> None:
        writer.declaration(self.site.charset)
        writer.start("root")


class RssEnvelope(Envelope):
    mode = OutputMode.rss
    media_type = "application/rss+xml"

    def open(self, writer: XmlWriter, title: Optional[str] = None) -> None:
        writer.declaration(self.site.charset)
        writer.comment("{} on {}".format(self._generator_comment("RSS"), formatdate(usegmt=True)))
        writer.start("rss", {"version": "2.0"})
        writer.start("channel")


class XspfEnvelope(Envelope):
    mode = OutputMode.xspf
    media_type = "application/xspf+xml"

    def open(self, writer: XmlWriter, title: Optional[str] = None) -> None:
        writer.declaration("utf-8")
        writer.start("playlist", {"version": "1", "xmlns": XSPF_NAMESPACE})
        writer.element("title", title or "{} XSPF Playlist".format(self.site.title), cdata_text=False)
        writer.element("creator", self.site.title, cdata_text=False)
        writer.element("annotation", self.site.title, cdata_text=False)
        writer.element("info", self.site.web_path, cdata_text=False)
        writer.start("trackList")


class ItunesEnvelope(Envelope):
    mode = OutputMode.itunes
    media_type = "application/x-plist"

    # (key, value type, value) rows of the outer plist dict.
    HEADER_KEYS = (
        ("Major Version", "integer", 1),
        ("Minor Version", "integer", 1),
        ("Application Version", "string", "7.0.2"),
        ("Features", "integer", 1),
        ("Show Content Ratings", "true", None),
    )

    def open(self, writer: XmlWriter, title: Optional[str] = None) -> None:
        writer.declaration("UTF-8")
        writer.comment(self._generator_comment("XML"))
        writer.doctype("plist", PLIST_PUBLIC_ID, PLIST_SYSTEM_ID)
        writer.start("plist", {"version": "1.0"})
        writer.start("dict")
        for key, value_type, value in self.HEADER_KEYS:
            writer.element("key", key, cdata_text=False)
            writer.element(value_type, value, cdata_text=False)
        writer.element("key", "Tracks", cdata_text=False)
        writer.start("dict")


ENVELOPES: Dict[OutputMode, Type[Envelope]] = {
    OutputMode.generic: GenericEnvelope,
    OutputMode.rss: RssEnvelope,
    OutputMode.xspf: XspfEnvelope,
    OutputMode.itunes: ItunesEnvelope,
}


def envelope_for(mode: OutputMode, site: SiteInfo) -> Envelope:
    """Instantiate the envelope for ``mode``.

    Raises:
        ValueError: For modes without an envelope (json).
    """
    envelope_cls = ENVELOPES.get(mode)
    if envelope_cls is None:
        raise ValueError("No XML envelope for output mode {!r}".format(mode))
    return envelope_cls(site)
