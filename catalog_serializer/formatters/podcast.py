"""Podcast feed formatter: RSS 2.0 with iTunes and Atom extensions.

WHY: Podcast clients subscribe to a channel (an album, a playlist, a
dedicated podcast) through an RSS document that carries iTunes-specific
metadata and an Atom self link. Unlike the other XML outputs this one is
a complete feed for one owner entity, independent of the output mode.

HOW: The document is built as an ElementTree with the ``atom`` and
``itunes`` namespaces registered, pretty-printed with
``ElementTree.indent`` and serialized with a UTF-8 declaration.
ElementTree performs all escaping.

RULES:
- Channel: title, link, atom:link (rel="self"), optional itunes:image,
  optional description + itunes:summary, generator, itunes:category,
  optional itunes:owner/itunes:name
- Item: title, optional itunes:author, link, guid (= link), optional
  pubDate (RFC 2822), optional description, itunes:duration, and an
  enclosure only when the mime type is known
- Text and attribute values go through clean_text, like XmlWriter output
"""

from __future__ import annotations

from dataclasses import dataclass
from email.utils import formatdate
from typing import Dict, Optional, Sequence
from xml.etree import ElementTree as ET

from catalog_serializer.adapters.feed_items import FeedItem
from catalog_serializer.formatters.base import FormatterOutput
from catalog_serializer.formatters.xml_writer import clean_text

ATOM_NS = "http://www.w3.org/2005/Atom"
ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
PODCAST_CATEGORY = "Music"

ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("itunes", ITUNES_NS)


def _atom(tag: str) -> str:
    return "{%s}%s" % (ATOM_NS, tag)


def _itunes(tag: str) -> str:
    return "{%s}%s" % (ITUNES_NS, tag)


def rfc2822(timestamp: int) -> str:
    return formatdate(timestamp, usegmt=True)


@dataclass
class ChannelInfo:
    """Channel-level metadata of a podcast feed."""

    title: str
    link: str
    generator: str
    image_url: str = ""
    description: str = ""
    owner_name: str = ""
    category: str = PODCAST_CATEGORY


def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    child = ET.SubElement(parent, tag)
    child.text = clean_text(text)
    return child


def _attrs(**values: str) -> Dict[str, str]:
    return {name: clean_text(value) for name, value in values.items()}


def _build_item(channel: ET.Element, item: FeedItem) -> None:
    xitem = ET.SubElement(channel, "item")
    _text(xitem, "title", item.title)
    if item.author:
        _text(xitem, _itunes("author"), item.author)
    _text(xitem, "link", item.link)
    _text(xitem, "guid", item.guid)
    if item.pub_date:
        _text(xitem, "pubDate", rfc2822(item.pub_date))
    if item.description:
        _text(xitem, "description", item.description)
    _text(xitem, _itunes("duration"), item.duration)
    if item.enclosure is not None:
        ET.SubElement(xitem, "enclosure", _attrs(
            type=item.enclosure.mime,
            length=str(item.enclosure.size),
            url=item.enclosure.url,
        ))


class PodcastFormatter:
    """Formatter that produces a pretty-printed podcast RSS document."""

    name = "Podcast RSS"
    media_type = "application/rss+xml"

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent

    def build(self, info: ChannelInfo, items: Sequence[FeedItem]) -> ET.Element:
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        _text(channel, "title", info.title)
        _text(channel, "link", info.link)
        ET.SubElement(channel, _atom("link"), _attrs(
            href=info.link,
            rel="self",
            type=self.media_type,
        ))
        if info.image_url:
            ET.SubElement(channel, _itunes("image"), _attrs(href=info.image_url))
        if info.description:
            _text(channel, "description", info.description)
            _text(channel, _itunes("summary"), info.description)
        _text(channel, "generator", info.generator)
        _text(channel, _itunes("category"), info.category)
        if info.owner_name:
            owner = ET.SubElement(channel, _itunes("owner"))
            _text(owner, _itunes("name"), info.owner_name)

        for item in items:
            _build_item(channel, item)
        return rss

    def render(self, info: ChannelInfo, items: Sequence[FeedItem]) -> FormatterOutput:
        rss = self.build(info, items)
        ET.indent(rss, space=self.indent)
        body = ET.tostring(rss, encoding="unicode")
        return FormatterOutput(
            suffix=".rss",
            content='<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n",
            media_type=self.media_type,
        )


def channel_title(name: str) -> str:
    return "{} Podcast".format(name).strip()


def make_channel_info(
    name: str,
    link: str,
    generator: str,
    image_url: Optional[str] = None,
    description: Optional[str] = None,
    owner_name: Optional[str] = None,
) -> ChannelInfo:
    return ChannelInfo(
        title=channel_title(name),
        link=link or "",
        generator=generator,
        image_url=image_url or "",
        description=description or "",
        owner_name=owner_name or "",
    )
