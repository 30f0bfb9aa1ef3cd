"""Atom 1.0 renderer."""

from __future__ import annotations

from datetime import datetime, timezone

from crssnt.feed.identity import resolve_item_id
from crssnt.models import CanonicalItem, FeedMetadata
from crssnt.render.base import (
    ERROR_DESCRIPTION,
    ERROR_TITLE,
    Renderer,
    cdata,
    escape_xml,
    iso8601,
)
from crssnt.render.rss import XML_DECLARATION

ATOM_NS = "http://www.w3.org/2005/Atom"
DEFAULT_FEED_ID = "urn:crssnt:feed"


class AtomRenderer(Renderer):
    format_name = "atom"
    content_type = "application/atom+xml"

    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        # <updated> is mandatory; "now" here is a rendering default only.
        now = datetime.now(timezone.utc)
        feed_id = metadata.id or metadata.feed_url or metadata.link or DEFAULT_FEED_ID
        lang = f' xml:lang="{escape_xml(metadata.language)}"' if metadata.language else ""

        lines = [
            XML_DECLARATION,
            f'<feed xmlns="{ATOM_NS}"{lang}>',
            f"  <title>{escape_xml(metadata.title or 'Untitled Feed')}</title>",
        ]
        if metadata.description:
            lines.append(f"  <subtitle>{escape_xml(metadata.description)}</subtitle>")
        if metadata.link:
            lines.append(f'  <link href="{escape_xml(metadata.link)}" rel="alternate"/>')
        if metadata.feed_url:
            lines.append(
                f'  <link href="{escape_xml(metadata.feed_url)}" rel="self" '
                'type="application/atom+xml"/>'
            )
        lines.append(f"  <id>{escape_xml(feed_id)}</id>")
        lines.append(f"  <updated>{iso8601(metadata.last_build_date or now)}</updated>")
        lines.append(f"  <author><name>{escape_xml(metadata.title or 'crssnt')}</name></author>")
        if metadata.generator:
            lines.append(f"  <generator>{escape_xml(metadata.generator)}</generator>")

        for item in items:
            lines.extend(self._entry_lines(item, feed_id, now))

        lines.append("</feed>")
        return "\n".join(lines)

    @staticmethod
    def _entry_lines(item: CanonicalItem, feed_id: str, now: datetime) -> list[str]:
        entry_id = resolve_item_id(item, feed_id, include_timestamp=True)
        lines = [
            "  <entry>",
            f'    <title type="html">{cdata(item.title)}</title>',
        ]
        if item.link:
            lines.append(f'    <link href="{escape_xml(item.link)}" rel="alternate"/>')
        lines.append(f"    <id>{escape_xml(entry_id)}</id>")
        lines.append(f"    <updated>{iso8601(item.date or now)}</updated>")
        lines.append(f'    <content type="html">{cdata(item.description)}</content>')
        if item.source_info is not None:
            lines.extend([
                "    <source>",
                f"      <title>{escape_xml(item.source_info.title)}</title>",
                f'      <link href="{escape_xml(item.source_info.url)}" rel="self"/>',
                "    </source>",
            ])
        lines.append("  </entry>")
        return lines

    def render_error(self, link: str = "") -> str:
        lines = [
            XML_DECLARATION,
            f'<feed xmlns="{ATOM_NS}">',
            f"  <title>{ERROR_TITLE}</title>",
            f"  <subtitle>{ERROR_DESCRIPTION}</subtitle>",
        ]
        if link:
            lines.append(f'  <link href="{escape_xml(link)}" rel="alternate"/>')
        lines.extend([
            f"  <id>{DEFAULT_FEED_ID}:error</id>",
            f"  <updated>{iso8601(datetime.now(timezone.utc))}</updated>",
            "</feed>",
        ])
        return "\n".join(lines)
