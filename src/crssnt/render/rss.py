"""RSS 2.0 renderer."""

from __future__ import annotations

from datetime import datetime, timezone

from crssnt.feed.identity import resolve_item_id
from crssnt.ingestion.normalize import sanitize_tag
from crssnt.models import CanonicalItem, FeedMetadata
from crssnt.render.base import (
    ERROR_DESCRIPTION,
    ERROR_TITLE,
    Renderer,
    cdata,
    escape_xml,
    rfc822,
)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class RSSRenderer(Renderer):
    format_name = "rss"
    content_type = "application/rss+xml"

    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        build_date = metadata.last_build_date or datetime.now(timezone.utc)

        lines = [
            XML_DECLARATION,
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "<channel>",
            f"  <title>{escape_xml(metadata.title or 'Untitled Feed')}</title>",
            f"  <link>{escape_xml(metadata.link)}</link>",
        ]
        if metadata.feed_url:
            lines.append(
                f'  <atom:link href="{escape_xml(metadata.feed_url)}" '
                'rel="self" type="application/rss+xml"/>'
            )
        lines.append(f"  <description>{escape_xml(metadata.description)}</description>")
        if metadata.language:
            lines.append(f"  <language>{escape_xml(metadata.language)}</language>")
        lines.append(f"  <lastBuildDate>{rfc822(build_date)}</lastBuildDate>")
        if metadata.generator:
            lines.append(f"  <generator>{escape_xml(metadata.generator)}</generator>")

        for item in items:
            lines.extend(self._item_lines(item, metadata.id))

        lines.extend(["</channel>", "</rss>"])
        return "\n".join(lines)

    @staticmethod
    def _item_lines(item: CanonicalItem, feed_id: str | None) -> list[str]:
        guid = resolve_item_id(item, feed_id)
        permalink = "true" if guid == item.link else "false"

        lines = [
            "  <item>",
            f"    <title>{cdata(item.title)}</title>",
            f"    <description>{cdata(item.description)}</description>",
        ]
        if item.link:
            lines.append(f"    <link>{escape_xml(item.link)}</link>")
        lines.append(f'    <guid isPermaLink="{permalink}">{escape_xml(guid)}</guid>')
        # No date means no pubDate; never invent one.
        if item.date is not None:
            lines.append(f"    <pubDate>{rfc822(item.date)}</pubDate>")
        if item.source_info is not None:
            lines.append(
                f'    <source url="{escape_xml(item.source_info.url)}">'
                f"{escape_xml(item.source_info.title)}</source>"
            )
        for key, value in item.custom_fields.items():
            # Only the atom prefix is declared on the channel.
            tag = sanitize_tag(key).replace(":", "_")
            lines.append(f"    <{tag}>{escape_xml(value)}</{tag}>")
        lines.append("  </item>")
        return lines

    def render_error(self, link: str = "") -> str:
        return "\n".join([
            XML_DECLARATION,
            '<rss version="2.0">',
            "<channel>",
            f"  <title>{ERROR_TITLE}</title>",
            f"  <link>{escape_xml(link)}</link>",
            f"  <description>{ERROR_DESCRIPTION}</description>",
            "</channel>",
            "</rss>",
        ])
