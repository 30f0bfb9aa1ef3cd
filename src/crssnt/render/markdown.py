"""Markdown renderers — a readable verbose style and a token-minimized compact style."""

from __future__ import annotations

from datetime import timezone

from crssnt.ingestion.normalize import strip_html
from crssnt.models import CanonicalItem, FeedMetadata
from crssnt.render.base import (
    ERROR_DESCRIPTION,
    ERROR_TITLE,
    Renderer,
    group_items,
    iso8601,
)

HORIZONTAL_RULE = "---"
ITEM_SEPARATOR = "\n--\n"
GROUP_SEPARATOR = "\n===\n"
TRUNCATION_MARKER = "[TRUNCATED]"
TRUNCATION_NOTICE = (
    "*Note: this feed was truncated. Some items or parts of their descriptions "
    "were omitted because they exceeded the configured limits.*"
)


def _human_date(item: CanonicalItem) -> str:
    if item.date is None:
        return ""
    return item.date.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _is_truncated(metadata: FeedMetadata) -> bool:
    return metadata.item_count_limited or metadata.item_char_limited


class MarkdownRenderer(Renderer):
    """Verbose Markdown: a header block, then one H3 section per item."""

    format_name = "markdown"
    content_type = "text/markdown"

    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        lines = [f"# {metadata.title}", ""]
        if metadata.description:
            lines.extend([metadata.description, ""])
        if metadata.link:
            lines.append(f"**Source:** <{metadata.link}>  ")
        if metadata.last_build_date:
            lines.append(f"**Last updated:** {iso8601(metadata.last_build_date)}")
        lines.extend(["", HORIZONTAL_RULE, ""])

        if metadata.group_by_feed:
            for info, group in group_items(items):
                if info is not None:
                    lines.extend([f"## {info.title}", "", f"<{info.url}>", ""])
                for item in group:
                    lines.extend(self._item_lines(item))
        else:
            for item in items:
                lines.extend(self._item_lines(item))

        if not items:
            lines.extend(["*No items.*", ""])
        if _is_truncated(metadata):
            lines.extend([TRUNCATION_NOTICE, ""])
        return "\n".join(lines).rstrip() + "\n"

    @staticmethod
    def _item_lines(item: CanonicalItem) -> list[str]:
        lines = [f"### {item.title}", ""]
        if item.date is not None:
            lines.append(f"**Published:** {_human_date(item)}  ")
        if item.link:
            lines.append(f"**Link:** <{item.link}>")
        if item.date is not None or item.link:
            lines.append("")
        if item.description:
            lines.extend([item.description, ""])
        for key, value in item.custom_fields.items():
            lines.append(f"**{key}:** {value}  ")
        if item.custom_fields:
            lines.append("")
        lines.extend([HORIZONTAL_RULE, ""])
        return lines

    def render_error(self, link: str = "") -> str:
        lines = [f"# {ERROR_TITLE}", "", ERROR_DESCRIPTION]
        if link:
            lines.extend(["", f"<{link}>"])
        return "\n".join(lines) + "\n"


class CompactMarkdownRenderer(Renderer):
    """One dense line per item, for feeding language models."""

    format_name = "markdown"
    content_type = "text/plain"

    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        if metadata.group_by_feed:
            blocks = []
            for info, group in group_items(items):
                body = ITEM_SEPARATOR.join(self._item_line(item) for item in group)
                if info is not None:
                    body = f"## {info.title} {info.url}\n{body}"
                blocks.append(body)
            text = GROUP_SEPARATOR.join(blocks)
        else:
            text = ITEM_SEPARATOR.join(self._item_line(item) for item in items)

        if _is_truncated(metadata):
            text = f"{text}\n{TRUNCATION_MARKER}" if text else TRUNCATION_MARKER
        return text

    @staticmethod
    def _item_line(item: CanonicalItem) -> str:
        parts = [f"# {' '.join(item.title.split())}"]
        body = strip_html(item.description)
        if body:
            parts.append(body)
        if item.link:
            parts.append(f"Link: {item.link}")
        if item.date is not None:
            parts.append(f"Date: {iso8601(item.date)}")
        return " ".join(parts)

    def render_error(self, link: str = "") -> str:
        return f"# {ERROR_TITLE} {ERROR_DESCRIPTION}"
