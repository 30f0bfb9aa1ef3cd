"""Renderer interface and the text helpers the concrete renderers share."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import format_datetime
from itertools import groupby
from typing import Sequence

from crssnt.models import CanonicalItem, FeedMetadata, SourceInfo

logger = logging.getLogger(__name__)

ERROR_TITLE = "Error Generating Feed"
ERROR_DESCRIPTION = "Could not generate feed due to invalid data."

_XML_ESCAPES = {"<": "&lt;", ">": "&gt;", "&": "&amp;", '"': "&quot;", "'": "&apos;"}


def escape_xml(value: object) -> str:
    """Minimal entity escaping of ``< > & " '``; non-strings become ''."""
    if not isinstance(value, str):
        return ""
    return "".join(_XML_ESCAPES.get(c, c) for c in value)


def cdata(value: str | None) -> str:
    """Wrap *value* in CDATA, splitting any embedded ``]]>``."""
    text = (value or "").replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{text}]]>"


def rfc822(dt: datetime) -> str:
    """``Wed, 02 Apr 2025 18:30:00 GMT``."""
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def iso8601(dt: datetime) -> str:
    """``2025-04-02T18:30:00Z``."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def group_items(
    items: Sequence[CanonicalItem],
) -> list[tuple[SourceInfo | None, list[CanonicalItem]]]:
    """Split items into runs that share the same origin, keeping order."""
    return [(info, list(run)) for info, run in groupby(items, key=lambda i: i.source_info)]


def _is_optional_date(value: object) -> bool:
    return value is None or isinstance(value, datetime)


def _is_valid_item(item: object) -> bool:
    return (
        isinstance(item, CanonicalItem)
        and isinstance(item.title, str)
        and isinstance(item.description, str)
        and _is_optional_date(item.date)
    )


def is_valid_input(metadata: object, items: object) -> bool:
    """True when *metadata*/*items* have the shape renderers rely on."""
    return (
        isinstance(metadata, FeedMetadata)
        and isinstance(metadata.title, str)
        and _is_optional_date(metadata.last_build_date)
        and isinstance(items, (list, tuple))
        and all(_is_valid_item(item) for item in items)
    )


class Renderer(ABC):
    """One output format. Renderers never modify the items they are given."""

    format_name: str = ""
    content_type: str = ""

    def render(self, metadata: FeedMetadata, items: Sequence[CanonicalItem]) -> str:
        """Render a document, or this format's error document for bad input."""
        link = getattr(metadata, "link", "")
        link = link if isinstance(link, str) else ""
        if not is_valid_input(metadata, items):
            logger.error("Invalid feed data passed to %s renderer", self.format_name)
            return self.render_error(link)
        try:
            return self._render(metadata, tuple(items))
        except Exception:
            logger.exception("Failed to render %s document", self.format_name)
            return self.render_error(link)

    @abstractmethod
    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        """Render validated input."""

    @abstractmethod
    def render_error(self, link: str = "") -> str:
        """A minimal, well-formed document reporting a generation failure."""
