"""Canonical item and feed metadata models shared by adapters and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class SourceInfo:
    """Origin of an item when several sources are aggregated into one feed."""

    title: str
    url: str
    dialect: str


@dataclass(frozen=True)
class CanonicalItem:
    """Source-independent representation of one feed entry.

    ``date`` is ``None`` when the source had no date or it could not be
    parsed. Nothing downstream substitutes a fake date into the item itself.
    """

    title: str
    link: str | None = None
    date: datetime | None = None
    description: str = ""
    id: str | None = None
    custom_fields: Mapping[str, str] = field(default_factory=dict)
    source_info: SourceInfo | None = None

    def __post_init__(self) -> None:
        # Renderers only ever see a read-only view of the custom fields.
        if not isinstance(self.custom_fields, MappingProxyType):
            object.__setattr__(
                self, "custom_fields", MappingProxyType(dict(self.custom_fields))
            )


@dataclass(frozen=True)
class FeedMetadata:
    """Channel-level data, derived once after aggregation."""

    title: str
    link: str = ""
    feed_url: str = ""
    description: str = ""
    last_build_date: datetime | None = None
    language: str | None = None
    generator: str | None = None
    id: str | None = None
    item_count_limited: bool = False
    item_char_limited: bool = False
    group_by_feed: bool = False


@dataclass(frozen=True)
class Feed:
    """A fully materialized feed, ready for rendering."""

    metadata: FeedMetadata
    items: tuple[CanonicalItem, ...] = ()
