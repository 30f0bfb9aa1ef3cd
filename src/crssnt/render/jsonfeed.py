"""JSON Feed 1.1 renderer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from crssnt.feed.identity import resolve_item_id
from crssnt.ingestion.normalize import strip_html
from crssnt.models import CanonicalItem, FeedMetadata
from crssnt.render.base import ERROR_DESCRIPTION, ERROR_TITLE, Renderer, iso8601

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


# ---------------------------------------------------------------------------
# Document models. None-valued keys are dropped on dump.
# ---------------------------------------------------------------------------
class JSONFeedItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str | None = None
    title: str | None = None
    content_text: str = ""
    date_published: str | None = None
    # Vendor extension: custom fields and source grouping.
    extension: dict | None = Field(default=None, alias="_crssnt")


class JSONFeedDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = JSON_FEED_VERSION
    title: str | None = None
    home_page_url: str | None = None
    feed_url: str | None = None
    description: str | None = None
    language: str | None = None
    items: list[JSONFeedItem] = Field(default_factory=list)
    extension: dict | None = Field(default=None, alias="_crssnt")


def _item_extension(item: CanonicalItem) -> dict | None:
    ext = {}
    if item.custom_fields:
        ext["custom_fields"] = dict(item.custom_fields)
    if item.source_info is not None:
        ext["source"] = {
            "title": item.source_info.title,
            "url": item.source_info.url,
            "dialect": item.source_info.dialect,
        }
    return ext or None


def _feed_extension(metadata: FeedMetadata) -> dict | None:
    ext = {
        key: True
        for key in ("item_count_limited", "item_char_limited", "group_by_feed")
        if getattr(metadata, key)
    }
    return ext or None


class JSONFeedRenderer(Renderer):
    format_name = "json"
    content_type = "application/feed+json"

    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def _render(self, metadata: FeedMetadata, items: tuple[CanonicalItem, ...]) -> str:
        feed_id = metadata.id or metadata.feed_url or None
        document = JSONFeedDocument(
            items=[
                JSONFeedItem(
                    id=resolve_item_id(item, feed_id, include_timestamp=True),
                    url=item.link or None,
                    title=item.title or None,
                    content_text=strip_html(item.description),
                    date_published=iso8601(item.date) if item.date is not None else None,
                    extension=_item_extension(item),
                )
                for item in items
            ],
            extension=_feed_extension(metadata),
        )
        if not self.compact:
            document.title = metadata.title or None
            document.home_page_url = metadata.link or None
            document.feed_url = metadata.feed_url or None
            document.description = metadata.description or None
            document.language = metadata.language or None
        return self._dump(document)

    def _dump(self, document: JSONFeedDocument) -> str:
        return document.model_dump_json(
            by_alias=True,
            exclude_none=True,
            indent=None if self.compact else 2,
        )

    def render_error(self, link: str = "") -> str:
        return self._dump(
            JSONFeedDocument(
                title=ERROR_TITLE,
                home_page_url=link or None,
                description=ERROR_DESCRIPTION,
            )
        )
