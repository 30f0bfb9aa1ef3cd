"""
crssnt

Turns spreadsheet rows and external RSS/Atom documents into one canonical
item model, then publishes it as RSS 2.0, Atom 1.0, JSON Feed or Markdown.

Pipeline: adapt → merge/sort → limit → render

Example
-------
from crssnt import build_multi_feed, render_feed

feed = build_multi_feed(
    ["https://example.com/a.xml", "https://example.com/b.xml"],
    item_limit=50,
    char_limit=500,
)
rendered = render_feed(feed, "atom")
print(rendered.content_type)
print(rendered.body)
"""
from crssnt.feed.builder import SheetTab, build_multi_feed, build_sheet_feed
from crssnt.models import CanonicalItem, Feed, FeedMetadata, SourceInfo
from crssnt.render import RenderedFeed, render_feed

__all__ = [
    "CanonicalItem",
    "Feed",
    "FeedMetadata",
    "RenderedFeed",
    "SheetTab",
    "SourceInfo",
    "build_multi_feed",
    "build_sheet_feed",
    "render_feed",
]
