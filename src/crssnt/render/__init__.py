"""Output formats — RSS 2.0, Atom 1.0, JSON Feed and Markdown."""

from __future__ import annotations

from dataclasses import dataclass

from crssnt.models import Feed
from crssnt.render.atom import AtomRenderer
from crssnt.render.base import Renderer
from crssnt.render.jsonfeed import JSONFeedRenderer
from crssnt.render.markdown import CompactMarkdownRenderer, MarkdownRenderer
from crssnt.render.rss import RSSRenderer

FORMATS = ("rss", "atom", "json", "markdown")


@dataclass(frozen=True)
class RenderedFeed:
    """A rendered document and the content type to serve it with."""

    body: str
    content_type: str


def get_renderer(fmt: str, compact: bool = False) -> Renderer:
    """Return the renderer for *fmt*. Raises ValueError for unknown formats.

    ``compact`` selects the token-minimized variant where a format has one
    (JSON Feed, Markdown); RSS and Atom ignore it.
    """
    fmt = (fmt or "").lower()
    if fmt == "rss":
        return RSSRenderer()
    if fmt == "atom":
        return AtomRenderer()
    if fmt == "json":
        return JSONFeedRenderer(compact=compact)
    if fmt == "markdown":
        return CompactMarkdownRenderer() if compact else MarkdownRenderer()
    raise ValueError(f"Unknown output format {fmt!r}; expected one of {', '.join(FORMATS)}")


def render_feed(feed: Feed, fmt: str = "rss", compact: bool = False) -> RenderedFeed:
    """Render *feed* in *fmt* and pair it with its content type."""
    renderer = get_renderer(fmt, compact)
    metadata = getattr(feed, "metadata", None)
    items = getattr(feed, "items", None)
    return RenderedFeed(body=renderer.render(metadata, items), content_type=renderer.content_type)


__all__ = [
    "FORMATS",
    "AtomRenderer",
    "CompactMarkdownRenderer",
    "JSONFeedRenderer",
    "MarkdownRenderer",
    "RSSRenderer",
    "RenderedFeed",
    "Renderer",
    "get_renderer",
    "render_feed",
]
