"""RSS/Atom XML feed adapter."""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone

import feedparser

from crssnt.feed.aggregate import sort_items
from crssnt.ingestion.adapter import ParsedSource, SourceAdapter
from crssnt.ingestion.dates import parse_date
from crssnt.ingestion.normalize import is_http_url, title_or_placeholder
from crssnt.models import CanonicalItem, FeedMetadata

logger = logging.getLogger(__name__)

UNTITLED_FEED = "Untitled Feed"

# RDF-rooted RSS 0.90/1.0 documents do not have an <rss> root element.
_RDF_VERSIONS = frozenset({"rss090", "rss10"})


def detect_dialect(version: str) -> str:
    """Map a feedparser version string to ``rss``, ``atom`` or ``unknown``."""
    if not version or version in _RDF_VERSIONS:
        return "unknown"
    if version.startswith("rss"):
        return "rss"
    if version.startswith("atom"):
        return "atom"
    return "unknown"


def _struct_to_datetime(parsed) -> datetime | None:
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


def _entry_date(entry: dict, keys: tuple[str, ...]) -> datetime | None:
    """First usable date among *keys*, preferring feedparser's parsed tuples."""
    for key in keys:
        dt = _struct_to_datetime(entry.get(f"{key}_parsed"))
        if dt is None:
            dt = parse_date(entry.get(key))
        if dt is not None:
            return dt
    return None


def _find_link(detail: dict, rel: str) -> str | None:
    for link in detail.get("links") or []:
        if link.get("rel", "alternate") == rel and link.get("href"):
            return link["href"]
    return None


def _get_content(entry: dict) -> str:
    """Prefer full content (content:encoded or Atom content) over the summary."""
    content = entry.get("content")
    if content:
        value = content[0].get("value", "")
        if value:
            return value
    return entry.get("summary", "") or entry.get("description", "") or ""


class FeedAdapter(SourceAdapter):
    """Adapter for RSS 2.0 and Atom documents fetched from ``source_url``."""

    def __init__(self, source_url: str) -> None:
        self._source_url = source_url

    @property
    def name(self) -> str:
        return "xml"

    def parse(self, raw: str | None) -> ParsedSource:
        """Detect the dialect of *raw* and extract items plus feed metadata.

        An unrecognized document yields no items and placeholder metadata.
        """
        document = feedparser.parse(
            io.BytesIO((raw or "").encode("utf-8")),
            response_headers={"content-type": "application/xml; charset=utf-8"},
        )
        dialect = detect_dialect(document.get("version", ""))

        if dialect == "unknown":
            logger.warning("Unrecognized feed format at %s", self._source_url)
            return ParsedSource(metadata=self._placeholder_metadata(), dialect=dialect)

        if document.get("bozo"):
            logger.warning(
                "Feed parsing warning for %s: %s",
                self._source_url,
                document.get("bozo_exception"),
            )

        if dialect == "rss":
            items = [self._rss_item(entry) for entry in document.entries]
            metadata = self._rss_metadata(document.feed, items)
        else:
            items = [self._atom_item(entry) for entry in document.entries]
            metadata = self._atom_metadata(document.feed, items)

        logger.info("Parsed %d %s items from %s", len(items), dialect, self._source_url)
        return ParsedSource(items=sort_items(items), metadata=metadata, dialect=dialect)

    # --- RSS ---

    @staticmethod
    def _rss_item(entry: dict) -> CanonicalItem:
        link = entry.get("link")
        if not link and entry.get("guidislink"):
            link = entry.get("id")
        link = link if is_http_url(link) else None
        return CanonicalItem(
            title=title_or_placeholder(entry.get("title")),
            link=link,
            date=_entry_date(entry, ("published", "updated")),
            description=_get_content(entry),
            id=entry.get("id") or link,
        )

    def _rss_metadata(self, feed: dict, items: list[CanonicalItem]) -> FeedMetadata:
        self_link = _find_link(feed, "self")
        return FeedMetadata(
            title=(feed.get("title") or "").strip() or UNTITLED_FEED,
            link=feed.get("link") or self._source_url,
            feed_url=self_link or self._source_url,
            description=feed.get("subtitle") or feed.get("description") or "",
            last_build_date=self._build_date(feed, items),
            language=feed.get("language"),
            generator=feed.get("generator"),
            id=self_link or self._source_url,
        )

    # --- Atom ---

    @staticmethod
    def _atom_item(entry: dict) -> CanonicalItem:
        link = _find_link(entry, "alternate") or entry.get("link")
        return CanonicalItem(
            title=title_or_placeholder(entry.get("title")),
            link=link if is_http_url(link) else None,
            date=_entry_date(entry, ("updated", "published")),
            description=_get_content(entry),
            id=entry.get("id"),
        )

    def _atom_metadata(self, feed: dict, items: list[CanonicalItem]) -> FeedMetadata:
        generator = feed.get("generator")
        generator_uri = (feed.get("generator_detail") or {}).get("href")
        if generator and generator_uri:
            generator = f"{generator} ({generator_uri})"
        return FeedMetadata(
            title=(feed.get("title") or "").strip() or UNTITLED_FEED,
            link=_find_link(feed, "alternate") or feed.get("link") or self._source_url,
            feed_url=_find_link(feed, "self") or self._source_url,
            description=feed.get("subtitle") or "",
            last_build_date=self._build_date(feed, items),
            language=feed.get("language"),
            generator=generator or None,
            id=feed.get("id") or self._source_url,
        )

    # --- shared ---

    @staticmethod
    def _build_date(feed: dict, items: list[CanonicalItem]) -> datetime:
        """The feed's own date, else the newest item date, else now."""
        own = _entry_date(feed, ("updated", "published"))
        if own is not None:
            return own
        dated = [item.date for item in items if item.date is not None]
        if dated:
            return max(dated)
        return datetime.now(timezone.utc)

    def _placeholder_metadata(self) -> FeedMetadata:
        return FeedMetadata(
            title="Unrecognized feed format",
            link=self._source_url,
            feed_url=self._source_url,
            description=f"The document at {self._source_url} is neither RSS nor Atom.",
            last_build_date=datetime.now(timezone.utc),
            id=self._source_url,
        )
