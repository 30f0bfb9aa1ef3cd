"""Feed builders — spreadsheet tabs and multi-source XML aggregation."""

from __future__ import annotations

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Sequence

from crssnt.exceptions import NoSourcesAvailable, TooManySources
from crssnt.feed.aggregate import merge_sources, tag_source
from crssnt.feed.limits import apply_limits
from crssnt.ingestion.adapter import ParsedSource
from crssnt.ingestion.fetch import fetch_feed_text
from crssnt.ingestion.normalize import title_or_placeholder
from crssnt.ingestion.registry import DEFAULT_MODE, adapter_for_mode, get_adapter_class
from crssnt.ingestion.rss_adapter import FeedAdapter
from crssnt.models import CanonicalItem, Feed, FeedMetadata, SourceInfo

logger = logging.getLogger(__name__)

GENERATOR = "crssnt"
SHEET_URL = "https://docs.google.com/spreadsheets/d/{}"
MAX_SHEET_ROWS = 2000
MAX_SOURCES = 10

Fetcher = Callable[[str], str]


@dataclass(frozen=True)
class SheetTab:
    """One worksheet's rows, as delivered by the spreadsheet collaborator."""

    name: str
    rows: Sequence[Sequence[object]] = ()


@dataclass(frozen=True)
class SourceFailure:
    """A source that could not be fetched or parsed."""

    url: str
    error: str


@dataclass(frozen=True)
class SourceResult:
    """Per-source outcome inside the orchestrator."""

    url: str
    parsed: ParsedSource | None = None
    items: list[CanonicalItem] = field(default_factory=list)
    item_count_limited: bool = False
    item_char_limited: bool = False
    failure: SourceFailure | None = None


def _newest_or_now(items: Sequence[CanonicalItem]) -> datetime:
    dated = [item.date for item in items if item.date is not None]
    return max(dated) if dated else datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Spreadsheets
# ---------------------------------------------------------------------------


def build_sheet_feed(
    tabs: Sequence[SheetTab],
    mode: str,
    sheet_title: str,
    sheet_id: str,
    request_url: str,
    item_limit: int,
    char_limit: int,
    max_rows: int = MAX_SHEET_ROWS,
    group_by_feed: bool = False,
) -> Feed:
    """Build a feed from one or more worksheet tabs.

    Each tab is capped at *max_rows* rows, adapted in *mode* (unknown modes
    fall back to auto), limited on its own, then merged with the others.
    """
    if get_adapter_class(mode) is None:
        logger.warning("Unknown mode %r, using %s", mode, DEFAULT_MODE)
        mode = DEFAULT_MODE
    adapter = adapter_for_mode(mode)
    sheet_link = SHEET_URL.format(sheet_id)
    multi = len(tabs) > 1

    per_tab: list[list[CanonicalItem]] = []
    count_limited = char_limited = False
    for tab in tabs:
        parsed = adapter.parse(list(tab.rows)[:max_rows])
        limited = apply_limits(parsed.items, item_limit, char_limit)
        count_limited |= limited.item_count_limited
        char_limited |= limited.item_char_limited
        items = limited.items
        if multi:
            items = tag_source(items, SourceInfo(title=tab.name, url=sheet_link, dialect="sheet"))
        per_tab.append(items)

    items = merge_sources(per_tab, group_by_feed=group_by_feed)
    title = title_or_placeholder(sheet_title)
    metadata = FeedMetadata(
        title=title,
        link=sheet_link,
        feed_url=request_url,
        description=f"Feed generated from Google Sheet '{title}' ({mode} mode)",
        last_build_date=_newest_or_now(items),
        generator=GENERATOR,
        id=f"urn:crssnt:sheet:{sheet_id}",
        item_count_limited=count_limited,
        item_char_limited=char_limited,
        group_by_feed=group_by_feed and multi,
    )
    logger.info("Built sheet feed %s with %d items from %d tabs", sheet_id, len(items), len(tabs))
    return Feed(metadata=metadata, items=tuple(items))


# ---------------------------------------------------------------------------
# External feeds
# ---------------------------------------------------------------------------


def _load_source(url: str, fetch: Fetcher, item_limit: int, char_limit: int) -> SourceResult:
    """Fetch, adapt and limit one source. Never raises."""
    try:
        parsed = FeedAdapter(url).parse(fetch(url))
    except Exception as exc:
        logger.exception("Failed to load feed %s", url)
        return SourceResult(url=url, failure=SourceFailure(url=url, error=str(exc)))
    limited = apply_limits(parsed.items, item_limit, char_limit)
    return SourceResult(
        url=url,
        parsed=parsed,
        items=limited.items,
        item_count_limited=limited.item_count_limited,
        item_char_limited=limited.item_char_limited,
    )


def fetch_sources(
    urls: Sequence[str],
    item_limit: int,
    char_limit: int,
    fetch: Fetcher = fetch_feed_text,
    max_workers: int = MAX_SOURCES,
) -> list[SourceResult]:
    """Load every source concurrently; results come back in *urls* order."""
    if not urls:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(len(urls), max_workers))) as executor:
        futures = [
            executor.submit(_load_source, url, fetch, item_limit, char_limit) for url in urls
        ]
        return [future.result() for future in futures]


def build_multi_feed(
    urls: Sequence[str],
    item_limit: int,
    char_limit: int,
    group_by_feed: bool = False,
    fetch: Fetcher = fetch_feed_text,
    max_sources: int = MAX_SOURCES,
    request_url: str = "",
) -> Feed:
    """Aggregate up to *max_sources* RSS/Atom feeds into one feed.

    Failed sources are dropped. Raises NoSourcesAvailable only when all of
    them fail, TooManySources when the URL gate is exceeded, and ValueError
    for an empty URL list.
    """
    urls = list(urls)
    if not urls:
        raise ValueError("At least one source URL is required")
    if len(urls) > max_sources:
        raise TooManySources(len(urls), max_sources)

    results = fetch_sources(urls, item_limit, char_limit, fetch=fetch, max_workers=max_sources)
    succeeded = [r for r in results if r.failure is None]
    failures = [r.failure for r in results if r.failure is not None]
    for failure in failures:
        logger.warning("Dropping source %s: %s", failure.url, failure.error)
    if not succeeded:
        raise NoSourcesAvailable(failures)

    aggregate = len(urls) > 1
    per_source: list[list[CanonicalItem]] = []
    for result in succeeded:
        items = result.items
        if aggregate:
            info = SourceInfo(
                title=result.parsed.metadata.title,
                url=result.url,
                dialect=result.parsed.dialect,
            )
            items = tag_source(items, info)
        per_source.append(items)

    grouped = group_by_feed and aggregate
    items = merge_sources(per_source, group_by_feed=grouped)
    metadata = combine_metadata(urls, succeeded, items, grouped, request_url)
    logger.info(
        "Built feed from %d/%d sources with %d items", len(succeeded), len(urls), len(items)
    )
    return Feed(metadata=metadata, items=tuple(items))


def combine_metadata(
    urls: Sequence[str],
    succeeded: Sequence[SourceResult],
    items: Sequence[CanonicalItem],
    group_by_feed: bool,
    request_url: str = "",
) -> FeedMetadata:
    """Summarize the sources behind a feed.

    A single requested URL passes its own metadata through; several URLs
    get aggregate wording and an id derived from the URL list.
    """
    count_limited = any(r.item_count_limited for r in succeeded)
    char_limited = any(r.item_char_limited for r in succeeded)

    if len(urls) == 1:
        source = succeeded[0].parsed.metadata
        return FeedMetadata(
            title=source.title,
            link=source.link,
            feed_url=request_url or source.feed_url,
            description=source.description,
            last_build_date=source.last_build_date,
            language=source.language,
            generator=GENERATOR,
            id=source.id,
            item_count_limited=count_limited,
            item_char_limited=char_limited,
        )

    titles = [r.parsed.metadata.title for r in succeeded]
    languages = {r.parsed.metadata.language for r in succeeded}
    build_dates = [
        r.parsed.metadata.last_build_date
        for r in succeeded
        if r.parsed.metadata.last_build_date is not None
    ]
    digest = hashlib.sha256("\0".join(urls).encode("utf-8")).hexdigest()[:16]
    description = f"Aggregated from {len(succeeded)} of {len(urls)} feeds: {', '.join(titles)}"
    return FeedMetadata(
        title=f"Combined feed ({len(succeeded)} sources)",
        link=request_url or urls[0],
        feed_url=request_url,
        description=description,
        last_build_date=max(build_dates) if build_dates else _newest_or_now(items),
        language=languages.pop() if len(languages) == 1 else None,
        generator=GENERATOR,
        id=f"urn:crssnt:aggregate:{digest}",
        item_count_limited=count_limited,
        item_char_limited=char_limited,
        group_by_feed=group_by_feed,
    )
