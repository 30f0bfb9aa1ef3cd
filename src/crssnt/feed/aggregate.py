"""Merging per-source item lists and ordering them newest first."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from crssnt.models import CanonicalItem, SourceInfo

logger = logging.getLogger(__name__)


def _sort_key(item: CanonicalItem) -> tuple[int, float]:
    if item.date is None:
        return (1, 0.0)
    return (0, -item.date.timestamp())


def sort_items(items: Iterable[CanonicalItem]) -> list[CanonicalItem]:
    """Return *items* newest first, undated items last.

    ``sorted`` is stable, so undated items (and items sharing a timestamp)
    keep their original relative order.
    """
    return sorted(items, key=_sort_key)


def tag_source(items: Iterable[CanonicalItem], info: SourceInfo) -> list[CanonicalItem]:
    """Attach origin information to every item of one source."""
    return [replace(item, source_info=info) for item in items]


def merge_sources(
    sources: Sequence[Sequence[CanonicalItem]], group_by_feed: bool = False
) -> list[CanonicalItem]:
    """Concatenate per-source lists in the given order.

    Without grouping the result is re-sorted globally. With grouping (and
    more than one source) the concatenation is returned as is, each source
    already being sorted on its own.
    """
    merged = [item for items in sources for item in items]
    if group_by_feed and len(sources) > 1:
        logger.debug("Keeping %d items grouped by %d sources", len(merged), len(sources))
        return merged
    return sort_items(merged)
