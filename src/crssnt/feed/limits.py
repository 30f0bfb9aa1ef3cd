"""Item-count and description-length ceilings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence

from crssnt.models import CanonicalItem

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


@dataclass(frozen=True)
class LimitResult:
    """Items after limiting, plus the flags recording what was cut."""

    items: list[CanonicalItem] = field(default_factory=list)
    item_count_limited: bool = False
    item_char_limited: bool = False


def _check_limit(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def apply_limits(
    items: Sequence[CanonicalItem], item_limit: int, char_limit: int
) -> LimitResult:
    """Cut an already sorted list to *item_limit* entries and every
    description to *char_limit* characters (plus an ellipsis).

    Raises ValueError for limits below 1.
    """
    _check_limit("item_limit", item_limit)
    _check_limit("char_limit", char_limit)

    count_limited = len(items) > item_limit
    kept = list(items[:item_limit])
    if count_limited:
        logger.info("Item limit %d applied, dropped %d items", item_limit, len(items) - item_limit)

    char_limited = False
    limited: list[CanonicalItem] = []
    for item in kept:
        if len(item.description) > char_limit:
            item = replace(item, description=item.description[:char_limit] + ELLIPSIS)
            char_limited = True
        limited.append(item)

    return LimitResult(
        items=limited,
        item_count_limited=count_limited,
        item_char_limited=char_limited,
    )
