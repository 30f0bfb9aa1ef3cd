"""Spreadsheet row adapters — heuristic (auto) and header-driven (manual)."""

from __future__ import annotations

import logging
from typing import Sequence

from crssnt.feed.aggregate import sort_items
from crssnt.ingestion.adapter import ParsedSource, SourceAdapter
from crssnt.ingestion.dates import parse_date
from crssnt.ingestion.normalize import (
    cell_text,
    is_blank_row,
    is_http_url,
    sanitize_tag,
    title_or_placeholder,
)
from crssnt.models import CanonicalItem

logger = logging.getLogger(__name__)

Rows = Sequence[Sequence[object]]

# Canonical field -> accepted header names (lowercase). First match wins.
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "link": ("link", "url", "uri", "href"),
    "description": ("description", "desc", "summary", "content", "content:encoded"),
    "date": ("pubdate", "date", "published", "updated", "timestamp", "created"),
}

_ALIAS_LOOKUP: dict[str, str] = {
    alias: canonical for canonical, aliases in HEADER_ALIASES.items() for alias in aliases
}


def _valid_rows(rows: Rows | None) -> list[Sequence[object]]:
    if not rows:
        return []
    return [row for row in rows if isinstance(row, (list, tuple))]


class AutoRowAdapter(SourceAdapter):
    """Guesses title, link, date and description from unlabeled rows."""

    @property
    def name(self) -> str:
        return "auto"

    def parse(self, raw: Rows | None) -> ParsedSource:
        items: list[CanonicalItem] = []
        for row in _valid_rows(raw):
            item = self._parse_row(row)
            if item is not None:
                items.append(item)
        logger.debug("Auto mode produced %d items", len(items))
        return ParsedSource(items=sort_items(items))

    @staticmethod
    def _parse_row(row: Sequence[object]) -> CanonicalItem | None:
        pool = [text for text in (cell_text(cell) for cell in row) if text]
        if not pool:
            return None

        title = pool.pop(0)

        link = None
        for idx, text in enumerate(pool):
            if is_http_url(text):
                link = pool.pop(idx)
                break

        date = None
        for idx, text in enumerate(pool):
            date = parse_date(text)
            if date is not None:
                pool.pop(idx)
                break

        return CanonicalItem(
            title=title,
            link=link,
            date=date,
            description=" ".join(pool),
        )


class ManualRowAdapter(SourceAdapter):
    """Maps columns to fields through the header row (row 0)."""

    @property
    def name(self) -> str:
        return "manual"

    def parse(self, raw: Rows | None) -> ParsedSource:
        rows = _valid_rows(raw)
        if not rows or is_blank_row(rows[0]):
            logger.warning("Manual mode needs a header row; no items produced")
            return ParsedSource()

        columns, custom_columns = map_header(rows[0])
        items: list[CanonicalItem] = []
        for row in rows[1:]:
            if is_blank_row(row):
                continue
            items.append(self._parse_row(row, columns, custom_columns))
        logger.debug("Manual mode produced %d items", len(items))
        return ParsedSource(items=sort_items(items))

    @staticmethod
    def _parse_row(
        row: Sequence[object],
        columns: dict[str, int],
        custom_columns: list[tuple[int, str]],
    ) -> CanonicalItem:
        def cell(idx: int | None) -> str:
            if idx is None or idx >= len(row):
                return ""
            return cell_text(row[idx])

        link = cell(columns.get("link"))
        custom_fields = {}
        for idx, key in custom_columns:
            value = cell(idx)
            if value:
                custom_fields[key] = value

        return CanonicalItem(
            title=title_or_placeholder(cell(columns.get("title"))),
            link=link if is_http_url(link) else None,
            date=parse_date(cell(columns.get("date"))),
            description=cell(columns.get("description")),
            custom_fields=custom_fields,
        )


def map_header(header: Sequence[object]) -> tuple[dict[str, int], list[tuple[int, str]]]:
    """Split a header row into canonical columns and custom-field slots.

    Returns ``(columns, custom_columns)``: ``columns`` maps each canonical
    field to the index of the first header naming it; ``custom_columns``
    lists ``(index, sanitized_key)`` for every other non-blank header.
    Colliding sanitized keys get ``_2``, ``_3``, ... suffixes.
    """
    columns: dict[str, int] = {}
    custom_columns: list[tuple[int, str]] = []
    used_keys: set[str] = set()

    for idx, raw_name in enumerate(header):
        name = cell_text(raw_name)
        if not name:
            continue
        canonical = _ALIAS_LOOKUP.get(name.lower())
        if canonical is not None and canonical not in columns:
            columns[canonical] = idx
            continue
        if canonical is not None:
            # A second column for an already claimed field is kept as custom data.
            logger.debug("Duplicate %s column %r kept as custom field", canonical, name)

        key = base = sanitize_tag(name)
        suffix = 2
        while key in used_keys:
            key = f"{base}_{suffix}"
            suffix += 1
        used_keys.add(key)
        custom_columns.append((idx, key))

    return columns, custom_columns
