"""Deterministic item identifiers: explicit id, then link, then a content hash."""

from __future__ import annotations

import hashlib
import unicodedata

from crssnt.ingestion.normalize import is_http_url
from crssnt.models import CanonicalItem

DEFAULT_ID_PREFIX = "urn:crssnt:item"


def _normalize_text(text: str) -> str:
    """Unicode NFC normalization, so equal-looking text hashes equally."""
    return unicodedata.normalize("NFC", text)


def compute_fingerprint(title: str, description: str, timestamp: str | None = None) -> str:
    """Compute a SHA-256 hex digest over title, description and timestamp.

    Fields are joined with a null byte separator to avoid ambiguous
    concatenations. ``timestamp`` is only part of the input when it is not
    None, so ``""`` (an undated item) and None produce different digests.
    """
    parts = [_normalize_text(title), _normalize_text(description)]
    if timestamp is not None:
        parts.append(timestamp)
    combined = "\0".join(parts)
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def fingerprint_id(feed_id: str | None, digest: str) -> str:
    """Prefix *digest* with the owning feed's id."""
    if not feed_id:
        return f"{DEFAULT_ID_PREFIX}:{digest}"
    if feed_id.startswith("urn:"):
        return f"{feed_id}:{digest}"
    return f"{feed_id}#{digest}"


def resolve_item_id(
    item: CanonicalItem, feed_id: str | None, include_timestamp: bool = False
) -> str:
    """Resolve the identifier an item is published under.

    Order: the source's own id/guid, an absolute http(s) link, then a
    content fingerprint. Formats that need a non-null id for every entry
    (Atom, JSON Feed) pass ``include_timestamp=True``; the timestamp is the
    item's own date, empty when it has none, so the id never depends on the
    time of rendering.
    """
    if item.id and item.id.strip():
        return item.id.strip()
    if is_http_url(item.link):
        return item.link
    timestamp = None
    if include_timestamp:
        timestamp = item.date.isoformat() if item.date is not None else ""
    return fingerprint_id(feed_id, compute_fingerprint(item.title, item.description, timestamp))
