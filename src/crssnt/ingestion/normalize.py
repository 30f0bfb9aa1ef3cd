"""Normalization helpers shared by the source adapters."""

from __future__ import annotations

import re
from html import unescape

PLACEHOLDER_TITLE = "(Untitled)"

_HTTP_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_TAG_CHARS_RE = re.compile(r"[^A-Za-z0-9_:-]")


def cell_text(value: object) -> str:
    """Return the stripped text of a spreadsheet cell; None becomes ''."""
    if value is None:
        return ""
    return str(value).strip()


def is_blank_row(row: list | tuple) -> bool:
    """True when every cell of *row* is empty or whitespace."""
    return all(not cell_text(cell) for cell in row)


def is_http_url(value: str | None) -> bool:
    """True for absolute http(s) URIs."""
    return bool(value) and _HTTP_URL_RE.match(value) is not None


def title_or_placeholder(title: str | None) -> str:
    """Never let a blank title through."""
    title = (title or "").strip()
    return title or PLACEHOLDER_TITLE


def sanitize_tag(name: str) -> str:
    """Turn arbitrary header text into a tag name usable in generated markup.

    Every character outside ``[A-Za-z0-9_:-]`` becomes ``_``. A result that
    does not start with a letter or underscore is prefixed with ``_``, so the
    empty string maps to ``_``.
    """
    tag = _UNSAFE_TAG_CHARS_RE.sub("_", name.strip())
    if not tag or not (tag[0].isalpha() or tag[0] == "_"):
        tag = "_" + tag
    return tag


def strip_html(text: str) -> str:
    """Remove HTML tags, unescape entities and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", unescape(_HTML_TAG_RE.sub(" ", text))).strip()
