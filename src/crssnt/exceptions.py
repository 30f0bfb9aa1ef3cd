"""Domain exceptions."""

from __future__ import annotations


class SourceUnavailable(Exception):
    """Raised when a source cannot be fetched (transport or HTTP failure)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Source unavailable: {url} ({reason})")
        self.url = url
        self.reason = reason


class NoSourcesAvailable(Exception):
    """Raised when every requested source failed."""

    def __init__(self, failures: list) -> None:
        urls = ", ".join(f.url for f in failures)
        super().__init__(f"No source produced any data: {urls}")
        self.failures = failures


class TooManySources(ValueError):
    """Raised when more source URLs are requested than allowed."""

    def __init__(self, requested: int, allowed: int) -> None:
        super().__init__(f"Too many sources: {requested} requested, at most {allowed} allowed")
        self.requested = requested
        self.allowed = allowed
