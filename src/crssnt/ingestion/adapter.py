"""Source adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from crssnt.models import CanonicalItem, FeedMetadata


@dataclass(frozen=True)
class ParsedSource:
    """What an adapter hands back: sorted items plus optional feed metadata.

    Row adapters have no metadata of their own; the XML adapter always
    provides it, placeholder metadata included.
    """

    items: list[CanonicalItem] = field(default_factory=list)
    metadata: FeedMetadata | None = None
    dialect: str = "sheet"


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter turns one kind of already-fetched raw data into canonical
    items. The rest of the system is source-agnostic.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable adapter name."""

    @abstractmethod
    def parse(self, raw) -> ParsedSource:
        """Convert raw source data into canonical items.

        Malformed or empty input yields an empty ``ParsedSource``; adapters
        do not raise for bad data.
        """
