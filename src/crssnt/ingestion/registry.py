"""Adapter registry — maps row-interpretation modes to adapter classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crssnt.ingestion.adapter import SourceAdapter

DEFAULT_MODE = "auto"

_REGISTRY: dict[str, type[SourceAdapter]] = {}


def register_adapter(mode: str, cls: type[SourceAdapter]) -> None:
    """Register an adapter class under a mode name (case-insensitive)."""
    _REGISTRY[mode.lower()] = cls


def get_adapter_class(mode: str) -> type[SourceAdapter] | None:
    """Look up an adapter class by mode. Returns None if not found."""
    return _REGISTRY.get((mode or "").lower())


def adapter_for_mode(mode: str | None) -> SourceAdapter:
    """Instantiate the adapter for *mode*, falling back to the default mode."""
    cls = get_adapter_class(mode or DEFAULT_MODE) or _REGISTRY[DEFAULT_MODE]
    return cls()


def registered_modes() -> list[str]:
    """Return a sorted list of all registered mode names."""
    return sorted(_REGISTRY)
