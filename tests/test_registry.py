"""Tests for crssnt.ingestion.registry — mode registry."""

from __future__ import annotations

from crssnt.ingestion import AutoRowAdapter, ManualRowAdapter
from crssnt.ingestion.adapter import ParsedSource, SourceAdapter
from crssnt.ingestion.registry import (
    _REGISTRY,
    adapter_for_mode,
    get_adapter_class,
    register_adapter,
    registered_modes,
)


class _DummyAdapter(SourceAdapter):
    @property
    def name(self) -> str:
        return "dummy"

    def parse(self, raw):
        return ParsedSource(items=[])


class TestRegistry:
    def setup_method(self):
        self._original = dict(_REGISTRY)

    def teardown_method(self):
        _REGISTRY.clear()
        _REGISTRY.update(self._original)

    def test_register_and_lookup(self):
        register_adapter("dummy", _DummyAdapter)
        assert get_adapter_class("dummy") is _DummyAdapter

    def test_lookup_is_case_insensitive(self):
        register_adapter("Dummy", _DummyAdapter)
        assert get_adapter_class("DUMMY") is _DummyAdapter

    def test_lookup_unknown_returns_none(self):
        assert get_adapter_class("nonexistent") is None
        assert get_adapter_class(None) is None

    def test_registered_modes_sorted(self):
        register_adapter("zzz", _DummyAdapter)
        register_adapter("aaa", _DummyAdapter)
        modes = registered_modes()
        assert modes[0] == "aaa"
        assert "zzz" in modes

    def test_builtin_modes_registered(self):
        assert get_adapter_class("auto") is AutoRowAdapter
        assert get_adapter_class("manual") is ManualRowAdapter

    def test_adapter_for_mode_instantiates(self):
        assert isinstance(adapter_for_mode("manual"), ManualRowAdapter)

    def test_adapter_for_unknown_mode_falls_back_to_auto(self):
        assert isinstance(adapter_for_mode("bogus"), AutoRowAdapter)
        assert isinstance(adapter_for_mode(None), AutoRowAdapter)
