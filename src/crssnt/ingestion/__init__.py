"""Ingestion — source adapters that turn raw rows and XML into canonical items."""

from crssnt.ingestion.registry import register_adapter
from crssnt.ingestion.sheet_adapter import AutoRowAdapter, ManualRowAdapter

register_adapter("auto", AutoRowAdapter)
register_adapter("manual", ManualRowAdapter)
