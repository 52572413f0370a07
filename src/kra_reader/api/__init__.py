"""Public entry points for reading ``.kra`` archives.

Key Components:
    read_kra: Open and parse an archive
    KraFile: Parsed document with metadata, layer tree and optional payloads
    PandasAdapter: Optional layer table export
"""

from .adapters import (
    AdapterMetadata,
    ConversionResult,
    IntegrationAdapter,
    PandasAdapter,
    get_adapter,
    iter_rows,
    list_available_adapters,
)
from .reader import KraFile, read_kra

__all__ = [
    "AdapterMetadata",
    "ConversionResult",
    "IntegrationAdapter",
    "KraFile",
    "PandasAdapter",
    "get_adapter",
    "iter_rows",
    "list_available_adapters",
    "read_kra",
]
