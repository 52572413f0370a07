"""Integration adapters for handing parsed documents to other libraries.

Adapters import their target library lazily, so kra_reader itself never
requires it; ``is_available()`` reports whether an adapter can be used.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from kra_reader.shared import get_logger
from kra_reader.tree import Node

from .reader import KraFile

MS_PER_SECOND = 1000

LAYER_TABLE_COLUMNS = [
    "depth",
    "path",
    "parent_uuid",
    "nodetype",
    "is_layer",
    "is_mask",
    "name",
    "uuid",
    "filename",
    "visible",
    "locked",
    "colorlabel",
    "x",
    "y",
    "in_timeline",
    "onionskin",
    "composite_op",
    "opacity",
]


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    target_library: str
    supported_versions: List[str]
    description: str
    author: str = "kra-reader"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(self) -> None:
        self._logger = get_logger(__name__, component=self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library is available."""

    @abstractmethod
    def to_target(self, kra: KraFile) -> ConversionResult:
        """Convert a parsed document to the target format."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        self._logger.warning(error_message, extra={"adapter": self.metadata.name})
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
        )


def iter_rows(kra: KraFile) -> Iterator[Dict[str, Any]]:
    """Yield one flat record per node, depth first in document order.

    ``path`` joins the names from the top-level layer down to the node with
    ``/``. Attributes a node kind does not carry are None.
    """

    def visit(node: Node, depth: int, parent: Optional[Node], prefix: str) -> Iterator[Dict[str, Any]]:
        path = f"{prefix}/{node.name}"
        composite_op = node.get("composite_op")
        yield {
            "depth": depth,
            "path": path,
            "parent_uuid": str(parent.uuid) if parent is not None else None,
            "nodetype": node.nodetype,
            "is_layer": node.is_layer,
            "is_mask": node.is_mask,
            "name": node.name,
            "uuid": str(node.uuid),
            "filename": node.filename,
            "visible": node.visible,
            "locked": node.locked,
            "colorlabel": node.colorlabel,
            "x": node.x,
            "y": node.y,
            "in_timeline": node.in_timeline.is_shown,
            "onionskin": node.in_timeline.onionskin,
            "composite_op": composite_op.value if composite_op is not None else None,
            "opacity": node.get("opacity"),
        }
        for child in node.children:
            yield from visit(child, depth + 1, node, path)

    for layer in kra.layers:
        yield from visit(layer, 0, None, "")


class PandasAdapter(IntegrationAdapter):
    """Adapter that flattens the layer tree into a pandas DataFrame."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            target_library="pandas",
            supported_versions=["1.0+"],
            description="Layer table with one row per layer or mask"
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, kra: KraFile) -> ConversionResult:
        """Convert a parsed document to a DataFrame.

        Args:
            kra: Parsed document

        Returns:
            ConversionResult containing a DataFrame with ``LAYER_TABLE_COLUMNS``
        """
        start_time = time.time()

        try:
            import pandas as pd
        except ImportError:
            return self._create_error_result(
                "pandas is not installed",
                kra,
                (time.time() - start_time) * MS_PER_SECOND
            )

        df = pd.DataFrame(list(iter_rows(kra)), columns=LAYER_TABLE_COLUMNS)
        processing_time = (time.time() - start_time) * MS_PER_SECOND

        self._logger.debug(
            "Converted layer tree to DataFrame",
            extra={"row_count": len(df), "image_name": kra.meta.name}
        )
        return ConversionResult(
            success=True,
            converted_data=df,
            original_data=kra,
            conversion_time_ms=processing_time,
            metadata={
                "dataframe_shape": df.shape,
                "row_count": len(df),
                "columns": list(df.columns),
            }
        )


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "pandas": PandasAdapter,
}


def get_adapter(adapter_name: str) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name, or None if unknown or unavailable."""
    adapter_class = _ADAPTERS.get(adapter_name)
    if adapter_class is None:
        return None
    adapter = adapter_class()
    return adapter if adapter.is_available() else None


def list_available_adapters() -> Tuple[str, ...]:
    """Names of adapters whose target library is installed."""
    return tuple(name for name, cls in _ADAPTERS.items() if cls().is_available())
