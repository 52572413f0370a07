"""Raw per-node payloads stored next to ``maindoc.xml``.

Each node names its payload with its ``filename`` attribute; the payload
lives at ``<image name>/layers/<filename>`` inside the archive. Payloads are
kept as the archive stores them; nothing here decodes pixels or vectors.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from kra_reader.tree.nodes import (
    CloneLayer,
    ColorizeMask,
    FileLayer,
    FillLayer,
    FilterLayer,
    FilterMask,
    GroupLayer,
    Node,
    PaintLayer,
    SelectionMask,
    TransformMask,
    TransparencyMask,
    VectorLayer,
)


class NodeDataState(Enum):
    """Availability of a node's payload."""

    DOES_NOT_EXIST = auto()  # Clone and file layers have no payload
    UNLOADED = auto()        # Not read, or absent from the archive
    LOADED = auto()          # Raw bytes are in memory


class DataKind(Enum):
    """What kind of content a payload holds."""

    IMAGE = auto()
    VECTOR = auto()
    FILTER = auto()
    COLORIZE_MASK = auto()
    TRANSFORM_MASK = auto()
    TRANSPARENCY_MASK = auto()
    SELECTION_MASK = auto()


_DATA_KINDS = {
    PaintLayer: DataKind.IMAGE,
    GroupLayer: DataKind.IMAGE,
    FilterLayer: DataKind.FILTER,
    FillLayer: DataKind.FILTER,
    VectorLayer: DataKind.VECTOR,
    FilterMask: DataKind.FILTER,
    ColorizeMask: DataKind.COLORIZE_MASK,
    TransformMask: DataKind.TRANSFORM_MASK,
    TransparencyMask: DataKind.TRANSPARENCY_MASK,
    SelectionMask: DataKind.SELECTION_MASK,
}

_WITHOUT_DATA = (CloneLayer, FileLayer)


def data_kind(node: Node) -> Optional[DataKind]:
    """Kind of payload ``node`` refers to, or None if it has none."""
    if isinstance(node, _WITHOUT_DATA):
        return None
    return _DATA_KINDS[type(node)]


def payload_path(image_name: str, node: Node) -> str:
    """Archive member name of the payload of ``node``."""
    return f"{image_name}/layers/{node.filename}"


@dataclass(frozen=True)
class NodeData:
    """The payload a node refers to via its ``filename``."""

    state: NodeDataState
    kind: Optional[DataKind] = None
    path: Optional[str] = None
    content: Optional[bytes] = None

    def __post_init__(self) -> None:
        """Validate node data."""
        if self.state is NodeDataState.LOADED and self.content is None:
            raise ValueError("Loaded node data must have content")
        if self.state is not NodeDataState.LOADED and self.content is not None:
            raise ValueError("Only loaded node data can have content")
        if self.state is NodeDataState.DOES_NOT_EXIST and self.kind is not None:
            raise ValueError("Node data that does not exist has no kind")

    @property
    def is_loaded(self) -> bool:
        return self.state is NodeDataState.LOADED

    @classmethod
    def does_not_exist(cls) -> "NodeData":
        return cls(state=NodeDataState.DOES_NOT_EXIST)

    @classmethod
    def unloaded(cls, kind: DataKind, path: str) -> "NodeData":
        return cls(state=NodeDataState.UNLOADED, kind=kind, path=path)

    @classmethod
    def loaded(cls, kind: DataKind, path: str, content: bytes) -> "NodeData":
        return cls(state=NodeDataState.LOADED, kind=kind, path=path, content=content)

    def __len__(self) -> int:
        return len(self.content) if self.content is not None else 0
