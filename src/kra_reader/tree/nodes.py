"""Layer and mask nodes.

A document's layer stack is a tree of ``Node`` objects. There are twelve
concrete node kinds, seven layers and five masks:

- Layers: ``PaintLayer``, ``GroupLayer``, ``FileLayer``, ``FilterLayer``,
  ``FillLayer``, ``CloneLayer``, ``VectorLayer``
- Masks: ``TransparencyMask``, ``FilterMask``, ``TransformMask``,
  ``SelectionMask``, ``ColorizeMask``

Only group layers own child layers, and only the remaining layer kinds
(the "paintable" layers) own masks. Masks never own anything.

Every node carries the common attributes declared on ``Node``. Which other
attributes a node carries depends on its kind; the capability properties
(``is_layer``, ``has_composite_op``, ...) tell callers what is available
and ``Node.get()`` reads an attribute that may not exist on every kind::

    for node in kra.walk():
        if node.has_composite_op:
            print(node.name, node.composite_op)
        masks = node.get("masks")  # None for masks and group layers

All nodes are immutable; child sequences are tuples.
"""

from dataclasses import dataclass, fields
from pathlib import PurePath
from typing import Any, ClassVar, Iterator, Optional, Tuple
from uuid import UUID

from .enums import Colorspace, CompositeOp, InTimeline


class LayerNode:
    """Marker for layer kinds. Layers have ``collapsed`` and ``opacity``."""


class MaskNode:
    """Marker for mask kinds."""


class PaintableLayerNode(LayerNode):
    """Marker for layers that own masks and have ``channel_flags``."""


class CompositeOpNode:
    """Marker for kinds that carry a ``composite_op``."""


class ColorspaceNode:
    """Marker for kinds that carry a ``colorspace``."""


class FilterNode:
    """Marker for kinds with ``filter_name`` and ``filter_version``."""


@dataclass(frozen=True)
class Node:
    """Attributes common to every layer and mask."""

    name: str
    uuid: UUID
    filename: str
    visible: bool
    locked: bool
    colorlabel: int
    x: int
    y: int
    in_timeline: InTimeline

    nodetype: ClassVar[str] = ""

    @property
    def is_layer(self) -> bool:
        return isinstance(self, LayerNode)

    @property
    def is_mask(self) -> bool:
        return isinstance(self, MaskNode)

    @property
    def is_paintable_layer(self) -> bool:
        """Can the node be painted on; if so it owns masks."""
        return isinstance(self, PaintableLayerNode)

    @property
    def is_filter(self) -> bool:
        return isinstance(self, FilterNode)

    @property
    def has_composite_op(self) -> bool:
        return isinstance(self, CompositeOpNode)

    @property
    def has_colorspace(self) -> bool:
        return isinstance(self, ColorspaceNode)

    def get(self, attribute: str, default: Any = None) -> Any:
        """Read ``attribute`` if this kind of node carries it.

        Returns ``default`` (None unless given) for attributes the node kind
        does not have, e.g. ``mask.get("masks")``.
        """
        if attribute in self.__dataclass_fields__:
            return getattr(self, attribute)
        return default

    def attribute_names(self) -> Tuple[str, ...]:
        """Names of all attributes this node carries, common ones first."""
        return tuple(f.name for f in fields(self))

    @property
    def children(self) -> Tuple["Node", ...]:
        """Directly owned nodes: child layers of a group, masks of a layer."""
        return ()

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all nodes it owns, depth first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_by_uuid(self, identifier: UUID) -> Optional["Node"]:
        """Find a node with the given identifier in this subtree."""
        for node in self.walk():
            if node.uuid == identifier:
                return node
        return None

    def __str__(self) -> str:
        return f"{self.name} ({self.nodetype})"


# Layers


@dataclass(frozen=True)
class PaintLayer(Node, PaintableLayerNode, CompositeOpNode, ColorspaceNode):
    """Raster layer."""

    composite_op: CompositeOp
    opacity: int
    collapsed: bool
    colorspace: Colorspace
    channel_lock_flags: str
    channel_flags: str
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "paintlayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


@dataclass(frozen=True)
class GroupLayer(Node, LayerNode, CompositeOpNode):
    """Composite of other layers."""

    composite_op: CompositeOp
    collapsed: bool
    passthrough: bool
    opacity: int
    layers: Tuple[Node, ...]

    nodetype: ClassVar[str] = "grouplayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.layers


@dataclass(frozen=True)
class FileLayer(Node, PaintableLayerNode, CompositeOpNode, ColorspaceNode):
    """Layer showing an image file external to the archive."""

    collapsed: bool
    scaling_filter: str
    scale: bool
    composite_op: CompositeOp
    opacity: int
    colorspace: Colorspace
    scaling_method: int
    source: PurePath
    channel_flags: str
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "filelayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


@dataclass(frozen=True)
class FilterLayer(Node, PaintableLayerNode, CompositeOpNode, FilterNode):
    """Filter layer, written as ``adjustmentlayer``."""

    filter_name: str
    filter_version: int
    channel_flags: str
    collapsed: bool
    composite_op: CompositeOp
    opacity: int
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "adjustmentlayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


@dataclass(frozen=True)
class FillLayer(Node, PaintableLayerNode, CompositeOpNode):
    """Fill layer, written as ``generatorlayer``."""

    opacity: int
    composite_op: CompositeOp
    generator_name: str
    generator_version: int
    channel_flags: str
    collapsed: bool
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "generatorlayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


@dataclass(frozen=True)
class CloneLayer(Node, PaintableLayerNode, CompositeOpNode):
    """Layer that shows another layer, referenced by name and by identifier."""

    clone_type: int
    clone_from: str
    composite_op: CompositeOp
    opacity: int
    clone_from_uuid: UUID
    channel_flags: str
    collapsed: bool
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "clonelayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


@dataclass(frozen=True)
class VectorLayer(Node, PaintableLayerNode, CompositeOpNode):
    """Vector layer, written as ``shapelayer``."""

    composite_op: CompositeOp
    opacity: int
    channel_flags: str
    collapsed: bool
    masks: Tuple[Node, ...]

    nodetype: ClassVar[str] = "shapelayer"

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.masks


# Masks


@dataclass(frozen=True)
class TransparencyMask(Node, MaskNode):
    nodetype: ClassVar[str] = "transparencymask"


@dataclass(frozen=True)
class TransformMask(Node, MaskNode):
    nodetype: ClassVar[str] = "transformmask"


@dataclass(frozen=True)
class FilterMask(Node, MaskNode, FilterNode):
    filter_name: str
    filter_version: int

    nodetype: ClassVar[str] = "filtermask"


@dataclass(frozen=True)
class SelectionMask(Node, MaskNode):
    active: bool

    nodetype: ClassVar[str] = "selectionmask"


@dataclass(frozen=True)
class ColorizeMask(Node, MaskNode, CompositeOpNode, ColorspaceNode):
    """Colorize mask, the only mask with a blend mode and colorspace."""

    limit_to_device: bool
    show_coloring: bool
    cleanup: int
    use_edge_detection: bool
    edge_detection_size: int
    fuzzy_radius: int
    edit_keystrokes: bool
    composite_op: CompositeOp
    colorspace: Colorspace

    nodetype: ClassVar[str] = "colorizemask"


LAYER_TYPES = (
    PaintLayer,
    GroupLayer,
    FileLayer,
    FilterLayer,
    FillLayer,
    CloneLayer,
    VectorLayer,
)

MASK_TYPES = (
    TransparencyMask,
    FilterMask,
    TransformMask,
    SelectionMask,
    ColorizeMask,
)
