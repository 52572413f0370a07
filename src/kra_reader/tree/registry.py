"""Node schema registry.

Each of the twelve node kinds is described by a ``NodeKind``: the
``nodetype`` key it is written with, the class it decodes to, and the
ordered list of attributes the kind requires on top of the common ones.
Decoding a tag is a walk over that list; the first failing attribute
aborts the node.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Callable, Dict, Optional, Tuple, Type

from kra_reader.errors import MaskExpected, UnknownLayerType, XmlValueError
from kra_reader.tokenization import XmlEvent

from .attributes import (
    get_attribute,
    parse_bool,
    parse_i32,
    parse_string,
    parse_u8,
    parse_u32,
    parse_uuid,
    parse_word_bool,
)
from .enums import Colorspace, CompositeOp, InTimeline
from .nodes import (
    CloneLayer,
    ColorizeMask,
    FileLayer,
    FillLayer,
    FilterLayer,
    FilterMask,
    GroupLayer,
    MaskNode,
    Node,
    PaintableLayerNode,
    PaintLayer,
    SelectionMask,
    TransformMask,
    TransparencyMask,
    VectorLayer,
)

Decoder = Callable[[str], Any]


@dataclass(frozen=True)
class AttributeSpec:
    """One required attribute: where it is read from and how it is decoded."""

    xml_name: str
    field_name: str
    decoder: Decoder = parse_string

    def __post_init__(self) -> None:
        """Validate attribute spec."""
        if not self.xml_name:
            raise ValueError("Attribute XML name cannot be empty")
        if not self.field_name:
            raise ValueError("Attribute field name cannot be empty")

    def decode(self, tag: XmlEvent) -> Any:
        return self.decoder(get_attribute(tag, self.xml_name))


@dataclass(frozen=True)
class NodeKind:
    """Schema of one node kind."""

    nodetype: str
    node_class: Type[Node]
    attributes: Tuple[AttributeSpec, ...] = ()

    @property
    def is_mask(self) -> bool:
        return issubclass(self.node_class, MaskNode)

    @property
    def owns_masks(self) -> bool:
        return issubclass(self.node_class, PaintableLayerNode)

    @property
    def owns_layers(self) -> bool:
        return self.node_class is GroupLayer

    def decode(self, tag: XmlEvent) -> Dict[str, Any]:
        """Decode the kind-specific attributes of ``tag``, in schema order.

        Child sequences (masks, layers) are not attributes and are not
        decoded here.
        """
        return {spec.field_name: spec.decode(tag) for spec in self.attributes}


def parse_in_timeline(tag: XmlEvent) -> InTimeline:
    """Decode ``intimeline`` and, when shown, the required ``onionskin`` flag."""
    value = get_attribute(tag, "intimeline")
    if value == "0":
        return InTimeline.hidden()
    if value == "1":
        return InTimeline.shown(parse_bool(get_attribute(tag, "onionskin")))
    raise XmlValueError(value)


COMMON_ATTRIBUTES: Tuple[AttributeSpec, ...] = (
    AttributeSpec("name", "name"),
    AttributeSpec("uuid", "uuid", parse_uuid),
    AttributeSpec("filename", "filename"),
    AttributeSpec("visible", "visible", parse_bool),
    AttributeSpec("locked", "locked", parse_bool),
    AttributeSpec("colorlabel", "colorlabel", parse_u32),
    AttributeSpec("y", "y", parse_i32),
    AttributeSpec("x", "x", parse_i32),
)


def decode_common(tag: XmlEvent) -> Dict[str, Any]:
    """Decode the attributes every node carries."""
    common = {spec.field_name: spec.decode(tag) for spec in COMMON_ATTRIBUTES}
    common["in_timeline"] = parse_in_timeline(tag)
    return common


# Shared attribute specs
_COMPOSITE_OP = AttributeSpec("compositeop", "composite_op", CompositeOp.from_string)
_OPACITY = AttributeSpec("opacity", "opacity", parse_u8)
_COLLAPSED = AttributeSpec("collapsed", "collapsed", parse_bool)
_COLORSPACE = AttributeSpec("colorspacename", "colorspace", Colorspace.from_string)
_CHANNEL_FLAGS = AttributeSpec("channelflags", "channel_flags")
_FILTER_NAME = AttributeSpec("filtername", "filter_name")
_FILTER_VERSION = AttributeSpec("filterversion", "filter_version", parse_u32)


NODE_KINDS: Tuple[NodeKind, ...] = (
    NodeKind("grouplayer", GroupLayer, (
        _COMPOSITE_OP,
        _COLLAPSED,
        AttributeSpec("passthrough", "passthrough", parse_bool),
        _OPACITY,
    )),
    NodeKind("paintlayer", PaintLayer, (
        _CHANNEL_FLAGS,
        AttributeSpec("channellockflags", "channel_lock_flags"),
        _COLORSPACE,
        _COLLAPSED,
        _OPACITY,
        _COMPOSITE_OP,
    )),
    NodeKind("filelayer", FileLayer, (
        _COLLAPSED,
        AttributeSpec("scalingfilter", "scaling_filter"),
        AttributeSpec("scale", "scale", parse_word_bool),
        _COMPOSITE_OP,
        _OPACITY,
        _COLORSPACE,
        AttributeSpec("scalingmethod", "scaling_method", parse_u32),
        AttributeSpec("source", "source", PurePath),
        _CHANNEL_FLAGS,
    )),
    NodeKind("adjustmentlayer", FilterLayer, (
        _FILTER_NAME,
        _FILTER_VERSION,
        _CHANNEL_FLAGS,
        _COLLAPSED,
        _COMPOSITE_OP,
        _OPACITY,
    )),
    NodeKind("generatorlayer", FillLayer, (
        _OPACITY,
        _COMPOSITE_OP,
        AttributeSpec("generatorname", "generator_name"),
        AttributeSpec("generatorversion", "generator_version", parse_u32),
        _CHANNEL_FLAGS,
        _COLLAPSED,
    )),
    NodeKind("clonelayer", CloneLayer, (
        AttributeSpec("clonetype", "clone_type", parse_u32),
        AttributeSpec("clonefrom", "clone_from"),
        _COMPOSITE_OP,
        _OPACITY,
        AttributeSpec("clonefromuuid", "clone_from_uuid", parse_uuid),
        _CHANNEL_FLAGS,
        _COLLAPSED,
    )),
    NodeKind("shapelayer", VectorLayer, (
        _COMPOSITE_OP,
        _OPACITY,
        _CHANNEL_FLAGS,
        _COLLAPSED,
    )),
    NodeKind("transparencymask", TransparencyMask),
    NodeKind("transformmask", TransformMask),
    NodeKind("filtermask", FilterMask, (
        _FILTER_NAME,
        _FILTER_VERSION,
    )),
    NodeKind("selectionmask", SelectionMask, (
        AttributeSpec("active", "active", parse_bool),
    )),
    NodeKind("colorizemask", ColorizeMask, (
        AttributeSpec("limit-to-device", "limit_to_device", parse_bool),
        AttributeSpec("show-coloring", "show_coloring", parse_bool),
        AttributeSpec("cleanup", "cleanup", parse_u8),
        AttributeSpec("use-edge-detection", "use_edge_detection", parse_bool),
        AttributeSpec("edge-detection-size", "edge_detection_size", parse_u32),
        AttributeSpec("fuzzy-radius", "fuzzy_radius", parse_u32),
        AttributeSpec("edit-keystrokes", "edit_keystrokes", parse_bool),
        _COMPOSITE_OP,
        _COLORSPACE,
    )),
)

_KINDS_BY_NODETYPE: Dict[str, NodeKind] = {kind.nodetype: kind for kind in NODE_KINDS}


def lookup(nodetype: str, masks_only: bool = False) -> NodeKind:
    """Find the schema for a ``nodetype`` key.

    Args:
        nodetype: Value of the tag's ``nodetype`` attribute
        masks_only: Only accept mask kinds (used inside ``<masks>``)

    Raises:
        UnknownLayerType: If the key is unknown and ``masks_only`` is false.
        MaskExpected: If ``masks_only`` is true and the key is not a mask kind.
    """
    kind: Optional[NodeKind] = _KINDS_BY_NODETYPE.get(nodetype)
    if masks_only:
        if kind is None or not kind.is_mask:
            raise MaskExpected(nodetype)
        return kind
    if kind is None:
        raise UnknownLayerType(nodetype)
    return kind


def nodetypes() -> Tuple[str, ...]:
    """All recognised ``nodetype`` keys."""
    return tuple(_KINDS_BY_NODETYPE)
