"""Layer tree model and parser for kra_reader.

This module turns the ``<layers>`` section of ``maindoc.xml`` into an
immutable tree of typed nodes, seven layer kinds and five mask kinds.

Key Components:
    TreeParser: Recursive-descent parser over an event cursor
    Node: Base class of all layers and masks, with capability queries
    NodeKind: Per-kind attribute schema, looked up by ``nodetype``
    CompositeOp: Blend mode table
    Colorspace: Supported pixel encodings
    InTimeline: Timeline visibility with onionskin flag
"""

from .enums import Colorspace, CompositeOp, InTimeline
from .nodes import (
    LAYER_TYPES,
    MASK_TYPES,
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
from .parser import TreeParser, get_layers, parse_layer, parse_masks
from .registry import NODE_KINDS, AttributeSpec, NodeKind, lookup

__all__ = [
    "AttributeSpec",
    "CloneLayer",
    "ColorizeMask",
    "Colorspace",
    "CompositeOp",
    "FileLayer",
    "FillLayer",
    "FilterLayer",
    "FilterMask",
    "GroupLayer",
    "InTimeline",
    "LAYER_TYPES",
    "MASK_TYPES",
    "NODE_KINDS",
    "Node",
    "NodeKind",
    "PaintLayer",
    "SelectionMask",
    "TransformMask",
    "TransparencyMask",
    "TreeParser",
    "VectorLayer",
    "get_layers",
    "lookup",
    "parse_layer",
    "parse_masks",
]
