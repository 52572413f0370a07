"""Reader for Krita ``.kra`` documents.

Parses the metadata and the layer/mask tree of a ``.kra`` archive into
immutable Python objects. Pixel and vector payloads are not decoded; they
can optionally be loaded as raw bytes.

    >>> import kra_reader
    >>> kra = kra_reader.read_kra("drawing.kra")
    >>> for node in kra.walk():
    ...     print(node.name, node.nodetype)
"""

__version__ = "0.1.0"
__author__ = "kra-reader developers"

from .api import KraFile, read_kra
from .data import DataKind, NodeData, NodeDataState
from .errors import (
    ArchiveError,
    AssertionFailed,
    EventError,
    KraError,
    KraIOError,
    MaskExpected,
    MetadataError,
    MetadataErrorReason,
    MimetypeMismatch,
    MissingValue,
    ParseUuidError,
    ReadKraError,
    UnknownColorspace,
    UnknownCompositeOp,
    UnknownLayerType,
    XmlEncodingError,
    XmlError,
    XmlParsingError,
    XmlValueError,
)
from .metadata import DocInfoAbout, DocInfoAuthor, DocumentInfo, ImageMetadata, MirrorAxis
from .shared.config import ParsingConfiguration, ShouldLoadFiles
from .tree import (
    CloneLayer,
    ColorizeMask,
    Colorspace,
    CompositeOp,
    FileLayer,
    FillLayer,
    FilterLayer,
    FilterMask,
    GroupLayer,
    InTimeline,
    Node,
    PaintLayer,
    SelectionMask,
    TransformMask,
    TransparencyMask,
    VectorLayer,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Entry points
    "read_kra",
    "KraFile",

    # Configuration
    "ParsingConfiguration",
    "ShouldLoadFiles",

    # Document metadata
    "DocInfoAbout",
    "DocInfoAuthor",
    "DocumentInfo",
    "ImageMetadata",
    "MirrorAxis",

    # Layer tree
    "Node",
    "PaintLayer",
    "GroupLayer",
    "FileLayer",
    "FilterLayer",
    "FillLayer",
    "CloneLayer",
    "VectorLayer",
    "TransparencyMask",
    "FilterMask",
    "TransformMask",
    "SelectionMask",
    "ColorizeMask",
    "CompositeOp",
    "Colorspace",
    "InTimeline",

    # Node payloads
    "DataKind",
    "NodeData",
    "NodeDataState",

    # Errors
    "KraError",
    "ReadKraError",
    "KraIOError",
    "ArchiveError",
    "MimetypeMismatch",
    "MetadataError",
    "MetadataErrorReason",
    "XmlError",
    "AssertionFailed",
    "XmlParsingError",
    "EventError",
    "MissingValue",
    "XmlValueError",
    "XmlEncodingError",
    "UnknownColorspace",
    "UnknownCompositeOp",
    "UnknownLayerType",
    "MaskExpected",
    "ParseUuidError",
]
