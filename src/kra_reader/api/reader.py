"""Reading ``.kra`` archives.

A ``.kra`` file is a ZIP archive. ``read_kra()`` checks its ``mimetype``
member, parses ``documentinfo.xml`` and ``maindoc.xml`` and, depending on
the ``ParsingConfiguration``, pulls raw node payloads and the composited
images into memory. The result is an immutable ``KraFile``; on any failure
a ``ReadKraError`` is raised and nothing is returned.
"""

import time
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union
from uuid import UUID

from kra_reader.data import NodeData, data_kind, payload_path
from kra_reader.errors import (
    ArchiveError,
    KraIOError,
    MetadataError,
    MimetypeMismatch,
    XmlEncodingError,
)
from kra_reader.locator import locate, locating_errors
from kra_reader.metadata import (
    DocumentInfo,
    ImageMetadata,
    parse_document_info,
    parse_image_header,
    parse_image_trailer,
)
from kra_reader.shared import ParsingConfiguration, get_logger
from kra_reader.tokenization import EventCursor
from kra_reader.tree import Node, TreeParser

PathType = Union[str, Path]

KRA_MIMETYPE = b"application/x-krita"
MIMETYPE_MEMBER = "mimetype"
DOCUMENTINFO_MEMBER = "documentinfo.xml"
MAINDOC_MEMBER = "maindoc.xml"
MERGED_IMAGE_MEMBER = "mergedimage.png"
PREVIEW_MEMBER = "preview.png"

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class KraFile:
    """A parsed ``.kra`` file.

    Attributes:
        path: Where the archive was read from
        meta: Image metadata from ``maindoc.xml``
        doc_info: Author information from ``documentinfo.xml``
        layers: Top-level layers in document order
        files: Read-only node payloads by node identifier; empty unless
            requested. Not part of equality or hashing.
        merged_image: Raw ``mergedimage.png``, if requested and present
        preview: Raw ``preview.png``, if requested and present
    """

    path: Path
    meta: ImageMetadata
    doc_info: DocumentInfo
    layers: Tuple[Node, ...]
    files: Mapping[UUID, NodeData] = field(default_factory=dict, compare=False)
    merged_image: Optional[bytes] = None
    preview: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    @classmethod
    def read(
        cls, path: PathType, config: Optional[ParsingConfiguration] = None
    ) -> "KraFile":
        """Open and parse a ``.kra`` file. See ``read_kra()``."""
        return read_kra(path, config)

    def walk(self) -> Iterator[Node]:
        """Yield every node of the document, depth first in document order."""
        for layer in self.layers:
            yield from layer.walk()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def find_by_uuid(self, identifier: UUID) -> Optional[Node]:
        """Find the node with the given identifier."""
        for node in self.walk():
            if node.uuid == identifier:
                return node
        return None

    def find_by_name(self, name: str) -> Optional[Node]:
        """Find the first node with the given name."""
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def data_for(self, node: Node) -> Optional[NodeData]:
        """Payload entry of ``node``, if payloads were requested."""
        return self.files.get(node.uuid)

    def __str__(self) -> str:
        return str(self.meta)


def read_kra(path: PathType, config: Optional[ParsingConfiguration] = None) -> KraFile:
    """Open and parse a ``.kra`` file.

    Args:
        path: Path of the archive
        config: What to load besides metadata; metadata only by default

    Returns:
        The parsed file

    Raises:
        KraIOError: If the file cannot be read.
        ArchiveError: If the file is not a ZIP archive or lacks a member.
        MimetypeMismatch: If the ``mimetype`` member is not ``application/x-krita``.
        MetadataError: If ``documentinfo.xml`` or ``maindoc.xml`` cannot be
            parsed; carries the member name, position and underlying reason.

    Examples:
        >>> kra = read_kra("drawing.kra")
        >>> [layer.name for layer in kra.layers]
        ['Background', 'Sketch']
    """
    config = config or ParsingConfiguration.metadata_only()
    path = Path(path)
    start_time = time.time()
    logger = get_logger(__name__, document=str(path), component="kra_reader")

    logger.info("Opening archive", extra={"config": config.to_dict()})

    try:
        archive = zipfile.ZipFile(path)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"{path} is not a ZIP archive: {e}") from e
    except OSError as e:
        raise KraIOError(f"could not open {path}: {e}") from e

    with archive:
        mimetype = _read_member(archive, MIMETYPE_MEMBER)
        if mimetype != KRA_MIMETYPE:
            raise MimetypeMismatch(mimetype)

        cursor = _open_cursor(DOCUMENTINFO_MEMBER, _read_member(archive, DOCUMENTINFO_MEMBER))
        with locating_errors(DOCUMENTINFO_MEMBER, cursor):
            doc_info = parse_document_info(cursor)

        cursor = _open_cursor(MAINDOC_MEMBER, _read_member(archive, MAINDOC_MEMBER))
        with locating_errors(MAINDOC_MEMBER, cursor):
            header = parse_image_header(cursor)
            tree_parser = TreeParser(cursor, document=MAINDOC_MEMBER)
            layers = tuple(tree_parser.get_layers())
            trailer = parse_image_trailer(cursor)
        meta = ImageMetadata.combine(header, trailer)

        files: Dict[UUID, NodeData] = {}
        if config.loads_any_files:
            files = _load_files(archive, meta.name, layers, config)

        merged_image = preview = None
        if config.should_load_composited_images:
            merged_image = _read_optional_member(archive, MERGED_IMAGE_MEMBER)
            preview = _read_optional_member(archive, PREVIEW_MEMBER)

    kra = KraFile(
        path=path,
        meta=meta,
        doc_info=doc_info,
        layers=layers,
        files=files,
        merged_image=merged_image,
        preview=preview,
    )

    logger.info(
        "Archive read",
        extra={
            "image_name": meta.name,
            "node_count": tree_parser.nodes_parsed,
            "loaded_files": sum(1 for data in files.values() if data.is_loaded),
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return kra


def _read_member(archive: zipfile.ZipFile, member: str) -> bytes:
    try:
        return archive.read(member)
    except KeyError as e:
        raise ArchiveError(f"archive has no member {member}") from e
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
        raise ArchiveError(f"could not extract {member}: {e}") from e
    except OSError as e:
        raise KraIOError(f"could not read {member}: {e}") from e


def _read_optional_member(archive: zipfile.ZipFile, member: str) -> Optional[bytes]:
    if member not in archive.namelist():
        return None
    return _read_member(archive, member)


def _open_cursor(member: str, data: bytes) -> EventCursor:
    try:
        return EventCursor(data, document=member)
    except XmlEncodingError as err:
        location = locate(data, err.position)
        raise MetadataError(
            file=member,
            buffer_pos=location.buffer_pos,
            line=location.line,
            column=location.column,
            reason=err,
        ) from err


def _load_files(
    archive: zipfile.ZipFile,
    image_name: str,
    layers: Tuple[Node, ...],
    config: ParsingConfiguration,
) -> Dict[UUID, NodeData]:
    logger = get_logger(__name__, document=archive.filename, component="payload_loader")
    members = set(archive.namelist())
    files: Dict[UUID, NodeData] = {}

    for layer in layers:
        for node in layer.walk():
            kind = data_kind(node)
            if kind is None:
                files[node.uuid] = NodeData.does_not_exist()
                continue

            member = payload_path(image_name, node)
            if config.should_load(node) and member in members:
                files[node.uuid] = NodeData.loaded(kind, member, _read_member(archive, member))
                logger.debug(
                    "Loaded node payload",
                    extra={"member": member, "size": len(files[node.uuid])}
                )
            else:
                files[node.uuid] = NodeData.unloaded(kind, member)
    return files
