"""Error taxonomy for reading ``.kra`` archives.

Two families of exceptions exist:

- ``MetadataErrorReason`` and its subclasses are raised by the XML layers
  (event cursor, attribute extractor, tree parser, metadata parser). They
  describe *what* went wrong but not *where*.
- ``ReadKraError`` and its subclasses are raised by ``read_kra()``. A
  ``MetadataErrorReason`` never escapes ``read_kra()`` directly; it is wrapped
  in a ``MetadataError`` carrying the archive member name, byte offset, line
  and column.
"""

from pathlib import PurePath
from typing import Optional, Union


class KraError(Exception):
    """Base exception for everything raised by kra_reader."""


class MetadataErrorReason(KraError):
    """Base class for failures while interpreting XML metadata."""


# XML structural errors


class XmlError(MetadataErrorReason):
    """The XML is malformed or does not have the expected structure."""


class AssertionFailed(XmlError):
    """A fixed literal in the document (doctype, xmlns, version) did not match."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"assertion about XML metadata failed: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class XmlParsingError(XmlError):
    """The byte stream is not well-formed XML."""

    def __init__(self, message: str) -> None:
        super().__init__(f"could not parse XML: {message}")
        self.detail = message


class EventError(XmlError):
    """An XML event was read, but it is not the kind that was required here."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"unexpected XML event: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class MissingValue(XmlError):
    """A required attribute is absent."""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing XML value: {name}")
        self.name = name


class XmlValueError(XmlError):
    """An attribute or text value could not be interpreted as its expected type."""

    def __init__(self, text: str) -> None:
        super().__init__(f"could not interpret XML value: {text}")
        self.text = text


class XmlEncodingError(XmlError):
    """The document is not valid UTF-8."""

    def __init__(self, message: str, position: int = 0) -> None:
        super().__init__(f"could not interpret string as utf-8: {message}")
        self.detail = message
        self.position = position


# Domain errors


class UnknownColorspace(MetadataErrorReason):
    """The colorspace name is not one of the supported colorspaces."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown colorspace: {value}")
        self.value = value


class UnknownCompositeOp(MetadataErrorReason):
    """The composite operation name is not in the blend mode table."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown compositeop: {value}")
        self.value = value


class UnknownLayerType(MetadataErrorReason):
    """The ``nodetype`` attribute names no known layer or mask kind."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown layer type: {value}")
        self.value = value


class MaskExpected(MetadataErrorReason):
    """A ``<masks>`` block contained something other than a mask."""

    def __init__(self, value: str) -> None:
        super().__init__(f"expected a mask, got: {value}")
        self.value = value


class ParseUuidError(MetadataErrorReason):
    """A unique identifier is not a valid UUID string."""

    def __init__(self, value: str) -> None:
        super().__init__(f"failed to parse UUID: {value}")
        self.value = value


# Container errors


class ReadKraError(KraError):
    """Base class for errors raised while opening a ``.kra`` file."""


class KraIOError(ReadKraError):
    """The file or one of its archive members could not be read."""


class ArchiveError(ReadKraError):
    """The file is not a usable ZIP archive or lacks a required member."""


class MimetypeMismatch(ReadKraError):
    """The ``mimetype`` member does not hold the Krita magic string."""

    def __init__(self, actual: Optional[bytes] = None) -> None:
        super().__init__("mimetype not recognised")
        self.actual = actual


class MetadataError(ReadKraError):
    """A ``MetadataErrorReason`` located inside a specific archive member."""

    def __init__(
        self,
        file: Union[str, PurePath],
        buffer_pos: int,
        line: int,
        column: int,
        reason: MetadataErrorReason,
    ) -> None:
        super().__init__(
            f"{file} at byte {buffer_pos} (line {line}, column {column}): {reason}"
        )
        self.file = PurePath(file)
        self.buffer_pos = buffer_pos
        self.line = line
        self.column = column
        self.reason = reason
