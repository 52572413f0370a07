"""Error location for metadata parsing.

Parsers raise ``MetadataErrorReason`` without knowing where in the archive
member they are. ``locating_errors()`` wraps a parsing step and converts any
such error into a ``MetadataError`` that names the member, the byte offset
of the cursor and the derived line and column.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterator, Union

from kra_reader.errors import MetadataError, MetadataErrorReason
from kra_reader.tokenization import EventCursor


@dataclass(frozen=True)
class Location:
    """A byte offset together with its 1-based line and column."""

    buffer_pos: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate location values."""
        if self.buffer_pos < 0:
            raise ValueError("Buffer position must be >= 0")
        if self.line < 1 or self.column < 1:
            raise ValueError("Line and column must be >= 1")


def locate(data: bytes, buffer_pos: int) -> Location:
    """Derive line and column of ``buffer_pos`` in ``data``.

    Lines are separated by ``\\n``; the column counts bytes from the start
    of the line. Offsets past the end are clamped to the end of ``data``.
    """
    buffer_pos = max(0, min(buffer_pos, len(data)))
    line_start = data.rfind(b"\n", 0, buffer_pos) + 1
    line = data.count(b"\n", 0, buffer_pos) + 1
    return Location(buffer_pos=buffer_pos, line=line, column=buffer_pos - line_start + 1)


def to_metadata_error(
    reason: MetadataErrorReason,
    file: Union[str, PurePath],
    cursor: EventCursor,
) -> MetadataError:
    """Attach the cursor's current location to ``reason``."""
    location = locate(cursor.data, cursor.buffer_position())
    return MetadataError(
        file=file,
        buffer_pos=location.buffer_pos,
        line=location.line,
        column=location.column,
        reason=reason,
    )


@contextmanager
def locating_errors(file: Union[str, PurePath], cursor: EventCursor) -> Iterator[None]:
    """Re-raise any ``MetadataErrorReason`` from the block as ``MetadataError``.

    Example:
        >>> with locating_errors("maindoc.xml", cursor):
        ...     header = parse_image_header(cursor)
    """
    try:
        yield
    except MetadataErrorReason as err:
        raise to_metadata_error(err, file, cursor) from err
