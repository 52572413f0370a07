"""Pull-based XML event cursor.

The cursor walks an in-memory document once, front to back, and hands out
one structural event per call. It is strict: anything that is not
well-formed XML raises ``XmlParsingError`` at the point where it is read.
Comments and whitespace-only text never surface as events.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple, Union

from kra_reader.errors import XmlEncodingError, XmlParsingError
from kra_reader.shared import get_logger

from .events import EventPosition, EventType, XmlEvent

_UTF8_BOM = "\ufeff"
_NAME_RE = re.compile(r"[A-Za-z_:][\w.\-:]*")
_ATTRIBUTE_RE = re.compile(
    r"\s+([A-Za-z_:][\w.\-:]*)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')"
)
_REFERENCE_RE = re.compile(r"&(#x[0-9A-Fa-f]+|#[0-9]+|[A-Za-z_][\w.\-]*)?(;)?")
_PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

logger = get_logger(__name__, component="event_cursor")


def unescape(value: str) -> str:
    """Decode XML entity and character references in ``value``.

    Raises:
        XmlParsingError: On an unterminated or unknown reference.
    """
    if "&" not in value:
        return value

    def _replace(match: "re.Match[str]") -> str:
        reference, terminator = match.group(1), match.group(2)
        if reference is None or terminator is None:
            raise XmlParsingError(f"unterminated reference near {match.group(0)!r}")
        if reference.startswith("#x"):
            return _char_from_code(int(reference[2:], 16), reference)
        if reference.startswith("#"):
            return _char_from_code(int(reference[1:]), reference)
        try:
            return _PREDEFINED_ENTITIES[reference]
        except KeyError:
            raise XmlParsingError(f"unknown entity &{reference};") from None

    return _REFERENCE_RE.sub(_replace, value)


def _char_from_code(code: int, reference: str) -> str:
    try:
        return chr(code)
    except (ValueError, OverflowError):
        raise XmlParsingError(f"invalid character reference &{reference};") from None


class EventCursor:
    """Forward-only cursor over the structural events of one XML document.

    Args:
        data: The whole document, as UTF-8 bytes or an already decoded string
        document: Name used in log records (e.g. the archive member name)

    Raises:
        XmlEncodingError: If ``data`` is bytes that are not valid UTF-8.
    """

    def __init__(self, data: Union[bytes, str], document: Optional[str] = None) -> None:
        if isinstance(data, bytes):
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise XmlEncodingError(str(e), e.start) from e
            self._data = data
        else:
            text = data
            self._data = data.encode("utf-8")

        self._prefix_bytes = 0
        if text.startswith(_UTF8_BOM):
            text = text[len(_UTF8_BOM):]
            self._prefix_bytes = len(_UTF8_BOM.encode("utf-8"))

        self._text = text
        self._pos = 0
        self._consumed = 0
        self._open_tags: List[str] = []
        self._peeked: Optional[Tuple[XmlEvent, int]] = None
        self._finished = False
        self.logger = logger.bind(document) if document else logger

    @property
    def data(self) -> bytes:
        """The original document bytes."""
        return self._data

    @property
    def text(self) -> str:
        """The decoded document."""
        return self._text

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._open_tags)

    def buffer_position(self) -> int:
        """Byte offset just past the last consumed event."""
        return self._prefix_bytes + len(self._text[:self._consumed].encode("utf-8"))

    def next_event(self) -> XmlEvent:
        """Consume and return the next structural event.

        After the end of input every call returns an EOF event.
        """
        if self._peeked is not None:
            event, stack_delta = self._peeked
            self._peeked = None
            self._commit(event, stack_delta)
            return event

        event, stack_delta = self._read_event()
        self._commit(event, stack_delta)
        return event

    def peek_event(self) -> XmlEvent:
        """Return the next structural event without consuming it."""
        if self._peeked is None:
            self._peeked = self._read_event()
        return self._peeked[0]

    def read_to_end(self, name: str) -> None:
        """Skip everything up to and including the end tag closing ``name``.

        The START event for ``name`` must already have been consumed.
        """
        target_depth = self.depth - 1
        while True:
            event = self.next_event()
            if event.type == EventType.END and self.depth == target_depth:
                if event.name != name:
                    raise XmlParsingError(
                        f"expected </{name}>, found </{event.name}>"
                    )
                return
            if event.type == EventType.EOF:
                raise XmlParsingError(f"unexpected end of input inside <{name}>")

    def __iter__(self) -> Iterator[XmlEvent]:
        """Iterate over the remaining events, stopping before EOF."""
        while True:
            event = self.next_event()
            if event.type == EventType.EOF:
                return
            yield event

    def _commit(self, event: XmlEvent, stack_delta: int) -> None:
        if stack_delta > 0:
            self._open_tags.append(event.name)
        elif stack_delta < 0:
            self._open_tags.pop()
        self._consumed = event.position.end

    # Tokenization. Each reader returns the event plus its effect on the
    # open-element stack; the stack itself only changes once the event is
    # consumed, so peeking never alters state.

    def _read_event(self) -> Tuple[XmlEvent, int]:
        text = self._text
        while True:
            if self._pos >= len(text):
                return self._read_eof(), 0

            if text[self._pos] != "<":
                event = self._read_text()
                if event is None:
                    continue
                return event, 0

            if text.startswith("<!--", self._pos):
                self._skip_comment()
                continue
            if text.startswith("<![CDATA[", self._pos):
                return self._read_cdata(), 0
            if text.startswith("<!DOCTYPE", self._pos):
                return self._read_doctype(), 0
            if text.startswith("<?", self._pos):
                return self._read_processing_instruction(), 0
            if text.startswith("</", self._pos):
                return self._read_end_tag(), -1
            event = self._read_tag()
            return event, 1 if event.type == EventType.START else 0

    def _read_eof(self) -> XmlEvent:
        if self._open_tags:
            raise XmlParsingError(
                f"unexpected end of input, <{self._open_tags[-1]}> is not closed"
            )
        if not self._finished:
            self._finished = True
            self.logger.debug("Reached end of input", extra={"length": len(self._text)})
        end = len(self._text)
        return XmlEvent(type=EventType.EOF, position=EventPosition(end, end))

    def _read_text(self) -> Optional[XmlEvent]:
        start = self._pos
        end = self._text.find("<", start)
        if end == -1:
            end = len(self._text)
        self._pos = end

        raw = self._text[start:end]
        if not raw.strip():
            return None
        return XmlEvent(
            type=EventType.TEXT,
            position=EventPosition(start, end),
            text=unescape(raw.strip()),
            raw=raw,
        )

    def _skip_comment(self) -> None:
        end = self._text.find("-->", self._pos + 4)
        if end == -1:
            raise XmlParsingError("unterminated comment")
        self._pos = end + 3

    def _read_cdata(self) -> XmlEvent:
        start = self._pos
        end = self._text.find("]]>", start + 9)
        if end == -1:
            raise XmlParsingError("unterminated CDATA section")
        self._pos = end + 3
        content = self._text[start + 9:end]
        return XmlEvent(
            type=EventType.CDATA,
            position=EventPosition(start, self._pos),
            text=content,
            raw=content,
        )

    def _read_doctype(self) -> XmlEvent:
        start = self._pos
        i = start + len("<!DOCTYPE")
        quote: Optional[str] = None
        bracket_depth = 0
        while i < len(self._text):
            char = self._text[i]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "[":
                bracket_depth += 1
            elif char == "]":
                bracket_depth -= 1
            elif char == ">" and bracket_depth <= 0:
                break
            i += 1
        else:
            raise XmlParsingError("unterminated DOCTYPE declaration")

        self._pos = i + 1
        body = self._text[start + len("<!DOCTYPE"):i].strip()
        return XmlEvent(
            type=EventType.DOCTYPE,
            position=EventPosition(start, self._pos),
            text=body,
            raw=self._text[start + 2:i],
        )

    def _read_processing_instruction(self) -> XmlEvent:
        start = self._pos
        end = self._text.find("?>", start + 2)
        if end == -1:
            raise XmlParsingError("unterminated processing instruction")
        self._pos = end + 2

        content = self._text[start + 2:end]
        parts = content.split(None, 1)
        target = parts[0] if parts else ""
        data = parts[1] if len(parts) > 1 else ""
        if not _NAME_RE.fullmatch(target):
            raise XmlParsingError(f"invalid processing instruction target {target!r}")
        return XmlEvent(
            type=EventType.DECL if target == "xml" else EventType.PI,
            position=EventPosition(start, self._pos),
            name=target,
            text=data.strip(),
            raw=content,
        )

    def _read_end_tag(self) -> XmlEvent:
        start = self._pos
        end = self._text.find(">", start + 2)
        if end == -1:
            raise XmlParsingError("unterminated closing tag")
        self._pos = end + 1

        name = self._text[start + 2:end].strip()
        if not _NAME_RE.fullmatch(name):
            raise XmlParsingError(f"invalid closing tag name {name!r}")
        open_tags = self._open_tags
        if not open_tags:
            raise XmlParsingError(f"closing tag </{name}> without an open element")
        if open_tags[-1] != name:
            raise XmlParsingError(f"expected </{open_tags[-1]}>, found </{name}>")

        return XmlEvent(
            type=EventType.END,
            position=EventPosition(start, self._pos),
            name=name,
            raw=self._text[start + 1:end],
        )

    def _read_tag(self) -> XmlEvent:
        start = self._pos
        i = start + 1
        quote: Optional[str] = None
        while i < len(self._text):
            char = self._text[i]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "<":
                raise XmlParsingError("unexpected '<' inside a tag")
            elif char == ">":
                break
            i += 1
        else:
            raise XmlParsingError("unterminated tag")
        self._pos = i + 1

        inner = self._text[start + 1:i]
        is_empty = inner.endswith("/")
        if is_empty:
            inner = inner[:-1]

        name_match = _NAME_RE.match(inner)
        if name_match is None:
            raise XmlParsingError(f"invalid tag {inner!r}")
        name = name_match.group(0)
        attributes = self._parse_attributes(name, inner[name_match.end():])

        return XmlEvent(
            type=EventType.EMPTY if is_empty else EventType.START,
            position=EventPosition(start, self._pos),
            name=name,
            attributes=attributes,
            raw=inner.rstrip(),
        )

    @staticmethod
    def _parse_attributes(tag_name: str, source: str) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        index = 0
        while index < len(source):
            match = _ATTRIBUTE_RE.match(source, index)
            if match is None:
                if source[index:].strip():
                    raise XmlParsingError(
                        f"malformed attribute in <{tag_name}>: {source[index:].strip()!r}"
                    )
                break
            attr_name = match.group(1)
            if attr_name in attributes:
                raise XmlParsingError(
                    f"duplicate attribute {attr_name!r} in <{tag_name}>"
                )
            value = match.group(2) if match.group(2) is not None else match.group(3)
            attributes[attr_name] = unescape(value)
            index = match.end()
        return attributes
