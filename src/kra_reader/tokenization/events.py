"""Structural XML events produced by the event cursor."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional


class EventType(Enum):
    """Kinds of structural events in a document."""

    DECL = auto()       # XML declaration: <?xml ... ?>
    DOCTYPE = auto()    # <!DOCTYPE ...>
    START = auto()      # Opening tag: <name ...>
    EMPTY = auto()      # Self-closing tag: <name .../>
    END = auto()        # Closing tag: </name>
    TEXT = auto()       # Trimmed, entity-decoded character content
    CDATA = auto()      # <![CDATA[ ... ]]>
    PI = auto()         # Processing instruction other than the declaration
    EOF = auto()        # End of input


@dataclass(frozen=True)
class EventPosition:
    """Character span of an event in the decoded document."""

    offset: int
    end: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")
        if self.end < self.offset:
            raise ValueError("End must be >= offset")


@dataclass(frozen=True)
class XmlEvent:
    """A single structural event.

    ``name`` is the tag name for START, EMPTY and END events and the target
    for DECL and PI events. ``text`` holds the decoded content of TEXT and
    CDATA events, the declaration body of DOCTYPE events, and the data of
    DECL and PI events. ``raw`` is the event's source text between the angle
    brackets (or the untrimmed text for TEXT events).
    """

    type: EventType
    position: EventPosition
    name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    raw: str = ""

    @property
    def is_tag(self) -> bool:
        """Check if this event opens an element (START or EMPTY)."""
        return self.type in (EventType.START, EventType.EMPTY)

    def is_end_of(self, name: str) -> bool:
        """Check if this event is the closing tag ``</name>``."""
        return self.type == EventType.END and self.name == name

    def get_attribute(self, name: str) -> Optional[str]:
        """Get a decoded attribute value, or None if absent."""
        return self.attributes.get(name)

    def describe(self) -> str:
        """Render the event for error messages.

        Closing tags render as their bare name so that callers can compare
        the description against an expected tag name.
        """
        if self.type == EventType.END:
            return self.name
        if self.type in (EventType.START, EventType.EMPTY):
            return self.raw
        if self.type in (EventType.TEXT, EventType.CDATA, EventType.DOCTYPE):
            return self.text
        if self.type == EventType.EOF:
            return "end of file"
        return self.raw
