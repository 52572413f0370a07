"""Event stream layer for kra_reader.

Turns an in-memory XML document into a forward-only stream of structural
events (start, empty, end, text, doctype, end-of-input) with byte offsets
for error reporting.

Key Components:
    EventCursor: Pull tokenizer with one event of lookahead
    XmlEvent: A single structural event with its attributes and position
    EventType: Enumeration of event kinds
"""

from .cursor import EventCursor, unescape
from .events import EventPosition, EventType, XmlEvent

__all__ = [
    "EventCursor",
    "EventPosition",
    "EventType",
    "XmlEvent",
    "unescape",
]
