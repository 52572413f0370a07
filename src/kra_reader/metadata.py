"""Document-level metadata of a ``.kra`` archive.

``maindoc.xml`` wraps the layer tree in image metadata::

    <?xml version="1.0" encoding="UTF-8"?>
    <!DOCTYPE DOC PUBLIC '-//KDE//DTD krita 2.0//EN' '...'>
    <DOC xmlns="..." syntaxVersion="2.0" kritaVersion="5.2.2">
      <IMAGE mime="application/x-kra" name="..." ...>      <- header
        <layers>...</layers>                                 <- layer tree
        <ProjectionBackgroundColor ColorData="..."/>         <- trailer
        <MirrorAxis>...</MirrorAxis>
        ...
      </IMAGE>
    </DOC>

The header has a fixed schema. The trailer is a loose collection of optional
blocks in no particular order; unknown blocks are skipped.

``documentinfo.xml`` holds author information as a fixed sequence of text
elements and is parsed into ``DocumentInfo``.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional, Tuple

from kra_reader.errors import (
    AssertionFailed,
    EventError,
    MissingValue,
    UnknownColorspace,
)
from kra_reader.shared import get_logger
from kra_reader.tokenization import EventCursor, EventType, XmlEvent
from kra_reader.tree.attributes import (
    get_attribute,
    parse_bool,
    parse_float,
    parse_u32,
)
from kra_reader.tree.enums import Colorspace

MAINDOC_DOCTYPE = (
    "DOC PUBLIC '-//KDE//DTD krita 2.0//EN' 'http://www.calligra.org/DTD/krita-2.0.dtd'"
)
MAINDOC_XMLNS = "http://www.calligra.org/DTD/krita"
DOCUMENTINFO_DOCTYPE = (
    "document-info PUBLIC '-//KDE//DTD document-info 1.1//EN' "
    "'http://www.calligra.org/DTD/document-info-1.1.dtd'"
)
DOCUMENTINFO_XMLNS = "http://www.calligra.org/DTD/document-info"
SYNTAX_VERSION = "2.0"
IMAGE_MIMETYPE = "application/x-kra"

logger = get_logger(__name__, component="metadata_parser")


@dataclass(frozen=True)
class MirrorAxis:
    """Mirror tool configuration stored in the trailer."""

    mirror_horizontal: bool
    mirror_vertical: bool
    lock_horizontal: bool
    lock_vertical: bool
    hide_horizontal_decoration: bool
    hide_vertical_decoration: bool
    handle_size: float
    horizontal_handle_position: float
    vertical_handle_position: float
    axis_position: Tuple[float, float]


_MIRROR_AXIS_FLAGS = (
    ("mirrorHorizontal", "mirror_horizontal"),
    ("mirrorVertical", "mirror_vertical"),
    ("lockHorizontal", "lock_horizontal"),
    ("lockVertical", "lock_vertical"),
    ("hideHorizontalDecoration", "hide_horizontal_decoration"),
    ("hideVerticalDecoration", "hide_vertical_decoration"),
)
_MIRROR_AXIS_VALUES = (
    ("handleSize", "handle_size"),
    ("horizontalHandlePosition", "horizontal_handle_position"),
    ("verticalHandlePosition", "vertical_handle_position"),
)


@dataclass(frozen=True)
class ImageHeader:
    """Fixed attributes of ``<DOC>`` and ``<IMAGE>``."""

    krita_version: str
    name: str
    description: str
    colorspace: Colorspace
    profile: str
    height: int
    width: int
    y_res: int
    x_res: int


@dataclass(frozen=True)
class ImageTrailer:
    """Optional blocks that follow the layer tree."""

    projection_background_color: Optional[str] = None
    global_assistants_color: Optional[str] = None
    mirror_axis: Optional[MirrorAxis] = None


@dataclass(frozen=True)
class ImageMetadata:
    """Metadata of the image."""

    krita_version: str
    name: str
    description: str
    colorspace: Colorspace
    profile: str
    height: int
    width: int
    y_res: int
    x_res: int
    projection_background_color: Optional[str] = None
    global_assistants_color: Optional[str] = None
    mirror_axis: Optional[MirrorAxis] = None

    @classmethod
    def combine(cls, header: ImageHeader, trailer: ImageTrailer) -> "ImageMetadata":
        values = {f.name: getattr(header, f.name) for f in fields(header)}
        values.update({f.name: getattr(trailer, f.name) for f in fields(trailer)})
        return cls(**values)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class DocInfoAbout:
    """Information about the file."""

    title: str
    description: str
    subject: str
    abstract: str
    keyword: str
    initial_creator: str
    editing_cycles: str
    editing_time: str
    date: str
    creation_date: str
    language: str
    license: str


@dataclass(frozen=True)
class DocInfoAuthor:
    """Information about the author of the file."""

    full_name: str
    creator_first_name: str
    creator_last_name: str
    initial: str
    author_title: str
    position: str
    company: str


@dataclass(frozen=True)
class DocumentInfo:
    """Contents of ``documentinfo.xml``."""

    about: DocInfoAbout
    author: DocInfoAuthor


# Shared helpers


def _skip_declaration(cursor: EventCursor) -> None:
    if cursor.peek_event().type == EventType.DECL:
        cursor.next_event()


def _expect_doctype(cursor: EventCursor, expected: str) -> None:
    event = cursor.next_event()
    if event.type != EventType.DOCTYPE:
        raise EventError("a doctype", event.describe())
    if event.text != expected:
        raise AssertionFailed(expected, event.text)


def _expect_start(cursor: EventCursor) -> XmlEvent:
    event = cursor.next_event()
    if event.type != EventType.START:
        raise EventError("start event", event.describe())
    return event


def _expect_end(cursor: EventCursor) -> XmlEvent:
    event = cursor.next_event()
    if event.type != EventType.END:
        raise EventError("end event", event.describe())
    return event


def _assert_attribute(tag: XmlEvent, name: str, expected: str) -> None:
    actual = get_attribute(tag, name)
    if actual != expected:
        raise AssertionFailed(expected, actual)


# maindoc.xml


def parse_image_header(cursor: EventCursor) -> ImageHeader:
    """Parse ``maindoc.xml`` up to and including the ``<IMAGE>`` tag.

    Afterwards the cursor is positioned before the top-level ``<layers>``.

    Raises:
        AssertionFailed: If the doctype, namespace, syntax version or image
            mimetype differ from what Krita writes.
    """
    _skip_declaration(cursor)
    _expect_doctype(cursor, MAINDOC_DOCTYPE)

    doc = _expect_start(cursor)
    _assert_attribute(doc, "xmlns", MAINDOC_XMLNS)
    _assert_attribute(doc, "syntaxVersion", SYNTAX_VERSION)
    krita_version = get_attribute(doc, "kritaVersion")

    image = _expect_start(cursor)
    _assert_attribute(image, "mime", IMAGE_MIMETYPE)
    profile = get_attribute(image, "profile")
    name = get_attribute(image, "name")
    description = get_attribute(image, "description")
    colorspace_name = get_attribute(image, "colorspacename")
    try:
        colorspace = Colorspace.from_string(colorspace_name)
    except UnknownColorspace:
        colorspace = Colorspace.default()
        cursor.logger.warning(
            "Unknown image colorspace, using default",
            extra={"colorspace": colorspace_name, "fallback": str(colorspace)}
        )

    return ImageHeader(
        krita_version=krita_version,
        name=name,
        description=description,
        colorspace=colorspace,
        profile=profile,
        height=parse_u32(get_attribute(image, "height")),
        width=parse_u32(get_attribute(image, "width")),
        y_res=parse_u32(get_attribute(image, "y-res")),
        x_res=parse_u32(get_attribute(image, "x-res")),
    )


def parse_image_trailer(cursor: EventCursor) -> ImageTrailer:
    """Parse the blocks between the layer tree and ``</IMAGE>``.

    Blocks may come in any order or be absent. Unknown blocks are skipped.

    Raises:
        EventError: On a closing tag other than ``</IMAGE>`` or on text.
    """
    projection_background_color: Optional[str] = None
    global_assistants_color: Optional[str] = None
    mirror_axis: Optional[MirrorAxis] = None

    while True:
        event = cursor.next_event()
        if event.type == EventType.START:
            if event.name == "MirrorAxis":
                mirror_axis = parse_mirror_axis(cursor)
            else:
                cursor.logger.debug("Skipping trailer block", extra={"block": event.name})
                cursor.read_to_end(event.name)
        elif event.type == EventType.EMPTY:
            if event.name == "ProjectionBackgroundColor":
                projection_background_color = get_attribute(event, "ColorData")
            elif event.name == "GlobalAssistantsColor":
                global_assistants_color = get_attribute(event, "SimpleColorData")
            else:
                cursor.logger.debug("Ignoring trailer element", extra={"block": event.name})
        elif event.type == EventType.END:
            if event.name == "IMAGE":
                break
            raise EventError("</IMAGE>", event.describe())
        else:
            raise EventError("start event, empty event or </IMAGE>", event.describe())

    return ImageTrailer(
        projection_background_color=projection_background_color,
        global_assistants_color=global_assistants_color,
        mirror_axis=mirror_axis,
    )


def parse_mirror_axis(cursor: EventCursor) -> MirrorAxis:
    """Parse the children of ``<MirrorAxis>`` and its closing tag.

    Each setting is an empty element whose ``value`` attribute holds the
    setting; ``axisPosition`` holds ``x`` and ``y`` instead.

    Raises:
        MissingValue: If a setting is absent.
    """
    children: Dict[str, XmlEvent] = {}
    while True:
        event = cursor.next_event()
        if event.type == EventType.END:
            break
        if event.type == EventType.EMPTY:
            children[event.name] = event
        elif event.type == EventType.START:
            cursor.read_to_end(event.name)
        else:
            raise EventError("empty event or </MirrorAxis>", event.describe())

    def setting(name: str) -> XmlEvent:
        try:
            return children[name]
        except KeyError:
            raise MissingValue(name) from None

    values = {}
    for xml_name, field_name in _MIRROR_AXIS_FLAGS:
        values[field_name] = parse_bool(get_attribute(setting(xml_name), "value"))
    for xml_name, field_name in _MIRROR_AXIS_VALUES:
        values[field_name] = parse_float(get_attribute(setting(xml_name), "value"))
    position = setting("axisPosition")
    values["axis_position"] = (
        parse_float(get_attribute(position, "x")),
        parse_float(get_attribute(position, "y")),
    )
    return MirrorAxis(**values)


# documentinfo.xml


def _read_text_element(cursor: EventCursor) -> str:
    """Read ``<tag>text</tag>``, ``<tag></tag>`` or ``<tag/>``."""
    event = cursor.next_event()
    if event.type == EventType.EMPTY:
        return ""
    if event.type != EventType.START:
        raise EventError("start event", event.describe())

    event = cursor.next_event()
    if event.type == EventType.END:
        return ""
    if event.type not in (EventType.TEXT, EventType.CDATA):
        raise EventError("text, CDATA or end event", event.describe())
    _expect_end(cursor)
    return event.text


def _read_text_group(cursor: EventCursor, cls: type) -> object:
    _expect_start(cursor)
    values = {f.name: _read_text_element(cursor) for f in fields(cls)}
    _expect_end(cursor)
    return cls(**values)


def parse_document_info(cursor: EventCursor) -> DocumentInfo:
    """Parse a complete ``documentinfo.xml``.

    The ``<about>`` and ``<author>`` children are read by position, in the
    order Krita writes them.

    Raises:
        AssertionFailed: If the doctype or namespace differ, or if anything
            follows ``</document-info>``.
    """
    _skip_declaration(cursor)
    _expect_doctype(cursor, DOCUMENTINFO_DOCTYPE)

    root = _expect_start(cursor)
    _assert_attribute(root, "xmlns", DOCUMENTINFO_XMLNS)

    about = _read_text_group(cursor, DocInfoAbout)
    author = _read_text_group(cursor, DocInfoAuthor)

    # </document-info>
    _expect_end(cursor)

    event = cursor.next_event()
    if event.type != EventType.EOF:
        raise AssertionFailed("end of file", event.describe())
    return DocumentInfo(about=about, author=author)  # type: ignore[arg-type]
