"""Tests for maindoc.xml header/trailer and documentinfo.xml parsing."""

import logging

import pytest

from kra_reader.errors import AssertionFailed, EventError, MissingValue, XmlValueError
from kra_reader.metadata import (
    MAINDOC_DOCTYPE,
    DocInfoAbout,
    ImageMetadata,
    parse_document_info,
    parse_image_header,
    parse_image_trailer,
)
from kra_reader.tree import Colorspace, TreeParser

MIRROR_AXIS = (
    "<MirrorAxis>"
    '<mirrorHorizontal type="value" value="1"/>'
    '<mirrorVertical type="value" value="0"/>'
    '<lockHorizontal type="value" value="0"/>'
    '<lockVertical type="value" value="1"/>'
    '<hideHorizontalDecoration type="value" value="0"/>'
    '<hideVerticalDecoration type="value" value="0"/>'
    '<handleSize type="value" value="32"/>'
    '<horizontalHandlePosition type="value" value="64"/>'
    '<verticalHandlePosition type="value" value="64"/>'
    '<axisPosition type="pointf" x="400" y="300.5"/>'
    "</MirrorAxis>"
)


def parse_maindoc(kra_builder, **kwargs):
    cursor = kra_builder.cursor(kra_builder.maindoc(**kwargs))
    header = parse_image_header(cursor)
    TreeParser(cursor).get_layers()
    trailer = parse_image_trailer(cursor)
    return ImageMetadata.combine(header, trailer)


class TestImageHeader:
    """Tests for the <DOC> and <IMAGE> header."""

    def test_defaults(self, kra_builder):
        """Test reading a standard header."""
        meta = parse_maindoc(kra_builder)
        assert meta.krita_version == "5.2.2"
        assert meta.name == "Unnamed"
        assert meta.description == ""
        assert meta.colorspace is Colorspace.RGBA
        assert meta.profile == "sRGB-elle-V2-srgbtrc.icc"
        assert (meta.width, meta.height) == (800, 600)
        assert (meta.x_res, meta.y_res) == (300, 300)
        assert str(meta) == "Unnamed"

    def test_cursor_left_before_layers(self, kra_builder):
        """Test that the header stops right before the layer tree."""
        cursor = kra_builder.cursor(kra_builder.maindoc())
        parse_image_header(cursor)
        assert cursor.peek_event().name == "layers"

    def test_doctype_mismatch(self, kra_builder):
        """Test that a foreign doctype names both strings."""
        other = "<!DOCTYPE DOC PUBLIC '-//KDE//DTD krita 1.0//EN' 'krita-1.0.dtd'>"
        with pytest.raises(AssertionFailed) as excinfo:
            parse_image_header(kra_builder.cursor(kra_builder.maindoc(doctype=other)))
        assert excinfo.value.expected == MAINDOC_DOCTYPE
        assert "krita 1.0" in excinfo.value.actual
        assert MAINDOC_DOCTYPE in str(excinfo.value)

    def test_missing_doctype(self, kra_builder):
        """Test that the doctype is required."""
        with pytest.raises(EventError) as excinfo:
            parse_image_header(kra_builder.cursor(kra_builder.maindoc(doctype="")))
        assert excinfo.value.expected == "a doctype"

    def test_syntax_version_mismatch(self, kra_builder):
        """Test the syntaxVersion assertion."""
        with pytest.raises(AssertionFailed) as excinfo:
            parse_image_header(kra_builder.cursor(kra_builder.maindoc(syntax_version="3.0")))
        assert excinfo.value.expected == "2.0"
        assert excinfo.value.actual == "3.0"

    def test_image_mime_mismatch(self, kra_builder):
        """Test the image mime assertion."""
        with pytest.raises(AssertionFailed) as excinfo:
            parse_maindoc(kra_builder, image={"mime": "image/png"})
        assert excinfo.value.actual == "image/png"

    def test_missing_image_attribute(self, kra_builder):
        """Test that header attributes are required."""
        with pytest.raises(MissingValue) as excinfo:
            parse_maindoc(kra_builder, image={"profile": None})
        assert excinfo.value.name == "profile"

    def test_invalid_dimension(self, kra_builder):
        """Test that sizes must be unsigned integers."""
        with pytest.raises(XmlValueError) as excinfo:
            parse_maindoc(kra_builder, image={"width": "-1"})
        assert excinfo.value.text == "-1"

    def test_unknown_colorspace_falls_back(self, kra_builder, caplog):
        """Test that an unsupported image colorspace is replaced with a warning."""
        with caplog.at_level(logging.WARNING):
            meta = parse_maindoc(kra_builder, image={"colorspacename": "CMYKA"})
        assert meta.colorspace is Colorspace.RGBA
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].colorspace == "CMYKA"


class TestImageTrailer:
    """Tests for the blocks between </layers> and </IMAGE>."""

    def test_empty_trailer(self, kra_builder):
        """Test that every trailer block is optional."""
        meta = parse_maindoc(kra_builder)
        assert meta.projection_background_color is None
        assert meta.global_assistants_color is None
        assert meta.mirror_axis is None

    def test_blocks_in_any_order(self, kra_builder):
        """Test reading the known blocks in unusual order."""
        trailer = (
            MIRROR_AXIS
            + '<GlobalAssistantsColor SimpleColorData="176,176,176,255"/>'
            + '<ProjectionBackgroundColor ColorData="AAAAAA=="/>'
        )
        meta = parse_maindoc(kra_builder, trailer=trailer)
        assert meta.projection_background_color == "AAAAAA=="
        assert meta.global_assistants_color == "176,176,176,255"
        assert meta.mirror_axis is not None

    def test_unknown_blocks_skipped(self, kra_builder):
        """Test that unrecognized blocks are skipped entirely."""
        trailer = (
            "<animation><framerate type=\"value\" value=\"24\"/><range><from/></range></animation>"
            + "<compositions/>"
            + '<ProjectionBackgroundColor ColorData="AAAA"/>'
        )
        meta = parse_maindoc(kra_builder, trailer=trailer)
        assert meta.projection_background_color == "AAAA"

    def test_stray_text(self, kra_builder):
        """Test that text inside the trailer is an EventError."""
        with pytest.raises(EventError):
            parse_maindoc(kra_builder, trailer="stray")

    def test_wrong_closing_tag(self, kra_builder):
        """Test that the trailer must end with </IMAGE>."""
        cursor = kra_builder.cursor("<DOC><IMAGE></IMAGE></DOC>")
        cursor.next_event()
        cursor.next_event()
        cursor.next_event()
        with pytest.raises(EventError) as excinfo:
            parse_image_trailer(cursor)
        assert excinfo.value.expected == "</IMAGE>"
        assert excinfo.value.actual == "DOC"


class TestMirrorAxis:
    """Tests for the MirrorAxis block."""

    def test_values(self, kra_builder):
        """Test every mirror axis setting."""
        axis = parse_maindoc(kra_builder, trailer=MIRROR_AXIS).mirror_axis
        assert axis.mirror_horizontal is True
        assert axis.mirror_vertical is False
        assert axis.lock_vertical is True
        assert axis.handle_size == 32.0
        assert axis.horizontal_handle_position == 64.0
        assert axis.axis_position == (400.0, 300.5)

    def test_missing_setting(self, kra_builder):
        """Test that every setting is required."""
        trailer = MIRROR_AXIS.replace('<handleSize type="value" value="32"/>', "")
        with pytest.raises(MissingValue) as excinfo:
            parse_maindoc(kra_builder, trailer=trailer)
        assert excinfo.value.name == "handleSize"

    def test_unknown_children_ignored(self, kra_builder):
        """Test that extra settings do not disturb parsing."""
        trailer = MIRROR_AXIS.replace("</MirrorAxis>", '<futureSetting value="1"/></MirrorAxis>')
        assert parse_maindoc(kra_builder, trailer=trailer).mirror_axis.handle_size == 32.0


class TestDocumentInfo:
    """Tests for documentinfo.xml."""

    def test_fields(self, kra_builder):
        """Test that text elements land in their fields."""
        document = kra_builder.documentinfo(
            about={"title": "Sunset", "editing-cycles": "4", "license": "CC-BY"},
            author={"full-name": "A. Painter", "company": "Studio"},
        )
        info = parse_document_info(kra_builder.cursor(document))
        assert info.about.title == "Sunset"
        assert info.about.editing_cycles == "4"
        assert info.about.license == "CC-BY"
        assert info.author.full_name == "A. Painter"
        assert info.author.company == "Studio"

    def test_empty_elements(self, kra_builder):
        """Test that self-closing elements read as empty strings."""
        info = parse_document_info(kra_builder.cursor(kra_builder.documentinfo()))
        assert info.about == DocInfoAbout(*[""] * 12)
        assert info.author.initial == ""

    def test_open_close_without_text(self, kra_builder):
        """Test that <title></title> reads as an empty string."""
        document = kra_builder.documentinfo().replace("<title/>", "<title></title>")
        assert parse_document_info(kra_builder.cursor(document)).about.title == ""

    def test_cdata_and_entities(self, kra_builder):
        """Test CDATA sections and escaped text."""
        document = kra_builder.documentinfo(
            about={"description": "<![CDATA[a <b> c]]>", "subject": "fish &amp; chips"}
        )
        info = parse_document_info(kra_builder.cursor(document))
        assert info.about.description == "a <b> c"
        assert info.about.subject == "fish & chips"

    def test_trailing_content(self, kra_builder):
        """Test that nothing may follow </document-info>."""
        document = kra_builder.documentinfo(tail="<extra/>")
        with pytest.raises(AssertionFailed) as excinfo:
            parse_document_info(kra_builder.cursor(document))
        assert excinfo.value.expected == "end of file"

    def test_trailing_comment_allowed(self, kra_builder):
        """Test that comments after the root are not content."""
        document = kra_builder.documentinfo(tail="<!-- saved by krita -->\n")
        assert parse_document_info(kra_builder.cursor(document)).about.title == ""

    def test_namespace_mismatch(self, kra_builder):
        """Test the document-info namespace assertion."""
        document = kra_builder.documentinfo().replace("document-info\">", "elsewhere\">")
        with pytest.raises(AssertionFailed):
            parse_document_info(kra_builder.cursor(document))
