"""Shared fixtures: builders for maindoc.xml, documentinfo.xml and .kra archives."""

import zipfile
from pathlib import Path
from typing import Dict, Iterable, Optional
from xml.sax.saxutils import quoteattr

import pytest

from kra_reader.tokenization import EventCursor

ZERO_UUID = "00000000-0000-0000-0000-000000000000"

MAINDOC_DOCTYPE = (
    "<!DOCTYPE DOC PUBLIC '-//KDE//DTD krita 2.0//EN' "
    "'http://www.calligra.org/DTD/krita-2.0.dtd'>"
)
DOCUMENTINFO_DOCTYPE = (
    "<!DOCTYPE document-info PUBLIC '-//KDE//DTD document-info 1.1//EN' "
    "'http://www.calligra.org/DTD/document-info-1.1.dtd'>"
)

COMMON_DEFAULTS = {
    "filename": "layer1",
    "visible": "1",
    "locked": "0",
    "colorlabel": "0",
    "x": "0",
    "y": "0",
    "intimeline": "0",
}

KIND_DEFAULTS: Dict[str, Dict[str, str]] = {
    "paintlayer": {
        "compositeop": "normal",
        "opacity": "255",
        "collapsed": "0",
        "colorspacename": "RGBA",
        "channellockflags": "",
        "channelflags": "",
    },
    "grouplayer": {
        "compositeop": "normal",
        "collapsed": "0",
        "passthrough": "0",
        "opacity": "255",
    },
    "filelayer": {
        "collapsed": "0",
        "scalingfilter": "Bicubic",
        "scale": "true",
        "compositeop": "normal",
        "opacity": "255",
        "colorspacename": "RGBA",
        "scalingmethod": "0",
        "source": "reference.png",
        "channelflags": "",
    },
    "adjustmentlayer": {
        "filtername": "blur",
        "filterversion": "1",
        "channelflags": "",
        "collapsed": "0",
        "compositeop": "normal",
        "opacity": "255",
    },
    "generatorlayer": {
        "opacity": "255",
        "compositeop": "normal",
        "generatorname": "color",
        "generatorversion": "1",
        "channelflags": "",
        "collapsed": "0",
    },
    "clonelayer": {
        "clonetype": "0",
        "clonefrom": "Paint Layer 1",
        "compositeop": "normal",
        "opacity": "255",
        "clonefromuuid": ZERO_UUID,
        "channelflags": "",
        "collapsed": "0",
    },
    "shapelayer": {
        "compositeop": "normal",
        "opacity": "255",
        "channelflags": "",
        "collapsed": "0",
    },
    "transparencymask": {},
    "transformmask": {},
    "filtermask": {
        "filtername": "levels",
        "filterversion": "1",
    },
    "selectionmask": {
        "active": "1",
    },
    "colorizemask": {
        "limit-to-device": "0",
        "show-coloring": "1",
        "cleanup": "0",
        "use-edge-detection": "0",
        "edge-detection-size": "4",
        "fuzzy-radius": "0",
        "edit-keystrokes": "1",
        "compositeop": "normal",
        "colorspacename": "RGBA",
    },
}

IMAGE_DEFAULTS = {
    "mime": "application/x-kra",
    "name": "Unnamed",
    "description": "",
    "colorspacename": "RGBA",
    "profile": "sRGB-elle-V2-srgbtrc.icc",
    "height": "600",
    "width": "800",
    "x-res": "300",
    "y-res": "300",
}

ABOUT_FIELDS = (
    "title", "description", "subject", "abstract", "keyword", "initial-creator",
    "editing-cycles", "editing-time", "date", "creation-date", "language", "license",
)
AUTHOR_FIELDS = (
    "full-name", "creator-first-name", "creator-last-name", "initial",
    "author-title", "position", "company",
)


def _render_attributes(values: Dict[str, Optional[str]]) -> str:
    return " ".join(f"{key}={quoteattr(value)}" for key, value in values.items() if value is not None)


class KraBuilder:
    """Builds document fragments and archives for tests.

    Attribute overrides map XML attribute names to values; a value of None
    removes the attribute. Nodes without an explicit ``uuid`` get a fresh,
    predictable one.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._counter = 0

    def next_uuid(self) -> str:
        self._counter += 1
        return f"{{00000000-0000-0000-0000-{self._counter:012d}}}"

    def node(self, tag: str, nodetype: str, body: Optional[str] = None,
             attrs: Optional[Dict[str, Optional[str]]] = None) -> str:
        values: Dict[str, Optional[str]] = {"name": f"{nodetype} {self._counter + 1}"}
        values["uuid"] = self.next_uuid()
        values.update(COMMON_DEFAULTS)
        values.update(KIND_DEFAULTS.get(nodetype, {}))
        values["nodetype"] = nodetype
        values.update(attrs or {})
        rendered = _render_attributes(values)
        if body is None:
            return f"<{tag} {rendered}/>"
        return f"<{tag} {rendered}>{body}</{tag}>"

    def layer(self, nodetype: str = "paintlayer", masks: Optional[Iterable[str]] = None,
              layers: Optional[Iterable[str]] = None, **attrs: Optional[str]) -> str:
        """Render a ``<layer>``; self-closing unless masks or layers are given."""
        body = None
        if layers is not None:
            body = self.layers(*layers)
        elif masks is not None:
            body = "<masks>" + "".join(masks) + "</masks>"
        return self.node("layer", nodetype, body, attrs)

    def mask(self, nodetype: str = "transparencymask", **attrs: Optional[str]) -> str:
        return self.node("mask", nodetype, None, attrs)

    @staticmethod
    def layers(*items: str) -> str:
        return "<layers>" + "".join(items) + "</layers>"

    def maindoc(self, layers: Optional[str] = None, trailer: str = "",
                image: Optional[Dict[str, Optional[str]]] = None,
                doctype: str = MAINDOC_DOCTYPE, syntax_version: str = "2.0") -> str:
        if layers is None:
            layers = self.layers(self.layer())
        image_values: Dict[str, Optional[str]] = dict(IMAGE_DEFAULTS)
        image_values.update(image or {})
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f"{doctype}\n"
            '<DOC xmlns="http://www.calligra.org/DTD/krita" '
            f'syntaxVersion="{syntax_version}" kritaVersion="5.2.2" editor="Krita">\n'
            f" <IMAGE {_render_attributes(image_values)}>\n"
            f"  {layers}\n"
            f"  {trailer}\n"
            " </IMAGE>\n"
            "</DOC>\n"
        )

    @staticmethod
    def documentinfo(about: Optional[Dict[str, str]] = None,
                     author: Optional[Dict[str, str]] = None, tail: str = "") -> str:
        about = about or {}
        author = author or {}

        def section(tag: str, fields: Iterable[str], values: Dict[str, str]) -> str:
            inner = "".join(
                f"<{name}>{values[name]}</{name}>" if name in values else f"<{name}/>"
                for name in fields
            )
            return f"<{tag}>{inner}</{tag}>"

        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f"{DOCUMENTINFO_DOCTYPE}\n"
            '<document-info xmlns="http://www.calligra.org/DTD/document-info">\n'
            f" {section('about', ABOUT_FIELDS, about)}\n"
            f" {section('author', AUTHOR_FIELDS, author)}\n"
            "</document-info>\n"
            f"{tail}"
        )

    def write(self, name: str = "test.kra", maindoc: Optional[str] = None,
              documentinfo: Optional[str] = None, mimetype: bytes = b"application/x-krita",
              members: Optional[Dict[str, bytes]] = None) -> Path:
        """Write a ``.kra`` archive and return its path."""
        path = self.directory / name
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("mimetype", mimetype)
            archive.writestr("documentinfo.xml", documentinfo if documentinfo is not None else self.documentinfo())
            archive.writestr("maindoc.xml", maindoc if maindoc is not None else self.maindoc())
            for member, content in (members or {}).items():
                archive.writestr(member, content)
        return path

    @staticmethod
    def cursor(document: str) -> EventCursor:
        return EventCursor(document.encode("utf-8"))


@pytest.fixture
def kra_builder(tmp_path: Path) -> KraBuilder:
    """Builder for test documents writing archives into ``tmp_path``."""
    return KraBuilder(tmp_path)
