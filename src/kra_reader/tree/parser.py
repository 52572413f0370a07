"""Recursive-descent parser for the layer/mask tree of ``maindoc.xml``.

The tree is written as::

    <layers>
      <layer nodetype="paintlayer" ...>
        <masks>
          <mask nodetype="transparencymask" .../>
        </masks>
      </layer>
      <layer nodetype="grouplayer" ...>
        <layers>
          ...
        </layers>
      </layer>
      <layer nodetype="shapelayer" .../>
    </layers>

A self-closing ``<layer/>`` owns nothing. A non-group layer written with an
opening tag is followed by exactly one ``<masks>`` block; a group layer
written with an opening tag is followed by exactly one nested ``<layers>``
block. Masks are always self-closing.
"""

from typing import Any, Dict, List, Optional

from kra_reader.errors import EventError
from kra_reader.shared import get_logger
from kra_reader.tokenization import EventCursor, EventType, XmlEvent

from .attributes import get_attribute
from .nodes import Node
from .registry import NodeKind, decode_common, lookup

logger = get_logger(__name__, component="tree_parser")


class TreeParser:
    """Builds ``Node`` trees from an event cursor.

    The parser only ever moves forward; each method documents where the
    cursor must be positioned when it is called.
    """

    def __init__(self, cursor: EventCursor, document: Optional[str] = None) -> None:
        """Initialize tree parser.

        Args:
            cursor: Event cursor positioned inside ``maindoc.xml``
            document: Name used in log records
        """
        self.cursor = cursor
        self.logger = logger.bind(document) if document else logger
        self.nodes_parsed = 0

    def parse_layer(self) -> Node:
        """Parse one layer or mask, including everything it owns.

        The cursor must be positioned immediately before a ``<layer>``,
        ``<layer/>``, ``<mask>`` or ``<mask/>`` event.

        Raises:
            EventError: If the next event does not open an element.
            UnknownLayerType: If ``nodetype`` names no known kind.
        """
        event = self.cursor.next_event()
        if not event.is_tag:
            raise EventError("layer/mask start event", event.describe())
        owns_content = event.type == EventType.START

        common = decode_common(event)
        kind = lookup(get_attribute(event, "nodetype"))
        props = kind.decode(event)

        if kind.owns_layers:
            props["layers"] = tuple(self.get_layers(is_group_layer=True)) if owns_content else ()
        elif kind.owns_masks:
            props["masks"] = tuple(self.parse_masks()) if owns_content else ()
        elif owns_content:
            # A mask outside <masks> written as <mask ...></mask>.
            self._expect_end()

        return self._build(kind, event, common, props)

    def parse_masks(self) -> List[Node]:
        """Parse a ``<masks>`` block and the closing tag of its owner.

        The cursor must be positioned immediately before ``<masks>``.

        Raises:
            EventError: On anything but a self-closing mask or ``</masks>``.
            MaskExpected: If a mask position holds a layer kind.
        """
        event = self.cursor.next_event()
        if not event.is_tag or event.name != "masks":
            raise EventError("masks start event", event.describe())

        masks: List[Node] = []
        if event.type == EventType.START:
            while True:
                event = self.cursor.next_event()
                if event.type == EventType.END:
                    # The cursor only yields balanced end tags, so this is </masks>.
                    break
                if event.type != EventType.EMPTY:
                    raise EventError("empty or end event", event.describe())
                masks.append(self._parse_mask(event))

        # </layer> of the owning node
        self._expect_end()
        return masks

    def get_layers(self, is_group_layer: bool = False) -> List[Node]:
        """Parse a ``<layers>`` block.

        The cursor must be positioned immediately before ``<layers>``. The
        list ends when the next event is ``</layers>``. For the block of a
        group layer, the group's own closing tag is consumed as well.

        Args:
            is_group_layer: Whether the block belongs to a group layer

        Returns:
            The layers in document order.
        """
        event = self.cursor.next_event()
        if not event.is_tag or event.name != "layers":
            raise EventError("layers start event", event.describe())

        layers: List[Node] = []
        if event.type == EventType.START:
            while not self.cursor.peek_event().is_end_of("layers"):
                layers.append(self.parse_layer())
            self.cursor.next_event()

        if is_group_layer:
            # </layer> of the group
            self._expect_end()
        return layers

    def _parse_mask(self, tag: XmlEvent) -> Node:
        common = decode_common(tag)
        kind = lookup(get_attribute(tag, "nodetype"), masks_only=True)
        return self._build(kind, tag, common, kind.decode(tag))

    def _expect_end(self) -> XmlEvent:
        event = self.cursor.next_event()
        if event.type != EventType.END:
            raise EventError("end event", event.describe())
        return event

    def _build(
        self,
        kind: NodeKind,
        tag: XmlEvent,
        common: Dict[str, Any],
        props: Dict[str, Any],
    ) -> Node:
        node = kind.node_class(**common, **props)
        self.nodes_parsed += 1
        self.logger.debug(
            "Parsed node",
            extra={
                "nodetype": kind.nodetype,
                "node_name": node.name,
                "uuid": str(node.uuid),
                "tag": tag.name,
                "depth": self.cursor.depth,
            }
        )
        return node


def parse_layer(cursor: EventCursor) -> Node:
    """Parse one layer or mask at the cursor. See ``TreeParser.parse_layer``."""
    return TreeParser(cursor).parse_layer()


def parse_masks(cursor: EventCursor) -> List[Node]:
    """Parse a ``<masks>`` block at the cursor. See ``TreeParser.parse_masks``."""
    return TreeParser(cursor).parse_masks()


def get_layers(cursor: EventCursor, is_group_layer: bool = False) -> List[Node]:
    """Parse a ``<layers>`` block at the cursor. See ``TreeParser.get_layers``."""
    return TreeParser(cursor).get_layers(is_group_layer)
