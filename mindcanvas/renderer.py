"""Scene model projected from the node store.

The renderer keeps one NodeBox per node and one ConnectorLine per resolvable
parent link. The GTK canvas and the PNG exporter both draw from this scene.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Callable

from mindcanvas.store import Node, NodeStore

logger = logging.getLogger(__name__)

# Nominal box size used for hit testing
BOX_WIDTH = 100
BOX_HEIGHT = 40

# Connector endpoints sit at the anchor plus this offset (approximate center)
LINE_OFFSET_X = 50
LINE_OFFSET_Y = 20


@dataclass
class NodeBox:
    """Visual handle for a single node."""
    node_id: int
    text: str
    x: float
    y: float
    selected: bool = False

    def contains_point(self, px: float, py: float) -> bool:
        return (self.x <= px <= self.x + BOX_WIDTH and
                self.y <= py <= self.y + BOX_HEIGHT)


@dataclass
class ConnectorLine:
    """Straight line from a parent box to a child box."""
    parent_id: int
    child_id: int
    x1: float
    y1: float
    x2: float
    y2: float


def line_between(parent: Node, child: Node) -> ConnectorLine:
    return ConnectorLine(
        parent_id=parent.id,
        child_id=child.id,
        x1=parent.x + LINE_OFFSET_X,
        y1=parent.y + LINE_OFFSET_Y,
        x2=child.x + LINE_OFFSET_X,
        y2=child.y + LINE_OFFSET_Y,
    )


class Renderer:
    """Keeps the visual scene consistent with a NodeStore."""

    def __init__(self):
        self.boxes: Dict[int, NodeBox] = {}
        self.lines: List[ConnectorLine] = []
        self.rebuild_count = 0
        self.line_refresh_count = 0

        # Called after every scene change (canvas queue_draw)
        self.on_changed: Optional[Callable[[], None]] = None

    def rebuild(self, store: NodeStore):
        """Discard every box and line and recreate them from the store."""
        self.boxes = {}
        for node in store:
            self.boxes[node.id] = NodeBox(
                node_id=node.id,
                text=node.text,
                x=node.x,
                y=node.y,
                selected=node.id == store.selected_node_id,
            )
        self.lines = self._build_lines(store)
        self.rebuild_count += 1
        self._notify_changed()

    def refresh_lines(self, store: NodeStore):
        """Redraw only the connector lines, leaving boxes where they are."""
        self.lines = self._build_lines(store)
        self.line_refresh_count += 1
        self._notify_changed()

    def move_box(self, node_id: int, x: float, y: float):
        """Reposition one existing box without touching the rest of the scene."""
        box = self.boxes.get(node_id)
        if box is None:
            return
        box.x = x
        box.y = y

    def box_at(self, px: float, py: float) -> Optional[NodeBox]:
        """Return the top-most box under a point."""
        for box in reversed(list(self.boxes.values())):
            if box.contains_point(px, py):
                return box
        return None

    def bounds(self):
        """(min_x, min_y, max_x, max_y) of the scene, or None when empty."""
        if not self.boxes:
            return None
        boxes = self.boxes.values()
        return (
            min(b.x for b in boxes),
            min(b.y for b in boxes),
            max(b.x + BOX_WIDTH for b in boxes),
            max(b.y + BOX_HEIGHT for b in boxes),
        )

    def _build_lines(self, store: NodeStore) -> List[ConnectorLine]:
        lines = []
        for node in store:
            if node.parent_id is None:
                continue
            parent = store.get(node.parent_id)
            if parent is None:
                logger.debug("Skipping line for node %s: parent %s missing", node.id, node.parent_id)
                continue
            lines.append(line_between(parent, node))
        return lines

    def _notify_changed(self):
        if self.on_changed:
            self.on_changed()
