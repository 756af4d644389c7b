"""Drag sessions for moving a single node."""

import logging
from enum import Enum
from typing import Optional

from mindcanvas.operations import GraphOperations

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 1


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragController:
    """Maps pointer movement onto one node's coordinates.

    While dragging only the dragged box moves and only connector lines are
    redrawn. Releasing the pointer performs one full rebuild and one save.
    """

    def __init__(self, operations: GraphOperations):
        self.operations = operations
        self.state = DragState.IDLE
        self.node_id: Optional[int] = None
        self.start_pointer_x = 0.0
        self.start_pointer_y = 0.0
        self.start_node_x = 0.0
        self.start_node_y = 0.0

    @property
    def is_active(self) -> bool:
        return self.state is DragState.DRAGGING

    def begin(self, node_id: int, pointer_x: float, pointer_y: float,
              button: int = PRIMARY_BUTTON) -> bool:
        """Start dragging a node. Only the primary button starts a drag."""
        if button != PRIMARY_BUTTON:
            return False
        if self.is_active:
            logger.debug("Ignoring drag start on %s: node %s already dragging", node_id, self.node_id)
            return False

        node = self.operations.store.get(node_id)
        if node is None:
            return False

        self.state = DragState.DRAGGING
        self.node_id = node_id
        self.start_pointer_x = pointer_x
        self.start_pointer_y = pointer_y
        self.start_node_x = node.x
        self.start_node_y = node.y
        return True

    def move(self, pointer_x: float, pointer_y: float):
        """Follow the pointer. Lines are refreshed, nothing is saved."""
        if not self.is_active:
            return

        x = self.start_node_x + (pointer_x - self.start_pointer_x)
        y = self.start_node_y + (pointer_y - self.start_pointer_y)
        node = self.operations.move_node(self.node_id, x, y)
        if node is None:
            self.cancel()
            return

        renderer = self.operations.renderer
        renderer.move_box(node.id, x, y)
        renderer.refresh_lines(self.operations.store)

    def end(self):
        """Finish the drag with a full rebuild and a save."""
        if not self.is_active:
            return
        logger.debug("Finished dragging node %s", self.node_id)
        self._reset()
        self.operations.render()
        self.operations.autosave()

    def cancel(self):
        """Stop a drag whose node disappeared."""
        self.end()

    def _reset(self):
        self.state = DragState.IDLE
        self.node_id = None
