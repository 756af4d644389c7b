"""Graph operations over the node store.

Each structural mutation ends with a full render followed by a write of the
whole node sequence. Selection changes only render.
"""

import logging
import sqlite3
from typing import Callable, Optional

from mindcanvas.store import Node, NodeStore
from mindcanvas.layout import LayoutPolicy
from mindcanvas.renderer import Renderer

logger = logging.getLogger(__name__)


class GraphOperations:
    """Owns the editing session: store, layout, renderer and persistence."""

    def __init__(self, store: NodeStore, layout: LayoutPolicy,
                 renderer: Renderer, persistence,
                 on_save_error: Optional[Callable[[Exception], None]] = None):
        self.store = store
        self.layout = layout
        self.renderer = renderer
        self.persistence = persistence
        self.on_save_error = on_save_error

    def add_node(self, text: str) -> Optional[Node]:
        """Create a node linked to the current selection."""
        if not text or not text.strip():
            return None

        x, y = self.layout.spawn_position(self.store)
        node = Node(
            id=self.store.ids.next_id(),
            text=text,
            x=x,
            y=y,
            parent_id=self.store.selected_node_id,
        )
        self.store.append(node)
        logger.debug("Added node %s (parent %s) at (%.1f, %.1f)", node.id, node.parent_id, x, y)
        self._commit()
        return node

    def edit_node(self, node_id: int, new_text: Optional[str]) -> bool:
        """Replace a node's text. Cancelled or blank edits change nothing."""
        if not new_text or not new_text.strip():
            return False
        node = self.store.get(node_id)
        if node is None or node.text == new_text:
            return False

        node.text = new_text
        logger.debug("Edited node %s", node_id)
        self._commit()
        return True

    def delete_node(self, node_id: int) -> bool:
        """Remove a node, orphaning its children."""
        removed = self.store.remove(node_id)
        if removed is None:
            return False

        for child in self.store.children_of(node_id):
            child.parent_id = None
        if self.store.selected_node_id == node_id:
            self.store.deselect()

        logger.debug("Deleted node %s", node_id)
        self._commit()
        return True

    def select_node(self, node_id: int) -> bool:
        if not self.store.select(node_id):
            return False
        self.renderer.rebuild(self.store)
        return True

    def deselect_all(self):
        self.store.deselect()
        self.renderer.rebuild(self.store)

    def clear_all(self):
        """Remove every node and the selection."""
        self.store.clear()
        logger.debug("Cleared all nodes")
        self._commit()

    def move_node(self, node_id: int, x: float, y: float) -> Optional[Node]:
        """Set a node's coordinates in place. Rendering and saving are up to the caller."""
        node = self.store.get(node_id)
        if node is None:
            return None
        node.x = x
        node.y = y
        return node

    def render(self):
        self.renderer.rebuild(self.store)

    def save(self):
        self.persistence.save(self.store.nodes)

    def autosave(self) -> bool:
        """Save after an edit. Failures are logged and reported to on_save_error."""
        try:
            self.save()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Saving %d nodes failed: %s", len(self.store), exc)
            if self.on_save_error is not None:
                self.on_save_error(exc)
            return False
        return True

    def _commit(self):
        self.render()
        self.autosave()
