"""Spawn positions for newly created nodes."""

import random
from typing import Optional, Tuple

from mindcanvas.store import NodeStore

# Layout constants
DEFAULT_X = 50
DEFAULT_Y = 50
CHILD_OFFSET_X = 150
JITTER = 50
ROW_SPACING = 50


class LayoutPolicy:
    """Places new nodes relative to the current selection.

    With a selection, the new node spawns to the right of the selected node
    at roughly the same height. Without one, unattached nodes stack down
    the canvas one row per existing node.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _jitter(self) -> float:
        return self.rng.random() * JITTER

    def spawn_position(self, store: NodeStore) -> Tuple[float, float]:
        selected = store.selected_node
        if selected is not None:
            return selected.x + CHILD_OFFSET_X, selected.y + self._jitter()
        return DEFAULT_X + self._jitter(), DEFAULT_Y + len(store) * ROW_SPACING
