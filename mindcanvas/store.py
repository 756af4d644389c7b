"""In-memory node store for MindCanvas."""

import logging
import time
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Iterator, Iterable

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """A single idea on the canvas."""
    id: int
    text: str
    x: float = 0.0
    y: float = 0.0
    parent_id: Optional[int] = None

    def to_record(self) -> Dict[str, Any]:
        """Serialize with the stable field order id, text, x, y, parentId."""
        return {
            "id": self.id,
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "parentId": self.parent_id,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Node":
        """Build a node from a persisted record.

        Raises ValueError/TypeError/KeyError for malformed records.
        """
        node_id = data["id"]
        if isinstance(node_id, bool) or not isinstance(node_id, int):
            raise TypeError(f"node id must be an integer, got {node_id!r}")
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError(f"node text must be a string, got {text!r}")
        parent_id = data.get("parentId")
        if parent_id is not None and (isinstance(parent_id, bool) or not isinstance(parent_id, int)):
            raise TypeError(f"parentId must be an integer or null, got {parent_id!r}")
        return cls(
            id=node_id,
            text=text,
            x=_coord(data["x"]),
            y=_coord(data["y"]),
            parent_id=parent_id,
        )


def _coord(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"coordinate must be a number, got {value!r}")
    return value


class IdAllocator:
    """Hands out strictly increasing millisecond-timestamp ids."""

    def __init__(self, floor: int = 0, clock=time.time):
        self._last = floor
        self._clock = clock

    def observe(self, node_id: int):
        """Make sure future ids are greater than an id already in use."""
        if node_id > self._last:
            self._last = node_id

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


class NodeStore:
    """Ordered collection of nodes plus the current selection.

    Every lookup is by id; callers mutate the returned Node in place.
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        self.nodes: List[Node] = []
        self.selected_node_id: Optional[int] = None
        self.ids = IdAllocator()
        for node in nodes or []:
            self.append(node)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __contains__(self, node_id) -> bool:
        return self.get(node_id) is not None

    def get(self, node_id: Optional[int]) -> Optional[Node]:
        """Get a node by ID, or None if it doesn't exist."""
        if node_id is None:
            return None
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @property
    def selected_node(self) -> Optional[Node]:
        return self.get(self.selected_node_id)

    def append(self, node: Node):
        if self.get(node.id) is not None:
            raise ValueError(f"duplicate node id {node.id}")
        self.nodes.append(node)
        self.ids.observe(node.id)

    def remove(self, node_id: int) -> Optional[Node]:
        """Remove a node and return it. Parent links are left to the caller."""
        node = self.get(node_id)
        if node is None:
            return None
        self.nodes = [n for n in self.nodes if n.id != node_id]
        return node

    def children_of(self, node_id: int) -> List[Node]:
        return [n for n in self.nodes if n.parent_id == node_id]

    def roots(self) -> List[Node]:
        """Nodes without a resolvable parent."""
        return [n for n in self.nodes if n.parent_id is None or self.get(n.parent_id) is None]

    def select(self, node_id: int) -> bool:
        if self.get(node_id) is None:
            logger.debug("Ignoring selection of unknown node %s", node_id)
            return False
        self.selected_node_id = node_id
        return True

    def deselect(self):
        self.selected_node_id = None

    def clear(self):
        self.nodes = []
        self.selected_node_id = None

    def snapshot(self) -> List[Dict[str, Any]]:
        """Serializable copy of every node record, in store order."""
        return [node.to_record() for node in self.nodes]
