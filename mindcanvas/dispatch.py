"""Routes named user intents to graph operations and drag sessions.

Front ends never touch the store directly. They report what the user did
(select, edit, delete, drag, add, clear...) and the dispatcher forwards it.
Prompts and confirmations are supplied by the front end as callbacks that
may answer later, the way GTK dialogs do.
"""

import logging
from enum import Enum
from typing import Optional, Callable

from mindcanvas.drag import DragController
from mindcanvas.export import MindMapExporter
from mindcanvas.operations import GraphOperations

logger = logging.getLogger(__name__)

ConfirmFunc = Callable[[str, Callable[[bool], None]], None]
PromptFunc = Callable[[str, str, Callable[[Optional[str]], None]], None]


class Intent(Enum):
    SELECT = "select"
    DESELECT = "deselect"
    EDIT = "edit"
    DELETE = "delete"
    DRAG_START = "drag_start"
    DRAG_MOVE = "drag_move"
    DRAG_END = "drag_end"
    ADD = "add"
    CLEAR = "clear"
    SAVE = "save"
    EXPORT = "export"


def _always_confirm(message: str, on_result: Callable[[bool], None]):
    on_result(True)


def _never_prompt(message: str, initial: str, on_result: Callable[[Optional[str]], None]):
    on_result(None)


class InteractionDispatcher:
    """Single entry point for every user interaction."""

    def __init__(self, operations: GraphOperations, drag: DragController,
                 confirm: Optional[ConfirmFunc] = None,
                 prompt: Optional[PromptFunc] = None,
                 exporter: Optional[MindMapExporter] = None,
                 confirm_destructive: bool = True):
        self.operations = operations
        self.drag = drag
        self.confirm = confirm or _always_confirm
        self.prompt = prompt or _never_prompt
        self.exporter = exporter or MindMapExporter()
        self.confirm_destructive = confirm_destructive

        self._handlers = {
            Intent.SELECT: self.select,
            Intent.DESELECT: self.deselect,
            Intent.EDIT: self.request_edit,
            Intent.DELETE: self.request_delete,
            Intent.DRAG_START: self.drag_start,
            Intent.DRAG_MOVE: self.drag_move,
            Intent.DRAG_END: self.drag_end,
            Intent.ADD: self.add,
            Intent.CLEAR: self.request_clear,
            Intent.SAVE: self.save,
            Intent.EXPORT: self.export,
        }

    def dispatch(self, intent, **kwargs):
        """Route an intent (or its name) to its handler."""
        try:
            intent = Intent(intent)
        except ValueError:
            raise ValueError(f"Unknown intent: {intent!r}") from None
        logger.debug("Dispatching %s %s", intent.value, kwargs)
        return self._handlers[intent](**kwargs)

    # ==================== Selection ====================

    def select(self, node_id: int) -> bool:
        return self.operations.select_node(node_id)

    def deselect(self):
        self.operations.deselect_all()

    # ==================== Structure ====================

    def add(self, text: str):
        return self.operations.add_node(text)

    def request_edit(self, node_id: int):
        """Ask for replacement text, then edit."""
        node = self.operations.store.get(node_id)
        if node is None:
            return

        def on_result(text: Optional[str]):
            self.operations.edit_node(node_id, text)

        self.prompt("Edit idea:", node.text, on_result)

    def request_delete(self, node_id: int):
        """Confirm, then delete the node."""
        if node_id not in self.operations.store:
            return

        def on_result(confirmed: bool):
            if confirmed:
                self.operations.delete_node(node_id)

        self._confirm("Delete this node?", on_result)

    def request_clear(self):
        """Confirm, then remove every node."""
        def on_result(confirmed: bool):
            if confirmed:
                self.operations.clear_all()

        self._confirm("Clear all nodes?", on_result)

    # ==================== Dragging ====================

    def drag_start(self, node_id: int, x: float, y: float, button: int = 1) -> bool:
        return self.drag.begin(node_id, x, y, button)

    def drag_move(self, x: float, y: float):
        self.drag.move(x, y)

    def drag_end(self):
        self.drag.end()

    # ==================== Saving ====================

    def save(self):
        self.operations.save()

    def export(self, filepath: str, fmt: str = "json") -> bool:
        if fmt == "png":
            return self.exporter.export_png(self.operations.renderer, filepath)
        return self.exporter.export_json_file(self.operations.store.nodes, filepath)

    def _confirm(self, message: str, on_result: Callable[[bool], None]):
        if not self.confirm_destructive:
            on_result(True)
            return
        self.confirm(message, on_result)
