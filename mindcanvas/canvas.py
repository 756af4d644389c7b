"""Canvas widget for drawing the node scene and reporting user intents."""

import logging
from typing import Optional

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk

from mindcanvas.config import CanvasSettings
from mindcanvas.dispatch import InteractionDispatcher
from mindcanvas.painter import COLORS, draw_grid, draw_scene
from mindcanvas.renderer import Renderer

logger = logging.getLogger(__name__)


class MindMapCanvas(Gtk.DrawingArea):
    """Draws boxes and connector lines and forwards pointer input."""

    def __init__(self, renderer: Renderer, dispatcher: InteractionDispatcher,
                 settings: Optional[CanvasSettings] = None):
        super().__init__()

        self.renderer = renderer
        self.dispatcher = dispatcher
        self.settings = settings or CanvasSettings()
        self.renderer.on_changed = self.queue_draw

        # Pointer position at drag start (drag offsets are relative to it)
        self._drag_origin_x = 0.0
        self._drag_origin_y = 0.0

        # Setup widget
        self.set_draw_func(self._on_draw)
        self.set_focusable(True)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self._setup_event_controllers()

    def _setup_event_controllers(self):
        """Setup mouse event controllers."""
        # Left click: select, deselect, double click to edit
        click_ctrl = Gtk.GestureClick()
        click_ctrl.set_button(1)
        click_ctrl.connect("pressed", self._on_click)
        self.add_controller(click_ctrl)

        # Right click: delete
        right_click = Gtk.GestureClick()
        right_click.set_button(3)
        right_click.connect("pressed", self._on_right_click)
        self.add_controller(right_click)

        # Drag with the left mouse button moves a node
        drag_ctrl = Gtk.GestureDrag()
        drag_ctrl.set_button(1)
        drag_ctrl.connect("drag-begin", self._on_drag_begin)
        drag_ctrl.connect("drag-update", self._on_drag_update)
        drag_ctrl.connect("drag-end", self._on_drag_end)
        self.add_controller(drag_ctrl)

    def _on_draw(self, area, cr, width, height):
        """Main drawing function."""
        cr.save()

        cr.set_source_rgb(*COLORS['bg_primary'])
        cr.paint()

        if self.settings.show_grid:
            draw_grid(cr, width, height, self.settings.grid_size)

        draw_scene(cr, self.renderer)

        cr.restore()

    def _on_click(self, gesture, n_press, x, y):
        """Handle left click."""
        self.grab_focus()
        box = self.renderer.box_at(x, y)

        if box is None:
            self.dispatcher.deselect()
        elif n_press == 2:
            self.dispatcher.request_edit(box.node_id)
        elif n_press == 1:
            self.dispatcher.select(box.node_id)

    def _on_right_click(self, gesture, n_press, x, y):
        """Handle right click on a node."""
        box = self.renderer.box_at(x, y)
        if box is not None:
            self.dispatcher.request_delete(box.node_id)

    def _on_drag_begin(self, gesture, start_x, start_y):
        box = self.renderer.box_at(start_x, start_y)
        if box is None:
            return
        self._drag_origin_x = start_x
        self._drag_origin_y = start_y
        self.dispatcher.drag_start(box.node_id, start_x, start_y)

    def _on_drag_update(self, gesture, offset_x, offset_y):
        self.dispatcher.drag_move(self._drag_origin_x + offset_x,
                                  self._drag_origin_y + offset_y)

    def _on_drag_end(self, gesture, offset_x, offset_y):
        self.dispatcher.drag_end()
