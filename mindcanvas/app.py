"""Main MindCanvas application."""

import logging
import sqlite3
import sys
from typing import Optional, Callable

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gio, GLib, Adw

import cairo

from mindcanvas import __version__, __app_id__, configure_logging
from mindcanvas.canvas import MindMapCanvas
from mindcanvas.config import CanvasSettings, load_settings
from mindcanvas.database import Database, NodeRepository
from mindcanvas.dispatch import InteractionDispatcher
from mindcanvas.drag import DragController
from mindcanvas.export import DEFAULT_EXPORT_NAME, MindMapExporter, get_export_dir
from mindcanvas.layout import LayoutPolicy
from mindcanvas.operations import GraphOperations
from mindcanvas.renderer import Renderer

logger = logging.getLogger(__name__)


class MindCanvasWindow(Adw.ApplicationWindow):
    """Main application window."""

    def __init__(self, app: Adw.Application, db: Database):
        super().__init__(application=app)
        self.db = db
        self.settings: CanvasSettings = load_settings(db)
        self.repository = NodeRepository(db)

        # Session state is built once, from persisted storage
        store = self.repository.load_store()
        self.renderer = Renderer()
        self.operations = GraphOperations(store, LayoutPolicy(), self.renderer, self.repository,
                                         on_save_error=self._on_save_error)
        self.drag = DragController(self.operations)
        self.dispatcher = InteractionDispatcher(
            self.operations,
            self.drag,
            confirm=self._confirm,
            prompt=self._prompt,
            exporter=MindMapExporter(),
            confirm_destructive=self.settings.confirm_destructive,
        )

        # Window setup
        self.set_title("MindCanvas")
        self.set_default_size(1200, 800)

        self._build_ui()
        self._setup_shortcuts()

        self.operations.render()

    def _build_ui(self):
        """Build the main UI layout."""
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        main_box.append(self._build_header())

        self.canvas = MindMapCanvas(self.renderer, self.dispatcher, self.settings)
        canvas_frame = Gtk.Frame()
        canvas_frame.set_child(self.canvas)
        canvas_frame.set_vexpand(True)

        # Wrap in toast overlay for in-app notifications
        self.toast_overlay = Adw.ToastOverlay()
        self.toast_overlay.set_child(canvas_frame)
        main_box.append(self.toast_overlay)

        self.set_content(main_box)

    def _build_header(self) -> Adw.HeaderBar:
        """Build the header bar with the idea form and map actions."""
        header = Adw.HeaderBar()

        # Idea entry
        self.node_entry = Gtk.Entry()
        self.node_entry.set_placeholder_text("New idea...")
        self.node_entry.set_width_chars(30)
        self.node_entry.connect("activate", lambda e: self._on_add())
        header.pack_start(self.node_entry)

        add_btn = Gtk.Button(label="Add")
        add_btn.add_css_class("suggested-action")
        add_btn.set_tooltip_text("Add idea (child of the selected node)")
        add_btn.connect("clicked", lambda b: self._on_add())
        header.pack_start(add_btn)

        # Menu
        menu_btn = Gtk.MenuButton()
        menu_btn.set_icon_name("open-menu-symbolic")
        menu_btn.set_tooltip_text("Menu")

        menu = Gio.Menu()
        export_section = Gio.Menu()
        export_section.append("Export as JSON...", "win.export-json")
        export_section.append("Export as PNG...", "win.export-png")
        menu.append_section(None, export_section)

        help_section = Gio.Menu()
        help_section.append("About MindCanvas", "win.show-about")
        menu.append_section(None, help_section)

        popover = Gtk.PopoverMenu()
        popover.set_menu_model(menu)
        menu_btn.set_popover(popover)
        header.pack_end(menu_btn)

        clear_btn = Gtk.Button(label="Clear")
        clear_btn.add_css_class("destructive-action")
        clear_btn.connect("clicked", lambda b: self.dispatcher.request_clear())
        header.pack_end(clear_btn)

        save_btn = Gtk.Button(label="Save")
        save_btn.set_tooltip_text("Save (Ctrl+S)")
        save_btn.connect("clicked", lambda b: self._on_save())
        header.pack_end(save_btn)

        return header

    def _setup_shortcuts(self):
        """Setup window actions and keyboard shortcuts."""
        actions = [
            ("save", self._on_save, "<Control>s"),
            ("export-json", self._export_json, "<Control>e"),
            ("export-png", self._export_png, None),
            ("show-about", self._show_about, None),
            ("quit", lambda: self.close(), "<Control>q"),
        ]

        for name, callback, accel in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", lambda a, p, cb=callback: cb())
            self.add_action(action)

            if accel:
                self.get_application().set_accels_for_action(f"win.{name}", [accel])

    # ==================== Event Handlers ====================

    def _on_add(self):
        """Handle idea form submit."""
        if self.dispatcher.add(self.node_entry.get_text()):
            self.node_entry.set_text("")

    def _on_save(self):
        """Manual save."""
        try:
            self.dispatcher.save()
            self.repository.create_backup(self.settings.backup_count)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Save failed: %s", exc)
            self._show_toast("Save failed")
            return
        self._show_toast("Map saved!")

    def _on_save_error(self, exc: Exception):
        """Report a failed automatic save."""
        self._show_toast("Save failed")

    # ==================== Dialogs ====================

    def _confirm(self, message: str, on_result: Callable[[bool], None]):
        """Ask the user to confirm a destructive action."""
        dialog = Adw.MessageDialog(
            transient_for=self,
            heading="Are you sure?",
            body=message
        )
        dialog.add_response("cancel", "Cancel")
        dialog.add_response("confirm", "Delete")
        dialog.set_response_appearance("confirm", Adw.ResponseAppearance.DESTRUCTIVE)
        dialog.set_default_response("cancel")
        dialog.connect("response", lambda d, r: on_result(r == "confirm"))
        dialog.present()

    def _prompt(self, message: str, initial: str, on_result: Callable[[Optional[str]], None]):
        """Ask the user for replacement text."""
        dialog = Adw.MessageDialog(
            transient_for=self,
            heading="Edit Idea",
            body=message
        )

        entry = Gtk.Entry()
        entry.set_text(initial)
        entry.set_margin_start(16)
        entry.set_margin_end(16)
        entry.connect("activate", lambda e: dialog.response("save"))
        dialog.set_extra_child(entry)

        dialog.add_response("cancel", "Cancel")
        dialog.add_response("save", "Save")
        dialog.set_default_response("save")
        dialog.connect("response", lambda d, r: on_result(entry.get_text() if r == "save" else None))
        dialog.present()
        entry.grab_focus()

    def _show_about(self):
        """Show about dialog."""
        about = Adw.AboutWindow(
            transient_for=self,
            application_name="MindCanvas",
            application_icon="applications-graphics",
            developer_name="MindCanvas Project",
            version=__version__,
            license_type=Gtk.License.MIT_X11,
            comments="A freeform mind map canvas"
        )
        about.present()

    # ==================== Export ====================

    def _export_json(self):
        """Export the current map as JSON."""
        self._choose_export_file("Export as JSON", DEFAULT_EXPORT_NAME,
                                 "JSON Files", "application/json", "json")

    def _export_png(self):
        """Export the current map as PNG."""
        self._choose_export_file("Export as PNG", "mindmap.png",
                                 "PNG Images", "image/png", "png")

    def _choose_export_file(self, title: str, initial_name: str,
                            filter_name: str, mime_type: str, fmt: str):
        dialog = Gtk.FileDialog()
        dialog.set_title(title)
        dialog.set_initial_name(initial_name)
        dialog.set_initial_folder(Gio.File.new_for_path(str(get_export_dir())))

        file_filter = Gtk.FileFilter()
        file_filter.set_name(filter_name)
        file_filter.add_mime_type(mime_type)

        filters = Gio.ListStore.new(Gtk.FileFilter)
        filters.append(file_filter)
        dialog.set_filters(filters)

        dialog.save(self, None, lambda d, r: self._on_export_response(d, r, fmt))

    def _on_export_response(self, dialog, result, fmt: str):
        """Handle export dialog response."""
        try:
            file = dialog.save_finish(result)
        except GLib.Error:
            return  # User cancelled

        filepath = file.get_path() if file else None
        if not filepath:
            self._show_toast("Export failed: selected location is not a local file")
            return

        try:
            ok = self.dispatcher.export(filepath, fmt)
        except (OSError, cairo.Error) as exc:
            logger.error("Export to %s failed: %s", filepath, exc)
            ok = False

        if ok:
            self._show_toast(f"Exported to {filepath}")
        else:
            self._show_toast("Export failed")

    def _show_toast(self, message: str):
        """Show a toast notification."""
        toast = Adw.Toast(title=message)
        toast.set_timeout(3)
        self.toast_overlay.add_toast(toast)


class MindCanvasApp(Adw.Application):
    """Main application class."""

    def __init__(self):
        super().__init__(
            application_id=__app_id__,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS
        )
        self.db: Optional[Database] = None
        self.window: Optional[MindCanvasWindow] = None

    def do_startup(self):
        """Initialize application."""
        Adw.Application.do_startup(self)
        self.db = Database()

    def do_activate(self):
        """Activate application."""
        if not self.window:
            self.window = MindCanvasWindow(self, self.db)

        self.window.present()

    def do_shutdown(self):
        """Shutdown application."""
        if self.window and self.window.drag.is_active:
            self.window.drag.end()
        if self.db:
            self.db.close()

        Adw.Application.do_shutdown(self)


def main() -> int:
    """Application entry point."""
    configure_logging()
    app = MindCanvasApp()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
