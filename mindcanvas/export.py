"""Export functionality for MindCanvas maps."""

import json
import logging
from pathlib import Path
from typing import Iterable

from mindcanvas.database import get_data_dir
from mindcanvas.renderer import Renderer
from mindcanvas.store import Node

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "mindmap.json"


def export_json(nodes: Iterable[Node]) -> str:
    """Pretty-printed snapshot of the node sequence."""
    return json.dumps([node.to_record() for node in nodes], indent=2)


class MindMapExporter:
    """Writes read-only snapshots of the current map."""

    def export_json_file(self, nodes: Iterable[Node], filepath: str) -> bool:
        """Export the node sequence as JSON."""
        data = export_json(nodes)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(data)
        logger.info("Exported JSON to %s", filepath)
        return True

    def export_png(self, renderer: Renderer, filepath: str,
                   scale: float = 2.0, transparent: bool = False) -> bool:
        """Export the current scene to a PNG image."""
        import cairo
        from mindcanvas.painter import COLORS, draw_scene

        bounds = renderer.bounds()
        if bounds is None:
            return False
        min_x, min_y, max_x, max_y = bounds

        padding = 50
        width = int((max_x - min_x + padding * 2) * scale)
        height = int((max_y - min_y + padding * 2) * scale)

        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
        cr = cairo.Context(surface)

        cr.scale(scale, scale)
        cr.translate(-min_x + padding, -min_y + padding)

        if not transparent:
            cr.set_source_rgb(*COLORS['bg_primary'])
            cr.paint()

        draw_scene(cr, renderer)

        surface.write_to_png(filepath)
        logger.info("Exported PNG to %s", filepath)
        return True


def get_export_dir() -> Path:
    """Get the default export directory."""
    export_dir = get_data_dir() / "exports"
    export_dir.mkdir(exist_ok=True)
    return export_dir
