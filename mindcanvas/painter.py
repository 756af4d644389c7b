"""Cairo drawing for the node scene, shared by the canvas and PNG export."""

import math

import cairo

from mindcanvas.renderer import Renderer, NodeBox, BOX_WIDTH, BOX_HEIGHT

# Colors
COLORS = {
    'bg_primary': (0.969, 0.969, 0.973),      # #f7f7f8
    'grid_dots': (0.85, 0.85, 0.87),
    'surface': (1.0, 1.0, 1.0),               # #ffffff
    'border_subtle': (0.8, 0.8, 0.82),        # #cccdd1
    'border_active': (0.055, 0.647, 0.914),   # #0ea5e9
    'surface_selected': (0.878, 0.949, 0.996),
    'text_primary': (0.133, 0.133, 0.133),    # #222222
    'line': (0.6, 0.6, 0.6),                  # #999999
}

LINE_WIDTH = 2
NODE_PADDING = 10
FONT_FACE = "Sans"
FONT_SIZE = 13


def draw_rounded_rect(cr, x: float, y: float, w: float, h: float, radius: float):
    """Draw a rounded rectangle path."""
    cr.new_path()
    cr.arc(x + w - radius, y + radius, radius, -math.pi / 2, 0)
    cr.arc(x + w - radius, y + h - radius, radius, 0, math.pi / 2)
    cr.arc(x + radius, y + h - radius, radius, math.pi / 2, math.pi)
    cr.arc(x + radius, y + radius, radius, math.pi, 3 * math.pi / 2)
    cr.close_path()


def draw_grid(cr, width: float, height: float, grid_size: float):
    """Draw dot grid pattern."""
    cr.save()
    cr.set_source_rgb(*COLORS['grid_dots'])
    x = 0.0
    while x < width:
        y = 0.0
        while y < height:
            cr.arc(x, y, 1.2, 0, 2 * math.pi)
            cr.fill()
            y += grid_size
        x += grid_size
    cr.restore()


def draw_lines(cr, renderer: Renderer):
    cr.save()
    cr.set_source_rgb(*COLORS['line'])
    cr.set_line_width(LINE_WIDTH)
    cr.set_line_cap(cairo.LINE_CAP_ROUND)
    for line in renderer.lines:
        cr.move_to(line.x1, line.y1)
        cr.line_to(line.x2, line.y2)
        cr.stroke()
    cr.restore()


def draw_box(cr, box: NodeBox):
    """Draw a single node box."""
    cr.save()

    draw_rounded_rect(cr, box.x, box.y, BOX_WIDTH, BOX_HEIGHT, 6)
    bg = COLORS['surface_selected'] if box.selected else COLORS['surface']
    cr.set_source_rgb(*bg)
    cr.fill_preserve()

    if box.selected:
        cr.set_source_rgb(*COLORS['border_active'])
        cr.set_line_width(2)
    else:
        cr.set_source_rgb(*COLORS['border_subtle'])
        cr.set_line_width(1)
    cr.stroke()

    cr.set_source_rgb(*COLORS['text_primary'])
    cr.select_font_face(FONT_FACE, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_NORMAL)
    cr.set_font_size(FONT_SIZE)

    # Truncate text if too long
    text = box.text
    extents = cr.text_extents(text)
    max_width = BOX_WIDTH - NODE_PADDING * 2
    while extents.width > max_width and len(text) > 3:
        text = text[:-4] + "..."
        extents = cr.text_extents(text)

    cr.move_to(box.x + NODE_PADDING, box.y + BOX_HEIGHT / 2 + extents.height / 2 - 2)
    cr.show_text(text)

    cr.restore()


def draw_scene(cr, renderer: Renderer):
    """Draw connector lines behind every box."""
    draw_lines(cr, renderer)
    for box in renderer.boxes.values():
        draw_box(cr, box)
