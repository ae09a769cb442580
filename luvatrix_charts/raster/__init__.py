from .canvas import draw_hline, fill_polygon, fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_markers import draw_marker
from .draw_text import draw_text, text_size
from .render import draw_primitive, render, render_chart

__all__ = [
    "draw_hline",
    "draw_marker",
    "draw_polyline",
    "draw_primitive",
    "draw_text",
    "fill_polygon",
    "fill_rect",
    "new_canvas",
    "render",
    "render_chart",
    "text_size",
]
