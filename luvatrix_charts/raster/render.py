from __future__ import annotations

from collections.abc import Iterable
import logging

import numpy as np

from luvatrix_charts.chart import Chart
from luvatrix_charts.colors import WHITE, Color, to_rgba8
from luvatrix_charts.geometry import (
    ArcStroke,
    FilledRect,
    Line,
    Marker,
    Polygon,
    Polyline,
    Primitive,
    Rect,
    Text,
    Wedge,
    wedge_outline,
)
from luvatrix_charts.raster.canvas import fill_polygon, fill_rect, new_canvas
from luvatrix_charts.raster.draw_lines import draw_polyline
from luvatrix_charts.raster.draw_markers import draw_marker
from luvatrix_charts.raster.draw_text import draw_text


LOGGER = logging.getLogger(__name__)


def render(draw_list: Iterable[Primitive], width: int, height: int, background: Color = WHITE) -> np.ndarray:
    """Rasterize primitives in list order onto an (H, W, 4) uint8 RGBA frame."""
    frame = new_canvas(width, height, to_rgba8(background))
    for item in draw_list:
        draw_primitive(frame, item)
    return frame


def render_chart(chart: Chart, width: int, height: int, background: Color = WHITE) -> np.ndarray:
    return render(chart.layout(Rect(0.0, 0.0, float(width), float(height))), width, height, background)


def draw_primitive(frame: np.ndarray, item: Primitive) -> None:
    if isinstance(item, Line):
        draw_polyline(frame, [item.start, item.end], to_rgba8(item.color), _px(item.width), style=item.style)
    elif isinstance(item, Polyline):
        draw_polyline(
            frame, item.points, to_rgba8(item.color), _px(item.width), closed=item.closed, style=item.style
        )
    elif isinstance(item, FilledRect):
        fill_rect(frame, item.x, item.y, item.width, item.height, to_rgba8(item.color))
        if item.border is not None:
            corners = [
                (item.x, item.y),
                (item.x + item.width, item.y),
                (item.x + item.width, item.y + item.height),
                (item.x, item.y + item.height),
            ]
            draw_polyline(frame, corners, to_rgba8(item.border), 1, closed=True)
    elif isinstance(item, Polygon):
        fill_polygon(frame, item.points, to_rgba8(item.color))
        if item.outline is not None:
            draw_polyline(frame, item.points, to_rgba8(item.outline), 1, closed=True)
    elif isinstance(item, Wedge):
        fill_polygon(frame, wedge_outline(item), to_rgba8(item.color))
    elif isinstance(item, ArcStroke):
        half = item.width / 2.0
        band = Wedge(
            item.center,
            item.radius + half,
            item.start_angle,
            item.end_angle,
            item.color,
            inner_radius=max(0.0, item.radius - half),
        )
        fill_polygon(frame, wedge_outline(band), to_rgba8(item.color))
    elif isinstance(item, Marker):
        draw_marker(frame, item.center[0], item.center[1], item.size, to_rgba8(item.color), item.style)
    elif isinstance(item, Text):
        draw_text(
            frame,
            item.position[0],
            item.position[1],
            item.text,
            to_rgba8(item.color),
            font_size_px=item.size,
            h_align=item.h_align,
            v_align=item.v_align,
        )
    else:
        LOGGER.warning("skipping unsupported primitive %s", type(item).__name__)


def _px(width: float) -> int:
    return max(1, int(round(width)))
