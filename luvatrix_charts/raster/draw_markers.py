from __future__ import annotations

import math

import numpy as np

from luvatrix_charts.geometry import MarkerStyle
from luvatrix_charts.raster.canvas import RGBA, fill_polygon, fill_rect
from luvatrix_charts.raster.draw_lines import draw_polyline


def draw_marker(dst: np.ndarray, x: float, y: float, size: float, color: RGBA, style: MarkerStyle) -> None:
    r = max(0.5, size / 2.0)
    if style is MarkerStyle.NONE:
        return
    if style is MarkerStyle.CIRCLE:
        _draw_disc(dst, x, y, r, color)
    elif style is MarkerStyle.SQUARE:
        fill_rect(dst, x - r, y - r, 2.0 * r, 2.0 * r, color)
    elif style is MarkerStyle.TRIANGLE:
        fill_polygon(dst, [(x, y - r), (x + r, y + r), (x - r, y + r)], color)
    elif style is MarkerStyle.DIAMOND:
        fill_polygon(dst, [(x, y - r), (x + r, y), (x, y + r), (x - r, y)], color)
    elif style is MarkerStyle.CROSS:
        draw_polyline(dst, [(x - r, y - r), (x + r, y + r)], color, 2)
        draw_polyline(dst, [(x - r, y + r), (x + r, y - r)], color, 2)
    elif style is MarkerStyle.PLUS:
        draw_polyline(dst, [(x - r, y), (x + r, y)], color, 2)
        draw_polyline(dst, [(x, y - r), (x, y + r)], color, 2)
    elif style is MarkerStyle.STAR:
        fill_polygon(dst, star_points(x, y, r), color)


def star_points(x: float, y: float, r: float) -> list[tuple[float, float]]:
    points: list[tuple[float, float]] = []
    for i in range(10):
        radius = r if i % 2 == 0 else r * 0.4
        angle = -math.pi / 2.0 + i * math.pi / 5.0
        points.append((x + radius * math.cos(angle), y + radius * math.sin(angle)))
    return points


def _draw_disc(dst: np.ndarray, x: float, y: float, r: float, color: RGBA) -> None:
    y0 = max(0, int(math.floor(y - r)))
    y1 = min(dst.shape[0], int(math.ceil(y + r)) + 1)
    x0 = max(0, int(math.floor(x - r)))
    x1 = min(dst.shape[1], int(math.ceil(x + r)) + 1)
    if y0 >= y1 or x0 >= x1:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    inside = (xx + 0.5 - x) ** 2 + (yy + 0.5 - y) ** 2 <= r * r
    if not np.any(inside):
        return
    a = color[3] / 255.0
    patch = dst[y0:y1, x0:x1]
    blended = np.asarray(color[0:3], dtype=np.float32) * a + patch[..., :3].astype(np.float32) * (1.0 - a)
    patch[inside, :3] = blended[inside].astype(np.uint8)
    patch[inside, 3] = 255
