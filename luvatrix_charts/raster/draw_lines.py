from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from luvatrix_charts.geometry import LineStyle
from luvatrix_charts.raster.canvas import RGBA, draw_pixel


DASH_PATTERNS: dict[LineStyle, tuple[int, ...]] = {
    LineStyle.SOLID: (),
    LineStyle.DASHED: (6, 4),
    LineStyle.DOTTED: (1, 3),
    LineStyle.DASH_DOT: (6, 3, 1, 3),
}


def draw_polyline(
    dst: np.ndarray,
    points: Sequence[tuple[float, float]],
    color: RGBA,
    width: int = 1,
    *,
    closed: bool = False,
    style: LineStyle = LineStyle.SOLID,
) -> None:
    if style is LineStyle.NONE or len(points) < 2:
        return
    pts = [(int(round(x)), int(round(y))) for x, y in points if np.isfinite(x) and np.isfinite(y)]
    if closed and len(pts) > 2:
        pts.append(pts[0])
    pattern = DASH_PATTERNS[style]
    # Dash phase carries across segments so patterns stay even around corners.
    phase = 0
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        phase = _draw_line_segment(dst, x0, y0, x1, y1, color, width, pattern, phase)


def _dash_on(pattern: tuple[int, ...], phase: int) -> bool:
    if not pattern:
        return True
    pos = phase % sum(pattern)
    for i, run in enumerate(pattern):
        if pos < run:
            return i % 2 == 0
        pos -= run
    return True


def _draw_line_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: RGBA,
    width: int,
    pattern: tuple[int, ...],
    phase: int,
) -> int:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        if _dash_on(pattern, phase):
            _draw_square_brush(dst, x0, y0, color, width)
        if x0 == x1 and y0 == y1:
            return phase
        phase += 1
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    if radius == 0:
        draw_pixel(dst, x, y, color)
        return
    ya = max(0, y - radius)
    yb = min(dst.shape[0], y + radius + 1)
    xa = max(0, x - radius)
    xb = min(dst.shape[1], x + radius + 1)
    if ya >= yb or xa >= xb:
        return
    a = color[3] / 255.0
    patch = dst[ya:yb, xa:xb]
    patch[..., :3] = (
        np.asarray(color[0:3], dtype=np.float32) * a + patch[..., :3].astype(np.float32) * (1.0 - a)
    ).astype(np.uint8)
    patch[..., 3] = 255
