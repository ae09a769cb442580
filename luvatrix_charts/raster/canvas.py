from __future__ import annotations

from collections.abc import Sequence
import math

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.empty((max(0, height), max(0, width), 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def _blend(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    if a <= 0.0:
        return
    src = np.asarray(color[0:3], dtype=np.float32) * a
    segment[..., :3] = (src + segment[..., :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    segment[..., 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    _blend(dst[y, x], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend(dst[y, xa : xb + 1], color)


def fill_rect(dst: np.ndarray, x: float, y: float, width: float, height: float, color: RGBA) -> None:
    x0 = max(0, int(math.floor(min(x, x + width))))
    x1 = min(dst.shape[1], int(math.ceil(max(x, x + width))))
    y0 = max(0, int(math.floor(min(y, y + height))))
    y1 = min(dst.shape[0], int(math.ceil(max(y, y + height))))
    if x0 >= x1 or y0 >= y1:
        return
    _blend(dst[y0:y1, x0:x1], color)


def fill_polygon(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA) -> None:
    """Even-odd scanline fill sampled at pixel centers."""
    if len(points) < 3:
        return
    pts = np.asarray(points, dtype=np.float64)
    if not np.all(np.isfinite(pts)):
        return
    xs = pts[:, 0]
    ys = pts[:, 1]
    nx = np.roll(xs, -1)
    ny = np.roll(ys, -1)
    row_lo = max(0, int(math.floor(float(np.min(ys)))))
    row_hi = min(dst.shape[0] - 1, int(math.ceil(float(np.max(ys)))))
    for row in range(row_lo, row_hi + 1):
        sy = row + 0.5
        crosses = ((ys <= sy) & (ny > sy)) | ((ny <= sy) & (ys > sy))
        if not np.any(crosses):
            continue
        t = (sy - ys[crosses]) / (ny[crosses] - ys[crosses])
        hits = np.sort(xs[crosses] + t * (nx[crosses] - xs[crosses]))
        for left, right in zip(hits[0::2].tolist(), hits[1::2].tolist()):
            xa = int(math.ceil(left - 0.5))
            xb = int(math.floor(right - 0.5))
            if xa <= xb:
                draw_hline(dst, xa, xb, row, color)
