from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any

import numpy as np

from luvatrix_charts.colors import Color, lerp_color
from luvatrix_charts.chart import Chart
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, PlotArea, Point, Polygon, Rect
from luvatrix_charts.records import HexbinPoint


LOGGER = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)
MIN_HEX_RADIUS = 5.0
HEX_FILL_RATIO = 0.94
DEFAULT_HIGH_COLOR: Color = (0.05, 0.15, 0.45, 1.0)
DEFAULT_LOW_COLOR: Color = (0.92, 0.95, 0.98, 1.0)


@dataclass(frozen=True)
class HexBin:
    q: int
    r: int
    s: int
    count: int
    ring: int
    center: Point


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def cube_round(q: float, r: float) -> tuple[int, int, int]:
    s = -q - r
    rq = _round_half_away(q)
    rr = _round_half_away(r)
    rs = _round_half_away(s)
    dq = abs(rq - q)
    dr = abs(rr - r)
    ds = abs(rs - s)
    if dq > dr and dq > ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs
    else:
        rs = -rq - rr
    return rq, rr, rs


def hex_ring(q: int, r: int) -> int:
    return max(abs(q), abs(r), abs(q + r))


def pixel_to_hex(px: float, py: float, radius: float) -> tuple[float, float]:
    return (px * SQRT3 / 3.0 - py / 3.0) / radius, (py * 2.0 / 3.0) / radius


def hex_to_pixel(q: int, r: int, radius: float) -> Point:
    return radius * (SQRT3 * q + SQRT3 / 2.0 * r), radius * 1.5 * r


def hexagon_corners(center: Point, radius: float) -> tuple[Point, ...]:
    cx, cy = center
    return tuple(
        (cx + radius * math.cos(math.pi / 3.0 * i + math.pi / 2.0), cy + radius * math.sin(math.pi / 3.0 * i + math.pi / 2.0))
        for i in range(6)
    )


def grid_rings(chart_rect: Rect, hex_radius: float) -> int:
    size = min(chart_rect.width, chart_rect.height)
    if size <= 0:
        return 0
    return int(math.floor((size / 2.0) / (hex_radius * 1.5)))


def coerce_points(points: Any) -> np.ndarray:
    if isinstance(points, np.ndarray):
        arr = points.astype(np.float64, copy=False)
        if arr.size == 0:
            return np.zeros((0, 2), dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ChartDataError(f"points must have shape (n, 2), got {arr.shape}")
        return arr
    rows: list[tuple[float, float]] = []
    for i, p in enumerate(points):
        if isinstance(p, HexbinPoint):
            rows.append((p.x, p.y))
            continue
        try:
            x, y = p
            rows.append((float(x), float(y)))
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"point {i} is not an (x, y) pair: {p!r}") from exc
    return np.asarray(rows, dtype=np.float64).reshape(-1, 2)


def calculate_bins(points: Any, chart_rect: Rect, hex_radius: float) -> tuple[list[HexBin], int]:
    if hex_radius <= 0:
        raise ChartDataError("hex_radius must be > 0")
    pts = coerce_points(points)
    size = max(min(chart_rect.width, chart_rect.height), 0.0)
    cx, cy = chart_rect.center
    rings = grid_rings(chart_rect, hex_radius)

    counts: dict[tuple[int, int], int] = {}
    for q in range(-rings, rings + 1):
        for r in range(max(-rings, -q - rings), min(rings, -q + rings) + 1):
            counts[(q, r)] = 0

    if pts.shape[0]:
        x_min, y_min = np.min(pts, axis=0)
        x_max, y_max = np.max(pts, axis=0)
        x_range = max(float(x_max - x_min), 1.0)
        y_range = max(float(y_max - y_min), 1.0)
        px = (pts[:, 0] - x_min) / x_range * size - size / 2.0
        py = (pts[:, 1] - y_min) / y_range * size - size / 2.0
        spilled = 0
        for x, y in zip(px.tolist(), py.tolist(), strict=True):
            q, r, _ = cube_round(*pixel_to_hex(x, y, hex_radius))
            if (q, r) not in counts:
                counts[(q, r)] = 0
                spilled += 1
            counts[(q, r)] += 1
        if spilled:
            LOGGER.debug("added %d hex cells outside the %d-ring grid", spilled, rings)

    bins: list[HexBin] = []
    for (q, r), count in counts.items():
        ox, oy = hex_to_pixel(q, r, hex_radius)
        bins.append(HexBin(q=q, r=r, s=-q - r, count=count, ring=hex_ring(q, r), center=(cx + ox, cy + oy)))
    bins.sort(key=lambda b: (b.ring, b.q, b.r))
    return bins, rings


def smoothstep(t: float) -> float:
    t = min(max(t, 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)


class HexbinChart(Chart):
    def __init__(
        self,
        points: Any = None,
        *,
        hex_radius: float | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._points = np.zeros((0, 2), dtype=np.float64) if points is None else coerce_points(points)
        self.hex_radius = max(self.config.hex_radius if hex_radius is None else hex_radius, MIN_HEX_RADIUS)
        self.color_low: Color = DEFAULT_LOW_COLOR
        self.color_high: Color = DEFAULT_HIGH_COLOR
        self._bins: list[HexBin] = []
        self._max_ring = 0

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def bins(self) -> list[HexBin]:
        return list(self._bins)

    @property
    def max_ring(self) -> int:
        return self._max_ring

    def set_data(self, points: Any) -> None:
        self._points = coerce_points(points)
        self._dirty = True

    def add_point(self, x: float, y: float) -> None:
        self._points = np.vstack([self._points, np.asarray([[x, y]], dtype=np.float64)])
        self._dirty = True

    def set_hex_radius(self, radius: float) -> None:
        self.hex_radius = max(float(radius), MIN_HEX_RADIUS)
        self._dirty = True

    def set_colors(self, low: Color, high: Color) -> None:  # type: ignore[override]
        self.color_low = low
        self.color_high = high
        self._dirty = True

    def clear(self) -> None:
        self._points = np.zeros((0, 2), dtype=np.float64)
        self._bins = []
        self._max_ring = 0
        self._dirty = True

    def color_for_ring(self, ring: int) -> Color:
        t = ring / self._max_ring if self._max_ring > 0 else 0.0
        return lerp_color(self.color_high, self.color_low, smoothstep(t))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        pad = self.config.hex_padding
        inner = Rect(area.left + pad, area.top + pad, max(area.width - 2 * pad, 0.0), max(area.height - 2 * pad, 0.0))
        self._bins, self._max_ring = calculate_bins(self._points, inner, self.hex_radius)
        for b in self._bins:
            out.add(Polygon(hexagon_corners(b.center, self.hex_radius * HEX_FILL_RATIO), self.color_for_ring(b.ring)))
