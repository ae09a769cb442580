from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_grid
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colormap import Colormap, resolve_colormap
from luvatrix_charts.colors import Color
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, Line, PlotArea, Point, Rect
from luvatrix_charts.scales import AxisTransform, ScaleType, axis_ticks


LOGGER = logging.getLogger(__name__)

RANGE_FLOOR = 1e-10
FILLED_LINE_COLOR: Color = (0.2, 0.2, 0.2, 0.8)

# Corner bits go around the cell: top-left 1, top-right 2, bottom-right 4, bottom-left 8.
# Saddles 5 and 10 always split the same way.
_EDGE_TABLE: dict[int, tuple[tuple[str, str], ...]] = {
    1: (("left", "top"),),
    2: (("top", "right"),),
    3: (("left", "right"),),
    4: (("right", "bottom"),),
    5: (("left", "top"), ("right", "bottom")),
    6: (("top", "bottom"),),
    7: (("left", "bottom"),),
    8: (("left", "bottom"),),
    9: (("top", "bottom"),),
    10: (("top", "right"), ("left", "bottom")),
    11: (("right", "bottom"),),
    12: (("left", "right"),),
    13: (("top", "right"),),
    14: (("left", "top"),),
}


@dataclass(frozen=True)
class ContourSegment:
    level: float
    start: Point
    end: Point


@dataclass(frozen=True)
class ContourCell:
    row: int
    col: int
    value: float
    color: Color


@dataclass(frozen=True)
class ContourResult:
    levels: tuple[float, ...]
    segments: tuple[ContourSegment, ...]
    cells: tuple[ContourCell, ...]
    vmin: float
    vmax: float


def resolve_levels(vmin: float, vmax: float, levels: int | Sequence[float] | None, default: int = 10) -> tuple[float, ...]:
    if levels is None:
        levels = default
    if isinstance(levels, int):
        if levels < 0:
            raise ChartDataError(f"level count must be >= 0, got {levels}")
        if vmax == vmin:
            return ()
        step = (vmax - vmin) / (levels + 1)
        return tuple(vmin + k * step for k in range(1, levels + 1))
    return tuple(float(v) for v in levels)


def interpolate(a: float, b: float, level: float) -> float:
    if abs(b - a) < RANGE_FLOOR:
        return 0.5
    return (level - a) / (b - a)


def trace(
    grid: Any,
    levels: int | Sequence[float] | None = None,
    filled: bool = False,
    colormap: Colormap | str = "viridis",
) -> ContourResult:
    values = coerce_grid(grid)
    rows, cols = values.shape
    if rows < 2 or cols < 2:
        LOGGER.debug("contour grid %dx%d is too small to trace", rows, cols)
        return ContourResult(levels=(), segments=(), cells=(), vmin=0.0, vmax=0.0)
    if not np.all(np.isfinite(values)):
        raise ChartDataError("contour grid must contain only finite values")

    vmin = float(np.min(values))
    vmax = float(np.max(values))
    v_range = max(vmax - vmin, RANGE_FLOOR)
    cmap = resolve_colormap(colormap)

    cells: list[ContourCell] = []
    if filled:
        avg = (values[:-1, :-1] + values[:-1, 1:] + values[1:, :-1] + values[1:, 1:]) / 4.0
        colors = cmap.sample_many((avg - vmin) / v_range)
        for row in range(rows - 1):
            for col in range(cols - 1):
                c = colors[row, col]
                cells.append(ContourCell(row, col, float(avg[row, col]), (float(c[0]), float(c[1]), float(c[2]), float(c[3]))))

    resolved = resolve_levels(vmin, vmax, levels)
    segments: list[ContourSegment] = []
    for level in resolved:
        segments.extend(_trace_level(values, level))
    return ContourResult(levels=resolved, segments=tuple(segments), cells=tuple(cells), vmin=vmin, vmax=vmax)


def _trace_level(values: np.ndarray, level: float) -> list[ContourSegment]:
    above = values >= level
    codes = (
        above[:-1, :-1].astype(np.int8)
        | (above[:-1, 1:].astype(np.int8) << 1)
        | (above[1:, 1:].astype(np.int8) << 2)
        | (above[1:, :-1].astype(np.int8) << 3)
    )
    out: list[ContourSegment] = []
    for row, col in zip(*np.nonzero((codes != 0) & (codes != 15)), strict=True):
        row = int(row)
        col = int(col)
        tl = float(values[row, col])
        tr = float(values[row, col + 1])
        br = float(values[row + 1, col + 1])
        bl = float(values[row + 1, col])
        edges = {
            "top": (col + interpolate(tl, tr, level), float(row)),
            "bottom": (col + interpolate(bl, br, level), float(row + 1)),
            "left": (float(col), row + interpolate(tl, bl, level)),
            "right": (float(col + 1), row + interpolate(tr, br, level)),
        }
        for a, b in _EDGE_TABLE[int(codes[row, col])]:
            out.append(ContourSegment(level=level, start=edges[a], end=edges[b]))
    return out


class ContourChart(Chart):
    def __init__(
        self,
        grid: Any = None,
        *,
        filled: bool = False,
        levels: int | Sequence[float] | None = None,
        colormap: Colormap | str | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._grid = np.zeros((0, 0), dtype=np.float64) if grid is None else coerce_grid(grid)
        self.filled = filled
        self.levels: int | tuple[float, ...] = self.config.contour_levels if levels is None else _freeze_levels(levels)
        self.colormap = resolve_colormap(self.config.colormap if colormap is None else colormap)
        self.x_range: tuple[float, float] | None = None
        self.y_range: tuple[float, float] | None = None
        self._result: ContourResult | None = None

    @property
    def grid(self) -> np.ndarray:
        return self._grid

    @property
    def result(self) -> ContourResult | None:
        return self._result

    def set_data(self, grid: Any) -> None:
        self._grid = coerce_grid(grid)
        self._dirty = True

    def set_range(self, x_range: tuple[float, float] | None, y_range: tuple[float, float] | None) -> None:
        self.x_range = x_range
        self.y_range = y_range
        self._dirty = True

    def set_filled(self, filled: bool) -> None:
        self.filled = filled
        self._dirty = True

    def set_levels(self, levels: int | Sequence[float]) -> None:
        self.levels = _freeze_levels(levels)
        self._dirty = True

    def set_colormap(self, colormap: Colormap | str) -> None:
        self.colormap = resolve_colormap(colormap)
        self._dirty = True

    def clear(self) -> None:
        self._grid = np.zeros((0, 0), dtype=np.float64)
        self._result = None
        self._dirty = True

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        self._result = trace(self._grid, self.levels, self.filled, self.colormap)
        if not self._result.levels and not self._result.cells:
            return
        rows, cols = self._grid.shape
        cell_w = area.width / (cols - 1)
        cell_h = area.height / (rows - 1)

        for cell in self._result.cells:
            out.add(FilledRect(area.left + cell.col * cell_w, area.top + cell.row * cell_h, cell_w, cell_h, cell.color))

        span = max(self._result.vmax - self._result.vmin, RANGE_FLOOR)
        for seg in self._result.segments:
            color = FILLED_LINE_COLOR if self.filled else self.colormap.sample((seg.level - self._result.vmin) / span)
            start = (area.left + seg.start[0] * cell_w, area.top + seg.start[1] * cell_h)
            end = (area.left + seg.end[0] * cell_w, area.top + seg.end[1] * cell_h)
            out.add(Line(start, end, color, 1.0))

        x_lo, x_hi = self.x_range if self.x_range is not None else (0.0, float(cols - 1))
        y_lo, y_hi = self.y_range if self.y_range is not None else (0.0, float(rows - 1))
        draw_axes(
            out,
            area,
            axis_ticks(AxisTransform(ScaleType.LINEAR, x_lo, x_hi, area.left, area.right), self.config.tick_count),
            axis_ticks(AxisTransform(ScaleType.LINEAR, y_lo, y_hi, area.top, area.bottom), self.config.tick_count),
            font_size=self.config.font_size,
            grid=False,
        )


def _freeze_levels(levels: int | Sequence[float]) -> int | tuple[float, ...]:
    if isinstance(levels, int):
        if levels < 0:
            raise ChartDataError(f"level count must be >= 0, got {levels}")
        return levels
    return tuple(float(v) for v in levels)
