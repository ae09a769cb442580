from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import BLACK, TEXT_GREY, WHITE, Color, darken, with_alpha
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, Line, Marker, MarkerStyle, PlotArea, Rect, Text
from luvatrix_charts.scales import AxisTicks, AxisTransform, ScaleType, axis_ticks, pad_limits


LOGGER = logging.getLogger(__name__)

STURGES_FACTOR = 3.322
Y_HEADROOM = 1.1
IQR_FENCE = 1.5


@dataclass(frozen=True)
class HistogramBin:
    left: float
    right: float
    count: int

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def center(self) -> float:
        return (self.left + self.right) / 2.0


def sturges_bin_count(n: int) -> int:
    if n <= 0:
        return 1
    return max(1, math.ceil(1.0 + STURGES_FACTOR * math.log10(n)))


def compute_bins(values: Any, num_bins: int | None = None) -> list[HistogramBin]:
    arr = coerce_1d(values, label="values")
    finite = arr[np.isfinite(arr)]
    if finite.size != arr.size:
        LOGGER.debug("dropping %d non-finite histogram values", arr.size - finite.size)
    if finite.size == 0:
        return []
    if num_bins is not None and num_bins < 1:
        raise ChartDataError(f"num_bins must be >= 1, got {num_bins}")

    n_bins = sturges_bin_count(finite.size) if num_bins is None else int(num_bins)
    vmin = float(np.min(finite))
    vmax = float(np.max(finite))
    if vmax == vmin:
        LOGGER.debug("all histogram values equal %s; emitting a single bin", vmin)
        return [HistogramBin(left=vmin, right=vmax, count=int(finite.size))]

    width = (vmax - vmin) / n_bins
    edges = vmin + np.arange(n_bins + 1, dtype=np.float64) * width
    edges[-1] = vmax
    # Assign against the emitted edges so each value lands in exactly one [left, right) bin.
    idx = np.searchsorted(edges, finite, side="right") - 1
    np.clip(idx, 0, n_bins - 1, out=idx)
    counts = np.bincount(idx, minlength=n_bins)
    return [
        HistogramBin(left=float(edges[i]), right=float(edges[i + 1]), count=int(counts[i])) for i in range(n_bins)
    ]


class HistogramChart(Chart):
    def __init__(
        self,
        values: Any = None,
        *,
        num_bins: int | None = None,
        color: Color | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._values = np.zeros(0, dtype=np.float64) if values is None else coerce_1d(values, label="values")
        self._num_bins = num_bins
        self._bar_color = color
        self.x_label = ""
        self.y_label = "count"

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def bar_color(self) -> Color:
        return self.color_for(0, self._bar_color)

    @property
    def bins(self) -> list[HistogramBin]:
        return compute_bins(self._values, self._num_bins)

    def set_data(self, values: Any) -> None:
        self._values = coerce_1d(values, label="values")
        self._dirty = True

    def set_num_bins(self, num_bins: int | None) -> None:
        if num_bins is not None and num_bins < 1:
            raise ChartDataError(f"num_bins must be >= 1, got {num_bins}")
        self._num_bins = num_bins
        self._dirty = True

    def set_color(self, color: Color | None) -> None:
        self._bar_color = color
        self._dirty = True

    def set_labels(self, x_label: str = "", y_label: str = "count") -> None:
        self.x_label = x_label
        self.y_label = y_label
        self._dirty = True

    def clear(self) -> None:
        self._values = np.zeros(0, dtype=np.float64)
        self._dirty = True

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        bins = self.bins
        if not bins:
            return
        x_lo = bins[0].left
        x_hi = bins[-1].right
        if x_lo == x_hi:
            x_lo, x_hi = pad_limits(x_lo, x_hi)
        y_hi = max(b.count for b in bins) * Y_HEADROOM
        x_axis = AxisTransform(ScaleType.LINEAR, x_lo, x_hi, area.left, area.right)
        y_axis = AxisTransform(ScaleType.LINEAR, 0.0, y_hi, area.bottom, area.top)

        border = darken(self.bar_color, 0.2)
        for b in bins:
            if b.count == 0:
                continue
            left = x_axis.to_pixel(b.left)
            right = x_axis.to_pixel(b.right)
            if b.width == 0:
                # Single degenerate bin spans the whole axis.
                left, right = area.left + area.width * 0.25, area.right - area.width * 0.25
            top = y_axis.to_pixel(float(b.count))
            out.add(FilledRect(left, top, max(right - left, 1.0), area.bottom - top, self.bar_color, border))

        draw_axes(
            out,
            area,
            axis_ticks(x_axis, self.config.tick_count),
            axis_ticks(y_axis, self.config.tick_count),
            font_size=self.config.font_size,
            x_label=self.x_label,
            y_label=self.y_label,
        )


@dataclass(frozen=True)
class BoxPlotStats:
    minimum: float
    q1: float
    median: float
    q3: float
    maximum: float
    whisker_low: float
    whisker_high: float
    outliers: tuple[float, ...]

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    @classmethod
    def from_values(cls, values: Any) -> BoxPlotStats | None:
        arr = coerce_1d(values, label="values")
        data = np.sort(arr[np.isfinite(arr)])
        n = int(data.size)
        if n == 0:
            return None
        mid = n // 2
        median = float(data[mid]) if n % 2 == 1 else float((data[mid - 1] + data[mid]) / 2.0)
        q1 = float(data[n // 4])
        q3 = float(data[(3 * n) // 4])
        iqr = q3 - q1
        low_fence = q1 - IQR_FENCE * iqr
        high_fence = q3 + IQR_FENCE * iqr
        inside = data[(data >= low_fence) & (data <= high_fence)]
        outliers = data[(data < low_fence) | (data > high_fence)]
        return cls(
            minimum=float(data[0]),
            q1=q1,
            median=median,
            q3=q3,
            maximum=float(data[-1]),
            whisker_low=float(inside[0]) if inside.size else q1,
            whisker_high=float(inside[-1]) if inside.size else q3,
            outliers=tuple(float(v) for v in outliers),
        )


@dataclass(frozen=True)
class BoxPlotItem:
    label: str
    stats: BoxPlotStats
    color: Color


class BoxPlotChart(Chart):
    def __init__(self, *, title: str = "", config: ChartConfig | None = None) -> None:
        super().__init__(title=title, config=config)
        self._items: list[BoxPlotItem] = []
        self.box_width_ratio = 0.5

    @property
    def items(self) -> tuple[BoxPlotItem, ...]:
        return tuple(self._items)

    def add_box(self, label: str, values: Any, color: Color | None = None) -> None:
        stats = BoxPlotStats.from_values(values)
        if stats is None:
            LOGGER.debug("box %r has no finite values; skipped", label)
            return
        self._items.append(BoxPlotItem(label, stats, self.color_for(len(self._items), color)))
        self._dirty = True

    def clear(self) -> None:
        self._items.clear()
        self._dirty = True

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        if not self._items:
            return
        lows = [min((item.stats.whisker_low, *item.stats.outliers)) for item in self._items]
        highs = [max((item.stats.whisker_high, *item.stats.outliers)) for item in self._items]
        y_lo, y_hi = pad_limits(min(lows), max(highs))
        y_axis = AxisTransform(ScaleType.LINEAR, y_lo, y_hi, area.bottom, area.top)

        slot = area.width / len(self._items)
        half = slot * self.box_width_ratio / 2.0
        positions: list[float] = []
        for i, item in enumerate(self._items):
            cx = area.left + slot * (i + 0.5)
            positions.append(cx)
            s = item.stats
            q3_px = y_axis.to_pixel(s.q3)
            q1_px = y_axis.to_pixel(s.q1)
            wl_px = y_axis.to_pixel(s.whisker_low)
            wh_px = y_axis.to_pixel(s.whisker_high)
            out.add(Line((cx, wh_px), (cx, q3_px), BLACK, 1.0))
            out.add(Line((cx, q1_px), (cx, wl_px), BLACK, 1.0))
            out.add(Line((cx - half / 2.0, wh_px), (cx + half / 2.0, wh_px), BLACK, 1.0))
            out.add(Line((cx - half / 2.0, wl_px), (cx + half / 2.0, wl_px), BLACK, 1.0))
            out.add(FilledRect(cx - half, q3_px, 2.0 * half, max(q1_px - q3_px, 1.0), with_alpha(item.color, 0.7), BLACK))
            median_px = y_axis.to_pixel(s.median)
            out.add(Line((cx - half, median_px), (cx + half, median_px), WHITE, 2.0))
            for value in s.outliers:
                out.add(Marker((cx, y_axis.to_pixel(value)), 5.0, item.color, MarkerStyle.CIRCLE))
            out.add(Text((cx, area.bottom + 8.0), item.label, TEXT_GREY, self.config.font_size, "center", "top"))

        y_ticks = axis_ticks(y_axis, self.config.tick_count)
        draw_axes(out, area, AxisTicks((), (), ()), y_ticks, font_size=self.config.font_size)
