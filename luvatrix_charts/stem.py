from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import TEXT_GREY, WHITE, Color, with_alpha
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, Line, LineStyle, Marker, MarkerStyle, PlotArea, Polygon, Rect, Text
from luvatrix_charts.line import LegendPosition, LineChart, _valid_mask
from luvatrix_charts.scales import AxisTicks, AxisTransform, ScaleType, axis_ticks, pad_limits
from luvatrix_charts.series import Series


LOGGER = logging.getLogger(__name__)

BASELINE_COLOR: Color = (0.5, 0.5, 0.5, 0.5)
DEFAULT_STEM_WIDTH = 1.5
DEFAULT_STEM_MARKER = 6.0
KDE_SAMPLES = 50
VIOLIN_HALF_WIDTH = 0.4
VIOLIN_ALPHA = 0.6
VIOLIN_BOX_RATIO = 0.15
VIOLIN_PADDING_RATIO = 0.1


class StemChart(LineChart):
    """Vertical stems from a baseline to each point, capped by a marker."""

    def __init__(
        self,
        *,
        baseline: float = 0.0,
        legend: LegendPosition = LegendPosition.TOP_RIGHT,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(legend=legend, title=title, config=config)
        self.baseline = float(baseline)
        self.stem_width = DEFAULT_STEM_WIDTH
        self.marker_size = DEFAULT_STEM_MARKER

    def set_baseline(self, baseline: float) -> None:
        self.baseline = float(baseline)
        self._dirty = True

    def set_stem_width(self, width: float) -> None:
        if width <= 0:
            raise ChartDataError(f"stem width must be > 0, got {width}")
        self.stem_width = width
        self._dirty = True

    def set_marker_size(self, size: float) -> None:
        if size <= 0:
            raise ChartDataError(f"marker size must be > 0, got {size}")
        self.marker_size = size
        self._dirty = True

    def data_limits(self) -> tuple[float, float, float, float]:
        x_lo, x_hi, y_lo, y_hi = super().data_limits()
        if self.y_range is None and _valid_mask(np.asarray([self.baseline]), self.y_scale).all():
            ys = [s.y for s in self._series] + [np.asarray([self.baseline])]
            y_lo, y_hi = self._axis_limits(ys, self.y_scale, None)
        return x_lo, x_hi, y_lo, y_hi

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        _, _, y_lo, y_hi = self.data_limits()
        if y_lo < self.baseline < y_hi:
            y_axis = AxisTransform(self.y_scale, y_lo, y_hi, area.bottom, area.top)
            py = y_axis.to_pixel(self.baseline)
            out.add(Line((area.left, py), (area.right, py), BASELINE_COLOR, 1.0, LineStyle.DASHED))
        super()._layout(rect, area, out)

    def _draw_series(self, out: DrawList, s: Series, color: Color, x_axis: AxisTransform, y_axis: AxisTransform) -> None:
        mask = _valid_mask(s.x, self.x_scale) & _valid_mask(s.y, self.y_scale)
        if not np.any(mask):
            LOGGER.debug("stem series %r has no drawable points", s.label)
            return
        base = y_axis.to_pixel(self.baseline)
        if not math.isfinite(base):
            base = y_axis.start_px
        width = self.stem_width if s.line_width is None else s.line_width
        size = self.marker_size if s.marker_size is None else s.marker_size
        marker = MarkerStyle.CIRCLE if s.marker_style is MarkerStyle.NONE else s.marker_style
        style = LineStyle.SOLID if s.line_style is LineStyle.NONE else s.line_style
        px = x_axis.to_pixels(s.x[mask]).tolist()
        py = y_axis.to_pixels(s.y[mask]).tolist()
        for x, y in zip(px, py, strict=True):
            out.add(Line((x, base), (x, y), color, width, style))
            out.add(Marker((x, y), size, color, marker))


def silverman_bandwidth(values: np.ndarray) -> float:
    """1.06 * std * n^(-1/5), or 0.0 when the data has no spread."""
    if values.size == 0:
        return 0.0
    return float(1.06 * np.std(values) * values.size ** -0.2)


def gaussian_kde(values: Any, bandwidth: float, lo: float, hi: float, samples: int = KDE_SAMPLES) -> tuple[np.ndarray, np.ndarray]:
    """Gaussian kernel density sampled at `samples` evenly spaced points over [lo, hi]."""
    data = coerce_1d(values, label="values")
    data = data[np.isfinite(data)]
    if bandwidth <= 0 or not math.isfinite(bandwidth):
        raise ChartDataError(f"bandwidth must be a positive finite number, got {bandwidth}")
    if samples < 2:
        raise ChartDataError(f"samples must be >= 2, got {samples}")
    grid = np.linspace(lo, hi, samples)
    if data.size == 0:
        return grid, np.zeros_like(grid)
    z = (grid[:, None] - data[None, :]) / bandwidth
    density = np.exp(-0.5 * z * z).sum(axis=1) / (data.size * bandwidth * math.sqrt(2.0 * math.pi))
    return grid, density


@dataclass(frozen=True)
class ViolinItem:
    label: str
    values: np.ndarray
    color: Color | None = None

    @classmethod
    def from_values(cls, label: str, values: Any, color: Color | None = None) -> ViolinItem:
        arr = coerce_1d(values, label=f"violin {label!r} values")
        return cls(label, arr[np.isfinite(arr)], color)


class ViolinChart(Chart):
    def __init__(
        self,
        *,
        bandwidth: float | None = None,
        show_box: bool = False,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._items: list[ViolinItem] = []
        self.bandwidth = bandwidth
        self.show_box = show_box

    @property
    def items(self) -> tuple[ViolinItem, ...]:
        return tuple(self._items)

    def add_item(self, item: ViolinItem) -> None:
        self._items.append(item)
        self._dirty = True

    def add_from_values(self, label: str, values: Any, color: Color | None = None) -> None:
        self.add_item(ViolinItem.from_values(label, values, color))

    def set_bandwidth(self, bandwidth: float | None) -> None:
        if bandwidth is not None and bandwidth <= 0:
            raise ChartDataError(f"bandwidth must be > 0, got {bandwidth}")
        self.bandwidth = bandwidth
        self._dirty = True

    def set_show_box(self, show: bool) -> None:
        self.show_box = show
        self._dirty = True

    def clear(self) -> None:
        self._items.clear()
        self._dirty = True

    def value_range(self) -> tuple[float, float]:
        pooled = self._pooled()
        if pooled.size == 0:
            return 0.0, 1.0
        lo, hi = float(pooled.min()), float(pooled.max())
        if lo == hi:
            return pad_limits(lo, hi)
        pad = (hi - lo) * VIOLIN_PADDING_RATIO
        return lo - pad, hi + pad

    def resolved_bandwidth(self) -> float:
        if self.bandwidth is not None:
            return self.bandwidth
        bw = silverman_bandwidth(self._pooled())
        if bw <= 0:
            lo, hi = self.value_range()
            bw = (hi - lo) * VIOLIN_PADDING_RATIO
            LOGGER.debug("violin data has no spread; using bandwidth %s", bw)
        return bw

    def _pooled(self) -> np.ndarray:
        if not self._items:
            return np.zeros(0, dtype=np.float64)
        return np.concatenate([item.values for item in self._items])

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        if not self._items:
            return
        lo, hi = self.value_range()
        y_axis = AxisTransform(ScaleType.LINEAR, lo, hi, area.bottom, area.top)
        bw = self.resolved_bandwidth()
        band = area.width / len(self._items)
        max_w = band * VIOLIN_HALF_WIDTH
        font = self.config.font_size

        for i, item in enumerate(self._items):
            cx = area.left + (i + 0.5) * band
            out.add(Text((cx, area.bottom + 8.0), item.label, TEXT_GREY, font, "center", "top"))
            if item.values.size == 0:
                continue
            ys, density = gaussian_kde(item.values, bw, lo, hi)
            peak = float(density.max())
            if peak <= 0:
                LOGGER.debug("violin %r has zero density over the axis", item.label)
                continue
            color = self.color_for(i, item.color)
            half = density / peak * max_w
            py = y_axis.to_pixels(ys).tolist()
            left = [(cx - w, y) for w, y in zip(half.tolist(), py, strict=True)]
            right = [(cx + w, y) for w, y in zip(half.tolist(), py, strict=True)]
            out.add(Polygon(tuple(left + right[::-1]), with_alpha(color, VIOLIN_ALPHA), outline=color))
            if self.show_box:
                self._draw_box(out, item.values, cx, max_w * VIOLIN_BOX_RATIO, y_axis)

        draw_axes(out, area, AxisTicks((), (), ()), axis_ticks(y_axis, self.config.tick_count), font_size=font)

    @staticmethod
    def _draw_box(out: DrawList, values: np.ndarray, cx: float, half: float, y_axis: AxisTransform) -> None:
        data = np.sort(values)
        n = data.size
        q1, median, q3 = (float(data[k]) for k in (n // 4, n // 2, (3 * n) // 4))
        top = y_axis.to_pixel(q3)
        bottom = y_axis.to_pixel(q1)
        out.add(FilledRect(cx - half, top, 2.0 * half, max(bottom - top, 1.0), (0.3, 0.3, 0.3, 0.8)))
        mid = y_axis.to_pixel(median)
        out.add(Line((cx - half, mid), (cx + half, mid), WHITE, 2.0))
