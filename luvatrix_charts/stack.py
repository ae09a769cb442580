from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import TEXT_GREY, Color, darken, with_alpha
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.geometry import DrawList, PlotArea, Polygon, Polyline, Rect, Text
from luvatrix_charts.scales import AxisTicks, AxisTransform, ScaleType, axis_ticks


LOGGER = logging.getLogger(__name__)

LAYER_ALPHA = 0.85
MIN_SPAN = 1e-3


class StackOrder(Enum):
    NONE = "none"
    ASCENDING = "ascending"
    DESCENDING = "descending"
    INSIDE_OUT = "inside-out"
    REVERSE = "reverse"


class StackOffset(Enum):
    ZERO = "zero"
    EXPAND = "expand"
    SILHOUETTE = "silhouette"
    WIGGLE = "wiggle"


@dataclass(frozen=True)
class StackSeries:
    label: str
    values: np.ndarray
    color: Color | None = None

    @classmethod
    def from_values(cls, label: str, values: Any, color: Color | None = None) -> StackSeries:
        return cls(label, coerce_1d(values, label=f"series {label!r} values"), color)


@dataclass(frozen=True)
class StackedLayers:
    """Lower and upper edges of every layer, indexed like the input series."""

    order: tuple[int, ...]
    y0: np.ndarray
    y1: np.ndarray

    @property
    def heights(self) -> np.ndarray:
        return self.y1 - self.y0

    @property
    def n_points(self) -> int:
        return int(self.y0.shape[1]) if self.y0.ndim == 2 else 0

    def limits(self) -> tuple[float, float]:
        if self.y0.size == 0:
            return 0.0, 1.0
        lo = float(self.y0.min())
        hi = float(self.y1.max())
        if hi - lo < MIN_SPAN:
            hi = lo + 1.0
        return lo, hi


def stack_order(values: np.ndarray, order: StackOrder) -> list[int]:
    n = values.shape[0]
    if order is StackOrder.NONE:
        return list(range(n))
    if order is StackOrder.REVERSE:
        return list(range(n - 1, -1, -1))
    sums = values.sum(axis=1)
    if order is StackOrder.ASCENDING:
        return [int(i) for i in np.argsort(sums, kind="stable")]
    descending = [int(i) for i in np.argsort(-sums, kind="stable")]
    if order is StackOrder.DESCENDING:
        return descending
    # Largest layer in the middle, the rest alternating above and below it.
    inside_out: list[int] = []
    for k, idx in enumerate(descending):
        if k % 2 == 0:
            inside_out.append(idx)
        else:
            inside_out.insert(0, idx)
    return inside_out


def stack_layout(
    series_values: Sequence[Any],
    *,
    order: StackOrder = StackOrder.NONE,
    offset: StackOffset = StackOffset.ZERO,
) -> StackedLayers:
    """Stack the series point by point, then shift each column by the chosen offset.

    Short series are padded with zeros and non-finite values count as zero.
    """
    rows = [coerce_1d(v, label="series values") for v in series_values]
    n_points = max((r.size for r in rows), default=0)
    if not rows or n_points == 0:
        empty = np.zeros((len(rows), 0), dtype=np.float64)
        return StackedLayers(tuple(range(len(rows))), empty, empty.copy())
    values = np.zeros((len(rows), n_points), dtype=np.float64)
    for i, r in enumerate(rows):
        values[i, : r.size] = np.nan_to_num(r, nan=0.0, posinf=0.0, neginf=0.0)

    ordering = stack_order(values, order)
    y0 = np.zeros_like(values)
    y1 = np.zeros_like(values)
    running = np.zeros(n_points, dtype=np.float64)
    for idx in ordering:
        y0[idx] = running
        running = running + values[idx]
        y1[idx] = running

    if offset is StackOffset.EXPAND:
        totals = running
        scale = np.where(totals > 0, totals, 1.0)
        y0 /= scale
        y1 /= scale
    elif offset is StackOffset.SILHOUETTE:
        shift = -np.maximum(running, 0.0) / 2.0
        y0 += shift
        y1 += shift
    elif offset is StackOffset.WIGGLE:
        # Weighted toward the bottom layers so the lower silhouette moves least.
        weights = np.arange(len(ordering), 0, -1, dtype=np.float64)
        stacked_heights = values[ordering]
        weighted = (weights[:, None] * stacked_heights).sum(axis=0)
        shift = np.where(running > 0, -weighted / (weights.sum() * 2.0), 0.0)
        y0 += shift
        y1 += shift
    return StackedLayers(tuple(ordering), y0, y1)


class StackChart(Chart):
    default_order = StackOrder.NONE
    default_offset = StackOffset.ZERO

    def __init__(
        self,
        series: Sequence[StackSeries] = (),
        x_labels: Sequence[str] = (),
        *,
        order: StackOrder | None = None,
        offset: StackOffset | None = None,
        show_lines: bool = False,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._series: list[StackSeries] = list(series)
        self.x_labels: list[str] = list(x_labels)
        self.order = self.default_order if order is None else order
        self.offset = self.default_offset if offset is None else offset
        self.show_lines = show_lines

    @property
    def series(self) -> tuple[StackSeries, ...]:
        return tuple(self._series)

    def set_data(self, series: Sequence[StackSeries], x_labels: Sequence[str] = ()) -> None:
        self._series = list(series)
        self.x_labels = list(x_labels)
        self._dirty = True

    def add_series(self, series: StackSeries) -> None:
        self._series.append(series)
        self._dirty = True

    def set_x_labels(self, labels: Sequence[str]) -> None:
        self.x_labels = list(labels)
        self._dirty = True

    def set_order(self, order: StackOrder) -> None:
        self.order = order
        self._dirty = True

    def set_offset(self, offset: StackOffset) -> None:
        self.offset = offset
        self._dirty = True

    def set_show_lines(self, show: bool) -> None:
        self.show_lines = show
        self._dirty = True

    def clear(self) -> None:
        self._series.clear()
        self.x_labels.clear()
        self._dirty = True

    def layers(self) -> StackedLayers:
        return stack_layout([s.values for s in self._series], order=self.order, offset=self.offset)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        layers = self.layers()
        n = layers.n_points
        if n < 2:
            LOGGER.debug("stack chart needs two points per series, got %d", n)
            return
        lo, hi = layers.limits()
        y_axis = AxisTransform(ScaleType.LINEAR, lo, hi, area.bottom, area.top)
        xs = [area.left + i / (n - 1) * area.width for i in range(n)]

        for idx in layers.order:
            s = self._series[idx]
            color = with_alpha(self.color_for(idx, s.color), LAYER_ALPHA)
            top = list(zip(xs, y_axis.to_pixels(layers.y1[idx]).tolist(), strict=True))
            bottom = list(zip(xs, y_axis.to_pixels(layers.y0[idx]).tolist(), strict=True))
            out.add(Polygon(tuple(top + bottom[::-1]), color))
            if self.show_lines:
                out.add(Polyline(tuple(top), darken(color, 0.3), 1.5))

        font = self.config.font_size
        for x, label in zip(xs, self.x_labels):
            out.add(Text((x, area.bottom + 5.0), label, TEXT_GREY, font, "center", "top"))
        if self.offset in (StackOffset.ZERO, StackOffset.EXPAND):
            draw_axes(out, area, AxisTicks((), (), ()), axis_ticks(y_axis, self.config.tick_count), font_size=font)


class StreamgraphChart(StackChart):
    """Stack centred on a moving baseline, largest layers in the middle."""

    default_order = StackOrder.INSIDE_OUT
    default_offset = StackOffset.WIGGLE
