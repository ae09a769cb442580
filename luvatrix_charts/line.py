from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Literal

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import AXIS_GREY, TEXT_GREY, WHITE, Color, with_alpha
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import (
    DrawList,
    FilledRect,
    Line,
    LineStyle,
    Marker,
    MarkerStyle,
    PlotArea,
    Point,
    Polygon,
    Polyline,
    Rect,
    Text,
)
from luvatrix_charts.scales import AxisTransform, ScaleType, axis_ticks, finite_limits, pad_limits
from luvatrix_charts.series import Series, StepStyle


LOGGER = logging.getLogger(__name__)

ERROR_CAP_PX = 4.0
DEFAULT_LINE_WIDTH = 2.0
DEFAULT_MARKER_SIZE = 6.0
SPAN_ALPHA = 0.2
FILL_ALPHA = 0.3
LEGEND_PADDING = 8.0
LEGEND_LINE_HEIGHT = 16.0
LEGEND_SWATCH = 20.0
LEGEND_WIDTH = 120.0


class LegendPosition(Enum):
    TOP_RIGHT = "top-right"
    TOP_LEFT = "top-left"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"
    NONE = "none"


@dataclass(frozen=True)
class ReferenceLine:
    axis: Literal["x", "y"]
    value: float
    color: Color
    width: float = 1.0
    style: LineStyle = LineStyle.DASHED


@dataclass(frozen=True)
class Span:
    axis: Literal["x", "y"]
    lo: float
    hi: float
    color: Color


@dataclass(frozen=True)
class FillRegion:
    x: np.ndarray
    y1: np.ndarray
    y2: np.ndarray
    color: Color


def step_points(xs: Sequence[float], ys: Sequence[float], style: StepStyle) -> list[Point]:
    if not xs:
        return []
    points: list[Point] = [(xs[0], ys[0])]
    for i in range(1, len(xs)):
        x0, y0 = xs[i - 1], ys[i - 1]
        x1, y1 = xs[i], ys[i]
        if style is StepStyle.PRE:
            points.append((x0, y1))
        elif style is StepStyle.POST:
            points.append((x1, y0))
        elif style is StepStyle.MID:
            xm = (x0 + x1) / 2.0
            points.append((xm, y0))
            points.append((xm, y1))
        points.append((x1, y1))
    return points


def contiguous_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for i, ok in enumerate(mask.tolist()):
        if ok and start is None:
            start = i
        elif not ok and start is not None:
            runs.append((start, i))
            start = None
    if start is not None:
        runs.append((start, int(mask.size)))
    return runs


def _valid_mask(values: np.ndarray, scale: ScaleType) -> np.ndarray:
    mask = np.isfinite(values)
    if scale is ScaleType.LOG:
        mask &= values > 0
    return mask


class LineChart(Chart):
    def __init__(
        self,
        *,
        x_scale: ScaleType = ScaleType.LINEAR,
        y_scale: ScaleType = ScaleType.LINEAR,
        legend: LegendPosition = LegendPosition.TOP_RIGHT,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._series: list[Series] = []
        self.x_scale = x_scale
        self.y_scale = y_scale
        self.legend = legend
        self.x_range: tuple[float, float] | None = None
        self.y_range: tuple[float, float] | None = None
        self.x_label = ""
        self.y_label = ""
        self._reference_lines: list[ReferenceLine] = []
        self._spans: list[Span] = []
        self._fills: list[FillRegion] = []

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series)

    def add_series(self, series: Series) -> None:
        self._series.append(series)
        self._dirty = True

    def plot(self, x: Any, y: Any, label: str = "", **kwargs: Any) -> None:
        self.add_series(Series.from_values(label, x, y, **kwargs))

    def set_data(self, series: Sequence[Series]) -> None:
        self._series = list(series)
        self._dirty = True

    def set_range(self, x: tuple[float, float] | None = None, y: tuple[float, float] | None = None) -> None:
        for name, rng in (("x", x), ("y", y)):
            if rng is not None and not rng[0] < rng[1]:
                raise ChartDataError(f"{name} range must be increasing, got {rng}")
        self.x_range = x
        self.y_range = y
        self._dirty = True

    def set_scales(self, x: ScaleType | None = None, y: ScaleType | None = None) -> None:
        if x is not None:
            self.x_scale = x
        if y is not None:
            self.y_scale = y
        self._dirty = True

    def set_labels(self, x_label: str = "", y_label: str = "") -> None:
        self.x_label = x_label
        self.y_label = y_label
        self._dirty = True

    def set_xlabel(self, label: str) -> None:
        self.x_label = label
        self._dirty = True

    def set_ylabel(self, label: str) -> None:
        self.y_label = label
        self._dirty = True

    def set_legend(self, position: LegendPosition) -> None:
        self.legend = position
        self._dirty = True

    def axhline(self, y: float, color: Color = AXIS_GREY, width: float = 1.0, style: LineStyle = LineStyle.DASHED) -> None:
        self._reference_lines.append(ReferenceLine("y", float(y), color, width, style))
        self._dirty = True

    def axvline(self, x: float, color: Color = AXIS_GREY, width: float = 1.0, style: LineStyle = LineStyle.DASHED) -> None:
        self._reference_lines.append(ReferenceLine("x", float(x), color, width, style))
        self._dirty = True

    def axhspan(self, y_lo: float, y_hi: float, color: Color = AXIS_GREY) -> None:
        self._spans.append(Span("y", float(min(y_lo, y_hi)), float(max(y_lo, y_hi)), with_alpha(color, SPAN_ALPHA)))
        self._dirty = True

    def axvspan(self, x_lo: float, x_hi: float, color: Color = AXIS_GREY) -> None:
        self._spans.append(Span("x", float(min(x_lo, x_hi)), float(max(x_lo, x_hi)), with_alpha(color, SPAN_ALPHA)))
        self._dirty = True

    def fill_between(self, x: Any, y1: Any, y2: Any, color: Color | None = None) -> None:
        x_arr = coerce_1d(x, label="x")
        y1_arr = coerce_1d(y1, label="y1")
        y2_arr = coerce_1d(y2, label="y2")
        if not (x_arr.size == y1_arr.size == y2_arr.size):
            raise ChartDataError(f"fill_between length mismatch: {x_arr.size}, {y1_arr.size}, {y2_arr.size}")
        fill_color = with_alpha(self.color_for(len(self._fills), color), FILL_ALPHA)
        self._fills.append(FillRegion(x_arr, y1_arr, y2_arr, fill_color))
        self._dirty = True

    def clear(self) -> None:
        self._series.clear()
        self._reference_lines.clear()
        self._spans.clear()
        self._fills.clear()
        self._dirty = True

    def data_limits(self) -> tuple[float, float, float, float]:
        xs: list[np.ndarray] = []
        ys: list[np.ndarray] = []
        for s in self._series:
            xs.append(s.x)
            ys.append(s.y)
            if s.xerr_minus is not None:
                xs.append(s.x - s.xerr_minus)
            if s.xerr_plus is not None:
                xs.append(s.x + s.xerr_plus)
            if s.yerr_minus is not None:
                ys.append(s.y - s.yerr_minus)
            if s.yerr_plus is not None:
                ys.append(s.y + s.yerr_plus)
        for fill in self._fills:
            xs.append(fill.x)
            ys.extend((fill.y1, fill.y2))
        x_lo, x_hi = self._axis_limits(xs, self.x_scale, self.x_range)
        y_lo, y_hi = self._axis_limits(ys, self.y_scale, self.y_range)
        return x_lo, x_hi, y_lo, y_hi

    @staticmethod
    def _axis_limits(
        chunks: list[np.ndarray], scale: ScaleType, override: tuple[float, float] | None
    ) -> tuple[float, float]:
        if override is not None:
            return override
        values = np.concatenate(chunks) if chunks else np.zeros(0, dtype=np.float64)
        limits = finite_limits(values[_valid_mask(values, scale)])
        if limits is None:
            return (1.0, 10.0) if scale is ScaleType.LOG else (0.0, 1.0)
        return pad_limits(*limits, scale=scale)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        x_lo, x_hi, y_lo, y_hi = self.data_limits()
        x_axis = AxisTransform(self.x_scale, x_lo, x_hi, area.left, area.right)
        y_axis = AxisTransform(self.y_scale, y_lo, y_hi, area.bottom, area.top)

        for span in self._spans:
            if span.axis == "x":
                a, b = sorted((x_axis.to_pixel(span.lo), x_axis.to_pixel(span.hi)))
                out.add(FilledRect(a, area.top, b - a, area.height, span.color))
            else:
                a, b = sorted((y_axis.to_pixel(span.lo), y_axis.to_pixel(span.hi)))
                out.add(FilledRect(area.left, a, area.width, b - a, span.color))

        for fill in self._fills:
            mask = _valid_mask(fill.x, self.x_scale) & _valid_mask(fill.y1, self.y_scale) & _valid_mask(fill.y2, self.y_scale)
            for start, stop in contiguous_runs(mask):
                if stop - start < 2:
                    continue
                px = x_axis.to_pixels(fill.x[start:stop])
                top = y_axis.to_pixels(fill.y1[start:stop])
                bottom = y_axis.to_pixels(fill.y2[start:stop])
                outline = list(zip(px.tolist(), top.tolist(), strict=True))
                outline += list(zip(px[::-1].tolist(), bottom[::-1].tolist(), strict=True))
                out.add(Polygon(tuple(outline), fill.color))

        for ref in self._reference_lines:
            if ref.axis == "x":
                px = x_axis.to_pixel(ref.value)
                out.add(Line((px, area.top), (px, area.bottom), ref.color, ref.width, ref.style))
            else:
                py = y_axis.to_pixel(ref.value)
                out.add(Line((area.left, py), (area.right, py), ref.color, ref.width, ref.style))

        for i, s in enumerate(self._series):
            self._draw_series(out, s, self.color_for(i, s.color), x_axis, y_axis)

        draw_axes(
            out,
            area,
            axis_ticks(x_axis, self.config.tick_count),
            axis_ticks(y_axis, self.config.tick_count),
            font_size=self.config.font_size,
            x_label=self.x_label,
            y_label=self.y_label,
        )
        self._draw_legend(out, area)

    def _draw_series(self, out: DrawList, s: Series, color: Color, x_axis: AxisTransform, y_axis: AxisTransform) -> None:
        mask = _valid_mask(s.x, self.x_scale) & _valid_mask(s.y, self.y_scale)
        if not np.any(mask):
            LOGGER.debug("series %r has no drawable points", s.label)
            return
        px = x_axis.to_pixels(s.x)
        py = y_axis.to_pixels(s.y)
        width = DEFAULT_LINE_WIDTH if s.line_width is None else s.line_width

        if s.line_style is not LineStyle.NONE:
            for start, stop in contiguous_runs(mask):
                if stop - start < 2:
                    continue
                points = step_points(px[start:stop].tolist(), py[start:stop].tolist(), s.step_style)
                out.add(Polyline(tuple(points), color, width, style=s.line_style))

        if s.has_errors:
            self._draw_error_bars(out, s, mask, color, px, py, x_axis, y_axis)

        if s.marker_style is not MarkerStyle.NONE:
            size = DEFAULT_MARKER_SIZE if s.marker_size is None else s.marker_size
            for x, y in zip(px[mask].tolist(), py[mask].tolist(), strict=True):
                out.add(Marker((x, y), size, color, s.marker_style))

    @staticmethod
    def _draw_error_bars(
        out: DrawList,
        s: Series,
        mask: np.ndarray,
        color: Color,
        px: np.ndarray,
        py: np.ndarray,
        x_axis: AxisTransform,
        y_axis: AxisTransform,
    ) -> None:
        if s.yerr_minus is not None or s.yerr_plus is not None:
            lo = s.y - (s.yerr_minus if s.yerr_minus is not None else 0.0)
            hi = s.y + (s.yerr_plus if s.yerr_plus is not None else 0.0)
            lo_px = y_axis.to_pixels(lo)
            hi_px = y_axis.to_pixels(hi)
            for i in np.flatnonzero(mask & np.isfinite(lo_px) & np.isfinite(hi_px)).tolist():
                x = float(px[i])
                out.add(Line((x, float(lo_px[i])), (x, float(hi_px[i])), color, 1.0))
                out.add(Line((x - ERROR_CAP_PX, float(lo_px[i])), (x + ERROR_CAP_PX, float(lo_px[i])), color, 1.0))
                out.add(Line((x - ERROR_CAP_PX, float(hi_px[i])), (x + ERROR_CAP_PX, float(hi_px[i])), color, 1.0))
        if s.xerr_minus is not None or s.xerr_plus is not None:
            lo = s.x - (s.xerr_minus if s.xerr_minus is not None else 0.0)
            hi = s.x + (s.xerr_plus if s.xerr_plus is not None else 0.0)
            lo_px = x_axis.to_pixels(lo)
            hi_px = x_axis.to_pixels(hi)
            for i in np.flatnonzero(mask & np.isfinite(lo_px) & np.isfinite(hi_px)).tolist():
                y = float(py[i])
                out.add(Line((float(lo_px[i]), y), (float(hi_px[i]), y), color, 1.0))
                out.add(Line((float(lo_px[i]), y - ERROR_CAP_PX), (float(lo_px[i]), y + ERROR_CAP_PX), color, 1.0))
                out.add(Line((float(hi_px[i]), y - ERROR_CAP_PX), (float(hi_px[i]), y + ERROR_CAP_PX), color, 1.0))

    def _draw_legend(self, out: DrawList, area: PlotArea) -> None:
        entries = [(i, s) for i, s in enumerate(self._series) if s.label]
        if self.legend is LegendPosition.NONE or not entries:
            return
        height = LEGEND_PADDING * 2.0 + LEGEND_LINE_HEIGHT * len(entries)
        left_side = self.legend in (LegendPosition.TOP_LEFT, LegendPosition.BOTTOM_LEFT)
        top_side = self.legend in (LegendPosition.TOP_LEFT, LegendPosition.TOP_RIGHT)
        x = area.left + LEGEND_PADDING if left_side else area.right - LEGEND_WIDTH - LEGEND_PADDING
        y = area.top + LEGEND_PADDING if top_side else area.bottom - height - LEGEND_PADDING
        out.add(FilledRect(x, y, LEGEND_WIDTH, height, with_alpha(WHITE, 0.9), border=AXIS_GREY))
        for row, (i, s) in enumerate(entries):
            color = self.color_for(i, s.color)
            cy = y + LEGEND_PADDING + (row + 0.5) * LEGEND_LINE_HEIGHT
            sx = x + LEGEND_PADDING
            out.add(Line((sx, cy), (sx + LEGEND_SWATCH, cy), color, DEFAULT_LINE_WIDTH, s.line_style))
            out.add(Text((sx + LEGEND_SWATCH + 6.0, cy), s.label, TEXT_GREY, self.config.font_size, "left", "middle"))
