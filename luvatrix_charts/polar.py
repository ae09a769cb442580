from __future__ import annotations

from collections.abc import Sequence
import logging
import math

import numpy as np

from luvatrix_charts.chart import Chart
from luvatrix_charts.colors import GRID_GREY, TEXT_GREY, with_alpha
from luvatrix_charts.config import ChartConfig, Margins
from luvatrix_charts.geometry import DrawList, Line, Marker, PlotArea, Point, Polygon, Polyline, Rect, Text
from luvatrix_charts.series import PolarSeries, RadarSeries


LOGGER = logging.getLogger(__name__)

POLAR_GRID_RINGS = 5
POLAR_SPOKES = 12
R_MAX_HEADROOM = 1.1
RADAR_MIN_AXES = 3
RADAR_FILL_ALPHA = 0.3


def polar_to_cartesian(theta: float, r: float, r_max: float, center: Point, radius: float) -> Point:
    nr = r / r_max * radius if r_max > 0 else 0.0
    return center[0] + nr * math.cos(theta), center[1] - nr * math.sin(theta)


def polar_to_cartesian_many(
    theta: np.ndarray, r: np.ndarray, r_max: float, center: Point, radius: float
) -> tuple[np.ndarray, np.ndarray]:
    scale = radius / r_max if r_max > 0 else 0.0
    nr = np.asarray(r, dtype=np.float64) * scale
    t = np.asarray(theta, dtype=np.float64)
    return center[0] + nr * np.cos(t), center[1] - nr * np.sin(t)


def radar_axis_angle(index: int, n_axes: int) -> float:
    return -math.pi / 2.0 + index * math.tau / n_axes


class PolarChart(Chart):
    def __init__(
        self,
        *,
        r_max: float | None = None,
        show_grid: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._series: list[PolarSeries] = []
        self.r_max = r_max
        self.show_grid = show_grid

    @property
    def series(self) -> tuple[PolarSeries, ...]:
        return tuple(self._series)

    def add_series(self, series: PolarSeries) -> None:
        self._series.append(series)
        self._dirty = True

    def set_r_max(self, r_max: float | None) -> None:
        self.r_max = r_max
        self._dirty = True

    def set_show_grid(self, show: bool) -> None:
        self.show_grid = show
        self._dirty = True

    def clear(self) -> None:
        self._series.clear()
        self._dirty = True

    def resolved_r_max(self) -> float:
        if self.r_max is not None and self.r_max > 0:
            return self.r_max
        peaks = [float(np.nanmax(s.r)) for s in self._series if s.r.size and np.any(np.isfinite(s.r))]
        peak = max(peaks, default=0.0) * R_MAX_HEADROOM
        return peak if peak > 0 else 1.0

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        top = 40.0 if self.title else 20.0
        return rect.inset(Margins(20.0, top, 20.0, 20.0))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        center = area.center
        radius = min(area.width, area.height) / 2.0
        r_max = self.resolved_r_max()
        if self.show_grid:
            self._draw_grid(out, center, radius, r_max)

        for i, s in enumerate(self._series):
            if s.theta.size != s.r.size or s.theta.size == 0:
                LOGGER.debug("polar series %r skipped: theta/r sizes %d/%d", s.label, s.theta.size, s.r.size)
                continue
            color = self.color_for(i, s.color)
            xs, ys = polar_to_cartesian_many(s.theta, s.r, r_max, center, radius)
            points = tuple(zip(xs.tolist(), ys.tolist(), strict=True))
            if s.fill:
                out.add(Polygon(points, with_alpha(color, RADAR_FILL_ALPHA)))
            out.add(Polyline(points, color, 2.0, closed=True))
            if s.show_markers:
                out.extend(Marker(p, 6.0, color) for p in points)

    def _draw_grid(self, out: DrawList, center: Point, radius: float, r_max: float) -> None:
        for ring in range(1, POLAR_GRID_RINGS + 1):
            ring_r = radius * ring / POLAR_GRID_RINGS
            ring_points = tuple(
                polar_to_cartesian(math.tau * k / 64, ring_r, radius, center, radius) for k in range(64)
            )
            out.add(Polyline(ring_points, GRID_GREY, 1.0, closed=True))
            out.add(
                Text((center[0] + 3.0, center[1] - ring_r), f"{r_max * ring / POLAR_GRID_RINGS:.1f}", TEXT_GREY, self.config.font_size, "left", "bottom")
            )
        for k in range(POLAR_SPOKES):
            theta = math.tau * k / POLAR_SPOKES
            out.add(Line(center, polar_to_cartesian(theta, radius, radius, center, radius), GRID_GREY, 1.0))
            label_pos = polar_to_cartesian(theta, radius + 12.0, radius, center, radius)
            out.add(Text(label_pos, f"{round(math.degrees(theta))}°", TEXT_GREY, self.config.font_size))


class RadarChart(Chart):
    def __init__(
        self,
        axes: Sequence[str] = (),
        *,
        max_value: float | None = None,
        grid_levels: int = 5,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._axes: list[str] = list(axes)
        self._series: list[RadarSeries] = []
        self.max_value = max_value
        self.grid_levels = max(1, grid_levels)

    @property
    def axes(self) -> tuple[str, ...]:
        return tuple(self._axes)

    @property
    def series(self) -> tuple[RadarSeries, ...]:
        return tuple(self._series)

    def set_axes(self, axes: Sequence[str]) -> None:
        self._axes = list(axes)
        self._dirty = True

    def add_series(self, series: RadarSeries) -> None:
        self._series.append(series)
        self._dirty = True

    def set_max_value(self, max_value: float | None) -> None:
        self.max_value = max_value
        self._dirty = True

    def clear(self) -> None:
        self._series.clear()
        self._dirty = True

    def resolved_max(self) -> float:
        if self.max_value is not None and self.max_value > 0:
            return self.max_value
        peak = max((v for s in self._series for v in s.values if math.isfinite(v)), default=0.0) * R_MAX_HEADROOM
        return peak if peak > 0 else 1.0

    def vertices(self, values: Sequence[float], center: Point, radius: float) -> tuple[Point, ...]:
        n = len(self._axes)
        vmax = self.resolved_max()
        out: list[Point] = []
        for i, value in enumerate(values):
            r = min(max(value, 0.0) / vmax, 1.0) * radius
            angle = radar_axis_angle(i, n)
            out.append((center[0] + r * math.cos(angle), center[1] + r * math.sin(angle)))
        return tuple(out)

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        return rect.inset(Margins(0.0, 30.0 if self.title else 0.0, 0.0, 0.0))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        n = len(self._axes)
        if n < RADAR_MIN_AXES:
            LOGGER.debug("radar chart needs at least %d axes, has %d", RADAR_MIN_AXES, n)
            return
        radius = max(min(area.width, area.height) / 2.0 - 60.0, 50.0)
        center = (area.center[0], area.center[1] + 10.0)

        for level in range(1, self.grid_levels + 1):
            r = radius * level / self.grid_levels
            ring = tuple(
                (center[0] + r * math.cos(radar_axis_angle(i, n)), center[1] + r * math.sin(radar_axis_angle(i, n)))
                for i in range(n)
            )
            out.add(Polyline(ring, GRID_GREY, 1.0, closed=True))
        for i, name in enumerate(self._axes):
            angle = radar_axis_angle(i, n)
            tip = (center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle))
            out.add(Line(center, tip, GRID_GREY, 1.0))
            label = (center[0] + (radius + 15.0) * math.cos(angle), center[1] + (radius + 15.0) * math.sin(angle))
            h_align = "center" if abs(math.cos(angle)) < 0.1 else ("left" if math.cos(angle) > 0 else "right")
            out.add(Text(label, name, TEXT_GREY, self.config.font_size, h_align, "middle"))

        for i, s in enumerate(self._series):
            if len(s.values) != n:
                LOGGER.debug("radar series %r has %d values for %d axes; skipped", s.label, len(s.values), n)
                continue
            color = self.color_for(i, s.color)
            points = self.vertices(s.values, center, radius)
            if s.fill:
                out.add(Polygon(points, with_alpha(color, RADAR_FILL_ALPHA)))
            out.add(Polyline(points, color, 2.0, closed=True))
            out.extend(Marker(p, 6.0, color) for p in points)
