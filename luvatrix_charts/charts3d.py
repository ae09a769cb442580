from __future__ import annotations

import logging
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d, coerce_grid
from luvatrix_charts.chart import Chart
from luvatrix_charts.colormap import Colormap, resolve_colormap
from luvatrix_charts.colors import AXIS_GREY, TEXT_GREY, Color
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, Line, Marker, PlotArea, Point, Polygon, Polyline, Rect, Text
from luvatrix_charts.projection import MAX_ELEVATION, AxisRange, View3D, depth_order, to_screen
from luvatrix_charts.records import Point3D
from luvatrix_charts.series import Line3DSeries


LOGGER = logging.getLogger(__name__)

MIN_ZOOM = 0.2
MAX_ZOOM = 5.0
SCREEN_SCALE = 0.35
DRAG_SENSITIVITY = 0.5
AXIS_EXTENT = 1.2
DEFAULT_POINT_SIZE = 6.0
SURFACE_Z_SPAN = 1.5
SURFACE_WIRE_OVER: Color = (0.0, 0.0, 0.0, 0.5)
SURFACE_WIRE_ONLY: Color = (0.2, 0.4, 0.8, 1.0)


class Chart3D(Chart):
    def __init__(self, *, view: View3D | None = None, title: str = "", config: ChartConfig | None = None) -> None:
        super().__init__(title=title, config=config)
        self.view = View3D() if view is None else view
        self.zoom = min(max(self.config.zoom, MIN_ZOOM), MAX_ZOOM)

    def set_view(self, view: View3D) -> None:
        self.view = view
        self._dirty = True

    def set_azimuth(self, azimuth: float) -> None:
        self.view = View3D(azimuth, self.view.elevation, self.view.distance)
        self._dirty = True

    def set_elevation(self, elevation: float) -> None:
        elevation = min(max(elevation, -MAX_ELEVATION), MAX_ELEVATION)
        self.view = View3D(self.view.azimuth, elevation, self.view.distance)
        self._dirty = True

    def set_zoom(self, zoom: float) -> None:
        self.zoom = min(max(zoom, MIN_ZOOM), MAX_ZOOM)
        self._dirty = True

    def rotate_by(self, dx: float, dy: float) -> None:
        self.view = self.view.rotated(dx * DRAG_SENSITIVITY, dy * DRAG_SENSITIVITY)
        self._dirty = True

    def _screen_scale(self, area: PlotArea) -> float:
        return min(area.width, area.height) * SCREEN_SCALE * self.zoom

    def _project(self, xyz: np.ndarray, area: PlotArea) -> np.ndarray:
        return to_screen(self.view.project_many(xyz), area.center, self._screen_scale(area))

    def _draw_axes(self, out: DrawList, area: PlotArea) -> None:
        e = AXIS_EXTENT
        ends = np.asarray(
            [[-e, 0, 0], [e, 0, 0], [0, -e, 0], [0, e, 0], [0, 0, -e], [0, 0, e]],
            dtype=np.float64,
        )
        screen = self._project(ends, area)
        for k, name in enumerate(("X", "Y", "Z")):
            a = (float(screen[2 * k, 0]), float(screen[2 * k, 1]))
            b = (float(screen[2 * k + 1, 0]), float(screen[2 * k + 1, 1]))
            out.add(Line(a, b, AXIS_GREY, 1.0))
            out.add(Text(b, name, TEXT_GREY, self.config.font_size, "left", "bottom"))


class Scatter3DChart(Chart3D):
    def __init__(
        self,
        *,
        point_size: float = DEFAULT_POINT_SIZE,
        color: Color | None = None,
        view: View3D | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(view=view, title=title, config=config)
        self._points: list[Point3D] = []
        self.point_size = point_size
        self.color: Color = self.color_for(0, color)

    @property
    def points(self) -> tuple[Point3D, ...]:
        return tuple(self._points)

    def set_data(self, x: Any, y: Any, z: Any) -> None:
        xs = coerce_1d(x, label="x")
        ys = coerce_1d(y, label="y")
        zs = coerce_1d(z, label="z")
        n = min(xs.size, ys.size, zs.size)
        if not (xs.size == ys.size == zs.size):
            LOGGER.debug("scatter3d truncating x/y/z of sizes %d/%d/%d to %d", xs.size, ys.size, zs.size, n)
        self._points = [Point3D(float(xs[i]), float(ys[i]), float(zs[i])) for i in range(n)]
        self._dirty = True

    def add_point(self, point: Point3D) -> None:
        self._points.append(point)
        self._dirty = True

    def set_color(self, color: Color) -> None:
        self.color = color
        self._dirty = True

    def set_point_size(self, size: float) -> None:
        self.point_size = size
        self._dirty = True

    def clear(self) -> None:
        self._points.clear()
        self._dirty = True

    def normalized(self) -> np.ndarray:
        if not self._points:
            return np.zeros((0, 3), dtype=np.float64)
        raw = np.asarray([[p.x, p.y, p.z] for p in self._points], dtype=np.float64)
        return np.stack([AxisRange.auto(raw[:, k]).normalize(raw[:, k]) for k in range(3)], axis=-1)

    def draw_order(self) -> np.ndarray:
        return depth_order(self.view.depth_many(self.normalized()))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        self._draw_axes(out, area)
        if not self._points:
            return
        xyz = self.normalized()
        screen = self._project(xyz, area)
        for i in depth_order(self.view.depth_many(xyz)).tolist():
            p = self._points[i]
            center: Point = (float(screen[i, 0]), float(screen[i, 1]))
            size = self.point_size if p.size is None else p.size
            out.add(Marker(center, size, self.color if p.color is None else p.color))


class Line3DChart(Chart3D):
    def __init__(self, *, view: View3D | None = None, title: str = "", config: ChartConfig | None = None) -> None:
        super().__init__(view=view, title=title, config=config)
        self._series: list[Line3DSeries] = []

    @property
    def series(self) -> tuple[Line3DSeries, ...]:
        return tuple(self._series)

    def add_series(self, series: Line3DSeries) -> None:
        self._series.append(series)
        self._dirty = True

    def clear(self) -> None:
        self._series.clear()
        self._dirty = True

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        self._draw_axes(out, area)
        live = [s for s in self._series if s.x.size >= 2]
        if not live:
            return
        ranges = [
            AxisRange.auto(np.concatenate([getattr(s, axis) for s in live])) for axis in ("x", "y", "z")
        ]
        lines: list[tuple[float, Polyline]] = []
        for i, s in enumerate(live):
            xyz = np.stack([ranges[0].normalize(s.x), ranges[1].normalize(s.y), ranges[2].normalize(s.z)], axis=-1)
            screen = self._project(xyz, area)
            points = tuple((float(px), float(py)) for px, py in screen)
            depth = float(np.mean(self.view.depth_many(xyz)))
            lines.append((depth, Polyline(points, self.color_for(i, s.color), s.line_width)))
        for _, line in sorted(lines, key=lambda item: -item[0]):
            out.add(line)


class Surface3DChart(Chart3D):
    def __init__(
        self,
        z: Any = None,
        *,
        colormap: Colormap | str | None = None,
        show_surface: bool = True,
        show_wireframe: bool = True,
        view: View3D | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(view=view, title=title, config=config)
        self._z = np.zeros((0, 0), dtype=np.float64) if z is None else _finite_grid(z)
        self.colormap = resolve_colormap(self.config.colormap if colormap is None else colormap)
        self.show_surface = show_surface
        self.show_wireframe = show_wireframe

    @property
    def z(self) -> np.ndarray:
        return self._z

    def set_data(self, z: Any) -> None:
        self._z = _finite_grid(z)
        self._dirty = True

    def set_colormap(self, colormap: Colormap | str) -> None:
        self.colormap = resolve_colormap(colormap)
        self._dirty = True

    def set_show_surface(self, show: bool) -> None:
        self.show_surface = show
        self._dirty = True

    def set_show_wireframe(self, show: bool) -> None:
        self.show_wireframe = show
        self._dirty = True

    def clear(self) -> None:
        self._z = np.zeros((0, 0), dtype=np.float64)
        self._dirty = True

    def normalized_grid(self) -> np.ndarray:
        rows, cols = self._z.shape
        z_min = float(np.min(self._z))
        z_max = float(np.max(self._z))
        z_range = z_max - z_min
        z_scale = SURFACE_Z_SPAN / z_range if z_range > 0 else 1.0
        xs = np.arange(cols, dtype=np.float64) * (2.0 / (cols - 1)) - 1.0
        ys = np.arange(rows, dtype=np.float64) * (2.0 / (rows - 1)) - 1.0
        gx, gy = np.meshgrid(xs, ys)
        gz = (self._z - (z_min + z_max) / 2.0) * z_scale
        return np.stack([gx, gy, gz], axis=-1)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        self._draw_axes(out, area)
        rows, cols = self._z.shape
        if rows < 2 or cols < 2:
            LOGGER.debug("surface grid %dx%d is too small", rows, cols)
            return
        if not self.show_surface and not self.show_wireframe:
            return
        grid = self.normalized_grid()
        screen = self._project(grid.reshape(-1, 3), area).reshape(rows, cols, 2)
        depth = self.view.depth_many(grid.reshape(-1, 3)).reshape(rows, cols)

        quad_depth = (depth[:-1, :-1] + depth[:-1, 1:] + depth[1:, 1:] + depth[1:, :-1]) / 4.0
        z_min = float(np.min(self._z))
        z_range = float(np.max(self._z)) - z_min
        avg_z = (self._z[:-1, :-1] + self._z[:-1, 1:] + self._z[1:, 1:] + self._z[1:, :-1]) / 4.0
        t = (avg_z - z_min) / z_range if z_range > 0 else np.full(avg_z.shape, 0.5)
        colors = self.colormap.sample_many(t)
        wire = SURFACE_WIRE_OVER if self.show_surface else SURFACE_WIRE_ONLY

        for flat in depth_order(quad_depth.reshape(-1)).tolist():
            r, c = divmod(flat, cols - 1)
            corners = tuple(
                (float(screen[rr, cc, 0]), float(screen[rr, cc, 1]))
                for rr, cc in ((r, c), (r, c + 1), (r + 1, c + 1), (r + 1, c))
            )
            if self.show_surface:
                rgba = colors[r, c]
                color = (float(rgba[0]), float(rgba[1]), float(rgba[2]), float(rgba[3]))
                out.add(Polygon(corners, color, outline=wire if self.show_wireframe else None))
            else:
                out.add(Polyline(corners, wire, 1.0, closed=True))


def _finite_grid(z: Any) -> np.ndarray:
    grid = coerce_grid(z, label="z")
    if not np.all(np.isfinite(grid)):
        raise ChartDataError("surface z grid must contain only finite values")
    return grid
