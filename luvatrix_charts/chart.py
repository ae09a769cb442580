from __future__ import annotations

from collections.abc import Sequence

from luvatrix_charts.colors import AXIS_GREY, GRID_GREY, TEXT_GREY, Color, coerce_color, palette_color
from luvatrix_charts.config import ChartConfig, resolve_config
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, Line, PlotArea, Rect, Text
from luvatrix_charts.scales import AxisTicks


TITLE_OFFSET_PX = 15.0
TICK_LENGTH_PX = 5.0


class Chart:
    def __init__(self, *, title: str = "", config: ChartConfig | None = None) -> None:
        self.config = resolve_config(config)
        self.title = title
        self.palette: tuple[Color, ...] = self.config.palette
        self._dirty = True
        self._plot_area: PlotArea | None = None

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def plot_area(self) -> PlotArea | None:
        return self._plot_area

    def set_title(self, title: str) -> None:
        self.title = title
        self._dirty = True

    def set_colors(self, palette: Sequence[Color | str]) -> None:
        if not palette:
            raise ChartDataError("palette must not be empty")
        self.palette = tuple(coerce_color(c, "palette entry") for c in palette)
        self._dirty = True

    def color_for(self, index: int, explicit: Color | None = None) -> Color:
        if explicit is not None:
            return explicit
        return palette_color(index, self.palette)

    def clear(self) -> None:
        raise NotImplementedError

    def layout(self, rect: Rect) -> DrawList:
        area = self._resolve_plot_area(rect)
        out = DrawList()
        self._layout(rect, area, out)
        if self.title:
            self._draw_title(rect, out)
        self._plot_area = area
        self._dirty = False
        return out

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        return rect.inset(self.config.margins)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        raise NotImplementedError

    def _draw_title(self, rect: Rect, out: DrawList) -> None:
        out.add(
            Text(
                position=(rect.x + rect.width / 2.0, rect.y + TITLE_OFFSET_PX),
                text=self.title,
                color=TEXT_GREY,
                size=self.config.font_size + 4.0,
            )
        )


def draw_axes(
    out: DrawList,
    area: PlotArea,
    x_ticks: AxisTicks | None,
    y_ticks: AxisTicks | None,
    *,
    font_size: float = 10.0,
    grid: bool = True,
    x_label: str = "",
    y_label: str = "",
) -> None:
    if grid:
        for px in x_ticks.positions if x_ticks is not None else ():
            out.add(Line((px, area.top), (px, area.bottom), GRID_GREY, 0.5))
        for py in y_ticks.positions if y_ticks is not None else ():
            out.add(Line((area.left, py), (area.right, py), GRID_GREY, 0.5))

    out.add(Line((area.left, area.bottom), (area.right, area.bottom), AXIS_GREY, 1.0))
    out.add(Line((area.left, area.top), (area.left, area.bottom), AXIS_GREY, 1.0))

    if x_ticks is not None:
        for px, label in zip(x_ticks.positions, x_ticks.labels, strict=True):
            out.add(Line((px, area.bottom), (px, area.bottom + TICK_LENGTH_PX), AXIS_GREY, 1.0))
            out.add(
                Text((px, area.bottom + TICK_LENGTH_PX + 2.0), label, TEXT_GREY, font_size, "center", "top")
            )
    if y_ticks is not None:
        for py, label in zip(y_ticks.positions, y_ticks.labels, strict=True):
            out.add(Line((area.left - TICK_LENGTH_PX, py), (area.left, py), AXIS_GREY, 1.0))
            out.add(
                Text((area.left - TICK_LENGTH_PX - 2.0, py), label, TEXT_GREY, font_size, "right", "middle")
            )

    if x_label:
        out.add(Text((area.center[0], area.bottom + 2.5 * font_size + 4.0), x_label, TEXT_GREY, font_size, "center", "top"))
    if y_label:
        out.add(Text((area.left, area.top - 4.0), y_label, TEXT_GREY, font_size, "left", "bottom"))
