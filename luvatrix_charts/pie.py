from __future__ import annotations

from collections.abc import Sequence
import logging
import math

from luvatrix_charts.chart import Chart
from luvatrix_charts.colors import AXIS_GREY, DEFAULT_PALETTE, TEXT_GREY, WHITE, Color, contrast_text_color, palette_color
from luvatrix_charts.config import ChartConfig, Margins
from luvatrix_charts.geometry import DrawList, FilledRect, PlotArea, Point, Rect, Text, Wedge
from luvatrix_charts.records import PieSlice


LOGGER = logging.getLogger(__name__)

START_ANGLE = -math.pi / 2.0
PIE_RADIUS_RATIO = 0.8
PERCENT_LABEL_RATIO = 0.65
DONUT_LABEL_OFFSET = 15.0
DEFAULT_INNER_RATIO = 0.5
MAX_INNER_RATIO = 0.9
LEGEND_BOX_WIDTH = 100.0
LEGEND_LINE_HEIGHT = 16.0
LEGEND_PADDING = 8.0
LEGEND_MARKER = 10.0


def pie_layout(
    slices: Sequence[PieSlice],
    center: Point,
    radius: float,
    inner_radius: float = 0.0,
    palette: tuple[Color, ...] = DEFAULT_PALETTE,
) -> list[Wedge]:
    total = sum(s.value for s in slices)
    if total <= 0:
        LOGGER.debug("pie total is %s; no wedges", total)
        return []
    wedges: list[Wedge] = []
    angle = START_ANGLE
    for i, s in enumerate(slices):
        fraction = s.value / total
        sweep = fraction * math.tau
        wedges.append(
            Wedge(
                center=center,
                radius=radius,
                start_angle=angle,
                end_angle=angle + sweep,
                color=s.color if s.color is not None else palette_color(i, palette),
                inner_radius=inner_radius,
                label=s.label,
                value=s.value,
                fraction=fraction,
            )
        )
        angle += sweep
    return wedges


def format_percent(fraction: float) -> str:
    return f"{fraction * 100.0:.1f}%"


class PieChart(Chart):
    def __init__(
        self,
        slices: Sequence[PieSlice] = (),
        *,
        show_percentages: bool = True,
        show_legend: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._slices: list[PieSlice] = list(slices)
        self.show_percentages = show_percentages
        self.show_legend = show_legend
        self._wedges: list[Wedge] = []

    @property
    def slices(self) -> tuple[PieSlice, ...]:
        return tuple(self._slices)

    @property
    def wedges(self) -> list[Wedge]:
        return list(self._wedges)

    def set_data(self, slices: Sequence[PieSlice]) -> None:
        self._slices = list(slices)
        self._dirty = True

    def add_slice(self, label: str, value: float, color: Color | None = None) -> None:
        self._slices.append(PieSlice(label, value, color))
        self._dirty = True

    def set_show_percentages(self, show: bool) -> None:
        self.show_percentages = show
        self._dirty = True

    def set_show_legend(self, show: bool) -> None:
        self.show_legend = show
        self._dirty = True

    def clear(self) -> None:
        self._slices.clear()
        self._wedges = []
        self._dirty = True

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        return rect.inset(Margins(left=20.0, top=30.0 if self.title else 10.0, right=20.0, bottom=10.0))

    def _radii(self, area: PlotArea) -> tuple[float, float]:
        return min(area.width, area.height) / 2.0 * PIE_RADIUS_RATIO, 0.0

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        radius, inner = self._radii(area)
        self._wedges = pie_layout(self._slices, area.center, radius, inner, self.palette)
        out.extend(self._wedges)
        self._draw_labels(out, radius, inner)
        if self.show_legend and self._wedges:
            self._draw_legend(out, area)

    def _draw_labels(self, out: DrawList, radius: float, inner: float) -> None:
        if not self.show_percentages:
            return
        for wedge in self._wedges:
            if wedge.fraction <= 0:
                continue
            out.add(
                Text(
                    wedge.anchor(radius * PERCENT_LABEL_RATIO),
                    format_percent(wedge.fraction),
                    contrast_text_color(wedge.color),
                    self.config.font_size,
                )
            )

    def _draw_legend(self, out: DrawList, area: PlotArea) -> None:
        height = LEGEND_PADDING * 2.0 + LEGEND_LINE_HEIGHT * len(self._wedges)
        x = area.right - LEGEND_BOX_WIDTH
        y = area.top
        out.add(FilledRect(x, y, LEGEND_BOX_WIDTH, height, WHITE, border=AXIS_GREY))
        for i, wedge in enumerate(self._wedges):
            row_y = y + LEGEND_PADDING + i * LEGEND_LINE_HEIGHT
            out.add(FilledRect(x + LEGEND_PADDING, row_y + 3.0, LEGEND_MARKER, LEGEND_MARKER, wedge.color))
            out.add(
                Text(
                    (x + LEGEND_PADDING * 2.0 + LEGEND_MARKER, row_y + LEGEND_LINE_HEIGHT / 2.0),
                    wedge.label,
                    TEXT_GREY,
                    self.config.font_size,
                    "left",
                    "middle",
                )
            )


class DonutChart(PieChart):
    def __init__(
        self,
        slices: Sequence[PieSlice] = (),
        *,
        inner_radius_ratio: float = DEFAULT_INNER_RATIO,
        center_label: str | None = None,
        show_labels: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(slices, show_percentages=True, show_legend=False, title=title, config=config)
        self.inner_radius_ratio = min(max(inner_radius_ratio, 0.0), MAX_INNER_RATIO)
        self.center_label = center_label
        self.show_labels = show_labels

    def set_inner_radius_ratio(self, ratio: float) -> None:
        self.inner_radius_ratio = min(max(ratio, 0.0), MAX_INNER_RATIO)
        self._dirty = True

    def set_center_label(self, label: str | None) -> None:
        self.center_label = label
        self._dirty = True

    def _radii(self, area: PlotArea) -> tuple[float, float]:
        outer = max(min(area.width, area.height) / 2.0 - 40.0, 20.0)
        return outer, outer * self.inner_radius_ratio

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        super()._layout(rect, area, out)
        if self.center_label:
            out.add(Text(area.center, self.center_label, TEXT_GREY, self.config.font_size + 4.0))

    def _draw_labels(self, out: DrawList, radius: float, inner: float) -> None:
        if not self.show_percentages:
            return
        for wedge in self._wedges:
            if wedge.fraction <= 0:
                continue
            pos = wedge.anchor(radius + DONUT_LABEL_OFFSET)
            pct = format_percent(wedge.fraction)
            text = f"{wedge.label} ({pct})" if self.show_labels and wedge.label else pct
            h_align = "left" if math.cos(wedge.mid_angle) > 0 else "right"
            out.add(Text(pos, text, TEXT_GREY, self.config.font_size, h_align, "middle"))
