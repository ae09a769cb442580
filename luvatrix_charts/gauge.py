from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math

from luvatrix_charts.chart import Chart
from luvatrix_charts.colors import TEXT_GREY, Color
from luvatrix_charts.config import ChartConfig, Margins
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import ArcStroke, DrawList, Line, Marker, PlotArea, Point, Polygon, Polyline, Rect, Text
from luvatrix_charts.records import FunnelStage


LOGGER = logging.getLogger(__name__)

# Angles are screen radians with y pointing down, so the sweep leaves its gap on the left.
GAUGE_HALF_SWEEP = 0.75 * math.pi
SPAN_FLOOR = 1e-10
DEFAULT_RANGE = (0.0, 100.0)
NO_THRESHOLD_COLOR: Color = (0.12, 0.47, 0.71, 1.0)
TRACK_COLOR: Color = (0.9, 0.9, 0.9, 1.0)
NEEDLE_COLOR: Color = (0.2, 0.2, 0.2, 1.0)
VALUE_LABEL_OFFSET = 30.0
FUNNEL_WIDTH_RATIO = 0.9
FUNNEL_TAPER = 0.3
FUNNEL_OUTLINE: Color = (1.0, 1.0, 1.0, 0.8)


@dataclass(frozen=True)
class Threshold:
    value: float
    color: Color


DEFAULT_THRESHOLDS: tuple[Threshold, ...] = (
    Threshold(0.0, (0.17, 0.63, 0.17, 1.0)),
    Threshold(60.0, (1.0, 0.65, 0.0, 1.0)),
    Threshold(80.0, (0.84, 0.15, 0.16, 1.0)),
)


@dataclass(frozen=True)
class GaugeGeometry:
    ratio: float
    start_angle: float
    end_angle: float
    value_angle: float
    color: Color


def threshold_color(value: float, thresholds: Sequence[Threshold]) -> Color:
    if not thresholds:
        return NO_THRESHOLD_COLOR
    ordered = sorted(thresholds, key=lambda t: t.value)
    for threshold in reversed(ordered):
        if value >= threshold.value:
            return threshold.color
    return ordered[0].color


def gauge_layout(
    value: float,
    vmin: float,
    vmax: float,
    thresholds: Sequence[Threshold] | None = None,
) -> GaugeGeometry:
    span = max(vmax - vmin, SPAN_FLOOR)
    ratio = min(max((value - vmin) / span, 0.0), 1.0)
    start = -GAUGE_HALF_SWEEP
    end = GAUGE_HALF_SWEEP
    return GaugeGeometry(
        ratio=ratio,
        start_angle=start,
        end_angle=end,
        value_angle=start + ratio * (end - start),
        color=threshold_color(value, DEFAULT_THRESHOLDS if thresholds is None else thresholds),
    )


class GaugeChart(Chart):
    def __init__(
        self,
        value: float = 0.0,
        *,
        vmin: float | None = None,
        vmax: float | None = None,
        unit: str = "",
        thresholds: Sequence[Threshold] | None = None,
        arc_width: float | None = None,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self.value = float(value)
        self.vmin = DEFAULT_RANGE[0] if vmin is None else float(vmin)
        self.vmax = DEFAULT_RANGE[1] if vmax is None else float(vmax)
        self.unit = unit
        self.thresholds: tuple[Threshold, ...] = DEFAULT_THRESHOLDS if thresholds is None else tuple(thresholds)
        self.arc_width = self.config.gauge_arc_width if arc_width is None else float(arc_width)

    @property
    def geometry(self) -> GaugeGeometry:
        return gauge_layout(self.value, self.vmin, self.vmax, self.thresholds)

    def set_value(self, value: float) -> None:
        self.value = float(value)
        self._dirty = True

    def set_range(self, vmin: float, vmax: float) -> None:
        if vmax < vmin:
            raise ChartDataError(f"gauge range is inverted: {vmin} > {vmax}")
        self.vmin = float(vmin)
        self.vmax = float(vmax)
        self._dirty = True

    def set_unit(self, unit: str) -> None:
        self.unit = unit
        self._dirty = True

    def set_thresholds(self, thresholds: Sequence[Threshold]) -> None:
        self.thresholds = tuple(thresholds)
        self._dirty = True

    def set_arc_width(self, width: float) -> None:
        if width <= 0:
            raise ChartDataError("arc width must be > 0")
        self.arc_width = float(width)
        self._dirty = True

    def clear(self) -> None:
        self.value = self.vmin
        self._dirty = True

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        return rect.inset(Margins(10.0, 30.0 if self.title else 10.0, 10.0, 10.0))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        geo = self.geometry
        center: Point = (area.left + area.width / 2.0, area.top + area.height * 0.6)
        radius = max(min(area.width, area.height) / 2.0 - 40.0, 30.0)
        start, end, value_angle = geo.start_angle, geo.end_angle, geo.value_angle

        out.add(ArcStroke(center, radius, start, end, self.arc_width, TRACK_COLOR))
        if geo.ratio > 0:
            out.add(ArcStroke(center, radius, start, value_angle, self.arc_width, geo.color))

        needle = radius - self.arc_width / 2.0 - 5.0
        tip = (center[0] + needle * math.cos(value_angle), center[1] + needle * math.sin(value_angle))
        out.add(Line(center, tip, NEEDLE_COLOR, 3.0))
        out.add(Marker(center, 10.0, NEEDLE_COLOR))

        font = self.config.font_size
        value_pos = (center[0], center[1] + VALUE_LABEL_OFFSET)
        out.add(Text(value_pos, f"{self.value:.1f}{self.unit}", TEXT_GREY, font + 6.0, "center", "top"))
        for angle, label in ((start, self.vmin), (end, self.vmax)):
            pos = (center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle) + 15.0)
            out.add(Text(pos, f"{label:.0f}", TEXT_GREY, font, "center", "top"))


@dataclass(frozen=True)
class FunnelSegment:
    index: int
    label: str
    value: float
    ratio: float
    points: tuple[Point, Point, Point, Point]


def funnel_layout(stages: Sequence[FunnelStage], rect: Rect) -> list[FunnelSegment]:
    max_value = max((s.value for s in stages), default=0.0)
    if max_value <= 0 or rect.height <= 0:
        LOGGER.debug("funnel has nothing to draw (max=%s)", max_value)
        return []
    stage_h = rect.height / len(stages)
    cx = rect.x + rect.width / 2.0
    max_width = rect.width * FUNNEL_WIDTH_RATIO
    segments: list[FunnelSegment] = []
    for i, stage in enumerate(stages):
        ratio = stage.value / max_value
        next_ratio = stages[i + 1].value / max_value if i + 1 < len(stages) else ratio * FUNNEL_TAPER
        top_w = max_width * ratio
        bottom_w = max_width * next_ratio
        y = rect.y + i * stage_h
        points = (
            (cx - top_w / 2.0, y),
            (cx + top_w / 2.0, y),
            (cx + bottom_w / 2.0, y + stage_h),
            (cx - bottom_w / 2.0, y + stage_h),
        )
        segments.append(FunnelSegment(index=i, label=stage.label, value=stage.value, ratio=ratio, points=points))
    return segments


class FunnelChart(Chart):
    def __init__(
        self,
        stages: Sequence[FunnelStage] = (),
        *,
        show_percentages: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._stages: list[FunnelStage] = list(stages)
        self.show_percentages = show_percentages

    @property
    def stages(self) -> tuple[FunnelStage, ...]:
        return tuple(self._stages)

    def set_data(self, stages: Sequence[FunnelStage]) -> None:
        self._stages = list(stages)
        self._dirty = True

    def add_stage(self, label: str, value: float, color: Color | None = None) -> None:
        self._stages.append(FunnelStage(label, value, color))
        self._dirty = True

    def set_show_percentages(self, show: bool) -> None:
        self.show_percentages = show
        self._dirty = True

    def clear(self) -> None:
        self._stages.clear()
        self._dirty = True

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        return rect.inset(Margins(100.0, 40.0 if self.title else 20.0, 80.0, 20.0))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        region = Rect(area.left, area.top, area.width, area.height)
        font = self.config.font_size
        for seg in funnel_layout(self._stages, region):
            stage = self._stages[seg.index]
            color = self.color_for(seg.index, stage.color)
            out.add(Polygon(seg.points, color))
            tl, tr, br, bl = seg.points
            out.add(Polyline((bl, tl, tr, br), FUNNEL_OUTLINE, 1.0))
            mid_y = (tl[1] + bl[1]) / 2.0
            out.add(Text((area.left - 5.0, mid_y), seg.label, TEXT_GREY, font, "right", "middle"))
            value_text = f"{seg.ratio * 100.0:.1f}%" if self.show_percentages else f"{seg.value:.0f}"
            out.add(Text((area.right + 5.0, mid_y), value_text, TEXT_GREY, font, "left", "middle"))
