from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
import logging
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d
from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import TEXT_GREY, Color, darken
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, PlotArea, Rect, Text
from luvatrix_charts.scales import AxisTicks, AxisTransform, ScaleType, axis_ticks


LOGGER = logging.getLogger(__name__)

DEFAULT_WIDTH_RATIO = 0.8
GROUP_GAP_RATIO = 0.9
VALUE_HEADROOM = 1.1
HORIZONTAL_LEFT_MARGIN = 80.0
LABEL_GAP_PX = 5.0


@dataclass(frozen=True)
class BarGroup:
    label: str
    values: np.ndarray
    color: Color | None = None

    @classmethod
    def from_values(cls, label: str, values: Any, color: Color | None = None) -> BarGroup:
        return cls(label, coerce_1d(values, label=f"group {label!r} values"), color)


@dataclass(frozen=True)
class PlacedBar:
    category: int
    group: int
    value: float
    base: float
    rect: Rect

    @property
    def tip(self) -> float:
        return self.base + self.value


def bar_value_range(groups: Sequence[BarGroup], *, stacked: bool = False) -> tuple[float, float]:
    """Value axis limits: zero plus 10 % headroom past the largest bar or stack."""
    if not groups:
        return 0.0, 1.0
    n = max(g.values.size for g in groups)
    pos = np.zeros(n, dtype=np.float64)
    neg = np.zeros(n, dtype=np.float64)
    for g in groups:
        vals = np.nan_to_num(g.values, nan=0.0, posinf=0.0, neginf=0.0)
        if stacked:
            pos[: vals.size] += np.clip(vals, 0.0, None)
            neg[: vals.size] += np.clip(vals, None, 0.0)
        else:
            pos[: vals.size] = np.maximum(pos[: vals.size], vals)
            neg[: vals.size] = np.minimum(neg[: vals.size], vals)
    hi = float(pos.max(initial=0.0)) * VALUE_HEADROOM
    lo = float(neg.min(initial=0.0)) * VALUE_HEADROOM
    if hi == lo:
        hi = 1.0
    return lo, hi


def bar_layout(
    groups: Sequence[BarGroup],
    area: PlotArea,
    *,
    n_categories: int | None = None,
    stacked: bool = False,
    horizontal: bool = False,
    width_ratio: float = DEFAULT_WIDTH_RATIO,
    value_range: tuple[float, float] | None = None,
) -> list[PlacedBar]:
    """Place one rectangle per (category, group) value.

    Grouped bars split each category band into equal slots; stacked bars pile
    positive values up from zero and negative values down from it.
    """
    if not 0.0 < width_ratio <= 1.0:
        raise ChartDataError(f"width_ratio must be in (0, 1], got {width_ratio}")
    if not groups:
        return []
    n_cat = max(g.values.size for g in groups) if n_categories is None else n_categories
    if n_cat <= 0:
        return []
    lo, hi = bar_value_range(groups, stacked=stacked) if value_range is None else value_range
    if horizontal:
        axis = AxisTransform(ScaleType.LINEAR, lo, hi, area.left, area.right)
        band = area.height / n_cat
    else:
        axis = AxisTransform(ScaleType.LINEAR, lo, hi, area.bottom, area.top)
        band = area.width / n_cat

    bars: list[PlacedBar] = []
    for cat in range(n_cat):
        band_start = (area.top if horizontal else area.left) + cat * band
        occupied = band * width_ratio
        slot_start = band_start + (band - occupied) / 2.0
        up = down = 0.0
        for gi, group in enumerate(groups):
            if cat >= group.values.size or not np.isfinite(group.values[cat]):
                continue
            value = float(group.values[cat])
            if stacked:
                base = up if value >= 0 else down
                offset, thickness = slot_start, occupied
                if value >= 0:
                    up += value
                else:
                    down += value
            else:
                base = 0.0
                slot = occupied / len(groups)
                offset, thickness = slot_start + gi * slot, slot * GROUP_GAP_RATIO
            a, b = sorted((axis.to_pixel(base), axis.to_pixel(base + value)))
            if horizontal:
                rect = Rect(a, offset, b - a, thickness)
            else:
                rect = Rect(offset, a, thickness, b - a)
            bars.append(PlacedBar(cat, gi, value, base, rect))
    return bars


class BarChart(Chart):
    def __init__(
        self,
        categories: Sequence[str] = (),
        values: Any = None,
        *,
        stacked: bool = False,
        horizontal: bool = False,
        show_bar_labels: bool = False,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._categories: list[str] = list(categories)
        self._groups: list[BarGroup] = []
        if values is not None:
            self._groups.append(BarGroup.from_values("", values))
        self._bar_color: Color | None = None
        self.stacked = stacked
        self.horizontal = horizontal
        self.show_bar_labels = show_bar_labels
        self.width_ratio = DEFAULT_WIDTH_RATIO

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._categories)

    @property
    def groups(self) -> tuple[BarGroup, ...]:
        return tuple(self._groups)

    def set_data(self, categories: Sequence[str], values: Any) -> None:
        self._categories = list(categories)
        self._groups = [BarGroup.from_values("", values)]
        self._dirty = True

    def set_groups(self, categories: Sequence[str], groups: Sequence[BarGroup]) -> None:
        self._categories = list(categories)
        self._groups = list(groups)
        self._dirty = True

    def add_group(self, group: BarGroup) -> None:
        self._groups.append(group)
        self._dirty = True

    def set_color(self, color: Color | None) -> None:
        self._bar_color = color
        self._dirty = True

    def set_stacked(self, stacked: bool) -> None:
        self.stacked = stacked
        self._dirty = True

    def set_horizontal(self, horizontal: bool) -> None:
        self.horizontal = horizontal
        self._dirty = True

    def set_show_bar_labels(self, show: bool) -> None:
        self.show_bar_labels = show
        self._dirty = True

    def set_bar_width_ratio(self, ratio: float) -> None:
        if not 0.0 < ratio <= 1.0:
            raise ChartDataError(f"bar width ratio must be in (0, 1], got {ratio}")
        self.width_ratio = ratio
        self._dirty = True

    def clear(self) -> None:
        self._categories.clear()
        self._groups.clear()
        self._dirty = True

    def bar_color(self, group: int) -> Color:
        explicit = self._groups[group].color
        if explicit is None and len(self._groups) == 1:
            explicit = self._bar_color
        return self.color_for(group, explicit)

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        margins = self.config.margins
        if self.horizontal:
            margins = replace(margins, left=max(margins.left, HORIZONTAL_LEFT_MARGIN))
        return rect.inset(margins)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        if not self._groups:
            LOGGER.debug("bar chart has no groups")
            return
        n_cat = max(len(self._categories), max(g.values.size for g in self._groups))
        lo, hi = bar_value_range(self._groups, stacked=self.stacked)
        bars = bar_layout(
            self._groups,
            area,
            n_categories=n_cat,
            stacked=self.stacked,
            horizontal=self.horizontal,
            width_ratio=self.width_ratio,
            value_range=(lo, hi),
        )
        font = self.config.font_size
        for bar in bars:
            color = self.bar_color(bar.group)
            r = bar.rect
            out.add(FilledRect(r.x, r.y, r.width, r.height, color, darken(color, 0.2)))
            if not self.show_bar_labels or self.stacked:
                continue
            text = f"{bar.value:.1f}"
            if self.horizontal:
                edge = r.right if bar.value >= 0 else r.x
                align = "left" if bar.value >= 0 else "right"
                sign = 1.0 if bar.value >= 0 else -1.0
                out.add(Text((edge + sign * LABEL_GAP_PX, r.y + r.height / 2.0), text, TEXT_GREY, font, align, "middle"))
            else:
                above = bar.value >= 0
                y = r.y - LABEL_GAP_PX if above else r.bottom + LABEL_GAP_PX
                out.add(Text((r.x + r.width / 2.0, y), text, TEXT_GREY, font, "center", "bottom" if above else "top"))

        band = (area.height if self.horizontal else area.width) / n_cat
        for i, name in enumerate(self._categories):
            mid = (area.top if self.horizontal else area.left) + (i + 0.5) * band
            if self.horizontal:
                out.add(Text((area.left - LABEL_GAP_PX, mid), name, TEXT_GREY, font, "right", "middle"))
            else:
                out.add(Text((mid, area.bottom + LABEL_GAP_PX), name, TEXT_GREY, font, "center", "top"))

        empty = AxisTicks((), (), ())
        if self.horizontal:
            value_ticks = axis_ticks(AxisTransform(ScaleType.LINEAR, lo, hi, area.left, area.right), self.config.tick_count)
            draw_axes(out, area, value_ticks, empty, font_size=font)
        else:
            value_ticks = axis_ticks(AxisTransform(ScaleType.LINEAR, lo, hi, area.bottom, area.top), self.config.tick_count)
            draw_axes(out, area, empty, value_ticks, font_size=font)
