from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from luvatrix_charts.chart import Chart, draw_axes
from luvatrix_charts.colors import TEXT_GREY, Color
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, Line, PlotArea, Rect, Text
from luvatrix_charts.records import Candle, WaterfallEntry
from luvatrix_charts.scales import AxisTicks, AxisTransform, ScaleType, axis_ticks, pad_limits


LOGGER = logging.getLogger(__name__)

BULLISH_COLOR: Color = (0.17, 0.63, 0.17, 1.0)
BEARISH_COLOR: Color = (0.84, 0.15, 0.16, 1.0)
CANDLE_FILL_RATIO = 0.7
MIN_CANDLE_WIDTH = 3.0
MAX_CANDLE_WIDTH = 20.0
Y_PADDING_RATIO = 0.05
MIN_BODY_HEIGHT = 1.0


def candle_ranges(candles: Sequence[Candle]) -> tuple[float, float, float, float]:
    if not candles:
        return 0.0, 1.0, 0.0, 1.0
    x_min = candles[0].timestamp
    x_max = candles[-1].timestamp
    y_min = min(c.low for c in candles)
    y_max = max(c.high for c in candles)
    if x_min == x_max:
        x_min, x_max = pad_limits(x_min, x_max)
    y_min, y_max = pad_limits(y_min, y_max, ratio=Y_PADDING_RATIO)
    return x_min, x_max, y_min, y_max


def auto_candle_width(plot_width: float, n: int) -> float:
    if n <= 0:
        return MIN_CANDLE_WIDTH
    return min(max(plot_width / n * CANDLE_FILL_RATIO, MIN_CANDLE_WIDTH), MAX_CANDLE_WIDTH)


class CandlestickChart(Chart):
    def __init__(
        self,
        candles: Sequence[Candle] = (),
        *,
        candle_width: float | None = None,
        time_axis: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._candles: list[Candle] = sorted(candles, key=lambda c: c.timestamp)
        self.candle_width = candle_width
        self.time_axis = time_axis
        self.bullish_color = BULLISH_COLOR
        self.bearish_color = BEARISH_COLOR

    @property
    def candles(self) -> tuple[Candle, ...]:
        return tuple(self._candles)

    def set_data(self, candles: Sequence[Candle]) -> None:
        self._candles = sorted(candles, key=lambda c: c.timestamp)
        self._dirty = True

    def add_candle(self, candle: Candle) -> None:
        self._candles.append(candle)
        self._candles.sort(key=lambda c: c.timestamp)
        self._dirty = True

    def set_candle_colors(self, bullish: Color, bearish: Color) -> None:
        self.bullish_color = bullish
        self.bearish_color = bearish
        self._dirty = True

    def set_candle_width(self, width: float | None) -> None:
        if width is not None and width <= 0:
            raise ChartDataError("candle width must be > 0")
        self.candle_width = width
        self._dirty = True

    def clear(self) -> None:
        self._candles.clear()
        self._dirty = True

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        x_min, x_max, y_min, y_max = candle_ranges(self._candles)
        x_scale = ScaleType.TIME if self.time_axis else ScaleType.LINEAR
        x_axis = AxisTransform(x_scale, x_min, x_max, area.left, area.right)
        y_axis = AxisTransform(ScaleType.LINEAR, y_min, y_max, area.bottom, area.top)
        width = self.candle_width if self.candle_width is not None else auto_candle_width(area.width, len(self._candles))

        for candle in self._candles:
            cx = x_axis.to_pixel(candle.timestamp)
            color = self.bullish_color if candle.is_bullish else self.bearish_color
            out.add(Line((cx, y_axis.to_pixel(candle.high)), (cx, y_axis.to_pixel(candle.low)), color, 1.0))
            top = y_axis.to_pixel(candle.body_top)
            bottom = y_axis.to_pixel(candle.body_bottom)
            out.add(FilledRect(cx - width / 2.0, top, width, max(bottom - top, MIN_BODY_HEIGHT), color))

        if not self._candles:
            LOGGER.debug("candlestick chart has no candles")
            return
        draw_axes(
            out,
            area,
            axis_ticks(x_axis, self.config.tick_count),
            axis_ticks(y_axis, self.config.tick_count),
            font_size=self.config.font_size,
        )


POSITIVE_COLOR: Color = BULLISH_COLOR
NEGATIVE_COLOR: Color = BEARISH_COLOR
TOTAL_COLOR: Color = (0.12, 0.47, 0.71, 1.0)
CONNECTOR_COLOR: Color = (0.5, 0.5, 0.5, 0.5)
WATERFALL_FILL_RATIO = 0.7
MAX_WATERFALL_BAR = 60.0
WATERFALL_PADDING_RATIO = 0.1


@dataclass(frozen=True)
class WaterfallBar:
    label: str
    value: float
    start: float
    end: float
    is_total: bool

    @property
    def low(self) -> float:
        return min(self.start, self.end)

    @property
    def high(self) -> float:
        return max(self.start, self.end)


def waterfall_layout(entries: Sequence[WaterfallEntry]) -> list[WaterfallBar]:
    """Running-sum bars; a total bar spans zero to its own value and leaves the sum alone."""
    bars: list[WaterfallBar] = []
    running = 0.0
    for entry in entries:
        if entry.is_total:
            bars.append(WaterfallBar(entry.label, entry.value, 0.0, entry.value, True))
            continue
        start = running
        running += entry.value
        bars.append(WaterfallBar(entry.label, entry.value, start, running, False))
    return bars


def waterfall_limits(bars: Sequence[WaterfallBar]) -> tuple[float, float]:
    lo = min((b.low for b in bars), default=0.0)
    hi = max((b.high for b in bars), default=0.0)
    lo, hi = min(lo, 0.0), max(hi, 0.0)
    span = hi - lo
    if span == 0:
        return pad_limits(lo, hi)
    return lo - span * WATERFALL_PADDING_RATIO, hi + span * WATERFALL_PADDING_RATIO


class WaterfallChart(Chart):
    def __init__(
        self,
        entries: Sequence[WaterfallEntry] = (),
        *,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._entries: list[WaterfallEntry] = list(entries)
        self.positive_color = POSITIVE_COLOR
        self.negative_color = NEGATIVE_COLOR
        self.total_color = TOTAL_COLOR

    @property
    def entries(self) -> tuple[WaterfallEntry, ...]:
        return tuple(self._entries)

    def set_data(self, entries: Sequence[WaterfallEntry]) -> None:
        self._entries = list(entries)
        self._dirty = True

    def add_entry(self, entry: WaterfallEntry) -> None:
        self._entries.append(entry)
        self._dirty = True

    def set_colors(self, positive: Color, negative: Color, total: Color) -> None:  # type: ignore[override]
        self.positive_color = positive
        self.negative_color = negative
        self.total_color = total
        self._dirty = True

    def clear(self) -> None:
        self._entries.clear()
        self._dirty = True

    def bar_color(self, bar: WaterfallBar) -> Color:
        if bar.is_total:
            return self.total_color
        return self.positive_color if bar.value >= 0 else self.negative_color

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        bars = waterfall_layout(self._entries)
        if not bars:
            LOGGER.debug("waterfall chart has no entries")
            return
        lo, hi = waterfall_limits(bars)
        y_axis = AxisTransform(ScaleType.LINEAR, lo, hi, area.bottom, area.top)
        font = self.config.font_size
        draw_axes(out, area, AxisTicks((), (), ()), axis_ticks(y_axis, self.config.tick_count), font_size=font)
        if lo < 0.0 < hi:
            zero = y_axis.to_pixel(0.0)
            out.add(Line((area.left, zero), (area.right, zero), CONNECTOR_COLOR, 1.0))

        slot = area.width / len(bars)
        width = min(slot * WATERFALL_FILL_RATIO, MAX_WATERFALL_BAR)
        prev_end: float | None = None
        for i, bar in enumerate(bars):
            x = area.left + i * slot + (slot - width) / 2.0
            start_px = y_axis.to_pixel(bar.start)
            end_px = y_axis.to_pixel(bar.end)
            if prev_end is not None and not bar.is_total:
                out.add(Line((x - (slot - width), prev_end), (x, prev_end), CONNECTOR_COLOR, 1.0))
            top = min(start_px, end_px)
            height = max(abs(start_px - end_px), MIN_BODY_HEIGHT)
            out.add(FilledRect(x, top, width, height, self.bar_color(bar)))
            cx = x + width / 2.0
            out.add(Text((cx, area.bottom + 5.0), bar.label, TEXT_GREY, font, "center", "top"))
            if bar.value >= 0:
                out.add(Text((cx, top - 3.0), f"{bar.value:.0f}", TEXT_GREY, font, "center", "bottom"))
            else:
                out.add(Text((cx, top + height + 3.0), f"{bar.value:.0f}", TEXT_GREY, font, "center", "top"))
            prev_end = end_px
