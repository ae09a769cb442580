from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import math

import numpy as np


TIME_INTERVALS_S = (
    1.0,
    5.0,
    10.0,
    30.0,
    60.0,
    300.0,
    600.0,
    1800.0,
    3600.0,
    7200.0,
    21600.0,
    43200.0,
    86400.0,
    172800.0,
    604800.0,
    2592000.0,
    7776000.0,
    31536000.0,
)
POWER_OF_TEN_TOLERANCE = 1e-10


class ScaleType(Enum):
    LINEAR = "linear"
    LOG = "log"
    SYMLOG = "symlog"
    TIME = "time"

    def transform(self, value: float) -> float:
        if self is ScaleType.LOG:
            return math.log10(value) if value > 0 else -math.inf
        if self is ScaleType.SYMLOG:
            return _sign(value) * math.log10(1.0 + abs(value))
        return value

    def inverse(self, value: float) -> float:
        if self is ScaleType.LOG:
            return 10.0**value
        if self is ScaleType.SYMLOG:
            return _sign(value) * (10.0 ** abs(value) - 1.0)
        return value

    def transform_array(self, values: np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if self is ScaleType.LOG:
            out = np.full(arr.shape, -np.inf, dtype=np.float64)
            positive = arr > 0
            out[positive] = np.log10(arr[positive])
            return out
        if self is ScaleType.SYMLOG:
            return np.where(arr >= 0, 1.0, -1.0) * np.log10(1.0 + np.abs(arr))
        return arr

    def generate_ticks(self, vmin: float, vmax: float, count: int) -> list[float]:
        if count <= 0:
            raise ValueError("count must be > 0")
        if self is ScaleType.LINEAR:
            step = (vmax - vmin) / count
            return [vmin + i * step for i in range(count + 1)]
        if self is ScaleType.TIME:
            return _time_ticks(vmin, vmax, count)
        if self is ScaleType.LOG:
            return _log_ticks(vmin, vmax)
        return _symlog_ticks(vmin, vmax)

    def format_tick(self, value: float) -> str:
        if self is ScaleType.LINEAR:
            return f"{value:.1f}"
        if self is ScaleType.TIME:
            return _format_day(value)
        if self is ScaleType.LOG:
            if value > 0:
                exp = round(math.log10(value))
                if abs(10.0**exp - value) < POWER_OF_TEN_TOLERANCE:
                    return f"10^{exp}"
            return f"{value:.1f}"
        if value == 0:
            return "0"
        if abs(value) >= 1.0:
            exp = round(math.log10(abs(value)))
            if abs(10.0**exp - abs(value)) < POWER_OF_TEN_TOLERANCE:
                return f"-10^{exp}" if value < 0 else f"10^{exp}"
            return f"{value:.1f}"
        return f"{value:.2f}"


def _sign(value: float) -> float:
    return 1.0 if value >= 0 else -1.0


def _time_ticks(vmin: float, vmax: float, count: int) -> list[float]:
    target = (vmax - vmin) / count
    interval = next((i for i in TIME_INTERVALS_S if i >= target), TIME_INTERVALS_S[-1])
    ticks: list[float] = []
    k = math.ceil(vmin / interval)
    tick = k * interval
    while tick <= vmax:
        ticks.append(tick)
        k += 1
        tick = k * interval
    return ticks


def _log_ticks(vmin: float, vmax: float) -> list[float]:
    if vmin <= 0 or vmax <= 0:
        return []
    lo = math.floor(math.log10(vmin))
    hi = math.ceil(math.log10(vmax))
    return [v for v in (10.0**exp for exp in range(lo, hi + 1)) if vmin <= v <= vmax]


def _symlog_ticks(vmin: float, vmax: float) -> list[float]:
    ticks: list[float] = []
    if vmin < 0:
        hi = math.ceil(math.log10(abs(vmin)))
        for exp in range(hi, -1, -1):
            value = -(10.0**exp)
            if value >= vmin:
                ticks.append(value)
    if vmin <= 0 <= vmax:
        ticks.append(0.0)
    if vmax > 0:
        hi = math.ceil(math.log10(vmax))
        for exp in range(0, hi + 1):
            value = 10.0**exp
            if vmin <= value <= vmax:
                ticks.append(value)
    return ticks


def _format_day(value: float) -> str:
    try:
        stamp = datetime.fromtimestamp(math.floor(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return f"{value:.1f}"
    return f"{stamp.month}/{stamp.day}"


@dataclass(frozen=True)
class AxisTransform:
    scale: ScaleType
    vmin: float
    vmax: float
    start_px: float
    end_px: float

    def to_pixel(self, value: float) -> float:
        lo = self.scale.transform(self.vmin)
        hi = self.scale.transform(self.vmax)
        span = hi - lo
        if not math.isfinite(span) or span == 0:
            return (self.start_px + self.end_px) / 2.0
        return self.start_px + (self.scale.transform(value) - lo) / span * (self.end_px - self.start_px)

    def to_pixels(self, values: np.ndarray) -> np.ndarray:
        lo = self.scale.transform(self.vmin)
        hi = self.scale.transform(self.vmax)
        span = hi - lo
        arr = np.asarray(values, dtype=np.float64)
        if not math.isfinite(span) or span == 0:
            return np.full(arr.shape, (self.start_px + self.end_px) / 2.0, dtype=np.float64)
        return self.start_px + (self.scale.transform_array(arr) - lo) / span * (self.end_px - self.start_px)

    def from_pixel(self, pixel: float) -> float:
        lo = self.scale.transform(self.vmin)
        hi = self.scale.transform(self.vmax)
        extent = self.end_px - self.start_px
        if extent == 0:
            return self.vmin
        return self.scale.inverse(lo + (pixel - self.start_px) / extent * (hi - lo))


@dataclass(frozen=True)
class AxisTicks:
    values: tuple[float, ...]
    positions: tuple[float, ...]
    labels: tuple[str, ...]


def nice_step(span: float, count: int) -> float:
    """Smallest 1, 2 or 5 times a power of ten that splits `span` into at most `count` intervals."""
    raw = span / max(count, 1)
    if not math.isfinite(raw) or raw <= 0:
        return 1.0
    magnitude = 10.0 ** math.floor(math.log10(raw))
    return next(m * magnitude for m in (1.0, 2.0, 5.0, 10.0) if m * magnitude >= raw)


def step_decimals(step: float) -> int:
    return max(0, -math.floor(math.log10(step))) if step > 0 else 0


def nice_ticks(lo: float, hi: float, count: int) -> tuple[list[float], float]:
    if hi <= lo:
        return [lo], 1.0
    step = nice_step(hi - lo, count)
    places = step_decimals(step)
    first = math.ceil(lo / step - 1e-9)
    last = math.floor(hi / step + 1e-9)
    # Rounding to the step's decimals snaps drift such as 0.6000000000000001 and -4e-17.
    return [round(k * step, places) + 0.0 for k in range(first, last + 1)], step


def format_linear_tick(value: float, step: float) -> str:
    if abs(value) >= 1e6:
        return f"{value:.3e}"
    text = f"{value:.{step_decimals(step)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def axis_ticks(transform: AxisTransform, count: int, *, nice: bool = True) -> AxisTicks:
    scale = transform.scale
    lo, hi = sorted((transform.vmin, transform.vmax))
    if scale is ScaleType.LINEAR and nice:
        ticks, step = nice_ticks(lo, hi, count)
        labels = [format_linear_tick(v, step) for v in ticks]
    else:
        ticks = scale.generate_ticks(lo, hi, count)
        labels = [scale.format_tick(v) for v in ticks]
    positions = tuple(transform.to_pixel(v) for v in ticks)
    return AxisTicks(values=tuple(ticks), positions=positions, labels=tuple(labels))


def finite_limits(values: np.ndarray) -> tuple[float, float] | None:
    arr = np.asarray(values, dtype=np.float64)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return None
    return float(np.min(finite)), float(np.max(finite))


def pad_limits(
    vmin: float,
    vmax: float,
    *,
    ratio: float = 0.05,
    scale: ScaleType = ScaleType.LINEAR,
) -> tuple[float, float]:
    if scale is ScaleType.LOG and vmin > 0 and vmax > 0:
        return vmin / 1.5, vmax * 1.5
    if vmin == vmax:
        delta = max(1.0, abs(vmin) * ratio)
        return vmin - delta, vmax + delta
    pad = (vmax - vmin) * ratio
    return vmin - pad, vmax + pad

