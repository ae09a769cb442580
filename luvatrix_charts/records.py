from __future__ import annotations

from dataclasses import dataclass
import math

from luvatrix_charts.colors import Color
from luvatrix_charts.errors import ChartDataError


@dataclass(frozen=True)
class Candle:
    timestamp: float
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None

    def __post_init__(self) -> None:
        body_lo = min(self.open, self.close)
        body_hi = max(self.open, self.close)
        if not (self.low <= body_lo and body_hi <= self.high):
            raise ChartDataError(
                f"candle at {self.timestamp} violates low <= open/close <= high: "
                f"o={self.open} h={self.high} l={self.low} c={self.close}"
            )

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open

    @property
    def body_top(self) -> float:
        return max(self.open, self.close)

    @property
    def body_bottom(self) -> float:
        return min(self.open, self.close)


def _require_non_negative(kind: str, label: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ChartDataError(f"{kind} {label!r} value must be a finite non-negative number, got {value}")


@dataclass(frozen=True)
class PieSlice:
    label: str
    value: float
    color: Color | None = None

    def __post_init__(self) -> None:
        _require_non_negative("slice", self.label, self.value)


@dataclass(frozen=True)
class TreemapNode:
    label: str
    value: float
    color: Color | None = None

    def __post_init__(self) -> None:
        _require_non_negative("node", self.label, self.value)


@dataclass(frozen=True)
class FunnelStage:
    label: str
    value: float
    color: Color | None = None

    def __post_init__(self) -> None:
        _require_non_negative("stage", self.label, self.value)


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float
    color: Color | None = None
    size: float | None = None


@dataclass(frozen=True)
class HexbinPoint:
    x: float
    y: float


@dataclass(frozen=True)
class WaterfallEntry:
    label: str
    value: float
    is_total: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.value):
            raise ChartDataError(f"waterfall entry {self.label!r} value must be finite, got {self.value}")
