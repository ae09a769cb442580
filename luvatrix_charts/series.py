from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_1d, coerce_optional_1d, coerce_xy
from luvatrix_charts.colors import Color
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import LineStyle, MarkerStyle


class StepStyle(Enum):
    NONE = "none"
    PRE = "pre"
    POST = "post"
    MID = "mid"


@dataclass(frozen=True)
class Series:
    label: str
    x: np.ndarray
    y: np.ndarray
    color: Color | None = None
    line_style: LineStyle = LineStyle.SOLID
    marker_style: MarkerStyle = MarkerStyle.NONE
    step_style: StepStyle = StepStyle.NONE
    line_width: float | None = None
    marker_size: float | None = None
    xerr_minus: np.ndarray | None = None
    xerr_plus: np.ndarray | None = None
    yerr_minus: np.ndarray | None = None
    yerr_plus: np.ndarray | None = None

    def __post_init__(self) -> None:
        if self.x.shape != self.y.shape:
            raise ChartDataError(f"x and y length mismatch: {self.x.size} != {self.y.size}")
        for name in ("xerr_minus", "xerr_plus", "yerr_minus", "yerr_plus"):
            err = getattr(self, name)
            if err is not None and err.size != self.x.size:
                raise ChartDataError(f"{name} length mismatch: {err.size} != {self.x.size}")

    @classmethod
    def from_values(cls, label: str, x: Any, y: Any, **kwargs: Any) -> Series:
        x_arr, y_arr = coerce_xy(x, y)
        for name in ("xerr_minus", "xerr_plus", "yerr_minus", "yerr_plus"):
            if name in kwargs:
                kwargs[name] = coerce_optional_1d(kwargs[name], label=name, size=x_arr.size)
        return cls(label=label, x=x_arr, y=y_arr, **kwargs)

    def __len__(self) -> int:
        return int(self.x.size)

    @property
    def has_errors(self) -> bool:
        return any(
            e is not None for e in (self.xerr_minus, self.xerr_plus, self.yerr_minus, self.yerr_plus)
        )

    def with_yerr(self, err: Any) -> Series:
        arr = coerce_optional_1d(err, label="yerr", size=self.x.size)
        return replace(self, yerr_minus=arr, yerr_plus=arr)

    def with_yerr_asymmetric(self, minus: Any, plus: Any) -> Series:
        return replace(
            self,
            yerr_minus=coerce_optional_1d(minus, label="yerr_minus", size=self.x.size),
            yerr_plus=coerce_optional_1d(plus, label="yerr_plus", size=self.x.size),
        )

    def with_xerr(self, err: Any) -> Series:
        arr = coerce_optional_1d(err, label="xerr", size=self.x.size)
        return replace(self, xerr_minus=arr, xerr_plus=arr)

    def with_xerr_asymmetric(self, minus: Any, plus: Any) -> Series:
        return replace(
            self,
            xerr_minus=coerce_optional_1d(minus, label="xerr_minus", size=self.x.size),
            xerr_plus=coerce_optional_1d(plus, label="xerr_plus", size=self.x.size),
        )


@dataclass(frozen=True)
class PolarSeries:
    label: str
    theta: np.ndarray
    r: np.ndarray
    color: Color | None = None
    show_markers: bool = True
    fill: bool = False

    @classmethod
    def from_values(cls, label: str, theta: Any, r: Any, **kwargs: Any) -> PolarSeries:
        return cls(label=label, theta=coerce_1d(theta, label="theta"), r=coerce_1d(r, label="r"), **kwargs)


@dataclass(frozen=True)
class RadarSeries:
    label: str
    values: tuple[float, ...]
    color: Color | None = None
    fill: bool = True

    @classmethod
    def from_values(cls, label: str, values: Any, **kwargs: Any) -> RadarSeries:
        arr = coerce_1d(values, label="values")
        return cls(label=label, values=tuple(float(v) for v in arr), **kwargs)


@dataclass(frozen=True)
class Line3DSeries:
    label: str
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    color: Color | None = None
    line_width: float = 1.5

    def __post_init__(self) -> None:
        if not (self.x.size == self.y.size == self.z.size):
            raise ChartDataError(f"x/y/z length mismatch: {self.x.size}, {self.y.size}, {self.z.size}")

    @classmethod
    def from_values(cls, label: str, x: Any, y: Any, z: Any, **kwargs: Any) -> Line3DSeries:
        return cls(
            label=label,
            x=coerce_1d(x, label="x"),
            y=coerce_1d(y, label="y"),
            z=coerce_1d(z, label="z"),
            **kwargs,
        )
