from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math
from types import MappingProxyType

import numpy as np

from luvatrix_charts.colors import Color, hex_color


LOGGER = logging.getLogger(__name__)

Stop = tuple[float, Color]
MID_GREY: Color = (0.5, 0.5, 0.5, 1.0)
DEFAULT_COLORMAP = "viridis"


def _even(colors: Sequence[Color]) -> tuple[Stop, ...]:
    last = len(colors) - 1
    return tuple((i / last, color) for i, color in enumerate(colors))


def _hexes(*codes: str) -> tuple[Stop, ...]:
    return _even([hex_color(code) for code in codes])


def _rgb(r: float, g: float, b: float) -> Color:
    return (r, g, b, 1.0)


COLORMAP_STOPS = MappingProxyType(
    {
        "viridis": _hexes("#440154", "#3b528b", "#21918c", "#5ec962", "#fde725"),
        "plasma": _hexes("#0d0887", "#7e03a8", "#cc4778", "#f89540", "#f0f921"),
        "inferno": _hexes("#000004", "#57106e", "#bc3754", "#f98e09", "#fcffa4"),
        "magma": _hexes("#000004", "#51127c", "#b73779", "#fc8961", "#fcfdbf"),
        "cividis": _hexes("#00224e", "#35456c", "#666970", "#948e77", "#c8b866", "#fee838"),
        "coolwarm": _even([_rgb(0.2, 0.2, 1.0), _rgb(1.0, 1.0, 1.0), _rgb(1.0, 0.2, 0.2)]),
        "rdbu": _even(
            [
                _rgb(0.02, 0.19, 0.38),
                _rgb(0.26, 0.58, 0.76),
                _rgb(0.97, 0.97, 0.97),
                _rgb(0.84, 0.38, 0.30),
                _rgb(0.40, 0.0, 0.12),
            ]
        ),
        "spectral": _even(
            [
                _rgb(0.62, 0.0, 0.26),
                _rgb(1.0, 0.5, 0.0),
                _rgb(1.0, 1.0, 0.0),
                _rgb(0.5, 0.8, 0.4),
                _rgb(0.2, 0.4, 1.0),
            ]
        ),
        "blues": _even([_rgb(1.0, 1.0, 1.0), _rgb(0.2, 0.5, 1.0)]),
        "greens": _even([_rgb(1.0, 1.0, 1.0), _rgb(0.25, 0.85, 0.3)]),
        "oranges": _even([_rgb(1.0, 1.0, 1.0), _rgb(1.0, 0.4, 0.15)]),
        "reds": _even([_rgb(1.0, 1.0, 1.0), _rgb(1.0, 0.15, 0.15)]),
        "greys": _even([_rgb(1.0, 1.0, 1.0), _rgb(0.1, 0.1, 0.1)]),
        "jet": (
            (0.0, _rgb(0.0, 0.0, 0.5)),
            (0.125, _rgb(0.0, 0.0, 1.0)),
            (0.375, _rgb(0.0, 1.0, 1.0)),
            (0.625, _rgb(1.0, 1.0, 0.0)),
            (0.875, _rgb(1.0, 0.0, 0.0)),
            (1.0, _rgb(0.5, 0.0, 0.0)),
        ),
        "hot": (
            (0.0, _rgb(0.0, 0.0, 0.0)),
            (0.33, _rgb(1.0, 0.0, 0.0)),
            (0.67, _rgb(1.0, 1.0, 0.0)),
            (1.0, _rgb(1.0, 1.0, 1.0)),
        ),
        "turbo": _hexes("#30123b", "#4686fb", "#1be5b5", "#a4fc3c", "#fbb938", "#e4460a", "#7a0403"),
    }
)


@dataclass(frozen=True)
class Colormap:
    name: str
    stops: tuple[Stop, ...]

    @classmethod
    def named(cls, name: str) -> Colormap:
        key = name.strip().lower()
        stops = COLORMAP_STOPS.get(key)
        if stops is None:
            LOGGER.warning("unknown colormap %r; falling back to %s", name, DEFAULT_COLORMAP)
            return cls(name=DEFAULT_COLORMAP, stops=COLORMAP_STOPS[DEFAULT_COLORMAP])
        return cls(name=key, stops=stops)

    @classmethod
    def custom(cls, stops: Sequence[Stop], name: str = "custom") -> Colormap:
        ordered = tuple(sorted(((float(pos), color) for pos, color in stops), key=lambda s: s[0]))
        return cls(name=name, stops=ordered)

    @staticmethod
    def names() -> tuple[str, ...]:
        return tuple(COLORMAP_STOPS)

    def sample(self, t: float) -> Color:
        if not self.stops:
            return MID_GREY
        if len(self.stops) == 1:
            return self.stops[0][1]
        if not math.isfinite(t):
            t = 0.0
        t = min(max(t, 0.0), 1.0)
        for (t0, c0), (t1, c1) in zip(self.stops, self.stops[1:]):
            if t <= t1:
                s = (t - t0) / (t1 - t0) if t1 > t0 else 0.0
                s = min(max(s, 0.0), 1.0)
                return (
                    c0[0] + (c1[0] - c0[0]) * s,
                    c0[1] + (c1[1] - c0[1]) * s,
                    c0[2] + (c1[2] - c0[2]) * s,
                    c0[3] + (c1[3] - c0[3]) * s,
                )
        return self.stops[-1][1]

    def sample_many(self, values: np.ndarray) -> np.ndarray:
        arr = np.clip(np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0), 0.0, 1.0)
        if not self.stops:
            return np.tile(np.asarray(MID_GREY, dtype=np.float64), arr.shape + (1,))
        positions = np.asarray([pos for pos, _ in self.stops], dtype=np.float64)
        colors = np.asarray([color for _, color in self.stops], dtype=np.float64)
        channels = [np.interp(arr, positions, colors[:, c]) for c in range(4)]
        return np.stack(channels, axis=-1)


def resolve_colormap(value: Colormap | str) -> Colormap:
    if isinstance(value, Colormap):
        return value
    return Colormap.named(value)


@dataclass(frozen=True)
class Normalize:
    vmin: float = 0.0
    vmax: float = 1.0
    clip: bool = True

    def __call__(self, value: float) -> float:
        if self.vmax == self.vmin:
            return 0.5
        t = (value - self.vmin) / (self.vmax - self.vmin)
        return min(max(t, 0.0), 1.0) if self.clip else t

    def inverse(self, t: float) -> float:
        return self.vmin + t * (self.vmax - self.vmin)


@dataclass(frozen=True)
class LogNorm:
    vmin: float = 1.0
    vmax: float = 10.0
    clip: bool = True

    def __post_init__(self) -> None:
        vmin = max(self.vmin, 1e-10)
        object.__setattr__(self, "vmin", vmin)
        object.__setattr__(self, "vmax", max(self.vmax, vmin + 1e-10))

    def __call__(self, value: float) -> float:
        if value <= 0:
            return 0.0
        lo = math.log10(self.vmin)
        hi = math.log10(self.vmax)
        t = (math.log10(value) - lo) / (hi - lo)
        return min(max(t, 0.0), 1.0) if self.clip else t

    def inverse(self, t: float) -> float:
        lo = math.log10(self.vmin)
        hi = math.log10(self.vmax)
        return 10.0 ** (lo + t * (hi - lo))


@dataclass(frozen=True)
class SymLogNorm:
    vmin: float = -10.0
    vmax: float = 10.0
    linthresh: float = 1.0
    clip: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "linthresh", max(abs(self.linthresh), 1e-10))

    def _transform(self, value: float) -> float:
        if abs(value) <= self.linthresh:
            return value / self.linthresh
        sign = 1.0 if value >= 0 else -1.0
        return sign * (1.0 + math.log10(abs(value) / self.linthresh))

    def __call__(self, value: float) -> float:
        t_min = self._transform(self.vmin)
        t_max = self._transform(self.vmax)
        if t_max == t_min:
            return 0.5
        t = (self._transform(value) - t_min) / (t_max - t_min)
        return min(max(t, 0.0), 1.0) if self.clip else t
