from __future__ import annotations

from dataclasses import dataclass, replace
import math

import numpy as np

from luvatrix_charts.geometry import Point


MAX_ELEVATION = 89.0
AXIS_PADDING = 0.1
AXIS_SPAN_FLOOR = 0.1


@dataclass(frozen=True)
class View3D:
    azimuth: float = -60.0
    elevation: float = 30.0
    distance: float = 3.0

    def _rotate(self, x: float, y: float, z: float) -> tuple[float, float, float]:
        az = math.radians(self.azimuth)
        el = math.radians(self.elevation)
        x1 = x * math.cos(az) - y * math.sin(az)
        y1 = x * math.sin(az) + y * math.cos(az)
        y2 = y1 * math.cos(el) - z * math.sin(el)
        z2 = y1 * math.sin(el) + z * math.cos(el)
        return x1, y2, z2

    def _perspective(self, depth: float) -> float:
        return self.distance / (self.distance + depth + 2.0)

    def project(self, x: float, y: float, z: float) -> Point:
        x1, y2, z2 = self._rotate(x, y, z)
        p = self._perspective(y2)
        return x1 * p, z2 * p

    def depth(self, x: float, y: float, z: float) -> float:
        return self._rotate(x, y, z)[1]

    def _rotate_many(self, xyz: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        pts = np.asarray(xyz, dtype=np.float64).reshape(-1, 3)
        az = math.radians(self.azimuth)
        el = math.radians(self.elevation)
        x, y, z = pts[:, 0], pts[:, 1], pts[:, 2]
        x1 = x * math.cos(az) - y * math.sin(az)
        y1 = x * math.sin(az) + y * math.cos(az)
        y2 = y1 * math.cos(el) - z * math.sin(el)
        z2 = y1 * math.sin(el) + z * math.cos(el)
        return x1, y2, z2

    def project_many(self, xyz: np.ndarray) -> np.ndarray:
        x1, y2, z2 = self._rotate_many(xyz)
        p = self.distance / (self.distance + y2 + 2.0)
        return np.stack([x1 * p, z2 * p], axis=-1)

    def depth_many(self, xyz: np.ndarray) -> np.ndarray:
        return self._rotate_many(xyz)[1]

    def rotated(self, d_azimuth: float, d_elevation: float) -> View3D:
        elevation = min(max(self.elevation + d_elevation, -MAX_ELEVATION), MAX_ELEVATION)
        return replace(self, azimuth=self.azimuth + d_azimuth, elevation=elevation)


def depth_order(depths: np.ndarray) -> np.ndarray:
    """Indices that draw farthest first; ties keep input order."""
    return np.argsort(-np.asarray(depths, dtype=np.float64), kind="stable")


@dataclass(frozen=True)
class AxisRange:
    lo: float
    hi: float

    @classmethod
    def auto(cls, values: np.ndarray) -> AxisRange:
        arr = np.asarray(values, dtype=np.float64)
        finite = arr[np.isfinite(arr)]
        if finite.size == 0:
            return cls(-1.0, 1.0)
        lo = float(np.min(finite))
        hi = float(np.max(finite))
        pad = max(hi - lo, AXIS_SPAN_FLOOR) * AXIS_PADDING
        return cls(lo - pad, hi + pad)

    @property
    def mid(self) -> float:
        return (self.lo + self.hi) / 2.0

    @property
    def scale(self) -> float:
        span = self.hi - self.lo
        return 2.0 / span if span > 0 else 1.0

    def normalize(self, values: np.ndarray) -> np.ndarray:
        return (np.asarray(values, dtype=np.float64) - self.mid) * self.scale


def to_screen(projected: np.ndarray, center: Point, scale: float) -> np.ndarray:
    pts = np.asarray(projected, dtype=np.float64).reshape(-1, 2)
    return np.stack([center[0] + pts[:, 0] * scale, center[1] - pts[:, 1] * scale], axis=-1)
