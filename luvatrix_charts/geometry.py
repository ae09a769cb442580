from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Literal, TypeVar, Union

from luvatrix_charts.colors import Color
from luvatrix_charts.config import Margins


Point = tuple[float, float]
HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "middle", "bottom"]


class LineStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    DASH_DOT = "dash-dot"
    NONE = "none"


class MarkerStyle(Enum):
    NONE = "none"
    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    CROSS = "cross"
    PLUS = "plus"
    STAR = "star"


@dataclass(frozen=True)
class PlotArea:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Point:
        return ((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def area(self) -> float:
        return self.width * self.height

    def inset(self, margins: Margins) -> PlotArea:
        left = self.x + margins.left
        top = self.y + margins.top
        # Collapse instead of inverting when margins exceed the host rect.
        right = max(left, self.right - margins.right)
        bottom = max(top, self.bottom - margins.bottom)
        return PlotArea(left=left, top=top, right=right, bottom=bottom)

    def overlaps(self, other: Rect, tolerance: float = 1e-9) -> bool:
        return (
            self.x < other.right - tolerance
            and other.x < self.right - tolerance
            and self.y < other.bottom - tolerance
            and other.y < self.bottom - tolerance
        )


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    color: Color
    width: float = 1.0
    style: LineStyle = LineStyle.SOLID


@dataclass(frozen=True)
class Polyline:
    points: tuple[Point, ...]
    color: Color
    width: float = 1.0
    closed: bool = False
    style: LineStyle = LineStyle.SOLID


@dataclass(frozen=True)
class FilledRect:
    x: float
    y: float
    width: float
    height: float
    color: Color
    border: Color | None = None


@dataclass(frozen=True)
class Polygon:
    points: tuple[Point, ...]
    color: Color
    outline: Color | None = None


@dataclass(frozen=True)
class Marker:
    center: Point
    size: float
    color: Color
    style: MarkerStyle = MarkerStyle.CIRCLE


@dataclass(frozen=True)
class Wedge:
    center: Point
    radius: float
    start_angle: float
    end_angle: float
    color: Color
    inner_radius: float = 0.0
    label: str = ""
    value: float = 0.0
    fraction: float = 0.0

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2.0

    def anchor(self, distance: float) -> Point:
        return (
            self.center[0] + distance * math.cos(self.mid_angle),
            self.center[1] + distance * math.sin(self.mid_angle),
        )


@dataclass(frozen=True)
class ArcStroke:
    center: Point
    radius: float
    start_angle: float
    end_angle: float
    width: float
    color: Color


@dataclass(frozen=True)
class Text:
    position: Point
    text: str
    color: Color
    size: float = 10.0
    h_align: HAlign = "center"
    v_align: VAlign = "middle"


Primitive = Union[Line, Polyline, FilledRect, Polygon, Marker, Wedge, ArcStroke, Text]
P = TypeVar("P")


@dataclass
class DrawList:
    items: list[Primitive] = field(default_factory=list)

    def add(self, item: Primitive) -> None:
        self.items.append(item)

    def extend(self, items: Iterable[Primitive]) -> None:
        self.items.extend(items)

    def of_type(self, kind: type[P]) -> list[P]:
        return [item for item in self.items if isinstance(item, kind)]

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def arc_points(center: Point, radius: float, start_angle: float, end_angle: float, segments: int) -> list[Point]:
    segments = max(1, segments)
    step = (end_angle - start_angle) / segments
    cx, cy = center
    return [
        (cx + radius * math.cos(start_angle + i * step), cy + radius * math.sin(start_angle + i * step))
        for i in range(segments + 1)
    ]


def wedge_outline(wedge: Wedge, segments_per_turn: int = 96) -> list[Point]:
    segments = max(2, int(math.ceil(abs(wedge.sweep) / math.tau * segments_per_turn)))
    outer = arc_points(wedge.center, wedge.radius, wedge.start_angle, wedge.end_angle, segments)
    if wedge.inner_radius <= 0:
        return [wedge.center, *outer]
    inner = arc_points(wedge.center, wedge.inner_radius, wedge.end_angle, wedge.start_angle, segments)
    return [*outer, *inner]
