from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from luvatrix_charts.chart import Chart
from luvatrix_charts.colors import WHITE, Color, contrast_text_color, with_alpha
from luvatrix_charts.config import ChartConfig, Margins
from luvatrix_charts.geometry import DrawList, FilledRect, PlotArea, Rect, Text
from luvatrix_charts.records import TreemapNode


LOGGER = logging.getLogger(__name__)

TREEMAP_PADDING = 20.0
TITLE_SPACE = 30.0
MIN_TILE_PX = 2.0
TILE_GUTTER_PX = 2.0
LABEL_MIN_WIDTH = 40.0
LABEL_MIN_HEIGHT = 25.0
TILE_ALPHA = 0.8


@dataclass(frozen=True)
class PlacedRect:
    index: int
    label: str
    value: float
    rect: Rect


def treemap_layout(nodes: Sequence[TreemapNode], rect: Rect) -> list[PlacedRect]:
    total = sum(node.value for node in nodes)
    if total <= 0 or rect.width <= 0 or rect.height <= 0:
        LOGGER.debug("treemap has no area to lay out (total=%s, rect=%s)", total, rect)
        return []

    area = rect.area
    horizontal = rect.width > rect.height
    x, y = rect.x, rect.y
    remaining_w, remaining_h = rect.width, rect.height
    placed: list[PlacedRect] = []
    for i, node in enumerate(nodes):
        node_area = node.value / total * area
        if horizontal:
            w = min(node_area / remaining_h, remaining_w) if remaining_h > 0 else 0.0
            tile = Rect(x, y, w, remaining_h)
            x += w
            remaining_w -= w
        else:
            h = min(node_area / remaining_w, remaining_h) if remaining_w > 0 else 0.0
            tile = Rect(x, y, remaining_w, h)
            y += h
            remaining_h -= h
        if tile.width > MIN_TILE_PX and tile.height > MIN_TILE_PX:
            placed.append(PlacedRect(index=i, label=node.label, value=node.value, rect=tile))
    return placed


class TreemapChart(Chart):
    def __init__(
        self,
        nodes: Sequence[TreemapNode] = (),
        *,
        show_labels: bool = True,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._nodes: list[TreemapNode] = list(nodes)
        self.show_labels = show_labels
        self._placed: list[PlacedRect] = []

    @property
    def nodes(self) -> tuple[TreemapNode, ...]:
        return tuple(self._nodes)

    @property
    def placed(self) -> list[PlacedRect]:
        return list(self._placed)

    def set_data(self, nodes: Sequence[TreemapNode]) -> None:
        self._nodes = list(nodes)
        self._dirty = True

    def add_node(self, label: str, value: float, color: Color | None = None) -> None:
        self._nodes.append(TreemapNode(label, value, color))
        self._dirty = True

    def set_show_labels(self, show: bool) -> None:
        self.show_labels = show
        self._dirty = True

    def clear(self) -> None:
        self._nodes.clear()
        self._placed = []
        self._dirty = True

    def _resolve_plot_area(self, rect: Rect) -> PlotArea:
        top = TREEMAP_PADDING + (TITLE_SPACE if self.title else 0.0)
        return rect.inset(Margins(TREEMAP_PADDING, top, TREEMAP_PADDING, TREEMAP_PADDING))

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        region = Rect(area.left, area.top, area.width, area.height)
        self._placed = treemap_layout(self._nodes, region)
        for tile in self._placed:
            node = self._nodes[tile.index]
            color = with_alpha(self.color_for(tile.index, node.color), TILE_ALPHA)
            r = tile.rect
            out.add(
                FilledRect(r.x, r.y, r.width - TILE_GUTTER_PX, r.height - TILE_GUTTER_PX, color, border=WHITE)
            )
            if self.show_labels and r.width > LABEL_MIN_WIDTH and r.height > LABEL_MIN_HEIGHT:
                cx = r.x + (r.width - TILE_GUTTER_PX) / 2.0
                cy = r.y + (r.height - TILE_GUTTER_PX) / 2.0
                out.add(Text((cx, cy), node.label, contrast_text_color(color), self.config.font_size))
