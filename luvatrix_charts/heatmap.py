from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from luvatrix_charts.adapters.normalize import coerce_grid
from luvatrix_charts.chart import Chart
from luvatrix_charts.colormap import Colormap, Normalize, resolve_colormap
from luvatrix_charts.colors import TEXT_GREY, contrast_text_color
from luvatrix_charts.config import ChartConfig
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.geometry import DrawList, FilledRect, PlotArea, Rect, Text


RANGE_FLOOR = 1e-10


class HeatmapChart(Chart):
    def __init__(
        self,
        data: Any = None,
        *,
        colormap: Colormap | str | None = None,
        show_values: bool = False,
        title: str = "",
        config: ChartConfig | None = None,
    ) -> None:
        super().__init__(title=title, config=config)
        self._data = np.zeros((0, 0), dtype=np.float64) if data is None else coerce_grid(data, label="data")
        self.colormap = resolve_colormap(self.config.colormap if colormap is None else colormap)
        self.show_values = show_values
        self.vmin: float | None = None
        self.vmax: float | None = None
        self.row_labels: tuple[str, ...] = ()
        self.col_labels: tuple[str, ...] = ()

    @property
    def data(self) -> np.ndarray:
        return self._data

    def set_data(self, data: Any) -> None:
        self._data = coerce_grid(data, label="data")
        self._dirty = True

    def set_range(self, vmin: float | None, vmax: float | None) -> None:
        if vmin is not None and vmax is not None and vmax < vmin:
            raise ChartDataError(f"heatmap range is inverted: {vmin} > {vmax}")
        self.vmin = vmin
        self.vmax = vmax
        self._dirty = True

    def set_colormap(self, colormap: Colormap | str) -> None:
        self.colormap = resolve_colormap(colormap)
        self._dirty = True

    def set_labels(self, rows: Sequence[str], cols: Sequence[str]) -> None:
        self.row_labels = tuple(rows)
        self.col_labels = tuple(cols)
        self._dirty = True

    def set_show_values(self, show: bool) -> None:
        self.show_values = show
        self._dirty = True

    def clear(self) -> None:
        self._data = np.zeros((0, 0), dtype=np.float64)
        self._dirty = True

    def value_range(self) -> tuple[float, float]:
        finite = self._data[np.isfinite(self._data)]
        lo = self.vmin if self.vmin is not None else (float(np.min(finite)) if finite.size else 0.0)
        hi = self.vmax if self.vmax is not None else (float(np.max(finite)) if finite.size else 1.0)
        return lo, max(hi, lo + RANGE_FLOOR)

    def _layout(self, rect: Rect, area: PlotArea, out: DrawList) -> None:
        rows, cols = self._data.shape
        if rows == 0 or cols == 0:
            return
        norm = Normalize(*self.value_range())
        cell_w = area.width / cols
        cell_h = area.height / rows
        font = self.config.font_size
        for r in range(rows):
            for c in range(cols):
                value = float(self._data[r, c])
                if not np.isfinite(value):
                    continue
                t = norm(value)
                x = area.left + c * cell_w
                y = area.top + r * cell_h
                fill = self.colormap.sample(t)
                out.add(FilledRect(x, y, cell_w, cell_h, fill))
                if self.show_values:
                    out.add(Text((x + cell_w / 2.0, y + cell_h / 2.0), f"{value:.1f}", contrast_text_color(fill), font))
        for r, label in enumerate(self.row_labels[:rows]):
            out.add(Text((area.left - 5.0, area.top + (r + 0.5) * cell_h), label, TEXT_GREY, font, "right", "middle"))
        for c, label in enumerate(self.col_labels[:cols]):
            out.add(Text((area.left + (c + 0.5) * cell_w, area.bottom + 5.0), label, TEXT_GREY, font, "center", "top"))
