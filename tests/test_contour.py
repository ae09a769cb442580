from __future__ import annotations

import unittest

import numpy as np

from luvatrix_charts import ChartDataError, ContourChart, Rect
from luvatrix_charts.contour import interpolate, resolve_levels, trace
from luvatrix_charts.geometry import FilledRect, Line


def _points(result) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    return [(seg.start, seg.end) for seg in result.segments]


class ContourTraceTests(unittest.TestCase):
    def test_constant_grid_has_no_levels_or_segments(self) -> None:
        result = trace(np.full((4, 4), 3.0))
        self.assertEqual(result.levels, ())
        self.assertEqual(result.segments, ())

    def test_single_corner_crossing_interpolates_edges(self) -> None:
        result = trace([[0.0, 0.0], [0.0, 2.0]], levels=[1.0])
        self.assertEqual(_points(result), [((1.0, 0.5), (0.5, 1.0))])

    def test_saddle_with_top_left_and_bottom_right_high(self) -> None:
        result = trace([[1.0, 0.0], [0.0, 1.0]], levels=[0.5])
        self.assertEqual(
            _points(result),
            [((0.0, 0.5), (0.5, 0.0)), ((1.0, 0.5), (0.5, 1.0))],
        )

    def test_saddle_with_top_right_and_bottom_left_high(self) -> None:
        result = trace([[0.0, 1.0], [1.0, 0.0]], levels=[0.5])
        self.assertEqual(
            _points(result),
            [((0.5, 0.0), (1.0, 0.5)), ((0.0, 0.5), (0.5, 1.0))],
        )

    def test_segment_endpoints_stay_on_cell_edges(self) -> None:
        rng = np.random.default_rng(11)
        grid = rng.random((6, 7))
        result = trace(grid, levels=5)
        self.assertGreater(len(result.segments), 0)
        for seg in result.segments:
            for x, y in (seg.start, seg.end):
                self.assertTrue(0.0 <= x <= 6.0 and 0.0 <= y <= 5.0)
                self.assertTrue(float(x).is_integer() or float(y).is_integer())

    def test_filled_trace_colors_every_cell(self) -> None:
        result = trace(np.arange(12, dtype=float).reshape(3, 4), levels=2, filled=True)
        self.assertEqual(len(result.cells), 6)
        self.assertAlmostEqual(result.cells[0].value, 2.5, places=9)

    def test_small_grid_is_empty(self) -> None:
        result = trace([[1.0, 2.0, 3.0]])
        self.assertEqual(result.segments, ())
        self.assertEqual(result.cells, ())

    def test_ragged_or_non_finite_grid_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            trace([[1.0, 2.0], [3.0]])
        with self.assertRaises(ChartDataError):
            trace([[1.0, np.nan], [3.0, 4.0]])


class LevelTests(unittest.TestCase):
    def test_integer_levels_are_strictly_interior(self) -> None:
        self.assertEqual(resolve_levels(0.0, 10.0, 4), (2.0, 4.0, 6.0, 8.0))
        self.assertEqual(resolve_levels(5.0, 5.0, 4), ())
        with self.assertRaises(ChartDataError):
            resolve_levels(0.0, 1.0, -1)

    def test_interpolate_guards_flat_edges(self) -> None:
        self.assertEqual(interpolate(2.0, 2.0, 2.0), 0.5)
        self.assertEqual(interpolate(0.0, 4.0, 1.0), 0.25)


class ContourChartTests(unittest.TestCase):
    def test_layout_maps_segments_into_plot_area(self) -> None:
        chart = ContourChart([[0.0, 1.0], [1.0, 2.0]], levels=[1.5])
        draw = chart.layout(Rect(0, 0, 250, 200))
        area = chart.plot_area
        assert area is not None
        assert chart.result is not None
        self.assertEqual(len(chart.result.segments), 1)
        contour_line = draw.of_type(Line)[0]
        for x, y in (contour_line.start, contour_line.end):
            self.assertTrue(area.contains(x, y))

    def test_filled_chart_draws_cells(self) -> None:
        chart = ContourChart(np.arange(9, dtype=float).reshape(3, 3), filled=True)
        draw = chart.layout(Rect(0, 0, 200, 200))
        self.assertEqual(len(draw.of_type(FilledRect)), 4)


if __name__ == "__main__":
    unittest.main()
