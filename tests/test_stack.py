from __future__ import annotations

import unittest

import numpy as np

from luvatrix_charts import Rect, StackChart, StackOffset, StackOrder, StackSeries, StreamgraphChart, stack_layout
from luvatrix_charts.geometry import Line, Polygon, Polyline, Text
from luvatrix_charts.stack import stack_order


class StackLayoutTests(unittest.TestCase):
    def test_zero_offset_piles_layers_from_zero(self) -> None:
        layers = stack_layout([[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_array_equal(layers.y0, [[0.0, 0.0], [1.0, 2.0]])
        np.testing.assert_array_equal(layers.y1, [[1.0, 2.0], [4.0, 6.0]])
        self.assertEqual(layers.limits(), (0.0, 6.0))

    def test_layers_are_contiguous_in_stack_order(self) -> None:
        rng = np.random.default_rng(3)
        rows = rng.uniform(0.0, 5.0, size=(4, 12))
        for offset in StackOffset:
            layers = stack_layout(list(rows), order=StackOrder.INSIDE_OUT, offset=offset)
            for below, above in zip(layers.order, layers.order[1:]):
                np.testing.assert_allclose(layers.y1[below], layers.y0[above], atol=1e-12)

    def test_wiggle_shifts_each_column_by_the_weighted_height(self) -> None:
        layers = stack_layout([[1.0, 1.0], [1.0, 1.0]], offset=StackOffset.WIGGLE)
        np.testing.assert_allclose(layers.y0[0], [-0.5, -0.5])
        np.testing.assert_allclose(layers.y1[1], [1.5, 1.5])
        np.testing.assert_allclose(layers.heights, np.ones((2, 2)))

    def test_wiggle_leaves_empty_columns_in_place(self) -> None:
        layers = stack_layout([[0.0, 2.0], [0.0, 2.0]], offset=StackOffset.WIGGLE)
        np.testing.assert_array_equal(layers.y0[:, 0], [0.0, 0.0])

    def test_expand_normalizes_each_column_to_one(self) -> None:
        layers = stack_layout([[1.0, 3.0, 0.0], [3.0, 1.0, 0.0]], offset=StackOffset.EXPAND)
        np.testing.assert_allclose(layers.y1[1], [1.0, 1.0, 0.0])
        np.testing.assert_allclose(layers.y1[0], [0.25, 0.75, 0.0])

    def test_silhouette_centres_each_column_on_zero(self) -> None:
        layers = stack_layout([[1.0, 4.0], [3.0, 2.0]], offset=StackOffset.SILHOUETTE)
        np.testing.assert_allclose(layers.y0[0], -layers.y1[1])

    def test_orders_by_series_totals(self) -> None:
        values = np.asarray([[5.0, 5.0], [1.0, 1.0], [3.0, 3.0]])
        self.assertEqual(stack_order(values, StackOrder.NONE), [0, 1, 2])
        self.assertEqual(stack_order(values, StackOrder.ASCENDING), [1, 2, 0])
        self.assertEqual(stack_order(values, StackOrder.DESCENDING), [0, 2, 1])
        self.assertEqual(stack_order(values, StackOrder.INSIDE_OUT), [2, 0, 1])
        self.assertEqual(stack_order(values, StackOrder.REVERSE), [2, 1, 0])

    def test_short_series_and_nan_count_as_zero(self) -> None:
        layers = stack_layout([[1.0, float("nan"), 2.0], [1.0]])
        np.testing.assert_array_equal(layers.y1[1], [2.0, 0.0, 2.0])
        np.testing.assert_array_equal(layers.heights[1], [1.0, 0.0, 0.0])

    def test_empty_input(self) -> None:
        self.assertEqual(stack_layout([]).n_points, 0)
        self.assertEqual(stack_layout([]).limits(), (0.0, 1.0))


class StackChartTests(unittest.TestCase):
    def _series(self) -> list[StackSeries]:
        return [
            StackSeries.from_values("a", [1.0, 2.0, 3.0]),
            StackSeries.from_values("b", [2.0, 2.0, 1.0]),
        ]

    def test_layout_emits_one_polygon_per_layer(self) -> None:
        chart = StackChart(self._series(), ["x", "y", "z"], show_lines=True)
        draw = chart.layout(Rect(0, 0, 300, 200))
        polygons = draw.of_type(Polygon)
        self.assertEqual(len(polygons), 2)
        self.assertTrue(all(len(p.points) == 6 for p in polygons))
        self.assertEqual(len(draw.of_type(Polyline)), 2)
        texts = [t.text for t in draw.of_type(Text)]
        for label in ("x", "y", "z"):
            self.assertIn(label, texts)
        self.assertTrue(draw.of_type(Line))
        self.assertFalse(chart.dirty)

    def test_streamgraph_defaults_to_wiggle_without_axes(self) -> None:
        chart = StreamgraphChart(self._series())
        self.assertIs(chart.offset, StackOffset.WIGGLE)
        self.assertIs(chart.order, StackOrder.INSIDE_OUT)
        draw = chart.layout(Rect(0, 0, 300, 200))
        self.assertEqual(len(draw.of_type(Polygon)), 2)
        self.assertEqual(draw.of_type(Line), [])

    def test_single_point_draws_nothing(self) -> None:
        chart = StackChart([StackSeries.from_values("a", [1.0])])
        self.assertEqual(len(chart.layout(Rect(0, 0, 300, 200))), 0)

    def test_setters_mark_dirty(self) -> None:
        chart = StackChart(self._series())
        chart.layout(Rect(0, 0, 300, 200))
        chart.set_offset(StackOffset.EXPAND)
        self.assertTrue(chart.dirty)
        self.assertEqual(chart.layers().limits(), (0.0, 1.0))


if __name__ == "__main__":
    unittest.main()
