from __future__ import annotations

import unittest

import numpy as np

from luvatrix_charts import ChartDataError, HistogramChart, Rect
from luvatrix_charts.geometry import FilledRect
from luvatrix_charts.histogram import BoxPlotChart, BoxPlotStats, compute_bins, sturges_bin_count


class HistogramBinTests(unittest.TestCase):
    def test_four_bins_over_staircase_data(self) -> None:
        bins = compute_bins([1, 2, 2, 3, 3, 3, 4, 4, 4, 4], num_bins=4)
        self.assertEqual([b.count for b in bins], [1, 2, 3, 4])
        edges = [bins[0].left] + [b.right for b in bins]
        for got, want in zip(edges, [1.0, 1.75, 2.5, 3.25, 4.0], strict=True):
            self.assertAlmostEqual(got, want, places=9)

    def test_counts_are_conserved_and_max_lands_in_last_bin(self) -> None:
        rng = np.random.default_rng(7)
        values = rng.normal(size=503)
        bins = compute_bins(values, num_bins=9)
        self.assertEqual(sum(b.count for b in bins), values.size)
        self.assertEqual(bins[-1].right, float(values.max()))
        self.assertGreaterEqual(bins[-1].count, 1)

    def test_bins_are_contiguous_and_each_value_has_one_bin(self) -> None:
        rng = np.random.default_rng(11)
        base = rng.uniform(-3.0, 5.0, size=400)
        edges = [b.left for b in compute_bins(base, num_bins=7)[1:]]
        # Interior edges keep min and max, so the edges stay put.
        values = np.concatenate([base, edges])
        bins = compute_bins(values, num_bins=7)
        for left, right in zip(bins, bins[1:]):
            self.assertEqual(left.right, right.left)
        last = len(bins) - 1
        seen = [0] * len(bins)
        for v in values.tolist():
            owners = [
                i for i, b in enumerate(bins) if b.left <= v < b.right or (i == last and b.left <= v <= b.right)
            ]
            self.assertEqual(len(owners), 1, v)
            seen[owners[0]] += 1
        self.assertEqual(seen, [b.count for b in bins])

    def test_default_bin_count_uses_sturges_rule(self) -> None:
        self.assertEqual(sturges_bin_count(10), 5)
        self.assertEqual(len(compute_bins(list(range(10)))), 5)

    def test_non_finite_values_are_dropped(self) -> None:
        bins = compute_bins([1.0, np.nan, 2.0, np.inf], num_bins=2)
        self.assertEqual(sum(b.count for b in bins), 2)

    def test_constant_values_produce_single_bin(self) -> None:
        bins = compute_bins([5.0, 5.0, 5.0], num_bins=4)
        self.assertEqual(len(bins), 1)
        self.assertEqual((bins[0].left, bins[0].right, bins[0].count), (5.0, 5.0, 3))

    def test_empty_input_has_no_bins(self) -> None:
        self.assertEqual(compute_bins([]), [])

    def test_invalid_bin_count_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            compute_bins([1.0, 2.0], num_bins=0)
        chart = HistogramChart()
        with self.assertRaises(ChartDataError):
            chart.set_num_bins(-1)


class HistogramChartTests(unittest.TestCase):
    def test_layout_draws_one_bar_per_non_empty_bin(self) -> None:
        chart = HistogramChart([1, 2, 2, 3, 3, 3, 4, 4, 4, 4], num_bins=4)
        draw = chart.layout(Rect(0, 0, 400, 300))
        bars = [item for item in draw.of_type(FilledRect) if item.border is not None]
        self.assertEqual(len(bars), 4)
        heights = [bar.height for bar in bars]
        self.assertEqual(heights, sorted(heights))
        self.assertFalse(chart.dirty)

    def test_set_data_marks_dirty(self) -> None:
        chart = HistogramChart([1.0, 2.0])
        chart.layout(Rect(0, 0, 200, 100))
        chart.set_data([3.0, 4.0, 5.0])
        self.assertTrue(chart.dirty)


class BoxPlotTests(unittest.TestCase):
    def test_quartiles_by_index(self) -> None:
        stats = BoxPlotStats.from_values(list(range(1, 10)))
        assert stats is not None
        self.assertEqual((stats.q1, stats.median, stats.q3), (3.0, 5.0, 7.0))
        self.assertEqual(stats.outliers, ())
        self.assertEqual((stats.whisker_low, stats.whisker_high), (1.0, 9.0))

    def test_outliers_fall_outside_fences(self) -> None:
        stats = BoxPlotStats.from_values([1, 2, 3, 4, 5, 6, 7, 8, 9, 100])
        assert stats is not None
        self.assertEqual(stats.median, 5.5)
        self.assertEqual(stats.outliers, (100.0,))
        self.assertEqual(stats.whisker_high, 9.0)

    def test_empty_values_yield_no_stats(self) -> None:
        self.assertIsNone(BoxPlotStats.from_values([np.nan]))
        chart = BoxPlotChart()
        chart.add_box("empty", [])
        self.assertEqual(chart.items, ())

    def test_layout_with_single_outlier_free_box(self) -> None:
        chart = BoxPlotChart()
        chart.add_box("a", [1.0, 2.0, 3.0, 4.0])
        draw = chart.layout(Rect(0, 0, 300, 200))
        self.assertGreater(len(draw), 0)


if __name__ == "__main__":
    unittest.main()
