from __future__ import annotations

import math
import unittest

import numpy as np

from luvatrix_charts import ChartDataError, Rect, Series, StemChart, ViolinChart
from luvatrix_charts.geometry import FilledRect, Line, LineStyle, Marker, MarkerStyle, Polygon, Text
from luvatrix_charts.stem import gaussian_kde, silverman_bandwidth


class StemChartTests(unittest.TestCase):
    def test_each_point_gets_a_stem_from_the_baseline_and_a_marker(self) -> None:
        chart = StemChart()
        chart.plot([1.0, 2.0, 3.0], [2.0, -1.0, 4.0], label="s")
        draw = chart.layout(Rect(0, 0, 300, 200))
        markers = draw.of_type(Marker)
        self.assertEqual(len(markers), 3)
        self.assertTrue(all(m.style is MarkerStyle.CIRCLE for m in markers))
        baseline = [ln for ln in draw.of_type(Line) if ln.style is LineStyle.DASHED]
        self.assertEqual(len(baseline), 1)
        base_y = baseline[0].start[1]
        stems = [ln for ln in draw.of_type(Line) if ln.start[1] == base_y and ln.start[0] == ln.end[0]]
        self.assertEqual(len(stems), 3)
        for stem, marker in zip(stems, markers, strict=True):
            self.assertEqual(stem.end, marker.center)
        self.assertLess(markers[0].center[1], base_y)
        self.assertGreater(markers[1].center[1], base_y)

    def test_baseline_is_included_in_the_y_limits(self) -> None:
        chart = StemChart(baseline=-10.0)
        chart.plot([0.0, 1.0], [5.0, 6.0])
        _, _, y_lo, _ = chart.data_limits()
        self.assertLess(y_lo, -10.0)

    def test_series_style_overrides_defaults(self) -> None:
        chart = StemChart()
        chart.add_series(Series.from_values("s", [1.0], [1.0], marker_style=MarkerStyle.SQUARE, line_width=3.0))
        draw = chart.layout(Rect(0, 0, 300, 200))
        self.assertIs(draw.of_type(Marker)[0].style, MarkerStyle.SQUARE)
        self.assertIn(3.0, [ln.width for ln in draw.of_type(Line)])

    def test_invalid_sizes_raise(self) -> None:
        chart = StemChart()
        with self.assertRaises(ChartDataError):
            chart.set_stem_width(0.0)
        with self.assertRaises(ChartDataError):
            chart.set_marker_size(-1.0)


class KernelDensityTests(unittest.TestCase):
    def test_density_integrates_to_about_one(self) -> None:
        rng = np.random.default_rng(5)
        values = rng.normal(size=300)
        ys, density = gaussian_kde(values, 0.4, -6.0, 6.0, samples=400)
        self.assertAlmostEqual(float(density.sum() * (ys[1] - ys[0])), 1.0, places=2)

    def test_single_value_peaks_at_that_value(self) -> None:
        ys, density = gaussian_kde([2.0], 1.0, 0.0, 4.0, samples=5)
        self.assertEqual(ys.tolist(), [0.0, 1.0, 2.0, 3.0, 4.0])
        self.assertAlmostEqual(float(density[2]), 1.0 / math.sqrt(2.0 * math.pi), places=12)
        self.assertAlmostEqual(float(density[1]), float(density[3]), places=12)

    def test_silverman_bandwidth_and_bad_bandwidth(self) -> None:
        values = np.asarray([1.0, 2.0, 3.0, 4.0])
        self.assertAlmostEqual(silverman_bandwidth(values), 1.06 * float(np.std(values)) * 4 ** -0.2, places=12)
        self.assertEqual(silverman_bandwidth(np.asarray([3.0, 3.0])), 0.0)
        with self.assertRaises(ChartDataError):
            gaussian_kde([1.0], 0.0, 0.0, 1.0)


class ViolinChartTests(unittest.TestCase):
    def test_each_item_is_a_symmetric_polygon(self) -> None:
        rng = np.random.default_rng(9)
        chart = ViolinChart(show_box=True)
        chart.add_from_values("a", rng.normal(size=80))
        chart.add_from_values("b", rng.normal(loc=2.0, size=80))
        draw = chart.layout(Rect(0, 0, 400, 300))
        polygons = draw.of_type(Polygon)
        self.assertEqual(len(polygons), 2)
        area = chart.plot_area
        band = area.width / 2
        for i, poly in enumerate(polygons):
            cx = area.left + (i + 0.5) * band
            left, right = poly.points[:50], poly.points[50:][::-1]
            for (lx, ly), (rx, ry) in zip(left, right, strict=True):
                self.assertAlmostEqual(cx - lx, rx - cx, places=9)
                self.assertEqual(ly, ry)
            self.assertLessEqual(max(x for x, _ in poly.points) - cx, band * 0.4 + 1e-9)
        self.assertEqual(len(draw.of_type(FilledRect)), 2)
        texts = [t.text for t in draw.of_type(Text)]
        self.assertIn("a", texts)
        self.assertIn("b", texts)

    def test_constant_data_still_draws(self) -> None:
        chart = ViolinChart()
        chart.add_from_values("flat", [3.0, 3.0, 3.0])
        self.assertGreater(chart.resolved_bandwidth(), 0.0)
        self.assertEqual(len(chart.layout(Rect(0, 0, 200, 200)).of_type(Polygon)), 1)

    def test_explicit_bandwidth_and_clear(self) -> None:
        chart = ViolinChart(bandwidth=0.5)
        chart.add_from_values("a", [1.0, 2.0])
        self.assertEqual(chart.resolved_bandwidth(), 0.5)
        with self.assertRaises(ChartDataError):
            chart.set_bandwidth(-1.0)
        chart.clear()
        self.assertTrue(chart.dirty)
        self.assertEqual(len(chart.layout(Rect(0, 0, 200, 200))), 0)


if __name__ == "__main__":
    unittest.main()
