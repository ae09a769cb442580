from __future__ import annotations

import math
import unittest

import numpy as np

from luvatrix_charts import PolarChart, PolarSeries, RadarChart, RadarSeries, Rect
from luvatrix_charts.geometry import Polyline
from luvatrix_charts.polar import polar_to_cartesian, polar_to_cartesian_many, radar_axis_angle


class PolarMathTests(unittest.TestCase):
    def test_zero_angle_points_right_and_quarter_turn_points_up(self) -> None:
        x, y = polar_to_cartesian(0.0, 1.0, 1.0, (100.0, 100.0), 50.0)
        self.assertAlmostEqual(x, 150.0, places=9)
        self.assertAlmostEqual(y, 100.0, places=9)
        x, y = polar_to_cartesian(math.pi / 2.0, 0.5, 1.0, (100.0, 100.0), 50.0)
        self.assertAlmostEqual(x, 100.0, places=9)
        self.assertAlmostEqual(y, 75.0, places=9)

    def test_vectorized_form_matches_scalar(self) -> None:
        theta = np.asarray([0.0, 1.0, 2.5])
        r = np.asarray([0.2, 0.7, 1.0])
        xs, ys = polar_to_cartesian_many(theta, r, 2.0, (10.0, 20.0), 80.0)
        for i in range(3):
            x, y = polar_to_cartesian(float(theta[i]), float(r[i]), 2.0, (10.0, 20.0), 80.0)
            self.assertAlmostEqual(float(xs[i]), x, places=9)
            self.assertAlmostEqual(float(ys[i]), y, places=9)

    def test_radar_axes_start_at_top_and_go_clockwise(self) -> None:
        self.assertAlmostEqual(radar_axis_angle(0, 4), -math.pi / 2.0, places=12)
        self.assertAlmostEqual(radar_axis_angle(1, 4), 0.0, places=12)


class PolarChartTests(unittest.TestCase):
    def test_r_max_defaults_to_data_peak_with_headroom(self) -> None:
        chart = PolarChart()
        self.assertEqual(chart.resolved_r_max(), 1.0)
        chart.add_series(PolarSeries.from_values("s", [0.0, 1.0], [2.0, 4.0]))
        self.assertAlmostEqual(chart.resolved_r_max(), 4.4, places=9)
        chart.set_r_max(10.0)
        self.assertEqual(chart.resolved_r_max(), 10.0)

    def test_layout_draws_grid_and_series(self) -> None:
        chart = PolarChart(show_grid=False)
        chart.add_series(PolarSeries.from_values("s", [0.0, 2.0, 4.0], [1.0, 1.0, 1.0], show_markers=False))
        draw = chart.layout(Rect(0, 0, 300, 300))
        lines = draw.of_type(Polyline)
        self.assertEqual(len(lines), 1)
        self.assertEqual(len(lines[0].points), 3)


class RadarChartTests(unittest.TestCase):
    def test_vertices_scale_by_max_value(self) -> None:
        chart = RadarChart(["a", "b", "c", "d"], max_value=10.0)
        verts = chart.vertices([10.0, 5.0, 0.0, 20.0], (0.0, 0.0), 100.0)
        self.assertAlmostEqual(verts[0][0], 0.0, places=9)
        self.assertAlmostEqual(verts[0][1], -100.0, places=9)
        self.assertAlmostEqual(verts[1][0], 50.0, places=9)
        self.assertAlmostEqual(verts[2][0], 0.0, places=9)
        self.assertAlmostEqual(verts[3][0], -100.0, places=9)

    def test_fewer_than_three_axes_draws_nothing(self) -> None:
        chart = RadarChart(["a", "b"])
        chart.add_series(RadarSeries.from_values("s", [1.0, 2.0]))
        self.assertEqual(len(chart.layout(Rect(0, 0, 300, 300))), 0)

    def test_mismatched_series_is_skipped(self) -> None:
        chart = RadarChart(["a", "b", "c"], grid_levels=2)
        chart.add_series(RadarSeries.from_values("ok", [1.0, 2.0, 3.0]))
        chart.add_series(RadarSeries.from_values("bad", [1.0, 2.0]))
        draw = chart.layout(Rect(0, 0, 300, 300))
        # Two grid rings plus one series outline.
        self.assertEqual(len(draw.of_type(Polyline)), 3)


if __name__ == "__main__":
    unittest.main()
