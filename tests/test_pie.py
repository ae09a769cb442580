from __future__ import annotations

import math
import unittest

from luvatrix_charts import ChartDataError, DonutChart, PieChart, PieSlice, Rect
from luvatrix_charts.geometry import Text, Wedge
from luvatrix_charts.pie import format_percent, pie_layout


class PieLayoutTests(unittest.TestCase):
    def test_wedges_partition_the_full_turn(self) -> None:
        slices = [PieSlice("a", 1.0), PieSlice("b", 2.0), PieSlice("c", 1.0)]
        wedges = pie_layout(slices, (100.0, 100.0), 50.0)
        self.assertAlmostEqual(wedges[0].start_angle, -math.pi / 2.0, places=9)
        for prev, cur in zip(wedges, wedges[1:]):
            self.assertAlmostEqual(prev.end_angle, cur.start_angle, places=12)
        self.assertAlmostEqual(wedges[-1].end_angle - wedges[0].start_angle, math.tau, places=9)
        self.assertAlmostEqual(sum(w.fraction for w in wedges), 1.0, places=12)
        self.assertAlmostEqual(wedges[1].sweep, math.pi, places=9)

    def test_zero_total_produces_no_wedges(self) -> None:
        self.assertEqual(pie_layout([PieSlice("a", 0.0)], (0.0, 0.0), 10.0), [])

    def test_explicit_slice_color_wins_over_palette(self) -> None:
        red = (1.0, 0.0, 0.0, 1.0)
        wedges = pie_layout([PieSlice("a", 1.0, red), PieSlice("b", 1.0)], (0.0, 0.0), 10.0)
        self.assertEqual(wedges[0].color, red)
        self.assertNotEqual(wedges[1].color, red)

    def test_invalid_slice_value_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            PieSlice("nan", float("nan"))

    def test_format_percent(self) -> None:
        self.assertEqual(format_percent(0.25), "25.0%")


class PieChartTests(unittest.TestCase):
    def test_percentage_labels_sit_inside_wedges(self) -> None:
        chart = PieChart([PieSlice("a", 3.0), PieSlice("b", 1.0)], show_legend=False)
        draw = chart.layout(Rect(0, 0, 400, 400))
        self.assertEqual([t.text for t in draw.of_type(Text)], ["75.0%", "25.0%"])
        wedge = draw.of_type(Wedge)[0]
        label = draw.of_type(Text)[0]
        distance = math.dist(label.position, wedge.center)
        self.assertAlmostEqual(distance, wedge.radius * 0.65, places=6)

    def test_legend_lists_every_slice(self) -> None:
        chart = PieChart([PieSlice("a", 1.0), PieSlice("b", 1.0)], show_percentages=False)
        texts = [t.text for t in chart.layout(Rect(0, 0, 400, 300)).of_type(Text)]
        self.assertEqual(texts, ["a", "b"])

    def test_donut_inner_radius_ratio_is_clamped(self) -> None:
        chart = DonutChart([PieSlice("a", 1.0)], inner_radius_ratio=2.0)
        self.assertEqual(chart.inner_radius_ratio, 0.9)
        wedge = chart.layout(Rect(0, 0, 300, 300)).of_type(Wedge)[0]
        self.assertAlmostEqual(wedge.inner_radius, wedge.radius * 0.9, places=9)

    def test_donut_center_label(self) -> None:
        chart = DonutChart([PieSlice("a", 1.0), PieSlice("b", 3.0)], center_label="Total")
        texts = [t.text for t in chart.layout(Rect(0, 0, 300, 300)).of_type(Text)]
        self.assertIn("Total", texts)
        self.assertIn("b (75.0%)", texts)


if __name__ == "__main__":
    unittest.main()
