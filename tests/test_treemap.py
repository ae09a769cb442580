from __future__ import annotations

import itertools
import unittest

from luvatrix_charts import ChartDataError, Rect, TreemapChart, TreemapNode, treemap_layout
from luvatrix_charts.geometry import FilledRect, Text


class TreemapLayoutTests(unittest.TestCase):
    def test_tiles_cover_the_region_without_overlap(self) -> None:
        nodes = [TreemapNode("a", 5.0), TreemapNode("b", 3.0), TreemapNode("c", 2.0)]
        region = Rect(0.0, 0.0, 400.0, 200.0)
        placed = treemap_layout(nodes, region)
        self.assertEqual([p.label for p in placed], ["a", "b", "c"])
        self.assertAlmostEqual(sum(p.rect.area for p in placed), region.area, places=6)
        for a, b in itertools.combinations(placed, 2):
            self.assertFalse(a.rect.overlaps(b.rect))

    def test_area_is_proportional_to_value(self) -> None:
        nodes = [TreemapNode("a", 6.0), TreemapNode("b", 2.0)]
        placed = treemap_layout(nodes, Rect(10.0, 20.0, 100.0, 300.0))
        self.assertAlmostEqual(placed[0].rect.area / placed[1].rect.area, 3.0, places=9)
        # Taller than wide: tiles stack vertically.
        self.assertEqual(placed[0].rect.width, 100.0)
        self.assertAlmostEqual(placed[1].rect.y, placed[0].rect.bottom, places=9)

    def test_tiny_tiles_are_skipped(self) -> None:
        nodes = [TreemapNode("big", 1000.0), TreemapNode("tiny", 0.001)]
        placed = treemap_layout(nodes, Rect(0.0, 0.0, 200.0, 100.0))
        self.assertEqual([p.label for p in placed], ["big"])

    def test_zero_total_produces_nothing(self) -> None:
        self.assertEqual(treemap_layout([TreemapNode("z", 0.0)], Rect(0, 0, 100, 100)), [])

    def test_negative_values_are_rejected(self) -> None:
        with self.assertRaises(ChartDataError):
            TreemapNode("bad", -1.0)


class TreemapChartTests(unittest.TestCase):
    def test_layout_draws_tiles_and_labels(self) -> None:
        chart = TreemapChart([TreemapNode("alpha", 3.0), TreemapNode("beta", 1.0)])
        draw = chart.layout(Rect(0, 0, 500, 300))
        self.assertEqual(len(draw.of_type(FilledRect)), 2)
        self.assertEqual([t.text for t in draw.of_type(Text)], ["alpha", "beta"])
        for tile in chart.placed:
            self.assertGreaterEqual(tile.rect.x, 20.0)

    def test_labels_can_be_hidden(self) -> None:
        chart = TreemapChart([TreemapNode("alpha", 3.0)], show_labels=False)
        self.assertEqual(chart.layout(Rect(0, 0, 300, 300)).of_type(Text), [])


if __name__ == "__main__":
    unittest.main()
