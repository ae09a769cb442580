from __future__ import annotations

import math
import unittest

import numpy as np

from luvatrix_charts import GaugeChart, PieChart, PieSlice
from luvatrix_charts.colors import BLACK, WHITE
from luvatrix_charts.geometry import DrawList, FilledRect, Line, LineStyle, Marker, MarkerStyle, Polygon, Text, Wedge
from luvatrix_charts.raster import new_canvas, render, render_chart, text_size
from luvatrix_charts.raster.draw_text import draw_text


RED = (1.0, 0.0, 0.0, 1.0)


class RasterTests(unittest.TestCase):
    def test_render_returns_rgba_frame_with_background(self) -> None:
        frame = render(DrawList(), 40, 30, BLACK)
        self.assertEqual(frame.shape, (30, 40, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(frame[0, 0].tolist(), [0, 0, 0, 255])

    def test_filled_rect_covers_its_pixels(self) -> None:
        draw = DrawList([FilledRect(5.0, 5.0, 10.0, 4.0, RED)])
        frame = render(draw, 20, 20)
        self.assertEqual(frame[6, 6].tolist(), [255, 0, 0, 255])
        self.assertEqual(frame[2, 2].tolist(), [255, 255, 255, 255])
        self.assertEqual(int(np.sum(np.all(frame[:, :, :3] == [255, 0, 0], axis=-1))), 40)

    def test_polygon_fill_uses_pixel_centers(self) -> None:
        square = Polygon(((2.0, 2.0), (8.0, 2.0), (8.0, 8.0), (2.0, 8.0)), BLACK)
        frame = render(DrawList([square]), 10, 10)
        dark = frame[:, :, 0] == 0
        self.assertEqual(int(dark.sum()), 36)
        self.assertTrue(dark[2, 2] and dark[7, 7])
        self.assertFalse(dark[8, 8])

    def test_semi_transparent_fill_blends(self) -> None:
        frame = render(DrawList([FilledRect(0.0, 0.0, 4.0, 4.0, (0.0, 0.0, 0.0, 0.5))]), 4, 4)
        self.assertIn(int(frame[1, 1, 0]), (127, 128))

    def test_dashed_line_leaves_gaps(self) -> None:
        solid = render(DrawList([Line((0.0, 5.0), (39.0, 5.0), BLACK)]), 40, 10)
        dashed = render(DrawList([Line((0.0, 5.0), (39.0, 5.0), BLACK, style=LineStyle.DASHED)]), 40, 10)
        self.assertEqual(int((solid[5, :, 0] == 0).sum()), 40)
        self.assertLess(int((dashed[5, :, 0] == 0).sum()), 40)
        self.assertGreater(int((dashed[5, :, 0] == 0).sum()), 0)

    def test_marker_shapes_draw_inside_their_box(self) -> None:
        for style in (MarkerStyle.CIRCLE, MarkerStyle.SQUARE, MarkerStyle.DIAMOND, MarkerStyle.STAR, MarkerStyle.PLUS):
            frame = render(DrawList([Marker((10.0, 10.0), 8.0, BLACK, style)]), 20, 20)
            ys, xs = np.nonzero(frame[:, :, 0] == 0)
            self.assertGreater(xs.size, 0, style)
            self.assertTrue(xs.min() >= 5 and xs.max() <= 15, style)

    def test_half_disc_wedge(self) -> None:
        wedge = Wedge((20.0, 20.0), 15.0, 0.0, math.pi, BLACK)
        frame = render(DrawList([wedge]), 40, 40)
        self.assertEqual(int(frame[30, 20, 0]), 0)
        self.assertEqual(int(frame[10, 20, 0]), 255)

    def test_text_renderer_uses_antialias_coverage(self) -> None:
        canvas = new_canvas(220, 80, color=(0, 0, 0, 255))
        draw_text(canvas, 10, 20, "Chart 1", (255, 255, 255, 255), font_size_px=24.0)
        chan = canvas[:, :, 0]
        self.assertTrue(np.any(chan > 0))
        self.assertEqual(int(canvas[0, 0, 0]), 0)

    def test_centered_text_straddles_anchor(self) -> None:
        w, _ = text_size("Hello", font_size_px=16.0)
        frame = render(DrawList([Text((50.0, 20.0), "Hello", BLACK, 16.0)]), 100, 40, WHITE)
        _, xs = np.nonzero(frame[:, :, 0] < 255)
        self.assertGreater(xs.size, 0)
        self.assertLess(xs.min(), 50)
        self.assertGreater(xs.max(), 50)
        self.assertLessEqual(xs.max() - xs.min(), w + 1)

    def test_render_chart_draws_chart_layout(self) -> None:
        pie = render_chart(PieChart([PieSlice("a", 1.0), PieSlice("b", 1.0)]), 200, 160)
        self.assertEqual(pie.shape, (160, 200, 4))
        self.assertTrue(np.any(pie[:, :, :3] != 255))
        gauge = render_chart(GaugeChart(70.0), 200, 200)
        self.assertTrue(np.any(gauge[:, :, :3] != 255))


if __name__ == "__main__":
    unittest.main()
