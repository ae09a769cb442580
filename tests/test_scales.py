from __future__ import annotations

import math
import unittest

import numpy as np

from luvatrix_charts.scales import (
    AxisTransform,
    ScaleType,
    axis_ticks,
    finite_limits,
    format_linear_tick,
    nice_step,
    nice_ticks,
    pad_limits,
)


class ScaleTypeTests(unittest.TestCase):
    def test_linear_ticks_are_evenly_spaced_and_inclusive(self) -> None:
        ticks = ScaleType.LINEAR.generate_ticks(0.0, 10.0, 5)
        self.assertEqual(ticks, [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])

    def test_log_ticks_are_powers_of_ten_inside_range(self) -> None:
        self.assertEqual(ScaleType.LOG.generate_ticks(1.0, 1000.0, 3), [1.0, 10.0, 100.0, 1000.0])
        self.assertEqual(ScaleType.LOG.generate_ticks(5.0, 500.0, 3), [10.0, 100.0])

    def test_log_ticks_empty_for_non_positive_range(self) -> None:
        self.assertEqual(ScaleType.LOG.generate_ticks(-1.0, 100.0, 3), [])

    def test_symlog_ticks_straddle_zero(self) -> None:
        ticks = ScaleType.SYMLOG.generate_ticks(-100.0, 100.0, 5)
        self.assertEqual(ticks, [-100.0, -10.0, -1.0, 0.0, 1.0, 10.0, 100.0])

    def test_time_ticks_pick_smallest_interval_covering_target(self) -> None:
        ticks = ScaleType.TIME.generate_ticks(0.0, 4 * 86400.0, 4)
        self.assertEqual(ticks, [0.0, 86400.0, 172800.0, 259200.0, 345600.0])

    def test_tick_count_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            ScaleType.LINEAR.generate_ticks(0.0, 1.0, 0)

    def test_transform_inverse_round_trip(self) -> None:
        cases = {
            ScaleType.LINEAR: (-3.5, 0.0, 0.1, 1e6),
            ScaleType.LOG: (1e-3, 0.5, 1.0, 7.0, 250.0, 1e4),
            ScaleType.SYMLOG: (-4200.0, -42.0, -0.5, -1e-3, 0.0, 0.25, 0.9, 1.0, 1e4),
            ScaleType.TIME: (0.0, 86400.5, 1.7e9),
        }
        for scale, values in cases.items():
            for value in values:
                with self.subTest(scale=scale, value=value):
                    self.assertLessEqual(abs(scale.inverse(scale.transform(value)) - value), 1e-9)

    def test_log_transform_of_non_positive_is_negative_infinity(self) -> None:
        self.assertEqual(ScaleType.LOG.transform(0.0), -math.inf)
        arr = ScaleType.LOG.transform_array(np.asarray([-1.0, 10.0]))
        self.assertEqual(arr[0], -np.inf)
        self.assertAlmostEqual(float(arr[1]), 1.0, places=9)

    def test_format_tick_per_scale(self) -> None:
        self.assertEqual(ScaleType.LINEAR.format_tick(2.25), "2.2")
        self.assertEqual(ScaleType.LOG.format_tick(1000.0), "10^3")
        self.assertEqual(ScaleType.LOG.format_tick(250.0), "250.0")
        self.assertEqual(ScaleType.SYMLOG.format_tick(0.0), "0")
        self.assertEqual(ScaleType.SYMLOG.format_tick(-100.0), "-10^2")
        self.assertEqual(ScaleType.SYMLOG.format_tick(0.5), "0.50")
        self.assertEqual(ScaleType.TIME.format_tick(86400.0 * 31), "2/1")


class AxisTransformTests(unittest.TestCase):
    def test_pixel_round_trip_on_inverted_axis(self) -> None:
        axis = AxisTransform(ScaleType.LINEAR, 0.0, 10.0, 400.0, 0.0)
        self.assertAlmostEqual(axis.to_pixel(0.0), 400.0, places=9)
        self.assertAlmostEqual(axis.to_pixel(10.0), 0.0, places=9)
        self.assertAlmostEqual(axis.from_pixel(axis.to_pixel(7.5)), 7.5, places=9)

    def test_log_axis_maps_decades_evenly(self) -> None:
        axis = AxisTransform(ScaleType.LOG, 1.0, 100.0, 0.0, 200.0)
        self.assertAlmostEqual(axis.to_pixel(10.0), 100.0, places=9)
        pixels = axis.to_pixels(np.asarray([1.0, 100.0]))
        np.testing.assert_allclose(pixels, [0.0, 200.0])

    def test_zero_span_maps_to_midpoint(self) -> None:
        axis = AxisTransform(ScaleType.LINEAR, 3.0, 3.0, 0.0, 100.0)
        self.assertEqual(axis.to_pixel(3.0), 50.0)
        self.assertEqual(axis.to_pixels(np.asarray([1.0, 2.0])).tolist(), [50.0, 50.0])

    def test_axis_ticks_use_nice_values_on_linear_axis(self) -> None:
        axis = AxisTransform(ScaleType.LINEAR, 0.0, 1.0, 0.0, 100.0)
        ticks = axis_ticks(axis, 5)
        self.assertEqual(ticks.labels, ("0", "0.2", "0.4", "0.6", "0.8", "1"))
        self.assertAlmostEqual(ticks.positions[-1], 100.0, places=9)

    def test_axis_ticks_on_log_axis_use_scale_labels(self) -> None:
        axis = AxisTransform(ScaleType.LOG, 1.0, 1000.0, 0.0, 300.0)
        ticks = axis_ticks(axis, 3)
        self.assertEqual(ticks.labels, ("10^0", "10^1", "10^2", "10^3"))


class LimitTests(unittest.TestCase):
    def test_finite_limits_skip_nan_and_inf(self) -> None:
        self.assertEqual(finite_limits(np.asarray([np.nan, 2.0, -np.inf, 5.0])), (2.0, 5.0))
        self.assertIsNone(finite_limits(np.asarray([np.nan])))

    def test_pad_limits_linear_and_degenerate(self) -> None:
        self.assertEqual(pad_limits(0.0, 10.0), (-0.5, 10.5))
        self.assertEqual(pad_limits(4.0, 4.0), (3.0, 5.0))

    def test_pad_limits_log_scales_multiplicatively(self) -> None:
        lo, hi = pad_limits(3.0, 30.0, scale=ScaleType.LOG)
        self.assertAlmostEqual(lo, 2.0, places=9)
        self.assertAlmostEqual(hi, 45.0, places=9)

    def test_nice_ticks_snap_near_zero(self) -> None:
        ticks, step = nice_ticks(-0.3, 0.3, 4)
        self.assertEqual(step, 0.2)
        self.assertEqual(ticks, [-0.2, 0.0, 0.2])
        self.assertEqual([format_linear_tick(v, 10.0) for v in (20.0, 30.0, 40.0)], ["20", "30", "40"])

    def test_nice_step_picks_one_two_or_five(self) -> None:
        self.assertEqual(nice_step(10.0, 10), 1.0)
        self.assertEqual(nice_step(10.0, 4), 5.0)
        self.assertEqual(nice_step(700.0, 5), 200.0)
        self.assertEqual(nice_step(0.0, 5), 1.0)
        self.assertEqual(format_linear_tick(-0.0, 0.5), "0")
        self.assertEqual(format_linear_tick(2.5e6, 5e5), "2.500e+06")


if __name__ == "__main__":
    unittest.main()
