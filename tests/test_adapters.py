from __future__ import annotations

from decimal import Decimal
import importlib.util
import unittest

import numpy as np

from luvatrix_charts import ChartDataError, Series
from luvatrix_charts.adapters.normalize import coerce_1d, coerce_grid, coerce_xy


HAS_PANDAS = importlib.util.find_spec("pandas") is not None
HAS_TORCH = importlib.util.find_spec("torch") is not None


class CoerceTests(unittest.TestCase):
    def test_sequences_with_decimal_and_none(self) -> None:
        arr = coerce_1d([1, Decimal("2.5"), None], label="y")
        self.assertEqual(arr[:2].tolist(), [1.0, 2.5])
        self.assertTrue(np.isnan(arr[2]))

    def test_non_numeric_value_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            coerce_1d([1.0, "abc"], label="y")

    def test_two_dimensional_array_is_not_1d(self) -> None:
        with self.assertRaises(ChartDataError):
            coerce_1d(np.zeros((2, 2)), label="x")

    def test_xy_length_mismatch(self) -> None:
        with self.assertRaises(ChartDataError):
            coerce_xy([1.0, 2.0], [1.0])
        with self.assertRaises(ChartDataError):
            Series.from_values("s", [1.0, 2.0], [1.0])

    def test_grid_from_rows(self) -> None:
        grid = coerce_grid([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(grid.shape, (2, 3))
        self.assertEqual(grid.dtype, np.float64)
        self.assertEqual(coerce_grid([]).shape, (0, 0))

    @unittest.skipUnless(HAS_PANDAS, "pandas not installed")
    def test_pandas_inputs(self) -> None:
        import pandas as pd

        self.assertEqual(coerce_1d(pd.Series([1, 2, 3]), label="x").tolist(), [1.0, 2.0, 3.0])
        frame = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0]})
        self.assertEqual(coerce_grid(frame).tolist(), [[1.0, 3.0], [2.0, 4.0]])

    @unittest.skipUnless(HAS_TORCH, "torch not installed")
    def test_torch_inputs(self) -> None:
        import torch

        self.assertEqual(coerce_1d(torch.tensor([1.0, 2.0]), label="x").tolist(), [1.0, 2.0])
        self.assertEqual(coerce_grid(torch.ones((2, 2))).shape, (2, 2))
        with self.assertRaises(ChartDataError):
            coerce_1d(torch.ones((2, 2)), label="x")


if __name__ == "__main__":
    unittest.main()
