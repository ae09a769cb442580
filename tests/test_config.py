from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from luvatrix_charts import ChartConfig, HexbinChart, load_chart_config
from luvatrix_charts.config import DEFAULT_CONFIG, chart_config_from_dict, resolve_config


class ChartConfigTests(unittest.TestCase):
    def test_missing_config_resolves_to_defaults(self) -> None:
        self.assertIs(resolve_config(None), DEFAULT_CONFIG)
        self.assertEqual(DEFAULT_CONFIG.margins.left, 50.0)
        self.assertEqual(DEFAULT_CONFIG.tick_count, 5)

    def test_config_is_resolved_once_at_construction(self) -> None:
        config = ChartConfig(hex_radius=22.0)
        chart = HexbinChart(config=config)
        self.assertIs(chart.config, config)
        self.assertEqual(chart.hex_radius, 22.0)

    def test_invalid_values_raise(self) -> None:
        with self.assertRaises(ValueError):
            ChartConfig(tick_count=0)
        with self.assertRaises(ValueError):
            ChartConfig(palette=())

    def test_load_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "chart.toml"
            path.write_text(
                "\n".join(
                    [
                        'colormap = "plasma"',
                        "tick_count = 8",
                        "font_size = 12",
                        'palette = ["#000000", [1.0, 1.0, 1.0]]',
                        "",
                        "[margins]",
                        "left = 64",
                        "bottom = 40.5",
                    ]
                ),
                encoding="utf-8",
            )
            config = load_chart_config(path)
        self.assertEqual(config.colormap, "plasma")
        self.assertEqual(config.tick_count, 8)
        self.assertEqual(config.font_size, 12.0)
        self.assertEqual(config.palette, ((0.0, 0.0, 0.0, 1.0), (1.0, 1.0, 1.0, 1.0)))
        self.assertEqual((config.margins.left, config.margins.top, config.margins.bottom), (64.0, 30.0, 40.5))

    def test_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_chart_config(Path(td) / "absent.toml")

    def test_wrong_types_are_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "tick_count must be an integer"):
            chart_config_from_dict({"tick_count": 2.5})
        with self.assertRaisesRegex(ValueError, "zoom must be a number"):
            chart_config_from_dict({"zoom": True})
        with self.assertRaisesRegex(ValueError, "margins must be a table"):
            chart_config_from_dict({"margins": [1, 2]})


if __name__ == "__main__":
    unittest.main()
