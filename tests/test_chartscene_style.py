from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from chartscene import ChartStyle, ChartType, Margins, UnknownChartType, load_style
from chartscene.style import CATEGORY10, format_color, parse_color


class ChartTypeTests(unittest.TestCase):
    def test_parse_accepts_names_and_values(self) -> None:
        cases = {
            "Pie": ChartType.PIE,
            "bar": ChartType.BAR,
            "BarWithMarker": ChartType.BAR_WITH_MARKER,
            "bar_with_marker": ChartType.BAR_WITH_MARKER,
            "bar-with-marker": ChartType.BAR_WITH_MARKER,
            " LINE ": ChartType.LINE,
            ChartType.LINE: ChartType.LINE,
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertIs(ChartType.parse(raw), expected)

    def test_unknown_selector(self) -> None:
        for raw in ("Donut", "", 3, None):
            with self.subTest(raw=raw):
                with self.assertRaises(UnknownChartType):
                    ChartType.parse(raw)


class ChartStyleTests(unittest.TestCase):
    def test_defaults(self) -> None:
        style = ChartStyle()
        self.assertEqual(style.canvas_size, (400, 400))
        self.assertEqual(style.palette, CATEGORY10)
        self.assertEqual(style.bar_padding, 0.1)
        self.assertIsNone(style.value_axis_upper_bound)
        self.assertEqual(format_color(style.bar_color), "#4682b4")

    def test_from_mapping_accepts_camel_case(self) -> None:
        style = ChartStyle.from_mapping(
            {
                "chartType": "BarWithMarker",
                "canvasWidth": 600,
                "canvasHeight": 400,
                "margins": {"top": 30, "right": 50, "bottom": 50, "left": 50},
                "palette": ["#a2b8e9", "rgb(255, 127, 14)"],
                "barPadding": 0.2,
                "valueAxisUpperBound": 8,
                "barColor": "#a2b8e9",
                "seriesLabels": {"average": "Frequence moy."},
            }
        )
        self.assertIs(style.chart_type, ChartType.BAR_WITH_MARKER)
        self.assertEqual(style.margins, Margins(top=30, right=50, bottom=50, left=50))
        self.assertEqual(style.palette, ((162, 184, 233, 255), (255, 127, 14, 255)))
        self.assertEqual(style.value_axis_upper_bound, 8.0)
        self.assertEqual(style.inner_width, 500)
        self.assertEqual(style.series_label("average"), "Frequence moy.")
        self.assertEqual(style.series_label("value"), "value")

    def test_auto_upper_bound_and_unknown_keys(self) -> None:
        with self.assertLogs("chartscene.style", level="WARNING") as logs:
            style = ChartStyle.from_mapping({"value_axis_upper_bound": "auto", "animation": True})
        self.assertIsNone(style.value_axis_upper_bound)
        self.assertIn("animation", logs.output[0])

    def test_nice_value_axis_reads_boolean_words(self) -> None:
        cases = {"false": False, "No": False, "0": False, 0: False, "true": True, " yes ": True, True: True, "auto": None}
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertIs(ChartStyle.from_mapping({"niceValueAxis": raw}).nice_value_axis, expected)

    def test_invalid_options(self) -> None:
        bad = [
            {"bar_padding": 1.0},
            {"canvas_width": 0},
            {"palette": []},
            {"value_axis_upper_bound": -1},
            {"margins": {"top": 500}},
            {"margins": {"middle": 1}},
            {"bar_color": "not-a-color"},
            {"nice_value_axis": "maybe"},
            {"nice_value_axis": 2},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    ChartStyle.from_mapping(raw)

    def test_replace_returns_new_style(self) -> None:
        style = ChartStyle()
        wider = style.replace(canvas_width=800)
        self.assertEqual(style.canvas_width, 400)
        self.assertEqual(wider.canvas_width, 800)

    def test_color_parsing(self) -> None:
        self.assertEqual(parse_color("#fff"), (255, 255, 255, 255))
        self.assertEqual(parse_color("#11223380"), (17, 34, 51, 128))
        self.assertEqual(parse_color("steelblue"), (70, 130, 180, 255))
        self.assertEqual(parse_color([1, 2, 3]), (1, 2, 3, 255))
        with self.assertRaises(ValueError):
            parse_color("#12")


class LoadStyleTests(unittest.TestCase):
    def test_reads_chart_table_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                "\n".join(
                    [
                        "[chart]",
                        'chart_type = "BarWithMarker"',
                        "canvas_width = 600",
                        "value_axis_upper_bound = 8",
                        'marker_color = "#ff7f0e"',
                        "margins = { top = 30, right = 50, bottom = 50, left = 50 }",
                    ]
                ),
                encoding="utf-8",
            )
            style = load_style(path)
        self.assertIs(style.chart_type, ChartType.BAR_WITH_MARKER)
        self.assertEqual(style.canvas_width, 600)
        self.assertEqual(style.value_axis_upper_bound, 8.0)
        self.assertEqual(style.margins.left, 50.0)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_style("/nonexistent/chart.toml")


if __name__ == "__main__":
    unittest.main()
