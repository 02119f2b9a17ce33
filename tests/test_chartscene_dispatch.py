from __future__ import annotations

import math
import unittest
from unittest import mock

from chartscene import (
    Arc,
    BandScale,
    CartesianScales,
    CategoricalPayload,
    ChartStyle,
    ChartType,
    ChartVisual,
    DomainError,
    LegendEntry,
    LinearScale,
    Rect,
    Scene,
    SceneBuffer,
    UnknownChartType,
    ValueColumn,
    render,
)
from chartscene.scene import Path


def _payload(categories, *columns):
    return {
        "categories": list(categories),
        "values": [{"name": name, "values": list(values)} for name, values in columns],
    }


class RenderDispatcherTests(unittest.TestCase):
    def test_pie_scenario_partitions_one_two_three(self) -> None:
        target = SceneBuffer()
        scene = render(target, _payload("ABC", ("v", [1, 2, 3])), ChartType.PIE)
        self.assertIs(target.scene, scene)
        spans = [(a.start_angle, a.end_angle) for a in scene.of_type(Arc)]
        tau = 2.0 * math.pi
        expected = [(0.0, tau / 6.0), (tau / 6.0, tau / 6.0 + 4.0 * math.pi / 6.0), (tau / 6.0 + 4.0 * math.pi / 6.0, tau)]
        for got, want in zip(spans, expected):
            self.assertAlmostEqual(got[0], want[0])
            self.assertAlmostEqual(got[1], want[1])

    def test_bar_with_marker_scenario(self) -> None:
        target = SceneBuffer()
        payload = _payload(["B", "A"], ("value", [5, 3]), ("average", [4, 2]))
        scene = render(target, payload, "BarWithMarker")
        bars = [r for r in scene.of_type(Rect) if r.role == "bar"]
        markers = [r for r in scene.of_type(Rect) if r.role == "marker"]
        self.assertEqual([b.category for b in bars], ["A", "B"])
        self.assertLess(bars[0].height, bars[1].height)
        self.assertGreater(markers[0].y, markers[1].y)
        self.assertEqual(len(scene.of_type(LegendEntry)), 2)
        self.assertEqual(payload["categories"], ["B", "A"])

    def test_empty_value_column_renders_nothing_and_clears(self) -> None:
        target = SceneBuffer()
        target.present(Scene(width=10, height=10, elements=(Rect(0, 0, 1, 1, (0, 0, 0, 255)),)))
        with self.assertLogs("chartscene.dispatch", level="INFO"):
            result = render(target, _payload(["A", "B"], ("v", [])), ChartType.BAR)
        self.assertIsNone(result)
        self.assertIsNone(target.scene)
        self.assertEqual(target.clear_count, 1)

    def test_absent_payload_renders_nothing(self) -> None:
        target = SceneBuffer()
        self.assertIsNone(render(target, None, ChartType.PIE))
        self.assertIsNone(render(target, {"categories": ["A"], "values": []}, ChartType.LINE))
        self.assertEqual(target.present_count, 0)

    def test_bar_with_marker_without_marker_series_renders_nothing(self) -> None:
        target = SceneBuffer()
        self.assertIsNone(render(target, _payload("AB", ("v", [1, 2])), ChartType.BAR_WITH_MARKER))
        self.assertIsNone(target.scene)

    def test_unknown_chart_type_is_raised_and_target_left_cleared(self) -> None:
        target = SceneBuffer()
        render(target, _payload("AB", ("v", [1, 2])), ChartType.BAR)
        with self.assertRaises(UnknownChartType):
            render(target, _payload("AB", ("v", [1, 2])), "Donut")
        self.assertIsNone(target.scene)

    def test_chart_type_defaults_to_style(self) -> None:
        target = SceneBuffer()
        scene = render(target, _payload("AB", ("v", [1, 2])), style=ChartStyle(chart_type=ChartType.LINE))
        self.assertEqual(len(scene.of_type(Path)), 1)

    def test_render_is_idempotent(self) -> None:
        payload = CategoricalPayload(categories=["x", "y", "z"], values=[ValueColumn("v", [3, 1, 2]), ValueColumn("m", [1, 1, 1])])
        for chart_type in ChartType:
            with self.subTest(chart_type=chart_type):
                first = render(SceneBuffer(), payload, chart_type)
                second = render(SceneBuffer(), payload, chart_type)
                self.assertEqual(first, second)

    def test_empty_table_gives_empty_scene_for_every_chart_type(self) -> None:
        payload = _payload([], ("v", []), ("m", []))
        for chart_type in ChartType:
            with self.subTest(chart_type=chart_type):
                scene = render(SceneBuffer(), payload, chart_type)
                self.assertIsNotNone(scene)
                self.assertEqual(scene.shapes(), ())

    def test_single_row_renders_for_every_chart_type(self) -> None:
        payload = _payload(["only"], ("v", [0]), ("m", [0]))
        for chart_type in ChartType:
            with self.subTest(chart_type=chart_type):
                scene = render(SceneBuffer(), payload, chart_type)
                self.assertGreaterEqual(len(scene.shapes()), 1)

    def test_domain_errors_propagate(self) -> None:
        mismatched = CartesianScales(
            x=BandScale(domain=("Z",), range_start=0.0, range_stop=400.0),
            y=LinearScale.for_values(2.0, 400.0, 0.0),
        )
        target = SceneBuffer()
        with mock.patch("chartscene.dispatch.build_scales", return_value=mismatched):
            with self.assertRaises(DomainError):
                render(target, _payload("AB", ("v", [1, 2])), ChartType.BAR)
        self.assertIsNone(target.scene)


class ChartVisualTests(unittest.TestCase):
    def test_update_rebuilds_scene_each_cycle(self) -> None:
        target = SceneBuffer()
        visual = ChartVisual(target, ChartStyle(chart_type=ChartType.BAR))
        first = visual.update(_payload("AB", ("v", [1, 2])))
        self.assertEqual(len(first.of_type(Rect)), 2)
        second = visual.update(_payload("ABC", ("v", [1, 2, 3])))
        self.assertEqual(len(second.of_type(Rect)), 3)
        self.assertIs(visual.last_scene, second)
        self.assertEqual(target.clear_count, 2)

    def test_failed_update_clears_last_scene(self) -> None:
        visual = ChartVisual(SceneBuffer())
        visual.update(_payload("AB", ("v", [1, 2])))
        self.assertIsNone(visual.update(None))
        self.assertIsNone(visual.last_scene)

    def test_style_switch(self) -> None:
        visual = ChartVisual(SceneBuffer())
        visual.set_style(ChartStyle(chart_type=ChartType.LINE))
        scene = visual.update(_payload("AB", ("v", [1, 2])))
        self.assertEqual(len(scene.of_type(Path)), 1)


if __name__ == "__main__":
    unittest.main()
