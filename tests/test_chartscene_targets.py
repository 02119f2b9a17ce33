from __future__ import annotations

import math
from pathlib import Path as FilePath
import tempfile
import unittest

import numpy as np
from PIL import Image
import torch

from chartscene import Arc, ChartStyle, ChartType, RasterTarget, SvgTarget, render
from chartscene.raster.canvas import fill_polygon, new_canvas
from chartscene.targets.svg import arc_path


def _payload(categories, *columns):
    return {
        "categories": list(categories),
        "values": [{"name": name, "values": list(values)} for name, values in columns],
    }


class RasterTargetTests(unittest.TestCase):
    def test_single_slice_pie_fills_the_disc(self) -> None:
        target = RasterTarget()
        style = ChartStyle(chart_type=ChartType.PIE, canvas_width=100, canvas_height=100)
        render(target, _payload(["only"], ("v", [3])), style=style)
        frame = target.frame()
        self.assertEqual(frame.shape, (100, 100, 4))
        self.assertEqual(tuple(frame[60, 60]), style.palette[0])
        self.assertEqual(tuple(frame[30, 70]), style.palette[0])
        # corners lie outside the disc
        self.assertEqual(tuple(frame[1, 1]), (255, 255, 255, 255))

    def test_bar_pixels_use_bar_color(self) -> None:
        target = RasterTarget()
        style = ChartStyle(chart_type=ChartType.BAR, canvas_width=200, canvas_height=100)
        scene = render(target, _payload("AB", ("v", [1, 2])), style=style)
        bar = scene.elements[1]
        x = int(bar.x + bar.width / 2)
        y = int(bar.y + bar.height / 2)
        self.assertEqual(tuple(target.frame()[y, x]), style.bar_color)

    def test_frame_exports_and_clear(self) -> None:
        target = RasterTarget()
        render(target, _payload("ABC", ("v", [1, 2, 3]), ("m", [1, 1, 1])), ChartType.BAR_WITH_MARKER)
        tensor = target.to_tensor()
        self.assertEqual(tuple(tensor.shape), (400, 400, 4))
        self.assertEqual(tensor.dtype, torch.uint8)
        with tempfile.TemporaryDirectory() as tmp:
            out = target.save_png(FilePath(tmp) / "chart.png")
            with Image.open(out) as image:
                self.assertEqual(image.size, (400, 400))
        target.clear()
        self.assertIsNone(target.frame())
        self.assertIsNone(target.scene)
        with self.assertRaises(ValueError):
            target.to_tensor()

    def test_line_chart_draws_axis_labels(self) -> None:
        target = RasterTarget()
        style = ChartStyle(chart_type=ChartType.LINE, canvas_width=240, canvas_height=160)
        render(target, _payload("abc", ("v", [1, 3, 2])), style=style)
        frame = target.frame()
        self.assertTrue(np.any(frame[:, :, :3] != 255))

    def test_polygon_fill_even_odd(self) -> None:
        canvas = new_canvas(10, 10, color=(0, 0, 0, 255))
        fill_polygon(canvas, [(1, 1), (8, 1), (8, 8), (1, 8)], (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[4, 4]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[9, 9]), (0, 0, 0, 255))


class SvgTargetTests(unittest.TestCase):
    def test_bar_with_marker_markup(self) -> None:
        target = SvgTarget()
        render(target, _payload(["B", "A"], ("value", [5, 3]), ("average", [4, 2])), ChartType.BAR_WITH_MARKER)
        markup = target.markup()
        self.assertTrue(markup.startswith("<svg"))
        self.assertEqual(markup.count('class="bar"'), 2)
        self.assertEqual(markup.count('class="marker"'), 2)
        self.assertEqual(markup.count('class="legend-entry"'), 2)
        self.assertIn('fill="#ff7f0e"', markup)
        self.assertIn(">average</text>", markup)

    def test_pie_markup_and_save(self) -> None:
        target = SvgTarget()
        render(target, _payload("AB", ("v", [1, 1])), ChartType.PIE)
        markup = target.markup()
        self.assertEqual(markup.count('class="slice"'), 2)
        with tempfile.TemporaryDirectory() as tmp:
            out = target.save(FilePath(tmp) / "pie.svg")
            self.assertEqual(out.read_text(encoding="utf-8"), markup)
        target.clear()
        self.assertEqual(target.markup(), "")

    def test_arc_path_shapes(self) -> None:
        half = Arc(cx=50, cy=50, inner_radius=0, outer_radius=50, start_angle=0.0, end_angle=math.pi, fill=(0, 0, 0, 255))
        self.assertEqual(arc_path(half), "M50,0A50,50,0,0,1,50,100L50,50Z")
        full = Arc(cx=50, cy=50, inner_radius=0, outer_radius=50, start_angle=0.0, end_angle=2 * math.pi, fill=(0, 0, 0, 255))
        self.assertEqual(arc_path(full), "M50,0A50,50,0,1,1,50,100A50,50,0,1,1,50,0Z")
        empty = Arc(cx=50, cy=50, inner_radius=0, outer_radius=50, start_angle=1.0, end_angle=1.0, fill=(0, 0, 0, 255))
        self.assertEqual(arc_path(empty), "")


if __name__ == "__main__":
    unittest.main()
