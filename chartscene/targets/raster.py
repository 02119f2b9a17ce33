from __future__ import annotations

import logging
import math
from pathlib import Path as FilePath

import numpy as np
from PIL import Image
import torch

from chartscene.raster import draw_hline, draw_polyline, draw_text, draw_vline, fill_polygon, fill_rect, new_canvas
from chartscene.raster.canvas import RGBA
from chartscene.scene import Arc, AxisTicks, LegendEntry, Path, Rect, Scene
from chartscene.targets.base import SceneTarget


LOGGER = logging.getLogger(__name__)
ARC_STEP_RAD = math.pi / 90.0


class RasterTarget(SceneTarget):
    """Rasterizes scenes into an RGBA uint8 ``(H, W, 4)`` numpy frame."""

    def __init__(
        self,
        *,
        background: RGBA = (255, 255, 255, 255),
        text_color: RGBA = (0, 0, 0, 255),
        font_size_px: float = 12.0,
    ) -> None:
        self.background = background
        self.text_color = text_color
        self.font_size_px = font_size_px
        self._scene: Scene | None = None
        self._frame: np.ndarray | None = None

    @property
    def scene(self) -> Scene | None:
        return self._scene

    def clear(self) -> None:
        self._scene = None
        self._frame = None

    def present(self, scene: Scene) -> None:
        canvas = new_canvas(scene.width, scene.height, color=self.background)
        for element in scene.elements:
            if isinstance(element, Arc):
                self._draw_arc(canvas, element)
            elif isinstance(element, Rect):
                self._draw_rect(canvas, element)
            elif isinstance(element, Path):
                self._draw_path(canvas, element)
            elif isinstance(element, AxisTicks):
                self._draw_axis(canvas, element)
            elif isinstance(element, LegendEntry):
                self._draw_legend_entry(canvas, element)
            else:
                raise TypeError(f"unsupported scene element: {type(element)!r}")
        self._scene = scene
        self._frame = canvas
        LOGGER.debug("rasterized %d scene elements at %dx%d", len(scene.elements), scene.width, scene.height)

    def frame(self) -> np.ndarray | None:
        return None if self._frame is None else self._frame.copy()

    def to_tensor(self) -> torch.Tensor:
        if self._frame is None:
            raise ValueError("raster target has no frame; present a scene first")
        return torch.from_numpy(np.ascontiguousarray(self._frame)).clone()

    def save_png(self, path: str | FilePath) -> FilePath:
        if self._frame is None:
            raise ValueError("raster target has no frame; present a scene first")
        out = FilePath(path)
        Image.fromarray(self._frame).save(out, format="PNG")
        return out

    def _draw_arc(self, canvas: np.ndarray, arc: Arc) -> None:
        if arc.span <= 0.0 or arc.outer_radius <= 0.0:
            return
        steps = max(2, int(math.ceil(arc.span / ARC_STEP_RAD)))
        angles = np.linspace(arc.start_angle, arc.end_angle, steps + 1)
        outer = [_polar(arc.cx, arc.cy, arc.outer_radius, a) for a in angles]
        if arc.inner_radius > 0.0:
            inner = [_polar(arc.cx, arc.cy, arc.inner_radius, a) for a in angles[::-1]]
        else:
            inner = [(int(round(arc.cx)), int(round(arc.cy)))]
        fill_polygon(canvas, outer + inner, arc.fill)

    def _draw_rect(self, canvas: np.ndarray, rect: Rect) -> None:
        x = int(round(rect.x))
        y = int(round(rect.y))
        w = int(round(rect.x + rect.width)) - x
        h = int(round(rect.y + rect.height)) - y
        fill_rect(canvas, x, y, w, h, rect.fill)
        if rect.stroke is not None and rect.stroke_width > 0 and w > 0 and h > 0:
            draw_hline(canvas, x, x + w - 1, y, rect.stroke)
            draw_hline(canvas, x, x + w - 1, y + h - 1, rect.stroke)
            draw_vline(canvas, x, y, y + h - 1, rect.stroke)
            draw_vline(canvas, x + w - 1, y, y + h - 1, rect.stroke)

    def _draw_path(self, canvas: np.ndarray, path: Path) -> None:
        if not path.points:
            return
        points = [(int(round(px)), int(round(py))) for px, py in path.points]
        if path.fill is not None and len(points) >= 3:
            fill_polygon(canvas, points, path.fill)
        draw_polyline(canvas, points, path.stroke, width=max(1, int(round(path.stroke_width))))

    def _draw_axis(self, canvas: np.ndarray, axis: AxisTicks) -> None:
        x = int(round(axis.x))
        y = int(round(axis.y))
        length = int(round(axis.length))
        tick = int(round(axis.tick_size))
        if axis.orient == "bottom":
            draw_hline(canvas, x, x + length, y, axis.color)
            for pos, label in zip(axis.positions, axis.labels, strict=False):
                px = int(round(pos))
                draw_vline(canvas, px, y, y + tick, axis.color)
                draw_text(canvas, px, y + tick + 3, label, axis.color, font_size_px=self.font_size_px, anchor="ct")
            return
        draw_vline(canvas, x, y, y + length, axis.color)
        for pos, label in zip(axis.positions, axis.labels, strict=False):
            py = int(round(pos))
            draw_hline(canvas, x - tick, x, py, axis.color)
            draw_text(canvas, x - tick - 3, py, label, axis.color, font_size_px=self.font_size_px, anchor="rm")

    def _draw_legend_entry(self, canvas: np.ndarray, entry: LegendEntry) -> None:
        x = int(round(entry.x))
        y = int(round(entry.y))
        size = int(round(entry.swatch_size))
        if entry.shape == "line":
            draw_hline(canvas, x, x + size, y + size // 2, entry.color)
        else:
            fill_rect(canvas, x, y, size, size, entry.color)
        draw_text(
            canvas,
            x + size + 8,
            y + size // 2,
            entry.label,
            self.text_color,
            font_size_px=self.font_size_px,
            anchor="lm",
        )


def _polar(cx: float, cy: float, radius: float, angle: float) -> tuple[int, int]:
    # Angles run clockwise from 12 o'clock.
    return (int(round(cx + radius * math.sin(angle))), int(round(cy - radius * math.cos(angle))))
