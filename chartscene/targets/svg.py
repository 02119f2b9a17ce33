from __future__ import annotations

import math
from pathlib import Path as FilePath
import xml.etree.ElementTree as ET

from chartscene.scene import Arc, AxisTicks, LegendEntry, Path, Rect, Scene
from chartscene.style import RGBA, format_color
from chartscene.targets.base import SceneTarget


SVG_NS = "http://www.w3.org/2000/svg"


class SvgTarget(SceneTarget):
    """Serializes scenes to SVG markup."""

    def __init__(self, *, font_size_px: float = 12.0, text_color: RGBA = (0, 0, 0, 255)) -> None:
        self.font_size_px = font_size_px
        self.text_color = text_color
        self._scene: Scene | None = None
        self._root: ET.Element | None = None

    @property
    def scene(self) -> Scene | None:
        return self._scene

    def clear(self) -> None:
        self._scene = None
        self._root = None

    def present(self, scene: Scene) -> None:
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": _num(scene.width),
                "height": _num(scene.height),
                "viewBox": f"0 0 {_num(scene.width)} {_num(scene.height)}",
            },
        )
        for element in scene.elements:
            if isinstance(element, Arc):
                self._arc(root, element)
            elif isinstance(element, Rect):
                self._rect(root, element)
            elif isinstance(element, Path):
                self._path(root, element)
            elif isinstance(element, AxisTicks):
                self._axis(root, element)
            elif isinstance(element, LegendEntry):
                self._legend_entry(root, element)
            else:
                raise TypeError(f"unsupported scene element: {type(element)!r}")
        self._scene = scene
        self._root = root

    def markup(self) -> str:
        if self._root is None:
            return ""
        return ET.tostring(self._root, encoding="unicode")

    def save(self, path: str | FilePath) -> FilePath:
        out = FilePath(path)
        out.write_text(self.markup(), encoding="utf-8")
        return out

    def _arc(self, root: ET.Element, arc: Arc) -> None:
        ET.SubElement(root, "path", {"d": arc_path(arc), **_paint(arc.fill), "class": "slice"})

    def _rect(self, root: ET.Element, rect: Rect) -> None:
        attrs = {
            "x": _num(rect.x),
            "y": _num(rect.y),
            "width": _num(rect.width),
            "height": _num(rect.height),
            "class": rect.role,
            **_paint(rect.fill),
        }
        if rect.stroke is not None and rect.stroke_width > 0:
            attrs.update(_stroke(rect.stroke, rect.stroke_width))
        ET.SubElement(root, "rect", attrs)

    def _path(self, root: ET.Element, path: Path) -> None:
        if not path.points:
            return
        d = "M" + "L".join(f"{_num(x)},{_num(y)}" for x, y in path.points)
        attrs = {"d": d, **_stroke(path.stroke, path.stroke_width)}
        attrs.update(_paint(path.fill) if path.fill is not None else {"fill": "none"})
        ET.SubElement(root, "path", attrs)

    def _axis(self, root: ET.Element, axis: AxisTicks) -> None:
        group = ET.SubElement(root, "g", {"class": f"axis axis-{axis.orient}"})
        color = format_color(axis.color)
        if axis.orient == "bottom":
            line = (axis.x, axis.y, axis.x + axis.length, axis.y)
        else:
            line = (axis.x, axis.y, axis.x, axis.y + axis.length)
        _line(group, *line, color)
        for pos, label in zip(axis.positions, axis.labels, strict=False):
            if axis.orient == "bottom":
                _line(group, pos, axis.y, pos, axis.y + axis.tick_size, color)
                text = ET.SubElement(
                    group,
                    "text",
                    {
                        "x": _num(pos),
                        "y": _num(axis.y + axis.tick_size + 3 + self.font_size_px * 0.71),
                        "text-anchor": "middle",
                        "font-size": _num(self.font_size_px),
                        "fill": color,
                    },
                )
            else:
                _line(group, axis.x - axis.tick_size, pos, axis.x, pos, color)
                text = ET.SubElement(
                    group,
                    "text",
                    {
                        "x": _num(axis.x - axis.tick_size - 3),
                        "y": _num(pos),
                        "dy": "0.32em",
                        "text-anchor": "end",
                        "font-size": _num(self.font_size_px),
                        "fill": color,
                    },
                )
            text.text = label

    def _legend_entry(self, root: ET.Element, entry: LegendEntry) -> None:
        group = ET.SubElement(root, "g", {"class": "legend-entry"})
        if entry.shape == "line":
            mid = entry.y + entry.swatch_size / 2.0
            _line(group, entry.x, mid, entry.x + entry.swatch_size, mid, format_color(entry.color))
        else:
            ET.SubElement(
                group,
                "rect",
                {
                    "x": _num(entry.x),
                    "y": _num(entry.y),
                    "width": _num(entry.swatch_size),
                    "height": _num(entry.swatch_size),
                    **_paint(entry.color),
                },
            )
        text = ET.SubElement(
            group,
            "text",
            {
                "x": _num(entry.x + entry.swatch_size + 8),
                "y": _num(entry.y + entry.swatch_size / 2.0),
                "dominant-baseline": "middle",
                "font-size": _num(self.font_size_px),
                "fill": format_color(self.text_color),
            },
        )
        text.text = entry.label


def arc_path(arc: Arc) -> str:
    """SVG path data for a pie/donut slice; angles run clockwise from 12 o'clock."""
    span = arc.span
    if span <= 0.0:
        return ""
    r0, r1 = arc.inner_radius, arc.outer_radius
    if span >= 2.0 * math.pi - 1e-9:
        top = _point(arc.cx, arc.cy, r1, 0.0)
        bottom = _point(arc.cx, arc.cy, r1, math.pi)
        d = f"M{top}A{_num(r1)},{_num(r1)},0,1,1,{bottom}A{_num(r1)},{_num(r1)},0,1,1,{top}"
        if r0 > 0.0:
            itop = _point(arc.cx, arc.cy, r0, 0.0)
            ibottom = _point(arc.cx, arc.cy, r0, math.pi)
            d += f"M{itop}A{_num(r0)},{_num(r0)},0,1,0,{ibottom}A{_num(r0)},{_num(r0)},0,1,0,{itop}"
        return d + "Z"
    large = 1 if span > math.pi else 0
    start = _point(arc.cx, arc.cy, r1, arc.start_angle)
    end = _point(arc.cx, arc.cy, r1, arc.end_angle)
    d = f"M{start}A{_num(r1)},{_num(r1)},0,{large},1,{end}"
    if r0 > 0.0:
        istart = _point(arc.cx, arc.cy, r0, arc.end_angle)
        iend = _point(arc.cx, arc.cy, r0, arc.start_angle)
        d += f"L{istart}A{_num(r0)},{_num(r0)},0,{large},0,{iend}"
    else:
        d += f"L{_num(arc.cx)},{_num(arc.cy)}"
    return d + "Z"


def _point(cx: float, cy: float, radius: float, angle: float) -> str:
    return f"{_num(cx + radius * math.sin(angle))},{_num(cy - radius * math.cos(angle))}"


def _line(parent: ET.Element, x1: float, y1: float, x2: float, y2: float, color: str) -> ET.Element:
    return ET.SubElement(
        parent,
        "line",
        {"x1": _num(x1), "y1": _num(y1), "x2": _num(x2), "y2": _num(y2), "stroke": color},
    )


def _paint(color: RGBA) -> dict[str, str]:
    attrs = {"fill": format_color(color)}
    if color[3] < 255:
        attrs["fill-opacity"] = _num(color[3] / 255.0)
    return attrs


def _stroke(color: RGBA, width: float) -> dict[str, str]:
    attrs = {"stroke": format_color(color), "stroke-width": _num(width)}
    if color[3] < 255:
        attrs["stroke-opacity"] = _num(color[3] / 255.0)
    return attrs


def _num(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if out in {"-0", ""} else out
