from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias, TypeVar

from chartscene.style import RGBA


@dataclass(frozen=True)
class Arc:
    cx: float
    cy: float
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float
    fill: RGBA
    category: str = ""
    index: int = 0

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: RGBA
    stroke: RGBA | None = None
    stroke_width: float = 0.0
    role: Literal["bar", "marker"] = "bar"
    category: str = ""


@dataclass(frozen=True)
class Path:
    points: tuple[tuple[float, float], ...]
    stroke: RGBA
    stroke_width: float = 1.0
    fill: RGBA | None = None


@dataclass(frozen=True)
class AxisTicks:
    """Axis line at (x, y) running ``length`` px, with ticks at ``positions``.

    Positions are absolute canvas coordinates along the axis direction.
    """

    orient: Literal["bottom", "left"]
    x: float
    y: float
    length: float
    positions: tuple[float, ...]
    labels: tuple[str, ...]
    color: RGBA = (0, 0, 0, 255)
    tick_size: float = 6.0


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: RGBA
    x: float
    y: float
    swatch_size: float = 12.0
    shape: Literal["rect", "line"] = "rect"


SceneElement: TypeAlias = Arc | Rect | Path | AxisTicks | LegendEntry
SHAPE_TYPES = (Arc, Rect, Path)

E = TypeVar("E", Arc, Rect, Path, AxisTicks, LegendEntry)


@dataclass(frozen=True)
class Scene:
    width: int
    height: int
    elements: tuple[SceneElement, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def shapes(self) -> tuple[Arc | Rect | Path, ...]:
        return tuple(e for e in self.elements if isinstance(e, SHAPE_TYPES))

    def of_type(self, kind: type[E]) -> tuple[E, ...]:
        return tuple(e for e in self.elements if isinstance(e, kind))
