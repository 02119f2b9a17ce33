from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace as dc_replace
from enum import Enum
import logging
import math
from pathlib import Path
import re
import tomllib
from typing import Any

from chartscene.errors import UnknownChartType


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

# d3.schemeCategory10
CATEGORY10: tuple[RGBA, ...] = (
    (31, 119, 180, 255),
    (255, 127, 14, 255),
    (44, 160, 44, 255),
    (214, 39, 40, 255),
    (148, 103, 189, 255),
    (140, 86, 75, 255),
    (227, 119, 194, 255),
    (127, 127, 127, 255),
    (188, 189, 34, 255),
    (23, 190, 207, 255),
)
STEELBLUE: RGBA = (70, 130, 180, 255)
MARKER_ORANGE: RGBA = (255, 127, 14, 255)

NAMED_COLORS: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "steelblue": STEELBLUE,
    "orange": (255, 165, 0, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
}


class ChartType(str, Enum):
    PIE = "Pie"
    BAR = "Bar"
    BAR_WITH_MARKER = "BarWithMarker"
    LINE = "Line"

    @classmethod
    def parse(cls, value: "ChartType | str") -> "ChartType":
        if isinstance(value, ChartType):
            return value
        if not isinstance(value, str):
            raise UnknownChartType(f"chart type must be a string, got {type(value)!r}")
        wanted = value.strip().replace("_", "").replace("-", "").replace(" ", "").lower()
        for member in cls:
            if wanted in {member.value.lower(), member.name.replace("_", "").lower()}:
                return member
        raise UnknownChartType(f"unknown chart type: {value!r}")


@dataclass(frozen=True)
class Margins:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    def __post_init__(self) -> None:
        for name in ("top", "right", "bottom", "left"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"margin {name} must be a finite value >= 0")

    @classmethod
    def coerce(cls, value: Any) -> "Margins":
        if isinstance(value, Margins):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"top", "right", "bottom", "left"}
            if unknown:
                raise ValueError(f"unknown margin keys: {sorted(unknown)!r}")
            return cls(**{k: float(v) for k, v in value.items()})
        if isinstance(value, (int, float)):
            v = float(value)
            return cls(v, v, v, v)
        if isinstance(value, (list, tuple)) and len(value) == 4:
            top, right, bottom, left = (float(v) for v in value)
            return cls(top=top, right=right, bottom=bottom, left=left)
        raise ValueError(f"unsupported margins value: {value!r}")


@dataclass(frozen=True)
class ChartStyle:
    """Resolved chart configuration handed to the render pipeline."""

    chart_type: ChartType = ChartType.PIE
    canvas_width: int = 400
    canvas_height: int = 400
    margins: Margins = field(default_factory=Margins)
    palette: tuple[RGBA, ...] = CATEGORY10
    bar_padding: float = 0.1
    value_axis_upper_bound: float | None = None
    nice_value_axis: bool | None = None
    value_tick_count: int = 10
    bar_color: RGBA = STEELBLUE
    marker_color: RGBA = MARKER_ORANGE
    marker_size: float = 10.0
    line_color: RGBA = STEELBLUE
    line_width: float = 2.0
    series_labels: Mapping[str, str] = field(default_factory=dict)
    legend_offset: float = 120.0
    axis_color: RGBA = (0, 0, 0, 255)
    text_color: RGBA = (0, 0, 0, 255)
    font_size_px: float = 12.0

    def __post_init__(self) -> None:
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("canvas_width and canvas_height must be > 0")
        if not 0.0 <= self.bar_padding < 1.0:
            raise ValueError("bar_padding must be in [0, 1)")
        if not self.palette:
            raise ValueError("palette must contain at least one color")
        if self.value_axis_upper_bound is not None:
            if not math.isfinite(self.value_axis_upper_bound) or self.value_axis_upper_bound <= 0:
                raise ValueError("value_axis_upper_bound must be a finite value > 0 or auto")
        if self.value_tick_count <= 0:
            raise ValueError("value_tick_count must be > 0")
        if self.marker_size <= 0 or self.line_width <= 0:
            raise ValueError("marker_size and line_width must be > 0")
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ValueError("margins leave no room for the plot area")

    @property
    def canvas_size(self) -> tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def inner_width(self) -> float:
        return self.canvas_width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> float:
        return self.canvas_height - self.margins.top - self.margins.bottom

    def series_label(self, series: str) -> str:
        return self.series_labels.get(series, series)

    def color_for_index(self, index: int) -> RGBA:
        return self.palette[index % len(self.palette)]

    def replace(self, **changes: Any) -> "ChartStyle":
        return dc_replace(self, **changes)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ChartStyle":
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in raw.items():
            name = _snake_case(str(key))
            if name not in known:
                LOGGER.warning("ignoring unknown chart option: %s", key)
                continue
            kwargs[name] = _coerce_option(name, value)
        return cls(**kwargs)


def load_style(path: str | Path) -> ChartStyle:
    style_path = Path(path)
    if not style_path.exists():
        raise FileNotFoundError(f"chart style not found: {style_path}")
    with style_path.open("rb") as f:
        raw = tomllib.load(f)
    section = raw.get("chart", raw)
    if not isinstance(section, Mapping):
        raise ValueError("[chart] must be a table")
    return ChartStyle.from_mapping(section)


def parse_color(value: Any) -> RGBA:
    if isinstance(value, (list, tuple)):
        if len(value) == 3:
            r, g, b = (int(v) for v in value)
            return (r, g, b, 255)
        if len(value) == 4:
            r, g, b, a = (int(v) for v in value)
            return (r, g, b, a)
        raise ValueError(f"color tuple must have 3 or 4 channels: {value!r}")
    if not isinstance(value, str):
        raise ValueError(f"unsupported color value: {value!r}")
    text = value.strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    if text.startswith("#"):
        hex_value = text[1:]
        if len(hex_value) in {3, 4}:
            hex_value = "".join(ch * 2 for ch in hex_value)
        if len(hex_value) in {6, 8} and re.fullmatch(r"[0-9a-f]+", hex_value):
            r = int(hex_value[0:2], 16)
            g = int(hex_value[2:4], 16)
            b = int(hex_value[4:6], 16)
            a = int(hex_value[6:8], 16) if len(hex_value) == 8 else 255
            return (r, g, b, a)
    if text.startswith("rgb"):
        numbers = text[text.find("(") + 1 : text.find(")")].split(",")
        if len(numbers) >= 3:
            try:
                r, g, b = (int(n) for n in numbers[:3])
            except ValueError as exc:
                raise ValueError(f"invalid rgb() color: {value!r}") from exc
            return (r, g, b, 255)
    raise ValueError(f"unsupported color value: {value!r}")


def format_color(color: RGBA) -> str:
    r, g, b, _ = color
    return f"#{r:02x}{g:02x}{b:02x}"


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


_COLOR_OPTIONS = {"bar_color", "marker_color", "line_color", "axis_color", "text_color"}
_FLOAT_OPTIONS = {"bar_padding", "marker_size", "line_width", "legend_offset", "font_size_px"}


def _coerce_option(name: str, value: Any) -> Any:
    if name == "chart_type":
        return ChartType.parse(value)
    if name in {"canvas_width", "canvas_height", "value_tick_count"}:
        return int(value)
    if name == "margins":
        return Margins.coerce(value)
    if name == "palette":
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        return tuple(parse_color(v) for v in value)
    if name == "value_axis_upper_bound":
        if value is None or (isinstance(value, str) and value.strip().lower() == "auto"):
            return None
        return float(value)
    if name == "nice_value_axis":
        if value is None or (isinstance(value, str) and value.strip().lower() == "auto"):
            return None
        return _coerce_bool(name, value)
    if name == "series_labels":
        if not isinstance(value, Mapping):
            raise ValueError("series_labels must be a table of series name -> label")
        return {str(k): str(v) for k, v in value.items()}
    if name in _COLOR_OPTIONS:
        return parse_color(value)
    if name in _FLOAT_OPTIONS:
        return float(value)
    return value


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"{name} must be a boolean or 'auto', got {value!r}")
