from __future__ import annotations

from abc import ABC, abstractmethod

from chartscene.scales import CartesianScales, Scales
from chartscene.scene import AxisTicks, Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.table import DataTable


class ChartRenderer(ABC):
    """Turns a normalized table plus scales into a :class:`Scene`."""

    chart_type: ChartType

    def prepare(self, table: DataTable, style: ChartStyle) -> DataTable:
        """Optional pre-render step; must return a new table rather than mutate ``table``."""
        return table

    def plotted_series(self, table: DataTable, style: ChartStyle) -> tuple[str, ...]:
        return table.series_names[:1]

    def nice_value_axis(self, style: ChartStyle) -> bool:
        if style.nice_value_axis is None:
            return False
        return style.nice_value_axis

    @abstractmethod
    def render(self, table: DataTable, scales: Scales, size: tuple[int, int], style: ChartStyle) -> Scene:
        raise NotImplementedError


def expect_cartesian(scales: Scales, chart_type: ChartType) -> CartesianScales:
    if not isinstance(scales, CartesianScales):
        raise TypeError(f"{chart_type.value} chart needs cartesian scales, got {type(scales).__name__}")
    return scales


def plot_area(size: tuple[int, int], style: ChartStyle) -> tuple[float, float, float, float]:
    """Return (left, top, width, height) of the plot area inside the margins."""
    width, height = size
    m = style.margins
    return (m.left, m.top, width - m.left - m.right, height - m.top - m.bottom)


def build_axes(
    table: DataTable,
    scales: CartesianScales,
    size: tuple[int, int],
    style: ChartStyle,
    *,
    banded: bool,
) -> tuple[AxisTicks, AxisTicks]:
    left, top, inner_w, inner_h = plot_area(size, style)
    categories = table.categories()
    x_positions: list[float] = []
    x_labels: list[str] = []
    for category in dict.fromkeys(categories):
        pos = scales.x.center(category) if banded else scales.x(category)
        x_positions.append(left + pos)
        x_labels.append(category)
    bottom = AxisTicks(
        orient="bottom",
        x=left,
        y=top + scales.y(0.0),
        length=inner_w,
        positions=tuple(x_positions),
        labels=tuple(x_labels),
        color=style.axis_color,
    )

    ticks = scales.y.ticks(style.value_tick_count)
    value_axis = AxisTicks(
        orient="left",
        x=left,
        y=top,
        length=inner_h,
        positions=tuple(top + scales.y(float(v)) for v in ticks),
        labels=tuple(scales.y.tick_labels(style.value_tick_count)),
        color=style.axis_color,
    )
    return bottom, value_axis
