from __future__ import annotations

from chartscene.renderers.base import ChartRenderer, build_axes, expect_cartesian, plot_area
from chartscene.scales import CartesianScales, Scales
from chartscene.scene import Rect, Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.table import DataTable


def bar_rects(
    table: DataTable,
    scales: CartesianScales,
    size: tuple[int, int],
    style: ChartStyle,
    series: str,
) -> list[Rect]:
    left, top, _, _ = plot_area(size, style)
    baseline = scales.y(0.0)
    bandwidth = scales.x.bandwidth
    rects: list[Rect] = []
    for row in table.rows:
        y = scales.y(row.value(series))
        # Negative values collapse onto the baseline.
        height = max(0.0, baseline - y)
        rects.append(
            Rect(
                x=left + scales.x(row.category),
                y=top + min(y, baseline),
                width=bandwidth,
                height=height,
                fill=style.bar_color,
                role="bar",
                category=row.category,
            )
        )
    return rects


class BarRenderer(ChartRenderer):
    chart_type = ChartType.BAR

    def render(self, table: DataTable, scales: Scales, size: tuple[int, int], style: ChartStyle) -> Scene:
        width, height = size
        if table.is_empty:
            return Scene(width=width, height=height)
        cartesian = expect_cartesian(scales, self.chart_type)
        series = self.plotted_series(table, style)[0]
        elements = [
            *bar_rects(table, cartesian, size, style, series),
            *build_axes(table, cartesian, size, style, banded=True),
        ]
        return Scene(width=width, height=height, elements=tuple(elements))
