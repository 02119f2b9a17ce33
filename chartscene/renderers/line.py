from __future__ import annotations

from chartscene.renderers.base import ChartRenderer, build_axes, expect_cartesian, plot_area
from chartscene.scales import Scales
from chartscene.scene import Path, Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.table import DataTable


class LineRenderer(ChartRenderer):
    chart_type = ChartType.LINE

    def render(self, table: DataTable, scales: Scales, size: tuple[int, int], style: ChartStyle) -> Scene:
        width, height = size
        if table.is_empty:
            return Scene(width=width, height=height)
        cartesian = expect_cartesian(scales, self.chart_type)
        series = self.plotted_series(table, style)[0]
        left, top, _, _ = plot_area(size, style)
        points = tuple(
            (left + cartesian.x(row.category), top + cartesian.y(row.value(series))) for row in table.rows
        )
        path = Path(points=points, stroke=style.line_color, stroke_width=style.line_width)
        elements = (path, *build_axes(table, cartesian, size, style, banded=False))
        return Scene(width=width, height=height, elements=elements)
