from __future__ import annotations

from chartscene.renderers.base import ChartRenderer, plot_area
from chartscene.scales import PieScales, Scales
from chartscene.scene import Arc, Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.table import DataTable


class PieRenderer(ChartRenderer):
    chart_type = ChartType.PIE

    def render(self, table: DataTable, scales: Scales, size: tuple[int, int], style: ChartStyle) -> Scene:
        width, height = size
        if table.is_empty:
            return Scene(width=width, height=height)
        if not isinstance(scales, PieScales):
            raise TypeError(f"pie chart needs an angular partition, got {type(scales).__name__}")
        if len(scales.partition) != len(table):
            raise ValueError("angular partition does not match table rows")

        left, top, inner_w, inner_h = plot_area(size, style)
        cx = left + inner_w / 2.0
        cy = top + inner_h / 2.0
        radius = min(inner_w, inner_h) / 2.0
        arcs = tuple(
            Arc(
                cx=cx,
                cy=cy,
                inner_radius=0.0,
                outer_radius=radius,
                start_angle=start,
                end_angle=end,
                fill=style.color_for_index(i),
                category=row.category,
                index=i,
            )
            for i, (row, (start, end)) in enumerate(zip(table.rows, scales.partition, strict=True))
        )
        return Scene(width=width, height=height, elements=arcs)
