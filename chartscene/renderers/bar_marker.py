from __future__ import annotations

from chartscene.errors import MissingCategoricalData
from chartscene.renderers.bar import bar_rects
from chartscene.renderers.base import ChartRenderer, build_axes, expect_cartesian, plot_area
from chartscene.scales import Scales
from chartscene.scene import LegendEntry, Rect, Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.table import DataTable


LEGEND_ROW_GAP = 20.0
LEGEND_SWATCH = 12.0


class BarWithMarkerRenderer(ChartRenderer):
    """Primary series as bars, secondary series as square markers over each bar.

    Rows are laid out in ascending category order.
    """

    chart_type = ChartType.BAR_WITH_MARKER

    def prepare(self, table: DataTable, style: ChartStyle) -> DataTable:
        return table.sorted_by_category()

    def plotted_series(self, table: DataTable, style: ChartStyle) -> tuple[str, ...]:
        if len(table.series_names) < 2 and not table.is_empty:
            raise MissingCategoricalData("bar-with-marker chart needs a primary and a marker value column")
        return table.series_names[:2]

    def nice_value_axis(self, style: ChartStyle) -> bool:
        if style.nice_value_axis is None:
            return True
        return style.nice_value_axis

    def render(self, table: DataTable, scales: Scales, size: tuple[int, int], style: ChartStyle) -> Scene:
        width, height = size
        if table.is_empty:
            return Scene(width=width, height=height)
        cartesian = expect_cartesian(scales, self.chart_type)
        primary, secondary = self.plotted_series(table, style)
        left, top, _, _ = plot_area(size, style)

        half = style.marker_size / 2.0
        markers = [
            Rect(
                x=left + cartesian.x.center(row.category) - half,
                y=top + cartesian.y(row.value(secondary)) - half,
                width=style.marker_size,
                height=style.marker_size,
                fill=style.marker_color,
                role="marker",
                category=row.category,
            )
            for row in table.rows
        ]
        legend_x = width - style.legend_offset
        legend = (
            LegendEntry(
                label=style.series_label(primary),
                color=style.bar_color,
                x=legend_x,
                y=top,
                swatch_size=LEGEND_SWATCH,
            ),
            LegendEntry(
                label=style.series_label(secondary),
                color=style.marker_color,
                x=legend_x,
                y=top + LEGEND_ROW_GAP,
                swatch_size=LEGEND_SWATCH,
            ),
        )
        elements = [
            *bar_rects(table, cartesian, size, style, primary),
            *markers,
            *build_axes(table, cartesian, size, style, banded=True),
            *legend,
        ]
        return Scene(width=width, height=height, elements=tuple(elements))
