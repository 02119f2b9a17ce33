from chartscene.adapters import CategoricalPayload, ValueColumn, normalize
from chartscene.dispatch import ChartVisual, render
from chartscene.errors import ChartError, DomainError, MissingCategoricalData, NormalizationError, UnknownChartType
from chartscene.scales import BandScale, CartesianScales, LinearScale, PieScales, PointScale, build_scales, pie_partition
from chartscene.scene import Arc, AxisTicks, LegendEntry, Path, Rect, Scene
from chartscene.style import ChartStyle, ChartType, Margins, load_style
from chartscene.table import DataTable, Row
from chartscene.targets import RasterTarget, SceneBuffer, SceneTarget, SvgTarget

__all__ = [
    "Arc",
    "AxisTicks",
    "BandScale",
    "CartesianScales",
    "CategoricalPayload",
    "ChartError",
    "ChartStyle",
    "ChartType",
    "ChartVisual",
    "DataTable",
    "DomainError",
    "LegendEntry",
    "LinearScale",
    "Margins",
    "MissingCategoricalData",
    "NormalizationError",
    "Path",
    "PieScales",
    "PointScale",
    "RasterTarget",
    "Rect",
    "Row",
    "Scene",
    "SceneBuffer",
    "SceneTarget",
    "SvgTarget",
    "UnknownChartType",
    "ValueColumn",
    "build_scales",
    "load_style",
    "normalize",
    "pie_partition",
    "render",
]
