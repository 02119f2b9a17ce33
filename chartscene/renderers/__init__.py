from __future__ import annotations

from chartscene.renderers.bar import BarRenderer
from chartscene.renderers.bar_marker import BarWithMarkerRenderer
from chartscene.renderers.base import ChartRenderer
from chartscene.renderers.line import LineRenderer
from chartscene.renderers.pie import PieRenderer
from chartscene.style import ChartType


RENDERERS: dict[ChartType, ChartRenderer] = {
    renderer.chart_type: renderer
    for renderer in (PieRenderer(), BarRenderer(), BarWithMarkerRenderer(), LineRenderer())
}

_missing = set(ChartType) - set(RENDERERS)
if _missing:
    raise RuntimeError(f"no renderer registered for: {sorted(m.value for m in _missing)}")


def renderer_for(chart_type: ChartType | str) -> ChartRenderer:
    return RENDERERS[ChartType.parse(chart_type)]


__all__ = [
    "BarRenderer",
    "BarWithMarkerRenderer",
    "ChartRenderer",
    "LineRenderer",
    "PieRenderer",
    "RENDERERS",
    "renderer_for",
]
