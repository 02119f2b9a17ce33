from __future__ import annotations

import logging
from typing import Any

from chartscene.adapters import normalize
from chartscene.errors import MissingCategoricalData
from chartscene.renderers import renderer_for
from chartscene.scales import build_scales
from chartscene.scene import Scene
from chartscene.style import ChartStyle, ChartType
from chartscene.targets.base import SceneTarget


LOGGER = logging.getLogger(__name__)


def render(
    target: SceneTarget,
    payload: Any,
    chart_type: ChartType | str | None = None,
    style: ChartStyle | None = None,
) -> Scene | None:
    """Run one full clear-and-redraw cycle on ``target``.

    Returns the presented scene, or ``None`` when the payload carries no
    usable categorical data (the target is then left cleared).
    ``UnknownChartType`` and ``DomainError`` propagate to the caller.
    """
    resolved_style = style or ChartStyle()
    target.clear()

    kind = ChartType.parse(chart_type if chart_type is not None else resolved_style.chart_type)
    renderer = renderer_for(kind)

    try:
        table = normalize(payload)
        table = renderer.prepare(table, resolved_style)
        series = renderer.plotted_series(table, resolved_style)
    except MissingCategoricalData as exc:
        LOGGER.info("nothing rendered: %s", exc)
        return None

    size = resolved_style.canvas_size
    scales = build_scales(
        table,
        kind,
        size,
        resolved_style.margins,
        series=series,
        padding=resolved_style.bar_padding,
        upper_bound=resolved_style.value_axis_upper_bound,
        nice=renderer.nice_value_axis(resolved_style),
        tick_count=resolved_style.value_tick_count,
    )
    scene = renderer.render(table, scales, size, resolved_style)
    target.present(scene)
    LOGGER.debug("rendered %s chart: rows=%d elements=%d", kind.value, len(table), len(scene.elements))
    return scene


class ChartVisual:
    """Host-facing wrapper: owns one target and redraws it on every update."""

    def __init__(self, target: SceneTarget, style: ChartStyle | None = None) -> None:
        self.target = target
        self.style = style or ChartStyle()
        self._last_scene: Scene | None = None

    @property
    def last_scene(self) -> Scene | None:
        return self._last_scene

    def update(self, payload: Any, chart_type: ChartType | str | None = None) -> Scene | None:
        self._last_scene = None
        self._last_scene = render(self.target, payload, chart_type, self.style)
        return self._last_scene

    def set_style(self, style: ChartStyle) -> None:
        self.style = style
