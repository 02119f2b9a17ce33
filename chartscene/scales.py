from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import math

import numpy as np

from chartscene.errors import DomainError
from chartscene.style import ChartType, Margins
from chartscene.table import DataTable


TAU = 2.0 * math.pi


@dataclass(frozen=True)
class _OrdinalScale(ABC):
    domain: tuple[str, ...]
    range_start: float
    range_stop: float
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, int] = {}
        for category in self.domain:
            index.setdefault(category, len(index))
        object.__setattr__(self, "domain", tuple(index))
        object.__setattr__(self, "_index", index)

    @abstractmethod
    def _paddings(self) -> tuple[float, float]:
        """Return (inner, outer) padding as fractions of one step."""
        raise NotImplementedError

    @property
    def step(self) -> float:
        inner, outer = self._paddings()
        n = len(self.domain)
        return (self.range_stop - self.range_start) / max(1.0, n - inner + outer * 2.0)

    @property
    def offset(self) -> float:
        inner, _ = self._paddings()
        n = len(self.domain)
        span = self.range_stop - self.range_start
        return self.range_start + (span - self.step * (n - inner)) * 0.5

    @property
    def bandwidth(self) -> float:
        inner, _ = self._paddings()
        return self.step * (1.0 - inner)

    def __call__(self, category: str) -> float:
        try:
            i = self._index[category]
        except (KeyError, TypeError) as exc:
            raise DomainError(f"category not in scale domain: {category!r}") from exc
        return self.offset + self.step * i

    def center(self, category: str) -> float:
        return self(category) + self.bandwidth / 2.0


@dataclass(frozen=True)
class BandScale(_OrdinalScale):
    """Categorical band scale; padding is used for inner and outer gaps."""

    padding: float = 0.1

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding < 1.0:
            raise ValueError("band padding must be in [0, 1)")
        super().__post_init__()

    def _paddings(self) -> tuple[float, float]:
        return (self.padding, self.padding)


@dataclass(frozen=True)
class PointScale(_OrdinalScale):
    padding: float = 0.0

    def __post_init__(self) -> None:
        if self.padding < 0.0:
            raise ValueError("point padding must be >= 0")
        super().__post_init__()

    def _paddings(self) -> tuple[float, float]:
        return (1.0, self.padding)


@dataclass(frozen=True)
class LinearScale:
    domain_min: float
    domain_max: float
    range_start: float
    range_stop: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.domain_min) and math.isfinite(self.domain_max)):
            raise ValueError("linear domain bounds must be finite")
        if self.domain_max == self.domain_min:
            raise ValueError("linear domain must have non-zero span")

    @classmethod
    def for_values(
        cls,
        upper: float | None,
        range_start: float,
        range_stop: float,
        *,
        lower: float | None = None,
        nice: bool = False,
        tick_count: int = 10,
    ) -> "LinearScale":
        """Value scale over ``[0, upper]``.

        ``lower`` is the smallest observed value; when it equals ``upper`` the
        domain becomes ``[0, max(1, upper)]``.
        """
        if upper is None or not math.isfinite(upper) or upper <= 0.0:
            upper = 1.0
        elif lower is not None and lower == upper:
            upper = max(1.0, upper)
        if nice:
            upper = nice_upper_bound(upper, tick_count)
        return cls(domain_min=0.0, domain_max=float(upper), range_start=range_start, range_stop=range_stop)

    def __call__(self, value: float) -> float:
        v = float(value)
        if not math.isfinite(v):
            raise DomainError(f"value not in scale domain: {value!r}")
        t = (v - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_start + t * (self.range_stop - self.range_start)

    def ticks(self, count: int = 10) -> np.ndarray:
        ticks = generate_nice_ticks(self.domain_min, self.domain_max, count)
        eps = (self.domain_max - self.domain_min) * 1e-9
        keep = (ticks >= self.domain_min - eps) & (ticks <= self.domain_max + eps)
        return ticks[keep]

    def tick_labels(self, count: int = 10) -> list[str]:
        return format_ticks_for_axis(self.ticks(count))


@dataclass(frozen=True)
class PieScales:
    partition: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class CartesianScales:
    x: BandScale | PointScale
    y: LinearScale


Scales = PieScales | CartesianScales


def pie_partition(values: Sequence[float]) -> tuple[tuple[float, float], ...]:
    """Split ``[0, 2π)`` into one arc per value, in input order."""
    weights = [max(0.0, float(v)) for v in values]
    total = 0.0
    for w in weights:
        total += w
    if total <= 0.0:
        return tuple((0.0, 0.0) for _ in weights)

    out: list[tuple[float, float]] = []
    cum = 0.0
    last = len(weights) - 1
    for i, w in enumerate(weights):
        start = min(TAU, TAU * cum / total)
        cum += w
        end = TAU if i == last else min(TAU, TAU * cum / total)
        if w == 0.0:
            end = start
        out.append((start, end))
    return tuple(out)


def build_scales(
    table: DataTable,
    geometry: ChartType | str,
    size: tuple[float, float],
    margins: Margins | None = None,
    *,
    series: Sequence[str] | None = None,
    padding: float = 0.1,
    upper_bound: float | None = None,
    nice: bool = False,
    tick_count: int = 10,
) -> Scales:
    kind = ChartType.parse(geometry)
    width, height = size
    m = margins or Margins()
    inner_w = width - m.left - m.right
    inner_h = height - m.top - m.bottom
    if inner_w <= 0 or inner_h <= 0:
        raise ValueError("plot area width/height must be > 0")

    plotted = tuple(series) if series is not None else table.series_names[:1]
    if kind is ChartType.PIE:
        if table.is_empty:
            return PieScales(partition=())
        return PieScales(partition=pie_partition(table.column(plotted[0]).tolist()))

    categories = tuple(table.categories())
    if kind is ChartType.LINE:
        x: BandScale | PointScale = PointScale(domain=categories, range_start=0.0, range_stop=inner_w)
    else:
        x = BandScale(domain=categories, range_start=0.0, range_stop=inner_w, padding=padding)

    observed = table.value_range(plotted)
    if upper_bound is not None:
        y = LinearScale.for_values(upper_bound, inner_h, 0.0, nice=nice, tick_count=tick_count)
    elif observed is not None:
        lowest, highest = observed
        y = LinearScale.for_values(highest, inner_h, 0.0, lower=lowest, nice=nice, tick_count=tick_count)
    else:
        y = LinearScale.for_values(None, inner_h, 0.0, nice=nice, tick_count=tick_count)
    return CartesianScales(x=x, y=y)


def nice_upper_bound(upper: float, tick_count: int = 10) -> float:
    if upper <= 0 or not math.isfinite(upper):
        raise ValueError("upper bound must be a finite value > 0")
    step = _nice_number(upper / max(tick_count, 1), round_result=True)
    bound = math.ceil(upper / step - 1e-9) * step
    return float(np.rint(bound / step) * step)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Snap drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    try:
        q = d.quantize(Decimal("1").scaleb(-decimals))
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    exp = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exp)))
