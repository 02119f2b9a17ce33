from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
import math

import numpy as np

from chartscene.errors import NormalizationError


@dataclass(frozen=True)
class Row:
    category: str
    measures: Mapping[str, float]

    def value(self, series: str) -> float:
        try:
            return self.measures[series]
        except KeyError as exc:
            raise KeyError(f"row {self.category!r} has no series {series!r}") from exc


@dataclass(frozen=True)
class DataTable:
    """Ordered rows sharing one set of measure series.

    Every row carries exactly ``series_names`` and only finite values.
    ``rejected_rows`` counts input rows dropped during normalization.
    """

    series_names: tuple[str, ...]
    rows: tuple[Row, ...] = ()
    rejected_rows: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        expected = set(self.series_names)
        if len(expected) != len(self.series_names):
            raise NormalizationError(f"duplicate series names: {self.series_names!r}")
        for i, row in enumerate(self.rows):
            if set(row.measures) != expected:
                raise NormalizationError(
                    f"row {i} series {sorted(row.measures)!r} != table series {sorted(expected)!r}"
                )
            for name, value in row.measures.items():
                if not isinstance(value, float) or not math.isfinite(value):
                    raise NormalizationError(f"row {i} has non-finite {name}: {value!r}")

    @classmethod
    def from_columns(cls, categories: Sequence[str], columns: Mapping[str, Sequence[float]]) -> "DataTable":
        names = tuple(columns)
        rows = tuple(
            Row(category=str(category), measures={name: float(columns[name][i]) for name in names})
            for i, category in enumerate(categories)
        )
        return cls(series_names=names, rows=rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def primary_series(self) -> str:
        if not self.series_names:
            raise NormalizationError("table has no measure series")
        return self.series_names[0]

    def categories(self) -> list[str]:
        return [row.category for row in self.rows]

    def column(self, series: str) -> np.ndarray:
        if series not in self.series_names:
            raise KeyError(f"unknown series: {series!r}")
        return np.asarray([row.measures[series] for row in self.rows], dtype=np.float64)

    def value_range(self, series: Sequence[str] | None = None) -> tuple[float, float] | None:
        """Return (min, max) over ``series``, or ``None`` when there are no values."""
        names = self.series_names if series is None else tuple(series)
        values = [row.measures[name] for row in self.rows for name in names]
        if not values:
            return None
        return (min(values), max(values))

    def sorted_by_category(self) -> "DataTable":
        """Rows in case-insensitive category order; ties fall back to code point order."""
        rows = tuple(sorted(self.rows, key=lambda row: (row.category.casefold(), row.category)))
        return DataTable(series_names=self.series_names, rows=rows, rejected_rows=self.rejected_rows)
