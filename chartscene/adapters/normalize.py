from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Any

import numpy as np

from chartscene.errors import MissingCategoricalData
from chartscene.table import DataTable, Row


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValueColumn:
    name: str
    values: Any


@dataclass(frozen=True)
class CategoricalPayload:
    """One category column plus one or more named value columns."""

    categories: Any
    values: Sequence[ValueColumn]


def normalize(payload: Any) -> DataTable:
    """Convert a categorical payload into a validated :class:`DataTable`.

    Rows with a non-finite measure are dropped and counted in
    ``DataTable.rejected_rows``.
    """
    resolved = _resolve_payload(payload)
    if resolved.categories is None:
        raise MissingCategoricalData("payload has no category column")
    if not resolved.values:
        raise MissingCategoricalData("payload has no value column")

    categories = _coerce_categories(resolved.categories)
    names = _unique_series_names([column.name for column in resolved.values])
    columns: list[np.ndarray] = []
    for name, column in zip(names, resolved.values, strict=True):
        arr = _coerce_1d_numeric(column.values, label=name)
        if arr.size != len(categories):
            raise MissingCategoricalData(
                f"value column {name!r} length {arr.size} != category count {len(categories)}"
            )
        columns.append(arr)

    if columns:
        finite = np.logical_and.reduce([np.isfinite(arr) for arr in columns])
    else:
        finite = np.ones(len(categories), dtype=bool)

    rows = tuple(
        Row(category=category, measures={name: float(arr[i]) for name, arr in zip(names, columns, strict=True)})
        for i, category in enumerate(categories)
        if finite[i]
    )
    rejected = len(categories) - len(rows)
    if rejected:
        LOGGER.warning("rejected %d row(s) with non-numeric measures", rejected)
    return DataTable(series_names=tuple(names), rows=rows, rejected_rows=rejected)


def _resolve_payload(payload: Any) -> CategoricalPayload:
    if payload is None:
        raise MissingCategoricalData("no data view supplied")
    if isinstance(payload, CategoricalPayload):
        return payload
    if pd is not None and isinstance(payload, pd.DataFrame):
        return _from_dataframe(payload)
    if isinstance(payload, Mapping):
        return _from_mapping(payload)
    raise MissingCategoricalData(f"unsupported payload type: {type(payload)!r}")


def _from_mapping(raw: Mapping[str, Any]) -> CategoricalPayload:
    categories = raw.get("categories")
    if isinstance(categories, Mapping):
        categories = categories.get("values")

    raw_values = raw.get("values")
    if raw_values is None:
        raise MissingCategoricalData("payload has no value column")
    if isinstance(raw_values, Mapping):
        raw_values = [{"name": k, "values": v} for k, v in raw_values.items()]
    if not isinstance(raw_values, Sequence) or isinstance(raw_values, (str, bytes, bytearray)):
        raise MissingCategoricalData("payload values must be a list of value columns")

    columns: list[ValueColumn] = []
    for i, entry in enumerate(raw_values):
        if not isinstance(entry, Mapping) or "values" not in entry:
            raise MissingCategoricalData(f"value column {i} is malformed")
        columns.append(ValueColumn(name=str(entry.get("name") or f"value_{i}"), values=entry["values"]))
    return CategoricalPayload(categories=categories, values=columns)


def _from_dataframe(frame: Any) -> CategoricalPayload:
    numeric_cols = [c for c in frame.columns if _is_numeric_dtype(frame[c])]
    other_cols = [c for c in frame.columns if c not in numeric_cols]
    if not numeric_cols:
        raise MissingCategoricalData("DataFrame has no numeric value column")
    if other_cols:
        category_col = other_cols[0]
        categories = frame[category_col].tolist()
    elif not isinstance(frame.index, pd.RangeIndex):
        categories = frame.index.tolist()
    else:
        raise MissingCategoricalData("DataFrame has no category column")
    columns = [ValueColumn(name=str(c), values=frame[c]) for c in numeric_cols]
    return CategoricalPayload(categories=categories, values=columns)


def _is_numeric_dtype(series: Any) -> bool:
    if pd is None:
        return False
    try:
        return bool(pd.api.types.is_numeric_dtype(series)) and not pd.api.types.is_bool_dtype(series)
    except (TypeError, ValueError):
        return False


def _coerce_categories(value: Any) -> list[str]:
    if pd is not None and isinstance(value, (pd.Series, pd.Index)):
        value = value.tolist()
    elif isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise MissingCategoricalData("category column must be 1-D")
        value = value.tolist()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise MissingCategoricalData(f"unsupported category column type: {type(value)!r}")
    return ["" if raw is None else str(raw) for raw in value]


def _unique_series_names(names: list[str]) -> list[str]:
    seen: dict[str, int] = {}
    out: list[str] = []
    for name in names:
        count = seen.get(name, 0) + 1
        seen[name] = count
        out.append(name if count == 1 else f"{name}_{count}")
    return out


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise MissingCategoricalData(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy())

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise MissingCategoricalData(f"{label} must be 1-D")
        return _coerce_ndarray(value)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(list(value), dtype=object)
        if arr.ndim != 1:
            raise MissingCategoricalData(f"{label} must be 1-D")
        return _coerce_ndarray(arr)

    raise MissingCategoricalData(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        out[i] = _coerce_scalar(raw)
    return out


def _coerce_scalar(raw: Any) -> float:
    if raw is None:
        return np.nan
    if isinstance(raw, (bool, int, float, Decimal)):
        try:
            return float(raw)
        except OverflowError:
            return np.nan
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return np.nan
        try:
            return float(text)
        except ValueError:
            return np.nan
    try:
        return float(raw)
    except (TypeError, ValueError, OverflowError):
        return np.nan
