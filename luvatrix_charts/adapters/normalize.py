from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from luvatrix_charts.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def coerce_1d(value: Any, *, label: str) -> np.ndarray:
    if value is None:
        raise ChartDataError(f"{label} input is required")

    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(list(value), dtype=object).reshape(-1), label=label)

    raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")


def coerce_xy(x: Any, y: Any) -> tuple[np.ndarray, np.ndarray]:
    x_arr = coerce_1d(x, label="x")
    y_arr = coerce_1d(y, label="y")
    if x_arr.shape != y_arr.shape:
        raise ChartDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    return x_arr, y_arr


def coerce_optional_1d(value: Any, *, label: str, size: int) -> np.ndarray | None:
    if value is None:
        return None
    arr = coerce_1d(value, label=label)
    if arr.size != size:
        raise ChartDataError(f"{label} length mismatch: {arr.size} != {size}")
    return arr


def coerce_grid(value: Any, *, label: str = "grid") -> np.ndarray:
    if value is None:
        raise ChartDataError(f"{label} input is required")

    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        arr = tensor.to(torch.float64).numpy()
    elif pd is not None and isinstance(value, pd.DataFrame):
        arr = value.to_numpy(dtype=np.float64)
    elif isinstance(value, np.ndarray):
        arr = value
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        rows = [coerce_1d(row, label=f"{label} row {i}") for i, row in enumerate(value)]
        widths = {row.size for row in rows}
        if len(widths) > 1:
            raise ChartDataError(f"{label} rows must have equal length, got {sorted(widths)}")
        if not rows:
            return np.zeros((0, 0), dtype=np.float64)
        return np.vstack(rows)
    else:
        raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")

    if arr.ndim != 2:
        raise ChartDataError(f"{label} must be 2-D")
    if arr.dtype.kind not in {"i", "u", "f", "b"}:
        raise ChartDataError(f"{label} must be numeric")
    return arr.astype(np.float64, copy=False)


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
