"""Element-wise arrays of independent estimators.

An ``EstimatorArray`` holds one estimator per cell of a 1-D or 2-D shape and
applies updates and queries cell by cell. Cells never share state, so distinct
cells may be driven from different threads without locking.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .config import EstimatorConfig
from .errors import DimensionMismatch, InvalidArgument
from .registry import build_estimator
from .validation import check_phi

Shape = Union[int, Tuple[int, ...]]


def _normalize_shape(shape: Shape) -> Tuple[int, ...]:
    dims = (shape,) if isinstance(shape, (int, np.integer)) else tuple(shape)
    if len(dims) not in (1, 2):
        raise InvalidArgument(f"shape must have one or two dimensions, got {dims!r}")
    if any(int(d) != d or d <= 0 for d in dims):
        raise InvalidArgument(f"shape dimensions must be positive integers, got {dims!r}")
    return tuple(int(d) for d in dims)


def _as_values(values) -> np.ndarray:
    try:
        arr = np.asarray(values)
    except (TypeError, ValueError) as exc:
        # ragged nesting cannot match a rectangular estimator array
        raise DimensionMismatch(f"values cannot be read as a rectangular array: {exc}") from exc
    if arr.dtype.kind not in "biuf":
        raise InvalidArgument(f"values must be numeric, got dtype {arr.dtype}")
    arr = arr.astype(float)
    if not np.isfinite(arr).all():
        raise InvalidArgument("values must all be finite")
    return arr


class EstimatorArray:
    def __init__(
        self,
        quantiles: Optional[Sequence[float]],
        shape: Shape,
        algorithm: str = "p2",
        cfg: Optional[EstimatorConfig] = None,
    ) -> None:
        cfg = cfg or EstimatorConfig()
        if quantiles is not None:
            cfg = replace(cfg, quantiles=tuple(quantiles))
        self.algorithm = algorithm
        self.cfg = cfg
        self._cells = np.empty(_normalize_shape(shape), dtype=object)
        for flat, idx in enumerate(np.ndindex(self._cells.shape)):
            cell_cfg = cfg if cfg.seed is None else replace(cfg, seed=cfg.seed + flat)
            self._cells[idx] = build_estimator(algorithm, cell_cfg)
        self._count = 0

    @classmethod
    def from_values(
        cls,
        quantiles: Optional[Sequence[float]],
        values,
        algorithm: str = "p2",
        cfg: Optional[EstimatorConfig] = None,
    ) -> "EstimatorArray":
        """Build an array shaped like ``values`` and feed it ``values`` as the first observation."""
        arr = _as_values(values)
        out = cls(quantiles, arr.shape, algorithm, cfg)
        out.update(arr)
        return out

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._cells.shape

    @property
    def count(self) -> int:
        """Number of value arrays applied."""
        return self._count

    def __getitem__(self, idx):
        return self._cells[idx]

    def update(self, values) -> None:
        arr = _as_values(values)
        if arr.shape != self._cells.shape:
            raise DimensionMismatch(f"values shape {arr.shape} does not match estimator shape {self._cells.shape}")
        for idx in np.ndindex(arr.shape):
            self._cells[idx].update(arr[idx])
        self._count += 1

    def query_all(self, phi: float) -> np.ndarray:
        p = check_phi(phi)
        out = np.empty(self._cells.shape, dtype=float)
        for idx in np.ndindex(self._cells.shape):
            out[idx] = self._cells[idx].query(p)
        return out

    def median(self) -> np.ndarray:
        return self.query_all(0.5)


__all__ = ["EstimatorArray"]
