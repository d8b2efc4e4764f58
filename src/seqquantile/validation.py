"""Argument checks shared by every estimator.

All checks run before any state is touched so a rejected call leaves the
estimator unchanged.
"""
from __future__ import annotations

import math
from typing import Iterable, List

from .errors import InvalidArgument


def check_finite(x: float) -> float:
    try:
        value = float(x)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"value must be a real number, got {x!r}") from exc
    if not math.isfinite(value):
        raise InvalidArgument(f"value must be finite, got {value!r}")
    return value


def check_phi(phi: float) -> float:
    """Validate a query probability; the closed interval [0,1] is accepted."""
    try:
        p = float(phi)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"quantile must be a real number, got {phi!r}") from exc
    if not (0.0 <= p <= 1.0):
        raise InvalidArgument(f"quantile must be in [0,1], got {p!r}")
    return p


def check_quantiles(quantiles: Iterable[float]) -> List[float]:
    """Validate a tracked quantile set: non-empty, each in (0,1), sorted ascending."""
    qs = [float(q) for q in quantiles]
    if not qs:
        raise InvalidArgument("at least one quantile is required")
    for q in qs:
        if not (0.0 < q < 1.0):
            raise InvalidArgument(f"quantiles must be in (0,1), got {q!r}")
    if any(b < a for a, b in zip(qs, qs[1:])):
        raise InvalidArgument(f"quantiles must be sorted ascending, got {qs!r}")
    return qs


def check_positive(name: str, value: float) -> None:
    if not value > 0:
        raise InvalidArgument(f"{name} must be positive, got {value!r}")


__all__ = ["check_finite", "check_phi", "check_quantiles", "check_positive"]
