"""Metrics helper for estimators.

Provides a lightweight, dependency-free snapshot of an estimator's counters
and configuration suitable for exposure via HTTP or logging. Never mutates
the estimator.
"""
from __future__ import annotations

from typing import Any, Dict

from .gk import GKEstimator
from .kll import KLLEstimator
from .p2 import P2Estimator
from .tdigest import TDigestEstimator


def estimator_metrics(est: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "count": est.count,
        "summary_size": est.summary_size,
    }
    if isinstance(est, P2Estimator):
        out["algorithm"] = "p2"
        out["config"] = {"quantiles": list(est.quantiles)}
        out["initialized"] = est.initialized
    elif isinstance(est, GKEstimator):
        out["algorithm"] = "gk"
        out["config"] = {"epsilon": est.epsilon}
    elif isinstance(est, TDigestEstimator):
        out["algorithm"] = "tdigest"
        out["config"] = {"delta": est.delta}
        out["min"] = est.min
        out["max"] = est.max
    elif isinstance(est, KLLEstimator):
        out["algorithm"] = "kll"
        out["config"] = {"capacity": est.capacity, "max_levels": est.max_levels}
        out["levels"] = [len(lvl) for lvl in est.levels]
    else:
        out["algorithm"] = type(est).__name__
        out["config"] = {}
    return out

__all__ = ["estimator_metrics"]
