"""Name-to-constructor table for the estimator algorithms."""
from __future__ import annotations

from typing import Callable, Dict, Optional

from .base import QuantileEstimator
from .config import EstimatorConfig
from .errors import InvalidArgument
from .gk import GKEstimator
from .kll import KLLEstimator
from .p2 import P2Estimator
from .tdigest import TDigestEstimator


def _kll(cfg: EstimatorConfig) -> KLLEstimator:
    return KLLEstimator(
        cfg.capacity,
        initial_levels=cfg.initial_levels,
        max_levels=cfg.max_levels,
        seed=cfg.seed,
    )


ALGORITHMS: Dict[str, Callable[[EstimatorConfig], QuantileEstimator]] = {
    "p2": lambda cfg: P2Estimator(cfg.quantiles),
    "gk": lambda cfg: GKEstimator(cfg.epsilon),
    "tdigest": lambda cfg: TDigestEstimator(cfg.delta),
    "kll": _kll,
}


def build_estimator(algorithm: str, cfg: Optional[EstimatorConfig] = None) -> QuantileEstimator:
    try:
        factory = ALGORITHMS[algorithm]
    except KeyError:
        raise InvalidArgument(
            f"unknown algorithm {algorithm!r}; expected one of {sorted(ALGORITHMS)}"
        ) from None
    return factory(cfg or EstimatorConfig())


__all__ = ["ALGORITHMS", "build_estimator"]
