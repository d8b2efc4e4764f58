from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class EstimatorConfig:
    # P² tracked targets; also the default for estimator arrays
    quantiles: Tuple[float, ...] = (0.5,)
    # GK rank accuracy: |rank error| <= epsilon * n
    epsilon: float = 0.01
    # t-Digest packing parameter (stored only; the simplified digest never uses it)
    delta: float = 100.0
    # KLL per-level buffer capacity
    capacity: int = 200
    # KLL levels allocated up front
    initial_levels: int = 8
    # KLL soft cap: levels keep growing past it, but a warning is logged once
    max_levels: int = 32
    # Seed for KLL coin flips; None draws from OS entropy
    seed: Optional[int] = None
