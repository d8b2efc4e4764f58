"""Simplified t-digest (Dunning & Ertl, 2019).

This is NOT the published algorithm. Every observation after the first is
merged by weighted averaging into the centroid with the nearest mean, and the
packing parameter ``delta`` is stored but never used to bound or split
centroids. The practical consequence is that the digest holds a single
centroid whose mean is the running mean of the stream, so interior quantiles
estimate the mean. Exact ``min``/``max`` are tracked alongside so that
``query(0)`` and ``query(1)`` return the observed extremes.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .validation import check_finite, check_phi, check_positive

Centroid = Tuple[float, float]  # (mean, weight)


class TDigestEstimator:
    def __init__(self, delta: float = 100.0) -> None:
        check_positive("delta", delta)
        self.delta = float(delta)
        self.n = 0.0
        self._centroids: List[Centroid] = []
        self._min: Optional[float] = None
        self._max: Optional[float] = None

    @property
    def count(self) -> int:
        return int(self.n)

    @property
    def summary_size(self) -> int:
        return len(self._centroids)

    @property
    def min(self) -> Optional[float]:
        return self._min

    @property
    def max(self) -> Optional[float]:
        return self._max

    def centroids(self) -> List[Centroid]:
        """Centroids sorted by mean."""
        return sorted(self._centroids, key=lambda c: c[0])

    def update(self, x: float) -> None:
        x = check_finite(x)
        self.n += 1.0
        if self._min is None or x < self._min:
            self._min = x
        if self._max is None or x > self._max:
            self._max = x
        if not self._centroids:
            self._centroids.append((x, 1.0))
            return
        idx = min(range(len(self._centroids)), key=lambda i: abs(self._centroids[i][0] - x))
        mean, weight = self._centroids[idx]
        self._centroids[idx] = ((mean * weight + x) / (weight + 1.0), weight + 1.0)

    def query(self, phi: float) -> float:
        p = check_phi(phi)
        if not self._centroids:
            return float("nan")
        if p == 0.0:
            return self._min  # type: ignore[return-value]
        if p == 1.0:
            return self._max  # type: ignore[return-value]
        ordered = self.centroids()
        target = p * self.n
        cum = 0.0
        for i, (mean, weight) in enumerate(ordered):
            if cum + weight >= target:
                if weight == 1.0 or i == 0:
                    return mean
                prev_mean = ordered[i - 1][0]
                return prev_mean + (mean - prev_mean) * (target - cum) / weight
            cum += weight
        return ordered[-1][0]

    def cdf(self, x: float) -> float:
        """Estimated fraction of observations <= x; the inverse of ``query``'s interpolation."""
        x = check_finite(x)
        if not self._centroids:
            return float("nan")
        if x < self._min:  # type: ignore[operator]
            return 0.0
        if x >= self._max:  # type: ignore[operator]
            return 1.0
        ordered = self.centroids()
        cum = 0.0
        for i, (mean, weight) in enumerate(ordered):
            if x < mean:
                if i == 0:
                    return 0.0
                prev_mean = ordered[i - 1][0]
                ratio = (x - prev_mean) / (mean - prev_mean)
                return (cum + ratio * weight) / self.n
            cum += weight
        return 1.0


__all__ = ["TDigestEstimator"]
