"""Streaming quantile estimation using the P² algorithm (Jain & Chlamtac, 1985).

Generalised to k target quantiles: m = k + 2 markers, the extra two being the
running minimum (φ=0) and maximum (φ=1). Memory O(m), update O(m). Until m
samples have been seen the raw values are buffered and queries fall back to the
empirical quantile of the buffer.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import InvalidArgument
from .logutil import get_logger
from .validation import check_finite, check_phi, check_quantiles


@dataclass
class P2Estimator:
    quantiles: Sequence[float]  # tracked targets, sorted, each in (0,1)
    _n: int = field(default=0, init=False)
    _initialized: bool = field(default=False, init=False)
    _targets: List[float] = field(default_factory=list, init=False)    # 0, quantiles..., 1
    _heights: List[float] = field(default_factory=list, init=False)    # marker heights
    _positions: List[int] = field(default_factory=list, init=False)    # marker positions
    _desired: List[float] = field(default_factory=list, init=False)    # desired marker positions
    _buffer: List[float] = field(default_factory=list, init=False)     # raw samples before init

    def __post_init__(self) -> None:
        self.quantiles = tuple(check_quantiles(self.quantiles))
        self._targets = [0.0, *self.quantiles, 1.0]

    @property
    def markers(self) -> int:
        return len(self._targets)

    @property
    def count(self) -> int:
        return self._n

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def summary_size(self) -> int:
        return len(self._heights) if self._initialized else len(self._buffer)

    @property
    def heights(self) -> List[float]:
        return list(self._heights)

    @property
    def positions(self) -> List[int]:
        return list(self._positions)

    def update(self, x: float) -> None:
        """Observe one sample."""
        x = check_finite(x)
        self._n += 1
        if not self._initialized:
            self._buffer.append(x)
            if len(self._buffer) == self.markers:
                self._initialize()
            return

        m = self.markers
        h = self._heights
        n = self._positions

        # Find k: cell in which x falls; the extremes replace the end markers
        if x < h[0]:
            h[0] = x
            k = 0
        elif x >= h[-1]:
            h[-1] = x
            k = m - 2
        else:
            k = 0
            while k < m - 2 and x >= h[k + 1]:
                k += 1
        for i in range(k + 1, m):
            n[i] += 1
        for i in range(m):
            self._desired[i] += self._targets[i]

        # Adjust heights of interior markers if necessary
        for i in range(1, m - 1):
            d = self._desired[i] - n[i]
            if (d >= 1 and n[i + 1] - n[i] > 1) or (d <= -1 and n[i - 1] - n[i] < -1):
                d_sign = 1 if d > 0 else -1
                hp = self._parabolic(i, d_sign, h, n)
                h[i] = min(max(hp, h[i - 1]), h[i + 1])
                n[i] += d_sign

    def query(self, phi: float) -> float:
        """Return the estimate for a tracked quantile (0 and 1 give min and max)."""
        idx = self._index(phi)
        if self._initialized:
            return self._heights[idx]
        return self._empirical(self._targets[idx])

    def estimates(self) -> List[float]:
        """Estimates for every tracked quantile, in construction order."""
        return [self.query(q) for q in self.quantiles]

    def _index(self, phi: float) -> int:
        p = check_phi(phi)
        try:
            return self._targets.index(p)
        except ValueError:
            raise InvalidArgument(f"quantile not tracked: {p!r} (tracking {list(self.quantiles)!r})") from None

    def _empirical(self, phi: float) -> float:
        if not self._buffer:
            return float("nan")
        data = sorted(self._buffer)
        rank = min(max(math.ceil(phi * len(data)), 1), len(data))
        return data[rank - 1]

    def _initialize(self) -> None:
        data = sorted(self._buffer)
        size = len(data)
        # exactly m samples: marker i sits on the i-th order statistic
        ranks = list(range(1, size + 1))
        self._heights = data
        self._positions = ranks
        self._desired = [1 + t * (size - 1) for t in self._targets]
        self._buffer = []
        self._initialized = True
        get_logger("p2").debug("initialized %d markers after %d samples", len(ranks), size)

    @staticmethod
    def _parabolic(i: int, d: int, h: List[float], n: List[int]) -> float:
        n0, n1, n2 = n[i-1], n[i], n[i+1]
        h0, h1, h2 = h[i-1], h[i], h[i+1]
        return h1 + d / (n2 - n0) * ((n1 - n0 + d) * (h2 - h1) / (n2 - n1) + (n2 - n1 - d) * (h1 - h0) / (n1 - n0))


__all__ = ["P2Estimator"]
