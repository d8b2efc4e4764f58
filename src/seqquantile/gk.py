"""Greenwald-Khanna ε-approximate quantile summary.

Greenwald, M. & Khanna, S. (2001). Space-efficient online computation of
quantile summaries. SIGMOD Record 30(2), 58-66.

The summary is a value-sorted list of tuples ``(v, g, Δ)``:

- ``g``: rank distance from the previous tuple, so ``rmin(v_i) = Σ g_j`` for j <= i
- ``Δ``: uncertainty, so ``rmax(v_i) = rmin(v_i) + Δ_i``

Invariants: ``Σ g == n`` and ``g_i + Δ_i <= max(1, floor(2εn))``. The first
tuple is never merged away, so the minimum stays exact; merges keep the later
value, so the maximum does too. A query returns a value whose true rank is
within ``εn`` of ``φn`` (within one rank while ``2εn < 1``).
"""
from __future__ import annotations

import bisect
import math
from typing import List, Tuple

from .errors import InvalidArgument
from .validation import check_finite, check_phi

Entry = Tuple[float, int, int]


class GKEstimator:
    def __init__(self, epsilon: float = 0.01) -> None:
        if not 0 < epsilon < 1:
            raise InvalidArgument(f"epsilon must be in (0,1), got {epsilon!r}")
        self.epsilon = float(epsilon)
        self.n = 0
        self.summary: List[Entry] = []

    @property
    def count(self) -> int:
        return self.n

    @property
    def summary_size(self) -> int:
        return len(self.summary)

    def _threshold(self) -> int:
        return math.floor(2 * self.epsilon * self.n)

    def update(self, x: float) -> None:
        x = check_finite(x)
        self.n += 1
        pos = bisect.bisect_right(self.summary, x, key=lambda e: e[0])
        if pos == 0 or pos == len(self.summary):
            delta = 0
        else:
            # floor(2εn) - 1 keeps g + Δ of the new tuple within floor(2εn)
            delta = max(0, self._threshold() - 1)
        self.summary.insert(pos, (x, 1, delta))
        if len(self.summary) > 2:
            self._compress()

    def _compress(self) -> None:
        threshold = self._threshold()
        # the minimum at index 0 is never absorbed by its successor
        merged: List[Entry] = self.summary[:2]
        for v, g, d in self.summary[2:]:
            _, pg, _ = merged[-1]
            if pg + g + d <= threshold:
                merged[-1] = (v, pg + g, d)
            else:
                merged.append((v, g, d))
        self.summary = merged

    def query(self, phi: float) -> float:
        """Return a value whose rank is within εn of φn (nan before any update)."""
        p = check_phi(phi)
        if not self.summary:
            return float("nan")
        r = p * self.n
        bound = r + self.epsilon * self.n
        rmin = 0
        prev = self.summary[0][0]
        for v, g, d in self.summary:
            rmin += g
            if rmin + d > bound:
                return prev
            prev = v
        return self.summary[-1][0]


__all__ = ["GKEstimator"]
