"""Simplified KLL sketch (Karnin, Lang & Liberty, 2016).

Keeps a growable list of levels. New values land in level 0; when a level
holds more than ``capacity`` values it is sorted, paired off, and one element
of each pair is kept at random and promoted to the next level. An odd element
left over after pairing (the largest) stays where it is, so no observation is
silently dropped by compaction.

Simplification: queries pool every level with equal weight. A true KLL sketch
weights a level-i sample as 2**i observations; here higher levels are
under-weighted, which biases estimates toward the recent level-0 values.
"""
from __future__ import annotations

import math
import random
from typing import List, Optional

from .errors import InvalidArgument
from .logutil import get_logger
from .validation import check_finite, check_phi, check_positive


class KLLEstimator:
    def __init__(
        self,
        capacity: int = 200,
        *,
        initial_levels: int = 8,
        max_levels: int = 32,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        check_positive("capacity", capacity)
        if int(capacity) != capacity:
            raise InvalidArgument(f"capacity must be an integer, got {capacity!r}")
        check_positive("initial_levels", initial_levels)
        check_positive("max_levels", max_levels)
        self.capacity = int(capacity)
        self.max_levels = int(max_levels)
        self.n = 0
        self._levels: List[List[float]] = [[] for _ in range(int(initial_levels))]
        # An injected generator wins over a seed; both keep compaction reproducible.
        self._rng = rng if rng is not None else random.Random(seed)
        self._cap_warned = False

    @property
    def count(self) -> int:
        return self.n

    @property
    def summary_size(self) -> int:
        return sum(len(lvl) for lvl in self._levels)

    @property
    def levels(self) -> List[List[float]]:
        return [list(lvl) for lvl in self._levels]

    def update(self, x: float) -> None:
        x = check_finite(x)
        self._levels[0].append(x)
        self.n += 1
        level = 0
        while level < len(self._levels) and len(self._levels[level]) > self.capacity:
            self._compact(level)
            level += 1

    def _compact(self, level: int) -> None:
        buf = self._levels[level]
        buf.sort()
        if level + 1 == len(self._levels):
            self._grow()
        survivors = [
            buf[j] if self._rng.random() < 0.5 else buf[j + 1]
            for j in range(0, len(buf) - 1, 2)
        ]
        leftover = buf[-1:] if len(buf) % 2 else []
        self._levels[level] = leftover
        self._levels[level + 1].extend(survivors)

    def _grow(self) -> None:
        self._levels.append([])
        log = get_logger("kll")
        log.debug("allocated level %d", len(self._levels) - 1)
        if len(self._levels) > self.max_levels and not self._cap_warned:
            self._cap_warned = True
            log.warning(
                "%d levels exceeds soft cap %d (capacity=%d, n=%d); continuing to grow",
                len(self._levels), self.max_levels, self.capacity, self.n,
            )

    def query(self, phi: float) -> float:
        p = check_phi(phi)
        pooled = sorted(v for lvl in self._levels for v in lvl)
        if not pooled:
            return float("nan")
        rank = min(max(math.ceil(p * len(pooled)), 1), len(pooled))
        return pooled[rank - 1]


__all__ = ["KLLEstimator"]
