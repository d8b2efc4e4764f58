"""Common capability contract for the streaming quantile estimators.

The four algorithms share no internal state or code paths; they are
alternative strategies behind the same three calls: construct, ``update`` one
value at a time, ``query`` at any point. Queries never mutate state.
"""
from __future__ import annotations
from typing import Protocol


class QuantileEstimator(Protocol):  # pragma: no cover - simple protocol
    def update(self, x: float) -> None: ...  # noqa: E701 - protocol stub
    def query(self, phi: float) -> float: ...  # noqa: E701

    @property
    def count(self) -> int: ...  # noqa: E701

    @property
    def summary_size(self) -> int: ...  # noqa: E701

__all__ = ["QuantileEstimator"]
