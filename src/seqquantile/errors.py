"""Exception types raised by the estimators and the batch adapter.

Both derive from ValueError so callers that already guard numeric input
with ``except ValueError`` keep working.
"""
from __future__ import annotations


class InvalidArgument(ValueError):
    """A parameter or observed value is outside the accepted domain."""


class DimensionMismatch(ValueError):
    """A value array does not match the shape of an estimator array."""


__all__ = ["InvalidArgument", "DimensionMismatch"]
