"""Package metadata and public API for seqquantile.

Expose a single source of truth for the version. Prefer reading from
importlib.metadata so that an editable install or wheel always reports
the version declared in pyproject.toml. Fallback to a hardcoded string
to avoid import errors when metadata is unavailable (e.g. direct source
usage without installation).
"""

from __future__ import annotations

from importlib import metadata as _metadata

from .batch import EstimatorArray
from .config import EstimatorConfig
from .errors import DimensionMismatch, InvalidArgument
from .gk import GKEstimator
from .kll import KLLEstimator
from .p2 import P2Estimator
from .registry import ALGORITHMS, build_estimator
from .tdigest import TDigestEstimator

__all__ = [
	"__version__",
	"ALGORITHMS",
	"DimensionMismatch",
	"EstimatorArray",
	"EstimatorConfig",
	"GKEstimator",
	"InvalidArgument",
	"KLLEstimator",
	"P2Estimator",
	"TDigestEstimator",
	"build_estimator",
]

_FALLBACK_VERSION = "0.1.0"  # MUST match pyproject.toml [project].version

try:  # pragma: no cover - success path covered indirectly via CLI test
	__version__ = _metadata.version("seqquantile")  # type: ignore[assignment]
except Exception:  # pragma: no cover - fallback exercised if metadata missing
	__version__ = _FALLBACK_VERSION
