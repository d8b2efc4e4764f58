import math
import random

import pytest

from seqquantile.errors import InvalidArgument
from seqquantile.tdigest import TDigestEstimator


def test_tdigest_empty_queries_are_nan():
    est = TDigestEstimator()
    assert math.isnan(est.query(0.5))
    assert math.isnan(est.cdf(0.0))


def test_tdigest_merges_into_nearest_centroid():
    est = TDigestEstimator(50.0)
    for x in [1.0, 2.0, 3.0, 6.0]:
        est.update(x)
    # the simplified digest never opens a second centroid
    assert est.centroids() == [(3.0, 4.0)]
    assert est.count == 4
    assert est.query(0.5) == 3.0


def test_tdigest_boundaries_are_exact_extremes():
    random.seed(4)
    data = [random.uniform(-3, 8) for _ in range(500)]
    est = TDigestEstimator()
    for x in data:
        est.update(x)
    assert est.query(0.0) == min(data)
    assert est.query(1.0) == max(data)
    assert est.cdf(min(data) - 1) == 0.0
    assert est.cdf(max(data)) == 1.0


def test_tdigest_median_converges_for_symmetric_distribution():
    random.seed(0)
    est = TDigestEstimator()
    for _ in range(20_000):
        est.update(random.gauss(5.0, 2.0))
    assert est.query(0.5) == pytest.approx(5.0, abs=0.1)


def test_tdigest_cdf_is_monotone():
    random.seed(2)
    est = TDigestEstimator()
    for _ in range(200):
        est.update(random.random())
    xs = [i / 50 - 0.5 for i in range(100)]
    cdfs = [est.cdf(x) for x in xs]
    assert all(0.0 <= c <= 1.0 for c in cdfs)
    assert all(a <= b for a, b in zip(cdfs, cdfs[1:]))


@pytest.mark.parametrize("delta", [0.0, -1.0])
def test_tdigest_rejects_non_positive_delta(delta):
    with pytest.raises(InvalidArgument):
        TDigestEstimator(delta)


def test_tdigest_rejects_non_finite():
    est = TDigestEstimator()
    est.update(1.0)
    with pytest.raises(InvalidArgument):
        est.update(float("inf"))
    assert est.centroids() == [(1.0, 1.0)]
    assert est.max == 1.0
