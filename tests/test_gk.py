import bisect
import math
import random

import pytest

from seqquantile.errors import InvalidArgument
from seqquantile.gk import GKEstimator

PHIS = (0.0, 0.01, 0.1, 0.25, 0.5, 0.75, 0.9, 0.99, 1.0)


def _assert_rank_bound(est: GKEstimator, ref: list) -> None:
    n = len(ref)
    tol = max(est.epsilon * n, 1.0) + 1e-9
    for phi in PHIS:
        v = est.query(phi)
        rank = bisect.bisect_left(ref, v) + 1
        assert abs(rank - phi * n) <= tol, (phi, n, rank)


def test_gk_ordered_integers_median():
    est = GKEstimator(0.01)
    for i in range(1, 100):
        est.update(float(i))
    assert est.query(0.5) in {49.0, 50.0, 51.0}


@pytest.mark.parametrize("eps", [0.005, 0.02, 0.1])
def test_gk_rank_error_bound_random(eps):
    rng = random.Random(7)
    est = GKEstimator(eps)
    ref: list = []
    for _ in range(3000):
        x = rng.gauss(0, 1)
        est.update(x)
        bisect.insort(ref, x)
        if len(ref) % 7 == 0:
            _assert_rank_bound(est, ref)
    _assert_rank_bound(est, ref)


def test_gk_rank_error_bound_descending_and_ascending():
    for stream in (range(2000, 0, -1), range(1, 2001)):
        est = GKEstimator(0.01)
        ref: list = []
        for i in stream:
            est.update(float(i))
            bisect.insort(ref, float(i))
        _assert_rank_bound(est, ref)


def test_gk_invariants_hold():
    rng = random.Random(11)
    est = GKEstimator(0.01)
    for _ in range(5000):
        est.update(rng.random())
        threshold = max(1, math.floor(2 * est.epsilon * est.n))
        assert sum(g for _, g, _ in est.summary) == est.n
        assert all(g + d <= threshold for _, g, d in est.summary)
        values = [v for v, _, _ in est.summary]
        assert values == sorted(values)


def test_gk_summary_stays_small():
    rng = random.Random(5)
    est = GKEstimator(0.01)
    for _ in range(20_000):
        est.update(rng.random())
    assert est.summary_size < 2000


def test_gk_empty_query_is_nan():
    assert math.isnan(GKEstimator(0.1).query(0.5))


@pytest.mark.parametrize("eps", [0.0, 1.0, -0.5, 2.0])
def test_gk_rejects_invalid_epsilon(eps):
    with pytest.raises(InvalidArgument):
        GKEstimator(eps)


def test_gk_rejects_bad_phi_and_values():
    est = GKEstimator(0.05)
    est.update(1.0)
    with pytest.raises(InvalidArgument):
        est.query(1.5)
    with pytest.raises(InvalidArgument):
        est.update(float("nan"))
    assert est.n == 1
    assert est.summary == [(1.0, 1, 0)]
