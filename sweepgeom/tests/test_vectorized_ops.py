import logging

import numpy as np
import pytest

from sweepgeom.core.algebra import cross, eigen_decomposition, polar_decomposition
from sweepgeom.core.config import KernelConfig
from sweepgeom.core.continuous import point_segment_continuous_intersection
from sweepgeom.core.geometry import closest_point_on_segment, shortest_segment_between_segments
from sweepgeom.core.vectorized_ops import (
    closest_points_on_segments, cross_batch, eigen_decompositions,
    point_segment_continuous_intersections, polar_decompositions,
    shortest_segments_between_segments,
)

NUMBA = KernelConfig(numba_min_batch=1)
SCALAR = KernelConfig(numba_min_batch=10 ** 9)

# (p0, p1, a0, a1, b0, b1) covering every branch of the swept solver
SWEPT_ROWS = [
    ((0, 0), (2, 0), (1, -1), (1, -1), (1, 1), (1, 1)),              # linear hit
    ((0, 0), (0, 0), (1, -1), (-1, -1), (1, 1), (-1, 1)),            # moving segment
    ((0, 0), (0.4, 0), (1, -1), (1, -1), (1, 1), (1, 1)),            # t out of range
    ((0, 0), (2, 0), (1, 1), (1, 1), (3, 3), (3, 3)),                # s out of range
    ((0, 0.5), (1, 0.5), (0, 0), (0, 0), (1, -1), (1, 1)),           # quadratic, one root
    ((1, -0.25), (-1, -0.25), (0, 0), (0, 0), (1, -1), (1, 1)),      # earlier root
    ((-1, 0.25), (1, 0.25), (0, 0), (0, 0), (1, -1), (1, 1)),        # later root
    ((1, -1), (1, 1), (0, 0), (0, 0), (2, 0), (0, 2)),               # negative discriminant
    ((2, -3), (4, 3), (0, 0), (0, 0), (1, -1), (1, 1)),              # tangency
    ((-1, 0), (3, 0), (0, 0), (0, 0), (1, 0), (1, 0)),               # collinear, a first
    ((3, 0), (-1, 0), (0, 0), (0, 0), (1, 0), (1, 0)),               # collinear, b first
    ((5, 0), (5, 0), (0, 0), (0, 0), (1, 0), (1, 0)),                # all stationary
    ((0, 1), (0, 1), (0, 0), (0, 0), (1, 0), (1, 0)),                # no solution
    ((0.2, 0.9), (0.72, -1.24), (0.4, -2), (0.4, -2), (1.2, -0.1), (1.2, -0.1)),  # grazes t = 1
    ((-1, 1), (1, 1), (0, 0), (0, 0), (0, 0), (0, 0)),                # zero-length segment
]


def swept_columns(rows):
    cols = list(zip(*rows))
    return [np.asarray(c, dtype=np.float64) for c in cols]


@pytest.mark.parametrize("config", [NUMBA, SCALAR], ids=["numba", "scalar"])
def test_swept_batch_matches_scalar(config):
    res = point_segment_continuous_intersections(*swept_columns(SWEPT_ROWS), config=config)
    assert res.hit.dtype == bool
    assert res.t.dtype == np.float32 and res.s.dtype == np.float32
    for i, row in enumerate(SWEPT_ROWS):
        ref = point_segment_continuous_intersection(*row)
        assert bool(res.hit[i]) == ref.hit, i
        assert res.t[i] == ref.t, i
        assert res.s[i] == ref.s, i


def test_swept_batch_paths_agree_on_random_motion(rng):
    n = 200
    args = [rng.uniform(-2, 2, size=(n, 2)) for _ in range(6)]
    fast = point_segment_continuous_intersections(*args, config=NUMBA)
    slow = point_segment_continuous_intersections(*args, config=SCALAR)
    assert fast.hit.any()
    np.testing.assert_array_equal(fast.hit, slow.hit)
    np.testing.assert_array_equal(fast.t, slow.t)
    np.testing.assert_array_equal(fast.s, slow.s)


def test_swept_row_result_independent_of_batch_size():
    # default config: one row loops the scalar solver, 64 rows run the kernel
    for row in SWEPT_ROWS:
        alone = point_segment_continuous_intersections(*swept_columns([row]))
        batch = point_segment_continuous_intersections(*swept_columns([row] * 64))
        assert np.all(batch.hit == alone.hit[0]), row
        assert np.all(batch.t == alone.t[0]), row
        assert np.all(batch.s == alone.s[0]), row


def test_swept_batch_empty():
    empty = np.empty((0, 2))
    res = point_segment_continuous_intersections(*(empty,) * 6, config=NUMBA)
    assert res.hit.shape == (0,) and res.t.shape == (0,) and res.s.shape == (0,)


def test_swept_batch_rejects_mismatched_sizes():
    ok = np.zeros((3, 2))
    with pytest.raises(ValueError):
        point_segment_continuous_intersections(ok, ok, ok, ok, ok, np.zeros((4, 2)))
    with pytest.raises(ValueError):
        point_segment_continuous_intersections(ok, ok, ok, ok, ok, np.zeros((3, 3)))


def test_swept_batch_logs_dispatch(caplog):
    cols = swept_columns(SWEPT_ROWS[:2])
    with caplog.at_level(logging.DEBUG, logger="sweepgeom"):
        point_segment_continuous_intersections(*cols, config=NUMBA)
        point_segment_continuous_intersections(*cols, config=SCALAR)
    messages = [r.getMessage() for r in caplog.records if r.name == "sweepgeom.vectorized"]
    assert any("numba kernel" in m for m in messages)
    assert any("scalar loop" in m for m in messages)


def test_cross_batch():
    a = np.array([[1, 0], [0, 1], [2, 4]])
    b = np.array([[0, 1], [1, 0], [1, 2]])
    out = cross_batch(a, b)
    np.testing.assert_allclose(out, [cross(x, y) for x, y in zip(a, b)])


def test_closest_points_match_scalar(rng):
    p, a0, a1 = (rng.uniform(-3, 3, size=(40, 2)) for _ in range(3))
    a1[0] = a0[0]  # one zero-length segment
    out = closest_points_on_segments(p, a0, a1)
    for i in range(len(p)):
        np.testing.assert_allclose(out[i], closest_point_on_segment(p[i], a0[i], a1[i]), atol=1e-5)
    np.testing.assert_allclose(out[0], a0[0], atol=1e-6)


def test_shortest_segments_match_scalar(rng):
    a0, a1, b0, b1 = (rng.uniform(-3, 3, size=(40, 2)) for _ in range(4))
    # parallel, coincident and point-vs-point rows
    a0[0], a1[0], b0[0], b1[0] = (0, 0), (1, 0), (0, 1), (1, 1)
    a0[1], a1[1], b0[1], b1[1] = (0, 0), (1, 0), (0, 0), (1, 0)
    a0[2], a1[2], b0[2], b1[2] = (0, 0), (0, 0), (2, 2), (2, 2)
    pA, pB = shortest_segments_between_segments(a0, a1, b0, b1)
    assert np.all(np.isfinite(pA)) and np.all(np.isfinite(pB))
    for i in range(len(a0)):
        qA, qB = shortest_segment_between_segments(a0[i], a1[i], b0[i], b1[i])
        np.testing.assert_allclose(pA[i], qA, atol=1e-4)
        np.testing.assert_allclose(pB[i], qB, atol=1e-4)


def test_eigen_decompositions_match_scalar(rng):
    M = rng.randn(30, 2, 2)
    M = M + np.swapaxes(M, 1, 2)
    M[0] = [[1, 0], [0, 4]]
    vals, vecs = eigen_decompositions(M)
    assert vals.shape == (30, 2) and vecs.shape == (30, 2, 2)
    for i in range(len(M)):
        ref_vals, ref_vecs = eigen_decomposition(M[i])
        np.testing.assert_allclose(vals[i], ref_vals, atol=1e-4)
        np.testing.assert_allclose(vecs[i], ref_vecs, atol=1e-5)


def test_polar_decompositions_match_scalar(rng):
    A = rng.randn(30, 2, 2)
    flip = np.linalg.det(A) < 0
    A[flip, :, 0] *= -1
    U, P = polar_decompositions(A)
    for i in range(len(A)):
        ref_u, ref_p = polar_decomposition(A[i])
        np.testing.assert_allclose(U[i], ref_u, atol=1e-4)
        np.testing.assert_allclose(P[i], ref_p, atol=1e-4)
        np.testing.assert_allclose(U[i] @ P[i], A[i], atol=1e-4)


def test_batch_shape_validation():
    with pytest.raises(ValueError):
        eigen_decompositions(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        closest_points_on_segments(np.zeros((3, 2)), np.zeros((3, 2)), np.zeros((2, 2)))


def test_output_dtype_follows_config():
    cfg = KernelConfig(dtype=np.float64)
    vals, vecs = eigen_decompositions(np.eye(2)[None], config=cfg)
    assert vals.dtype == np.float64 and vecs.dtype == np.float64
    res = point_segment_continuous_intersections(*swept_columns(SWEPT_ROWS[:1]), config=cfg)
    assert res.t.dtype == np.float64
