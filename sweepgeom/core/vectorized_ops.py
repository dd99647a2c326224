"""Batched versions of the geometric queries.

Inputs carry a leading batch axis: ``(N, 2)`` for points, ``(N, 2, 2)`` for
matrices. Closed-form queries are plain NumPy broadcasting. The swept
intersection has too much branching for that, so large batches go through a
numba kernel and small ones loop over the scalar solver (JIT dispatch costs
more than it saves below ``KernelConfig.numba_min_batch``).

The numba kernel evaluates in float32, like the scalar solver, and stores
results in the configured output dtype.
"""
from __future__ import annotations

from typing import NamedTuple, Optional, Tuple

import numba
import numpy as np

from .config import DEFAULT_CONFIG, KernelConfig
from .constants import FLOAT
from .continuous import IntersectionCase, point_segment_continuous_intersection
from .logging_utils import get_logger

log = get_logger('sweepgeom.vectorized')

__all__ = [
    'ContinuousHits',
    'cross_batch', 'closest_points_on_segments', 'shortest_segments_between_segments',
    'eigen_decompositions', 'polar_decompositions',
    'point_segment_continuous_intersections',
]


class ContinuousHits(NamedTuple):
    hit: np.ndarray  # (N,) bool
    t: np.ndarray    # (N,) float
    s: np.ndarray    # (N,) float


def _as_batch(x, name: str, shape: Tuple[int, ...], dtype) -> np.ndarray:
    arr = np.asarray(x, dtype=dtype)
    if arr.ndim != len(shape) + 1 or arr.shape[1:] != shape:
        raise ValueError(f"{name} must have shape (N, {', '.join(map(str, shape))}), got {arr.shape}")
    return arr


def _as_point_batches(names, arrays, dtype):
    out = [_as_batch(a, n, (2,), dtype) for n, a in zip(names, arrays)]
    sizes = {a.shape[0] for a in out}
    if len(sizes) > 1:
        raise ValueError(f"batch sizes differ: {dict(zip(names, (a.shape[0] for a in out)))}")
    return out


def _safe_ratio(num: np.ndarray, den: np.ndarray) -> np.ndarray:
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.where(den != 0, num / np.where(den != 0, den, 1), 0)


def _dot(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.einsum('ij,ij->i', a, b)


def cross_batch(a, b, config: Optional[KernelConfig] = None) -> np.ndarray:
    cfg = config or DEFAULT_CONFIG
    a, b = _as_point_batches(('a', 'b'), (a, b), cfg.np_dtype)
    return a[:, 0] * b[:, 1] - a[:, 1] * b[:, 0]


def closest_points_on_segments(p, a0, a1, config: Optional[KernelConfig] = None) -> np.ndarray:
    """Row-wise closest point on segment ``a0[i]-a1[i]`` to ``p[i]``; zero-length rows give ``a0[i]``."""
    cfg = config or DEFAULT_CONFIG
    p, a0, a1 = _as_point_batches(('p', 'a0', 'a1'), (p, a0, a1), cfg.np_dtype)
    d = a1 - a0
    u = np.clip(_safe_ratio(_dot(p - a0, d), _dot(d, d)), 0, 1).astype(cfg.np_dtype)
    return a0 + u[:, None] * d


def shortest_segments_between_segments(a0, a1, b0, b1, config: Optional[KernelConfig] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Row-wise shortest connecting segments ``(pA, pB)``; same branches as the scalar query."""
    cfg = config or DEFAULT_CONFIG
    a0, a1, b0, b1 = _as_point_batches(('a0', 'a1', 'b0', 'b1'), (a0, a1, b0, b1), cfg.np_dtype)
    r = b0 - a0
    u = a1 - a0
    v = b1 - b0
    ru = _dot(r, u)
    rv = _dot(r, v)
    uu = _dot(u, u)
    uv = _dot(u, v)
    vv = _dot(v, v)

    det = uu * vv - uv * uv
    parallel = det <= cfg.parallel_rel_tol * uu * vv
    s = np.where(parallel, np.clip(_safe_ratio(ru, uu), 0, 1),
                 np.clip(_safe_ratio(ru * vv - rv * uv, det), 0, 1))
    t = np.where(parallel, 0, np.clip(_safe_ratio(ru * uv - rv * uu, det), 0, 1))

    S = np.clip(_safe_ratio(t * uv + ru, uu), 0, 1).astype(cfg.np_dtype)
    T = np.clip(_safe_ratio(s * uv - rv, vv), 0, 1).astype(cfg.np_dtype)
    return a0 + S[:, None] * u, b0 + T[:, None] * v


def eigen_decompositions(M, config: Optional[KernelConfig] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Closed-form eigen problem for a stack of symmetric 2x2 matrices.

    Returns ``(eigval (N, 2), eigvec (N, 2, 2))`` with eigenvectors as columns,
    ordered exactly like :func:`sweepgeom.core.algebra.eigen_decomposition`.
    """
    cfg = config or DEFAULT_CONFIG
    M = _as_batch(M, 'M', (2, 2), cfg.np_dtype)
    a00 = M[:, 0, 0]
    a11 = M[:, 1, 1]
    a01 = M[:, 0, 1]
    d = a00 - a11
    p1 = a00 + a11
    sign = np.where(d >= 0, 1, -1).astype(cfg.np_dtype)
    p2 = sign * np.sqrt(d * d + 4 * a01 * a01)
    eigval = 0.5 * np.stack([p1 + p2, p1 - p2], axis=1)

    phi = 0.5 * np.arctan2(sign * 2 * a01, sign * d)
    c = np.cos(phi)
    s = np.sin(phi)
    eigvec = np.stack([np.stack([c, -s], axis=1),
                       np.stack([s, c], axis=1)], axis=1)
    return eigval.astype(cfg.np_dtype), eigvec.astype(cfg.np_dtype)


def polar_decompositions(A, config: Optional[KernelConfig] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Closed-form polar decomposition ``A[i] = U[i] @ P[i]`` for a stack of 2x2 matrices."""
    cfg = config or DEFAULT_CONFIG
    A = _as_batch(A, 'A', (2, 2), cfg.np_dtype)
    cof = np.empty_like(A)
    cof[:, 0, 0] = A[:, 1, 1]
    cof[:, 0, 1] = -A[:, 1, 0]
    cof[:, 1, 0] = -A[:, 0, 1]
    cof[:, 1, 1] = A[:, 0, 0]
    U0 = A + cof
    det_u0 = U0[:, 0, 0] * U0[:, 1, 1] - U0[:, 0, 1] * U0[:, 1, 0]
    with np.errstate(divide='ignore', invalid='ignore'):
        U = U0 / np.sqrt(np.abs(det_u0))[:, None, None]
        P = np.matmul(np.swapaxes(U, 1, 2), A)
    return U.astype(cfg.np_dtype), P.astype(cfg.np_dtype)


# ============================================================================
# Swept point-vs-segment kernel
# ============================================================================
# Same case analysis and float32 arithmetic as sweepgeom.core.continuous,
# operation for operation, so a row's result does not depend on which path
# the batch takes.

_F0 = np.float32(0.0)
_F1 = np.float32(1.0)
_F2 = np.float32(2.0)
_F4 = np.float32(4.0)

_QUADRATIC = IntersectionCase.QUADRATIC.value
_LINEAR = IntersectionCase.LINEAR.value
_COLLINEAR_IN_TIME = IntersectionCase.COLLINEAR_IN_TIME.value
_NO_SOLUTION = IntersectionCase.NO_SOLUTION.value


@numba.njit(cache=True, error_model='numpy')
def _classify_nb(A, B, C):
    if A != _F0:
        return _QUADRATIC
    if B != _F0:
        return _LINEAR
    if C == _F0:
        return _COLLINEAR_IN_TIME
    return _NO_SOLUTION


@numba.njit(cache=True, error_model='numpy')
def _in_unit_nb(x):
    return x >= _F0 and x <= _F1


@numba.njit(cache=True, error_model='numpy')
def _segment_param_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t):
    qx = q0x + t * dqx
    qy = q0y + t * dqy
    rx = r0x + t * drx
    ry = r0y + t * dry
    return (qx * rx + qy * ry) / (rx * rx + ry * ry)


@numba.njit(cache=True, error_model='numpy')
def _accept_if_on_segment_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t):
    if not _in_unit_nb(t):
        return False, _F0, _F0
    s = _segment_param_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t)
    if not _in_unit_nb(s):
        return False, _F0, _F0
    return True, t, s


@numba.njit(cache=True, error_model='numpy')
def _solve_quadratic_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, A, B, C):
    disc = B * B - _F4 * A * C
    if disc < _F0:
        return False, _F0, _F0
    if disc == _F0:
        t = -B / (_F2 * A)
        if not _in_unit_nb(t):
            return False, _F0, _F0
        return True, t, _segment_param_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t)
    sq = np.sqrt(disc)
    t0 = (-B - sq) / (_F2 * A)
    t1 = (-B + sq) / (_F2 * A)
    if t0 > t1:
        t0, t1 = t1, t0
    hit, t, s = _accept_if_on_segment_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t0)
    if hit:
        return hit, t, s
    return _accept_if_on_segment_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, t1)


@numba.njit(cache=True, error_model='numpy')
def _closest_approach_time_nb(ox, oy, vx, vy):
    vv = vx * vx + vy * vy
    if vv == _F0:
        return False, _F0
    return True, -(ox * vx + oy * vy) / vv


@numba.njit(cache=True, error_model='numpy')
def _solve_collinear_in_time_nb(q0x, q0y, dqx, dqy, w0x, w0y, dwx, dwy):
    ok_a, ta = _closest_approach_time_nb(q0x, q0y, dqx, dqy)
    ok_b, tb = _closest_approach_time_nb(w0x, w0y, dwx, dwy)
    hit_a = ok_a and _in_unit_nb(ta)
    hit_b = ok_b and _in_unit_nb(tb)
    if hit_a and hit_b:
        if ta < tb:
            return True, ta, _F0
        return True, tb, _F1
    if hit_a:
        return True, ta, _F0
    if hit_b:
        return True, tb, _F1
    return False, _F0, _F0


@numba.njit(cache=True, error_model='numpy')
def _psci_kernel(p0, p1, a0, a1, b0, b1, hit, t_out, s_out):
    for i in range(p0.shape[0]):
        vpx = p1[i, 0] - p0[i, 0]
        vpy = p1[i, 1] - p0[i, 1]
        vax = a1[i, 0] - a0[i, 0]
        vay = a1[i, 1] - a0[i, 1]
        vbx = b1[i, 0] - b0[i, 0]
        vby = b1[i, 1] - b0[i, 1]

        q0x = p0[i, 0] - a0[i, 0]
        q0y = p0[i, 1] - a0[i, 1]
        dqx = vpx - vax
        dqy = vpy - vay
        r0x = b0[i, 0] - a0[i, 0]
        r0y = b0[i, 1] - a0[i, 1]
        drx = vbx - vax
        dry = vby - vay

        A = dqx * dry - dqy * drx
        B = (q0x * dry - q0y * drx) + (dqx * r0y - dqy * r0x)
        C = q0x * r0y - q0y * r0x

        case = _classify_nb(A, B, C)
        if case == _QUADRATIC:
            h, t, s = _solve_quadratic_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, A, B, C)
        elif case == _LINEAR:
            h, t, s = _accept_if_on_segment_nb(q0x, q0y, dqx, dqy, r0x, r0y, drx, dry, -C / B)
        elif case == _COLLINEAR_IN_TIME:
            h, t, s = _solve_collinear_in_time_nb(
                q0x, q0y, dqx, dqy,
                p0[i, 0] - b0[i, 0], p0[i, 1] - b0[i, 1], vpx - vbx, vpy - vby)
        else:
            h, t, s = False, _F0, _F0
        hit[i] = h
        t_out[i] = t
        s_out[i] = s


def point_segment_continuous_intersections(p0, p1, a0, a1, b0, b1, config: Optional[KernelConfig] = None) -> ContinuousHits:
    """Row-wise :func:`sweepgeom.core.continuous.point_segment_continuous_intersection`.

    Both dispatch paths evaluate in float32 and give identical results for a
    row regardless of the batch it comes in.

    Returns
    -------
    ContinuousHits
        ``hit`` (N,) bool, ``t`` and ``s`` (N,) in the configured dtype; rows
        without a hit hold zeros.
    """
    cfg = config or DEFAULT_CONFIG
    names = ('p0', 'p1', 'a0', 'a1', 'b0', 'b1')
    p0, p1, a0, a1, b0, b1 = _as_point_batches(names, (p0, p1, a0, a1, b0, b1), FLOAT)
    n = p0.shape[0]
    hit = np.zeros(n, dtype=bool)
    t = np.zeros(n, dtype=cfg.np_dtype)
    s = np.zeros(n, dtype=cfg.np_dtype)
    if n == 0:
        return ContinuousHits(hit, t, s)

    if n >= cfg.numba_min_batch:
        log.debug("swept point-segment batch of %d via numba kernel", n)
        t32 = np.zeros(n, dtype=FLOAT)
        s32 = np.zeros(n, dtype=FLOAT)
        args = [np.ascontiguousarray(x, dtype=FLOAT) for x in (p0, p1, a0, a1, b0, b1)]
        _psci_kernel(*args, hit, t32, s32)
        t[:] = t32
        s[:] = s32
    else:
        log.debug("swept point-segment batch of %d via scalar loop", n)
        for i in range(n):
            res = point_segment_continuous_intersection(p0[i], p1[i], a0[i], a1[i], b0[i], b1[i])
            hit[i] = res.hit
            t[i] = res.t
            s[i] = res.s
    return ContinuousHits(hit, t, s)
