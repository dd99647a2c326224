"""Continuous (swept) point-vs-segment intersection.

A point ``p`` and the two endpoints ``a``, ``b`` of a segment move with
constant velocity over normalized time ``t`` in ``[0, 1]``:

    p(t) = p0 + t (p1 - p0),  a(t) = a0 + t (a1 - a0),  b(t) = b0 + t (b1 - b0)

The point touches the segment when ``p(t) - a(t)`` and ``b(t) - a(t)`` are
collinear, i.e. when their 2D cross product vanishes. Writing
``q(t) = q0 + t dq = p(t) - a(t)`` and ``r(t) = r0 + t dr = b(t) - a(t)``::

    cross(q, r) = A t**2 + B t + C
    A = cross(dq, dr)
    B = cross(q0, dr) + cross(dq, r0)
    C = cross(q0, r0)

Coefficients are classified into an explicit :class:`IntersectionCase` and
each case has its own solver, so the degenerate branches stay auditable.
Comparisons of the coefficients against zero are exact.
"""
from __future__ import annotations

import enum
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .algebra import as_vector, cross
from .constants import FLOAT

__all__ = [
    'ContinuousHit', 'IntersectionCase', 'RelativeMotion',
    'relative_motion', 'motion_coefficients', 'classify_motion',
    'point_segment_continuous_intersection',
]


class ContinuousHit(NamedTuple):
    """Result of a swept query.

    When ``hit`` is False, ``t`` and ``s`` are zero and carry no meaning.
    When ``hit`` is True, ``t`` lies in ``[0, 1]`` and ``s`` is the point's
    position along the segment at that time (``0`` at ``a``, ``1`` at ``b``).
    """
    hit: bool
    t: np.float32
    s: np.float32


MISS = ContinuousHit(False, FLOAT(0.0), FLOAT(0.0))


class IntersectionCase(enum.Enum):
    QUADRATIC = 0          # A != 0
    LINEAR = 1             # A == 0, B != 0
    COLLINEAR_IN_TIME = 2  # A == B == C == 0
    NO_SOLUTION = 3        # A == B == 0, C != 0


class RelativeMotion(NamedTuple):
    """Positions and velocities of the point relative to each endpoint."""
    q0: np.ndarray  # p0 - a0
    dq: np.ndarray  # velocity of p relative to a
    r0: np.ndarray  # b0 - a0
    dr: np.ndarray  # velocity of b relative to a
    w0: np.ndarray  # p0 - b0
    dw: np.ndarray  # velocity of p relative to b


def relative_motion(p0, p1, a0, a1, b0, b1) -> RelativeMotion:
    p0 = as_vector(p0); p1 = as_vector(p1)
    a0 = as_vector(a0); a1 = as_vector(a1)
    b0 = as_vector(b0); b1 = as_vector(b1)
    vp = p1 - p0
    va = a1 - a0
    vb = b1 - b0
    return RelativeMotion(
        q0=p0 - a0, dq=vp - va,
        r0=b0 - a0, dr=vb - va,
        w0=p0 - b0, dw=vp - vb,
    )


def _coefficients(m: RelativeMotion) -> Tuple[np.float32, np.float32, np.float32]:
    A = cross(m.dq, m.dr)
    B = cross(m.q0, m.dr) + cross(m.dq, m.r0)
    C = cross(m.q0, m.r0)
    return A, B, C


def motion_coefficients(p0, p1, a0, a1, b0, b1) -> Tuple[np.float32, np.float32, np.float32]:
    """Coefficients ``(A, B, C)`` of the collinearity polynomial in ``t``."""
    return _coefficients(relative_motion(p0, p1, a0, a1, b0, b1))


def classify_motion(A, B, C) -> IntersectionCase:
    if A != 0:
        return IntersectionCase.QUADRATIC
    if B != 0:
        return IntersectionCase.LINEAR
    if C == 0:
        return IntersectionCase.COLLINEAR_IN_TIME
    return IntersectionCase.NO_SOLUTION


def _dot2(a, b):
    # mirrors the arithmetic of the numba kernel in vectorized_ops operation for operation
    return a[0] * b[0] + a[1] * b[1]


def _in_unit(x) -> bool:
    return bool(0 <= x <= 1)


def _segment_param(m: RelativeMotion, t):
    """``s(t) = dot(q(t), r(t)) / |r(t)|**2``; non-finite if the segment collapsed at ``t``."""
    q = m.q0 + t * m.dq
    r = m.r0 + t * m.dr
    with np.errstate(divide='ignore', invalid='ignore'):
        return _dot2(q, r) / _dot2(r, r)


def _accept(t, s) -> ContinuousHit:
    return ContinuousHit(True, FLOAT(t), FLOAT(s))


def _accept_if_on_segment(m: RelativeMotion, t) -> Optional[ContinuousHit]:
    if not _in_unit(t):
        return None
    s = _segment_param(m, t)
    if not _in_unit(s):
        return None
    return _accept(t, s)


def _solve_quadratic(m: RelativeMotion, A, B, C) -> ContinuousHit:
    disc = B * B - 4 * A * C
    if disc < 0:
        return MISS
    if disc == 0:
        # Tangential contact: the time must be in range, the segment
        # parameter is reported as-is.
        t = -B / (2 * A)
        if not _in_unit(t):
            return MISS
        return _accept(t, _segment_param(m, t))
    sq = np.sqrt(disc)
    t0 = (-B - sq) / (2 * A)
    t1 = (-B + sq) / (2 * A)
    if t0 > t1:
        t0, t1 = t1, t0
    for t in (t0, t1):
        hit = _accept_if_on_segment(m, t)
        if hit is not None:
            return hit
    return MISS


def _solve_linear(m: RelativeMotion, A, B, C) -> ContinuousHit:
    hit = _accept_if_on_segment(m, -C / B)
    return MISS if hit is None else hit


def _closest_approach_time(offset: np.ndarray, velocity: np.ndarray) -> Optional[np.float32]:
    """Time minimizing ``|offset + t * velocity|``; None when the relative velocity is zero."""
    vv = _dot2(velocity, velocity)
    if vv == 0:
        return None
    return -_dot2(offset, velocity) / vv


def _solve_collinear_in_time(m: RelativeMotion, A, B, C) -> ContinuousHit:
    # The three points stay on one moving line; contact happens when p passes
    # an endpoint, so each endpoint gets its own 1-D closest-approach time.
    t0 = _closest_approach_time(m.q0, m.dq)
    t1 = _closest_approach_time(m.w0, m.dw)
    hit_a = t0 is not None and _in_unit(t0)
    hit_b = t1 is not None and _in_unit(t1)
    if hit_a and hit_b:
        return _accept(t0, 0.0) if t0 < t1 else _accept(t1, 1.0)
    if hit_a:
        return _accept(t0, 0.0)
    if hit_b:
        return _accept(t1, 1.0)
    return MISS


def _solve_no_solution(m: RelativeMotion, A, B, C) -> ContinuousHit:
    return MISS


_SOLVERS = {
    IntersectionCase.QUADRATIC: _solve_quadratic,
    IntersectionCase.LINEAR: _solve_linear,
    IntersectionCase.COLLINEAR_IN_TIME: _solve_collinear_in_time,
    IntersectionCase.NO_SOLUTION: _solve_no_solution,
}


def point_segment_continuous_intersection(p0, p1, a0, a1, b0, b1) -> ContinuousHit:
    """Earliest time in ``[0, 1]`` at which the moving point lies on the moving segment.

    Parameters
    ----------
    p0, p1 : array-like (2,)
        Point position at ``t = 0`` and ``t = 1``.
    a0, a1 : array-like (2,)
        First segment endpoint at ``t = 0`` and ``t = 1``.
    b0, b1 : array-like (2,)
        Second segment endpoint at ``t = 0`` and ``t = 1``.

    Returns
    -------
    ContinuousHit
        ``(hit, t, s)``. Roots are accepted only with ``t`` and ``s`` in
        ``[0, 1]``, earlier root first, except for a double root of the
        quadratic (tangential contact) whose ``s`` is not range checked. In
        the collinear-in-time case ``s`` is ``0`` or ``1`` depending on which
        endpoint the point reaches first; an endpoint with zero relative
        velocity is never reported.
    """
    m = relative_motion(p0, p1, a0, a1, b0, b1)
    A, B, C = _coefficients(m)
    return _SOLVERS[classify_motion(A, B, C)](m, A, B, C)
