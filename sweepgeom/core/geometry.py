"""Closest-feature queries and static point/simplex predicates.

All functions take array-like 2D points and return float32 numpy values.
Degenerate inputs (zero-length segments, collinear triangles) are resolved by
explicit branches, never by raising.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

from .algebra import as_vector, cross
from .constants import EPS_PARALLEL, FLOAT, FLOAT_EPSILON

__all__ = [
    'closest_point_on_segment', 'shortest_segment_between_segments',
    'barycentric_segment', 'barycentric_segment_safe',
    'barycentric_triangle', 'barycentric_triangle_safe',
    'ccw', 'is_convex_quadrilateral',
    'point_inside_triangle', 'point_inside_triangle_barycentric',
    'point_line_signed_distance',
]


def _clamp01(x):
    return np.clip(x, FLOAT(0.0), FLOAT(1.0))


def _ratio(num, den):
    """``num / den``, or zero when ``den`` is exactly zero (zero-length segment)."""
    if den == 0:
        return FLOAT(0.0)
    return num / den


def closest_point_on_segment(p, a0, a1) -> np.ndarray:
    """Closest point to ``p`` on the segment ``a0``-``a1``.

    The projection parameter is clamped to ``[0, 1]`` so the result never
    leaves the segment. A segment of exactly zero length returns ``a0``.
    """
    p = as_vector(p); a0 = as_vector(a0); a1 = as_vector(a1)
    d = a1 - a0
    norm = np.dot(d, d)
    if norm == 0:
        return a0.copy()
    u = _clamp01(np.dot(p - a0, d) / norm)
    return a0 + u * d


def shortest_segment_between_segments(a0, a1, b0, b1) -> Tuple[np.ndarray, np.ndarray]:
    """Shortest connecting segment ``(pA, pB)`` between ``a0-a1`` and ``b0-b1``.

    Solves the 2x2 Gram system for the unconstrained closest parameters
    ``s, t``, clamps them, then re-derives each parameter from the other
    clamped one and clamps again. The second pass is what keeps both points
    on their segments when the first clamp moved one of them.

    When ``det = uu*vv - uv**2`` is at most ``EPS_PARALLEL * uu * vv``
    (near-parallel, or a zero-length segment) the first pass falls back to a
    1-D projection ``s = clamp(ru/uu)``, ``t = 0``.
    """
    a0 = as_vector(a0); a1 = as_vector(a1)
    b0 = as_vector(b0); b1 = as_vector(b1)
    r = b0 - a0
    u = a1 - a0
    v = b1 - b0
    ru = np.dot(r, u)
    rv = np.dot(r, v)
    uu = np.dot(u, u)
    uv = np.dot(u, v)
    vv = np.dot(v, v)

    det = uu * vv - uv * uv
    if det <= EPS_PARALLEL * uu * vv:
        s = _clamp01(_ratio(ru, uu))
        t = FLOAT(0.0)
    else:
        s = _clamp01((ru * vv - rv * uv) / det)
        t = _clamp01((ru * uv - rv * uu) / det)

    S = _clamp01(_ratio(t * uv + ru, uu))
    T = _clamp01(_ratio(s * uv - rv, vv))

    pA = a0 + S * u
    pB = b0 + T * v
    return pA, pB


def barycentric_segment(a, b, p) -> np.ndarray:
    """Coordinates ``(t, 1 - t)`` of ``p`` w.r.t. segment ``a``-``b`` (``t = 1`` at ``a``).

    Not clamped; a zero-length segment gives non-finite output (see
    :func:`barycentric_segment_safe`).
    """
    a = as_vector(a); b = as_vector(b); p = as_vector(p)
    ab = a - b
    with np.errstate(divide='ignore', invalid='ignore'):
        t = np.dot(p - b, ab) / np.dot(ab, ab)
    return np.array([t, 1 - t], dtype=FLOAT)


def barycentric_segment_safe(a, b, p, default=(0.0, 0.0)) -> np.ndarray:
    a = as_vector(a); b = as_vector(b)
    ab = a - b
    if np.dot(ab, ab) <= FLOAT_EPSILON:
        return as_vector(default)
    return barycentric_segment(a, b, p)


def barycentric_triangle(a, b, c, p) -> np.ndarray:
    """Barycentric weights ``(u, v, w)`` of ``p`` in triangle ``(a, b, c)``."""
    a = as_vector(a); b = as_vector(b); c = as_vector(c); p = as_vector(p)
    v0 = b - a
    v1 = c - a
    v2 = p - a
    with np.errstate(divide='ignore', invalid='ignore'):
        den_inv = FLOAT(1.0) / cross(v0, v1)
        v = den_inv * cross(v2, v1)
        w = den_inv * cross(v0, v2)
    return np.array([1 - v - w, v, w], dtype=FLOAT)


def barycentric_triangle_safe(a, b, c, p, default=(0.0, 0.0, 0.0)) -> np.ndarray:
    a = as_vector(a); b = as_vector(b); c = as_vector(c)
    if abs(cross(b - a, c - a)) <= FLOAT_EPSILON:
        return np.asarray(default, dtype=FLOAT).reshape(3)
    return barycentric_triangle(a, b, c, p)


def ccw(a, b, c):
    """Orientation of ``(a, b, c)``: ``+1`` counter-clockwise, ``-1`` clockwise, ``0`` collinear."""
    a = as_vector(a); b = as_vector(b); c = as_vector(c)
    return np.sign(cross(b - a, c - a))


def is_convex_quadrilateral(a, b, c, d) -> bool:
    """True if quadrilateral ``(a, b, c, d)`` is strictly convex.

    Both diagonals must separate the remaining two vertices, and no vertex may
    lie on the other diagonal's line.
    """
    ac_b = ccw(a, c, b); ac_d = ccw(a, c, d)
    bd_a = ccw(b, d, a); bd_c = ccw(b, d, c)
    if ac_b == 0 or ac_d == 0 or bd_a == 0 or bd_c == 0:
        return False
    return bool(ac_b != ac_d and bd_a != bd_c)


def point_inside_triangle_barycentric(p, a, b, c) -> Tuple[bool, np.ndarray]:
    bar = barycentric_triangle(a, b, c, p)
    return bool(np.max(-bar) <= 0), bar


def point_inside_triangle(p, a, b, c) -> bool:
    """True if ``p`` lies inside or on the boundary of triangle ``(a, b, c)``."""
    inside, _ = point_inside_triangle_barycentric(p, a, b, c)
    return inside


def point_line_signed_distance(p, n, a):
    """Signed distance from ``p`` to the line through ``a`` with unit normal ``n``."""
    p = as_vector(p); n = as_vector(n); a = as_vector(a)
    return np.dot(p - a, n)
