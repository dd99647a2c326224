"""Triangle primitives: signed area, circumcircle and minimal bounding circle."""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .algebra import angle, as_vector, cross
from .constants import FLOAT

__all__ = [
    'triangle_signed_area', 'triangle_signed_area2',
    'triangle_circumcenter', 'triangle_bounding_circle',
]

_RIGHT_ANGLE = FLOAT(math.pi / 2)


def triangle_signed_area2(a, b, c):
    """Twice the signed area of ``(a, b, c)``; positive when counter-clockwise."""
    a = as_vector(a); b = as_vector(b); c = as_vector(c)
    return cross(b - a, c - a)


def triangle_signed_area(a, b, c):
    return FLOAT(0.5) * triangle_signed_area2(a, b, c)


def triangle_circumcenter(a, b, c) -> Tuple[np.ndarray, np.float32]:
    """Circumcenter ``p`` and circumradius ``r`` of triangle ``(a, b, c)``.

    Collinear vertices give a non-finite center.
    """
    a = as_vector(a); b = as_vector(b); c = as_vector(c)
    a2 = np.dot(a, a)
    b2 = np.dot(b, b)
    c2 = np.dot(c, c)
    d = 2 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    num = np.array([
        a2 * (b[1] - c[1]) + b2 * (c[1] - a[1]) + c2 * (a[1] - b[1]),
        a2 * (c[0] - b[0]) + b2 * (a[0] - c[0]) + c2 * (b[0] - a[0]),
    ], dtype=FLOAT)
    with np.errstate(divide='ignore', invalid='ignore'):
        p = num / d
    return p, np.linalg.norm(p - a)


def triangle_bounding_circle(a, b, c) -> Tuple[np.ndarray, np.float32]:
    """Smallest circle ``(p, r)`` enclosing triangle ``(a, b, c)``.

    For a right or obtuse triangle this is the circle on the longest edge;
    otherwise it is the circumcircle.
    """
    a = as_vector(a); b = as_vector(b); c = as_vector(c)
    ab = b - a
    bc = c - b
    ca = a - c
    if abs(angle(ab, -ca)) >= _RIGHT_ANGLE:
        return FLOAT(0.5) * (b + c), FLOAT(0.5) * np.linalg.norm(c - b)
    if abs(angle(bc, -ab)) >= _RIGHT_ANGLE:
        return FLOAT(0.5) * (a + c), FLOAT(0.5) * np.linalg.norm(c - a)
    if abs(angle(ca, -bc)) >= _RIGHT_ANGLE:
        return FLOAT(0.5) * (a + b), FLOAT(0.5) * np.linalg.norm(b - a)
    return triangle_circumcenter(a, b, c)
