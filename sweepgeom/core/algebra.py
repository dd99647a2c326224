"""Vector algebra and closed-form 2x2 matrix solvers.

Vectors are ``(2,)`` float32 arrays and matrices ``(2, 2)`` float32 arrays
indexed ``[row, col]``. Every function accepts array-likes and returns fresh
arrays; nothing here keeps state between calls.
"""
from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .constants import FLOAT

__all__ = [
    'EigenResult', 'PolarResult',
    'as_vector', 'as_matrix',
    'cross', 'angle', 'outer_product', 'max3', 'min3',
    'right', 'up', 'rotate90_ccw', 'rotate90_cw', 'to_diag', 'transform',
    'determinant', 'eigen_decomposition', 'polar_unitary', 'polar_decomposition',
]


class EigenResult(NamedTuple):
    eigval: np.ndarray
    eigvec: np.ndarray


class PolarResult(NamedTuple):
    u: np.ndarray
    p: np.ndarray


def as_vector(a) -> np.ndarray:
    return np.asarray(a, dtype=FLOAT).reshape(2)


def as_matrix(m) -> np.ndarray:
    return np.asarray(m, dtype=FLOAT).reshape(2, 2)


def cross(a, b):
    """Two-dimensional cross product ``a.x*b.y - a.y*b.x``.

    Zero for parallel or zero-length vectors.
    """
    a = as_vector(a); b = as_vector(b)
    return a[0] * b[1] - a[1] * b[0]


def angle(a, b):
    """Signed angle (radians) from ``a`` to ``b`` in ``(-pi, pi]``.

    Zero when either vector has zero length (``atan2(0, 0)``).
    """
    a = as_vector(a); b = as_vector(b)
    return np.arctan2(cross(a, b), np.dot(a, b))


def outer_product(a, b) -> np.ndarray:
    """``a @ b.T`` for column vectors ``a`` and ``b``."""
    return np.outer(as_vector(a), as_vector(b))


def max3(a, b, c) -> np.ndarray:
    return np.maximum(np.maximum(as_vector(a), as_vector(b)), as_vector(c))


def min3(a, b, c) -> np.ndarray:
    return np.minimum(np.minimum(as_vector(a), as_vector(b)), as_vector(c))


def right() -> np.ndarray:
    return np.array([1.0, 0.0], dtype=FLOAT)


def up() -> np.ndarray:
    return np.array([0.0, 1.0], dtype=FLOAT)


def rotate90_ccw(a) -> np.ndarray:
    a = as_vector(a)
    return np.array([-a[1], a[0]], dtype=FLOAT)


def rotate90_cw(a) -> np.ndarray:
    a = as_vector(a)
    return np.array([a[1], -a[0]], dtype=FLOAT)


def to_diag(a) -> np.ndarray:
    """Diagonal matrix with ``a`` on the diagonal."""
    return np.diag(as_vector(a))


def transform(M, A) -> np.ndarray:
    """Congruence transform ``A @ M @ A.T``."""
    M = as_matrix(M); A = as_matrix(A)
    return A @ M @ A.T


def determinant(A):
    A = as_matrix(A)
    return A[0, 0] * A[1, 1] - A[0, 1] * A[1, 0]


def _cofactor(A) -> np.ndarray:
    # det(A) * inverse(A.T) without the division, so singular input never raises
    return np.array([[A[1, 1], -A[1, 0]],
                     [-A[0, 1], A[0, 0]]], dtype=FLOAT)


def eigen_decomposition(M) -> EigenResult:
    """Solve the eigen problem of a symmetric 2x2 matrix in closed form.

    Only ``M[0, 0]``, ``M[1, 1]`` and ``M[0, 1]`` are read; symmetry is assumed.

    Returns
    -------
    EigenResult
        ``eigval`` is ``0.5 * (p1 + p2, p1 - p2)`` where ``p2`` carries the
        sign of ``M[0, 0] - M[1, 1]`` (zero counts as positive). The pair is
        NOT sorted. ``eigvec`` holds the matching unit eigenvectors as
        columns: the rotation by
        ``0.5 * atan2(2*M[0, 1], M[0, 0] - M[1, 1])``, with both arguments
        negated on the negative branch so the columns follow the eigenvalue
        order. Equal eigenvalues with zero off-diagonal give the identity axes.
    """
    M = as_matrix(M)
    a00 = M[0, 0]
    a11 = M[1, 1]
    a01 = M[0, 1]

    d = a00 - a11
    p1 = a00 + a11
    sign = FLOAT(1.0) if d >= 0 else FLOAT(-1.0)
    p2 = sign * np.sqrt(d * d + 4 * a01 * a01)
    eigval = FLOAT(0.5) * np.array([p1 + p2, p1 - p2], dtype=FLOAT)

    # same sign as p2 so column i pairs with eigval[i]
    phi = FLOAT(0.5) * np.arctan2(sign * 2 * a01, sign * d)
    c = np.cos(phi)
    s = np.sin(phi)
    eigvec = np.array([[c, -s],
                       [s, c]], dtype=FLOAT)
    return EigenResult(eigval, eigvec)


def polar_unitary(A) -> np.ndarray:
    """Unitary factor ``U`` of the polar decomposition ``A = U @ P``.

    ``U0 = A + det(A) * inv(A.T)`` rescaled by ``1/sqrt(|det(U0)|)``. ``A``
    must be invertible; singular input yields non-finite values and is not
    checked.
    """
    A = as_matrix(A)
    U0 = A + _cofactor(A)
    with np.errstate(divide='ignore', invalid='ignore'):
        scale = FLOAT(1.0) / np.sqrt(np.abs(determinant(U0)))
        return (U0 * scale).astype(FLOAT)


def polar_decomposition(A) -> PolarResult:
    """Polar decomposition ``A = U @ P`` with ``P = U.T @ A`` symmetric PSD."""
    A = as_matrix(A)
    U = polar_unitary(A)
    with np.errstate(invalid='ignore'):
        P = U.T @ A
    return PolarResult(U, P)
