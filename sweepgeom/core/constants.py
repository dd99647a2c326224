"""Central numerical tolerances and the working float type.

Tiny thresholds used across the kernels live here so they can be tuned
consistently and referenced without scattering literals.
"""
from __future__ import annotations

import numpy as np

# Working precision for vectors, matrices and scalar results
FLOAT = np.float32

# Geometry tolerances
EPS_PARALLEL: float = 1e-9                          # relative Gram-determinant threshold (near-parallel segments)
FLOAT_EPSILON: float = float(np.finfo(np.float32).eps)  # degenerate simplex threshold for *_safe helpers
FLOAT_TINY: float = float(np.finfo(np.float32).tiny)     # smallest normal float32, floor for safe normalization

# Rounding utility bounds
ROUND_MAX_DIGITS: int = 9

__all__ = [
    'FLOAT',
    'EPS_PARALLEL',
    'FLOAT_EPSILON',
    'FLOAT_TINY',
    'ROUND_MAX_DIGITS',
]
