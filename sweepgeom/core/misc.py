"""Index helpers and value rounding."""
from __future__ import annotations

import numpy as np

from .constants import FLOAT, ROUND_MAX_DIGITS

__all__ = ['bilateral_interleaving_id', 'triangular_index', 'round_to']


def bilateral_interleaving_id(i: int, length: int) -> int:
    """Map ``0, 1, 2, 3, ...`` to ``0, length-1, 1, length-2, ...`` (alternating from both ends)."""
    return i >> 1 if (i & 1) == 0 else length - 1 - (i >> 1)


def triangular_index(i: int, j: int) -> int:
    """Slot of entry ``(i, j)`` in packed lower-triangular storage, row by row.

    Symmetric in its arguments, so ``(i, j)`` and ``(j, i)`` share a slot.
    """
    if i < j:
        i, j = j, i
    return i * (i + 1) // 2 + j


def round_to(value, digits: int = 0):
    """Round ``value`` (scalar or array-like) to ``digits`` decimals in float32.

    ``digits`` must lie in ``[0, ROUND_MAX_DIGITS]``; the range is only
    checked when assertions are enabled (not under ``python -O``).
    """
    if __debug__ and not 0 <= digits <= ROUND_MAX_DIGITS:
        raise ValueError(f"digits must be within [0, {ROUND_MAX_DIGITS}], got {digits}")
    scale = FLOAT(10.0 ** digits)
    out = np.round(np.asarray(value, dtype=FLOAT) * scale) / scale
    return out[()]
