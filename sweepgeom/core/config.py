"""Configuration for the batched query layer."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from .constants import EPS_PARALLEL, FLOAT


@dataclass(frozen=True)
class KernelConfig:
    """Tuning knobs for ``sweepgeom.core.vectorized_ops``.

    Attributes
    ----------
    numba_min_batch : int
        Smallest batch that is dispatched to the compiled numba kernel;
        smaller batches loop over the scalar implementation.
    parallel_rel_tol : float
        Relative Gram-determinant threshold under which two segments are
        treated as parallel by the batched shortest-segment query.
    dtype : numpy dtype
        Floating dtype of batch outputs.
    """
    numba_min_batch: int = 64
    parallel_rel_tol: float = EPS_PARALLEL
    dtype: Any = field(default=FLOAT)

    def with_overrides(self, **overrides: Any) -> 'KernelConfig':
        return replace(self, **overrides)

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)


DEFAULT_CONFIG = KernelConfig()

__all__ = ['KernelConfig', 'DEFAULT_CONFIG']
