"""Vector utilities for NumPy arrays.

All vectors are expected to be shaped (..., 2) and stored as float64.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


ArrayF = NDArray[np.float64]


def norm(v: ArrayF, axis: int = -1) -> ArrayF:
    """Return the L2 norm along an axis."""
    return np.linalg.norm(v, axis=axis)


def unit(v: ArrayF, axis: int = -1) -> ArrayF:
    """Return unit vectors with safe handling of zero vectors."""
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v, axis=axis, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        u = np.where(n > 0.0, v / n, 0.0)
    return u


def dot(a: ArrayF, b: ArrayF) -> ArrayF:
    """Row-wise dot product."""
    return np.sum(np.asarray(a) * np.asarray(b), axis=-1)


def clamp_length(v: ArrayF, max_len: float) -> ArrayF:
    """Rescale vectors longer than ``max_len`` down to ``max_len``.

    Direction is preserved. ``max_len <= 0`` leaves ``v`` untouched.
    """
    v = np.asarray(v, dtype=np.float64)
    if max_len <= 0.0:
        return v
    n = np.linalg.norm(v, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.where(n > max_len, max_len / n, 1.0)
    return v * scale
