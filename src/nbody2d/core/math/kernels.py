"""Softened gravity kernel shared by the direct and tree evaluators."""

from __future__ import annotations

import numpy as np


def softened_inv_r3(dx, dy, eps2: float):
    """Return ``(dx^2 + dy^2 + eps2) ** -1.5``.

    ``eps2`` is added in quadrature before the inverse cube. A pair at zero
    softened distance has no defined direction and yields 0.
    """
    r2 = dx * dx + dy * dy + eps2
    if isinstance(r2, np.ndarray):
        out = np.zeros_like(r2)
        np.power(r2, -1.5, out=out, where=r2 > 0.0)
        return out
    if r2 <= 0.0:
        return 0.0
    return r2 ** -1.5
