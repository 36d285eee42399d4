"""Force model interface."""

from __future__ import annotations

from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..state.bodies import BodySet


ArrayF = NDArray[np.float64]


class ForceModel(Protocol):
    def accelerations(self, bodies: BodySet) -> ArrayF:
        """Return accelerations as (N, 2) without touching ``bodies``."""

    def apply(self, bodies: BodySet) -> ArrayF:
        """Write accelerations into ``bodies.acc`` and return them."""
