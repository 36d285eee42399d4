"""2D gravitational N-body engine."""

from __future__ import annotations

__version__ = "0.1.0"

from .core.diagnostics import Diagnostics, compute_diagnostics  # noqa: E402,F401
from .core.engine import StepReport, compute_accelerations, step  # noqa: E402,F401
from .core.params import (  # noqa: E402,F401
    CollisionMode,
    IntegratorKind,
    StepParameters,
    params_from_dict,
)
from .core.state import BodySet  # noqa: E402,F401
