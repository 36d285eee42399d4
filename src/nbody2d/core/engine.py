"""Step entrypoints: collisions, forces, then integration."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .collisions import CollisionReport, resolve_collisions
from .diagnostics.bodies import compute_diagnostics
from .forces.nbody_gravity import NBodyGravity
from .integrators import advance, make_integrator
from .params import StepParameters
from .state.bodies import BodySet


__all__ = ["StepReport", "compute_accelerations", "compute_diagnostics", "step"]


@dataclass(slots=True)
class StepReport:
    dt: float
    substeps: int
    collisions: CollisionReport = field(default_factory=CollisionReport)


def compute_accelerations(bodies: BodySet, params: StepParameters) -> np.ndarray:
    """Refresh ``bodies.acc`` from current positions without advancing time."""
    return NBodyGravity.from_params(params).apply(bodies)


def step(
    bodies: BodySet,
    params: StepParameters,
    elapsed: float | None = None,
) -> StepReport:
    """Advance ``bodies`` in place by one logical step.

    ``elapsed`` is the wall-clock frame time; it is only used when
    ``params.use_fixed_dt`` is False.
    """
    collisions = resolve_collisions(bodies, params.collisions, params.density)
    model = NBodyGravity.from_params(params)
    model.apply(bodies)
    dt_eff = params.effective_dt(elapsed)
    n = advance(bodies, model, make_integrator(params.integrator), dt_eff, params)
    return StepReport(dt=dt_eff, substeps=n, collisions=collisions)
