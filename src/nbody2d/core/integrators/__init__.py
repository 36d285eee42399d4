"""Integrator interfaces and implementations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Protocol

from ..forces.base import ForceModel
from ..math.vector import clamp_length
from ..params import IntegratorKind, StepParameters
from ..state.bodies import BodySet


logger = logging.getLogger(__name__)


class Integrator(Protocol):
    # True when step() leaves bodies.acc evaluated at the new positions.
    two_stage: ClassVar[bool]

    def step(self, bodies: BodySet, model: ForceModel, dt: float, max_speed: float = 0.0) -> None:
        """Advance movable bodies by one substep (mutating).

        ``bodies.acc`` must hold accelerations at the current positions.
        """


@dataclass(slots=True)
class SemiImplicitEuler:
    two_stage: ClassVar[bool] = False

    def step(self, bodies: BodySet, model: ForceModel, dt: float, max_speed: float = 0.0) -> None:
        m = bodies.movable_mask()
        if not m.any():
            return
        vel = bodies.vel[m] + bodies.acc[m] * dt
        vel = clamp_length(vel, max_speed)
        bodies.vel[m] = vel
        bodies.pos[m] += vel * dt


@dataclass(slots=True)
class VelocityVerlet:
    two_stage: ClassVar[bool] = True

    def step(self, bodies: BodySet, model: ForceModel, dt: float, max_speed: float = 0.0) -> None:
        m = bodies.movable_mask()
        a = bodies.acc[m]
        bodies.pos[m] += bodies.vel[m] * dt + 0.5 * a * dt * dt
        bodies.prev_acc[m] = a
        a_next = model.apply(bodies)[m]
        vel = bodies.vel[m] + 0.5 * (bodies.prev_acc[m] + a_next) * dt
        bodies.vel[m] = clamp_length(vel, max_speed)


def make_integrator(kind: IntegratorKind | str) -> Integrator:
    kind = IntegratorKind(kind)
    if kind is IntegratorKind.SEMI_IMPLICIT_EULER:
        return SemiImplicitEuler()
    return VelocityVerlet()


def advance(
    bodies: BodySet,
    model: ForceModel,
    integrator: Integrator,
    dt_eff: float,
    params: StepParameters,
) -> int:
    """Integrate ``dt_eff`` in equal substeps and return the substep count.

    Expects ``bodies.acc`` to be current on entry.
    """
    n_steps, dt_sub = params.substeps(dt_eff)
    if dt_sub <= 0.0:
        return 0
    logger.debug("advancing dt=%g in %d substeps of %g", dt_eff, n_steps, dt_sub)
    for k in range(n_steps):
        if k > 0 and not integrator.two_stage:
            model.apply(bodies)
        integrator.step(bodies, model, dt_sub, params.max_speed)
    return n_steps
