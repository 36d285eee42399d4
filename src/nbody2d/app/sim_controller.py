"""Headless simulation controller for interactive front ends."""

from __future__ import annotations

import logging

import numpy as np

from ..core.diagnostics.bodies import Diagnostics, compute_diagnostics
from ..core.engine import StepReport, compute_accelerations, step
from ..core.params import StepParameters
from ..core.state.bodies import BodySet


logger = logging.getLogger(__name__)


class SimulationController:
    """Owns a body set between frames and pauses itself on divergence."""

    def __init__(self, bodies: BodySet | None = None, params: StepParameters | None = None) -> None:
        self.params = params if params is not None else StepParameters()
        self.bodies = bodies if bodies is not None else BodySet.empty()
        self.initial_bodies = self.bodies.copy()
        self.paused = False
        self.current_step = 0
        self.sim_time = 0.0
        self.last_report: StepReport | None = None
        self.last_diagnostics: Diagnostics | None = None

    def load(self, bodies: BodySet, params: StepParameters | None = None) -> None:
        self.bodies = bodies
        if params is not None:
            self.params = params
        self.initial_bodies = bodies.copy()
        self.current_step = 0
        self.sim_time = 0.0
        self.last_report = None
        self.last_diagnostics = None

    def reset(self) -> None:
        self.bodies = self.initial_bodies.copy()
        self.current_step = 0
        self.sim_time = 0.0
        self.last_report = None
        self.last_diagnostics = None

    def advance(self, elapsed: float | None = None) -> bool:
        """Run one frame unless paused. Returns True when a step was taken."""
        if self.paused:
            return False
        self._step(elapsed)
        return True

    def single_step(self) -> None:
        """Take one fixed step regardless of pause state."""
        self._step(None, fixed=True)

    def _step(self, elapsed: float | None, fixed: bool = False) -> None:
        params = self.params
        if fixed and not params.use_fixed_dt:
            params = params.replace(use_fixed_dt=True)
        self.last_report = step(self.bodies, params, elapsed)
        self.current_step += 1
        self.sim_time += self.last_report.dt
        diag = self.diagnostics()
        if not diag.ok and not self.paused:
            logger.warning(
                "non-finite diagnostics at step %d (t=%g); pausing",
                self.current_step,
                self.sim_time,
            )
            self.paused = True

    def diagnostics(self) -> Diagnostics:
        self.last_diagnostics = compute_diagnostics(self.bodies, self.params.G, self.params.eps2)
        return self.last_diagnostics

    def accelerations(self) -> np.ndarray:
        """Current accelerations, e.g. for drawing force arrows."""
        return compute_accelerations(self.bodies, self.params).copy()

    def positions(self) -> np.ndarray:
        return self.bodies.pos.astype(np.float32, copy=True)
