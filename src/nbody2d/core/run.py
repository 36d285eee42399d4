"""Simulation run loop with optional sampling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .diagnostics.bodies import compute_diagnostics
from .engine import step
from .params import StepParameters
from .state.bodies import BodySet


@dataclass(slots=True)
class RunResult:
    final_state: BodySet
    steps_taken: int
    time: np.ndarray | None = None
    energy: np.ndarray | None = None
    momentum: np.ndarray | None = None
    center_of_mass: np.ndarray | None = None
    count: np.ndarray | None = None
    ok: bool = True


def run(
    bodies: BodySet,
    params: StepParameters,
    steps: int,
    sample_every: int | None = None,
    callback: Callable[[int, BodySet], None] | None = None,
    stop_on_divergence: bool = False,
) -> RunResult:
    """Take ``steps`` fixed steps, sampling diagnostics every ``sample_every``."""
    if sample_every is not None and sample_every <= 0:
        raise ValueError("sample_every must be > 0")
    if steps < 0:
        raise ValueError("steps must be >= 0")

    times: list[float] = []
    energy: list[float] = []
    momentum: list[np.ndarray] = []
    com: list[np.ndarray] = []
    count: list[int] = []
    elapsed = 0.0
    ok = True

    def sample() -> None:
        d = compute_diagnostics(bodies, params.G, params.eps2)
        times.append(elapsed)
        energy.append(d.total)
        momentum.append(d.momentum)
        com.append(d.center_of_mass)
        count.append(len(bodies))

    if sample_every is not None:
        sample()

    taken = 0
    for i in range(1, steps + 1):
        report = step(bodies, params)
        elapsed += report.dt
        taken = i
        if callback is not None:
            callback(i, bodies)
        if sample_every is not None and i % sample_every == 0:
            sample()
        if stop_on_divergence and not compute_diagnostics(bodies, params.G, params.eps2).ok:
            ok = False
            break

    if sample_every is None:
        return RunResult(final_state=bodies, steps_taken=taken, ok=ok)

    return RunResult(
        final_state=bodies,
        steps_taken=taken,
        time=np.asarray(times, dtype=np.float64),
        energy=np.asarray(energy, dtype=np.float64),
        momentum=np.asarray(momentum, dtype=np.float64).reshape(-1, 2),
        center_of_mass=np.asarray(com, dtype=np.float64).reshape(-1, 2),
        count=np.asarray(count, dtype=np.int64),
        ok=ok,
    )
