"""Two-body orbit example with diagnostics."""

from __future__ import annotations

import numpy as np

from nbody2d.core.diagnostics import compute_diagnostics
from nbody2d.core.engine import step
from nbody2d.core.params import CollisionMode, StepParameters
from nbody2d.scenarios import two_body_circular


if __name__ == "__main__":
    params = StepParameters(
        G=1.0,
        fixed_dt=0.001,
        max_substep=0.001,
        collisions=CollisionMode.OFF,
    )
    bodies = two_body_circular(G=params.G)

    steps = 10_000
    report_every = 500

    r = np.linalg.norm(bodies.pos[1] - bodies.pos[0])
    r_min = r
    r_max = r
    e0 = compute_diagnostics(bodies, params.G, params.eps2).total

    for i in range(1, steps + 1):
        step(bodies, params)
        r = np.linalg.norm(bodies.pos[1] - bodies.pos[0])
        r_min = min(r_min, r)
        r_max = max(r_max, r)

        if i % report_every == 0:
            d = compute_diagnostics(bodies, params.G, params.eps2)
            print(
                f"step {i:5d} | r_min={r_min:.6f} r_max={r_max:.6f} | "
                f"|p|={np.linalg.norm(d.momentum):.6e} | dE={d.total - e0:.6e}"
            )
