"""Barnes-Hut cluster example: tree vs direct force error, then a short run."""

from __future__ import annotations

import numpy as np

from nbody2d.core.diagnostics import compute_diagnostics
from nbody2d.core.forces import direct_accelerations, tree_accelerations
from nbody2d.core.params import CollisionMode, StepParameters
from nbody2d.core.run import run
from nbody2d.scenarios import random_cluster


if __name__ == "__main__":
    bodies = random_cluster(400, seed=123)
    params = StepParameters(
        G=1.0,
        softening=0.05,
        bh_threshold=100,
        bh_theta=0.5,
        fixed_dt=0.001,
        collisions=CollisionMode.OFF,
    )

    exact = direct_accelerations(bodies.pos, bodies.mass, None, params.G, params.eps2)
    for theta in (1.0, 0.5, 0.25, 0.0):
        approx = tree_accelerations(bodies.pos, bodies.mass, None, params.G, params.eps2, theta)
        err = np.linalg.norm(approx - exact, axis=1) / np.linalg.norm(exact, axis=1)
        print(f"theta={theta:4.2f} | median rel err={np.median(err):.3e} max={err.max():.3e}")

    e0 = compute_diagnostics(bodies, params.G, params.eps2).total
    result = run(bodies, params, steps=200, sample_every=50)
    print("energy samples:", result.energy)
    print("relative drift:", (result.energy[-1] - e0) / abs(e0))
    print("final momentum:", result.momentum[-1])
