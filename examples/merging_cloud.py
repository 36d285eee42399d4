"""Inelastic merging in a cold cloud around a pinned anchor."""

from __future__ import annotations

from nbody2d.app.sim_controller import SimulationController
from nbody2d.core.params import CollisionMode, StepParameters
from nbody2d.scenarios import random_cluster


if __name__ == "__main__":
    bodies = random_cluster(60, seed=7, scale=5.0, speed=0.0)
    anchor = bodies.add(pos=(0.0, 0.0), mass=50.0, pinned=True)
    params = StepParameters(
        G=1.0,
        softening=0.1,
        fixed_dt=0.01,
        max_substep=0.0025,
        collisions=CollisionMode.MERGE,
    )
    controller = SimulationController(bodies, params)

    for frame in range(1, 2001):
        controller.advance()
        if controller.paused:
            print("paused on divergence at frame", frame)
            break
        if frame % 250 == 0:
            d = controller.diagnostics()
            idx = controller.bodies.index_of(anchor)
            print(
                f"frame {frame:4d} | bodies={len(controller.bodies):3d} "
                f"| anchor mass={controller.bodies.mass[idx]:.2f} | E={d.total:.5f}"
            )
