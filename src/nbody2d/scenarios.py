"""In-memory starting configurations."""

from __future__ import annotations

import numpy as np

from .core.state.bodies import BodySet


def two_body_circular(
    G: float = 1.0,
    m: float = 1.0,
    d: float = 1.0,
    radius: float | None = None,
) -> BodySet:
    """Equal masses ``d`` apart on a shared circular orbit about the origin.

    Radii default to ``0.05 * d``; the density-derived radius would overlap
    at ``d = 1`` and merge the pair on the first step.
    """
    v = np.sqrt(G * m / (2.0 * d))
    r = 0.05 * d if radius is None else radius
    return BodySet(
        pos=[[-0.5 * d, 0.0], [0.5 * d, 0.0]],
        vel=[[0.0, v], [0.0, -v]],
        mass=[m, m],
        radius=[r, r],
    )


def central_orbiters(
    G: float = 1.0,
    central_mass: float = 4000.0,
    orbiter_mass: float = 12.0,
    offset: float = 200.0,
    center: tuple[float, float] = (640.0, 360.0),
    pinned_center: bool = False,
) -> BodySet:
    """A heavy body with two light orbiters on opposite sides."""
    cx, cy = center
    speed = np.sqrt(G * central_mass / offset)
    return BodySet(
        pos=[[cx, cy], [cx + offset, cy], [cx - offset, cy]],
        vel=[[0.0, 0.0], [0.0, speed], [0.0, -speed]],
        mass=[central_mass, orbiter_mass, orbiter_mass],
        pinned=[pinned_center, False, False],
    )


def random_cluster(
    n: int,
    seed: int = 123,
    scale: float = 1.0,
    speed: float = 0.1,
    mass_range: tuple[float, float] = (0.5, 2.0),
) -> BodySet:
    """Gaussian blob of ``n`` bodies; deterministic for a given seed."""
    if n < 0:
        raise ValueError("n must be >= 0")
    rng = np.random.default_rng(seed)
    pos = rng.normal(scale=scale, size=(n, 2))
    vel = rng.normal(scale=speed, size=(n, 2))
    mass = rng.uniform(low=mass_range[0], high=mass_range[1], size=(n,))
    return BodySet(pos=pos, vel=vel, mass=mass)


SCENARIOS = {
    "two_body": two_body_circular,
    "central": central_orbiters,
    "cluster": random_cluster,
}
