"""Conservation diagnostics for a body set.

Every body is included, valid or not: a poisoned state must show up here.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..state.bodies import BodySet


@dataclass(frozen=True, slots=True)
class Diagnostics:
    kinetic: float
    potential: float
    total: float
    momentum: np.ndarray
    center_of_mass: np.ndarray
    total_mass: float
    ok: bool


def total_mass(bodies: BodySet) -> float:
    if len(bodies) == 0:
        return 0.0
    return float(np.sum(bodies.mass))


def center_of_mass(bodies: BodySet) -> np.ndarray:
    """Mass-weighted mean position; the origin for an empty or massless set."""
    m = bodies.mass
    total = np.sum(m)
    if len(bodies) == 0 or total == 0.0:
        return np.zeros(2, dtype=np.float64)
    return np.sum(bodies.pos * m[:, np.newaxis], axis=0) / total


def linear_momentum(bodies: BodySet) -> np.ndarray:
    if len(bodies) == 0:
        return np.zeros(2, dtype=np.float64)
    return np.sum(bodies.vel * bodies.mass[:, np.newaxis], axis=0)


def kinetic_energy(bodies: BodySet) -> float:
    if len(bodies) == 0:
        return 0.0
    v2 = np.sum(bodies.vel**2, axis=1)
    return float(0.5 * np.sum(bodies.mass * v2))


def _pair_potentials(bodies: BodySet, G: float, eps2: float) -> np.ndarray:
    n = len(bodies)
    if n < 2:
        return np.zeros(0, dtype=np.float64)
    i, j = np.triu_indices(n, k=1)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        delta = bodies.pos[j] - bodies.pos[i]
        dist = np.sqrt(np.sum(delta * delta, axis=-1) + eps2)
        return -G * bodies.mass[i] * bodies.mass[j] / dist


def potential_energy_gravity(bodies: BodySet, G: float, softening: float = 0.0) -> float:
    with np.errstate(invalid="ignore", over="ignore"):
        return float(np.sum(_pair_potentials(bodies, G, softening * softening)))


def total_energy_gravity(bodies: BodySet, G: float, softening: float = 0.0) -> float:
    return kinetic_energy(bodies) + potential_energy_gravity(bodies, G, softening)


def _running_ok(terms: np.ndarray) -> bool:
    # Check every partial sum so one bad term cannot hide behind a later one.
    if terms.size == 0:
        return True
    with np.errstate(invalid="ignore", over="ignore"):
        return bool(np.isfinite(np.cumsum(terms, axis=0)).all())


def compute_diagnostics(bodies: BodySet, G: float, eps2: float) -> Diagnostics:
    """Energy, momentum and center of mass; ``ok`` is False on any non-finite sum."""
    n = len(bodies)
    if n == 0:
        zero = np.zeros(2, dtype=np.float64)
        return Diagnostics(0.0, 0.0, 0.0, zero, zero.copy(), 0.0, True)

    m = bodies.mass
    with np.errstate(invalid="ignore", over="ignore"):
        ke_terms = 0.5 * m * np.sum(bodies.vel**2, axis=1)
        p_terms = bodies.vel * m[:, np.newaxis]
        c_terms = bodies.pos * m[:, np.newaxis]
    pe_terms = _pair_potentials(bodies, G, eps2)

    ok = all(_running_ok(t) for t in (ke_terms, p_terms, c_terms, m, pe_terms))
    with np.errstate(invalid="ignore", over="ignore"):
        kinetic = float(np.sum(ke_terms))
        potential = float(np.sum(pe_terms))
        momentum = np.sum(p_terms, axis=0)
        mass = float(np.sum(m))
        moment = np.sum(c_terms, axis=0)
    total = kinetic + potential
    ok = ok and np.isfinite(total)
    if mass > 0.0:
        com = moment / mass
    else:
        com = np.zeros(2, dtype=np.float64)
    ok = bool(ok and np.isfinite(com).all())
    return Diagnostics(kinetic, potential, total, momentum, com, mass, ok)
