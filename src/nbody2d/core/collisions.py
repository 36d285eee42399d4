"""Overlap detection and response for bodies treated as discs.

Merge mode combines each overlapping pair into one body (mass and momentum
conserved). Elastic mode exchanges velocity along the contact normal and
pushes the pair apart. Pinned bodies act as infinite mass: they survive every
merge and are never moved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .math.vector import dot, norm, unit
from .params import CollisionMode
from .state.bodies import DEFAULT_DENSITY, BodySet, radius_from_mass


logger = logging.getLogger(__name__)

_MIN_DIST2 = 1e-20


@dataclass(slots=True)
class CollisionReport:
    merged: list[tuple[int, int]] = field(default_factory=list)
    contacts: int = 0

    @property
    def removed(self) -> list[int]:
        """Handles deleted by merges."""
        return [gone for _, gone in self.merged]


def resolve_collisions(
    bodies: BodySet,
    mode: CollisionMode | str = CollisionMode.MERGE,
    density: float = DEFAULT_DENSITY,
) -> CollisionReport:
    """Resolve every overlapping pair of valid bodies in place."""
    mode = CollisionMode(mode)
    report = CollisionReport()
    if mode is CollisionMode.OFF:
        return report
    live = np.flatnonzero(bodies.valid_mask())
    if live.size < 2:
        return report

    radius = bodies.effective_radius(density)
    alive = np.ones(len(bodies), dtype=bool)
    for a_pos, a in enumerate(live):
        for b in live[a_pos + 1:]:
            if not alive[a]:
                break
            if not alive[b]:
                continue
            dx = bodies.pos[b, 0] - bodies.pos[a, 0]
            dy = bodies.pos[b, 1] - bodies.pos[a, 1]
            rsum = radius[a] + radius[b]
            dist2 = dx * dx + dy * dy
            if dist2 >= rsum * rsum:
                continue
            if bodies.pinned[a] and bodies.pinned[b]:
                continue
            if mode is CollisionMode.MERGE:
                survivor, gone = _merge(bodies, a, b)
                alive[gone] = False
                radius[survivor] = radius_from_mass(bodies.mass[survivor], density)
                report.merged.append((int(bodies.ids[survivor]), int(bodies.ids[gone])))
                logger.debug(
                    "merged body %d into %d (mass %g)",
                    bodies.ids[gone],
                    bodies.ids[survivor],
                    bodies.mass[survivor],
                )
            else:
                _bounce(bodies, a, b, dx, dy, dist2, rsum)
                report.contacts += 1

    if not alive.all():
        bodies.remove_rows(np.flatnonzero(~alive))
    return report


def _merge(bodies: BodySet, a: int, b: int) -> tuple[int, int]:
    if bodies.pinned[a] != bodies.pinned[b]:
        a_survives = bool(bodies.pinned[a])
    else:
        a_survives = bodies.mass[a] >= bodies.mass[b]
    s, d = (a, b) if a_survives else (b, a)

    ms = bodies.mass[s]
    md = bodies.mass[d]
    total = ms + md
    if not bodies.pinned[s]:
        bodies.vel[s] = (ms * bodies.vel[s] + md * bodies.vel[d]) / total
        bodies.pos[s] = (ms * bodies.pos[s] + md * bodies.pos[d]) / total
        bodies.acc[s] = 0.0
        bodies.prev_acc[s] = 0.0
    bodies.mass[s] = total
    bodies.radius[s] = np.nan
    return s, d


def _bounce(
    bodies: BodySet,
    a: int,
    b: int,
    dx: float,
    dy: float,
    dist2: float,
    rsum: float,
) -> None:
    delta = np.array([dx, dy])
    if dist2 > _MIN_DIST2:
        dist = float(norm(delta))
        normal = unit(delta)
    else:
        dist = 0.0
        normal = np.array([1.0, 0.0])
    pinned_a = bool(bodies.pinned[a])
    pinned_b = bool(bodies.pinned[b])
    m1 = bodies.mass[a]
    m2 = bodies.mass[b]
    v1 = bodies.vel[a].copy()
    v2 = bodies.vel[b].copy()

    # Normal points from a to b; only a closing pair exchanges momentum.
    rel = (v2 if not pinned_b else 0.0) - (v1 if not pinned_a else 0.0)
    closing = float(dot(rel, normal)) < 0.0
    if closing:
        if not pinned_a and not pinned_b:
            vn = float(dot(v1 - v2, normal))
            bodies.vel[a] = v1 - (2.0 * m2 / (m1 + m2)) * vn * normal
            bodies.vel[b] = v2 + (2.0 * m1 / (m1 + m2)) * vn * normal
        elif pinned_a:
            bodies.vel[b] = v2 - 2.0 * float(dot(v2, normal)) * normal
        else:
            bodies.vel[a] = v1 - 2.0 * float(dot(v1, normal)) * normal

    penetration = rsum - dist
    if penetration <= 0.0:
        return
    w_total = (0.0 if pinned_a else m1) + (0.0 if pinned_b else m2)
    if w_total == 0.0:
        return
    if not pinned_a:
        bodies.pos[a] -= normal * penetration * (m2 / w_total if not pinned_b else 1.0)
    if not pinned_b:
        bodies.pos[b] += normal * penetration * (m1 / w_total if not pinned_a else 1.0)
