"""Newtonian gravity between point masses in the plane."""

from __future__ import annotations

import logging

import numpy as np

from ..math.kernels import softened_inv_r3
from ..params import StepParameters
from ..spatial.quadtree import QuadTree
from ..state.bodies import BodySet


logger = logging.getLogger(__name__)


class NBodyGravity:
    """Mutual gravity with a direct path for small sets and Barnes-Hut above.

    Only valid bodies (finite state, finite positive mass) take part. Pinned
    bodies attract others but always report zero acceleration.
    """

    def __init__(
        self,
        G: float = 1.0,
        softening: float = 0.0,
        bh_threshold: int = 200,
        bh_theta: float = 0.5,
    ) -> None:
        self.G = float(G)
        self.softening = float(softening)
        self.bh_threshold = int(bh_threshold)
        self.bh_theta = float(bh_theta)

    @classmethod
    def from_params(cls, params: StepParameters) -> "NBodyGravity":
        return cls(
            G=params.G,
            softening=params.softening,
            bh_threshold=params.bh_threshold,
            bh_theta=params.bh_theta,
        )

    @property
    def eps2(self) -> float:
        return self.softening * self.softening

    def uses_tree(self, live_count: int) -> bool:
        return live_count > self.bh_threshold

    def accelerations(self, bodies: BodySet) -> np.ndarray:
        n = len(bodies)
        acc = np.zeros((n, 2), dtype=np.float64)
        live = np.flatnonzero(bodies.valid_mask())
        if live.size < 2:
            return acc
        pos = bodies.pos[live]
        mass = bodies.mass[live]
        pinned = bodies.pinned[live]
        if self.uses_tree(live.size):
            acc[live] = tree_accelerations(
                pos, mass, pinned, self.G, self.eps2, self.bh_theta
            )
        else:
            acc[live] = direct_accelerations(pos, mass, pinned, self.G, self.eps2)
        return acc

    def apply(self, bodies: BodySet) -> np.ndarray:
        bodies.acc = self.accelerations(bodies)
        return bodies.acc


def direct_accelerations(
    pos: np.ndarray,
    mass: np.ndarray,
    pinned: np.ndarray | None,
    G: float,
    eps2: float,
) -> np.ndarray:
    """Exact O(n^2) accelerations, visiting each unordered pair once."""
    n = pos.shape[0]
    acc = np.zeros((n, 2), dtype=np.float64)
    if n < 2:
        return acc
    i, j = np.triu_indices(n, k=1)
    delta = pos[j] - pos[i]
    inv_r3 = softened_inv_r3(delta[:, 0], delta[:, 1], eps2)
    scaled = G * delta * inv_r3[:, np.newaxis]
    np.add.at(acc, i, scaled * mass[j, np.newaxis])
    np.add.at(acc, j, -scaled * mass[i, np.newaxis])
    if pinned is not None:
        acc[np.asarray(pinned, dtype=bool)] = 0.0
    return acc


def tree_accelerations(
    pos: np.ndarray,
    mass: np.ndarray,
    pinned: np.ndarray | None,
    G: float,
    eps2: float,
    theta: float,
) -> np.ndarray:
    """Barnes-Hut accelerations; pinned bodies are not queried."""
    n = pos.shape[0]
    acc = np.zeros((n, 2), dtype=np.float64)
    if n < 2:
        return acc
    tree = QuadTree.build(pos, mass)
    skip = np.zeros(n, dtype=bool) if pinned is None else np.asarray(pinned, dtype=bool)
    for k in range(n):
        if skip[k]:
            continue
        acc[k] = tree.acceleration_on(k, theta, G, eps2)
    return acc
