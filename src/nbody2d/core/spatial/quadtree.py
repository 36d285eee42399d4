"""Barnes-Hut quadtree for approximate 2D gravity.

Nodes live in flat per-attribute lists (an arena) indexed by node id. The
four children of a node are allocated together, so ``child[n]`` is the id of
the NW child and NE, SW, SE follow it. Children are always appended after
their parent, which makes a reverse sweep over the arena a post-order walk.

Quadrants split on the node center with ties going south/east: a point with
``x >= cx`` is east and ``y >= cy`` is south (y grows downward, as on screen).
"""

from __future__ import annotations

import logging

import numpy as np

from ..math.kernels import softened_inv_r3


logger = logging.getLogger(__name__)

NW, NE, SW, SE = 0, 1, 2, 3

MIN_HALF_SIZE = 1.0
MAX_DEPTH = 64


class QuadTree:
    def __init__(self, pos: np.ndarray, mass: np.ndarray, max_depth: int = MAX_DEPTH) -> None:
        self.pos = np.asarray(pos, dtype=np.float64).reshape(-1, 2)
        self.mass = np.asarray(mass, dtype=np.float64).reshape(-1)
        if self.mass.shape[0] != self.pos.shape[0]:
            raise ValueError("mass must have shape (N,)")
        self.max_depth = int(max_depth)

        self._cx: list[float] = []
        self._cy: list[float] = []
        self._half: list[float] = []
        self._depth: list[int] = []
        self._child: list[int] = []
        self._body: list[int] = []
        # Bodies beyond the first in a leaf at max depth (coincident points).
        self._overflow: dict[int, list[int]] = {}
        self._node_mass: list[float] = []
        self._com_x: list[float] = []
        self._com_y: list[float] = []

        self._xs = self.pos[:, 0].tolist()
        self._ys = self.pos[:, 1].tolist()
        self._ms = self.mass.tolist()

    @classmethod
    def build(cls, pos: np.ndarray, mass: np.ndarray, max_depth: int = MAX_DEPTH) -> "QuadTree":
        tree = cls(pos, mass, max_depth=max_depth)
        n = tree.pos.shape[0]
        if n == 0:
            return tree
        lo = tree.pos.min(axis=0)
        hi = tree.pos.max(axis=0)
        half = 0.5 * float(np.max(hi - lo))
        if not half > 0.0:
            half = MIN_HALF_SIZE
        center = 0.5 * (lo + hi)
        tree._new_node(float(center[0]), float(center[1]), half, 0)
        for i in range(n):
            tree._insert(i)
        tree._aggregate()
        logger.debug("built quadtree: %d bodies, %d nodes", n, tree.node_count)
        return tree

    @property
    def node_count(self) -> int:
        return len(self._half)

    @property
    def root_half_size(self) -> float:
        return self._half[0] if self._half else 0.0

    @property
    def total_mass(self) -> float:
        return self._node_mass[0] if self._node_mass else 0.0

    @property
    def center_of_mass(self) -> np.ndarray:
        if not self._node_mass:
            return np.zeros(2, dtype=np.float64)
        return np.array([self._com_x[0], self._com_y[0]], dtype=np.float64)

    def depth(self) -> int:
        return max(self._depth, default=0)

    def _new_node(self, cx: float, cy: float, half: float, depth: int) -> int:
        self._cx.append(cx)
        self._cy.append(cy)
        self._half.append(half)
        self._depth.append(depth)
        self._child.append(-1)
        self._body.append(-1)
        self._node_mass.append(0.0)
        self._com_x.append(0.0)
        self._com_y.append(0.0)
        return len(self._half) - 1

    def _quadrant(self, node: int, i: int) -> int:
        east = self._xs[i] >= self._cx[node]
        south = self._ys[i] >= self._cy[node]
        return (SW if south else NW) + (1 if east else 0)

    def _subdivide(self, node: int) -> None:
        hs = 0.5 * self._half[node]
        cx = self._cx[node]
        cy = self._cy[node]
        depth = self._depth[node] + 1
        first = self._new_node(cx - hs, cy - hs, hs, depth)
        self._new_node(cx + hs, cy - hs, hs, depth)
        self._new_node(cx - hs, cy + hs, hs, depth)
        self._new_node(cx + hs, cy + hs, hs, depth)
        self._child[node] = first

    def _insert(self, i: int) -> None:
        node = 0
        while True:
            first = self._child[node]
            if first >= 0:
                node = first + self._quadrant(node, i)
                continue
            resident = self._body[node]
            if resident < 0:
                self._body[node] = i
                return
            if self._depth[node] >= self.max_depth:
                self._overflow.setdefault(node, []).append(i)
                return
            self._subdivide(node)
            self._body[node] = -1
            # The resident's quadrant is a fresh empty leaf.
            self._body[self._child[node] + self._quadrant(node, resident)] = resident

    def _aggregate(self) -> None:
        for node in range(self.node_count - 1, -1, -1):
            first = self._child[node]
            if first < 0:
                members = self._occupants(node)
                m = 0.0
                sx = 0.0
                sy = 0.0
                for b in members:
                    mb = self._ms[b]
                    m += mb
                    sx += mb * self._xs[b]
                    sy += mb * self._ys[b]
            else:
                m = 0.0
                sx = 0.0
                sy = 0.0
                for c in range(first, first + 4):
                    mc = self._node_mass[c]
                    if mc > 0.0:
                        m += mc
                        sx += mc * self._com_x[c]
                        sy += mc * self._com_y[c]
            self._node_mass[node] = m
            if m > 0.0:
                self._com_x[node] = sx / m
                self._com_y[node] = sy / m

    def _occupants(self, node: int) -> list[int]:
        b = self._body[node]
        if b < 0:
            return []
        return [b, *self._overflow.get(node, ())]

    def acceleration_on(self, target: int, theta: float, G: float, eps2: float) -> np.ndarray:
        """Approximate acceleration on body ``target`` from all other bodies."""
        if not self._half:
            return np.zeros(2, dtype=np.float64)
        tx = self._xs[target]
        ty = self._ys[target]
        ax = 0.0
        ay = 0.0
        stack = [0]
        while stack:
            node = stack.pop()
            m = self._node_mass[node]
            if m <= 0.0:
                continue
            first = self._child[node]
            if first < 0:
                for b in self._occupants(node):
                    if b == target:
                        continue
                    dx = self._xs[b] - tx
                    dy = self._ys[b] - ty
                    s = G * self._ms[b] * softened_inv_r3(dx, dy, eps2)
                    ax += s * dx
                    ay += s * dy
                continue
            dx = self._com_x[node] - tx
            dy = self._com_y[node] - ty
            dist = (dx * dx + dy * dy) ** 0.5
            if dist > 0.0 and (2.0 * self._half[node]) / dist < theta:
                s = G * m * softened_inv_r3(dx, dy, eps2)
                ax += s * dx
                ay += s * dy
            else:
                stack.extend(range(first, first + 4))
        return np.array([ax, ay], dtype=np.float64)
