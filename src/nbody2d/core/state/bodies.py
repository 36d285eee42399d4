"""Body collection stored as parallel float64 arrays."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


ArrayF = NDArray[np.float64]
ArrayB = NDArray[np.bool_]
ArrayI = NDArray[np.int64]

DEFAULT_DENSITY = 1.0


def radius_from_mass(mass, density: float = DEFAULT_DENSITY):
    """Sphere radius for ``mass`` at uniform ``density``: cbrt(3m / (4 pi rho))."""
    return np.cbrt(3.0 * np.asarray(mass, dtype=np.float64) / (4.0 * np.pi * density))


@dataclass(slots=True)
class BodySet:
    """Mutable set of point masses.

    Row ``i`` of every array describes the same body. Rows are not stable
    across merges; use the integer handles in ``ids`` to track a body.
    ``radius`` holds NaN for bodies whose radius is derived from mass.
    """

    pos: ArrayF
    vel: ArrayF
    mass: ArrayF
    pinned: ArrayB | None = None
    radius: ArrayF | None = None
    acc: ArrayF | None = None
    prev_acc: ArrayF | None = None
    ids: ArrayI | None = None
    _next_id: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.pos = np.array(self.pos, dtype=np.float64).reshape(-1, 2)
        n = self.pos.shape[0]
        self.vel = np.array(self.vel, dtype=np.float64).reshape(-1, 2)
        self.mass = np.array(self.mass, dtype=np.float64).reshape(-1)
        self.pinned = (
            np.zeros(n, dtype=bool)
            if self.pinned is None
            else np.array(self.pinned, dtype=bool).reshape(-1)
        )
        self.radius = (
            np.full(n, np.nan, dtype=np.float64)
            if self.radius is None
            else np.array(self.radius, dtype=np.float64).reshape(-1)
        )
        self.acc = (
            np.zeros((n, 2), dtype=np.float64)
            if self.acc is None
            else np.array(self.acc, dtype=np.float64)
        )
        self.prev_acc = (
            np.zeros((n, 2), dtype=np.float64)
            if self.prev_acc is None
            else np.array(self.prev_acc, dtype=np.float64)
        )
        if self.ids is None:
            self.ids = np.arange(n, dtype=np.int64)
        else:
            self.ids = np.array(self.ids, dtype=np.int64).reshape(-1)
        if self.ids.size:
            self._next_id = max(self._next_id, int(self.ids.max()) + 1)
        self.validate()

    @classmethod
    def empty(cls) -> "BodySet":
        return cls(
            pos=np.zeros((0, 2)),
            vel=np.zeros((0, 2)),
            mass=np.zeros(0),
        )

    def validate(self) -> None:
        n = self.pos.shape[0]
        if self.vel.shape != (n, 2):
            raise ValueError("vel must have shape (N, 2)")
        if self.acc.shape != (n, 2) or self.prev_acc.shape != (n, 2):
            raise ValueError("acc and prev_acc must have shape (N, 2)")
        for name in ("mass", "pinned", "radius", "ids"):
            if getattr(self, name).shape != (n,):
                raise ValueError(f"{name} must have shape (N,)")
        if np.unique(self.ids).size != n:
            raise ValueError("ids must be unique")

    def __len__(self) -> int:
        return int(self.pos.shape[0])

    def add(
        self,
        pos,
        vel=(0.0, 0.0),
        mass: float = 1.0,
        pinned: bool = False,
        radius: float | None = None,
    ) -> int:
        """Append one body and return its handle."""
        handle = self._next_id
        self._next_id += 1
        self.pos = np.vstack([self.pos, np.asarray(pos, dtype=np.float64).reshape(1, 2)])
        self.vel = np.vstack([self.vel, np.asarray(vel, dtype=np.float64).reshape(1, 2)])
        self.acc = np.vstack([self.acc, np.zeros((1, 2))])
        self.prev_acc = np.vstack([self.prev_acc, np.zeros((1, 2))])
        self.mass = np.append(self.mass, float(mass))
        self.pinned = np.append(self.pinned, bool(pinned))
        self.radius = np.append(self.radius, np.nan if radius is None else float(radius))
        self.ids = np.append(self.ids, np.int64(handle))
        return handle

    def contains(self, handle: int) -> bool:
        return bool(np.any(self.ids == handle))

    def index_of(self, handle: int) -> int:
        hits = np.flatnonzero(self.ids == handle)
        if hits.size == 0:
            raise KeyError(f"unknown body handle: {handle}")
        return int(hits[0])

    def remove(self, handle: int) -> None:
        self.remove_rows(np.array([self.index_of(handle)], dtype=np.int64))

    def remove_rows(self, rows) -> None:
        """Drop rows by index; their handles become invalid."""
        rows = np.asarray(rows, dtype=np.int64)
        if rows.size == 0:
            return
        keep = np.ones(len(self), dtype=bool)
        keep[rows] = False
        self.pos = self.pos[keep]
        self.vel = self.vel[keep]
        self.acc = self.acc[keep]
        self.prev_acc = self.prev_acc[keep]
        self.mass = self.mass[keep]
        self.pinned = self.pinned[keep]
        self.radius = self.radius[keep]
        self.ids = self.ids[keep]

    def valid_mask(self) -> ArrayB:
        """Bodies that take part in a step: finite state and finite mass > 0."""
        finite = np.isfinite(self.pos).all(axis=1) & np.isfinite(self.vel).all(axis=1)
        return finite & np.isfinite(self.mass) & (self.mass > 0.0)

    def movable_mask(self) -> ArrayB:
        """Valid bodies the integrator is allowed to move."""
        return self.valid_mask() & ~self.pinned

    def effective_radius(self, density: float = DEFAULT_DENSITY) -> ArrayF:
        derived = radius_from_mass(np.where(self.mass > 0.0, self.mass, 0.0), density)
        return np.where(np.isnan(self.radius), derived, self.radius)

    def copy(self) -> "BodySet":
        return BodySet(
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            mass=self.mass.copy(),
            pinned=self.pinned.copy(),
            radius=self.radius.copy(),
            acc=self.acc.copy(),
            prev_acc=self.prev_acc.copy(),
            ids=self.ids.copy(),
            _next_id=self._next_id,
        )
