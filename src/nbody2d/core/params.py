"""Per-step simulation parameters."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .state.bodies import DEFAULT_DENSITY


class IntegratorKind(str, Enum):
    SEMI_IMPLICIT_EULER = "semi_implicit_euler"
    VELOCITY_VERLET = "velocity_verlet"


class CollisionMode(str, Enum):
    MERGE = "merge"
    ELASTIC = "elastic"
    OFF = "off"


@dataclass(frozen=True, slots=True)
class StepParameters:
    """Scalar inputs for one call to :func:`nbody2d.core.engine.step`.

    ``softening`` is a length; the kernel adds ``softening**2`` to the squared
    separation. ``max_speed == 0`` disables the velocity cap. When
    ``use_fixed_dt`` is False the caller's elapsed frame time is used as the
    base timestep instead of ``fixed_dt``.
    """

    G: float = 1.0
    softening: float = 0.0
    max_speed: float = 0.0
    bh_threshold: int = 200
    bh_theta: float = 0.5
    integrator: IntegratorKind = IntegratorKind.VELOCITY_VERLET
    use_fixed_dt: bool = True
    fixed_dt: float = 1.0 / 120.0
    time_scale: float = 1.0
    max_substep: float = 1.0 / 120.0
    max_substeps_per_frame: int = 64
    collisions: CollisionMode = CollisionMode.MERGE
    density: float = DEFAULT_DENSITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "integrator", IntegratorKind(self.integrator))
        object.__setattr__(self, "collisions", CollisionMode(self.collisions))
        if not math.isfinite(self.time_scale):
            raise ValueError("time_scale must be finite")
        for name in ("G", "softening", "max_speed", "bh_theta"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"{name} must be finite and >= 0")
        for name in ("fixed_dt", "max_substep", "density"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be finite and > 0")
        if self.bh_threshold < 0:
            raise ValueError("bh_threshold must be >= 0")
        if self.max_substeps_per_frame < 1:
            raise ValueError("max_substeps_per_frame must be >= 1")

    @property
    def eps2(self) -> float:
        return self.softening * self.softening

    def base_dt(self, elapsed: float | None = None) -> float:
        """Fixed step, or the caller's frame time; a non-finite clock gives 0."""
        if self.use_fixed_dt or elapsed is None:
            return self.fixed_dt
        elapsed = float(elapsed)
        if not math.isfinite(elapsed):
            return 0.0
        return max(0.0, elapsed)

    def effective_dt(self, elapsed: float | None = None) -> float:
        dt = self.base_dt(elapsed) * max(0.0, self.time_scale)
        return dt if math.isfinite(dt) else 0.0

    def substeps(self, dt_eff: float) -> tuple[int, float]:
        """Split ``dt_eff`` into ``(count, size)`` equal substeps."""
        if not math.isfinite(dt_eff) or dt_eff <= 0.0:
            return 1, 0.0
        ratio = dt_eff / self.max_substep
        if not math.isfinite(ratio):
            return self.max_substeps_per_frame, dt_eff / self.max_substeps_per_frame
        n = min(max(math.ceil(ratio), 1), self.max_substeps_per_frame)
        return n, dt_eff / n

    def replace(self, **changes: Any) -> "StepParameters":
        return dataclasses.replace(self, **changes)


def params_from_dict(defn: Mapping[str, Any]) -> StepParameters:
    """Build parameters from a plain mapping, e.g. a parsed config file."""
    known = {f.name for f in dataclasses.fields(StepParameters)}
    unknown = sorted(set(defn) - known)
    if unknown:
        raise ValueError(f"unknown step parameters: {', '.join(unknown)}")
    kwargs = dict(defn)
    if "integrator" in kwargs:
        name = str(getattr(kwargs["integrator"], "value", kwargs["integrator"])).lower()
        try:
            kwargs["integrator"] = IntegratorKind(name)
        except ValueError:
            raise ValueError(f"unsupported integrator: {name}") from None
    if "collisions" in kwargs:
        name = str(getattr(kwargs["collisions"], "value", kwargs["collisions"])).lower()
        try:
            kwargs["collisions"] = CollisionMode(name)
        except ValueError:
            raise ValueError(f"unsupported collision mode: {name}") from None
    for name in ("bh_threshold", "max_substeps_per_frame"):
        if name in kwargs:
            kwargs[name] = int(kwargs[name])
    if "use_fixed_dt" in kwargs:
        kwargs["use_fixed_dt"] = bool(kwargs["use_fixed_dt"])
    return StepParameters(**kwargs)


def params_to_dict(params: StepParameters) -> dict[str, Any]:
    out = dataclasses.asdict(params)
    out["integrator"] = params.integrator.value
    out["collisions"] = params.collisions.value
    return out
