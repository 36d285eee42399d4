"""Forces and model utilities."""

from .base import ForceModel  # noqa: F401
from .nbody_gravity import (  # noqa: F401
    NBodyGravity,
    direct_accelerations,
    tree_accelerations,
)
