"""Diagnostics namespace."""

from .bodies import (  # noqa: F401
    Diagnostics,
    center_of_mass,
    compute_diagnostics,
    kinetic_energy,
    linear_momentum,
    potential_energy_gravity,
    total_energy_gravity,
    total_mass,
)
