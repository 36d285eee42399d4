"""State namespace."""

from .bodies import DEFAULT_DENSITY, BodySet, radius_from_mass  # noqa: F401
