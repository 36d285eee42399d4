"""Math utilities namespace."""

from .kernels import softened_inv_r3  # noqa: F401
from .vector import clamp_length, dot, norm, unit  # noqa: F401
