"""Spatial partitioning."""

from .quadtree import QuadTree  # noqa: F401
