"""Simulation core: state, forces, integration, collisions, diagnostics."""
