"""Front-end helpers that sit between a UI loop and the core."""
