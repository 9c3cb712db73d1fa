"""Service layer for the simulation core."""
