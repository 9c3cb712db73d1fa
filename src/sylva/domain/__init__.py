"""Domain models for the simulation core."""
