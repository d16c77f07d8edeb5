"""Value objects exchanged with the engine."""
