"""Core utilities: normalization, logging and platform paths."""
