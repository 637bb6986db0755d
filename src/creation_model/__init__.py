"""Procedural building-model generator: wall loop, openings, gable roof."""

__version__ = "0.1.0"
