"""Scene parsing, ray intersection, curves, surfaces of revolution and image files for a small ray tracer."""

__version__ = "0.1.0"