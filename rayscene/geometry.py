"""Rays and ray/object hit records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

NO_HIT_T = 1e38


def _vec3(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(3)
    return arr


@dataclass
class Ray:
    """A half-line with an origin and a (not necessarily unit) direction."""

    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        self.origin = _vec3(self.origin)
        self.direction = _vec3(self.direction)

    def point_at(self, t: float) -> np.ndarray:
        """Return the point ``origin + t * direction``."""
        return self.origin + self.direction * t

    def __str__(self) -> str:
        return f"Ray <{self.origin}, {self.direction}>"


@dataclass
class Hit:
    """The closest intersection found so far along a ray."""

    t: float = NO_HIT_T
    material: Any = None
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.normal = _vec3(self.normal)

    def record(self, t: float, material: Any, normal: Any) -> None:
        """Store a new intersection, replacing the previous one."""
        self.t = float(t)
        self.material = material
        self.normal = _vec3(normal)

    def __str__(self) -> str:
        return f"Hit <{self.t}, {self.normal}>"