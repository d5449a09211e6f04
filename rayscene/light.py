"""Light sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np


def _vec3(values: Any) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


class Light(ABC):
    """A light source that illuminates points in the scene."""

    def __init__(self, color: Any) -> None:
        self.color = _vec3(color)

    @abstractmethod
    def illumination(self, point: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(unit direction towards the light, light colour)`` at ``point``."""


class DirectionalLight(Light):
    """Light arriving from infinitely far away along a fixed direction."""

    def __init__(self, direction: Any, color: Any) -> None:
        super().__init__(color)
        d = _vec3(direction)
        self.direction = d / np.linalg.norm(d)

    def illumination(self, point: Any) -> tuple[np.ndarray, np.ndarray]:
        return -self.direction, self.color.copy()


class PointLight(Light):
    """Light emitted from a single position."""

    def __init__(self, position: Any, color: Any) -> None:
        super().__init__(color)
        self.position = _vec3(position)

    def illumination(self, point: Any) -> tuple[np.ndarray, np.ndarray]:
        d = self.position - _vec3(point)
        return d / np.linalg.norm(d), self.color.copy()