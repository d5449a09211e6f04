"""Cameras that turn pixel coordinates into rays."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from rayscene.geometry import Ray


def _vec3(values: Any) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def _normalized(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


class Camera(ABC):
    """Camera pose (extrinsics) plus image size."""

    def __init__(self, center: Any, direction: Any, up: Any, width: int, height: int) -> None:
        self.center = _vec3(center)
        self.direction = _normalized(_vec3(direction))
        self.horizontal = _normalized(np.cross(self.direction, _vec3(up)))
        self.up = np.cross(self.horizontal, self.direction)
        self.width = int(width)
        self.height = int(height)

    @abstractmethod
    def generate_ray(self, point: Any) -> Ray:
        """Return the ray through the screen-space ``point`` (x, y)."""

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)

    def rotation(self) -> np.ndarray:
        """Return the camera-to-world rotation with columns (horizontal, -up, direction)."""
        return np.column_stack((self.horizontal, -self.up, self.direction))

    def set_rotation(self, matrix: Any) -> None:
        """Set the orientation from a matrix laid out as :meth:`rotation` returns it."""
        m = np.asarray(matrix, dtype=float).reshape(3, 3)
        self.horizontal = m[:, 0].copy()
        self.up = -m[:, 1]
        self.direction = m[:, 2].copy()


class PerspectiveCamera(Camera):
    """A pinhole camera with vertical field of view ``angle`` in radians."""

    def __init__(
        self, center: Any, direction: Any, up: Any, width: int, height: int, angle: float
    ) -> None:
        super().__init__(center, direction, up, width, height)
        self.fovy = angle / 3.1415 * 180.0
        self.fx = self.fy = self.height / (2 * math.tan(angle / 2))
        self.cx = self.width / 2.0
        self.cy = self.height / 2.0

    def resize(self, width: int, height: int) -> None:
        self.fx *= height / self.height
        self.fy = self.fx
        super().resize(width, height)
        self.cx = self.width / 2.0
        self.cy = self.height / 2.0

    def generate_ray(self, point: Any) -> Ray:
        px, py = (float(c) for c in point)
        csx = (px - self.cx) / self.fx
        csy = (py - self.cy) / self.fy
        direction = self.rotation() @ np.array([csx, -csy, 1.0])
        return Ray(self.center, _normalized(direction))