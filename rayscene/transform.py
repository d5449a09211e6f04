"""Affine 4x4 transforms and an object wrapper that applies one."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from rayscene.geometry import Hit, Ray
from rayscene.objects import Object3D


def _vec3(values: Any) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def transform_point(matrix: Any, point: Any) -> np.ndarray:
    """Apply ``matrix`` to a point (w = 1)."""
    return (np.asarray(matrix, dtype=float) @ np.append(_vec3(point), 1.0))[:3]


def transform_direction(matrix: Any, direction: Any) -> np.ndarray:
    """Apply ``matrix`` to a direction (w = 0); no inverse transpose is taken."""
    return (np.asarray(matrix, dtype=float) @ np.append(_vec3(direction), 0.0))[:3]


def scaling(sx: float, sy: float, sz: float) -> np.ndarray:
    return np.diag([float(sx), float(sy), float(sz), 1.0])


def uniform_scaling(s: float) -> np.ndarray:
    return scaling(s, s, s)


def translation(offset: Any) -> np.ndarray:
    m = np.identity(4)
    m[:3, 3] = _vec3(offset)
    return m


def rotate_x(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]], dtype=float)


def rotate_y(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]], dtype=float)


def rotate_z(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]], dtype=float)


def rotation(axis: Any, radians: float) -> np.ndarray:
    """Rotation by ``radians`` about ``axis`` (normalised here)."""
    a = _vec3(axis)
    x, y, z = a / np.linalg.norm(a)
    c, s = math.cos(radians), math.sin(radians)
    k = 1.0 - c
    return np.array(
        [
            [x * x * k + c, y * x * k - z * s, z * x * k + y * s, 0],
            [x * y * k + z * s, y * y * k + c, z * y * k - x * s, 0],
            [x * z * k - y * s, y * z * k + x * s, z * z * k + c, 0],
            [0, 0, 0, 1],
        ],
        dtype=float,
    )


class Transform(Object3D):
    """An object placed in the scene by a 4x4 object-to-world matrix."""

    def __init__(self, matrix: Any, obj: Object3D) -> None:
        super().__init__(None)
        self.matrix = np.array(matrix, dtype=float).reshape(4, 4)
        self.inverse = np.linalg.inv(self.matrix)
        self.object = obj

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        local = Ray(
            transform_point(self.inverse, ray.origin),
            transform_direction(self.inverse, ray.direction),
        )
        if not self.object.intersect(local, hit, tmin):
            return False
        normal = transform_direction(self.inverse.T, hit.normal)
        hit.record(hit.t, hit.material, normal / np.linalg.norm(normal))
        return True