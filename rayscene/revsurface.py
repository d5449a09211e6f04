"""Surfaces of revolution around the y axis."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from rayscene.curve import Curve
from rayscene.geometry import Hit, Ray
from rayscene.objects import Object3D
from rayscene.transform import rotation

_UP = np.array([0.0, 1.0, 0.0])
_BACKWARD = np.array([0.0, 0.0, 1.0])
_TWO_PI = 2 * 3.14159


@dataclass
class SurfaceMesh:
    """Vertex positions, per-vertex normals and triangle index triples."""

    vertices: np.ndarray
    normals: np.ndarray
    faces: list[tuple[int, int, int]] = field(default_factory=list)


class RevSurface(Object3D):
    """The surface swept by rotating a flat (z = 0) profile curve around y."""

    def __init__(self, curve: Curve, material: Any = None) -> None:
        super().__init__(material)
        if np.any(curve.controls[:, 2] != 0.0):
            raise ValueError("profile of a RevSurface must be flat on the xy plane")
        self.curve = curve

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        return False

    def tessellate(self, resolution: int = 30, steps: int = 40) -> SurfaceMesh:
        """Build a triangle mesh from the sampled profile and ``steps`` rotations."""
        points = self.curve.discretize(resolution)
        rotations = [rotation(_UP, i / steps * _TWO_PI)[:3, :3] for i in range(steps)]
        vertices: list[np.ndarray] = []
        normals: list[np.ndarray] = []
        faces: list[tuple[int, int, int]] = []
        last = len(points) - 1
        for ci, cp in enumerate(points):
            profile_normal = np.cross(cp.tangent, _BACKWARD)
            for i, rot in enumerate(rotations):
                vertices.append(rot @ cp.vertex)
                normals.append(rot @ profile_normal)
                i1 = 0 if i + 1 == steps else i + 1
                if ci != last:
                    faces.append(((ci + 1) * steps + i, ci * steps + i1, ci * steps + i))
                    faces.append(((ci + 1) * steps + i, (ci + 1) * steps + i1, ci * steps + i1))
        return SurfaceMesh(
            np.array(vertices, dtype=float).reshape(-1, 3),
            np.array(normals, dtype=float).reshape(-1, 3),
            faces,
        )


__all__ = ["RevSurface", "SurfaceMesh", "math"]