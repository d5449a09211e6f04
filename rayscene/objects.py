"""Primitive scene objects: groups, spheres, planes and triangles."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterator, Optional

import numpy as np

from rayscene.geometry import Hit, Ray

_DET_EPSILON = 1e-8


def _vec3(values: Any) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


class Object3D(ABC):
    """Base class for everything that can be intersected by a ray."""

    def __init__(self, material: Any = None) -> None:
        self.material = material

    @abstractmethod
    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        """Record a hit with ``tmin < t < hit.t`` in ``hit`` and return whether one was found."""


class Group(Object3D):
    """A fixed number of object slots intersected as one object."""

    def __init__(self, size: int = 0) -> None:
        super().__init__(None)
        if size < 0:
            raise ValueError("group size must be non-negative")
        self._objects: list[Optional[Object3D]] = [None] * size

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Optional[Object3D]]:
        return iter(self._objects)

    def add_object(self, index: int, obj: Object3D) -> None:
        """Place ``obj`` in slot ``index``."""
        if not 0 <= index < len(self._objects):
            raise IndexError(f"slot {index} outside group of size {len(self._objects)}")
        self._objects[index] = obj

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        found = False
        for obj in self._objects:
            if obj is not None:
                # Every object is tested so the hit ends up as the nearest one.
                found = obj.intersect(ray, hit, tmin) or found
        return found


class Placement(Enum):
    """Where a point lies relative to a sphere."""

    INSIDE = "inside"
    ON_EDGE = "on_edge"
    OUTSIDE = "outside"


class Sphere(Object3D):
    """A sphere given by its centre and radius."""

    def __init__(self, center: Any = (0.0, 0.0, 0.0), radius: float = 1.0, material: Any = None) -> None:
        super().__init__(material)
        self.center = _vec3(center)
        self.radius = float(radius)

    def locate(self, point: Any) -> Placement:
        """Tell whether ``point`` is inside, on or outside the sphere."""
        distance = float(np.linalg.norm(_vec3(point) - self.center))
        if distance < self.radius:
            return Placement.INSIDE
        if distance > self.radius:
            return Placement.OUTSIDE
        return Placement.ON_EDGE

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        origin_place = self.locate(ray.origin)
        origin_to_center = self.center - ray.origin
        len_r = float(np.linalg.norm(ray.direction))

        proj_t = float(np.dot(origin_to_center, ray.direction)) / len_r
        if origin_place is not Placement.INSIDE and proj_t < 0:
            return False

        square_dis = float(np.dot(origin_to_center, origin_to_center)) - proj_t * proj_t
        chord_square = self.radius * self.radius - square_dis
        if chord_square < 0:
            return False

        half_chord = math.sqrt(chord_square)
        t = proj_t - half_chord if origin_place is Placement.OUTSIDE else proj_t + half_chord
        t /= len_r

        if not tmin < t < hit.t:
            return False
        normal = ray.point_at(t) - self.center
        normal = normal / np.linalg.norm(normal)
        if origin_place is Placement.INSIDE:
            normal = -normal
        hit.record(t, self.material, normal)
        return True


class Plane(Object3D):
    """The plane of points p with ``dot(normal, p) == offset``."""

    def __init__(self, normal: Any, offset: float, material: Any = None) -> None:
        super().__init__(material)
        self.normal = _vec3(normal)
        self.offset = float(offset)

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        normal_dot_dir = float(np.dot(self.normal, ray.direction))
        if normal_dot_dir == 0:
            return False
        t = (self.offset - float(np.dot(self.normal, ray.origin))) / normal_dot_dir
        if t <= 0 or not tmin < t < hit.t:
            return False
        facing = -self.normal if normal_dot_dir > 0 else self.normal
        hit.record(t, self.material, facing)
        return True


class Triangle(Object3D):
    """A triangle; counter-clockwise winding faces the normal."""

    def __init__(self, a: Any, b: Any, c: Any, material: Any = None) -> None:
        super().__init__(material)
        self.vertices = (_vec3(a), _vec3(b), _vec3(c))
        a_, b_, c_ = self.vertices
        normal = np.cross(a_ - b_, a_ - c_)
        with np.errstate(invalid="ignore", divide="ignore"):
            self.normal = normal / np.linalg.norm(normal)

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        a, b, c = self.vertices
        e1 = a - b
        e2 = a - c
        s = a - ray.origin
        d = ray.direction

        def det(u: np.ndarray, v: np.ndarray, w: np.ndarray) -> float:
            return float(np.linalg.det(np.column_stack((u, v, w))))

        det_r_e = det(d, e1, e2)
        if abs(det_r_e) < _DET_EPSILON:
            return False
        t = det(s, e1, e2) / det_r_e
        beta = det(d, s, e2) / det_r_e
        gamma = det(d, e1, s) / det_r_e
        if t <= 0 or not 0 <= beta <= 1 or not 0 <= gamma <= 1 or beta + gamma > 1:
            return False
        if not tmin < t < hit.t:
            return False
        hit.record(t, self.material, self.normal)
        return True