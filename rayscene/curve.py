"""Bezier and B-spline curves sampled into points with unit tangents."""

from __future__ import annotations

import math
from abc import abstractmethod
from bisect import bisect_right
from dataclasses import dataclass
from itertools import accumulate
from typing import Any, Sequence

import numpy as np

from rayscene.geometry import Hit, Ray
from rayscene.objects import Object3D

EPSILON = 1e-8


def _normalized(v: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / np.linalg.norm(v)


@dataclass
class CurvePoint:
    """A sample on a curve: its position and unit tangent."""

    vertex: np.ndarray
    tangent: np.ndarray


class Curve(Object3D):
    """A curve defined by control points; it is drawn, never hit by rays."""

    def __init__(self, controls: Sequence[Any]) -> None:
        super().__init__(None)
        self.controls = np.array(controls, dtype=float).reshape(-1, 3)

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        return False

    @abstractmethod
    def discretize(self, resolution: int) -> list[CurvePoint]:
        """Sample the curve; ``resolution`` controls the sampling density."""


class BezierCurve(Curve):
    """A single Bezier curve whose degree is the number of controls minus one."""

    def __init__(self, controls: Sequence[Any]) -> None:
        super().__init__(controls)
        count = len(self.controls)
        if count < 4 or count % 3 != 1:
            raise ValueError("number of control points of a BezierCurve must be 3n+1")
        degree = count - 1
        self._comb_n = [float(math.comb(degree, i)) for i in range(degree + 1)]
        self._comb_n_minus_1 = [float(math.comb(degree - 1, i)) for i in range(degree)]

    def point_at(self, t: float) -> CurvePoint:
        """Evaluate position and unit tangent at parameter ``t`` in [0, 1]."""
        n = len(self.controls) - 1
        s = 1.0 - t
        basis = [c * s ** (n - i) * t**i for i, c in enumerate(self._comb_n)]
        vertex = np.asarray(basis) @ self.controls

        c1 = self._comb_n_minus_1
        weights = [-n * c1[0] * s ** (n - 1)]
        weights += [
            n * s ** (n - 1 - i) * t ** (i - 1) * (c1[i - 1] * s - c1[i] * t)
            for i in range(1, n)
        ]
        weights.append(n * c1[n - 1] * t ** (n - 1))
        tangent = _normalized(np.asarray(weights) @ self.controls)
        return CurvePoint(vertex, tangent)

    def discretize(self, resolution: int) -> list[CurvePoint]:
        total = resolution * (1 + 2 * len(self.controls))
        unit = 1.0 / total if total else 0.0
        return [self.point_at(i * unit) for i in range(total)]


class BsplineCurve(Curve):
    """A B-spline of degree ``degree`` over uniformly spaced knots in [0, 1]."""

    def __init__(self, controls: Sequence[Any], degree: int = 3) -> None:
        super().__init__(controls)
        if len(self.controls) < 4:
            raise ValueError("a BsplineCurve needs at least 4 control points")
        self.degree = int(degree)
        knot_count = len(self.controls) + self.degree
        unit = 1.0 / knot_count
        self.knots = list(accumulate([unit] * knot_count, initial=0.0))

    def _raise_degree(self, base: list[float], t: float, p: int) -> None:
        k = self.knots
        for i in range(len(k) - 1 - p):
            base[i] = (t - k[i]) * base[i] / (k[i + p] - k[i]) + (
                k[i + p + 1] - t
            ) * base[i + 1] / (k[i + p + 1] - k[i + 1])

    def point_at(self, t: float) -> CurvePoint:
        """Evaluate position and unit tangent at parameter ``t``."""
        k = self.knots
        deg = self.degree
        base = [0.0] * len(k)
        upper = bisect_right(k, t)
        base[upper - 1 if upper else 0] = 1.0
        for p in range(1, deg):
            self._raise_degree(base, t, p)

        weights = [
            deg * (base[i] / (k[i + deg] - k[i]) - base[i + 1] / (k[i + deg + 1] - k[i + 1]))
            for i in range(len(self.controls))
        ]
        tangent = _normalized(np.asarray(weights) @ self.controls)

        self._raise_degree(base, t, deg)
        vertex = np.asarray(base[: len(self.controls)]) @ self.controls
        return CurvePoint(vertex, tangent)

    def discretize(self, resolution: int) -> list[CurvePoint]:
        k = self.knots
        start = k[self.degree]
        end = k[len(k) - self.degree - 1]
        unit = (k[1] - k[0]) / resolution
        points = []
        t = start
        while t <= end + EPSILON:
            points.append(self.point_at(t))
            t += unit
        return points