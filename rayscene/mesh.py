"""Triangle meshes loaded from Wavefront OBJ files."""

from __future__ import annotations

import os
from typing import Any, Union

import numpy as np

from rayscene.geometry import Hit, Ray
from rayscene.objects import Object3D, Triangle

PathLike = Union[str, "os.PathLike[str]"]


def _parse_vertex(tokens: list[str], line: str) -> tuple[float, float, float]:
    try:
        x, y, z = (float(tok) for tok in tokens[1:4])
    except ValueError:
        raise ValueError(f"malformed vertex line: {line!r}") from None
    return x, y, z


def _parse_face(line: str) -> tuple[int, int, int]:
    if "/" in line:
        # "f v/vt v/vt v/vt": vertex indices sit at every other position.
        numbers = line.replace("/", " ").split()[1:]
        picked = numbers[0:6:2]
        if len(numbers) < 6:
            picked = []
    else:
        picked = line.split()[1:4]
    if len(picked) != 3:
        raise ValueError(f"malformed face line: {line!r}")
    try:
        a, b, c = (int(tok) - 1 for tok in picked)
    except ValueError:
        raise ValueError(f"malformed face line: {line!r}") from None
    return a, b, c


class Mesh(Object3D):
    """A set of triangles sharing one material."""

    def __init__(self, path: PathLike, material: Any = None) -> None:
        super().__init__(material)
        vertices: list[tuple[float, float, float]] = []
        faces: list[tuple[int, int, int]] = []
        with open(os.fspath(path), encoding="utf-8") as f:
            for raw in f:
                line = raw.rstrip("\n")
                if len(line) < 3 or line.startswith("#"):
                    continue
                tokens = line.split()
                if not tokens:
                    continue
                if tokens[0] == "v":
                    vertices.append(_parse_vertex(tokens, line))
                elif tokens[0] == "f":
                    faces.append(_parse_face(line))
        self.vertices = np.array(vertices, dtype=float).reshape(-1, 3)
        for face in faces:
            if not all(0 <= i < len(self.vertices) for i in face):
                raise ValueError(f"face {tuple(i + 1 for i in face)} refers to a missing vertex")
        self.faces = faces
        self.normals = self._compute_normals()

    def _compute_normals(self) -> np.ndarray:
        if not self.faces:
            return np.zeros((0, 3))
        idx = np.array(self.faces)
        v0, v1, v2 = (self.vertices[idx[:, k]] for k in range(3))
        n = np.cross(v1 - v0, v2 - v0)
        with np.errstate(invalid="ignore", divide="ignore"):
            return n / np.linalg.norm(n, axis=1, keepdims=True)

    def __len__(self) -> int:
        return len(self.faces)

    def intersect(self, ray: Ray, hit: Hit, tmin: float) -> bool:
        found = False
        for (a, b, c), normal in zip(self.faces, self.normals):
            triangle = Triangle(self.vertices[a], self.vertices[b], self.vertices[c], self.material)
            triangle.normal = normal
            found = triangle.intersect(ray, hit, tmin) or found
        return found