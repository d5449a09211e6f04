"""Phong material."""

from __future__ import annotations

from typing import Any

import numpy as np

from rayscene.geometry import Hit, Ray


def _normalized(v: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / np.linalg.norm(v)


class Material:
    """Diffuse plus specular (Phong) surface description."""

    def __init__(
        self,
        diffuse_color: Any,
        specular_color: Any = (0.0, 0.0, 0.0),
        shininess: float = 0.0,
    ) -> None:
        self.diffuse_color = np.array(diffuse_color, dtype=float).reshape(3)
        self.specular_color = np.array(specular_color, dtype=float).reshape(3)
        self.shininess = float(shininess)

    def shade(self, ray: Ray, hit: Hit, dir_to_light: Any, light_color: Any) -> np.ndarray:
        """Return the colour reflected towards the ray origin from one light."""
        shaded = np.zeros(3)
        to_light = _normalized(np.asarray(dir_to_light, dtype=float))
        normal = hit.normal
        normal_dot_light = float(np.dot(to_light, normal))
        if normal_dot_light >= 0:
            shaded += normal_dot_light * self.diffuse_color
        reflect_dir = _normalized(2 * normal_dot_light * normal - to_light)
        # The reflected ray points back at the eye when it opposes the view ray.
        ray_dot_reflect = -float(np.dot(ray.direction, reflect_dir))
        if ray_dot_reflect >= 0:
            shaded += ray_dot_reflect**self.shininess * self.specular_color
        return shaded * np.asarray(light_color, dtype=float)

    def __repr__(self) -> str:
        return (
            f"Material(diffuse_color={self.diffuse_color.tolist()}, "
            f"specular_color={self.specular_color.tolist()}, shininess={self.shininess})"
        )