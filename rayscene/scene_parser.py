"""Reader for the whitespace-separated scene description format."""

from __future__ import annotations

import math
import os
import warnings
from typing import Any, Callable, Optional, Union

import numpy as np

from rayscene.camera import Camera, PerspectiveCamera
from rayscene.curve import BezierCurve, BsplineCurve, Curve
from rayscene.light import DirectionalLight, Light, PointLight
from rayscene.material import Material
from rayscene.mesh import Mesh
from rayscene.objects import Group, Object3D, Plane, Sphere, Triangle
from rayscene.revsurface import RevSurface
from rayscene.transform import (
    Transform,
    rotate_x,
    rotate_y,
    rotate_z,
    rotation,
    scaling,
    translation,
    uniform_scaling,
)

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_BACKGROUND = (0.5, 0.5, 0.5)


class SceneParseError(ValueError):
    """Raised when a scene file is malformed."""


def _radians(degrees: float) -> float:
    return math.pi * degrees / 180.0


class _Tokens:
    """Sequential access to the whitespace-separated tokens of a scene."""

    def __init__(self, text: str) -> None:
        self._tokens = text.split()
        self._pos = 0

    def next_or_none(self) -> Optional[str]:
        if self._pos >= len(self._tokens):
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def next(self) -> str:
        token = self.next_or_none()
        if token is None:
            raise SceneParseError("unexpected end of scene file")
        return token

    def expect(self, word: str) -> None:
        token = self.next()
        if token != word:
            raise SceneParseError(f"expected {word!r}, found {token!r}")

    def read_float(self) -> float:
        token = self.next()
        try:
            return float(token)
        except ValueError:
            raise SceneParseError(f"expected a number, found {token!r}") from None

    def read_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError:
            raise SceneParseError(f"expected an integer, found {token!r}") from None

    def read_vector(self) -> np.ndarray:
        return np.array([self.read_float() for _ in range(3)], dtype=float)


class SceneParser:
    """Loads a camera, background, lights, materials and an object group from a .txt scene."""

    def __init__(self, path: PathLike) -> None:
        name = os.fspath(path)
        if not name.endswith(".txt"):
            raise SceneParseError(f"wrong file name extension: {name!r}")
        with open(name, encoding="utf-8") as f:
            text = f.read()

        self.camera: Optional[Camera] = None
        self.background_color = np.array(DEFAULT_BACKGROUND, dtype=float)
        self.lights: list[Light] = []
        self.materials: list[Material] = []
        self.group: Optional[Group] = None
        self._current_material: Optional[Material] = None
        self._tokens = _Tokens(text)

        self._parse_file()
        if not self.lights:
            warnings.warn("No lights specified", stacklevel=2)

    def light(self, index: int) -> Light:
        if not 0 <= index < len(self.lights):
            raise IndexError(f"light {index} out of range ({len(self.lights)} lights)")
        return self.lights[index]

    def material(self, index: int) -> Material:
        if not 0 <= index < len(self.materials):
            raise IndexError(f"material {index} out of range ({len(self.materials)} materials)")
        return self.materials[index]

    # -- top level -------------------------------------------------------

    def _parse_file(self) -> None:
        sections: dict[str, Callable[[], None]] = {
            "PerspectiveCamera": self._parse_perspective_camera,
            "Background": self._parse_background,
            "Lights": self._parse_lights,
            "Materials": self._parse_materials,
            "Group": self._parse_top_group,
        }
        while (token := self._tokens.next_or_none()) is not None:
            handler = sections.get(token)
            if handler is None:
                raise SceneParseError(f"unknown token in scene: {token!r}")
            handler()

    def _parse_top_group(self) -> None:
        self.group = self._parse_group()

    def _parse_perspective_camera(self) -> None:
        tk = self._tokens
        tk.expect("{")
        tk.expect("center")
        center = tk.read_vector()
        tk.expect("direction")
        direction = tk.read_vector()
        tk.expect("up")
        up = tk.read_vector()
        tk.expect("angle")
        angle = _radians(tk.read_float())
        tk.expect("width")
        width = tk.read_int()
        tk.expect("height")
        height = tk.read_int()
        tk.expect("}")
        self.camera = PerspectiveCamera(center, direction, up, width, height, angle)

    def _parse_background(self) -> None:
        tk = self._tokens
        tk.expect("{")
        while True:
            token = tk.next()
            if token == "}":
                return
            if token != "color":
                raise SceneParseError(f"unknown token in Background: {token!r}")
            self.background_color = tk.read_vector()

    # -- lights and materials ----------------------------------------------

    def _parse_lights(self) -> None:
        tk = self._tokens
        tk.expect("{")
        tk.expect("numLights")
        count = tk.read_int()
        kinds: dict[str, Callable[[], Light]] = {
            "DirectionalLight": self._parse_directional_light,
            "PointLight": self._parse_point_light,
        }
        lights = []
        for _ in range(count):
            token = tk.next()
            parse = kinds.get(token)
            if parse is None:
                raise SceneParseError(f"unknown token in Lights: {token!r}")
            lights.append(parse())
        tk.expect("}")
        self.lights = lights

    def _parse_directional_light(self) -> Light:
        tk = self._tokens
        tk.expect("{")
        tk.expect("direction")
        direction = tk.read_vector()
        tk.expect("color")
        color = tk.read_vector()
        tk.expect("}")
        return DirectionalLight(direction, color)

    def _parse_point_light(self) -> Light:
        tk = self._tokens
        tk.expect("{")
        tk.expect("position")
        position = tk.read_vector()
        tk.expect("color")
        color = tk.read_vector()
        tk.expect("}")
        return PointLight(position, color)

    def _parse_materials(self) -> None:
        tk = self._tokens
        tk.expect("{")
        tk.expect("numMaterials")
        count = tk.read_int()
        materials = []
        for _ in range(count):
            token = tk.next()
            if token not in ("Material", "PhongMaterial"):
                raise SceneParseError(f"unknown token in Materials: {token!r}")
            materials.append(self._parse_material())
        tk.expect("}")
        self.materials = materials

    def _parse_material(self) -> Material:
        tk = self._tokens
        diffuse: Any = (1.0, 1.0, 1.0)
        specular: Any = (0.0, 0.0, 0.0)
        shininess = 0.0
        tk.expect("{")
        while True:
            token = tk.next()
            if token == "diffuseColor":
                diffuse = tk.read_vector()
            elif token == "specularColor":
                specular = tk.read_vector()
            elif token == "shininess":
                shininess = tk.read_float()
            elif token == "texture":
                tk.next()  # texture file name; textures are not used
            elif token == "}":
                break
            else:
                raise SceneParseError(f"unknown token in Material: {token!r}")
        return Material(diffuse, specular, shininess)

    # -- objects -------------------------------------------------------------

    def _parse_object(self, token: str) -> Object3D:
        kinds: dict[str, Callable[[], Object3D]] = {
            "Group": self._parse_group,
            "Sphere": self._parse_sphere,
            "Plane": self._parse_plane,
            "Triangle": self._parse_triangle,
            "TriangleMesh": self._parse_triangle_mesh,
            "Transform": self._parse_transform,
            "BezierCurve": self._parse_bezier_curve,
            "BsplineCurve": self._parse_bspline_curve,
            "RevSurface": self._parse_rev_surface,
        }
        parse = kinds.get(token)
        if parse is None:
            raise SceneParseError(f"unknown object type: {token!r}")
        return parse()

    def _require_material(self, kind: str) -> Material:
        if self._current_material is None:
            raise SceneParseError(f"{kind} given before any MaterialIndex")
        return self._current_material

    def _parse_group(self) -> Group:
        tk = self._tokens
        tk.expect("{")
        tk.expect("numObjects")
        count = tk.read_int()
        try:
            group = Group(count)
        except ValueError as exc:
            raise SceneParseError(str(exc)) from None
        placed = 0
        while placed < count:
            token = tk.next()
            if token == "MaterialIndex":
                index = tk.read_int()
                if not 0 <= index < len(self.materials):
                    raise SceneParseError(f"material index {index} out of range")
                self._current_material = self.materials[index]
            else:
                group.add_object(placed, self._parse_object(token))
                placed += 1
        tk.expect("}")
        return group

    def _parse_sphere(self) -> Sphere:
        tk = self._tokens
        tk.expect("{")
        tk.expect("center")
        center = tk.read_vector()
        tk.expect("radius")
        radius = tk.read_float()
        tk.expect("}")
        return Sphere(center, radius, self._require_material("Sphere"))

    def _parse_plane(self) -> Plane:
        tk = self._tokens
        tk.expect("{")
        tk.expect("normal")
        normal = tk.read_vector()
        tk.expect("offset")
        offset = tk.read_float()
        tk.expect("}")
        return Plane(normal, offset, self._require_material("Plane"))

    def _parse_triangle(self) -> Triangle:
        tk = self._tokens
        tk.expect("{")
        tk.expect("vertex0")
        v0 = tk.read_vector()
        tk.expect("vertex1")
        v1 = tk.read_vector()
        tk.expect("vertex2")
        v2 = tk.read_vector()
        tk.expect("}")
        return Triangle(v0, v1, v2, self._require_material("Triangle"))

    def _parse_triangle_mesh(self) -> Mesh:
        tk = self._tokens
        tk.expect("{")
        tk.expect("obj_file")
        filename = tk.next()
        tk.expect("}")
        if not filename.endswith(".obj"):
            raise SceneParseError(f"mesh file must end in .obj: {filename!r}")
        try:
            return Mesh(filename, self._current_material)
        except (OSError, ValueError) as exc:
            raise SceneParseError(f"cannot load mesh {filename!r}: {exc}") from exc

    def _parse_controls(self, kind: str) -> list[np.ndarray]:
        tk = self._tokens
        tk.expect("{")
        tk.expect("controls")
        controls = []
        while True:
            token = tk.next()
            if token == "[":
                controls.append(tk.read_vector())
                tk.expect("]")
            elif token == "}":
                return controls
            else:
                raise SceneParseError(f"incorrect format for {kind}: {token!r}")

    def _parse_bezier_curve(self) -> Curve:
        controls = self._parse_controls("BezierCurve")
        try:
            return BezierCurve(controls)
        except ValueError as exc:
            raise SceneParseError(str(exc)) from None

    def _parse_bspline_curve(self) -> Curve:
        controls = self._parse_controls("BsplineCurve")
        try:
            return BsplineCurve(controls)
        except ValueError as exc:
            raise SceneParseError(str(exc)) from None

    def _parse_rev_surface(self) -> RevSurface:
        tk = self._tokens
        tk.expect("{")
        tk.expect("profile")
        token = tk.next()
        if token == "BezierCurve":
            profile = self._parse_bezier_curve()
        elif token == "BsplineCurve":
            profile = self._parse_bspline_curve()
        else:
            raise SceneParseError(f"unknown profile type in RevSurface: {token!r}")
        tk.expect("}")
        try:
            return RevSurface(profile, self._current_material)
        except ValueError as exc:
            raise SceneParseError(str(exc)) from None

    def _parse_transform(self) -> Transform:
        tk = self._tokens
        matrix = np.identity(4)
        tk.expect("{")
        # Each transform multiplies on the right, so the first listed is applied last.
        token = tk.next()
        while True:
            if token == "Scale":
                s = tk.read_vector()
                matrix = matrix @ scaling(s[0], s[1], s[2])
            elif token == "UniformScale":
                matrix = matrix @ uniform_scaling(tk.read_float())
            elif token == "Translate":
                matrix = matrix @ translation(tk.read_vector())
            elif token == "XRotate":
                matrix = matrix @ rotate_x(_radians(tk.read_float()))
            elif token == "YRotate":
                matrix = matrix @ rotate_y(_radians(tk.read_float()))
            elif token == "ZRotate":
                matrix = matrix @ rotate_z(_radians(tk.read_float()))
            elif token == "Rotate":
                tk.expect("{")
                axis = tk.read_vector()
                radians = _radians(tk.read_float())
                tk.expect("}")
                matrix = matrix @ rotation(axis, radians)
            elif token == "Matrix4f":
                tk.expect("{")
                values = [tk.read_float() for _ in range(16)]
                tk.expect("}")
                # Values are listed column by column.
                explicit = np.array(values, dtype=float).reshape(4, 4).T
                matrix = explicit @ matrix
            else:
                obj = self._parse_object(token)
                break
            token = tk.next()
        tk.expect("}")
        try:
            return Transform(matrix, obj)
        except np.linalg.LinAlgError:
            raise SceneParseError("transform matrix is singular") from None