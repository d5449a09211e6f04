"""Mouse-driven orbit, pan and zoom for a perspective camera."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from rayscene.camera import PerspectiveCamera
from rayscene.transform import rotation


class Button(Enum):
    NONE = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class CameraController:
    """Arc-ball rotation (left), plane translation (middle) and zoom (right)."""

    def __init__(self, camera: PerspectiveCamera, center_distance: float) -> None:
        self.camera = camera
        self.start_distance = float(center_distance)
        self.button = Button.NONE
        self.start_click = (0, 0)
        self._set_from_camera()
        self.current_rot = self.start_rot.copy()
        self.current_center = self.start_center.copy()
        self.current_distance = self.start_distance

    def mouse_click(self, button: Button, x: int, y: int) -> None:
        self._set_from_camera()
        self.start_click = (x, y)
        self.button = button
        self.current_rot = self.start_rot.copy()
        self.current_center = self.start_center.copy()
        self.current_distance = self.start_distance

    def mouse_drag(self, x: int, y: int) -> None:
        if self.button is Button.LEFT:
            self._arc_ball_rotation(x, y)
        elif self.button is Button.MIDDLE:
            self._plane_translation(x, y)
        elif self.button is Button.RIGHT:
            self._distance_zoom(x, y)
        self._apply_to_camera()

    def mouse_release(self, x: int, y: int) -> None:
        self.button = Button.NONE
        self._apply_to_camera()
        self.start_distance = self.current_distance

    def _set_from_camera(self) -> None:
        cam = self.camera
        self.tan_perspective = math.tan(cam.fovy / 2.0)
        self.viewport = (0, 0, cam.width, cam.height)
        rot = cam.rotation()
        self.start_center = cam.center + self.start_distance * rot[:, 2]
        self.start_rot = rot.T

    def _apply_to_camera(self) -> None:
        rt = self.current_rot.T
        offset = rt @ np.array([0.0, 0.0, self.current_distance])
        self.camera.center = self.current_center - offset
        self.camera.set_rotation(rt)

    def _arc_ball_rotation(self, x: int, y: int) -> None:
        _, _, w, h = self.viewport
        # Both axes are flipped: raster versus device coordinates.
        sx = -(self.start_click[0] - w / 2.0)
        sy = -(self.start_click[1] - h / 2.0)
        ex = -(x - w / 2.0)
        ey = -(y - h / 2.0)
        scale = 1.0 / (h if w > h else w)
        sx, sy, ex, ey = sx * scale, sy * scale, ex * scale, ey * scale

        sl = math.hypot(sx, sy)
        el = math.hypot(ex, ey)
        if sl > 1.0:
            sx, sy, sl = sx / sl, sy / sl, 1.0
        if el > 1.0:
            ex, ey, el = ex / el, ey / el, 1.0
        sz = math.sqrt(max(0.0, 1.0 - sl * sl))
        ez = math.sqrt(max(0.0, 1.0 - el * el))

        dot = sx * ex + sy * ey + sz * ez
        axis = np.array([sy * ez - ey * sz, sz * ex - ez * sx, sx * ey - ex * sy])
        if dot == 1 or not np.any(axis):
            self.current_rot = self.start_rot.copy()
            return
        angle = 2.0 * math.acos(max(-1.0, min(1.0, dot)))
        self.current_rot = rotation(axis, angle)[:3, :3] @ self.start_rot

    def _plane_translation(self, x: int, y: int) -> None:
        vx, vy, w, h = self.viewport
        sx, sy = self.start_click[0] - vx, self.start_click[1] - vy
        cx, cy = x - vx, y - vy
        d = h / 2.0 / self.tan_perspective
        su = -sy + h / 2.0
        cu = -cy + h / 2.0
        sr = sx - w / 2.0
        cr = cx - w / 2.0
        factor = -self.current_distance / d
        move_x = (cr - sr) * factor
        move_y = (cu - su) * factor
        self.current_center = (
            self.start_center - move_x * self.current_rot[0, :] + move_y * self.current_rot[1, :]
        )

    def _distance_zoom(self, x: int, y: int) -> None:
        _, vy, _, h = self.viewport
        sy = self.start_click[1] - vy
        cy = y - vy
        self.current_distance = self.start_distance * math.exp((cy - sy) / h)