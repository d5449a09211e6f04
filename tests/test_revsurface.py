import numpy as np
import pytest

from rayscene.curve import BezierCurve, BsplineCurve
from rayscene.geometry import Hit, Ray
from rayscene.revsurface import RevSurface

PROFILE = [(1, -1, 0), (2, 0, 0), (1.5, 1, 0), (1, 2, 0)]


def test_non_flat_profile_rejected():
    with pytest.raises(ValueError):
        RevSurface(BezierCurve([(1, 0, 0), (2, 1, 0.5), (1, 2, 0), (1, 3, 0)]))


def test_mesh_sizes():
    curve = BsplineCurve(PROFILE)
    samples = len(curve.discretize(4))
    mesh = RevSurface(curve).tessellate(4, 6)
    assert len(mesh.vertices) == samples * 6
    assert len(mesh.normals) == samples * 6
    assert len(mesh.faces) == 2 * 6 * (samples - 1)
    assert all(0 <= i < len(mesh.vertices) for face in mesh.faces for i in face)


def test_vertices_are_rotated_profile_points():
    curve = BezierCurve(PROFILE)
    steps = 8
    points = curve.discretize(2)
    mesh = RevSurface(curve).tessellate(2, steps)
    for ci, cp in enumerate(points):
        ring = mesh.vertices[ci * steps:(ci + 1) * steps]
        assert np.allclose(ring[:, 1], cp.vertex[1])
        assert np.allclose(np.hypot(ring[:, 0], ring[:, 2]), np.hypot(cp.vertex[0], cp.vertex[2]))
        assert np.allclose(ring[0], cp.vertex)


def test_normals_are_unit():
    mesh = RevSurface(BezierCurve(PROFILE)).tessellate(2, 5)
    assert np.allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)


def test_revsurface_is_never_hit():
    surface = RevSurface(BezierCurve(PROFILE))
    hit = Hit()
    before = hit.t
    assert surface.intersect(Ray((0, 0, -5), (0, 0, 1)), hit, 0.0) is False
    assert hit.t == before