import numpy as np
import pytest

from rayscene.curve import BezierCurve, BsplineCurve, CurvePoint
from rayscene.geometry import Hit, Ray

CONTROLS = [(0, 0, 0), (1, 2, 0), (3, 2, 0), (4, 0, 0)]


@pytest.mark.parametrize("count", [3, 5, 6])
def test_bezier_rejects_wrong_control_count(count):
    with pytest.raises(ValueError):
        BezierCurve([(i, 0, 0) for i in range(count)])


def test_bezier_endpoints_match_controls():
    curve = BezierCurve(CONTROLS)
    assert np.allclose(curve.point_at(0.0).vertex, CONTROLS[0])
    assert np.allclose(curve.point_at(1.0).vertex, CONTROLS[-1])


def test_bezier_end_tangents_follow_control_polygon():
    curve = BezierCurve(CONTROLS)
    start = np.subtract(CONTROLS[1], CONTROLS[0])
    end = np.subtract(CONTROLS[3], CONTROLS[2])
    assert np.allclose(curve.point_at(0.0).tangent, start / np.linalg.norm(start))
    assert np.allclose(curve.point_at(1.0).tangent, end / np.linalg.norm(end))


def test_bezier_straight_line():
    curve = BezierCurve([(0, 0, 0), (1, 1, 0), (2, 2, 0), (3, 3, 0)])
    direction = np.array([1.0, 1.0, 0.0]) / np.sqrt(2.0)
    for point in curve.discretize(3):
        assert point.vertex[0] == pytest.approx(point.vertex[1])
        assert np.allclose(point.tangent, direction)


def test_bezier_discretize_count_and_hull():
    curve = BezierCurve(CONTROLS)
    points = curve.discretize(2)
    assert len(points) == 18
    lo = np.min(CONTROLS, axis=0) - 1e-9
    hi = np.max(CONTROLS, axis=0) + 1e-9
    for p in points:
        assert isinstance(p, CurvePoint)
        assert np.all(p.vertex >= lo) and np.all(p.vertex <= hi)
        assert np.linalg.norm(p.tangent) == pytest.approx(1.0)


def test_bspline_rejects_too_few_controls():
    with pytest.raises(ValueError):
        BsplineCurve([(0, 0, 0), (1, 0, 0), (2, 0, 0)])


def test_bspline_sample_count():
    curve = BsplineCurve(CONTROLS)
    assert len(curve.discretize(10)) == 11


def test_bspline_partition_of_unity():
    point = (1.5, -2.0, 0.5)
    curve = BsplineCurve([point] * 6)
    for p in curve.discretize(5):
        assert np.allclose(p.vertex, point, atol=1e-6)


def test_bspline_linear_controls():
    curve = BsplineCurve([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0), (4, 0, 0)])
    points = curve.discretize(8)
    xs = [p.vertex[0] for p in points]
    assert all(b > a for a, b in zip(xs, xs[1:]))
    for p in points:
        assert abs(p.vertex[1]) < 1e-9 and abs(p.vertex[2]) < 1e-9
        assert np.allclose(p.tangent, (1, 0, 0))


def test_curve_is_never_hit():
    curve = BezierCurve(CONTROLS)
    hit = Hit()
    before = hit.t
    assert curve.intersect(Ray((0, 0, -5), (0, 0, 1)), hit, 0.0) is False
    assert hit.t == before