import numpy as np
import pytest

from rayscene.geometry import NO_HIT_T, Hit, Ray
from rayscene.material import Material
from rayscene.mesh import Mesh

SQUARE = """# unit square
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vt 0 0
f 1 2 3
f 1 3 4
"""

SQUARE_SLASHED = """v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
f 1/1 2/2 3/3
f 1/1 3/3 4/4
"""


def _write(tmp_path, text, name="model.obj"):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_loads_vertices_and_faces(tmp_path):
    mesh = Mesh(_write(tmp_path, SQUARE))
    assert mesh.vertices.shape == (4, 3)
    assert np.allclose(mesh.vertices[2], [1, 1, 0])
    assert mesh.faces == [(0, 1, 2), (0, 2, 3)]
    assert len(mesh) == 2


def test_slashed_faces_match_plain_faces(tmp_path):
    plain = Mesh(_write(tmp_path, SQUARE, "a.obj"))
    slashed = Mesh(_write(tmp_path, SQUARE_SLASHED, "b.obj"))
    assert slashed.faces == plain.faces
    assert np.allclose(slashed.normals, plain.normals)


def test_normals_are_unit_and_perpendicular(tmp_path):
    mesh = Mesh(_write(tmp_path, SQUARE))
    for (a, b, c), n in zip(mesh.faces, mesh.normals):
        assert np.linalg.norm(n) == pytest.approx(1.0)
        assert np.dot(n, mesh.vertices[b] - mesh.vertices[a]) == pytest.approx(0.0)
        assert np.dot(n, mesh.vertices[c] - mesh.vertices[a]) == pytest.approx(0.0)


def test_intersect_hits_square(tmp_path):
    material = Material((1, 0, 0))
    mesh = Mesh(_write(tmp_path, SQUARE), material)
    hit = Hit()
    ray = Ray((0.3, 0.7, 2), (0, 0, -1))
    assert mesh.intersect(ray, hit, 0.0)
    assert np.allclose(ray.point_at(hit.t), [0.3, 0.7, 0])
    assert hit.material is material
    assert np.allclose(hit.normal, mesh.normals[1])


def test_intersect_misses_outside(tmp_path):
    mesh = Mesh(_write(tmp_path, SQUARE))
    hit = Hit()
    assert not mesh.intersect(Ray((1.5, 0.5, 2), (0, 0, -1)), hit, 0.0)
    assert hit.t == NO_HIT_T


def test_empty_file_has_no_faces(tmp_path):
    mesh = Mesh(_write(tmp_path, "# nothing here\n"))
    assert len(mesh) == 0
    assert not mesh.intersect(Ray((0, 0, 1), (0, 0, -1)), Hit(), 0.0)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Mesh(tmp_path / "absent.obj")


@pytest.mark.parametrize(
    "text",
    [
        "v 1 2\n",
        "v 0 0 0\nv 1 0 0\nf 1 2\n",
        "v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 9\n",
        "v 0 0 0\nv 1 0 0\nv 0 1 0\nf a b c\n",
    ],
)
def test_malformed_content_raises(tmp_path, text):
    with pytest.raises(ValueError):
        Mesh(_write(tmp_path, text))