import struct

import numpy as np
import pytest

from rayscene.image import Image, clamp_color_component


def _sample_image():
    image = Image(3, 2)
    image.set_pixel(0, 0, [1.0, 0.0, 0.0])
    image.set_pixel(1, 0, [0.0, 1.0, 0.0])
    image.set_pixel(2, 0, [0.0, 0.0, 1.0])
    image.set_pixel(0, 1, [51 / 255, 102 / 255, 153 / 255])
    image.set_pixel(2, 1, [1.0, 1.0, 1.0])
    return image


def test_clamp_limits():
    assert clamp_color_component(-0.5) == 0
    assert clamp_color_component(3.0) == 255
    assert clamp_color_component(1.0) == 255
    assert clamp_color_component(0.0) == 0


def test_set_and_get_pixel():
    image = Image(4, 4)
    image.set_pixel(3, 2, [0.1, 0.2, 0.3])
    assert np.allclose(image.get_pixel(3, 2), [0.1, 0.2, 0.3])
    assert np.allclose(image.get_pixel(2, 3), [0.0, 0.0, 0.0])


def test_fill_sets_all_pixels():
    image = Image(2, 3)
    image.fill([0.5, 0.6, 0.7])
    assert all(np.allclose(image.get_pixel(x, y), [0.5, 0.6, 0.7]) for x in range(2) for y in range(3))


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (3, 0), (0, 2)])
def test_out_of_bounds_raises(x, y):
    image = Image(3, 2)
    with pytest.raises(IndexError):
        image.get_pixel(x, y)
    with pytest.raises(IndexError):
        image.set_pixel(x, y, [0, 0, 0])


def test_tga_round_trip(tmp_path):
    path = tmp_path / "out.tga"
    original = _sample_image()
    original.save_tga(path)
    loaded = Image.load_tga(path)
    assert (loaded.width, loaded.height) == (3, 2)
    assert np.allclose(loaded.pixels, original.pixels)


def test_tga_header_and_byte_order(tmp_path):
    path = tmp_path / "out.tga"
    _sample_image().save_tga(path)
    data = path.read_bytes()
    assert data[2] == 2
    assert data[16] == 24
    assert data[17] == 32
    assert data[12] + 256 * data[13] == 3
    assert data[14] + 256 * data[15] == 2
    assert len(data) == 18 + 3 * 2 * 3
    # First stored row is y = 1, stored as b, g, r.
    assert tuple(data[18:21]) == (153, 102, 51)


def test_ppm_round_trip(tmp_path):
    path = tmp_path / "out.ppm"
    original = _sample_image()
    original.save_ppm(path)
    loaded = Image.load_ppm(path)
    assert np.allclose(loaded.pixels, original.pixels)


def test_ppm_header(tmp_path):
    path = tmp_path / "out.ppm"
    _sample_image().save_ppm(path)
    lines = path.read_bytes().split(b"\n", 4)
    assert lines[0] == b"P6"
    assert lines[1].startswith(b"#")
    assert lines[2] == b"3 2"
    assert lines[3] == b"255"


def test_wrong_extension_rejected(tmp_path):
    image = Image(1, 1)
    with pytest.raises(ValueError):
        image.save_tga(tmp_path / "out.png")
    with pytest.raises(ValueError):
        image.save_ppm(tmp_path / "out.tga")
    with pytest.raises(ValueError):
        Image.load_ppm(tmp_path / "in.tga")


def test_load_tga_rejects_bad_header(tmp_path):
    path = tmp_path / "bad.tga"
    path.write_bytes(bytes(18))
    with pytest.raises(ValueError):
        Image.load_tga(path)


def test_load_ppm_rejects_wrong_magic(tmp_path):
    path = tmp_path / "bad.ppm"
    path.write_bytes(b"P3\n# c\n1 1\n255\n\x00\x00\x00")
    with pytest.raises(ValueError):
        Image.load_ppm(path)


def test_bmp_header_and_size(tmp_path):
    path = tmp_path / "out.bmp"
    image = _sample_image()
    image.save_bmp(path)
    data = path.read_bytes()
    bytes_per_line = (3 * (3 + 1) // 4) * 4
    assert data[:2] == b"BM"
    fields = struct.unpack("<6i2h6i", data[2:54])
    assert fields[0] == 54 + bytes_per_line * 2
    assert fields[2] == 54
    assert fields[3] == 40
    assert (fields[4], fields[5]) == (3, 2)
    assert (fields[6], fields[7]) == (1, 24)
    assert len(data) == fields[0]
    # Bottom row (y = 0) comes first, each pixel as b, g, r.
    assert tuple(data[54:57]) == (0, 0, 255)


def test_save_dispatches_on_extension(tmp_path):
    image = _sample_image()
    image.save(tmp_path / "a.bmp")
    image.save(tmp_path / "a.tga")
    assert (tmp_path / "a.bmp").read_bytes()[:2] == b"BM"
    assert np.allclose(Image.load_tga(tmp_path / "a.tga").pixels, image.pixels)
    with pytest.raises(ValueError):
        image.save(tmp_path / "a.jpg")