"""Float RGB images with PPM, TGA and BMP input/output."""

from __future__ import annotations

import os
import struct
from typing import Any, Union

import numpy as np

PathLike = Union[str, "os.PathLike[str]"]

_TGA_HEADER_LEN = 18


def clamp_color_component(c: float) -> int:
    """Map a colour component in [0, 1] to a byte, truncating and clamping."""
    return max(0, min(255, int(c * 255)))


def _to_bytes(pixels: np.ndarray) -> np.ndarray:
    return np.clip(np.trunc(pixels * 255), 0, 255).astype(np.uint8)


def _require_ext(path: PathLike, ext: str) -> str:
    name = os.fspath(path)
    if not name.endswith(ext):
        raise ValueError(f"file name must end in {ext}: {name!r}")
    return name


class Image:
    """A width x height grid of RGB colours stored as floats."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("image dimensions must be non-negative")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=float)

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")

    def get_pixel(self, x: int, y: int) -> np.ndarray:
        self._check(x, y)
        return self.pixels[y, x].copy()

    def set_pixel(self, x: int, y: int, color: Any) -> None:
        self._check(x, y)
        self.pixels[y, x] = np.asarray(color, dtype=float).reshape(3)

    def fill(self, color: Any) -> None:
        """Set every pixel to ``color``."""
        self.pixels[:, :] = np.asarray(color, dtype=float).reshape(3)

    @classmethod
    def _from_rows(cls, data: bytes, width: int, height: int, bgr: bool) -> "Image":
        needed = width * height * 3
        if len(data) < needed:
            raise ValueError("image data is truncated")
        raw = np.frombuffer(data[:needed], dtype=np.uint8).reshape(height, width, 3)
        if bgr:
            raw = raw[..., ::-1]
        image = cls(width, height)
        # Rows are stored top first; row 0 of the image is the bottom one.
        image.pixels = raw[::-1].astype(float) / 255.0
        return image

    def _rows_top_first(self) -> np.ndarray:
        return _to_bytes(self.pixels[::-1])

    @classmethod
    def load_ppm(cls, path: PathLike) -> "Image":
        """Read a binary (P6) PPM file with one comment line."""
        name = _require_ext(path, ".ppm")
        with open(name, "rb") as f:
            magic = f.readline()
            if b"P6" not in magic:
                raise ValueError("not a P6 PPM file")
            comment = f.readline()
            if not comment.startswith(b"#"):
                raise ValueError("expected a comment line in PPM header")
            dims = f.readline().split()
            try:
                width, height = int(dims[0]), int(dims[1])
            except (IndexError, ValueError):
                raise ValueError("malformed PPM dimensions") from None
            if b"255" not in f.readline():
                raise ValueError("PPM maximum value must be 255")
            data = f.read()
        return cls._from_rows(data, width, height, bgr=False)

    def save_ppm(self, path: PathLike) -> None:
        name = _require_ext(path, ".ppm")
        header = f"P6\n# Creator: Image.save_ppm()\n{self.width} {self.height}\n255\n"
        with open(name, "wb") as f:
            f.write(header.encode("ascii"))
            f.write(self._rows_top_first().tobytes())

    @classmethod
    def load_tga(cls, path: PathLike) -> "Image":
        """Read an uncompressed 24-bit type 2 Targa file."""
        name = _require_ext(path, ".tga")
        with open(name, "rb") as f:
            header = f.read(_TGA_HEADER_LEN)
            data = f.read()
        if len(header) < _TGA_HEADER_LEN:
            raise ValueError("TGA header is truncated")
        for i, byte in enumerate(header):
            expected = {2: 2, 16: 24, 17: 32}.get(i, 0)
            if i in (12, 13, 14, 15):
                continue
            if byte != expected:
                raise ValueError(f"unsupported TGA header byte {i}: {byte}")
        width = header[12] + 256 * header[13]
        height = header[14] + 256 * header[15]
        return cls._from_rows(data, width, height, bgr=True)

    def save_tga(self, path: PathLike) -> None:
        name = _require_ext(path, ".tga")
        header = bytearray(_TGA_HEADER_LEN)
        header[2] = 2
        header[12] = self.width % 256
        header[13] = (self.width // 256) & 0xFF
        header[14] = self.height % 256
        header[15] = (self.height // 256) & 0xFF
        header[16] = 24
        header[17] = 32
        with open(name, "wb") as f:
            f.write(bytes(header))
            f.write(self._rows_top_first()[..., ::-1].tobytes())

    def save_bmp(self, path: PathLike) -> None:
        """Write a 24-bit uncompressed BMP, bottom row first."""
        bytes_per_line = (3 * (self.width + 1) // 4) * 4
        size_image = bytes_per_line * self.height
        header = struct.pack(
            "<2s6i2h6i",
            b"BM",
            54 + size_image,
            0,
            54,
            40,
            self.width,
            self.height,
            1,
            24,
            0,
            size_image,
            0,
            0,
            0,
            0,
        )
        rows = _to_bytes(self.pixels)[..., ::-1].reshape(self.height, self.width * 3)
        padding = bytes(bytes_per_line - self.width * 3)
        with open(os.fspath(path), "wb") as f:
            f.write(header)
            for row in rows:
                f.write(row.tobytes())
                f.write(padding)

    def save(self, path: PathLike) -> None:
        """Save as BMP if the name ends in .bmp, otherwise as TGA."""
        if os.fspath(path).endswith(".bmp"):
            self.save_bmp(path)
        else:
            self.save_tga(path)