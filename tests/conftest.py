import struct
import zlib

import numpy as np
import pytest
from PIL import Image as PILImage

from alpha_fixer.models.image import Image

COLOUR = (10, 20, 30, 255)
CLEAR = (255, 255, 255, 0)


@pytest.fixture
def grid():
    """Build an (H, W, 4) uint8 grid from rows of RGBA tuples."""
    def _grid(rows):
        return np.array(rows, dtype=np.uint8)
    return _grid


@pytest.fixture
def image(grid):
    def _image(rows, path=None):
        pixels = grid(rows)
        return Image(pixels=pixels, path=path)
    return _image


@pytest.fixture
def write_png(tmp_path):
    """Write RGBA rows to tmp_path/<name> and return the path."""
    def _write(name, rows):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.array(rows, dtype=np.uint8)).save(path)
        return path
    return _write


@pytest.fixture
def read_png():
    def _read(path):
        with PILImage.open(path) as img:
            return np.array(img.convert("RGBA"))
    return _read


@pytest.fixture
def ring():
    """3x3 grid: transparent white centre surrounded by COLOUR."""
    return [
        [COLOUR, COLOUR, COLOUR],
        [COLOUR, CLEAR, COLOUR],
        [COLOUR, COLOUR, COLOUR],
    ]


def _chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture
def write_broken_png(tmp_path):
    """
    Write a 64x64 RGBA PNG whose image data is split over two IDAT chunks,
    with the type of the second chunk overwritten by *bad_type*.
    """
    def _write(name, bad_type=b"ID@T"):
        width = height = 64
        raw = b"".join(b"\x00" + bytes(range(256)) for _ in range(height))
        data = zlib.compress(raw)
        half = len(data) // 2
        ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
        blob = (
            b"\x89PNG\r\n\x1a\n"
            + _chunk(b"IHDR", ihdr)
            + _chunk(b"IDAT", data[:half])
            + _chunk(bad_type, data[half:])
            + _chunk(b"IEND", b"")
        )
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(blob)
        return path
    return _write
