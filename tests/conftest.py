from pathlib import Path
import struct
from typing import Callable
import zlib

import pytest
from PIL import Image

PngWriter = Callable[..., Path]


@pytest.fixture()
def write_png(tmp_path: Path) -> PngWriter:
    """Write a solid-color PNG, optionally with one recolored pixel."""

    def _write(
        relative: str,
        *,
        size: tuple[int, int] = (4, 3),
        color: tuple[int, int, int] = (255, 255, 255),
        pixel: tuple[int, int] | None = None,
        pixel_color: tuple[int, int, int] = (0, 0, 0),
        root: Path | None = None,
    ) -> Path:
        target = (root or tmp_path) / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        image = Image.new("RGB", size, color)
        if pixel is not None:
            image.putpixel(pixel, pixel_color)
        image.save(target, format="PNG")
        return target

    return _write


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture()
def write_oversized_png(tmp_path: Path) -> PngWriter:
    """Write a PNG whose header claims 20000x20000 pixels but carries no pixel data."""

    def _write(relative: str, *, root: Path | None = None) -> Path:
        target = (root or tmp_path) / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
        target.write_bytes(
            b"\x89PNG\r\n\x1a\n"
            + _png_chunk(b"IHDR", header)
            + _png_chunk(b"IDAT", b"")
            + _png_chunk(b"IEND", b"")
        )
        return target

    return _write
