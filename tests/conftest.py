from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from leafguard.core.schemas import ImageBuffer

GREEN = (50, 200, 50)
LIGHT_GREEN = (100, 250, 100)
DARK = (30, 30, 30)
BLACK = (0, 0, 0)
YELLOW = (200, 200, 50)
BROWN = (150, 50, 30)
WHITE = (230, 230, 230)


def buffer_from_rows(rows: list[tuple[int, int, int]], width: int = 4) -> ImageBuffer:
    """One color per row, ``width`` pixels wide."""
    pixels = np.zeros((len(rows), width, 4), dtype=np.uint8)
    for y, rgb in enumerate(rows):
        pixels[y, :, :3] = rgb
        pixels[y, :, 3] = 255
    return ImageBuffer(width=width, height=len(rows), pixels=pixels)


def solid_buffer(rgb: tuple[int, int, int], width: int = 8, height: int = 8) -> ImageBuffer:
    return buffer_from_rows([rgb] * height, width=width)


def png_bytes(rgb: tuple[int, int, int], size: tuple[int, int] = (16, 16), fmt: str = "PNG") -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, rgb).save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def green_png() -> bytes:
    return png_bytes(GREEN)


@pytest.fixture
def dark_png() -> bytes:
    return png_bytes(DARK)
