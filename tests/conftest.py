"""
Root conftest for photomotion tests.

Provides in-memory image builders for the reframe tests.
"""
import io
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import pytest
from PIL import Image

from photomotion.core.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gray_array() -> Callable[..., np.ndarray]:
    """Build a uniform (height, width, channels) uint8 array."""

    def _build(width: int, height: int, value: int = 128, channels: int = 4) -> np.ndarray:
        arr = np.full((height, width, channels), value, dtype=np.uint8)
        if channels == 4:
            arr[..., 3] = 255
        return arr

    return _build


@pytest.fixture
def gray_image() -> Callable[..., Image.Image]:
    """Build a uniform RGB PIL image."""

    def _build(width: int, height: int, value: int = 128) -> Image.Image:
        return Image.new("RGB", (width, height), (value, value, value))

    return _build


@pytest.fixture
def exif_jpeg() -> Callable[..., Image.Image]:
    """Build a JPEG-decoded PIL image carrying an EXIF orientation tag."""

    def _build(width: int, height: int, orientation: Optional[int]) -> Image.Image:
        img = Image.new("RGB", (width, height), (90, 120, 150))
        buf = io.BytesIO()
        if orientation is None:
            img.save(buf, format="JPEG")
        else:
            exif = Image.Exif()
            exif[0x0112] = orientation
            img.save(buf, format="JPEG", exif=exif)
        buf.seek(0)
        decoded = Image.open(buf)
        decoded.load()
        return decoded

    return _build


@pytest.fixture
def photo_files(tmp_path: Path) -> Callable[..., list]:
    """Write a few PNG files to tmp_path and return their paths as strings."""

    def _build(count: int, width: int = 320, height: int = 240) -> list:
        paths = []
        for i in range(count):
            arr = np.full((height, width, 3), 40 + i * 20, dtype=np.uint8)
            # Bright block on the right so saliency has something to find
            arr[height // 4: height // 2, width // 2: width - 20] = 250
            path = tmp_path / f"photo_{i}.png"
            Image.fromarray(arr).save(path)
            paths.append(str(path))
        return paths

    return _build
