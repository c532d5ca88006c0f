import cv2
import numpy as np
import pytest
from PIL import Image as PILImage

from raster import RasterBackingStore, RasterImage


@pytest.fixture
def square_gray():
    """2x2 single-channel image: row 0 is [1, 2], row 1 is [3, 4]."""
    return RasterImage.adopt(RasterBackingStore.from_array([[1.0, 2.0], [3.0, 4.0]]))


@pytest.fixture
def red_pixels():
    """4x3 pure red RGB array (H, W, C)."""
    img = np.zeros((3, 4, 3), dtype=np.uint8)
    img[..., 0] = 255
    return img


@pytest.fixture
def red_png(tmp_path, red_pixels):
    path = tmp_path / "red.png"
    PILImage.fromarray(red_pixels).save(path)
    return path


@pytest.fixture
def gray_png(tmp_path):
    path = tmp_path / "gray.png"
    pixels = np.arange(12, dtype=np.uint8).reshape(3, 4) * 10
    cv2.imwrite(str(path), pixels)
    return path


@pytest.fixture
def rgba_png(tmp_path):
    path = tmp_path / "rgba.png"
    pixels = np.full((2, 2, 4), 128, dtype=np.uint8)
    cv2.imwrite(str(path), pixels)
    return path
