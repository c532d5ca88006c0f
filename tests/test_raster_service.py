import numpy as np
import pytest

from raster import RasterBackingStore, RasterImage
from raster.services.raster_service import RasterService


@pytest.fixture
def service():
    return RasterService()


@pytest.fixture
def ramp():
    """2x3 RGB image: a ramp on red in row 0, flat 5 in row 1, green at 1."""
    pixels = np.zeros((2, 3, 3))
    pixels[..., 0] = [[0.0, 10.0, 20.0], [5.0, 5.0, 5.0]]
    pixels[..., 1] = 1.0
    return RasterImage.adopt(RasterBackingStore.from_array(pixels))


def test_load_and_dimensions(service, red_png):
    img = service.load(red_png)
    assert service.get_image_dimensions(img) == (3, 4)


def test_mean_intensity(service, red_png):
    assert service.mean_intensity(service.load(red_png)) == pytest.approx(76.5)


def test_to_grayscale_delegates(service, ramp):
    gray = service.to_grayscale(ramp)
    assert gray.channels == 1
    assert gray.discrete_at(2, 0, 0) == pytest.approx(0.3 * 20 + 0.59)


def test_resample_rows_same_width_is_identity(service, ramp):
    out = service.resample_rows(ramp, 3)
    assert out == ramp


def test_resample_rows_upsamples(service, ramp):
    out = service.resample_rows(ramp, 5)
    assert (out.width, out.height, out.channels) == (5, 2, 3)
    np.testing.assert_allclose(out.pixels[0, :, 0], [0.0, 5.0, 10.0, 15.0, 20.0])
    np.testing.assert_allclose(out.pixels[1, :, 0], 5.0)
    np.testing.assert_allclose(out.pixels[..., 1], 1.0)


def test_resample_rows_single_column(service, ramp):
    out = service.resample_rows(ramp, 1)
    assert out.width == 1
    assert out.discrete_at(0, 0, 0) == 0.0


def test_resample_rows_rejects_width(service, ramp):
    with pytest.raises(ValueError):
        service.resample_rows(ramp, 0)


def test_stream_gallery(service, tmp_path, red_png, gray_png):
    names = sorted(img.source_path for img in service.stream_gallery(tmp_path))
    assert names == sorted([str(red_png), str(gray_png)])
