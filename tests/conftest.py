import numpy as np
import pytest

from docthresh.core.base import RasterImage


def raster_from_gray(gray: np.ndarray) -> RasterImage:
	"""Build an opaque RGBA raster whose channels all carry the given intensities."""
	return RasterImage.from_array(np.asarray(gray, dtype=np.uint8))


@pytest.fixture
def make_raster():
	return raster_from_gray


@pytest.fixture
def checkerboard_raster():
	"""4x4 checkerboard alternating 0 and 255."""
	yy, xx = np.mgrid[0:4, 0:4]
	gray = np.where((yy + xx) % 2 == 0, 0, 255).astype(np.uint8)
	return raster_from_gray(gray)


@pytest.fixture
def black_raster():
	"""10x10 raster with every sample 0 (alpha included)."""
	return RasterImage(width=10, height=10, data=np.zeros(10 * 10 * 4, dtype=np.uint8))


@pytest.fixture
def document_gray():
	"""60x60 page: background 200 with a two-pixel dark text bar at rows 21-22."""
	img = np.full((60, 60), 200, dtype=np.uint8)
	img[21:23, 10:50] = 40
	return img


@pytest.fixture
def document_raster(document_gray):
	return raster_from_gray(document_gray)


@pytest.fixture
def noisy_gray():
	rng = np.random.default_rng(7)
	return rng.integers(0, 256, size=(37, 53), dtype=np.uint8)
