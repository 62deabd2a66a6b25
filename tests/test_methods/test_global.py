"""
Unit tests for Otsu's global threshold.
"""

import pytest
import numpy as np

from docthresh.core.pipeline import Binarizer
from docthresh.methods.global_methods import OtsuThreshold, otsu_threshold_from_histogram


@pytest.fixture
def bimodal_gray():
	img = np.full((50, 50), 210, dtype=np.uint8)
	img[10:20, 5:45] = 35
	img[30:35, 5:45] = 40
	return img


class TestOtsuHistogramSearch:
	"""Test suite for otsu_threshold_from_histogram."""

	def test_tie_keeps_lowest_threshold(self):
		"""Test that equal between-class variances resolve to the lower index."""
		hist = np.zeros(256)
		hist[0:3] = 1
		# t=0: 1*2*(0 - 1.5)^2 = 4.5 ; t=1: 2*1*(0.5 - 2)^2 = 4.5
		assert otsu_threshold_from_histogram(hist) == 0

	def test_empty_bins_do_not_move_threshold(self):
		"""Test that the plateau after the first maximum keeps the first index."""
		hist = np.zeros(256)
		hist[10] = 5
		hist[240] = 5
		assert otsu_threshold_from_histogram(hist) == 10

	def test_single_valued_histogram(self):
		"""Test the degenerate case of one populated bin."""
		hist = np.zeros(256)
		hist[128] = 100
		assert otsu_threshold_from_histogram(hist) == 0

	def test_empty_histogram(self):
		assert otsu_threshold_from_histogram(np.zeros(256)) == 0

	def test_bimodal_split(self):
		hist = np.zeros(256)
		hist[50] = 10
		hist[200] = 30
		assert otsu_threshold_from_histogram(hist) == 50


class TestOtsuThreshold:
	"""Test suite for OtsuThreshold."""

	def test_initialization(self):
		method = OtsuThreshold()
		assert method.name == "otsu"
		assert method.get_default_params() == {}
		assert not method.requires_local_stats()
		assert not method.requires_global_pass()
		assert not method.requires_edge_map()

	def test_threshold_between_modes(self, bimodal_gray):
		method = OtsuThreshold()
		t = method.threshold(bimodal_gray, None, None, None, None)
		assert 35 <= t < 210

	def test_histogram_bins(self):
		method = OtsuThreshold()
		hist = method.histogram(np.array([0, 0, 255, 17]))
		assert hist.size == 256
		assert hist[0] == 2 and hist[255] == 1 and hist[17] == 1

	def test_checkerboard_is_preserved(self, checkerboard_raster):
		"""Test that Otsu reproduces a 0/255 checkerboard exactly."""
		result = Binarizer().run("otsu", checkerboard_raster)

		expected = checkerboard_raster.as_array()[..., 0]
		assert np.array_equal(result.binary_image.mask, expected)
		assert 0 <= result.threshold < 255

	def test_reproducibility(self, make_raster, bimodal_gray):
		"""Test bit-exact output across repeated runs."""
		raster = make_raster(bimodal_gray)
		binarizer = Binarizer()

		result1 = binarizer.run("otsu", raster)
		result2 = binarizer.run("otsu", raster)

		assert result1.threshold == result2.threshold
		assert np.array_equal(result1.binary_image.data, result2.binary_image.data)

	def test_parameter_is_ignored(self, make_raster, bimodal_gray):
		raster = make_raster(bimodal_gray)
		plain = Binarizer().run("otsu", raster)
		with_param = Binarizer().run("otsu", raster, parameter=0.9)
		assert np.array_equal(plain.binary_image.data, with_param.binary_image.data)
		assert with_param.parameters == {}
