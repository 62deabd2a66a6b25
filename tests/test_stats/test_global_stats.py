"""
Unit tests for whole-image statistics.
"""

import pytest
import numpy as np

from docthresh.core.base import GrayscaleBuffer
from docthresh.stats.global_stats import compute_global_stats
from docthresh.stats.window import local_stats_map


def _buffer(array: np.ndarray) -> GrayscaleBuffer:
	array = np.asarray(array, dtype=np.uint8)
	return GrayscaleBuffer(width=array.shape[1], height=array.shape[0], data=array.ravel())


class TestGlobalStats:
	"""Test suite for compute_global_stats."""

	def test_basic_statistics(self, noisy_gray):
		stats = compute_global_stats(_buffer(noisy_gray))
		values = noisy_gray.astype(float)

		assert stats.mean == pytest.approx(values.mean())
		assert stats.std_dev == pytest.approx(values.std())
		assert stats.min_intensity == float(values.min())
		assert stats.max_local_std_dev is None

	def test_max_local_std_from_sweep(self, noisy_gray):
		"""Test that the window sweep feeds the maximum local deviation."""
		gray = _buffer(noisy_gray)
		local = local_stats_map(gray, 3)
		stats = compute_global_stats(gray, local)
		assert stats.max_local_std_dev == pytest.approx(float(local.std_dev.max()))

	def test_flat_image(self):
		gray = _buffer(np.full((8, 8), 90))
		stats = compute_global_stats(gray, local_stats_map(gray, 3))
		assert stats.std_dev == 0.0
		assert stats.min_intensity == 90.0
		assert stats.max_local_std_dev == 0.0
