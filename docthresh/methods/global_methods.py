"""
Global thresholding methods.
A single threshold is computed for the whole image from its intensity histogram.
"""

from typing import Optional
import numpy as np

from ..core.base import ThresholdAlgorithm, LocalStats, GlobalStats


def otsu_threshold_from_histogram(histogram: np.ndarray) -> int:
	"""
	Otsu threshold search over a 256-bin histogram.
	Maximizes wB * wF * (mB - mF)² over t in [0, 255] with running
	background weight and sum. Only a strictly greater variance replaces the
	current best, so among equal maxima the lowest threshold wins.
	Args:
		histogram: Pixel counts per intensity
	Returns:
		Threshold index (0 when every pixel falls in one bin)
	"""
	histogram = np.asarray(histogram, dtype=np.float64)
	total = histogram.sum()
	weighted_total = float(np.dot(np.arange(histogram.size), histogram))

	sum_b = 0.0
	w_b = 0.0
	max_variance = 0.0
	threshold = 0

	for t in range(histogram.size):
		w_b += histogram[t]
		if w_b == 0:
			continue

		w_f = total - w_b
		if w_f == 0:
			break

		sum_b += t * histogram[t]

		m_b = sum_b / w_b
		m_f = (weighted_total - sum_b) / w_f

		variance = w_b * w_f * (m_b - m_f) * (m_b - m_f)

		if variance > max_variance:
			max_variance = variance
			threshold = t

	return threshold


class OtsuThreshold(ThresholdAlgorithm):
	"""
	Otsu's automatic thresholding method.
	Parameter-free. Picks the split of the intensity histogram with the
	largest between-class variance and applies it to every pixel.
	The threshold is searched over the pixels handed to `threshold`, so the
	Binarizer evaluates it on the whole image in one call.
	Example:
		>>> method = OtsuThreshold()
		>>> t = method.threshold(gray_array, None, None, None, None)
	"""

	def __init__(self):
		super().__init__(
			name="otsu",
			description="Otsu's automatic threshold selection"
		)

	def histogram(self, pixel) -> np.ndarray:
		"""256-bin histogram of rounded intensities."""
		values = np.clip(np.rint(np.asarray(pixel, dtype=np.float64)), 0, 255).astype(np.int64)
		return np.bincount(values.ravel(), minlength=256)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		return float(otsu_threshold_from_histogram(self.histogram(pixel)))
