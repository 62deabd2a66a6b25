"""
Adaptive (local) thresholding methods.
These methods compute a different threshold for each pixel from the mean and
standard deviation of its neighborhood window and need no whole-image pre-pass.
"""

from typing import Optional
import numpy as np

from ..core.base import ThresholdAlgorithm, LocalStats, GlobalStats


# Dynamic range of the standard deviation for 8-bit images
DYNAMIC_RANGE = 128.0


class NiblackThreshold(ThresholdAlgorithm):
	"""
	Niblack's local thresholding method.
	Formula: T(x,y) = m(x,y) + k × σ(x,y)
	where m = local mean, σ = local standard deviation
	Works well for text but can produce noisy backgrounds.
	Example:
		>>> method = NiblackThreshold()
		>>> t = method.threshold(pixel, stats, None, None, -0.2)
	"""

	def __init__(self):
		super().__init__(
			name="niblack",
			description="Niblack's adaptive thresholding with local statistics"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		k = self.resolve_parameter(parameter)
		return local_stats.mean + k * local_stats.std_dev


class SauvolaThreshold(ThresholdAlgorithm):
	"""
	Sauvola's adaptive thresholding method.
	Formula: T(x,y) = m(x,y) × [1 + k × (σ(x,y)/R - 1)]
	where R = 128 is the dynamic range of the standard deviation.
	Less sensitive to background noise than Niblack.
	"""

	def __init__(self):
		super().__init__(
			name="sauvola",
			description="Sauvola's adaptive thresholding with dynamic range"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		k = self.resolve_parameter(parameter)
		return local_stats.mean * (1.0 + k * (local_stats.std_dev / DYNAMIC_RANGE - 1.0))


class NICKThreshold(ThresholdAlgorithm):
	"""
	NICK thresholding for historical documents.
	Formula: T(x,y) = m(x,y) + k × sqrt(σ²(x,y) + m²(x,y))
	Shifts the threshold down on light backgrounds where Niblack is noisy.
	"""

	def __init__(self):
		super().__init__(
			name="nick",
			description="NICK adaptive thresholding for degraded historical documents"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		k = self.resolve_parameter(parameter)
		mean = local_stats.mean
		return mean + k * np.sqrt(local_stats.variance + mean * mean)


class TRSinghThreshold(ThresholdAlgorithm):
	"""
	T.R. Singh's local thresholding with bias parameter p.
	Formula: T(x,y) = m(x,y) × [1 + p × (σ(x,y)/R - 1)]
	"""

	def __init__(self):
		super().__init__(
			name="trsingh",
			description="T.R. Singh's adaptive thresholding with bias parameter"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		p = self.resolve_parameter(parameter)
		return local_stats.mean * (1.0 + p * (local_stats.std_dev / DYNAMIC_RANGE - 1.0))
