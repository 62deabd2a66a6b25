"""
Local methods that depend on a whole-image pre-pass.
Wolf and ISauvola need global statistics, WAN needs an edge map. The
Binarizer computes those once per run before any pixel is evaluated.
"""

from typing import Optional
import numpy as np

from ..core.base import ThresholdAlgorithm, LocalStats, GlobalStats, safe_ratio
from .adaptive_methods import DYNAMIC_RANGE


class WolfThreshold(ThresholdAlgorithm):
	"""
	Wolf's adaptive thresholding method.
	Formula: T(x,y) = m - k × (1 - σ/max_σ) × (m - min_I)
	where min_I = minimum image intensity, max_σ = maximum local standard deviation.
	max_σ is only known after a full window sweep, so no pixel can be
	thresholded before the global pass completes. A zero max_σ (flat image)
	makes the ratio σ/max_σ evaluate to 0.
	Example:
		>>> method = WolfThreshold()
		>>> t = method.threshold(pixel, stats, global_stats, None, 0.5)
	"""

	def __init__(self):
		super().__init__(
			name="wolf",
			description="Wolf's adaptive thresholding with global contrast normalisation"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		if global_stats is None or global_stats.max_local_std_dev is None:
			raise ValueError("Wolf needs global statistics including the maximum local std")

		k = self.resolve_parameter(parameter)
		mean = local_stats.mean
		ratio = safe_ratio(local_stats.std_dev, global_stats.max_local_std_dev)
		return mean - k * (1.0 - ratio) * (mean - global_stats.min_intensity)


class ISauvolaThreshold(ThresholdAlgorithm):
	"""
	ISauvola: Sauvola with a contrast-dependent k.
	alpha = clamp(σ / σ_global, 0, 1)
	T(x,y) = m × [1 + k(1 - alpha) × (σ/R - 1)]
	"""

	def __init__(self):
		super().__init__(
			name="isauvola",
			description="Improved Sauvola with local-to-global contrast weighting"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		if global_stats is None:
			raise ValueError("ISauvola needs global statistics")

		k = self.resolve_parameter(parameter)
		alpha = np.clip(safe_ratio(local_stats.std_dev, global_stats.std_dev), 0.0, 1.0)
		dynamic_k = k * (1.0 - alpha)
		return local_stats.mean * (1.0 + dynamic_k * (local_stats.std_dev / DYNAMIC_RANGE - 1.0))


class WANThreshold(ThresholdAlgorithm):
	"""
	WAN: Sauvola with an edge-weighted k.
	adaptive_k = k × (1 + E(x,y)/255)
	T(x,y) = m × [1 + adaptive_k × (σ/128 - 1)]
	E is the Sobel gradient magnitude, 0 on the image border.
	"""

	def __init__(self):
		super().__init__(
			name="wan",
			description="Edge-aware Sauvola variant"
		)

	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		if edge_value is None:
			raise ValueError("WAN needs an edge map")

		k = self.resolve_parameter(parameter)
		adaptive_k = k * (1.0 + np.asarray(edge_value, dtype=np.float64) / 255.0)
		return local_stats.mean * (1.0 + adaptive_k * (local_stats.std_dev / DYNAMIC_RANGE - 1.0))
