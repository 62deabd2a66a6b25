"""Whole-image statistics used by Wolf and ISauvola."""

from typing import Optional
import numpy as np

from ..core.base import GrayscaleBuffer, GlobalStats, LocalStats


def compute_global_stats(
	gray: GrayscaleBuffer,
	local_stats: Optional[LocalStats] = None
) -> GlobalStats:
	"""
	Compute image mean, standard deviation and minimum intensity.
	When a per-image local statistics map is supplied the maximum local
	standard deviation is taken from it as well, so Wolf's pre-pass is
	complete once this returns.
	Args:
		gray: Grayscale buffer
		local_stats: Optional (height, width) local statistics map
	Returns:
		GlobalStats
	"""
	values = gray.data.astype(np.float64)
	count = values.size

	mean = float(values.sum() / count)
	variance = float(np.square(values).sum() / count - mean * mean)
	variance = max(variance, 0.0)

	max_local_std = None
	if local_stats is not None:
		max_local_std = float(np.max(local_stats.std_dev))

	return GlobalStats(
		mean=mean,
		std_dev=float(np.sqrt(variance)),
		min_intensity=float(values.min()),
		max_local_std_dev=max_local_std
	)
