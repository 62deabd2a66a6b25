"""
Sliding-window local statistics.
Computes mean, variance and standard deviation over a square neighborhood
clamped to the image bounds. Windows near the border are simply smaller:
there is no padding and no wraparound.

Two implementations are provided:
	- window_stats: direct per-pixel query, O(window²) per call
	- local_stats_map: integral images of values and squared values, O(1) per pixel
Both use variance = E[X²] - E[X]² clamped at 0 and agree within floating tolerance.
"""

import math
from typing import Tuple
import numpy as np
import cv2

from ..core.base import GrayscaleBuffer, LocalStats


MIN_WINDOW_SIZE = 3
WINDOW_DIVISOR = 30


def compute_window_size(width: int, height: int) -> int:
	"""
	Window extent tied to image resolution.
	windowSize = max(3, ceil(min(width, height) / 30))
	Args:
		width: Image width
		height: Image height
	Returns:
		Window side length in pixels
	"""
	return max(MIN_WINDOW_SIZE, math.ceil(min(width, height) / WINDOW_DIVISOR))


def window_radius(window_size: int) -> int:
	"""Half the window side, never below 1."""
	return max(1, window_size // 2)


def window_bounds(
	x: int,
	y: int,
	width: int,
	height: int,
	window_size: int
) -> Tuple[int, int, int, int]:
	"""
	Inclusive window bounds clamped to the image.
	Returns:
		(start_x, end_x, start_y, end_y)
	"""
	half = window_radius(window_size)
	return (
		max(0, x - half),
		min(width - 1, x + half),
		max(0, y - half),
		min(height - 1, y + half)
	)


def window_stats(gray: GrayscaleBuffer, x: int, y: int, window_size: int) -> LocalStats:
	"""
	Statistics of the clamped window centred on (x, y).
	Args:
		gray: Grayscale buffer
		x: Column
		y: Row
		window_size: Window side length
	Returns:
		LocalStats with scalar fields
	"""
	if not (0 <= x < gray.width and 0 <= y < gray.height):
		raise IndexError(f"Pixel ({x}, {y}) outside {gray.width}x{gray.height} image")

	start_x, end_x, start_y, end_y = window_bounds(x, y, gray.width, gray.height, window_size)
	region = gray.as_array()[start_y:end_y + 1, start_x:end_x + 1].astype(np.float64)

	count = region.size
	mean = float(region.sum() / count)
	variance = float(np.square(region).sum() / count - mean * mean)
	# Rounding can push the variance slightly below zero
	variance = max(variance, 0.0)

	return LocalStats(mean=mean, variance=variance, std_dev=math.sqrt(variance))


def local_stats_map(gray: GrayscaleBuffer, window_size: int) -> LocalStats:
	"""
	Statistics of every pixel's clamped window via summed-area tables.
	Args:
		gray: Grayscale buffer
		window_size: Window side length
	Returns:
		LocalStats with (height, width) float64 arrays
	"""
	image = gray.as_array()
	height, width = image.shape
	half = window_radius(window_size)

	# (h+1, w+1) tables with a leading row/column of zeros
	sums, sq_sums = cv2.integral2(image, sdepth=cv2.CV_64F, sqdepth=cv2.CV_64F)

	rows = np.arange(height)
	cols = np.arange(width)
	y0 = np.clip(rows - half, 0, height)
	y1 = np.clip(rows + half + 1, 0, height)
	x0 = np.clip(cols - half, 0, width)
	x1 = np.clip(cols + half + 1, 0, width)

	def box_sum(table: np.ndarray) -> np.ndarray:
		return (
			table[np.ix_(y1, x1)]
			- table[np.ix_(y0, x1)]
			- table[np.ix_(y1, x0)]
			+ table[np.ix_(y0, x0)]
		)

	count = np.outer(y1 - y0, x1 - x0).astype(np.float64)
	mean = box_sum(sums) / count
	variance = box_sum(sq_sums) / count - mean ** 2
	variance = np.maximum(variance, 0.0)

	return LocalStats(mean=mean, variance=variance, std_dev=np.sqrt(variance))
