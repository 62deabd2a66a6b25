"""
Edge strength estimation for WAN.
Sobel gradient magnitude over the interior; the one-pixel border stays 0.
"""

import logging
import numpy as np
import cv2

from ..core.base import GrayscaleBuffer, EdgeMap


logger = logging.getLogger(__name__)


def compute_edge_map(gray: GrayscaleBuffer) -> EdgeMap:
	"""
	Compute the Sobel gradient magnitude map.
	Args:
		gray: Grayscale buffer
	Returns:
		EdgeMap of float64 magnitudes, zero on row/column 0 and the last row/column
	"""
	height, width = gray.height, gray.width
	magnitude = np.zeros((height, width), dtype=np.float64)

	# No interior pixels
	if height < 3 or width < 3:
		logger.debug(f"Image {width}x{height} has no interior, edge map is all zero")
		return EdgeMap(width=width, height=height, data=magnitude.ravel())

	image = gray.as_array().astype(np.float64)
	grad_x = cv2.Sobel(image, cv2.CV_64F, 1, 0, ksize=3)
	grad_y = cv2.Sobel(image, cv2.CV_64F, 0, 1, ksize=3)

	magnitude[1:-1, 1:-1] = np.sqrt(grad_x[1:-1, 1:-1] ** 2 + grad_y[1:-1, 1:-1] ** 2)

	return EdgeMap(width=width, height=height, data=magnitude.ravel())
