"""
Grayscale conversion.
Reduces an RGBA raster to a single-channel luminance buffer using the
Rec. 601 weights 0.299 R + 0.587 G + 0.114 B. Alpha is discarded.
"""

import numpy as np

from ..core.base import RasterImage, GrayscaleBuffer


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def to_grayscale(raster: RasterImage) -> GrayscaleBuffer:
	"""
	Convert an RGBA raster to luminance.
	Intensities are rounded to the nearest integer and clamped to [0, 255],
	matching storage in an 8-bit clamped buffer.
	Args:
		raster: Input raster
	Returns:
		GrayscaleBuffer with width*height uint8 samples
	Raises:
		ValidationError: If the raster is malformed
	"""
	rgba = raster.as_array().astype(np.float64)

	luminance = rgba[..., 0] * LUMA_WEIGHTS[0] + rgba[..., 1] * LUMA_WEIGHTS[1] + rgba[..., 2] * LUMA_WEIGHTS[2]
	gray = np.clip(np.rint(luminance), 0, 255).astype(np.uint8)

	return GrayscaleBuffer(width=raster.width, height=raster.height, data=gray.ravel())
