"""
Image file I/O for front ends.
The core never decodes or encodes files; these helpers translate between
image files (OpenCV BGR/BGRA order) and RGBA rasters.
"""
from pathlib import Path
from typing import Union
import numpy as np
import cv2

from ..core.base import RasterImage, BinaryImage


PathLike = Union[str, Path]


def imread(path: PathLike) -> RasterImage:
	"""
	Read an image file into an RGBA raster.
	Raises:
		FileNotFoundError: If the file cannot be read as an image
	"""
	image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
	if image is None:
		raise FileNotFoundError(f"Could not read image: {path}")

	if image.dtype == np.uint16:
		image = (image // 256).astype(np.uint8)

	if image.ndim == 2:
		rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
	elif image.shape[2] == 4:
		rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
	else:
		rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)

	return RasterImage.from_array(rgba)


def imsave(path: PathLike, image: BinaryImage) -> Path:
	"""
	Write a binary image to disk; the format follows the file extension (PNG for lossless output).
	Returns:
		Path written
	"""
	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)

	# Channels are identical, a single-channel file is enough
	if not cv2.imwrite(str(path), np.ascontiguousarray(image.mask)):
		raise IOError(f"Could not write image: {path}")
	return path
