"""
Core data model and interfaces for threshold-based binarization.
This module defines the raster/buffer containers that flow through the pipeline and the abstract base class every threshold algorithm implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Tuple, Sequence, Union
import numpy as np


ArrayLike = Union[np.ndarray, bytes, bytearray, memoryview, Sequence[int]]


class ValidationError(ValueError):
	"""Raised when a raster is structurally malformed (dimensions or sample count)."""


class BinarizerState(Enum):
	"""States of a single binarization run."""
	IDLE = "Idle"
	GRAYSCALE_READY = "GrayscaleReady"
	STATS_READY = "StatsReady"
	DONE = "Done"


@dataclass(frozen=True)
class RasterImage:
	"""
	Input RGBA raster.
	Attributes:
		width: Image width in pixels
		height: Image height in pixels
		data: Flat sequence of width*height*4 byte samples (R, G, B, A)
	"""
	width: int
	height: int
	data: ArrayLike

	def validate(self) -> None:
		"""
		Check structural validity.
		Raises:
			ValidationError: If dimensions are non-positive or the sample count does not match
		"""
		if not isinstance(self.width, (int, np.integer)) or not isinstance(self.height, (int, np.integer)):
			raise ValidationError(
				f"Raster dimensions must be integers, got {self.width!r}x{self.height!r}"
			)
		if self.width < 1 or self.height < 1:
			raise ValidationError(
				f"Raster dimensions must be at least 1x1, got {self.width}x{self.height}"
			)
		expected = self.width * self.height * 4
		actual = self._samples().size
		if actual != expected:
			raise ValidationError(
				f"Raster of {self.width}x{self.height} needs {expected} samples, got {actual}"
			)

	def _samples(self) -> np.ndarray:
		"""Flat view of the samples; byte buffers are read one sample per byte."""
		if isinstance(self.data, (bytes, bytearray, memoryview)):
			return np.frombuffer(self.data, dtype=np.uint8)
		return np.asarray(self.data).ravel()

	def as_array(self) -> np.ndarray:
		"""Return the samples as a (height, width, 4) uint8 array."""
		self.validate()
		samples = self._samples()
		if samples.dtype != np.uint8:
			samples = np.clip(samples, 0, 255).astype(np.uint8)
		return samples.reshape(self.height, self.width, 4)

	@classmethod
	def from_array(cls, array: np.ndarray) -> 'RasterImage':
		"""
		Build a raster from an RGB(A) or single-channel numpy array.
		Args:
			array: (H, W), (H, W, 3) or (H, W, 4) array in RGB channel order
		Returns:
			RasterImage with an opaque alpha channel where none was given
		Raises:
			ValidationError: If the array shape is not supported
		"""
		if array is None or np.size(array) == 0:
			raise ValidationError("Input array is empty or None")

		array = np.asarray(array)
		if array.dtype != np.uint8:
			array = np.clip(array, 0, 255).astype(np.uint8)

		if array.ndim == 2:
			rgba = np.dstack([array, array, array, np.full_like(array, 255)])
		elif array.ndim == 3 and array.shape[2] == 3:
			alpha = np.full(array.shape[:2], 255, dtype=np.uint8)
			rgba = np.dstack([array, alpha])
		elif array.ndim == 3 and array.shape[2] == 4:
			rgba = array
		else:
			raise ValidationError(f"Unsupported array shape {array.shape}")

		height, width = rgba.shape[:2]
		return cls(width=width, height=height, data=np.ascontiguousarray(rgba).ravel())


@dataclass(frozen=True)
class GrayscaleBuffer:
	"""Single-channel luminance buffer, one uint8 sample per pixel."""
	width: int
	height: int
	data: np.ndarray

	def __post_init__(self):
		if self.data.size != self.width * self.height:
			raise ValidationError(
				f"Grayscale buffer of {self.width}x{self.height} needs "
				f"{self.width * self.height} samples, got {self.data.size}"
			)

	def as_array(self) -> np.ndarray:
		"""Return the buffer as a (height, width) array."""
		return self.data.reshape(self.height, self.width)


@dataclass(frozen=True)
class LocalStats:
	"""
	Neighborhood statistics.
	Holds scalars for a single pixel or (height, width) arrays for a whole image.
	"""
	mean: Any
	variance: Any
	std_dev: Any

	def rows(self, start: int, stop: int) -> 'LocalStats':
		"""Slice a per-image statistics map to a band of rows."""
		return LocalStats(
			mean=self.mean[start:stop],
			variance=self.variance[start:stop],
			std_dev=self.std_dev[start:stop]
		)


@dataclass(frozen=True)
class GlobalStats:
	"""
	Whole-image statistics.
	Attributes:
		mean: Image mean intensity
		std_dev: Image standard deviation
		min_intensity: Darkest intensity in the image
		max_local_std_dev: Largest local standard deviation (None until the window sweep has run)
	"""
	mean: float
	std_dev: float
	min_intensity: float
	max_local_std_dev: Optional[float] = None


@dataclass(frozen=True)
class EdgeMap:
	"""Per-pixel gradient magnitude, zero on the one-pixel border."""
	width: int
	height: int
	data: np.ndarray

	def as_array(self) -> np.ndarray:
		return self.data.reshape(self.height, self.width)


@dataclass(frozen=True)
class BinaryImage:
	"""
	Binarized RGBA raster.
	Every pixel is 0 or 255 replicated across R, G, B with alpha fixed at 255.
	"""
	width: int
	height: int
	data: np.ndarray

	def __post_init__(self):
		if self.data.dtype != np.uint8:
			raise ValueError(f"Binary image must be uint8, got {self.data.dtype}")
		if self.data.size != self.width * self.height * 4:
			raise ValueError(
				f"Binary image of {self.width}x{self.height} needs "
				f"{self.width * self.height * 4} samples, got {self.data.size}"
			)

		unique_vals = np.unique(self.data)
		if not set(unique_vals.tolist()).issubset({0, 255}):
			raise ValueError(f"Binary image must contain only 0 and 255, got {unique_vals}")

	@classmethod
	def from_mask(cls, mask: np.ndarray) -> 'BinaryImage':
		"""
		Assemble the RGBA output from a (height, width) 0/255 mask.
		Args:
			mask: uint8 decision mask
		Returns:
			BinaryImage with the decision replicated across R, G, B and opaque alpha
		"""
		height, width = mask.shape
		rgba = np.empty((height, width, 4), dtype=np.uint8)
		rgba[..., 0] = mask
		rgba[..., 1] = mask
		rgba[..., 2] = mask
		rgba[..., 3] = 255
		return cls(width=width, height=height, data=rgba.ravel())

	@property
	def mask(self) -> np.ndarray:
		"""Single-channel (height, width) view of the decision."""
		return self.as_array()[..., 0]

	def as_array(self) -> np.ndarray:
		"""Return the samples as a (height, width, 4) array."""
		return self.data.reshape(self.height, self.width, 4)


@dataclass
class BinarizationResult:
	"""
	Container for binarization results and metadata.
	Attributes:
		binary_image: Binarized raster
		method: Identifier of the algorithm used
		parameters: Parameters used for binarization
		threshold: Mean of the per-pixel threshold (the threshold itself for global methods)
		processing_time: Time taken in seconds
		metadata: Additional algorithm-specific metadata
	"""
	binary_image: BinaryImage
	method: str
	parameters: Dict[str, Any]
	threshold: Optional[float] = None
	processing_time: float = 0.0
	metadata: Dict[str, Any] = field(default_factory=dict)


class ThresholdAlgorithm(ABC):
	"""
	Abstract base class for all threshold algorithms.
	An algorithm is a pure threshold formula plus a declaration of which
	inputs it needs. The Binarizer reads those declarations to decide which
	pre-passes to run before the per-pixel evaluation.
	"""

	def __init__(self, name: str, description: str = ""):
		"""Initialize the algorithm.

		Args:
			name: Unique identifier for the algorithm
			description: Human-readable description
		"""
		from ..methods.catalog import get_spec

		self.name = name
		self.description = description
		self.spec = get_spec(name)

	def requires_local_stats(self) -> bool:
		"""Whether the formula consumes sliding-window statistics."""
		return self.spec.windowed

	def requires_global_pass(self) -> bool:
		"""Whether whole-image statistics must be computed first."""
		return self.spec.needs_global_pass

	def requires_edge_map(self) -> bool:
		"""Whether a gradient-magnitude map must be computed first."""
		return self.spec.needs_edge_map

	def get_default_params(self) -> Dict[str, Any]:
		"""
		Return default parameters for this algorithm.
		Returns:
			Dictionary of parameter names and default values
		"""
		if self.spec.parameter_name is None:
			return {}
		return {self.spec.parameter_name: self.spec.default_parameter}

	def get_param_ranges(self) -> Dict[str, Tuple[float, float]]:
		"""
		Return valid parameter ranges.
		Returns:
			Dictionary mapping parameter names to (min, max) tuples
		"""
		if self.spec.parameter_name is None:
			return {}
		return {self.spec.parameter_name: self.spec.parameter_range}

	def resolve_parameter(self, parameter: Optional[float]) -> Optional[float]:
		"""Fall back to the catalog default when no parameter is given."""
		if parameter is None:
			return self.spec.default_parameter
		return float(parameter)

	@abstractmethod
	def threshold(
		self,
		pixel,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_value,
		parameter: Optional[float]
	):
		"""
		Compute the decision threshold.
		Args:
			pixel: Grayscale intensity (scalar or array)
			local_stats: Window statistics aligned with pixel
			global_stats: Whole-image statistics, when required
			edge_value: Gradient magnitude aligned with pixel, when required
			parameter: Algorithm parameter (k or p)
		Returns:
			Threshold value(s) broadcastable against pixel
		"""
		pass

	def decide(self, pixel, threshold) -> np.ndarray:
		"""Classify as 255 where pixel > threshold, 0 otherwise."""
		return np.where(np.asarray(pixel, dtype=np.float64) > threshold, 255, 0).astype(np.uint8)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(name='{self.name}')"


def safe_ratio(numerator, denominator) -> np.ndarray:
	"""
	Divide, evaluating the ratio as 0 wherever the denominator is 0.
	Args:
		numerator: Scalar or array
		denominator: Scalar or array
	Returns:
		float64 array of the ratio
	"""
	numerator = np.asarray(numerator, dtype=np.float64)
	denominator = np.asarray(denominator, dtype=np.float64)
	numerator, denominator = np.broadcast_arrays(numerator, denominator)
	out = np.zeros(numerator.shape, dtype=np.float64)
	np.divide(numerator, denominator, out=out, where=denominator != 0)
	return out
