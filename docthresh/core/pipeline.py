"""
Binarization pipeline.
This module provides the Binarizer that runs one algorithm on one raster:
grayscale conversion, the pre-passes the algorithm declares, per-pixel
threshold evaluation and assembly of the binary output.
"""

import time
from concurrent.futures import ThreadPoolExecutor, CancelledError
import threading
from typing import Dict, Optional, List, Sequence
import numpy as np
import logging

from .base import (
	ThresholdAlgorithm,
	BinarizationResult,
	BinarizerState,
	BinaryImage,
	GlobalStats,
	GrayscaleBuffer,
	LocalStats,
	RasterImage,
	ValidationError,
)
from .config import PipelineConfig


logger = logging.getLogger(__name__)


class Binarizer:
	"""
	Orchestrates a binarization run.
	Each run walks Idle -> GrayscaleReady -> StatsReady -> Done and owns its
	own buffers; nothing carries over between runs.
	1. Validate the raster and convert it to grayscale
	2. Sweep local window statistics (windowed algorithms)
	3. Run the global and/or edge pre-pass the algorithm requires
	4. Evaluate the threshold for every pixel and classify
	Example:
		>>> from docthresh.core.pipeline import Binarizer
		>>>
		>>> binarizer = Binarizer()
		>>> result = binarizer.run("sauvola", raster, parameter=0.3)
		>>> binary = result.binary_image
	"""

	def __init__(
		self,
		config: Optional[PipelineConfig] = None,
		algorithm_registry: Optional[Dict[str, ThresholdAlgorithm]] = None
	):
		"""
		Initialize the binarizer.
		Args:
			config: Pipeline configuration
			algorithm_registry: Dictionary mapping identifiers to algorithm instances,
				consulted before the global registry
		"""
		from .config import get_default_config

		self.config = config or get_default_config()
		self.algorithm_registry = algorithm_registry or {}
		self._local = threading.local()

		logger.debug(f"Initialized binarizer with method: {self.config.method}")

	@property
	def state(self) -> BinarizerState:
		"""State of the run in progress (or last finished) on the calling thread."""
		return getattr(self._local, 'state', BinarizerState.IDLE)

	def _transition(self, state: BinarizerState, trail: List[str]) -> None:
		self._local.state = state
		trail.append(state.value)
		logger.debug(f"State -> {state.value}")

	def register_algorithm(self, name: str, algorithm: ThresholdAlgorithm) -> None:
		"""
		Register a threshold algorithm local to this binarizer.
		Args:
			name: Algorithm identifier
			algorithm: Algorithm instance
		"""
		self.algorithm_registry[name] = algorithm
		logger.debug(f"Registered algorithm: {name}")

	def get_algorithm(self, name: str) -> ThresholdAlgorithm:
		"""
		Get algorithm by name.
		Args:
			name: Algorithm identifier
		Returns:
			Algorithm instance
		Raises:
			ValueError: If algorithm not found
		"""
		from ..methods.registry import get_registry

		if name in self.algorithm_registry:
			return self.algorithm_registry[name]

		registry = get_registry()
		try:
			return registry.get(name)
		except KeyError:
			available = sorted(set(self.algorithm_registry) | set(registry.list_algorithms()))
			raise ValueError(
				f"Algorithm '{name}' not found. Available: {available}"
			) from None

	def run(
		self,
		algorithm_id: Optional[str],
		raster: RasterImage,
		parameter: Optional[float] = None,
		cancel_event: Optional[threading.Event] = None
	) -> BinarizationResult:
		"""
		Binarize one raster with one algorithm.
		Args:
			algorithm_id: Algorithm identifier (falls back to config.method)
			raster: Input RGBA raster
			parameter: Algorithm parameter (falls back to config.parameter, then the catalog default)
			cancel_event: Checked between phases; once set the run aborts
		Returns:
			BinarizationResult holding the BinaryImage and run metadata
		Raises:
			ValidationError: If the raster is malformed
			CancelledError: If cancel_event was set before the run finished
		"""
		from ..stats.grayscale import to_grayscale
		from ..stats.window import compute_window_size, local_stats_map
		from ..stats.global_stats import compute_global_stats
		from ..stats.edges import compute_edge_map

		start_time = time.time()
		trail: List[str] = []
		self._transition(BinarizerState.IDLE, trail)

		method = algorithm_id or self.config.method
		if parameter is None:
			parameter = self.config.parameter

		try:
			algorithm = self.get_algorithm(method)
			parameter = algorithm.resolve_parameter(parameter)

			# Step 1: Validate and convert
			logger.debug("Step 1: Raster validation and grayscale conversion")
			if not isinstance(raster, RasterImage):
				raise ValidationError(f"Expected RasterImage, got {type(raster).__name__}")
			raster.validate()
			gray = to_grayscale(raster)
			self._transition(BinarizerState.GRAYSCALE_READY, trail)
			self._check_cancelled(cancel_event)

			# Step 2: Pre-passes
			window_size = None
			local_stats = None
			global_stats = None
			edge_values = None

			if algorithm.requires_local_stats():
				window_size = compute_window_size(gray.width, gray.height)
				logger.debug(f"Step 2: Local statistics sweep (window {window_size})")
				local_stats = local_stats_map(gray, window_size)
				self._check_cancelled(cancel_event)

			if algorithm.requires_global_pass():
				logger.debug("Step 2: Global statistics pass")
				global_stats = compute_global_stats(gray, local_stats)
				self._check_cancelled(cancel_event)

			if algorithm.requires_edge_map():
				logger.debug("Step 2: Edge map")
				edge_values = compute_edge_map(gray).as_array()
				self._check_cancelled(cancel_event)

			self._transition(BinarizerState.STATS_READY, trail)

			# Step 3: Per-pixel evaluation
			logger.debug(f"Step 3: Applying {method} threshold")
			mask, threshold = self._evaluate(
				algorithm, gray, local_stats, global_stats, edge_values, parameter
			)
			self._check_cancelled(cancel_event)

			binary_image = BinaryImage.from_mask(mask)
			self._transition(BinarizerState.DONE, trail)

			processing_time = time.time() - start_time

			metadata = {
				'input_shape': (raster.height, raster.width),
				'window_size': window_size,
				'states': trail,
			}
			if global_stats is not None:
				metadata['global_stats'] = {
					'mean': global_stats.mean,
					'std_dev': global_stats.std_dev,
					'min_intensity': global_stats.min_intensity,
					'max_local_std_dev': global_stats.max_local_std_dev,
				}
			if threshold.size > 1:
				metadata['std_threshold'] = float(np.std(threshold))

			logger.info(f"Binarized {raster.width}x{raster.height} with {method} in {processing_time:.3f}s")

			params = {}
			if algorithm.spec.parameter_name is not None:
				params[algorithm.spec.parameter_name] = parameter

			return BinarizationResult(
				binary_image=binary_image,
				method=method,
				parameters=params,
				threshold=float(np.mean(threshold)),
				processing_time=processing_time,
				metadata=metadata
			)

		except CancelledError:
			logger.debug(f"Run of {method} cancelled")
			raise
		except Exception as e:
			logger.error(f"Binarization failed: {str(e)}", exc_info=True)
			raise

	def _check_cancelled(self, cancel_event: Optional[threading.Event]) -> None:
		if cancel_event is not None and cancel_event.is_set():
			raise CancelledError()

	def _evaluate(
		self,
		algorithm: ThresholdAlgorithm,
		gray: GrayscaleBuffer,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_values: Optional[np.ndarray],
		parameter: Optional[float]
	):
		"""
		Threshold every pixel.
		Windowed algorithms are evaluated in row bands on a thread pool when
		num_workers > 1; global ones see the whole image in a single call.
		Returns:
			(mask, threshold) as (height, width) uint8 and float64 arrays
		"""
		pixels = gray.as_array().astype(np.float64)
		workers = self.config.num_workers

		if not algorithm.requires_local_stats() or workers <= 1 or gray.height < 2:
			return self._evaluate_rows(
				algorithm, pixels, local_stats, global_stats, edge_values, parameter, 0, gray.height
			)

		bounds = np.linspace(0, gray.height, min(workers, gray.height) + 1).astype(int)
		bands = [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]

		with ThreadPoolExecutor(max_workers=len(bands)) as executor:
			futures = [
				executor.submit(
					self._evaluate_rows,
					algorithm, pixels, local_stats, global_stats, edge_values, parameter, a, b
				)
				for a, b in bands
			]
			parts = [f.result() for f in futures]

		mask = np.vstack([m for m, _ in parts])
		threshold = np.vstack([t for _, t in parts])
		return mask, threshold

	def _evaluate_rows(
		self,
		algorithm: ThresholdAlgorithm,
		pixels: np.ndarray,
		local_stats: Optional[LocalStats],
		global_stats: Optional[GlobalStats],
		edge_values: Optional[np.ndarray],
		parameter: Optional[float],
		start: int,
		stop: int
	):
		band = pixels[start:stop]
		band_stats = local_stats.rows(start, stop) if local_stats is not None else None
		band_edges = edge_values[start:stop] if edge_values is not None else None

		threshold = algorithm.threshold(band, band_stats, global_stats, band_edges, parameter)
		threshold = np.broadcast_to(np.asarray(threshold, dtype=np.float64), band.shape)
		return algorithm.decide(band, threshold), threshold

	def compare(
		self,
		algorithm_ids: Sequence[str],
		raster: RasterImage,
		parameters: Optional[Dict[str, float]] = None
	) -> Dict[str, BinarizationResult]:
		"""
		Run several algorithms on the same raster concurrently.
		Args:
			algorithm_ids: Algorithm identifiers
			raster: Input raster, shared read-only by every run
			parameters: Optional per-identifier parameter overrides
		Returns:
			Dictionary mapping identifier to result, in the order requested
		"""
		parameters = parameters or {}
		raster.validate()

		max_workers = max(1, min(self.config.max_concurrent_algorithms, len(algorithm_ids)))
		with ThreadPoolExecutor(max_workers=max_workers) as executor:
			futures = {
				algorithm_id: executor.submit(self.run, algorithm_id, raster, parameters.get(algorithm_id))
				for algorithm_id in algorithm_ids
			}
			return {algorithm_id: future.result() for algorithm_id, future in futures.items()}


def binarize(
	algorithm_id: str,
	raster: RasterImage,
	parameter: Optional[float] = None
) -> BinaryImage:
	"""
	Functional entry point: binarize a raster with one algorithm.
	Args:
		algorithm_id: Algorithm identifier
		raster: Input RGBA raster
		parameter: Algorithm parameter, or None for the catalog default
	Returns:
		BinaryImage of the same dimensions
	Raises:
		ValidationError: If width*height*4 != sample count, or width < 1 or height < 1
	"""
	return Binarizer().run(algorithm_id, raster, parameter).binary_image
