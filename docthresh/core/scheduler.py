"""
Asynchronous submission of binarization runs.
Runs execute on a worker pool so a caller's event loop is never blocked.
Submissions are grouped by slot (for example one slot per on-screen view):
within a slot the last submission wins and earlier runs are cancelled and
their results discarded.
"""

from concurrent.futures import ThreadPoolExecutor, Future, CancelledError
import threading
from typing import Callable, Dict, Hashable, Optional
import logging

from .base import BinarizationResult, RasterImage
from .pipeline import Binarizer


logger = logging.getLogger(__name__)


ResultCallback = Callable[[BinarizationResult], None]


class BinarizationHandle:
	"""Cancellable handle to one submitted run."""

	def __init__(self, slot: Hashable, generation: int, future: Future, cancel_event: threading.Event):
		self.slot = slot
		self.generation = generation
		self._future = future
		self._cancel_event = cancel_event
		self._superseded = False

	@property
	def superseded(self) -> bool:
		"""True once a newer submission replaced this run in its slot."""
		return self._superseded

	def _supersede(self) -> None:
		self._superseded = True
		self.cancel()

	def cancel(self) -> bool:
		"""
		Request cancellation.
		Returns:
			True if the run had not started and will never run
		"""
		self._cancel_event.set()
		return self._future.cancel()

	def cancelled(self) -> bool:
		return self._future.cancelled() or self._cancel_event.is_set()

	def done(self) -> bool:
		return self._future.done()

	def result(self, timeout: Optional[float] = None) -> BinarizationResult:
		"""
		Wait for the run.
		Raises:
			CancelledError: If the run was cancelled or superseded
			ValidationError: If the raster was malformed
		"""
		return self._future.result(timeout)

	def __repr__(self) -> str:
		return f"BinarizationHandle(slot={self.slot!r}, generation={self.generation})"


class BinarizationScheduler:
	"""
	Worker-pool front end for the Binarizer.
	Example:
		>>> with BinarizationScheduler() as scheduler:
		...     handle = scheduler.submit("left", "sauvola", raster, 0.3, callback=show)
		...     handle = scheduler.submit("left", "sauvola", raster, 0.4, callback=show)
		...     # only the 0.4 result reaches show()
	"""

	def __init__(self, binarizer: Optional[Binarizer] = None, max_workers: Optional[int] = None):
		"""
		Args:
			binarizer: Binarizer used for every run
			max_workers: Pool size (defaults to config.max_concurrent_algorithms)
		"""
		self.binarizer = binarizer or Binarizer()
		self._executor = ThreadPoolExecutor(
			max_workers=max_workers or self.binarizer.config.max_concurrent_algorithms,
			thread_name_prefix="binarize"
		)
		self._lock = threading.RLock()
		self._latest: Dict[Hashable, BinarizationHandle] = {}
		self._generation = 0

	def submit(
		self,
		slot: Hashable,
		algorithm_id: str,
		raster: RasterImage,
		parameter: Optional[float] = None,
		callback: Optional[ResultCallback] = None
	) -> BinarizationHandle:
		"""
		Submit a run, superseding any earlier run in the same slot.
		Args:
			slot: Key grouping runs whose results replace each other
			algorithm_id: Algorithm identifier
			raster: Input raster
			parameter: Algorithm parameter
			callback: Called with the result if this run is still the latest when it completes
		Returns:
			BinarizationHandle
		"""
		cancel_event = threading.Event()

		with self._lock:
			self._generation += 1
			generation = self._generation
			future = self._executor.submit(
				self.binarizer.run, algorithm_id, raster, parameter, cancel_event
			)
			handle = BinarizationHandle(slot, generation, future, cancel_event)

			previous = self._latest.get(slot)
			self._latest[slot] = handle

		if previous is not None:
			logger.debug(f"Superseding {previous!r} with generation {generation}")
			previous._supersede()

		future.add_done_callback(lambda f: self._deliver(handle, f, callback))
		return handle

	def _deliver(self, handle: BinarizationHandle, future: Future, callback: Optional[ResultCallback]) -> None:
		if future.cancelled():
			return

		# Delivery and supersession are serialized on the same lock
		with self._lock:
			if self._latest.get(handle.slot) is not handle or handle.superseded:
				logger.debug(f"Discarding result of superseded {handle!r}")
				return

			exc = future.exception()
			if exc is not None:
				if not isinstance(exc, CancelledError):
					logger.error(f"Run {handle!r} failed: {exc}")
				return

			if callback is not None:
				callback(future.result())

	def latest(self, slot: Hashable) -> Optional[BinarizationHandle]:
		"""Most recent handle submitted to a slot."""
		with self._lock:
			return self._latest.get(slot)

	def shutdown(self, wait: bool = True) -> None:
		"""Cancel pending runs and stop the pool."""
		with self._lock:
			handles = list(self._latest.values())
		for handle in handles:
			if not handle.done():
				handle.cancel()
		self._executor.shutdown(wait=wait)

	def __enter__(self) -> 'BinarizationScheduler':
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		self.shutdown()
