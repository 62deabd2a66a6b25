"""
Unit tests for asynchronous, last-write-wins scheduling.
"""

import threading
from concurrent.futures import CancelledError

import pytest
import numpy as np

from docthresh.core.base import RasterImage, ThresholdAlgorithm, ValidationError
from docthresh.core.pipeline import Binarizer
from docthresh.core.scheduler import BinarizationScheduler


class GatedThreshold(ThresholdAlgorithm):
	"""Sauvola-like threshold that blocks until its gate opens."""

	def __init__(self, gate: threading.Event, started: threading.Event):
		super().__init__(name="sauvola", description="gated test double")
		self.gate = gate
		self.started = started

	def threshold(self, pixel, local_stats, global_stats, edge_value, parameter):
		self.started.set()
		self.gate.wait(timeout=10)
		return local_stats.mean


@pytest.fixture
def gated_binarizer():
	gate = threading.Event()
	started = threading.Event()
	binarizer = Binarizer()
	binarizer.register_algorithm("gated", GatedThreshold(gate, started))
	return binarizer, gate, started


class TestBinarizationScheduler:
	"""Test suite for BinarizationScheduler."""

	def test_submit_and_result(self, document_raster):
		received = []
		with BinarizationScheduler() as scheduler:
			handle = scheduler.submit("view", "sauvola", document_raster, 0.5, callback=received.append)
			result = handle.result(timeout=10)

		assert result.method == "sauvola"
		assert handle.done()
		assert not handle.superseded
		assert len(received) == 1
		assert received[0] is result

	def test_last_write_wins(self, document_raster, gated_binarizer):
		"""Test that a newer submission discards the result of an older one in the same slot."""
		binarizer, gate, started = gated_binarizer
		received = []
		scheduler = BinarizationScheduler(binarizer, max_workers=2)

		first = scheduler.submit("view", "gated", document_raster, callback=received.append)
		assert started.wait(timeout=10)

		second = scheduler.submit("view", "otsu", document_raster, callback=received.append)
		second.result(timeout=10)
		gate.set()

		with pytest.raises(CancelledError):
			first.result(timeout=10)
		scheduler.shutdown(wait=True)

		assert first.superseded
		assert not second.superseded
		assert scheduler.latest("view") is second
		assert [r.method for r in received] == ["otsu"]

	def test_slots_are_independent(self, document_raster):
		received = {}
		with BinarizationScheduler() as scheduler:
			left = scheduler.submit("left", "niblack", document_raster, callback=lambda r: received.setdefault("left", r))
			right = scheduler.submit("right", "wolf", document_raster, callback=lambda r: received.setdefault("right", r))
			left.result(timeout=10)
			right.result(timeout=10)

		assert received["left"].method == "niblack"
		assert received["right"].method == "wolf"

	def test_cancel_pending_run(self, document_raster, gated_binarizer):
		binarizer, gate, started = gated_binarizer
		scheduler = BinarizationScheduler(binarizer, max_workers=1)

		blocker = scheduler.submit("a", "gated", document_raster)
		assert started.wait(timeout=10)
		pending = scheduler.submit("b", "otsu", document_raster)

		assert pending.cancel()
		assert pending.cancelled()
		gate.set()
		blocker.result(timeout=10)
		scheduler.shutdown()

		with pytest.raises(CancelledError):
			pending.result()

	def test_validation_error_surfaces(self):
		bad = RasterImage(width=2, height=2, data=np.zeros(3, dtype=np.uint8))
		received = []
		with BinarizationScheduler() as scheduler:
			handle = scheduler.submit("view", "otsu", bad, callback=received.append)
			with pytest.raises(ValidationError):
				handle.result(timeout=10)

		assert received == []

	def test_submit_waits_for_delivery_in_progress(self, document_raster):
		"""Test that a run cannot be superseded while its callback is running."""
		in_callback = threading.Event()
		release = threading.Event()
		received = []

		def slow_callback(result):
			received.append(result.method)
			in_callback.set()
			release.wait(timeout=10)

		scheduler = BinarizationScheduler(max_workers=2)
		first = scheduler.submit("view", "niblack", document_raster, callback=slow_callback)
		assert in_callback.wait(timeout=10)

		submitted = []
		submitter = threading.Thread(
			target=lambda: submitted.append(
				scheduler.submit("view", "otsu", document_raster, callback=lambda r: received.append(r.method))
			)
		)
		submitter.start()
		submitter.join(timeout=0.2)
		assert submitter.is_alive()
		assert not first.superseded

		release.set()
		submitter.join(timeout=10)
		submitted[0].result(timeout=10)
		scheduler.shutdown(wait=True)

		assert first.superseded
		assert received == ["niblack", "otsu"]
