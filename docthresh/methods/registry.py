"""
Algorithm registry.
Central name-keyed lookup for threshold algorithms so the Binarizer and
front ends can resolve an identifier to an instance.
"""

from typing import Dict, Any, List, Type
import logging

from ..core.base import ThresholdAlgorithm
from .catalog import get_spec

logger = logging.getLogger(__name__)


class AlgorithmRegistry:
	"""Catalog identifiers mapped to threshold algorithms, instantiated on first use."""

	def __init__(self):
		self._algorithms: Dict[str, ThresholdAlgorithm] = {}
		self._algorithm_classes: Dict[str, Type[ThresholdAlgorithm]] = {}

	def register(
		self,
		name: str,
		algorithm: ThresholdAlgorithm,
		override: bool = False
	) -> None:
		"""
		Register an algorithm instance.
		Args:
			name: Unique identifier for the algorithm
			algorithm: Algorithm instance
			override: Whether to override existing registration
		Raises:
			ValueError: If name already registered and override=False
		"""
		if name in self._algorithms and not override:
			raise ValueError(
				f"Algorithm '{name}' already registered. "
				"Use override=True to replace."
			)

		self._algorithms[name] = algorithm
		logger.debug(f"Registered algorithm: {name}")

	def register_class(
		self,
		identifier: str,
		algorithm_class: Type[ThresholdAlgorithm],
		override: bool = False
	) -> None:
		"""
		Register an algorithm class under its catalog identifier.
		The class is instantiated on the first get.
		Raises:
			KeyError: If the identifier has no catalog entry
			ValueError: If already registered and override=False
		"""
		get_spec(identifier)

		if identifier in self._algorithm_classes and not override:
			raise ValueError(
				f"Algorithm class '{identifier}' already registered. "
				"Use override=True to replace."
			)

		self._algorithm_classes[identifier] = algorithm_class
		self._algorithms.pop(identifier, None)
		logger.debug(f"Registered {algorithm_class.__name__} as {identifier}")

	def get(self, name: str) -> ThresholdAlgorithm:
		"""
		Get algorithm instance by name.
		Raises:
			KeyError: If algorithm not found
		"""
		if name in self._algorithms:
			return self._algorithms[name]

		if name in self._algorithm_classes:
			algorithm = self._algorithm_classes[name]()
			self._algorithms[name] = algorithm
			return algorithm

		raise KeyError(
			f"Algorithm '{name}' not found. "
			f"Available: {self.list_algorithms()}"
		)

	def list_algorithms(self) -> List[str]:
		"""Sorted names of all registered algorithms."""
		return sorted(set(self._algorithms) | set(self._algorithm_classes))

	def get_info(self, name: str) -> Dict[str, Any]:
		"""
		Get information about an algorithm.
		Args:
			name: Algorithm identifier
		Returns:
			Dictionary with catalog metadata plus parameter defaults and ranges
		"""
		algorithm = self.get(name)
		spec = algorithm.spec
		return {
			'name': algorithm.name,
			'display_name': spec.name,
			'year': spec.year,
			'description': spec.description,
			'formula': spec.formula,
			'default_params': algorithm.get_default_params(),
			'param_ranges': algorithm.get_param_ranges(),
			'windowed': spec.windowed,
			'needs_global_pass': spec.needs_global_pass,
			'needs_edge_map': spec.needs_edge_map,
			'class': algorithm.__class__.__name__
		}


# Global registry instance
_global_registry = AlgorithmRegistry()


def get_registry() -> AlgorithmRegistry:
	"""Get the global algorithm registry."""
	return _global_registry


def get_algorithm(name: str) -> ThresholdAlgorithm:
	"""Get algorithm from the global registry."""
	return _global_registry.get(name)


def list_algorithms() -> List[str]:
	"""List all registered algorithms."""
	return _global_registry.list_algorithms()


def register_default_algorithms() -> None:
	"""Register the eight catalog algorithms in the global registry."""
	from .global_methods import OtsuThreshold
	from .adaptive_methods import (
		NiblackThreshold,
		SauvolaThreshold,
		NICKThreshold,
		TRSinghThreshold
	)
	from .advanced_methods import (
		WolfThreshold,
		ISauvolaThreshold,
		WANThreshold
	)

	algorithms = {
		"otsu": OtsuThreshold,
		"niblack": NiblackThreshold,
		"sauvola": SauvolaThreshold,
		"wolf": WolfThreshold,
		"nick": NICKThreshold,
		"trsingh": TRSinghThreshold,
		"isauvola": ISauvolaThreshold,
		"wan": WANThreshold,
	}

	for identifier, algorithm_class in algorithms.items():
		_global_registry.register_class(identifier, algorithm_class, override=True)


# Auto-register default algorithms on import
register_default_algorithms()
