"""Threshold algorithms.

Contains the static catalog, global/adaptive/advanced algorithm implementations and a registry.
"""
from .catalog import AlgorithmSpec, ALGORITHM_SPECS, get_spec, list_specs, clamp_parameter
from .registry import get_algorithm, list_algorithms, get_registry

__all__ = [
	"AlgorithmSpec",
	"ALGORITHM_SPECS",
	"get_spec",
	"list_specs",
	"clamp_parameter",
	"get_algorithm",
	"list_algorithms",
	"get_registry",
]
