"""
Configuration management for the binarization system.
Handles loading and validation of configuration files (YAML or JSON).
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional
from pathlib import Path
import yaml
import json
from copy import deepcopy


@dataclass
class PipelineConfig:
	"""Complete pipeline configuration."""
	# Method selection
	method: str = "otsu"
	parameter: Optional[float] = None

	# Performance settings
	num_workers: int = 1
	max_concurrent_algorithms: int = 3

	# Logging
	log_level: str = "INFO"

	def __post_init__(self):
		if self.num_workers < 1:
			raise ValueError(f"num_workers must be at least 1, got {self.num_workers}")
		if self.max_concurrent_algorithms < 1:
			raise ValueError(
				f"max_concurrent_algorithms must be at least 1, got {self.max_concurrent_algorithms}"
			)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
		"""
		Create PipelineConfig from dictionary.
		Raises:
			ValueError: On unknown keys
		"""
		config_dict = deepcopy(config_dict or {})

		known = {f.name for f in fields(cls)}
		unknown = set(config_dict) - known
		if unknown:
			raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

		return cls(**config_dict)


class ConfigLoader:
	"""Load and manage configuration files."""

	@staticmethod
	def load_yaml(path: Path) -> Dict[str, Any]:
		"""
		Load configuration from YAML file.
		Args:
			path: Path to YAML file
		Returns:
			Configuration dictionary
		"""
		with open(path, 'r') as f:
			return yaml.safe_load(f) or {}

	@staticmethod
	def load_json(path: Path) -> Dict[str, Any]:
		"""
		Load configuration from JSON file.
		Args:
			path: Path to JSON file
		Returns:
			Configuration dictionary
		"""
		with open(path, 'r') as f:
			return json.load(f)

	@classmethod
	def load_config(cls, path: Path) -> PipelineConfig:
		"""
		Load PipelineConfig from file.
		Args:
			path: Path to config file (YAML or JSON)
		Returns:
			PipelineConfig object
		"""
		path = Path(path)

		if path.suffix in ['.yaml', '.yml']:
			config_dict = cls.load_yaml(path)
		elif path.suffix == '.json':
			config_dict = cls.load_json(path)
		else:
			raise ValueError(f"Unsupported config format: {path.suffix}")

		return PipelineConfig.from_dict(config_dict)


def get_default_config() -> PipelineConfig:
	"""
	Get default pipeline configuration.
	Returns:
		Default PipelineConfig
	"""
	return PipelineConfig(
		method="otsu",
		parameter=None,
		num_workers=1,
		max_concurrent_algorithms=3,
		log_level="INFO"
	)


# Example default configuration as YAML string
DEFAULT_CONFIG_YAML = """
# Default Binarization Pipeline Configuration

# Method selection
method: "otsu"  # otsu, niblack, sauvola, wolf, nick, trsingh, isauvola, wan
parameter: null  # k (or p for trsingh); null uses the algorithm default

# Performance settings
num_workers: 1  # row bands evaluated in parallel for windowed methods
max_concurrent_algorithms: 3  # side-by-side comparison width

# Logging
log_level: "INFO"
"""
