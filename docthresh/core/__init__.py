"""Core package: data model, configuration, Binarizer and scheduler."""
from .base import (
	RasterImage,
	GrayscaleBuffer,
	LocalStats,
	GlobalStats,
	EdgeMap,
	BinaryImage,
	BinarizationResult,
	BinarizerState,
	ThresholdAlgorithm,
	ValidationError,
)
from .config import PipelineConfig, ConfigLoader, get_default_config
from .pipeline import Binarizer, binarize
from .scheduler import BinarizationScheduler, BinarizationHandle

__all__ = [
	"RasterImage",
	"GrayscaleBuffer",
	"LocalStats",
	"GlobalStats",
	"EdgeMap",
	"BinaryImage",
	"BinarizationResult",
	"BinarizerState",
	"ThresholdAlgorithm",
	"ValidationError",
	"PipelineConfig",
	"ConfigLoader",
	"get_default_config",
	"Binarizer",
	"binarize",
	"BinarizationScheduler",
	"BinarizationHandle",
]
