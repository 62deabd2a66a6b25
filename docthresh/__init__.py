"""Top-level package for local and global document thresholding.

Expose the `core` subpackage for convenience.
"""
from .core import *

__all__ = ["Binarizer", "binarize", "RasterImage", "BinaryImage", "ValidationError", "BinarizationScheduler"]
