"""Image statistics: grayscale conversion, window/global statistics and edge strength."""
from .grayscale import to_grayscale
from .window import compute_window_size, window_stats, local_stats_map
from .global_stats import compute_global_stats
from .edges import compute_edge_map

__all__ = [
	"to_grayscale",
	"compute_window_size",
	"window_stats",
	"local_stats_map",
	"compute_global_stats",
	"compute_edge_map",
]
