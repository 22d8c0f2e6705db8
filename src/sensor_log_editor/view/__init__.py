"""Downsampled view windows for plotting."""

from .lod_renderer import LODRenderer, compute_point_budget, downsample_min_max

__all__ = ["LODRenderer", "compute_point_budget", "downsample_min_max"]
