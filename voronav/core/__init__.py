"""
Core partition, sampling and interaction functionality.
"""

from .site_partition import Site, SitePartition, place_sites
from .grid_sampler import GridSampler, RegionBuckets, Sample, Viewport, iter_grid
from .centroids import Centroid, compute_centroids, estimate_centroids
from .edges import EdgeDetector, boundary_segments
from .hover import HoverTracker, HoverTransition
from .scene import FrameResult, Scene, create_scene

__all__ = ['Site', 'SitePartition', 'place_sites',
           'GridSampler', 'RegionBuckets', 'Sample', 'Viewport', 'iter_grid',
           'Centroid', 'compute_centroids', 'estimate_centroids',
           'EdgeDetector', 'boundary_segments',
           'HoverTracker', 'HoverTransition',
           'FrameResult', 'Scene', 'create_scene']
