"""Label anchor estimation from sampled region membership."""

import math
from typing import List, NamedTuple, Optional, Sequence

import numpy as np
import structlog

from .grid_sampler import GridSampler, RegionBuckets, Viewport, validate_step
from .site_partition import Site, SitePartition

logger = structlog.get_logger()


class Centroid(NamedTuple):
    """Label anchor of one region."""
    x: float
    y: float
    index: int
    sample_count: int


def snap_to_grid(value: float, step: float) -> float:
    """Round to the nearest multiple of step, halves rounding up."""
    return math.floor(value / step + 0.5) * step


def compute_centroids(buckets: RegionBuckets, sites: Sequence[Site],
                      sample_resolution: float,
                      snap_step: Optional[float] = None) -> List[Centroid]:
    """
    Compute the centroid of every region from its sampled points.

    Empty buckets fall back to the site's own coordinate.

    Args:
        buckets: Samples per region from one pass
        sites: Sites in index order
        sample_resolution: Step the buckets were sampled with
        snap_step: Optional grid step the anchors are rounded to

    Returns:
        One Centroid per region, ordered by region index
    """
    validate_step(sample_resolution, "sample_resolution")
    if snap_step is not None:
        snap_step = validate_step(snap_step, "snap_step")
    if len(buckets) != len(sites):
        raise ValueError(f"Got {len(buckets)} buckets for {len(sites)} sites")

    centroids = []
    for site in sites:
        bucket = buckets[site.index]
        if bucket:
            coords = np.array([(s.x, s.y) for s in bucket], dtype=np.float64)
            cx, cy = np.mean(coords, axis=0)
            cx, cy = float(cx), float(cy)
        else:
            cx, cy = site.x, site.y

        if snap_step is not None:
            cx = snap_to_grid(cx, snap_step)
            cy = snap_to_grid(cy, snap_step)

        centroids.append(Centroid(cx, cy, site.index, len(bucket)))

    empty = [c.index for c in centroids if c.sample_count == 0]
    if empty:
        logger.debug("Regions without samples use site position", regions=empty)

    return centroids


def estimate_centroids(partition: SitePartition, viewport: Viewport, stride: float,
                       snap_step: Optional[float] = None) -> List[Centroid]:
    """
    Sample the viewport at stride and compute centroids from that pass.

    The stride is usually coarser than the rendering grid.
    """
    buckets = GridSampler(partition, stride).sample(viewport)
    centroids = compute_centroids(buckets, partition.sites, stride, snap_step)
    logger.info("Centroids estimated", stride=stride, samples=buckets.total,
                snapped=snap_step is not None)
    return centroids
