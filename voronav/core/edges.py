"""Edge pixels and region boundaries on the sampling grid."""

from typing import List, NamedTuple, Sequence, Tuple, Union

import structlog

from .grid_sampler import RegionBuckets, Sample, Viewport, validate_step
from .site_partition import SitePartition

logger = structlog.get_logger()

Point = Tuple[float, float]

NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Segment(NamedTuple):
    """Line between two grid corners."""
    start: Point
    end: Point


class EdgeDetector:
    """
    Finds cells of a region that touch another region or the viewport edge.

    Neighbor corners are computed from grid indices (column * resolution)
    so they coincide exactly with the corners the sampler produced.
    """

    def __init__(self, partition: SitePartition):
        self.partition = partition

    def is_edge_pixel(self, bucket: Union[RegionBuckets, Sequence[Sample], None],
                      pixel: Sample,
                      region_index: int, viewport: Viewport,
                      resolution: float) -> bool:
        """
        Check whether a cell is on the border of its region.

        Args:
            bucket: Membership shortcut: the pass's RegionBuckets (constant
                time lookup), the samples of region_index (turned into a set
                per call), or None to always re-query. edge_pixels() is the
                fast path for a whole region.
            pixel: The cell to test, a Sample or an (x, y) grid corner
            region_index: Region the cell belongs to
            viewport: Drawable area
            resolution: Grid step

        Returns:
            True if any axis neighbor is outside the viewport or owned by
            another region
        """
        resolution = validate_step(resolution)
        if not isinstance(pixel, Sample):
            x, y = pixel
            pixel = Sample(x, y, region_index, round(x / resolution), round(y / resolution))

        if isinstance(bucket, RegionBuckets):
            def known_same(cell):
                return bucket.owner(*cell) == region_index
        else:
            known_same = ({(s.column, s.row) for s in bucket} if bucket else set()).__contains__
        return self._check(pixel, region_index, viewport, resolution, known_same)

    def edge_pixels(self, buckets: RegionBuckets, region_index: int,
                    viewport: Viewport, resolution: float) -> List[Sample]:
        """All edge cells of one region, using the pass's lookup."""
        resolution = validate_step(resolution)

        def same_region(cell):
            return buckets.owner(*cell) == region_index

        edges = [
            pixel for pixel in buckets[region_index]
            if self._check(pixel, region_index, viewport, resolution, same_region)
        ]
        logger.debug("Edge pixels found", region=region_index, count=len(edges))
        return edges

    def _check(self, pixel, region_index, viewport, resolution, known_same) -> bool:
        for dc, dr in NEIGHBOR_OFFSETS:
            column, row = pixel.column + dc, pixel.row + dr
            nx, ny = column * resolution, row * resolution

            # Viewport boundary counts as an edge
            if not viewport.contains(nx, ny):
                return True

            if known_same((column, row)):
                continue
            if self.partition.nearest(nx, ny) != region_index:
                return True

        return False


def boundary_segments(buckets: RegionBuckets, viewport: Viewport, resolution: float,
                      vertical: bool = False) -> List[Segment]:
    """
    Lines separating neighboring cells of different regions.

    The bottom side of a cell is emitted when the cell below belongs to
    another region. Right-hand sides are only emitted with vertical=True.
    """
    resolution = validate_step(resolution)
    segments = []

    for column in range(buckets.columns):
        x = column * resolution
        for row in range(buckets.rows):
            y = row * resolution
            region = buckets.owner(column, row)

            if vertical and viewport.contains((column + 1) * resolution, y):
                right = buckets.owner(column + 1, row)
                if right is not None and right != region:
                    x1 = (column + 1) * resolution
                    segments.append(Segment((x1, y), (x1, y + resolution)))

            if viewport.contains(x, (row + 1) * resolution):
                below = buckets.owner(column, row + 1)
                if below is not None and below != region:
                    y1 = (row + 1) * resolution
                    segments.append(Segment((x, y1), (x + resolution, y1)))

    return segments
