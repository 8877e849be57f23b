"""Raster sampling of the viewport into per-region buckets."""

import math
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .site_partition import SitePartition

logger = structlog.get_logger()


class Viewport(NamedTuple):
    """Drawable area, [0, width) x [0, height)."""
    width: float
    height: float

    @classmethod
    def create(cls, width: float, height: float) -> "Viewport":
        """Validated constructor. Zero extents are allowed."""
        width, height = float(width), float(height)
        for name, value in (("width", width), ("height", height)):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Viewport {name} must be finite and >= 0, got {value}")
        return cls(width, height)

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


class Sample(NamedTuple):
    """Grid cell top-left corner and the region that owns it."""
    x: float
    y: float
    region: int
    column: int
    row: int


def validate_step(step: float, name: str = "resolution") -> float:
    """Reject non-positive or non-finite grid steps."""
    step = float(step)
    if not math.isfinite(step) or step <= 0:
        raise ValueError(f"{name} must be a finite number > 0, got {step}")
    return step


def axis_count(extent: float, step: float) -> int:
    """Number of grid corners k * step strictly below extent."""
    if extent <= 0:
        return 0
    count = int(math.ceil(extent / step))
    # Guard against float error at exact multiples
    while count > 0 and (count - 1) * step >= extent:
        count -= 1
    while count * step < extent:
        count += 1
    return count


class GridPoints:
    """
    Lazy, restartable raster scan of grid cell corners.

    Columns are the outer loop, rows the inner one. Iterating again starts
    a fresh scan.
    """

    def __init__(self, viewport: Viewport, resolution: float):
        self.viewport = viewport
        self.resolution = validate_step(resolution)
        self.columns = axis_count(viewport.width, self.resolution)
        self.rows = axis_count(viewport.height, self.resolution)

    def __len__(self) -> int:
        return self.columns * self.rows

    def __iter__(self) -> Iterator[Tuple[int, int, float, float]]:
        for column in range(self.columns):
            x = column * self.resolution
            for row in range(self.rows):
                yield column, row, x, row * self.resolution

    def as_array(self) -> np.ndarray:
        """All corners as an (M, 2) array in scan order."""
        if len(self) == 0:
            return np.zeros((0, 2), dtype=np.float64)
        xs = np.arange(self.columns, dtype=np.float64) * self.resolution
        ys = np.arange(self.rows, dtype=np.float64) * self.resolution
        grid_x, grid_y = np.meshgrid(xs, ys, indexing="ij")
        return np.column_stack([grid_x.ravel(), grid_y.ravel()])


def iter_grid(viewport: Viewport, resolution: float) -> GridPoints:
    """Grid corners (column, row, x, y) for the viewport at the given step."""
    return GridPoints(viewport, resolution)


class RegionBuckets:
    """
    Samples owned by each region during one pass.

    Also keeps the (column, row) -> region lookup of the same pass.
    """

    def __init__(self, region_count: int):
        self.region_count = region_count
        self._buckets: List[List[Sample]] = [[] for _ in range(region_count)]
        self._owners: Dict[Tuple[int, int], int] = {}
        self.columns = 0
        self.rows = 0

    def reset(self, columns: int = 0, rows: int = 0) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._owners.clear()
        self.columns = columns
        self.rows = rows

    def add(self, sample: Sample) -> None:
        self._buckets[sample.region].append(sample)
        self._owners[(sample.column, sample.row)] = sample.region

    def copy(self) -> "RegionBuckets":
        """Snapshot that later passes over these buckets leave untouched."""
        snapshot = RegionBuckets(self.region_count)
        snapshot._buckets = [list(b) for b in self._buckets]
        snapshot._owners = dict(self._owners)
        snapshot.columns = self.columns
        snapshot.rows = self.rows
        return snapshot

    def owner(self, column: int, row: int) -> Optional[int]:
        """Region of a grid cell sampled this pass, or None."""
        return self._owners.get((column, row))

    def __getitem__(self, region: int) -> List[Sample]:
        return self._buckets[region]

    def __len__(self) -> int:
        return self.region_count

    def __iter__(self):
        return iter(self._buckets)

    @property
    def total(self) -> int:
        """Total samples across all buckets."""
        return sum(len(b) for b in self._buckets)

    def sizes(self) -> List[int]:
        return [len(b) for b in self._buckets]


class GridSampler:
    """Classifies every grid corner of the viewport by nearest site."""

    def __init__(self, partition: SitePartition, resolution: float):
        self.partition = partition
        self.resolution = validate_step(resolution)

    def sample(self, viewport: Viewport,
               buckets: Optional[RegionBuckets] = None) -> RegionBuckets:
        """
        Run one full pass over the viewport.

        Args:
            viewport: Area to scan
            buckets: Buckets to refill; a new set is created when omitted

        Returns:
            Buckets holding exactly one entry per grid corner
        """
        if buckets is None:
            buckets = RegionBuckets(len(self.partition))
        elif len(buckets) != len(self.partition):
            raise ValueError(
                f"Buckets sized for {len(buckets)} regions, partition has {len(self.partition)}"
            )

        grid = iter_grid(viewport, self.resolution)
        buckets.reset(grid.columns, grid.rows)

        owners = self.partition.nearest_many(grid.as_array())
        for (column, row, x, y), region in zip(grid, owners):
            buckets.add(Sample(x, y, int(region), column, row))

        logger.debug("Grid sampled", columns=grid.columns, rows=grid.rows,
                     samples=buckets.total)
        return buckets
