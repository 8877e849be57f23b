"""Sites and nearest-site classification."""

import math
from typing import Iterable, List, NamedTuple, Tuple

import numpy as np
import structlog

from .alea_prng import AleaPRNG

logger = structlog.get_logger()


class Site(NamedTuple):
    """A fixed point defining one region's identity."""
    x: float
    y: float
    index: int


class SitePartition:
    """
    Owns the sites and maps any point to the index of its nearest site.

    Distances are compared squared; a later site only replaces the current
    best when strictly closer, so ties resolve to the lowest index.
    """

    def __init__(self, positions: Iterable[Tuple[float, float]]):
        sites = []
        for i, (x, y) in enumerate(positions):
            x, y = float(x), float(y)
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ValueError(f"Site {i} has non-finite coordinates ({x}, {y})")
            sites.append(Site(x, y, i))

        if not sites:
            raise ValueError("At least one site is required")

        self._sites: Tuple[Site, ...] = tuple(sites)
        self._coords = np.array([[s.x, s.y] for s in sites], dtype=np.float64)

    @property
    def sites(self) -> Tuple[Site, ...]:
        return self._sites

    def __len__(self) -> int:
        return len(self._sites)

    def nearest(self, x: float, y: float) -> int:
        """
        Find the region index for given coordinates.

        Args:
            x, y: Query point, inside or outside the viewport

        Returns:
            Index of the closest site
        """
        closest_index = 0
        closest_dist = math.inf

        for site in self._sites:
            dx = site.x - x
            dy = site.y - y
            dist = dx * dx + dy * dy
            if dist < closest_dist:
                closest_dist = dist
                closest_index = site.index

        return closest_index

    def nearest_many(self, points: np.ndarray) -> np.ndarray:
        """
        Classify an (M, 2) array of points at once.

        Gives the same answer as calling nearest() per row: argmin returns
        the first minimum, which is the lowest tied index.
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(points) == 0:
            return np.zeros(0, dtype=np.int64)

        dx = self._coords[np.newaxis, :, 0] - points[:, 0, np.newaxis]
        dy = self._coords[np.newaxis, :, 1] - points[:, 1, np.newaxis]
        dist = dx * dx + dy * dy
        return np.argmin(dist, axis=1).astype(np.int64)


def place_sites(count: int, width: float, height: float, margin: float,
                prng: AleaPRNG) -> List[Tuple[float, float]]:
    """
    Generate random initial site positions away from the viewport edges.

    Args:
        count: Number of sites
        width: Viewport width
        height: Viewport height
        margin: Minimum distance from each edge
        prng: Random source

    Returns:
        List of (x, y) positions
    """
    if count < 1:
        raise ValueError(f"Site count must be at least 1, got {count}")

    def axis_range(extent: float) -> Tuple[float, float]:
        # Margin does not fit: spread over the whole axis instead
        if extent - 2 * margin <= 0:
            return 0.0, float(max(extent, 0))
        return float(margin), float(extent - margin)

    x_low, x_high = axis_range(width)
    y_low, y_high = axis_range(height)

    positions = []
    for _ in range(count):
        x = prng.uniform(x_low, x_high)
        y = prng.uniform(y_low, y_high)
        positions.append((x, y))

    logger.info("Sites placed", count=count, width=width, height=height, margin=margin)
    return positions

