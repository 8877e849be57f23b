"""Tests for centroid estimation."""

import math

import pytest
from voronav.core.centroids import (
    Centroid, compute_centroids, estimate_centroids, snap_to_grid
)
from voronav.core.grid_sampler import GridSampler, Viewport
from voronav.core.site_partition import SitePartition


@pytest.fixture
def split_partition():
    """Two sites splitting a 100x100 viewport at x=50."""
    return SitePartition([(25, 50), (75, 50)])


class TestComputeCentroids:
    """Test centroid means and fallbacks."""

    def test_mean_of_samples(self, split_partition):
        """Centroid is the mean of the bucket's corners."""
        buckets = GridSampler(split_partition, 10).sample(Viewport(100, 100))
        centroids = compute_centroids(buckets, split_partition.sites, 10)

        # Column x=50 is a tie and goes to site 0
        assert centroids[0] == Centroid(25.0, 45.0, 0, 60)
        assert centroids[1] == Centroid(75.0, 45.0, 1, 40)

    def test_fallback_to_site(self):
        """An empty bucket falls back to the site position."""
        partition = SitePartition([(0, 0), (11, 11)])
        buckets = GridSampler(partition, 100).sample(Viewport(10, 10))
        centroids = compute_centroids(buckets, partition.sites, 100)

        assert buckets.sizes() == [1, 0]
        assert centroids[1] == Centroid(11.0, 11.0, 1, 0)

    def test_site_outside_viewport(self):
        partition = SitePartition([(50, 50), (1000, 1000)])
        buckets = GridSampler(partition, 10).sample(Viewport(100, 100))
        centroids = compute_centroids(buckets, partition.sites, 10)

        assert (centroids[1].x, centroids[1].y) == (1000.0, 1000.0)
        assert centroids[0].sample_count == 100

    def test_zero_viewport(self, split_partition):
        buckets = GridSampler(split_partition, 10).sample(Viewport(0, 0))
        centroids = compute_centroids(buckets, split_partition.sites, 10)

        assert [(c.x, c.y) for c in centroids] == [(25.0, 50.0), (75.0, 50.0)]

    def test_one_per_region_in_order(self):
        partition = SitePartition([(10, 10), (90, 10), (50, 90), (50, 50)])
        buckets = GridSampler(partition, 10).sample(Viewport(100, 100))
        centroids = compute_centroids(buckets, partition.sites, 10)

        assert [c.index for c in centroids] == [0, 1, 2, 3]

    def test_sites_unchanged(self, split_partition):
        before = split_partition.sites
        buckets = GridSampler(split_partition, 10).sample(Viewport(100, 100))
        compute_centroids(buckets, split_partition.sites, 10, snap_step=20)
        assert split_partition.sites == before

    def test_snap(self, split_partition):
        """Snapping rounds to the nearest multiple of the step."""
        buckets = GridSampler(split_partition, 10).sample(Viewport(100, 100))
        centroids = compute_centroids(buckets, split_partition.sites, 10, snap_step=20)

        assert (centroids[0].x, centroids[0].y) == (20.0, 40.0)
        assert (centroids[1].x, centroids[1].y) == (80.0, 40.0)

    @pytest.mark.parametrize("bad", [0, -10, math.nan])
    def test_invalid_sample_resolution(self, split_partition, bad):
        buckets = GridSampler(split_partition, 10).sample(Viewport(100, 100))
        with pytest.raises(ValueError):
            compute_centroids(buckets, split_partition.sites, bad)

    def test_bucket_count_mismatch(self, split_partition):
        other = SitePartition([(0, 0)])
        buckets = GridSampler(other, 10).sample(Viewport(10, 10))
        with pytest.raises(ValueError):
            compute_centroids(buckets, split_partition.sites, 10)


class TestSnapToGrid:
    """Test rounding to grid multiples."""

    def test_rounding(self):
        assert snap_to_grid(14, 10) == 10
        assert snap_to_grid(15, 10) == 20
        assert snap_to_grid(16, 10) == 20
        assert snap_to_grid(-15, 10) == -10
        assert snap_to_grid(0, 10) == 0


class TestEstimateCentroids:
    """Test the stand-alone coarse sampling pass."""

    def test_coarse_stride(self, split_partition):
        """Centroids from a stride-20 pass."""
        centroids = estimate_centroids(split_partition, Viewport(100, 100), 20)

        assert (centroids[0].x, centroids[0].y) == (20.0, 40.0)
        assert (centroids[1].x, centroids[1].y) == (70.0, 40.0)
        assert centroids[0].sample_count + centroids[1].sample_count == 25

    def test_with_snap(self, split_partition):
        centroids = estimate_centroids(split_partition, Viewport(100, 100), 20, snap_step=50)
        assert [(c.x, c.y) for c in centroids] == [(0.0, 50.0), (50.0, 50.0)]
