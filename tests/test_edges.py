"""Tests for edge pixel detection and region boundaries."""

import pytest
from voronav.core.edges import EdgeDetector, Segment, boundary_segments
from voronav.core.grid_sampler import GridSampler, Viewport
from voronav.core.site_partition import SitePartition

VIEWPORT = Viewport(100, 100)


@pytest.fixture
def vertical_split():
    """Sites splitting the viewport into left (0) and right (1) halves."""
    partition = SitePartition([(25, 50), (75, 50)])
    buckets = GridSampler(partition, 10).sample(VIEWPORT)
    return partition, buckets


def find(bucket, x, y):
    return next(s for s in bucket if (s.x, s.y) == (x, y))


class TestIsEdgePixel:
    """Test the single-pixel edge rule."""

    def test_origin_is_edge(self, vertical_split):
        """The corner at (0, 0) always touches the viewport boundary."""
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)
        region = partition.nearest(0, 0)

        assert detector.is_edge_pixel(buckets[region], (0, 0), region, VIEWPORT, 10)

    def test_origin_is_edge_in_any_region(self):
        partition = SitePartition([(90, 90), (0, 0)])
        detector = EdgeDetector(partition)
        assert detector.is_edge_pixel(None, (0, 0), 1, VIEWPORT, 10)

    def test_interior_pixel(self, vertical_split):
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)
        pixel = find(buckets[0], 20, 50)

        assert not detector.is_edge_pixel(buckets[0], pixel, 0, VIEWPORT, 10)

    def test_neighbor_in_other_region(self, vertical_split):
        """Column x=50 belongs to region 0 and touches region 1 on its right."""
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)
        pixel = find(buckets[0], 50, 50)

        assert detector.is_edge_pixel(buckets[0], pixel, 0, VIEWPORT, 10)
        assert not detector.is_edge_pixel(buckets[0], find(buckets[0], 40, 50), 0, VIEWPORT, 10)

    def test_bottom_row(self, vertical_split):
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)

        assert detector.is_edge_pixel(buckets[0], find(buckets[0], 20, 90), 0, VIEWPORT, 10)

    def test_requery_matches_lookup(self, vertical_split):
        """Without a bucket the result is the same as with one."""
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)

        for region, bucket in enumerate(buckets):
            for pixel in bucket:
                assert (detector.is_edge_pixel(buckets, pixel, region, VIEWPORT, 10)
                        == detector.is_edge_pixel(None, pixel, region, VIEWPORT, 10))

    def test_sample_list_matches_pass_lookup(self, vertical_split):
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)

        for x, y in [(40, 50), (20, 90), (0, 30), (30, 30)]:
            pixel = find(buckets[0], x, y)
            assert (detector.is_edge_pixel(buckets[0], pixel, 0, VIEWPORT, 10)
                    == detector.is_edge_pixel(buckets, pixel, 0, VIEWPORT, 10))

    def test_matches_edge_pixels(self, vertical_split):
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)

        expected = [p for p in buckets[1] if detector.is_edge_pixel(buckets, p, 1, VIEWPORT, 10)]
        assert detector.edge_pixels(buckets, 1, VIEWPORT, 10) == expected

    def test_invalid_resolution(self, vertical_split):
        partition, buckets = vertical_split
        with pytest.raises(ValueError):
            EdgeDetector(partition).is_edge_pixel(buckets[0], (0, 0), 0, VIEWPORT, 0)


class TestEdgePixels:
    """Test edge pixel collection for a whole region."""

    def test_matches_single_pixel_rule(self, vertical_split):
        partition, buckets = vertical_split
        detector = EdgeDetector(partition)

        for region in range(len(partition)):
            expected = [
                p for p in buckets[region]
                if detector.is_edge_pixel(None, p, region, VIEWPORT, 10)
            ]
            assert detector.edge_pixels(buckets, region, VIEWPORT, 10) == expected

    def test_single_site_border_ring(self):
        """With one site only the viewport border ring is an edge."""
        partition = SitePartition([(50, 50)])
        buckets = GridSampler(partition, 10).sample(VIEWPORT)
        edges = EdgeDetector(partition).edge_pixels(buckets, 0, VIEWPORT, 10)

        assert len(edges) == 36
        for pixel in edges:
            assert pixel.column in (0, 9) or pixel.row in (0, 9)

    def test_left_region(self, vertical_split):
        partition, buckets = vertical_split
        edges = EdgeDetector(partition).edge_pixels(buckets, 0, VIEWPORT, 10)
        cells = {(p.column, p.row) for p in edges}

        # Left border, shared border at column 5, top and bottom rows
        expected = {(c, r) for c in range(6) for r in range(10)
                    if c in (0, 5) or r in (0, 9)}
        assert cells == expected

    def test_empty_viewport(self, vertical_split):
        partition, _ = vertical_split
        buckets = GridSampler(partition, 10).sample(Viewport(0, 0))
        assert EdgeDetector(partition).edge_pixels(buckets, 0, Viewport(0, 0), 10) == []


class TestBoundarySegments:
    """Test boundary lines between regions."""

    def test_vertical_split_horizontal_only(self, vertical_split):
        """A vertical split has no bottom boundaries."""
        _, buckets = vertical_split
        assert boundary_segments(buckets, VIEWPORT, 10) == []

    def test_vertical_split_with_vertical(self, vertical_split):
        _, buckets = vertical_split
        segments = boundary_segments(buckets, VIEWPORT, 10, vertical=True)

        assert len(segments) == 10
        assert all(s.start[0] == s.end[0] == 60.0 for s in segments)
        assert Segment((60.0, 0.0), (60.0, 10.0)) in segments

    def test_horizontal_split(self):
        partition = SitePartition([(50, 25), (50, 75)])
        buckets = GridSampler(partition, 10).sample(VIEWPORT)
        segments = boundary_segments(buckets, VIEWPORT, 10)

        assert len(segments) == 10
        assert all(s.start[1] == s.end[1] == 60.0 for s in segments)
        assert Segment((0.0, 60.0), (10.0, 60.0)) in segments
