"""
Per-page scene state and the frame pipeline.

Everything one navigation widget needs lives on a Scene: sites, viewport,
colors, buckets, anchors, hover and press state, and the random source.
Each frame runs sample -> hover -> edges in that order on this object.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import structlog

from .alea_prng import AleaPRNG
from .centroids import Centroid, estimate_centroids
from .edges import EdgeDetector, Segment, boundary_segments
from .grid_sampler import GridSampler, RegionBuckets, Sample, Viewport, validate_step
from .hover import HoverTracker, HoverTransition
from .navigation import (
    LabelSink, NavigationDispatcher, RegionLabel, build_labels,
    DEFAULT_LABELS, DEFAULT_TARGETS,
)
from .palette import Color, phase_to_color, random_color
from .press import PressRepeater
from .site_partition import SitePartition, place_sites

logger = structlog.get_logger()

Pointer = Optional[Tuple[float, float]]


@dataclass
class FrameResult:
    """Everything a renderer needs for one frame; buckets are a snapshot."""
    buckets: RegionBuckets
    centroids: List[Centroid]
    hovered: Optional[int]
    phase: float
    transition: HoverTransition
    edge_pixels: List[Sample]
    boundaries: List[Segment]
    colors: List[Color]


@dataclass
class Scene:
    """Owned state of one navigation partition."""

    partition: SitePartition
    viewport: Viewport
    resolution: float
    sample_stride: float
    labels: List[RegionLabel]
    colors: List[Color]
    prng: AleaPRNG
    hover: HoverTracker
    press: PressRepeater
    snap_step: Optional[float] = None
    draw_vertical_boundaries: bool = False
    label_sink: Optional[LabelSink] = None
    dispatcher: Optional[NavigationDispatcher] = None
    centroids: List[Centroid] = field(default_factory=list)
    buckets: Optional[RegionBuckets] = None
    _in_frame: bool = field(default=False, init=False, repr=False)
    _placing_labels: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        self.resolution = validate_step(self.resolution)
        self.sample_stride = validate_step(self.sample_stride, "sample_stride")
        if len(self.labels) != len(self.partition) or len(self.colors) != len(self.partition):
            raise ValueError("Labels and colors must match the number of sites")

        self._sampler = GridSampler(self.partition, self.resolution)
        self._edges = EdgeDetector(self.partition)
        if self.buckets is None:
            self.buckets = RegionBuckets(len(self.partition))
        self.refresh_centroids()

    @property
    def region_count(self) -> int:
        return len(self.partition)

    def refresh_centroids(self) -> List[Centroid]:
        """Recompute label anchors and tell the label sink about them."""
        self._check_idle()
        self.centroids = estimate_centroids(
            self.partition, self.viewport, self.sample_stride, self.snap_step
        )
        if self.label_sink is not None:
            self._placing_labels = True
            try:
                for centroid, label in zip(self.centroids, self.labels):
                    self.label_sink.place(label.index, (centroid.x, centroid.y),
                                          label.label, label.target)
            finally:
                self._placing_labels = False
        return self.centroids

    def _check_idle(self):
        if self._in_frame:
            raise RuntimeError("Frame already in progress")
        if self._placing_labels:
            raise RuntimeError("Label placement in progress")

    def resize(self, width: float, height: float) -> List[Centroid]:
        """
        Change the viewport size.

        Sites stay where they are; anchors are recomputed at once and the
        next frame samples the new area. Raises RuntimeError when called
        from inside a frame or from the label sink.
        """
        self._check_idle()
        self.viewport = Viewport.create(width, height)
        logger.info("Viewport resized", width=self.viewport.width, height=self.viewport.height)
        return self.refresh_centroids()

    def frame(self, pointer: Pointer = None) -> FrameResult:
        """
        Run one frame.

        Args:
            pointer: Pointer position this frame, None if there is none

        Returns:
            Buckets, anchors, hover state and highlight data
        """
        self._check_idle()
        self._in_frame = True
        try:
            self._sampler.sample(self.viewport, self.buckets)

            x, y = pointer if pointer is not None else (None, None)
            transition = self.hover.update(x, y, self.viewport)

            hovered = self.hover.hovered
            edge_pixels: List[Sample] = []
            if hovered is not None:
                self.colors[hovered] = phase_to_color(self.hover.phase)
                edge_pixels = self._edges.edge_pixels(
                    self.buckets, hovered, self.viewport, self.resolution
                )

            boundaries = boundary_segments(
                self.buckets, self.viewport, self.resolution,
                vertical=self.draw_vertical_boundaries,
            )

            return FrameResult(
                buckets=self.buckets.copy(),
                centroids=list(self.centroids),
                hovered=hovered,
                phase=self.hover.phase,
                transition=transition,
                edge_pixels=edge_pixels,
                boundaries=boundaries,
                colors=list(self.colors),
            )
        finally:
            self._in_frame = False

    def leave(self) -> HoverTransition:
        """Pointer left the viewport."""
        return self.hover.leave()

    def region_at(self, x: float, y: float) -> Optional[int]:
        """Region under a point inside the viewport, None outside."""
        if not self.viewport.contains(x, y):
            return None
        return self.partition.nearest(x, y)

    def recolor(self, region: int) -> Color:
        self.colors[region] = random_color(self.prng)
        return self.colors[region]

    def activate(self, x: float, y: float, now: float) -> Optional[RegionLabel]:
        """
        Press or tap at a point.

        Dispatches the region's target, recolors the region and starts the
        hold timer. Outside the viewport nothing happens.
        """
        region = self.region_at(x, y)
        if region is None:
            return None

        label = self.labels[region]
        logger.info("Region activated", region=region, label=label.label, target=label.target)

        if label.target and self.dispatcher is not None:
            self.dispatcher.dispatch(label.target)

        self.recolor(region)
        self.press.start(now)
        return label

    def release(self) -> bool:
        """Pointer released; stops the hold timer."""
        return self.press.stop()

    def tick(self, now: float, pointer: Pointer = None) -> List[int]:
        """
        Advance the hold timer.

        Each due firing recolors the region under the pointer, if the
        pointer is inside the viewport.

        Returns:
            Regions recolored, one entry per firing
        """
        due = self.press.poll(now)
        if due == 0 or pointer is None:
            return []

        region = self.region_at(*pointer)
        if region is None:
            return []

        for _ in range(due):
            self.recolor(region)
        return [region] * due


def create_scene(config, positions: Optional[Sequence[Tuple[float, float]]] = None,
                 label_sink: Optional[LabelSink] = None,
                 dispatcher: Optional[NavigationDispatcher] = None) -> Scene:
    """
    Build a scene from settings.

    Args:
        config: Settings (see voronav.config.Settings)
        positions: Explicit site positions; random placement when omitted
        label_sink: Receives label placements
        dispatcher: Receives navigation targets

    Returns:
        Ready scene with anchors computed
    """
    prng = AleaPRNG(config.seed)
    viewport = Viewport.create(config.viewport_width, config.viewport_height)

    if positions is None:
        positions = place_sites(config.site_count, viewport.width, viewport.height,
                                config.site_margin, prng)
    partition = SitePartition(positions)
    count = len(partition)

    labels = build_labels(count, config.labels or DEFAULT_LABELS,
                          config.targets if config.targets is not None else DEFAULT_TARGETS)
    colors = [random_color(prng) for _ in range(count)]

    scene = Scene(
        partition=partition,
        viewport=viewport,
        resolution=config.resolution,
        sample_stride=config.effective_sample_stride,
        labels=labels,
        colors=colors,
        prng=prng,
        hover=HoverTracker(partition, prng, phase_step=config.hover_phase_step),
        press=PressRepeater(config.press_interval_ms),
        snap_step=config.effective_snap_step,
        draw_vertical_boundaries=config.draw_vertical_boundaries,
        label_sink=label_sink,
        dispatcher=dispatcher,
    )

    logger.info("Scene created", sites=count, width=viewport.width, height=viewport.height,
                resolution=scene.resolution, sample_stride=scene.sample_stride, seed=config.seed)
    return scene
