#!/usr/bin/env python3
"""
Raster rendering of a scene frame with matplotlib.

Usage:
    python -m voronav.render [output.png] [--pointer X Y] [--seed SEED]
"""

from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import structlog
from matplotlib.collections import LineCollection
from matplotlib.patches import Rectangle

from .core.palette import to_unit_rgba
from .core.scene import FrameResult, Scene

logger = structlog.get_logger()

BACKGROUND = (240 / 255.0, 240 / 255.0, 240 / 255.0, 1.0)
HIGHLIGHT = (1.0, 1.0, 0.0, 1.0)


def region_image(scene: Scene, frame: FrameResult) -> np.ndarray:
    """
    RGBA image with one pixel per grid cell, row-major (rows, columns, 4).

    Cells not sampled this frame keep the background color.
    """
    buckets = frame.buckets
    image = np.empty((buckets.rows, buckets.columns, 4), dtype=np.float64)
    image[:, :] = BACKGROUND

    for region, bucket in enumerate(buckets):
        color = to_unit_rgba(frame.colors[region])
        for sample in bucket:
            image[sample.row, sample.column] = color

    return image


def render_frame(scene: Scene, frame: FrameResult, path: Union[str, Path],
                 dpi: int = 100) -> Path:
    """
    Paint a frame and save it as an image.

    Args:
        scene: Scene the frame was produced from
        frame: Frame to paint
        path: Output file
        dpi: Output resolution

    Returns:
        Path written
    """
    path = Path(path)
    width = max(scene.viewport.width, 1.0)
    height = max(scene.viewport.height, 1.0)
    res = scene.resolution

    fig, ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi)
    try:
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_facecolor(BACKGROUND)
        ax.axis("off")
        fig.subplots_adjust(left=0, right=1, top=1, bottom=0)

        buckets = frame.buckets
        if buckets.columns and buckets.rows:
            ax.imshow(
                region_image(scene, frame),
                extent=(0, buckets.columns * res, buckets.rows * res, 0),
                interpolation="nearest",
            )

        if frame.boundaries:
            lines = LineCollection([(s.start, s.end) for s in frame.boundaries],
                                   colors="black", linewidths=2, capstyle="butt")
            ax.add_collection(lines)

        for pixel in frame.edge_pixels:
            ax.add_patch(Rectangle((pixel.x, pixel.y), res, res, fill=False,
                                   edgecolor=HIGHLIGHT, linewidth=1))

        for centroid, label in zip(frame.centroids, scene.labels):
            ax.text(centroid.x, centroid.y, label.label, ha="center", va="center",
                    fontsize=16, fontweight="bold", color="black")

        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)

    logger.info("Frame rendered", path=str(path), hovered=frame.hovered,
                edge_pixels=len(frame.edge_pixels))
    return path


def main(argv: Optional[list] = None) -> Path:
    import argparse

    from .config import Settings
    from .core.scene import create_scene
    from .logging_setup import configure_logging

    parser = argparse.ArgumentParser(description="Render a navigation partition frame")
    parser.add_argument("output", nargs="?", default="voronav.png", help="Output image path")
    parser.add_argument("--pointer", nargs=2, type=float, metavar=("X", "Y"),
                        help="Pointer position to hover")
    parser.add_argument("--seed", help="Override the configured seed")
    args = parser.parse_args(argv)

    overrides = {"seed": args.seed} if args.seed else {}
    config = Settings(**overrides)
    configure_logging(config.log_level, "plain")

    scene = create_scene(config)
    frame = scene.frame(tuple(args.pointer) if args.pointer else None)
    return render_frame(scene, frame, args.output)


if __name__ == "__main__":
    main()
