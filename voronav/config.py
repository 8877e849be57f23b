"""Configuration management."""

from typing import Dict, List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from .core.navigation import DEFAULT_LABELS, DEFAULT_TARGETS


class Settings(BaseSettings):
    """Application settings pulled from VORONAV_* environment variables."""

    # Viewport
    viewport_width: float = Field(default=800, ge=0, allow_inf_nan=False, description="Initial viewport width")
    viewport_height: float = Field(default=600, ge=0, allow_inf_nan=False, description="Initial viewport height")

    # Sampling
    resolution: float = Field(default=10, gt=0, allow_inf_nan=False, description="Rendering grid step")
    sample_stride: Optional[float] = Field(
        default=None, gt=0, allow_inf_nan=False,
        description="Centroid sampling step, defaults to twice the resolution"
    )

    # Sites
    site_count: int = Field(default=6, ge=1, description="Number of sites")
    site_margin: float = Field(default=100, ge=0, allow_inf_nan=False, description="Minimum distance of random sites from the edges")
    seed: str = Field(default="default", description="Seed for site placement, colors and hover jumps")

    # Labels
    labels: List[str] = Field(default_factory=lambda: list(DEFAULT_LABELS), min_length=1, description="Region labels")
    targets: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TARGETS), description="Navigation target per label")

    # Centroid snapping
    snap_centroids: bool = Field(default=False, description="Round label anchors to the grid")
    snap_step: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False, description="Snap step, defaults to the resolution")

    # Interaction
    hover_phase_step: float = Field(default=2.0, ge=0, allow_inf_nan=False, description="Hover hue advance per frame in degrees")
    press_interval_ms: float = Field(default=50, gt=0, allow_inf_nan=False, description="Recolor interval while the pointer is held")
    draw_vertical_boundaries: bool = Field(default=False, description="Emit right-hand region boundaries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    @model_validator(mode="after")
    def check_stride(self):
        if self.sample_stride is not None and self.sample_stride < self.resolution:
            raise ValueError(
                f"sample_stride ({self.sample_stride}) must not be finer than resolution ({self.resolution})"
            )
        return self

    @property
    def effective_sample_stride(self) -> float:
        """Centroid sampling step actually used."""
        return self.sample_stride if self.sample_stride is not None else 2 * self.resolution

    @property
    def effective_snap_step(self) -> Optional[float]:
        """Snap step when snapping is enabled, otherwise None."""
        if not self.snap_centroids:
            return None
        return self.snap_step if self.snap_step is not None else self.resolution

    class Config:
        env_prefix = "VORONAV_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
