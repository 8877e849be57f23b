"""Region colors."""

import colorsys
from typing import Tuple

from .alea_prng import AleaPRNG

Color = Tuple[int, int, int, int]

CHANNEL_MIN = 100
CHANNEL_MAX = 255
REGION_ALPHA = 200


def random_color(prng: AleaPRNG, alpha: int = REGION_ALPHA) -> Color:
    """Light random RGBA color, each channel in [100, 255)."""
    r = int(prng.uniform(CHANNEL_MIN, CHANNEL_MAX))
    g = int(prng.uniform(CHANNEL_MIN, CHANNEL_MAX))
    b = int(prng.uniform(CHANNEL_MIN, CHANNEL_MAX))
    return (r, g, b, alpha)


def phase_to_color(phase: float, saturation: float = 0.45, value: float = 1.0,
                   alpha: int = REGION_ALPHA) -> Color:
    """Map a hover phase in degrees to an RGBA color with that hue."""
    r, g, b = colorsys.hsv_to_rgb((phase % 360.0) / 360.0, saturation, value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), alpha)


def to_hex(color: Color) -> str:
    """'#rrggbbaa' string for a color."""
    return "#{:02x}{:02x}{:02x}{:02x}".format(*color)


def to_unit_rgba(color: Color) -> Tuple[float, float, float, float]:
    """Color with channels scaled to [0, 1], as matplotlib expects."""
    return tuple(c / 255.0 for c in color)
