"""
Pointer-to-region tracking with hover animation phase.

The tracker is either idle or hovering one region. While hovering, the
phase advances by a fixed step every frame; moving into a different region
adds a random jump on top. The phase is never reset, so coming back to a
region continues the animation where it was.
"""

from enum import Enum
from typing import Optional

import structlog

from .alea_prng import AleaPRNG
from .grid_sampler import Viewport
from .site_partition import SitePartition

logger = structlog.get_logger()

FULL_TURN = 360.0


class HoverTransition(str, Enum):
    """What an update did to the hover state."""

    NONE = "none"
    ENTER = "enter"
    CHANGE = "change"
    LEAVE = "leave"


def wrap_phase(phase: float) -> float:
    """Bring a phase into [0, 360)."""
    phase = phase % FULL_TURN
    # -0.0 % 360 and tiny negatives can land on 360.0
    return 0.0 if phase >= FULL_TURN else phase


class HoverTracker:
    """Idle/Hovering state machine fed with pointer positions."""

    def __init__(self, partition: SitePartition, prng: AleaPRNG,
                 phase_step: float = 2.0, initial_phase: float = 0.0):
        self.partition = partition
        self.prng = prng
        self.phase_step = float(phase_step)
        self._hovered: Optional[int] = None
        self._phase = wrap_phase(initial_phase)

    @property
    def hovered(self) -> Optional[int]:
        """Index of the hovered region, None when idle."""
        return self._hovered

    @property
    def phase(self) -> float:
        """Animation hue in degrees."""
        return self._phase

    @property
    def is_hovering(self) -> bool:
        return self._hovered is not None

    def update(self, x: Optional[float], y: Optional[float],
               viewport: Viewport) -> HoverTransition:
        """
        Process one frame's pointer position.

        Args:
            x, y: Pointer coordinates; None means no pointer this frame
            viewport: Current drawable area

        Returns:
            The transition taken
        """
        if x is None or y is None or not viewport.contains(x, y):
            return self.leave()

        region = self.partition.nearest(x, y)
        previous = self._hovered

        if previous == region:
            transition = HoverTransition.NONE
        else:
            transition = HoverTransition.ENTER if previous is None else HoverTransition.CHANGE
            self._hovered = region
            self._phase = wrap_phase(self._phase + self.prng.random() * FULL_TURN)
            logger.debug("Hover moved", transition=transition.value,
                         previous=previous, region=region, phase=self._phase)

        self._phase = wrap_phase(self._phase + self.phase_step)
        return transition

    def leave(self) -> HoverTransition:
        """Pointer left the viewport or the touch ended."""
        if self._hovered is None:
            return HoverTransition.NONE

        logger.debug("Hover left", region=self._hovered)
        self._hovered = None
        return HoverTransition.LEAVE
