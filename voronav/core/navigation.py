"""
Region labels and the collaborators that present and follow them.

The core never owns presentation elements or performs navigation itself.
A LabelSink is told where each label goes; a NavigationDispatcher is handed
the target of an activated region.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import structlog

logger = structlog.get_logger()

DEFAULT_LABELS = ["about", "work", "play", "contact", "tools", "photos"]

DEFAULT_TARGETS = {
    "about": "#about",
    "work": "#work",
    "play": "#play",
    "contact": "contact-form",
    "tools": "#tools",
    "photos": "#photos",
}


class RegionLabel(NamedTuple):
    """Text and navigation target of one region."""
    index: int
    label: str
    target: Optional[str]


class NavigationDispatcher(ABC):
    """Performs the view transition for a target."""

    @abstractmethod
    def dispatch(self, target: str) -> None:
        ...


class LabelSink(ABC):
    """Receives label placements whenever anchors are recomputed."""

    @abstractmethod
    def place(self, index: int, position: Tuple[float, float], label: str,
              target: Optional[str]) -> None:
        ...


class RecordingDispatcher(NavigationDispatcher):
    """Keeps dispatched targets in order."""

    def __init__(self):
        self.targets: List[str] = []

    def dispatch(self, target: str) -> None:
        logger.info("Navigation dispatched", target=target)
        self.targets.append(target)

    @property
    def last(self) -> Optional[str]:
        return self.targets[-1] if self.targets else None


class RecordingLabelSink(LabelSink):
    """Keeps the latest placement per region."""

    def __init__(self):
        self.placements: Dict[int, Tuple[Tuple[float, float], str, Optional[str]]] = {}
        self.updates = 0

    def place(self, index: int, position: Tuple[float, float], label: str,
              target: Optional[str]) -> None:
        self.placements[index] = (position, label, target)
        self.updates += 1


def build_labels(count: int, labels: Sequence[str] = DEFAULT_LABELS,
                 targets: Optional[Dict[str, str]] = None) -> List[RegionLabel]:
    """
    Assign a label and target to each of count regions.

    Labels repeat cyclically when there are more regions than labels.
    """
    if not labels:
        raise ValueError("At least one label is required")
    if targets is None:
        targets = DEFAULT_TARGETS

    result = []
    for i in range(count):
        label = labels[i % len(labels)]
        result.append(RegionLabel(i, label, targets.get(label)))
    return result
