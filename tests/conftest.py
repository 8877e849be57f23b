"""Shared fixtures."""

import pytest
from voronav.config import Settings
from voronav.core.navigation import RecordingDispatcher, RecordingLabelSink
from voronav.core.scene import create_scene

SPLIT_SITES = [(25, 50), (75, 50)]


@pytest.fixture
def small_settings():
    """100x100 viewport, two labeled regions, one of them without a target."""
    return Settings(
        viewport_width=100,
        viewport_height=100,
        resolution=10,
        seed="scene_test",
        labels=["left", "right"],
        targets={"left": "#left"},
    )


@pytest.fixture
def label_sink():
    return RecordingLabelSink()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def scene(small_settings, label_sink, dispatcher):
    """Scene with a left (0) and right (1) region split at x=50."""
    return create_scene(small_settings, positions=SPLIT_SITES,
                        label_sink=label_sink, dispatcher=dispatcher)
