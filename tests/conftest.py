import math

import numpy as np
import pytest

from src.wind.landmarks import LandmarkFrame
from src.wind.gesture_classifier import Gesture, GestureSample


def make_frame(
    wrist=(0.5, 0.8),
    thumb_tip=(0.4, 0.5),
    index_tip=(0.6, 0.3),
    index_mcp=(0.6, 0.6),
    pinky_mcp=(0.4, 0.6),
    count=21,
):
    """21-point frame with the classifier's landmarks placed explicitly."""
    points = [(0.5, 0.5, 0.0)] * count
    placed = {
        LandmarkFrame.WRIST: wrist,
        LandmarkFrame.THUMB_TIP: thumb_tip,
        LandmarkFrame.INDEX_TIP: index_tip,
        LandmarkFrame.INDEX_MCP: index_mcp,
        LandmarkFrame.PINKY_MCP: pinky_mcp,
    }
    for index, (x, y) in placed.items():
        if index < count:
            points[index] = (x, y, 0.0)
    return LandmarkFrame(points=tuple(points))


def circle_samples(count, step, radius=0.1, center=(0.5, 0.5), start=0.0):
    """Closed-fist samples tracing a circle, one per angle step."""
    samples = []
    for i in range(count):
        angle = start + i * step
        samples.append(GestureSample(
            gesture=Gesture.CLOSED,
            palm_x=center[0] + radius * math.cos(angle),
            palm_y=center[1] + radius * math.sin(angle),
            timestamp=float(i),
        ))
    return samples


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
