import math
from types import SimpleNamespace

import pytest

from src.wind.config import GestureConfig
from src.wind.gesture_classifier import GestureClassifier, Gesture
from src.wind.landmarks import LandmarkFrame, MalformedFrame


@pytest.fixture
def classifier():
    return GestureClassifier(GestureConfig())


def test_spread_thumb_and_index_is_open(classifier, frame_factory):
    frame = frame_factory(thumb_tip=(0.3, 0.5), index_tip=(0.6, 0.3))
    sample = classifier.classify(frame, timestamp=1.0)

    assert sample.gesture == Gesture.OPEN
    assert sample.openness > 0.1
    assert sample.timestamp == 1.0


def test_touching_thumb_and_index_is_closed(classifier, frame_factory):
    frame = frame_factory(thumb_tip=(0.50, 0.50), index_tip=(0.52, 0.51))
    assert classifier.classify(frame).gesture == Gesture.CLOSED


def test_openness_on_threshold_counts_as_closed(classifier, frame_factory):
    frame = frame_factory(thumb_tip=(0.0, 0.5), index_tip=(0.1, 0.5))
    sample = classifier.classify(frame)

    assert sample.openness == 0.1
    assert sample.gesture == Gesture.CLOSED


def test_openness_ignores_depth(classifier):
    points = [(0.5, 0.5, 0.0)] * 21
    points[LandmarkFrame.THUMB_TIP] = (0.5, 0.5, -0.9)
    points[LandmarkFrame.INDEX_TIP] = (0.5, 0.5, 0.9)
    sample = classifier.classify(LandmarkFrame(points=tuple(points)))

    assert sample.openness == 0.0
    assert sample.gesture == Gesture.CLOSED


def test_level_knuckles_have_no_tilt(classifier, frame_factory):
    frame = frame_factory(index_mcp=(0.6, 0.5), pinky_mcp=(0.4, 0.5))
    sample = classifier.classify(frame)

    assert sample.tilt_angle == pytest.approx(0.0)
    assert sample.tilt == pytest.approx(0.0)


def test_tilt_is_scaled_sine_and_not_clamped(classifier, frame_factory):
    frame = frame_factory(index_mcp=(0.5, 0.6), pinky_mcp=(0.5, 0.4))
    sample = classifier.classify(frame)

    assert sample.tilt_angle == pytest.approx(math.pi / 2)
    assert sample.tilt == pytest.approx(1.5)


def test_palm_position_comes_from_wrist(classifier, frame_factory):
    sample = classifier.classify(frame_factory(wrist=(0.25, 0.75)))

    assert sample.palm_x == 0.25
    assert sample.palm_y == 0.75


def test_classifier_is_stateless(classifier, frame_factory):
    frame = frame_factory()
    first = classifier.classify(frame, timestamp=5.0)
    classifier.classify(frame_factory(thumb_tip=(0.5, 0.5), index_tip=(0.5, 0.5)))
    again = classifier.classify(frame, timestamp=5.0)

    assert first == again


def test_custom_threshold(frame_factory):
    classifier = GestureClassifier(GestureConfig(open_threshold=0.5))
    frame = frame_factory(thumb_tip=(0.3, 0.5), index_tip=(0.6, 0.3))
    assert classifier.classify(frame).gesture == Gesture.CLOSED


def test_short_frame_is_malformed(classifier, frame_factory):
    with pytest.raises(MalformedFrame):
        classifier.classify(frame_factory(count=10))


def test_empty_frame_is_malformed(classifier):
    with pytest.raises(MalformedFrame):
        classifier.classify(LandmarkFrame(points=()))


def test_non_finite_landmark_is_malformed(classifier, frame_factory):
    frame = frame_factory(wrist=(float("nan"), 0.5))
    with pytest.raises(MalformedFrame):
        classifier.classify(frame)


def test_frame_from_mediapipe_style_landmarks(classifier):
    landmarks = [SimpleNamespace(x=0.5, y=0.5, z=0.0) for _ in range(21)]
    landmarks[LandmarkFrame.INDEX_TIP] = SimpleNamespace(x=0.8, y=0.5, z=0.1)
    frame = LandmarkFrame.from_landmarks(landmarks, handedness="Right", confidence=0.9)

    assert len(frame) == 21
    assert frame.handedness == "Right"
    assert frame.index_tip == (0.8, 0.5, 0.1)
    assert classifier.classify(frame).gesture == Gesture.OPEN


def test_frame_from_xy_tuples_fills_depth():
    frame = LandmarkFrame.from_landmarks([(0.1, 0.2)] * 21)
    assert frame.wrist == (0.1, 0.2, 0.0)
