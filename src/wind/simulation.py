"""
Wind simulation entry point.

Detection callbacks feed landmark frames in, the render/audio driver calls
tick() and polls the wind state and entity poses. Every call takes the same
lock, so a tick never sees a half-applied gesture update.
"""
from dataclasses import replace
from typing import List, Optional, Tuple
import logging
import threading
import time

import numpy as np

from .audio import AudioMix, audio_mix
from .config import Config
from .estimator import WindEstimator, WindState
from .field import Tree, WindField
from .gesture_classifier import GestureClassifier, GestureSample
from .landmarks import LandmarkFrame, MalformedFrame

logger = logging.getLogger(__name__)


class WindSimulation:
    """Gesture classifier, wind estimator and field physics behind one lock."""

    def __init__(self, config: Optional[Config] = None, rng: Optional[np.random.Generator] = None):
        self._config = config or Config()
        self._classifier = GestureClassifier(self._config.gestures)
        self._estimator = WindEstimator(self._config.wind)
        self._field = WindField(self._config.physics, rng=rng)
        self._lock = threading.Lock()
        self._tick_count = 0

    def submit_landmark_frame(
        self, frame: LandmarkFrame, now: Optional[float] = None
    ) -> Optional[GestureSample]:
        """
        Classify a detected hand and update the wind.

        Returns the gesture sample, or None if the frame was malformed, in
        which case the wind state is left as it was.
        """
        timestamp = time.time() if now is None else now
        try:
            sample = self._classifier.classify(frame, timestamp)
        except MalformedFrame as e:
            logger.warning("Skipping malformed landmark frame: %s", e)
            return None

        with self._lock:
            previous = self._estimator.state.current_gesture
            state = self._estimator.update(sample)
            if state.current_gesture != previous:
                logger.debug("Gesture: %s -> %s", previous, state.current_gesture)
        return sample

    def on_no_hand_detected(self, now: Optional[float] = None) -> None:
        """Record a detection cycle that found no hand."""
        sample = GestureSample.no_hand(now)
        with self._lock:
            self._estimator.update(sample)

    def tick(self, now_ms: float) -> None:
        """Decay (if no hand) and advance trees and particles by one step."""
        with self._lock:
            self._estimator.decay()
            self._field.step(self._estimator.state, now_ms)
            self._tick_count += 1

    def current_wind_state(self) -> WindState:
        with self._lock:
            return self._estimator.state.copy()

    def audio_mix(self) -> AudioMix:
        return audio_mix(self.current_wind_state(), self._config.audio)

    def tree_rotations(self) -> List[Tuple[float, float]]:
        with self._lock:
            return self._field.tree_rotations()

    def trees(self) -> List[Tree]:
        """Snapshot of every tree, base position and current rotation."""
        with self._lock:
            return [replace(tree) for tree in self._field.trees]

    def particle_positions(self) -> np.ndarray:
        with self._lock:
            return self._field.particles.positions.copy()

    @property
    def tick_count(self) -> int:
        return self._tick_count
