"""
Wind state estimation from classified gestures.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple
import logging

from .config import WindConfig
from .gesture_classifier import Gesture, GestureSample
from .motion_history import MotionHistory

logger = logging.getLogger(__name__)


LABEL_NONE = "none"
LABEL_OPEN = "Open Palm"
LABEL_CLOSED = "Closed Fist"
LABEL_VORTEX = "Vortex"


@dataclass
class WindState:
    """Control vector read by the physics step and the audio/UI collaborators."""
    direction: Tuple[float, float] = (0.0, 0.0)  # (x, y), each in [-1, 1]
    strength: float = 0.0
    is_vortex: bool = False
    vortex_intensity: float = 0.0
    hand_detected: bool = False
    current_gesture: str = LABEL_NONE

    def copy(self) -> "WindState":
        return replace(self)


@dataclass
class _PalmState:
    tilt: float
    y: float


class WindEstimator:
    """
    Fuses gesture samples into the wind state.

    Open palm steers the wind: tilt sets the horizontal direction, palm
    height the vertical one, and how fast either changes sets the strength.
    Closed fist feeds the motion history; enough sustained rotation turns
    on vortex mode. Missing hands are only recorded here, the decay itself
    happens once per physics tick.
    """

    def __init__(self, config: Optional[WindConfig] = None):
        self._config = config or WindConfig()
        self._state = WindState()
        self._history = MotionHistory(maxlen=self._config.history_size)
        self._last_palm: Optional[_PalmState] = None

    @property
    def state(self) -> WindState:
        return self._state

    @property
    def history(self) -> MotionHistory:
        return self._history

    def update(self, sample: GestureSample) -> WindState:
        """Apply one detection cycle to the wind state."""
        if sample.gesture == Gesture.OPEN:
            self._update_open(sample)
        elif sample.gesture == Gesture.CLOSED:
            self._update_closed(sample)
        else:
            self.hand_lost()
        return self._state

    def hand_lost(self) -> None:
        if self._state.hand_detected:
            logger.debug("Hand lost, wind will decay")
        self._state.hand_detected = False
        self._state.current_gesture = LABEL_NONE

    def decay(self) -> None:
        """Fade strength and vortex intensity by one tick while no hand is seen."""
        if self._state.hand_detected:
            return
        self._state.strength *= self._config.decay
        self._state.vortex_intensity *= self._config.decay

    def _update_open(self, sample: GestureSample) -> None:
        state = self._state
        state.hand_detected = True
        state.is_vortex = False
        state.current_gesture = LABEL_OPEN

        state.direction = (
            max(-1.0, min(1.0, sample.tilt)),
            max(-1.0, min(1.0, (sample.palm_y - 0.5) * 2)),
        )

        if self._last_palm is None:
            self._last_palm = _PalmState(tilt=sample.tilt, y=sample.palm_y)

        movement = (
            abs(sample.tilt - self._last_palm.tilt) * 2
            + abs(sample.palm_y - self._last_palm.y)
        )
        state.strength = min(movement * self._config.strength_gain, self._config.max_strength)
        self._last_palm = _PalmState(tilt=sample.tilt, y=sample.palm_y)

    def _update_closed(self, sample: GestureSample) -> None:
        state = self._state
        state.hand_detected = True
        state.current_gesture = LABEL_CLOSED

        self._history.append(sample.palm_x, sample.palm_y, sample.timestamp)

        if len(self._history) > self._config.min_history:
            rotation = self._history.rotation()
            if rotation > self._config.vortex_threshold:
                if not state.is_vortex:
                    logger.info("Vortex started (rotation %.2f rad)", rotation)
                state.is_vortex = True
                state.vortex_intensity = rotation
                state.current_gesture = LABEL_VORTEX
