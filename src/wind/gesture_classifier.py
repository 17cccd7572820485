"""
Gesture classification from hand landmarks.
Maps one landmark frame to Open Palm / Closed Fist plus tilt and palm position.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple
import math
import time

from .config import GestureConfig
from .landmarks import LandmarkFrame, MalformedFrame


class Gesture(Enum):
    """Detected gesture classes."""
    NONE = auto()     # No hand this cycle
    OPEN = auto()     # Open palm: directional wind
    CLOSED = auto()   # Closed fist: rotation tracking / vortex


@dataclass(frozen=True)
class GestureSample:
    """One classified detection cycle."""
    gesture: Gesture
    tilt_angle: float = 0.0  # Radians, pinky MCP -> index MCP heading
    tilt: float = 0.0        # sin(tilt_angle) * gain, not clamped
    palm_x: float = 0.0
    palm_y: float = 0.0
    openness: float = 0.0    # Thumb tip to index tip distance
    timestamp: float = 0.0

    @classmethod
    def no_hand(cls, timestamp: Optional[float] = None) -> "GestureSample":
        return cls(
            gesture=Gesture.NONE,
            timestamp=time.time() if timestamp is None else timestamp,
        )


class GestureClassifier:
    """
    Classifies a landmark frame. Holds no state between calls.

    - Open palm: thumb tip and index tip further apart than open_threshold
    - Closed fist: anything else (the threshold itself counts as closed)
    - Tilt: heading of the knuckle line from pinky MCP to index MCP
    """

    def __init__(self, config: Optional[GestureConfig] = None):
        self._config = config or GestureConfig()

    def classify(
        self, frame: LandmarkFrame, timestamp: Optional[float] = None
    ) -> GestureSample:
        """
        Classify a frame.

        Raises:
            MalformedFrame: a required landmark is missing or not finite.
        """
        wrist = self._required(frame, LandmarkFrame.WRIST)
        thumb_tip = self._required(frame, LandmarkFrame.THUMB_TIP)
        index_mcp = self._required(frame, LandmarkFrame.INDEX_MCP)
        index_tip = self._required(frame, LandmarkFrame.INDEX_TIP)
        pinky_mcp = self._required(frame, LandmarkFrame.PINKY_MCP)

        tilt_angle = math.atan2(
            index_mcp[1] - pinky_mcp[1],
            index_mcp[0] - pinky_mcp[0],
        )
        openness = self._distance_2d(index_tip, thumb_tip)
        gesture = Gesture.OPEN if openness > self._config.open_threshold else Gesture.CLOSED

        return GestureSample(
            gesture=gesture,
            tilt_angle=tilt_angle,
            tilt=math.sin(tilt_angle) * self._config.tilt_gain,
            palm_x=wrist[0],
            palm_y=wrist[1],
            openness=openness,
            timestamp=time.time() if timestamp is None else timestamp,
        )

    @staticmethod
    def _required(frame: LandmarkFrame, index: int) -> Tuple[float, ...]:
        point = frame.get(index)
        if not (math.isfinite(point[0]) and math.isfinite(point[1])):
            raise MalformedFrame(f"landmark {index} is not finite: {point}")
        return point

    @staticmethod
    def _distance_2d(p1: Tuple[float, ...], p2: Tuple[float, ...]) -> float:
        """Calculate 2D distance between two points (ignoring z)."""
        dx = p1[0] - p2[0]
        dy = p1[1] - p2[1]
        return math.sqrt(dx*dx + dy*dy)
