"""
Closed-fist palm trail and circular motion detection.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Iterator
import math


@dataclass(frozen=True)
class PalmSample:
    """Palm position of one closed-fist frame."""
    x: float
    y: float
    timestamp: float


class MotionHistory:
    """
    Bounded FIFO of closed-fist palm positions, oldest first.

    Only closed-fist frames are appended. Open or missing frames leave the
    buffer alone, so one rotation gesture survives short interruptions until
    newer samples push it out.
    """

    def __init__(self, maxlen: int = 30) -> None:
        self._buffer: Deque[PalmSample] = deque(maxlen=maxlen)

    def append(self, x: float, y: float, timestamp: float) -> None:
        self._buffer.append(PalmSample(x=x, y=y, timestamp=timestamp))

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[PalmSample]:
        return iter(self._buffer)

    def rotation(self) -> float:
        return detect_circular_motion(self._buffer)


def detect_circular_motion(samples: Iterable[PalmSample]) -> float:
    """
    Total turning of the palm path in radians, as an absolute value.

    Sums the signed heading change over every consecutive triple. A steady
    circle accumulates about 2*pi per revolution, straight lines and
    back-and-forth jitter stay near zero. Turns in opposite directions
    cancel each other. A repeated point has heading atan2(0, 0) = 0, so a
    one-frame pause splits a turn in two without changing it.
    """
    points = list(samples)
    if len(points) < 3:
        return 0.0

    angle_sum = 0.0
    for p1, p2, p3 in zip(points, points[1:], points[2:]):
        angle1 = math.atan2(p2.y - p1.y, p2.x - p1.x)
        angle2 = math.atan2(p3.y - p2.y, p3.x - p2.x)

        angle_diff = angle2 - angle1
        if angle_diff > math.pi:
            angle_diff -= 2 * math.pi
        elif angle_diff <= -math.pi:
            angle_diff += 2 * math.pi

        angle_sum += angle_diff

    return abs(angle_sum)
