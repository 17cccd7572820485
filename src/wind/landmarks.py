"""
Landmark frame contract shared by the tracker and the gesture classifier.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


Point = Tuple[float, float, float]


class MalformedFrame(ValueError):
    """Landmark frame is missing a point the classifier needs."""


@dataclass(frozen=True)
class LandmarkFrame:
    """
    Normalized hand landmarks for one detection cycle.

    Attributes:
        points: 21 (x, y, z) tuples, x and y normalized 0-1
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    points: Tuple[Point, ...]
    handedness: str = "Unknown"
    confidence: float = 1.0

    # MediaPipe landmark indices for convenience
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    COUNT = 21

    @classmethod
    def from_landmarks(
        cls,
        landmarks: Iterable,
        handedness: str = "Unknown",
        confidence: float = 1.0,
    ) -> "LandmarkFrame":
        """
        Build a frame from MediaPipe landmark objects (.x/.y/.z) or plain
        coordinate sequences. A missing z is stored as 0.
        """
        points = []
        for lm in landmarks:
            if hasattr(lm, "x"):
                points.append((float(lm.x), float(lm.y), float(getattr(lm, "z", 0.0))))
            else:
                coords = tuple(float(c) for c in lm)
                if len(coords) == 2:
                    coords = coords + (0.0,)
                points.append(coords[:3])
        return cls(points=tuple(points), handedness=handedness, confidence=confidence)

    def __len__(self) -> int:
        return len(self.points)

    def get(self, index: int) -> Point:
        """Get landmark by index, raising MalformedFrame if it is absent."""
        if index >= len(self.points):
            raise MalformedFrame(
                f"landmark {index} missing (frame has {len(self.points)} points)"
            )
        point = self.points[index]
        if len(point) < 2:
            raise MalformedFrame(f"landmark {index} has {len(point)} coordinates")
        return point

    @property
    def wrist(self) -> Point:
        return self.get(self.WRIST)

    @property
    def thumb_tip(self) -> Point:
        return self.get(self.THUMB_TIP)

    @property
    def index_tip(self) -> Point:
        return self.get(self.INDEX_TIP)

    @property
    def index_mcp(self) -> Point:
        return self.get(self.INDEX_MCP)

    @property
    def pinky_mcp(self) -> Point:
        return self.get(self.PINKY_MCP)

    def to_pixels(self, width: int, height: int) -> List[Tuple[int, int]]:
        """Point positions in image pixels, for drawing."""
        return [(int(p[0] * width), int(p[1] * height)) for p in self.points]


def frame_from_result(result) -> Optional[LandmarkFrame]:
    """
    First hand of a MediaPipe HandLandmarkerResult, or None if it saw no hand.

    Handedness and its score come from the top category for that hand. A
    result without handedness keeps the frame defaults.
    """
    if not result.hand_landmarks:
        return None

    handedness = "Unknown"
    confidence = 1.0
    if result.handedness and result.handedness[0]:
        category = result.handedness[0][0]
        handedness = category.category_name
        confidence = float(category.score)

    return LandmarkFrame.from_landmarks(
        result.hand_landmarks[0], handedness=handedness, confidence=confidence
    )


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]
