"""
Webcam hand tracking for the wind simulation.

Reads mirrored camera frames, runs the MediaPipe HandLandmarker on them and
hands the first detected hand on as a LandmarkFrame.
"""
from pathlib import Path
from typing import Optional, Tuple
import logging
import time
import cv2
import numpy as np
import mediapipe as mp

from ..wind.config import Config
from ..wind.landmarks import LandmarkFrame, HAND_CONNECTIONS, frame_from_result

logger = logging.getLogger(__name__)

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"

SKELETON_COLOR = (0, 255, 0)
PALM_COLOR = (255, 200, 0)   # Wrist drives palm position
PINCH_COLOR = (0, 128, 255)  # Thumb tip to index tip decides open/closed

Color = Tuple[int, int, int]


def draw_hand(image: np.ndarray, landmarks: LandmarkFrame, color: Color = SKELETON_COLOR) -> None:
    """Draw the hand skeleton plus the points the gesture classifier reads."""
    h, w = image.shape[:2]
    pixels = landmarks.to_pixels(w, h)

    for start_idx, end_idx in HAND_CONNECTIONS:
        if end_idx < len(pixels):
            cv2.line(image, pixels[start_idx], pixels[end_idx], color, 2)
    for point in pixels:
        cv2.circle(image, point, 4, color, -1)

    if len(pixels) > LandmarkFrame.INDEX_TIP:
        cv2.line(
            image, pixels[LandmarkFrame.THUMB_TIP], pixels[LandmarkFrame.INDEX_TIP],
            PINCH_COLOR, 2,
        )
    if pixels:
        cv2.circle(image, pixels[LandmarkFrame.WRIST], 9, PALM_COLOR, 2)


class HandTracker:
    """
    Camera plus HandLandmarker in VIDEO mode, first hand only.
    Nothing is opened until start().
    """

    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        self._camera = config.camera
        self._mediapipe = config.mediapipe
        self._model_path = Path(model_path) if model_path else self.DEFAULT_MODEL_PATH

        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker = None
        self._last_frame: Optional[np.ndarray] = None
        self._clock_start = 0.0
        self._last_timestamp_ms = -1

    def start(self) -> bool:
        """Open the camera and the landmarker. Returns False if either fails."""
        if self._landmarker is not None:
            return True

        if not self._model_path.exists():
            logger.error("Hand model not found at %s (download from %s)", self._model_path, MODEL_URL)
            return False

        if not self._open_camera():
            return False

        self._landmarker = self._create_landmarker()
        self._clock_start = time.perf_counter()
        self._last_timestamp_ms = -1
        logger.info(
            "Hand tracking started on camera %d (%dx%d @ %d fps)",
            self._camera.device_id, self._camera.width, self._camera.height, self._camera.fps,
        )
        return True

    def _open_camera(self) -> bool:
        cap = cv2.VideoCapture(self._camera.device_id)
        if not cap.isOpened():
            logger.error("Could not open camera %d", self._camera.device_id)
            cap.release()
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera.height)
        cap.set(cv2.CAP_PROP_FPS, self._camera.fps)
        self._cap = cap
        return True

    def _create_landmarker(self):
        vision = mp.tasks.vision
        options = vision.HandLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=self._mediapipe.max_num_hands,
            min_hand_detection_confidence=self._mediapipe.min_detection_confidence,
            min_tracking_confidence=self._mediapipe.min_tracking_confidence,
        )
        return vision.HandLandmarker.create_from_options(options)

    def stop(self) -> None:
        """Release the landmarker and the camera."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        self._last_frame = None
        logger.info("Hand tracking stopped")

    def _next_timestamp_ms(self) -> int:
        # VIDEO mode rejects timestamps that do not increase
        timestamp_ms = int((time.perf_counter() - self._clock_start) * 1000)
        self._last_timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        return self._last_timestamp_ms

    def get_landmarks(self) -> Optional[LandmarkFrame]:
        """Read one camera frame. Returns the first hand, or None if no hand or no frame."""
        if self._cap is None or self._landmarker is None:
            return None

        ok, frame = self._cap.read()
        if not ok:
            return None

        # Mirrored so moving the hand right moves it right on screen
        frame = cv2.flip(frame, 1)
        self._last_frame = frame

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

        result = self._landmarker.detect_for_video(image, self._next_timestamp_ms())
        return frame_from_result(result)

    def get_frame_with_landmarks(
        self,
        landmarks: Optional[LandmarkFrame] = None,
        black_background: bool = False
    ) -> Optional[np.ndarray]:
        """
        Last camera frame with the hand drawn over it.

        Args:
            landmarks: Hand to draw, nothing is drawn if None.
            black_background: Draw on black instead of the camera image.

        Returns:
            The annotated frame, or None before the first frame was read.
        """
        if self._last_frame is None:
            return None

        frame = np.zeros_like(self._last_frame) if black_background else self._last_frame.copy()
        if landmarks is not None:
            draw_hand(frame, landmarks)
        return frame
