"""
Background worker for hand tracking and the wind simulation tick loop.
Runs in a separate QThread so the consumer (audio, UI) never blocks on the camera.
"""
import logging
import time
import threading
from typing import Optional, Tuple
from PyQt5.QtCore import QObject, pyqtSignal

from ..wind.config import Config
from ..wind.estimator import WindState
from ..wind.landmarks import LandmarkFrame
from ..wind.simulation import WindSimulation

logger = logging.getLogger(__name__)


class WindWorker(QObject):
    """
    Worker class that pulls landmarks on a capture thread and ticks the
    simulation at a fixed rate. Emits signals for consumers.

    The capture thread only ever writes the newest detection into a single
    slot; the tick loop takes it out. Detections that arrive between two
    ticks overwrite each other.
    """
    # Signals
    wind_updated = pyqtSignal(object)    # Emits WindState after every tick
    gesture_changed = pyqtSignal(str)    # Emits the new gesture label
    hand_lost = pyqtSignal()
    frame_ready = pyqtSignal(object)     # Emits numpy array (BGR frame with landmarks)
    error = pyqtSignal(str)

    def __init__(
        self,
        config: Config,
        simulation: Optional[WindSimulation] = None,
        tracker=None,
        show_preview: bool = False,
        parent=None,
    ):
        super().__init__(parent)
        self._config = config
        self._simulation = simulation or WindSimulation(config)
        self._tracker = tracker
        self._show_preview = show_preview
        self._is_running = False

        # Single-slot handoff from the capture thread
        self._latest_landmarks: Optional[LandmarkFrame] = None
        self._has_result = False
        self._landmarks_lock = threading.Lock()
        self._capture_thread: Optional[threading.Thread] = None

        self._last_gesture = "none"
        self._last_frame_time = 0.0

    @property
    def simulation(self) -> WindSimulation:
        return self._simulation

    def publish(self, landmarks: Optional[LandmarkFrame]) -> None:
        """Hand over one detection result (None = no hand in view)."""
        with self._landmarks_lock:
            self._latest_landmarks = landmarks
            self._has_result = True

    def _take_latest(self) -> Tuple[bool, Optional[LandmarkFrame]]:
        with self._landmarks_lock:
            has_result = self._has_result
            landmarks = self._latest_landmarks
            self._latest_landmarks = None  # Consume it
            self._has_result = False
        return has_result, landmarks

    def _capture_loop(self):
        """Background thread to pull camera frames as fast as possible."""
        while self._is_running:
            try:
                self.publish(self._tracker.get_landmarks())
            except Exception as e:
                logger.error("Capture thread error: %s", e)
                time.sleep(0.1)  # Cool down on error

    def step(self, now_ms: float) -> WindState:
        """Apply the newest detection (if any), tick once and emit the wind state."""
        has_result, landmarks = self._take_latest()

        if has_result:
            if landmarks is not None:
                self._simulation.submit_landmark_frame(landmarks, now_ms / 1000.0)
            else:
                if self._simulation.current_wind_state().hand_detected:
                    self.hand_lost.emit()
                self._simulation.on_no_hand_detected()

        self._simulation.tick(now_ms)
        state = self._simulation.current_wind_state()

        if state.current_gesture != self._last_gesture:
            self._last_gesture = state.current_gesture
            self.gesture_changed.emit(state.current_gesture)

        self.wind_updated.emit(state)

        if self._show_preview and landmarks is not None and self._tracker is not None:
            self._emit_preview(landmarks)

        return state

    def _emit_preview(self, landmarks: LandmarkFrame) -> None:
        frame_interval = 1.0 / 5  # Low FPS for the landmark preview
        now = time.perf_counter()
        if now - self._last_frame_time < frame_interval:
            return
        frame = self._tracker.get_frame_with_landmarks(landmarks, black_background=True)
        if frame is not None:
            self.frame_ready.emit(frame)
        self._last_frame_time = now

    def start_process(self):
        """Main processing loop. Runs in worker thread at the configured tick rate."""
        if self._tracker is None:
            from .hand_tracker import HandTracker
            self._tracker = HandTracker(self._config)

        if not self._tracker.start():
            self.error.emit("Could not start hand tracking")
            return

        self._is_running = True

        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()

        min_interval = 1.0 / max(1, self._config.simulation.tick_rate)
        logger.info("Wind worker running at %d Hz", self._config.simulation.tick_rate)

        try:
            while self._is_running:
                loop_start = time.perf_counter()

                self.step(time.time() * 1000.0)

                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except Exception as e:
            logger.exception("Worker loop failed")
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            if self._capture_thread:
                self._capture_thread.join(timeout=1.0)
            self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False
