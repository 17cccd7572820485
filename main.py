"""
Wind Master - Hand-gesture wind field simulation

Entry point for the application.
"""
import argparse
import logging
import sys
import time
from pathlib import Path

logger = logging.getLogger("windmaster")


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Wind Master - steer the wind with your hand",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the tracking worker without a preview window",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for particle placement (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


def run_preview(config):
    """
    Run with a preview window - camera feed with landmarks and wind readout.
    Useful for tuning thresholds.
    """
    import cv2
    from src.webcam.hand_tracker import HandTracker
    from src.wind import WindSimulation

    tracker = HandTracker(config)
    simulation = WindSimulation(config)

    logger.info("Starting preview mode, press 'q' to quit")

    if not tracker.start():
        logger.error("Could not start hand tracking")
        return 1

    try:
        while True:
            landmarks = tracker.get_landmarks()
            now_ms = time.time() * 1000.0

            if landmarks is not None:
                simulation.submit_landmark_frame(landmarks, now_ms / 1000.0)
            else:
                simulation.on_no_hand_detected()
            simulation.tick(now_ms)

            frame = tracker.get_frame_with_landmarks(landmarks)
            if frame is None:
                continue

            state = simulation.current_wind_state()
            cv2.putText(
                frame, f"Gesture: {state.current_gesture}", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
            )
            info_lines = [
                f"Direction: ({state.direction[0]:+.2f}, {state.direction[1]:+.2f})",
                f"Strength: {state.strength:.3f}",
                f"Vortex: {state.vortex_intensity:.2f}" if state.is_vortex else "Vortex: off",
            ]
            for i, line in enumerate(info_lines):
                cv2.putText(
                    frame, line, (10, 60 + i * 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )

            cv2.imshow("Wind Master", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_headless(config):
    """Run the tracking worker in a QThread and log gesture changes."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from src.webcam import WindWorker

    app = QCoreApplication(sys.argv)

    thread = QThread()
    worker = WindWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        logger.info("Cleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        logger.info("Received signal %d, shutting down...", signum)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_gesture(label):
        state = worker.simulation.current_wind_state()
        mix = worker.simulation.audio_mix()
        logger.info(
            "Gesture: %s (strength %.2f, vortex %.2f, wind vol %.2f, vortex vol %.2f)",
            label, state.strength, state.vortex_intensity, mix.wind_volume, mix.vortex_volume,
        )

    def handle_error(msg):
        logger.error("Worker error: %s", msg)
        app.quit()

    thread.started.connect(worker.start_process)
    worker.gesture_changed.connect(handle_gesture, Qt.QueuedConnection)
    worker.hand_lost.connect(lambda: logger.info("Hand lost"), Qt.QueuedConnection)
    worker.error.connect(handle_error, Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    from src.wind import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.seed is not None:
        config.physics.seed = args.seed
    if args.debug:
        config.logging.level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    logger.info("Wind Master starting...")
    logger.info("  Mode: %s", "headless" if args.headless else "preview")
    logger.info("  Particles: %d, trees: %d", config.physics.particle_count, len(config.physics.tree_positions))

    if args.headless:
        return run_headless(config)
    return run_preview(config)


if __name__ == "__main__":
    sys.exit(main())
