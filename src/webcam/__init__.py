"""
Wind Master Webcam Module

Hand tracking (MediaPipe, in .hand_tracker) and the background tick worker.
"""
from .worker import WindWorker

__all__ = [
    'WindWorker',
]
