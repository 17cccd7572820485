"""
Wind Master Core

Turns hand landmarks into a wind field and simulates trees and particles in it.
"""
from .config import Config, load_config
from .landmarks import LandmarkFrame, MalformedFrame, frame_from_result
from .gesture_classifier import GestureClassifier, GestureSample, Gesture
from .motion_history import MotionHistory, detect_circular_motion
from .estimator import WindEstimator, WindState
from .field import WindField, ParticleField, Tree
from .audio import AudioMix, audio_mix
from .simulation import WindSimulation

__all__ = [
    'Config',
    'load_config',
    'LandmarkFrame',
    'MalformedFrame',
    'frame_from_result',
    'GestureClassifier',
    'GestureSample',
    'Gesture',
    'MotionHistory',
    'detect_circular_motion',
    'WindEstimator',
    'WindState',
    'WindField',
    'ParticleField',
    'Tree',
    'AudioMix',
    'audio_mix',
    'WindSimulation',
]
