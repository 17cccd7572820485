"""
Config loader for Wind Master.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
import yaml


DEFAULT_TREE_POSITIONS: List[Tuple[float, float]] = [
    (-20.0, -10.0),
    (-15.0, 5.0),
    (15.0, -5.0),
    (20.0, 10.0),
    (-25.0, 15.0),
    (25.0, -15.0),
    (0.0, -20.0),
    (-10.0, 20.0),
]


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 1
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7


@dataclass
class GestureConfig:
    open_threshold: float = 0.1    # Thumb-index distance above which the palm is open
    tilt_gain: float = 1.5         # sin(tilt angle) multiplier


@dataclass
class WindConfig:
    history_size: int = 30         # Closed-fist palm positions kept for rotation detection
    min_history: int = 20          # Detection runs once the buffer is longer than this
    vortex_threshold: float = 0.3  # Accumulated curvature (radians) that starts a vortex
    strength_gain: float = 10.0
    max_strength: float = 0.6
    decay: float = 0.95            # Per-tick multiplier while no hand is detected


@dataclass
class PhysicsConfig:
    tree_positions: List[Tuple[float, float]] = field(
        default_factory=lambda: list(DEFAULT_TREE_POSITIONS)
    )
    particle_count: int = 2000
    half_extent: float = 50.0      # Particles live in [-half_extent, half_extent] on x and z
    max_height: float = 30.0       # ... and in [0, max_height] on y
    tree_easing: float = 0.1       # Exponential approach factor in directional mode
    seed: Optional[int] = None


@dataclass
class SimulationConfig:
    tick_rate: int = 60


@dataclass
class AudioConfig:
    wind_volume_gain: float = 0.25
    wind_volume_max: float = 0.3
    wind_filter_base: float = 500.0
    vortex_volume_gain: float = 0.3
    vortex_volume_max: float = 0.4
    vortex_base_frequency: float = 60.0
    vortex_wind_volume: float = 0.05   # Wind bed left under a vortex


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    wind: WindConfig = field(default_factory=WindConfig)
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def _load_physics_config(data: Optional[dict]) -> PhysicsConfig:
    config = _dict_to_dataclass(PhysicsConfig, data)
    # YAML gives lists, the physics step works with (x, z) tuples
    config.tree_positions = [
        (float(x), float(z)) for x, z in config.tree_positions
    ]
    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        wind=_dict_to_dataclass(WindConfig, data.get('wind')),
        physics=_load_physics_config(data.get('physics')),
        simulation=_dict_to_dataclass(SimulationConfig, data.get('simulation')),
        audio=_dict_to_dataclass(AudioConfig, data.get('audio')),
        logging=_dict_to_dataclass(LoggingConfig, data.get('logging')),
    )
