"""
Audio parameter mapping for the wind and vortex sound beds.

The synth itself lives outside the simulation; it polls audio_mix() and
ramps its gains and frequencies toward these targets.
"""
from dataclasses import dataclass
from typing import Optional

from .config import AudioConfig
from .estimator import WindState


@dataclass(frozen=True)
class AudioMix:
    """Target levels for one audio update."""
    wind_volume: float = 0.0
    wind_filter_hz: float = 800.0
    vortex_volume: float = 0.0
    vortex_frequency_hz: float = 60.0
    lfo_rate_hz: float = 4.0


def audio_mix(state: WindState, config: Optional[AudioConfig] = None) -> AudioMix:
    """Map the wind state to audio targets. Vortex mode ducks the wind bed."""
    config = config or AudioConfig()

    if state.is_vortex:
        intensity = state.vortex_intensity
        return AudioMix(
            wind_volume=config.vortex_wind_volume,
            vortex_volume=min(intensity * config.vortex_volume_gain, config.vortex_volume_max),
            vortex_frequency_hz=config.vortex_base_frequency + intensity * 40,
            lfo_rate_hz=3 + intensity * 5,
        )

    return AudioMix(
        wind_volume=min(state.strength * config.wind_volume_gain, config.wind_volume_max),
        wind_filter_hz=(
            config.wind_filter_base
            + abs(state.direction[0]) * 800
            + state.strength * 400
        ),
        vortex_volume=0.0,
    )
