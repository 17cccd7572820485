"""
Wind field physics: tree sway and particle advection.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple
import math

import numpy as np

from .config import PhysicsConfig
from .estimator import WindState


@dataclass
class Tree:
    """A tree rooted at base_position (x, z), leaning by rotation (x, z) radians."""
    base_position: Tuple[float, float]
    rotation_x: float = 0.0
    rotation_z: float = 0.0

    @property
    def rotation(self) -> Tuple[float, float]:
        return (self.rotation_x, self.rotation_z)


class ParticleField:
    """
    Wind particles in a box of [-half_extent, half_extent] x [0, max_height]
    x [-half_extent, half_extent].

    Positions are an (N, 3) float array. A particle that leaves the box is
    moved to a random coordinate on each axis it left through, the others
    are kept.
    """

    def __init__(
        self,
        count: int = 2000,
        half_extent: float = 50.0,
        max_height: float = 30.0,
        rng: Optional[np.random.Generator] = None,
    ):
        self.half_extent = half_extent
        self.max_height = max_height
        self._rng = rng or np.random.default_rng()

        self.positions = np.column_stack((
            self._rng.uniform(-half_extent, half_extent, count),
            self._rng.uniform(0.0, max_height, count),
            self._rng.uniform(-half_extent, half_extent, count),
        )).astype(np.float64)
        # Wobble phase is the particle index, not its flat coordinate offset
        self._phase = np.arange(count, dtype=np.float64)

    @property
    def count(self) -> int:
        return len(self.positions)

    def advect_directional(self, state: WindState, now_ms: float) -> None:
        dx, dy = state.direction
        push = state.strength * 2
        self.positions[:, 0] += dx * push
        self.positions[:, 1] += np.sin(now_ms * 0.001 + self._phase) * 0.1
        self.positions[:, 2] += -dy * push

    def advect_vortex(self, state: WindState, now_ms: float) -> None:
        intensity = state.vortex_intensity
        x = self.positions[:, 0]
        z = self.positions[:, 2]
        # Fixed-length step along the bearing, turned by intensity
        angle = np.arctan2(z, x) + 0.1 * intensity
        self.positions[:, 0] += np.cos(angle) * 0.5
        self.positions[:, 1] += np.sin(now_ms * 0.001 + self._phase) * 0.3 * intensity
        self.positions[:, 2] += np.sin(angle) * 0.5

    def reseed_out_of_bounds(self) -> int:
        """Resample coordinates outside the box. Returns how many were moved."""
        pos = self.positions
        out_x = np.abs(pos[:, 0]) > self.half_extent
        out_y = (pos[:, 1] < 0.0) | (pos[:, 1] > self.max_height)
        out_z = np.abs(pos[:, 2]) > self.half_extent

        pos[out_x, 0] = self._rng.uniform(-self.half_extent, self.half_extent, out_x.sum())
        pos[out_y, 1] = self._rng.uniform(0.0, self.max_height, out_y.sum())
        pos[out_z, 2] = self._rng.uniform(-self.half_extent, self.half_extent, out_z.sum())

        return int((out_x | out_y | out_z).sum())


class WindField:
    """Applies the wind state to trees and particles once per tick."""

    def __init__(
        self,
        config: Optional[PhysicsConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._config = config or PhysicsConfig()
        if rng is None:
            rng = np.random.default_rng(self._config.seed)
        self.trees: List[Tree] = [
            Tree(base_position=pos) for pos in self._config.tree_positions
        ]
        self.particles = ParticleField(
            count=self._config.particle_count,
            half_extent=self._config.half_extent,
            max_height=self._config.max_height,
            rng=rng,
        )

    def step(self, state: WindState, now_ms: float) -> None:
        """Advance trees and particles under the given (already decayed) wind."""
        if state.is_vortex:
            self._sway_trees_vortex(state, now_ms)
            self.particles.advect_vortex(state, now_ms)
        else:
            self._sway_trees_directional(state)
            self.particles.advect_directional(state, now_ms)
        self.particles.reseed_out_of_bounds()

    def tree_rotations(self) -> List[Tuple[float, float]]:
        return [tree.rotation for tree in self.trees]

    def _sway_trees_vortex(self, state: WindState, now_ms: float) -> None:
        intensity = state.vortex_intensity
        angle = now_ms * 0.001 * intensity
        rotation_z = math.sin(angle) * 0.3 * intensity
        rotation_x = math.cos(angle) * 0.2 * intensity
        for tree in self.trees:
            tree.rotation_z = rotation_z
            tree.rotation_x = rotation_x

    def _sway_trees_directional(self, state: WindState) -> None:
        dx, dy = state.direction
        target_z = -dx * state.strength * 0.5
        target_x = dy * state.strength * 0.3
        easing = self._config.tree_easing
        for tree in self.trees:
            tree.rotation_z += (target_z - tree.rotation_z) * easing
            tree.rotation_x += (target_x - tree.rotation_x) * easing
