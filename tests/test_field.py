import math

import numpy as np
import pytest

from src.wind.config import PhysicsConfig, DEFAULT_TREE_POSITIONS
from src.wind.estimator import WindState
from src.wind.field import ParticleField, WindField


@pytest.fixture
def field(rng):
    return WindField(PhysicsConfig(particle_count=50), rng=rng)


def directional(dx=1.0, dy=0.0, strength=0.6):
    return WindState(direction=(dx, dy), strength=strength, hand_detected=True)


def vortex(intensity=2.0):
    return WindState(is_vortex=True, vortex_intensity=intensity, hand_detected=True)


def in_bounds(positions, half_extent=50.0, max_height=30.0):
    return (
        np.all(np.abs(positions[:, 0]) <= half_extent)
        and np.all((positions[:, 1] >= 0.0) & (positions[:, 1] <= max_height))
        and np.all(np.abs(positions[:, 2]) <= half_extent)
    )


def test_default_layout():
    field = WindField(rng=np.random.default_rng(0))

    assert [tree.base_position for tree in field.trees] == DEFAULT_TREE_POSITIONS
    assert field.particles.count == 2000
    assert in_bounds(field.particles.positions)


def test_seeded_fields_match():
    a = WindField(PhysicsConfig(particle_count=20, seed=7))
    b = WindField(PhysicsConfig(particle_count=20, seed=7))
    np.testing.assert_array_equal(a.particles.positions, b.particles.positions)


def test_particle_pushed_past_x_bound_is_reseeded(field):
    field.particles.positions[0] = (51.0, 10.0, 0.0)
    field.step(directional(dx=1.0, strength=0.6), now_ms=0.0)

    assert -50.0 <= field.particles.positions[0, 0] <= 50.0


def test_each_axis_is_reseeded_independently(field):
    field.particles.positions[0] = (0.0, -1.0, 0.0)
    field.particles.positions[1] = (0.0, 15.0, -60.0)
    field.step(directional(strength=0.0), now_ms=0.0)

    x0, y0, z0 = field.particles.positions[0]
    assert 0.0 <= y0 <= 30.0
    assert x0 == pytest.approx(0.0)
    assert z0 == pytest.approx(0.0)

    x1, y1, z1 = field.particles.positions[1]
    assert -50.0 <= z1 <= 50.0
    assert x1 == pytest.approx(0.0)
    assert y1 == pytest.approx(15.0 + math.sin(1.0) * 0.1)


def test_directional_advection(field):
    field.particles.positions[0] = (0.0, 15.0, 0.0)
    field.step(directional(dx=0.5, dy=-0.5, strength=0.4), now_ms=0.0)

    x, y, z = field.particles.positions[0]
    assert x == pytest.approx(0.4)
    assert y == pytest.approx(15.0)
    assert z == pytest.approx(0.4)


def test_wobble_phase_follows_particle_index(field):
    field.particles.positions[:5] = (0.0, 15.0, 0.0)
    field.step(directional(strength=0.0), now_ms=1000.0)

    heights = field.particles.positions[:5, 1]
    expected = [15.0 + math.sin(1.0 + i) * 0.1 for i in range(5)]
    assert heights == pytest.approx(expected)


def test_vortex_step_size_is_radius_independent(field):
    field.particles.positions[0] = (10.0, 15.0, 0.0)
    field.particles.positions[1] = (40.0, 15.0, 0.0)
    field.step(vortex(intensity=0.0), now_ms=0.0)

    near = field.particles.positions[0]
    far = field.particles.positions[1]
    assert near[0] == pytest.approx(10.5)
    assert far[0] == pytest.approx(40.5)
    assert near[2] == pytest.approx(0.0)
    assert near[1] == pytest.approx(15.0)


def test_vortex_lifts_particles_with_intensity(field):
    field.particles.positions[3] = (0.0, 10.0, 20.0)
    field.step(vortex(intensity=2.0), now_ms=1000.0)

    angle = math.atan2(20.0, 0.0) + 0.2
    x, y, z = field.particles.positions[3]
    assert x == pytest.approx(math.cos(angle) * 0.5)
    assert y == pytest.approx(10.0 + math.sin(1.0 + 3) * 0.3 * 2.0)
    assert z == pytest.approx(20.0 + math.sin(angle) * 0.5)


def test_vortex_sets_tree_rotation_absolutely(field):
    for _ in range(3):
        field.step(vortex(intensity=1.0), now_ms=1000.0)

    for rotation_x, rotation_z in field.tree_rotations():
        assert rotation_z == pytest.approx(math.sin(1.0) * 0.3)
        assert rotation_x == pytest.approx(math.cos(1.0) * 0.2)


def test_trees_ease_toward_directional_target(field):
    state = directional(dx=1.0, dy=0.5, strength=0.6)
    field.step(state, now_ms=0.0)

    tree = field.trees[0]
    assert tree.rotation_z == pytest.approx(-0.3 * 0.1)
    assert tree.rotation_x == pytest.approx(0.09 * 0.1)

    for _ in range(300):
        field.step(state, now_ms=0.0)
    assert tree.rotation_z == pytest.approx(-0.3, abs=1e-6)
    assert tree.rotation_x == pytest.approx(0.09, abs=1e-6)


def test_field_stays_bounded_under_strong_vortex(field):
    state = vortex(intensity=25.0)
    for tick in range(500):
        field.step(state, now_ms=tick * 16.0)

    assert in_bounds(field.particles.positions)
    for rotation_x, rotation_z in field.tree_rotations():
        assert abs(rotation_z) <= 0.3 * 25.0
        assert abs(rotation_x) <= 0.2 * 25.0


def test_reseed_reports_moved_particles(rng):
    particles = ParticleField(count=5, rng=rng)
    particles.positions[:] = (0.0, 10.0, 0.0)
    particles.positions[2] = (0.0, 31.0, 55.0)

    assert particles.reseed_out_of_bounds() == 1
    assert in_bounds(particles.positions)
