from src.wind.config import Config, DEFAULT_TREE_POSITIONS, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")

    assert config == Config()
    assert config.wind.history_size == 30
    assert config.wind.decay == 0.95
    assert config.gestures.open_threshold == 0.1
    assert config.physics.tree_positions == DEFAULT_TREE_POSITIONS


def test_partial_file_overrides_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "wind:\n"
        "  vortex_threshold: 0.5\n"
        "  not_a_setting: 3\n"
        "physics:\n"
        "  particle_count: 10\n"
        "  tree_positions: [[1, 2], [3, 4]]\n"
        "mystery_section:\n"
        "  a: 1\n"
    )

    config = load_config(path)

    assert config.wind.vortex_threshold == 0.5
    assert config.wind.history_size == 30
    assert config.physics.particle_count == 10
    assert config.physics.tree_positions == [(1.0, 2.0), (3.0, 4.0)]
    assert config.camera.width == 640


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()
