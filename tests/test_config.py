"""
Tests for configuration loading and validation.
"""

import os

import pytest
import yaml

import gate_rush
from gate_rush.core.config_loader import get_config, load_config, reload_config
from gate_rush.core.operations import GateOperation


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def raw_config():
    with open(_default_path(), "r") as f:
        return yaml.safe_load(f)


def _default_path():
    return os.path.join(os.path.dirname(gate_rush.__file__), "game_config.yaml")


def _write(tmp_path, data):
    path = tmp_path / "game_config.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    """Test the shipped configuration."""

    def test_field_geometry(self, config):
        assert config.lane_count == 3
        assert config.field.height == 700
        assert config.field.player_bottom == 600
        assert config.field.player_top == 540
        assert config.field.gate_height == 80
        assert config.field.gate_spawn_y == -100
        assert config.field.center_lane == 1

    def test_difficulty(self, config):
        assert config.difficulty.initial_speed == 3.0
        assert config.difficulty.speed_increment == 0.005
        assert config.difficulty.initial_spawn_interval_ms == 1500
        assert config.difficulty.spawn_interval_step_ms == 10
        assert config.difficulty.min_spawn_interval_ms == 1000

    def test_scoring(self, config):
        assert config.scoring.initial_score == 1
        assert config.scoring.target_score == 1000

    def test_operation_table(self, config):
        assert config.gates.total_weight == 100
        assert config.get_operation("+").values == tuple(range(1, 11))
        assert config.get_operation("-").weight == 30
        assert config.get_operation("x").values == (2, 3)
        assert config.get_operation("/").values == (2, 3)
        symbols = {GateOperation.from_symbol(op.symbol) for op in config.gates.operations}
        assert symbols == set(GateOperation)

    def test_unknown_operation_lookup(self, config):
        with pytest.raises(ValueError):
            config.get_operation("%")

    def test_config_is_frozen(self, config):
        with pytest.raises(AttributeError):
            config.scoring.target_score = 5

    def test_cached_config(self):
        assert get_config() is get_config()
        assert reload_config() is get_config()


class TestLoading:
    """Test loading from explicit paths."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_custom_file(self, tmp_path, raw_config):
        raw_config["scoring"]["target_score"] = 50
        raw_config["field"]["lane_count"] = 5
        config = load_config(_write(tmp_path, raw_config))
        assert config.scoring.target_score == 50
        assert config.field.center_lane == 2


class TestValidation:
    """Test rejection of inconsistent configuration."""

    def test_unknown_symbol(self, tmp_path, raw_config):
        raw_config["gates"]["operations"][0]["symbol"] = "%"
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_duplicate_symbol(self, tmp_path, raw_config):
        raw_config["gates"]["operations"][1]["symbol"] = "+"
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_zero_operand(self, tmp_path, raw_config):
        raw_config["gates"]["operations"][3]["values"] = [0, 2]
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_floor_above_initial_interval(self, tmp_path, raw_config):
        raw_config["difficulty"]["min_spawn_interval_ms"] = 2000
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_target_not_above_initial(self, tmp_path, raw_config):
        raw_config["scoring"]["target_score"] = 1
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_player_band_outside_field(self, tmp_path, raw_config):
        raw_config["field"]["player_bottom_offset"] = 690
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))
