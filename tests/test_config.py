"""Tests for FieldConfig and config loading."""

import json
import math

import pytest

from stickerfield.config import (
    FieldConfig,
    FlowDirection,
    config_from_dict,
    hex_to_rgb,
    load_config,
)


class TestFieldConfigDefaults:
    def test_tuning_constants(self):
        cfg = FieldConfig()
        assert cfg.base_density == 0.00008
        assert cfg.noise_scale == 0.007
        assert cfg.noise_speed == 0.0025
        assert cfg.drag == 0.90
        assert cfg.accel == 0.07
        assert cfg.max_vel == 1.6
        assert cfg.particle_padding == 100
        assert cfg.mouse_radius == 240
        assert cfg.mouse_force == 0.35
        assert cfg.mouse_exp == 1.5
        assert cfg.trail_alpha == 200
        assert cfg.reset_cooldown_ms == 600

    def test_default_direction(self):
        assert FieldConfig().flow_direction is FlowDirection.UP

    def test_wrap_margin_is_half_sticker(self):
        assert FieldConfig(sticker_size=80).wrap_margin == 40

    def test_reduced_motion_scales(self):
        cfg = FieldConfig(reduced_motion=True)
        assert cfg.density_scale == 0.6
        assert cfg.time_step == pytest.approx(0.00125)
        assert FieldConfig().density_scale == 1.0


class TestFlowDirection:
    @pytest.mark.parametrize("direction, bias", [
        ("flowfield", 0.0),
        ("right", 0.0),
        ("down", math.pi / 2),
        ("up", -math.pi / 2),
        ("left", math.pi),
    ])
    def test_bias(self, direction, bias):
        assert FlowDirection(direction).bias == pytest.approx(bias)

    def test_string_coerced(self):
        assert FieldConfig(flow_direction="left").flow_direction is FlowDirection.LEFT

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            FieldConfig(flow_direction="sideways")


class TestValidation:
    def test_trail_alpha_range(self):
        with pytest.raises(ValueError):
            FieldConfig(trail_alpha=300)

    def test_sticker_size_positive(self):
        with pytest.raises(ValueError):
            FieldConfig(sticker_size=0)


class TestLoading:
    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="bogus"):
            config_from_dict({"bogus": 1})

    def test_none_overrides_ignored(self):
        cfg = config_from_dict({"width": 640}, width=None, height=480)
        assert cfg.width == 640
        assert cfg.height == 480

    def test_load_json(self, tmp_path):
        path = tmp_path / "field.json"
        path.write_text(json.dumps({
            "width": 320,
            "flow_direction": "flowfield",
            "background_color": [1, 2, 3],
        }))
        cfg = load_config(path, height=200)
        assert cfg.width == 320
        assert cfg.height == 200
        assert cfg.flow_direction is FlowDirection.FLOWFIELD
        assert cfg.background_color == (1, 2, 3)

    def test_load_non_object(self, tmp_path):
        path = tmp_path / "field.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(path)

    def test_as_dict_roundtrips_through_json(self):
        data = json.loads(json.dumps(FieldConfig(width=321).as_dict()))
        assert config_from_dict(data).width == 321


def test_hex_to_rgb():
    assert hex_to_rgb("#ffd400") == (255, 212, 0)
    assert hex_to_rgb("6366f1") == (99, 102, 241)
    with pytest.raises(ValueError):
        hex_to_rgb("#fff")
