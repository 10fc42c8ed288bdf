import dataclasses

import numpy as np
import pytest

from mandelbrot_tiles import ConfigError, RenderConfig


def test_defaults():
    config = RenderConfig()
    assert (config.pos_x, config.pos_y, config.height) == (-2.0, -1.2, 2.5)
    assert (config.img_width, config.img_height) == (1024, 1024)
    assert (config.max_iter, config.samples) == (1000, 50)
    assert (config.num_blocks, config.num_threads) == (64, 16)
    assert config.legacy_tiling is False
    config.validate()


def test_derived_fields():
    config = RenderConfig(img_width=300, img_height=200)
    assert config.ratio == 1.5
    assert config.pixel_total == 60000


def test_config_is_immutable():
    config = RenderConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.samples = 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"img_width": 0},
        {"img_height": -4},
        {"max_iter": 0},
        {"samples": 0},
        {"num_blocks": 0},
        {"num_threads": 0},
        {"height": 0.0},
        {"height": float("nan")},
        {"pos_x": float("inf")},
        {"samples": 2.5},
        {"num_threads": True},
    ],
)
def test_invalid_configs_are_rejected(overrides):
    with pytest.raises(ConfigError):
        RenderConfig(**overrides).validate()


def test_grid_finer_than_image_is_rejected():
    with pytest.raises(ConfigError, match="too fine"):
        RenderConfig(img_width=5, img_height=50, num_blocks=100).validate()


def test_non_square_block_count_is_accepted():
    config = RenderConfig(num_blocks=10)
    config.validate()
    assert config.grid_side == 3


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_numpy_integers_are_accepted():
    config = RenderConfig(
        img_width=np.int64(32),
        img_height=np.int32(24),
        max_iter=np.int64(50),
        samples=np.uint8(2),
        num_blocks=np.int64(4),
        num_threads=np.int16(2),
    )
    config.validate()
    assert config.grid_side == 2


def test_numpy_floats_are_not_integers():
    with pytest.raises(ConfigError, match="img_width must be an integer"):
        RenderConfig(img_width=np.float64(32)).validate()
