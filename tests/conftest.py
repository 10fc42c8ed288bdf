"""
conftest.py
-----------
Shared pytest fixtures for the rendering tests.
"""

import pytest

from mandelbrot_tiles import FixedSampler, RenderConfig


@pytest.fixture
def fixed_sampler() -> FixedSampler:
    """Jitter every sample to the centre of its pixel."""
    return FixedSampler(0.5)


@pytest.fixture
def small_config() -> RenderConfig:
    """A 16x12 render that finishes in well under a second."""
    return RenderConfig(
        img_width=16,
        img_height=12,
        max_iter=60,
        samples=2,
        num_blocks=4,
        num_threads=3,
    )
