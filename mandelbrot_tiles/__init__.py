"""Public API for tiled Mandelbrot rendering."""

from .color import colorize, colorize_array
from .config import RenderConfig
from .engine import PixelBuffer, PixelSample, RenderEngine, render
from .errors import ConfigError, RenderCancelled, RenderError
from .escape import escape_time
from .params import config_from_params
from .sampling import FixedSampler, RandomSampler, UniformSampler
from .tiles import Tile, grid_tiles, partition

__all__ = [
    "ConfigError",
    "FixedSampler",
    "PixelBuffer",
    "PixelSample",
    "RandomSampler",
    "RenderCancelled",
    "RenderConfig",
    "RenderEngine",
    "RenderError",
    "Tile",
    "UniformSampler",
    "colorize",
    "colorize_array",
    "config_from_params",
    "escape_time",
    "grid_tiles",
    "partition",
    "render",
]
