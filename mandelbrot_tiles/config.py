"""Render configuration for a single tiled Mandelbrot render."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_POS_X = -2.0
DEFAULT_POS_Y = -1.2
DEFAULT_HEIGHT = 2.5
DEFAULT_IMG_WIDTH = 1024
DEFAULT_IMG_HEIGHT = 1024
DEFAULT_MAX_ITER = 1000
DEFAULT_SAMPLES = 50
DEFAULT_NUM_BLOCKS = 64
DEFAULT_NUM_THREADS = 16


@dataclass(frozen=True)
class RenderConfig:
    """Parameters that describe a single render of the Mandelbrot set.

    ``pos_x``/``pos_y`` locate the top-left corner of the viewport in the
    complex plane and ``height`` is its extent along the imaginary axis; the
    real extent is ``height * ratio``.
    """

    pos_x: float = DEFAULT_POS_X
    pos_y: float = DEFAULT_POS_Y
    height: float = DEFAULT_HEIGHT
    img_width: int = DEFAULT_IMG_WIDTH
    img_height: int = DEFAULT_IMG_HEIGHT
    max_iter: int = DEFAULT_MAX_ITER
    samples: int = DEFAULT_SAMPLES
    num_blocks: int = DEFAULT_NUM_BLOCKS
    num_threads: int = DEFAULT_NUM_THREADS
    legacy_tiling: bool = False

    @property
    def ratio(self) -> float:
        return self.img_width / self.img_height

    @property
    def pixel_total(self) -> int:
        return self.img_width * self.img_height

    @property
    def grid_side(self) -> int:
        return math.isqrt(self.num_blocks)

    def validate(self) -> None:
        """Raise :class:`ConfigError` if this configuration cannot be rendered."""

        for name in ("img_width", "img_height", "max_iter", "samples", "num_blocks", "num_threads"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")

        if not math.isfinite(self.height) or self.height <= 0:
            raise ConfigError(f"height must be a positive finite number, got {self.height!r}")
        if not (math.isfinite(self.pos_x) and math.isfinite(self.pos_y)):
            raise ConfigError(f"viewport origin must be finite, got ({self.pos_x!r}, {self.pos_y!r})")

        side = self.grid_side
        if side > self.img_width or side > self.img_height:
            raise ConfigError(
                f"num_blocks={self.num_blocks} gives a {side}x{side} grid, "
                f"too fine for a {self.img_width}x{self.img_height} image"
            )
