"""Partitioning of the output image into rectangular work tiles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from .config import RenderConfig


@dataclass(frozen=True)
class Tile:
    """Half-open pixel rectangle ``[x0, x1) x [y0, y1)``."""

    x0: int
    x1: int
    y0: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return self.width * self.height

    def pixels(self) -> Iterator[tuple[int, int]]:
        for x in range(self.x0, self.x1):
            for y in range(self.y0, self.y1):
                yield x, y

    def overlaps(self, other: "Tile") -> bool:
        return self.x0 < other.x1 and other.x0 < self.x1 and self.y0 < other.y1 and other.y0 < self.y1


def _bands(length: int, side: int, cover_remainder: bool) -> list[tuple[int, int]]:
    step = length // side
    bands = [(i * step, (i + 1) * step) for i in range(side)]
    if cover_remainder:
        start, _ = bands[-1]
        bands[-1] = (start, length)
    return bands


def grid_tiles(width: int, height: int, num_blocks: int, *, cover_remainder: bool = True) -> list[Tile]:
    """Split a ``width x height`` image into a ``side x side`` grid.

    ``side`` is ``isqrt(num_blocks)``. With ``cover_remainder`` the last row
    and column of tiles extend to the image edge; without it the pixels left
    over by integer division belong to no tile.
    """

    side = math.isqrt(num_blocks)
    columns = _bands(width, side, cover_remainder)
    rows = _bands(height, side, cover_remainder)
    return [Tile(x0, x1, y0, y1) for x0, x1 in columns for y0, y1 in rows]


def partition(config: RenderConfig) -> list[Tile]:
    return grid_tiles(
        config.img_width,
        config.img_height,
        config.num_blocks,
        cover_remainder=not config.legacy_tiling,
    )
