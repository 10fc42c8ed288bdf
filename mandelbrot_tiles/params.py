"""Build a :class:`RenderConfig` from query-string style parameters."""

from __future__ import annotations

from typing import Mapping, Optional

from . import config as defaults
from .config import RenderConfig

# query parameter -> (RenderConfig field, parser, default)
PARAMETERS = {
    "posX": ("pos_x", float, defaults.DEFAULT_POS_X),
    "posY": ("pos_y", float, defaults.DEFAULT_POS_Y),
    "height": ("height", float, defaults.DEFAULT_HEIGHT),
    "width": ("img_width", int, defaults.DEFAULT_IMG_WIDTH),
    "height_px": ("img_height", int, defaults.DEFAULT_IMG_HEIGHT),
    "maxIter": ("max_iter", int, defaults.DEFAULT_MAX_ITER),
    "samples": ("samples", int, defaults.DEFAULT_SAMPLES),
    "numBlocks": ("num_blocks", int, defaults.DEFAULT_NUM_BLOCKS),
    "numThreads": ("num_threads", int, defaults.DEFAULT_NUM_THREADS),
}


def _parse(raw: Optional[str], parser, default):
    if raw is None:
        return default
    try:
        return parser(raw)
    except (TypeError, ValueError):
        return default


def config_from_params(params: Optional[Mapping[str, str]]) -> RenderConfig:
    """Parse render parameters, falling back to the default for missing or malformed values.

    The result is not validated; :meth:`RenderConfig.validate` (called by the
    engine) rejects values that parse but cannot be rendered, such as zero.
    """

    params = params or {}
    values = {
        field: _parse(params.get(name), parser, default)
        for name, (field, parser, default) in PARAMETERS.items()
    }
    return RenderConfig(**values)
