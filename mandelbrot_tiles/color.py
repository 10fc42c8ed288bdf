"""Colour mapping from escape-time results to 8-bit RGB."""

from __future__ import annotations

import colorsys

import numpy as np

from .escape import HORIZON

IN_SET_COLOR = (0, 0, 0)
SATURATION = 1.0
LIGHTNESS = 0.5

_ONE_THIRD = 1.0 / 3.0
_ONE_SIXTH = 1.0 / 6.0
_TWO_THIRD = 2.0 / 3.0


def hue_for(magnitude_squared: float, iterations: int) -> float:
    # Empirical scaling; wraps around once per unit.
    return iterations / 100 * magnitude_squared


def _to_byte(channel: float) -> int:
    return int(round(channel * 255))


def colorize(magnitude_squared: float, iterations: int) -> tuple[int, int, int]:
    """Map one escape-time result to an ``(r, g, b)`` triple."""

    if magnitude_squared <= HORIZON:
        return IN_SET_COLOR
    r, g, b = colorsys.hls_to_rgb(hue_for(magnitude_squared, iterations), LIGHTNESS, SATURATION)
    return _to_byte(r), _to_byte(g), _to_byte(b)


def _hls_channel(m1: float, m2: float, hue: np.ndarray) -> np.ndarray:
    hue = np.mod(hue, 1.0)
    rising = m1 + (m2 - m1) * hue * 6.0
    falling = m1 + (m2 - m1) * (_TWO_THIRD - hue) * 6.0
    return np.where(
        hue < _ONE_SIXTH,
        rising,
        np.where(hue < 0.5, m2, np.where(hue < _TWO_THIRD, falling, m1)),
    )


def colorize_array(magnitude_squared: np.ndarray, iterations: np.ndarray) -> np.ndarray:
    """Vectorised :func:`colorize`.

    Returns a ``uint8`` array with a trailing RGB axis whose values match the
    scalar function element for element.
    """

    magnitude_squared = np.asarray(magnitude_squared, dtype=np.float64)
    iterations = np.asarray(iterations)
    hue = iterations.astype(np.float64) / 100 * magnitude_squared

    if LIGHTNESS <= 0.5:
        m2 = LIGHTNESS * (1.0 + SATURATION)
    else:
        m2 = LIGHTNESS + SATURATION - (LIGHTNESS * SATURATION)
    m1 = 2.0 * LIGHTNESS - m2

    rgb = np.stack(
        (
            _hls_channel(m1, m2, hue + _ONE_THIRD),
            _hls_channel(m1, m2, hue),
            _hls_channel(m1, m2, hue - _ONE_THIRD),
        ),
        axis=-1,
    )
    rgb = np.rint(rgb * 255).astype(np.uint8)
    rgb[magnitude_squared <= HORIZON] = IN_SET_COLOR
    return rgb
