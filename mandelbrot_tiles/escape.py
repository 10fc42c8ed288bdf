"""Scalar escape-time evaluation for a single point of the complex plane."""

from __future__ import annotations

HORIZON = 4.0


def escape_time(a: float, b: float, max_iter: int) -> tuple[float, int]:
    """Iterate ``z <- z**2 + c`` for ``c = a + bi`` until ``|z|**2`` exceeds 4.

    Returns the squared magnitude at the point of escape and the number of
    iterations taken after the first one. If the orbit stays bounded for
    ``max_iter`` iterations, the last squared magnitude and ``max_iter`` are
    returned instead.
    """

    # z_1 = c
    x, y = a, b
    xx = yy = 0.0
    for i in range(max_iter):
        xx, yy, xy = x * x, y * y, x * y
        if xx + yy > HORIZON:
            return xx + yy, i
        x = xx - yy + a
        y = 2 * xy + b
    return xx + yy, max_iter
