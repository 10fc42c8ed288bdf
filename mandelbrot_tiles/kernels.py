"""Vectorised escape-time kernel built on TensorFlow.

The kernel evaluates a whole batch of points at once and reproduces the
results of :func:`mandelbrot_tiles.escape.escape_time` element for element.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .escape import HORIZON


@tf.function
def _escape_step(
    i: tf.Tensor,
    a: tf.Tensor,
    b: tf.Tensor,
    x: tf.Tensor,
    y: tf.Tensor,
    mags: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single iteration for points that have not escaped."""

    xx = x * x
    yy = y * y
    xy = x * y
    m = xx + yy
    escaped = tf.logical_and(active, m > tf.cast(HORIZON, m.dtype))
    ns = tf.where(escaped, tf.fill(tf.shape(ns), i), ns)
    mags = tf.where(active, m, mags)
    active = tf.logical_and(active, tf.logical_not(escaped))
    x = tf.where(active, xx - yy + a, x)
    y = tf.where(active, 2 * xy + b, y)
    return x, y, mags, ns, active


@tf.function(reduce_retracing=True)
def _escape_run(a: tf.Tensor, b: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate every point with a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    mags = tf.zeros_like(a)
    ns = tf.fill(tf.shape(a), max_iterations)
    active = tf.ones_like(a, tf.bool)

    def cond(i, x, y, mags, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, x, y, mags, ns, active):
        x, y, mags, ns, active = _escape_step(i, a, b, x, y, mags, ns, active)
        return i + 1, x, y, mags, ns, active

    _, _, _, mags, ns, _ = tf.while_loop(cond, body, (i, a, b, mags, ns, active))
    return mags, ns


def escape_time_batch(
    a: np.ndarray,
    b: np.ndarray,
    max_iter: int,
    *,
    device: Optional[str] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(magnitude_squared, iterations)`` arrays for every ``a + bi``."""

    with tf.device(device if device is not None else "/CPU:0"):
        a_tf = tf.convert_to_tensor(np.asarray(a, dtype=np.float64))
        b_tf = tf.convert_to_tensor(np.asarray(b, dtype=np.float64))
        mags, ns = _escape_run(a_tf, b_tf, tf.constant(max_iter, dtype=tf.int32))
    return mags.numpy(), ns.numpy()
