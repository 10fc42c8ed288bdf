import numpy as np
import pytest

tf = pytest.importorskip("tensorflow")

from mandelbrot_tiles import FixedSampler, RenderConfig, RenderEngine, escape_time, render
from mandelbrot_tiles.kernels import escape_time_batch

POINTS = [(0.0, 0.0), (3.0, 0.0), (1.0, 0.0), (-1.0, 0.0), (0.0, 2.0), (0.5, 0.5), (-0.2, 0.1)]


@pytest.mark.parametrize("max_iter", [1, 3, 10, 200])
def test_batch_matches_scalar(max_iter):
    a = np.array([p[0] for p in POINTS])
    b = np.array([p[1] for p in POINTS])

    mags, iterations = escape_time_batch(a, b, max_iter)

    expected = [escape_time(x, y, max_iter) for x, y in POINTS]
    np.testing.assert_array_equal(iterations, [n for _, n in expected])
    np.testing.assert_array_equal(mags, [m for m, _ in expected])


def test_batch_keeps_shape():
    a = np.zeros((2, 3, 4))
    mags, iterations = escape_time_batch(a, a, 5)
    assert mags.shape == iterations.shape == (2, 3, 4)
    assert (iterations == 5).all()


def test_tensorflow_backend_buffer():
    config = RenderConfig(img_width=20, img_height=16, max_iter=50, samples=3, num_blocks=4, num_threads=2)
    buffer = render(config, FixedSampler(0.5), backend="tensorflow")

    assert len(buffer) == 20 * 16 * 4
    assert (buffer.rgba[..., 3] == 255).all()


def test_tensorflow_backend_agrees_with_python_backend():
    config = RenderConfig(img_width=24, img_height=24, max_iter=100, samples=2, num_blocks=9, num_threads=3)
    sampler = FixedSampler(0.25)

    python = RenderEngine(sampler, "python").render(config)
    batched = RenderEngine(sampler, "tensorflow").render(config)

    np.testing.assert_array_equal(python.rgba, batched.rgba)


def test_tensorflow_backend_splits_samples(monkeypatch):
    monkeypatch.setattr("mandelbrot_tiles.engine.BATCH_POINTS", 16)
    config = RenderConfig(img_width=8, img_height=8, max_iter=30, samples=5, num_blocks=4, num_threads=2)
    sampler = FixedSampler(0.5)

    split = render(config, sampler, backend="tensorflow")
    monkeypatch.setattr("mandelbrot_tiles.engine.BATCH_POINTS", 1 << 20)
    whole = render(config, sampler, backend="tensorflow")

    np.testing.assert_array_equal(split.rgba, whole.rgba)
