"""Tiled, supersampled rendering of the Mandelbrot set on a thread pool."""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple, Optional

import numpy as np

from .color import colorize, colorize_array
from .config import RenderConfig
from .errors import RenderCancelled, RenderError
from .escape import escape_time
from .sampling import RandomSampler, UniformSampler
from .tiles import Tile, partition

logger = logging.getLogger(__name__)

BACKENDS = ("python", "tensorflow")

# Upper bound on points evaluated per kernel call in the tensorflow backend.
BATCH_POINTS = 1 << 20


class PixelSample(NamedTuple):
    x: int
    y: int
    r: int
    g: int
    b: int


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Row-major RGBA output of a render."""

    width: int
    height: int
    rgba: np.ndarray

    def tobytes(self) -> bytes:
        return self.rgba.tobytes()

    def __bytes__(self) -> bytes:
        return self.tobytes()

    def __len__(self) -> int:
        return int(self.rgba.size)


@dataclass(frozen=True)
class _WorkerDone:
    name: str
    failure: Optional[Exception] = None


_STOP = object()


def render_pixel(config: RenderConfig, sampler: RandomSampler, x: int, y: int) -> PixelSample:
    """Average ``config.samples`` jittered samples of pixel ``(x, y)``."""

    scale_x = config.height * config.ratio
    red = green = blue = 0
    for _ in range(config.samples):
        a = scale_x * ((x + sampler.next()) / config.img_width) + config.pos_x
        b = config.height * ((y + sampler.next()) / config.img_height) + config.pos_y
        r, g, bl = colorize(*escape_time(a, b, config.max_iter))
        red += r
        green += g
        blue += bl
    return PixelSample(x, y, red // config.samples, green // config.samples, blue // config.samples)


def render_tile(config: RenderConfig, sampler: RandomSampler, tile: Tile) -> Iterator[PixelSample]:
    for x, y in tile.pixels():
        yield render_pixel(config, sampler, x, y)


def render_tile_batched(
    config: RenderConfig,
    sampler: RandomSampler,
    tile: Tile,
    *,
    device: Optional[str] = None,
) -> Iterator[PixelSample]:
    """Render ``tile`` with the TensorFlow kernel, a block of samples at a time."""

    from .kernels import escape_time_batch

    xs, ys = np.meshgrid(
        np.arange(tile.x0, tile.x1, dtype=np.float64),
        np.arange(tile.y0, tile.y1, dtype=np.float64),
        indexing="ij",
    )
    scale_x = config.height * config.ratio
    sums = np.zeros((tile.width, tile.height, 3), dtype=np.int64)
    per_batch = max(1, BATCH_POINTS // max(tile.area, 1))

    remaining = config.samples
    while remaining > 0:
        count = min(per_batch, remaining)
        jitter = sampler.sample((2, count, tile.width, tile.height))
        a = scale_x * ((xs + jitter[0]) / config.img_width) + config.pos_x
        b = config.height * ((ys + jitter[1]) / config.img_height) + config.pos_y
        mags, iterations = escape_time_batch(a, b, config.max_iter, device=device)
        sums += colorize_array(mags, iterations).astype(np.int64).sum(axis=0)
        remaining -= count

    averaged = sums // config.samples
    for i in range(tile.width):
        for j in range(tile.height):
            r, g, b = averaged[i, j]
            yield PixelSample(tile.x0 + i, tile.y0 + j, int(r), int(g), int(b))


class RenderEngine:
    """Render :class:`RenderConfig` requests with a pool of worker threads.

    Tiles are published on one queue and finished pixels come back on
    another; the calling thread collects pixels into the output buffer.
    Each worker owns a fork of ``sampler``.
    """

    def __init__(
        self,
        sampler: Optional[RandomSampler] = None,
        backend: str = "python",
        *,
        device: Optional[str] = None,
    ) -> None:
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")
        self.sampler = sampler if sampler is not None else UniformSampler()
        self.backend = backend
        self.device = device

    def _tile_pixels(self, config: RenderConfig, sampler: RandomSampler, tile: Tile) -> Iterator[PixelSample]:
        if self.backend == "tensorflow":
            return render_tile_batched(config, sampler, tile, device=self.device)
        return render_tile(config, sampler, tile)

    def _produce(self, tiles: list[Tile], work: queue.Queue, workers: int, halted: Callable[[], bool]) -> None:
        for tile in tiles:
            if halted():
                break
            work.put(tile)
        for _ in range(workers):
            work.put(_STOP)

    def _work(
        self,
        config: RenderConfig,
        sampler: RandomSampler,
        work: queue.Queue,
        results: queue.Queue,
        halted: Callable[[], bool],
    ) -> None:
        name = threading.current_thread().name
        failure = None
        try:
            while True:
                tile = work.get()
                if tile is _STOP:
                    break
                if halted():
                    continue
                for pixel in self._tile_pixels(config, sampler, tile):
                    results.put(pixel)
        except Exception as exc:
            logger.exception("Worker %s failed", name)
            failure = exc
        finally:
            results.put(_WorkerDone(name, failure))

    def render(self, config: RenderConfig, cancel: Optional[threading.Event] = None) -> PixelBuffer:
        """Render ``config`` and return the finished buffer.

        Raises :class:`ConfigError` before any thread starts if ``config`` is
        invalid, and :class:`RenderCancelled` if ``cancel`` is set before the
        render completes.
        """

        config.validate()
        start = time.perf_counter()

        side = config.grid_side
        if side * side != config.num_blocks:
            logger.warning(
                "num_blocks=%d is not a perfect square; rendering %d tiles",
                config.num_blocks,
                side * side,
            )
        if self.backend == "python" and config.num_threads > 1:
            logger.info(
                "The python backend holds the GIL for every sample; %d threads will not run in parallel",
                config.num_threads,
            )
        tiles = partition(config)
        expected = sum(tile.area for tile in tiles)
        logger.info(
            "Rendering %dx%d, %d samples, max_iter=%d, %d tiles on %d %s workers",
            config.img_width,
            config.img_height,
            config.samples,
            config.max_iter,
            len(tiles),
            config.num_threads,
            self.backend,
        )

        stop = threading.Event()

        def halted() -> bool:
            return stop.is_set() or (cancel is not None and cancel.is_set())

        work: queue.Queue = queue.Queue()
        results: queue.Queue = queue.Queue()

        workers = [
            threading.Thread(
                target=self._work,
                args=(config, self.sampler.fork(), work, results, halted),
                name=f"mandelbrot-worker-{i}",
                daemon=True,
            )
            for i in range(config.num_threads)
        ]
        for worker in workers:
            worker.start()
        producer = threading.Thread(
            target=self._produce,
            args=(tiles, work, config.num_threads, halted),
            name="mandelbrot-producer",
            daemon=True,
        )
        producer.start()

        rgba = np.zeros((config.img_height, config.img_width, 4), dtype=np.uint8)
        written = np.zeros((config.img_height, config.img_width), dtype=bool)
        received = 0
        duplicates = 0
        failures: list[_WorkerDone] = []
        finished = 0
        while finished < config.num_threads:
            item = results.get()
            if isinstance(item, _WorkerDone):
                finished += 1
                if item.failure is not None:
                    failures.append(item)
                    stop.set()
                continue
            if written[item.y, item.x]:
                duplicates += 1
            written[item.y, item.x] = True
            rgba[item.y, item.x] = (item.r, item.g, item.b, 255)
            received += 1

        producer.join()
        for worker in workers:
            worker.join()

        if failures:
            raise RenderError(f"{len(failures)} worker(s) failed, first: {failures[0].name}") from failures[0].failure
        if cancel is not None and cancel.is_set() and received < expected:
            raise RenderCancelled(f"render cancelled after {received} of {expected} pixels")
        if duplicates or received != expected:
            raise RenderError(
                f"collected {received} pixels ({duplicates} duplicates), expected {expected}"
            )

        logger.info("Finished pixel calculation in %.3fs", time.perf_counter() - start)
        return PixelBuffer(config.img_width, config.img_height, rgba)


def render(
    config: RenderConfig,
    sampler: Optional[RandomSampler] = None,
    *,
    backend: str = "python",
    cancel: Optional[threading.Event] = None,
) -> PixelBuffer:
    """Render ``config`` with a fresh :class:`RenderEngine`."""

    return RenderEngine(sampler, backend).render(config, cancel=cancel)
