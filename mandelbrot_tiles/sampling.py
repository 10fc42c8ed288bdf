"""Jitter sources used to place supersamples inside a pixel."""

from __future__ import annotations

from typing import Optional, Union

import numpy as np


class RandomSampler:
    """Source of uniform values in ``[0, 1)``.

    Instances are not shared between worker threads: the engine calls
    :meth:`fork` once per worker and each worker draws from its own copy.
    """

    def next(self) -> float:
        raise NotImplementedError

    def fork(self) -> "RandomSampler":
        raise NotImplementedError

    def sample(self, shape: Union[int, tuple[int, ...]]) -> np.ndarray:
        """Draw an array of values, one :meth:`next` call per element."""

        size = int(np.prod(shape))
        values = np.fromiter((self.next() for _ in range(size)), dtype=np.float64, count=size)
        return values.reshape(shape)


class UniformSampler(RandomSampler):
    """Sampler backed by a NumPy ``Generator``.

    Forked samplers draw from independent child streams spawned from the
    parent's ``SeedSequence``, so a seeded parent gives reproducible workers.
    """

    def __init__(self, seed: Optional[Union[int, np.random.SeedSequence]] = None) -> None:
        if isinstance(seed, np.random.SeedSequence):
            self._seed_sequence = seed
        else:
            self._seed_sequence = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_sequence)

    def next(self) -> float:
        return float(self._rng.random())

    def fork(self) -> "UniformSampler":
        (child,) = self._seed_sequence.spawn(1)
        return UniformSampler(child)

    def sample(self, shape: Union[int, tuple[int, ...]]) -> np.ndarray:
        return self._rng.random(shape)


class FixedSampler(RandomSampler):
    """Sampler that always returns the same value; renders become deterministic."""

    def __init__(self, value: float = 0.5) -> None:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"sampler value must lie in [0, 1), got {value}")
        self.value = float(value)

    def next(self) -> float:
        return self.value

    def fork(self) -> "FixedSampler":
        return self

    def sample(self, shape: Union[int, tuple[int, ...]]) -> np.ndarray:
        return np.full(shape, self.value, dtype=np.float64)
