"""Injectable randomness for Monte Carlo trials.

Trials never touch a global generator: every draw goes through a
RandomSource so a seeded source reproduces results bit for bit, and each
worker can be handed its own independent stream.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union

import numpy as np


class NoiseModel(Enum):
    """Distribution of per-pool perturbation noise."""

    NORMAL = "normal"    # N(0, 1)
    UNIFORM = "uniform"  # U(-1, 1)


class RandomSource(ABC):
    """Abstract source of trial randomness."""

    @abstractmethod
    def noise(self, size=None) -> np.ndarray:
        """Standard perturbation noise, scaled by volatility in the caller."""
        pass

    @abstractmethod
    def uniform(self, size=None) -> np.ndarray:
        """Uniform draws in [0, 1)."""
        pass


class NumpyRandomSource(RandomSource):
    """RandomSource backed by a numpy Generator (PCG64)."""

    def __init__(
        self,
        seed: Union[None, int, np.random.SeedSequence] = None,
        noise_model: NoiseModel = NoiseModel.NORMAL,
    ):
        self.noise_model = NoiseModel(noise_model)
        self._rng = np.random.default_rng(seed)

    def noise(self, size=None) -> np.ndarray:
        if self.noise_model == NoiseModel.UNIFORM:
            return self._rng.uniform(-1.0, 1.0, size)
        return self._rng.standard_normal(size)

    def uniform(self, size=None) -> np.ndarray:
        return self._rng.random(size)


class SeededRandomSourceFactory:
    """
    Builds independent RandomSource streams from one root seed.

    `factory(stream_id)` always returns the same stream for the same id;
    different ids never share generator state. Instances are picklable so
    they can be sent to worker processes.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        noise_model: NoiseModel = NoiseModel.NORMAL,
    ):
        if seed is None:
            seed = np.random.SeedSequence().entropy
        self.seed = seed
        self.noise_model = NoiseModel(noise_model)

    def __call__(self, stream_id: int) -> RandomSource:
        sequence = np.random.SeedSequence(self.seed, spawn_key=(stream_id,))
        return NumpyRandomSource(sequence, self.noise_model)

    def __repr__(self) -> str:
        return f"SeededRandomSourceFactory(seed={self.seed}, noise_model={self.noise_model.value})"
