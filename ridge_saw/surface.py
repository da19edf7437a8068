from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ridge_saw.constants import DEFAULT_SEED, DEFAULT_SIZE
from ridge_saw.errors import UsageError


class Distribution(Enum):
    SPECKLE = "S"
    NORM = "N"

    @classmethod
    def parse(cls, code: Optional[str]) -> "Distribution":
        """Convert the `-r` argument to a distribution. Only the first letter counts."""
        if code is None or code == "":
            return cls.SPECKLE
        for dist in cls:
            if code[0] == dist.value:
                return dist
        raise UsageError(f"Bad argument '{code}' to -r option.")


@dataclass
class NoiseConfig:
    distribution: Distribution = Distribution.SPECKLE
    size: int = DEFAULT_SIZE
    seed: Optional[int] = None
    target_count: Optional[int] = None

    def __post_init__(self):
        if self.size < 1:
            raise UsageError(f"Bad tile size: {self.size}")
        if self.seed is not None and self.seed < 0:
            raise UsageError(f"Bad random seed: {self.seed}")
        if self.target_count is not None and self.target_count < 1:
            raise UsageError(f"Bad target count: {self.target_count}")

    @property
    def effective_seed(self) -> int:
        return DEFAULT_SEED if self.seed is None else self.seed


class Surface:
    """Fixed-size 2D matrix of 64-bit samples, filled in place."""

    values: NDArray[np.float64]

    def __init__(self, rows: int, cols: int):
        self.values = np.zeros((rows, cols), dtype=np.float64)

    @property
    def shape(self):
        """Return (rows, cols) of the surface."""
        return self.values.shape

    @property
    def rows(self) -> int:
        return self.values.shape[0]

    @property
    def cols(self) -> int:
        return self.values.shape[1]


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random stream shared by every draw of a run."""
    return np.random.default_rng(DEFAULT_SEED if seed is None else seed)


def fill_surface(
    surface: Surface, distribution: Distribution, rng: np.random.Generator
) -> Surface:
    # Draws are taken in row-major order, advancing `rng` by rows * cols
    if distribution is Distribution.SPECKLE:
        surface.values[...] = rng.rayleigh(scale=1.0, size=surface.shape)
    elif distribution is Distribution.NORM:
        surface.values[...] = rng.normal(loc=0.0, scale=1.0, size=surface.shape)
    else:
        raise ValueError(f"Unknown distribution: {distribution}")
    return surface


def generate(config: NoiseConfig, rng: np.random.Generator) -> Surface:
    surface = Surface(config.size, config.size)
    return fill_surface(surface, config.distribution, rng)
