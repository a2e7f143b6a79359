"""
Coherent noise sources.

The climate field and blob enforcer ask for single 2D samples in [-1, 1],
and area previews for whole lattices; anything satisfying
:class:`NoiseSource` can be plugged in.
"""

from typing import Protocol

import numpy as np
from opensimplex import OpenSimplex


class NoiseSource(Protocol):
    """Continuous 2D noise field."""

    def sample2d(self, x: float, z: float) -> float:
        """Return a coherent noise value in [-1, 1] at (x, z)."""

    def sample_grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """Return values on the lattice xs x zs, shape (len(zs), len(xs))."""


class OpenSimplexNoise:
    """OpenSimplex-backed noise field."""

    def __init__(self, seed: int):
        # OpenSimplex hashes the seed as a signed 64-bit value
        self.seed = int(seed) & 0x7FFFFFFFFFFFFFFF
        self._generator = OpenSimplex(seed=self.seed)

    def sample2d(self, x: float, z: float) -> float:
        value = self._generator.noise2(float(x), float(z))
        return max(-1.0, min(1.0, value))

    def sample_grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """
        Sample a lattice of points.

        Args:
            xs: 1D array of x positions
            zs: 1D array of z positions

        Returns:
            Array of shape (len(zs), len(xs)) clipped to [-1, 1]
        """
        values = self._generator.noise2array(
            np.asarray(xs, dtype=np.float64), np.asarray(zs, dtype=np.float64)
        )
        return np.clip(values, -1.0, 1.0)

    def __repr__(self) -> str:
        return f"OpenSimplexNoise(seed={self.seed})"


class FlatNoise:
    """Noise field that is the same value everywhere."""

    def __init__(self, value: float = 0.0):
        self.value = max(-1.0, min(1.0, float(value)))

    def sample2d(self, x: float, z: float) -> float:
        return self.value

    def sample_grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        return np.full((len(zs), len(xs)), self.value, dtype=np.float64)

    def __repr__(self) -> str:
        return f"FlatNoise(value={self.value})"
