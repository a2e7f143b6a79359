"""
Climate field generation for climate grid dimensions.

This module implements:
- North-south temperature and west-east moisture gradients around spawn
- Boundary clamping, or reversal into a bounded "climate island"
- Coherent-noise variation on top of the gradients
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from ..config.grid_config import ClimateGridConfig
from ..utils.random import derive_seeds
from .noise import NoiseSource, OpenSimplexNoise

logger = structlog.get_logger()


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def lerp(delta: float, start: float, end: float) -> float:
    return start + delta * (end - start)


@dataclass(frozen=True)
class ClimateVector:
    """A (temperature, moisture) point in [-1, 1]^2."""

    temperature: float
    moisture: float

    @classmethod
    def clamped(cls, temperature: float, moisture: float) -> "ClimateVector":
        """Build a vector with both components clamped to [-1, 1]."""
        return cls(clamp(temperature, -1.0, 1.0), clamp(moisture, -1.0, 1.0))

    def distance_to(self, other: "ClimateVector") -> float:
        """Euclidean distance in climate space (0.0 identical, ~2.83 maximum)."""
        temp_diff = self.temperature - other.temperature
        moist_diff = self.moisture - other.moisture
        return math.sqrt(temp_diff * temp_diff + moist_diff * moist_diff)

    def __str__(self) -> str:
        return f"Climate(temp={self.temperature:.2f}, moisture={self.moisture:.2f})"


def fold_distance(dist: int, boundary: int, reversal: bool) -> int:
    """
    Apply boundary behaviour to a signed distance from spawn.

    Without reversal the distance saturates at the boundary. With reversal
    it follows a triangle wave of period 4 * boundary, so the climate bounces
    between the two endpoints and never jumps.

    Examples (boundary=2500):
        no reversal: 3000 -> 2500
        reversal:    2600 -> 2400, 5100 -> -100, 7600 -> -2400, 10100 -> 100
    """
    if boundary <= 0:
        raise ValueError(f"boundary must be positive, got {boundary}")

    if not reversal:
        return int(clamp(dist, -boundary, boundary))

    if abs(dist) <= boundary:
        return dist

    sign = 1 if dist > 0 else -1
    overshoot = abs(dist) - boundary
    cycle, remainder = divmod(overshoot, boundary * 2)

    if cycle % 2 == 0:
        # Heading back through spawn towards the opposite boundary
        return sign * (boundary - remainder)
    # Heading out again from the opposite boundary
    return sign * (remainder - boundary)


class ClimateFieldGenerator:
    """Maps chunk coordinates to climate vectors."""

    def __init__(
        self,
        config: ClimateGridConfig,
        seed: int = 0,
        temperature_noise: Optional[NoiseSource] = None,
        moisture_noise: Optional[NoiseSource] = None,
    ):
        """
        Initialize the climate field.

        Args:
            config: Validated climate grid configuration
            seed: World seed; used for the default noise fields
            temperature_noise: Noise field for temperature variation
            moisture_noise: Noise field for moisture variation
        """
        if config.boundary_chunks <= 0:
            raise ValueError("boundary_chunks must be positive")

        self.config = config
        self.seed = seed

        if temperature_noise is None or moisture_noise is None:
            temp_seed, moist_seed = derive_seeds(("climate", seed), 2)
            temperature_noise = temperature_noise or OpenSimplexNoise(temp_seed)
            moisture_noise = moisture_noise or OpenSimplexNoise(moist_seed)

        self.temperature_noise = temperature_noise
        self.moisture_noise = moisture_noise
        self._noise_scale = config.blob_noise_scale * 100.0

        logger.debug(
            "Created climate field",
            spawn=config.spawn_location,
            boundary=config.boundary_chunks,
            reversal=config.reversal,
        )

    def sample(self, x: int, z: int) -> ClimateVector:
        """
        Get the climate at a chunk coordinate.

        Args:
            x: Chunk X coordinate
            z: Chunk Z coordinate

        Returns:
            Clamped climate vector
        """
        config = self.config
        dist_x = fold_distance(x - config.spawn_x, config.boundary_chunks, config.reversal)
        dist_z = fold_distance(z - config.spawn_z, config.boundary_chunks, config.reversal)

        temperature = self.temperature_gradient(dist_z)
        moisture = self.moisture_gradient(dist_x)

        amplitude = config.noise_amplitude
        if amplitude > 0:
            nx = x / self._noise_scale
            nz = z / self._noise_scale
            temperature += self.temperature_noise.sample2d(nx, nz) * amplitude
            moisture += self.moisture_noise.sample2d(nx, nz) * amplitude

        return ClimateVector.clamped(temperature, moisture)

    def temperature_gradient(self, dist_z: int) -> float:
        """Temperature from a folded north-south distance (north is negative)."""
        gradient = self.config.temperature
        if dist_z == 0:
            return gradient.spawn
        ratio = clamp(abs(dist_z) / self.config.boundary_chunks, 0.0, 1.0)
        if dist_z < 0:
            return lerp(ratio, gradient.spawn, gradient.north)
        return lerp(ratio, gradient.spawn, gradient.south)

    def moisture_gradient(self, dist_x: int) -> float:
        """Moisture from a folded west-east distance (west is negative)."""
        gradient = self.config.moisture
        if dist_x == 0:
            return gradient.spawn
        ratio = clamp(abs(dist_x) / self.config.boundary_chunks, 0.0, 1.0)
        if dist_x < 0:
            return lerp(ratio, gradient.spawn, gradient.west)
        return lerp(ratio, gradient.spawn, gradient.east)

    def sample_area(self, xs: np.ndarray, zs: np.ndarray):
        """
        Sample climate over a lattice.

        Args:
            xs: 1D array of chunk X coordinates
            zs: 1D array of chunk Z coordinates

        Returns:
            Tuple of (temperatures, moistures), each of shape (len(zs), len(xs))
        """
        config = self.config
        boundary, reversal = config.boundary_chunks, config.reversal
        xs = np.asarray(xs, dtype=np.int64)
        zs = np.asarray(zs, dtype=np.int64)

        # Temperature depends only on z, moisture only on x
        temp_column = np.array([
            self.temperature_gradient(fold_distance(int(z) - config.spawn_z, boundary, reversal))
            for z in zs
        ])
        moist_row = np.array([
            self.moisture_gradient(fold_distance(int(x) - config.spawn_x, boundary, reversal))
            for x in xs
        ])

        temperatures = np.repeat(temp_column[:, np.newaxis], len(xs), axis=1)
        moistures = np.repeat(moist_row[np.newaxis, :], len(zs), axis=0)

        if config.noise_amplitude > 0:
            nxs = xs / self._noise_scale
            nzs = zs / self._noise_scale
            amplitude = config.noise_amplitude
            temperatures = temperatures + self.temperature_noise.sample_grid(nxs, nzs) * amplitude
            moistures = moistures + self.moisture_noise.sample_grid(nxs, nzs) * amplitude

        return np.clip(temperatures, -1.0, 1.0), np.clip(moistures, -1.0, 1.0)
