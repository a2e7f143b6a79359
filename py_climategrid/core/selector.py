"""
Climate-matching biome selection.

Selection algorithm:
1. Keep pool biomes within climate tolerance of the target
2. Weight each by inverse climate distance, 1 / (distance + 0.1)
3. Draw from the weights with a PRNG seeded by the coordinate pair

Weighting instead of always taking the nearest biome avoids hard edges
between climate bands while still favouring the best fit. Example, target
(0.5, 0.2):

    plains   distance 0.1  weight 5.00
    savanna  distance 0.2  weight 3.33
    forest   distance 0.8  weight 1.11
"""

from dataclasses import dataclass
from typing import List

import structlog

from ..utils.random import coordinate_prng
from .biomes import BiomeRecord
from .climate import ClimateVector
from .pool import CandidatePool

logger = structlog.get_logger()

WEIGHT_EPSILON = 0.1


@dataclass(frozen=True)
class WeightedBiome:
    """A candidate biome with its selection weight."""

    record: BiomeRecord
    weight: float
    distance: float


class ClimateBiomeSelector:
    """Picks a biome from a candidate pool for a target climate."""

    def __init__(self, pool: CandidatePool, tolerance: float):
        """
        Initialize the selector.

        Args:
            pool: Non-empty candidate pool
            tolerance: Maximum climate distance for a biome to be a candidate
        """
        if len(pool) == 0:
            raise ValueError("Candidate pool must not be empty")
        if tolerance < 0:
            raise ValueError(f"climate tolerance must be non-negative, got {tolerance}")

        self.pool = pool
        self.tolerance = tolerance
        self._records = pool.records

        logger.debug("Created climate biome selector", biomes=len(pool), tolerance=tolerance)

    @property
    def fallback(self) -> BiomeRecord:
        """Biome used when nothing matches, the first pool entry."""
        return self._records[0]

    def candidates(self, climate: ClimateVector) -> List[WeightedBiome]:
        """Weighted candidates within tolerance, in pool order."""
        found = []
        for record in self._records:
            distance = record.climate_distance(climate)
            if distance <= self.tolerance:
                found.append(WeightedBiome(record, 1.0 / (distance + WEIGHT_EPSILON), distance))
        return found

    def select_record(self, climate: ClimateVector, x: int, z: int) -> BiomeRecord:
        """
        Select a biome record for a climate at a coordinate.

        Args:
            climate: Target climate
            x: Coordinate used to seed the draw
            z: Coordinate used to seed the draw

        Returns:
            Chosen record, or the fallback when nothing is within tolerance
        """
        candidates = self.candidates(climate)

        if not candidates:
            logger.warning(
                "No biomes match climate within tolerance, using fallback",
                climate=str(climate),
                tolerance=self.tolerance,
                fallback=self.fallback.id,
            )
            return self.fallback

        return weighted_choice(candidates, coordinate_prng(x, z).random())

    def select(self, climate: ClimateVector, x: int, z: int) -> str:
        """Select a biome id for a climate at a coordinate."""
        return self.select_record(climate, x, z).id


def weighted_choice(candidates: List[WeightedBiome], draw: float) -> BiomeRecord:
    """
    Walk cumulative weights with a draw in [0, 1).

    A point landing exactly on the total (floating point) resolves to the
    last candidate.
    """
    total_weight = sum(candidate.weight for candidate in candidates)
    point = draw * total_weight

    accumulated = 0.0
    for candidate in candidates:
        accumulated += candidate.weight
        if point < accumulated:
            return candidate.record

    return candidates[-1].record
