"""
Climate grid biome source.

A DimensionContext wires the blob enforcer, climate field and selector for
one dimension and answers the host's per-column question:

    coordinate -> blob remap -> climate sample -> weighted selection -> id

Everything it holds is immutable after construction, so any number of
generation threads can call get_biome_at concurrently. The optional lookup
cache is the only shared mutable state and sits behind its own lock.
"""

import threading
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import structlog

from ..config.grid_config import (
    BiomeSourceOptions,
    ClimateGridConfig,
    load_grid_config,
    load_source_options,
)
from ..config.settings import settings
from .biomes import BiomeRecord
from .blobs import OrganicBlobEnforcer
from .catalog import CatalogHolder, BiomeCatalog
from .climate import ClimateFieldGenerator, ClimateVector
from .pool import CandidatePool, PoolBuilder, PoolStats, pool_stats
from .selector import ClimateBiomeSelector

logger = structlog.get_logger()


class BiomeLookupCache:
    """Bounded, thread-safe LRU map of coordinate to biome id."""

    def __init__(self, max_entries: int):
        self.max_entries = max_entries
        self._entries: "OrderedDict[Tuple[int, int], str]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Tuple[int, int]) -> Optional[str]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: Tuple[int, int], value: str) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class DimensionContext:
    """Biome placement for one climate grid dimension."""

    def __init__(
        self,
        name: str,
        config: ClimateGridConfig,
        pool: CandidatePool,
        seed: int = 0,
        cache_size: int = 0,
        climate_field: Optional[ClimateFieldGenerator] = None,
        blob_enforcer: Optional[OrganicBlobEnforcer] = None,
    ):
        """
        Initialize a dimension context.

        Args:
            name: Dimension name
            config: Validated climate grid configuration
            pool: Non-empty candidate pool
            seed: World seed
            cache_size: Lookup cache entries, 0 disables the cache
            climate_field: Climate field override (defaults from config and seed)
            blob_enforcer: Blob enforcer override (defaults from config and seed)
        """
        self.name = name
        self.config = config
        self.pool = pool
        self.seed = seed

        self.climate_field = climate_field or ClimateFieldGenerator(config, seed)
        self.blob_enforcer = blob_enforcer or OrganicBlobEnforcer(config, seed)
        self.selector = ClimateBiomeSelector(pool, config.climate_tolerance)
        self.cache = BiomeLookupCache(cache_size) if cache_size > 0 else None

        logger.info(
            "Created climate grid dimension",
            dimension=name,
            biomes=len(pool),
            boundary=config.boundary_chunks,
            reversal=config.reversal,
            cell_size=self.blob_enforcer.cell_size,
        )

    @classmethod
    def create(
        cls,
        name: str,
        catalog: Union[BiomeCatalog, CatalogHolder],
        config: Union[ClimateGridConfig, Mapping[str, Any], None] = None,
        sources: Union[BiomeSourceOptions, Mapping[str, Any], None] = None,
        seed: Optional[int] = None,
        cache_size: Optional[int] = None,
    ) -> "DimensionContext":
        """
        Validate configuration, build the candidate pool and wire a context.

        seed and cache_size fall back to settings.default_seed and
        settings.cache_size (CLIMATEGRID_DEFAULT_SEED, CLIMATEGRID_CACHE_SIZE).

        Raises:
            ConfigurationError: If the grid config or source options are invalid
            CatalogNotReadyError: If the catalog has not been populated
            EmptyPoolError: If no biome survives pool building
        """
        grid_config = load_grid_config(config)
        options = load_source_options(sources)

        snapshot = catalog.ready() if isinstance(catalog, CatalogHolder) else catalog
        pool = PoolBuilder(snapshot).build_from_options(options, dimension=name)

        if seed is None:
            seed = settings.default_seed
        if cache_size is None:
            cache_size = settings.cache_size

        return cls(name, grid_config, pool, seed=seed, cache_size=cache_size)

    def remap(self, x: int, z: int) -> Tuple[int, int]:
        return tuple(self.blob_enforcer.remap(x, z))

    def climate_at(self, x: int, z: int) -> ClimateVector:
        """Climate used for the biome at a chunk coordinate (after blob remap)."""
        snapped = self.blob_enforcer.remap(x, z)
        return self.climate_field.sample(snapped.x, snapped.z)

    def record_at(self, x: int, z: int) -> BiomeRecord:
        snapped = self.blob_enforcer.remap(x, z)
        climate = self.climate_field.sample(snapped.x, snapped.z)
        return self.selector.select_record(climate, snapped.x, snapped.z)

    def get_biome_at(self, x: int, z: int) -> str:
        """
        Biome id for a chunk column.

        Args:
            x: Chunk X coordinate
            z: Chunk Z coordinate

        Returns:
            Biome id, identical for identical inputs
        """
        if self.cache is None:
            return self.record_at(x, z).id

        key = (x, z)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        biome_id = self.record_at(x, z).id
        self.cache.put(key, biome_id)
        return biome_id

    def get_biome_at_quart(self, quart_x: int, quart_z: int) -> str:
        """Biome id for quart (4-block) coordinates, as noise biome lookups use."""
        return self.get_biome_at(quart_x >> 2, quart_z >> 2)

    def biome_map(self, x0: int, z0: int, width: int, height: int) -> np.ndarray:
        """
        Biome grid for a rectangle of chunks.

        Args:
            x0: West edge chunk X
            z0: North edge chunk Z
            width: Columns
            height: Rows

        Returns:
            Array of shape (height, width) of indices into candidate_ids()
        """
        index = {biome_id: i for i, biome_id in enumerate(self.pool.ids)}
        grid = np.empty((height, width), dtype=np.int32)
        for row in range(height):
            for col in range(width):
                grid[row, col] = index[self.get_biome_at(x0 + col, z0 + row)]
        return grid

    # Reporting accessors

    def candidate_ids(self) -> List[str]:
        return self.pool.ids

    def candidate_records(self) -> Tuple[BiomeRecord, ...]:
        return self.pool.records

    def climate_table(self) -> Dict[str, Tuple[float, float]]:
        """Biome id to (temperature, moisture) for every candidate."""
        return {record.id: (record.temperature, record.moisture) for record in self.pool}

    def pool_stats(self) -> PoolStats:
        return pool_stats(self.pool)

    def __repr__(self) -> str:
        return f"DimensionContext(name={self.name!r}, biomes={len(self.pool)}, seed={self.seed})"


def get_biome_at(context: DimensionContext, x: int, z: int) -> str:
    """Host entry point: biome id for chunk column (x, z) in a dimension."""
    return context.get_biome_at(x, z)
