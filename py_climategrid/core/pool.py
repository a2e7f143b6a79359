"""
Candidate pool construction.

A pool is the subset of the catalog one dimension may place. Processing
order:
1. Vanilla biomes for the configured vanilla dimension (if requested)
2. Every biome of each wildcard provenance
3. Each explicitly named biome
4. Removal of excluded biomes

Unknown provenances and ids are skipped with a warning. A pool that ends up
empty raises EmptyPoolError, because nothing could ever be selected from it.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple, Union

import structlog

from ..config.grid_config import BiomeSourceOptions, VanillaDimension
from ..errors import EmptyPoolError
from .biomes import VANILLA_PROVENANCE, BiomeCategory, BiomeRecord, split_biome_id
from .catalog import BiomeCatalog

logger = structlog.get_logger()


class CandidatePool:
    """Ordered, read-only set of biome records for one dimension."""

    def __init__(self, records: Iterable[BiomeRecord], dimension: str = "", catalog_version: int = 0):
        self._records: Tuple[BiomeRecord, ...] = tuple(records)
        self._ids = frozenset(record.id for record in self._records)
        self.dimension = dimension
        self.catalog_version = catalog_version

    @property
    def records(self) -> Tuple[BiomeRecord, ...]:
        return self._records

    @property
    def ids(self) -> List[str]:
        return [record.id for record in self._records]

    @property
    def first(self) -> BiomeRecord:
        return self._records[0]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BiomeRecord]:
        return iter(self._records)

    def __contains__(self, biome_id: object) -> bool:
        return biome_id in self._ids

    def __repr__(self) -> str:
        return f"CandidatePool(dimension={self.dimension!r}, biomes={len(self)})"


@dataclass(frozen=True)
class PoolStats:
    """Summary of a candidate pool."""

    total: int
    by_provenance: Dict[str, int]
    by_category: Dict[BiomeCategory, int]

    def summary(self) -> str:
        lines = [f"Total Biomes: {self.total}", "By Provenance:"]
        for provenance, count in sorted(self.by_provenance.items()):
            lines.append(f"  {provenance}: {count}")
        lines.append("By Category:")
        for category, count in sorted(self.by_category.items(), key=lambda item: item[0].value):
            lines.append(f"  {category.display_name}: {count}")
        return "\n".join(lines)


def pool_stats(pool: Iterable[BiomeRecord]) -> PoolStats:
    records = list(pool)
    return PoolStats(
        total=len(records),
        by_provenance=dict(Counter(record.provenance for record in records)),
        by_category=dict(Counter(record.category for record in records)),
    )


def _vanilla_filter(dimension: Union[VanillaDimension, str]):
    try:
        dimension = VanillaDimension(str(getattr(dimension, "value", dimension)).lower())
    except ValueError:
        logger.warning(
            "Unknown vanilla dimension type, including all vanilla biomes",
            vanilla_dimension=dimension,
        )
        return lambda record: True

    if dimension is VanillaDimension.NETHER:
        return lambda record: record.category == BiomeCategory.NETHER
    if dimension is VanillaDimension.END:
        return lambda record: record.category == BiomeCategory.END
    return lambda record: record.category not in (BiomeCategory.NETHER, BiomeCategory.END)


class PoolBuilder:
    """Builds candidate pools from a catalog snapshot."""

    def __init__(self, catalog: BiomeCatalog):
        self.catalog = catalog

    def build(
        self,
        include_provenance_wildcards: Sequence[str] = (),
        include_explicit_ids: Sequence[str] = (),
        exclude_ids: Sequence[str] = (),
        include_vanilla: bool = False,
        vanilla_dimension: Union[VanillaDimension, str] = VanillaDimension.OVERWORLD,
        dimension: str = "",
    ) -> CandidatePool:
        """
        Build a candidate pool.

        Args:
            include_provenance_wildcards: Provenance names ('terralith') or
                wildcard patterns ('terralith:*') whose biomes are all included
            include_explicit_ids: Individual biome ids to include
            exclude_ids: Biome ids removed after everything else
            include_vanilla: Add vanilla biomes for vanilla_dimension first
            vanilla_dimension: "overworld", "nether" or "end"
            dimension: Dimension name, for logs and errors

        Returns:
            Non-empty CandidatePool in insertion order

        Raises:
            EmptyPoolError: If no biome survives
        """
        logger.debug("Building biome pool", dimension=dimension)

        pool: Dict[str, BiomeRecord] = {}

        if include_vanilla:
            self._add_vanilla(pool, vanilla_dimension)

        for pattern in include_provenance_wildcards:
            self._add_provenance(pool, pattern)

        for biome_id in include_explicit_ids:
            self._add_individual(pool, biome_id)

        self._remove_excluded(pool, exclude_ids)

        if not pool:
            logger.warning("Biome pool is empty", dimension=dimension)
            raise EmptyPoolError(
                dimension,
                f"Biome pool for dimension '{dimension}' is empty; "
                "check include and exclude lists",
            )

        logger.info("Built biome pool", dimension=dimension, biomes=len(pool))
        return CandidatePool(
            pool.values(), dimension=dimension, catalog_version=self.catalog.version
        )

    def build_from_options(self, options: BiomeSourceOptions, dimension: str = "") -> CandidatePool:
        """Build a pool from validated biome source options."""
        return self.build(
            include_provenance_wildcards=options.wildcard_provenances,
            include_explicit_ids=options.explicit_ids,
            exclude_ids=options.exclude_biomes,
            include_vanilla=options.include_vanilla,
            vanilla_dimension=options.vanilla_dimension,
            dimension=dimension,
        )

    def _add_vanilla(self, pool: Dict[str, BiomeRecord], vanilla_dimension) -> None:
        vanilla = self.catalog.by_provenance(VANILLA_PROVENANCE)
        if not vanilla:
            logger.warning("No vanilla biomes found in catalog")
            return

        keep = _vanilla_filter(vanilla_dimension)
        added = 0
        for record in vanilla:
            if keep(record):
                pool.setdefault(record.id, record)
                added += 1

        logger.debug("Added vanilla biomes", count=added, vanilla_dimension=str(vanilla_dimension))

    def _add_provenance(self, pool: Dict[str, BiomeRecord], pattern: str) -> None:
        provenance = pattern[:-2] if pattern.endswith(":*") else pattern

        if not self.catalog.has_provenance(provenance):
            logger.warning(
                "Provenance has no biomes in catalog, skipping", provenance=provenance
            )
            return

        records = self.catalog.by_provenance(provenance)
        for record in records:
            pool.setdefault(record.id, record)

        logger.debug("Added provenance biomes", provenance=provenance, count=len(records))

    def _add_individual(self, pool: Dict[str, BiomeRecord], biome_id: str) -> None:
        try:
            split_biome_id(biome_id)
        except ValueError as exc:
            logger.warning("Invalid biome id, skipping", biome=biome_id, error=str(exc))
            return

        record = self.catalog.lookup(biome_id)
        if record is None:
            logger.warning(
                "Biome not found, check spelling or provenance", biome=biome_id
            )
            return

        pool.setdefault(record.id, record)

    def _remove_excluded(self, pool: Dict[str, BiomeRecord], exclude_ids: Sequence[str]) -> None:
        removed = 0
        for biome_id in exclude_ids:
            if not self.catalog.has_biome(biome_id):
                logger.warning("Excluded biome not found in catalog", biome=biome_id)
                continue
            if pool.pop(biome_id, None) is not None:
                removed += 1

        if removed:
            logger.debug("Excluded biomes from pool", count=removed)


def build_pool(
    catalog: BiomeCatalog,
    include_provenance_wildcards: Sequence[str] = (),
    include_explicit_ids: Sequence[str] = (),
    exclude_ids: Sequence[str] = (),
    **kwargs,
) -> CandidatePool:
    """Shorthand for PoolBuilder(catalog).build(...)."""
    return PoolBuilder(catalog).build(
        include_provenance_wildcards, include_explicit_ids, exclude_ids, **kwargs
    )
