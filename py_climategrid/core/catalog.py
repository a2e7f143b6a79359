"""
Biome catalog.

The catalog is an immutable snapshot of every known biome, indexed by id and
by provenance. Readiness lives in the type: a holder starts out with an
UninitializedCatalog that refuses every query, and population swaps in a
complete BiomeCatalog in one assignment. Readers grab the current snapshot
and never see a half-built index.
"""

import threading
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import structlog

from ..errors import CatalogNotReadyError
from .biomes import BiomeCategory, BiomeRecord
from .climate import ClimateVector

logger = structlog.get_logger()


class UninitializedCatalog:
    """Placeholder snapshot before the host has registered any biome."""

    is_ready = False

    def _not_ready(self, *args, **kwargs):
        raise CatalogNotReadyError(
            "Biome catalog must be populated before it can be queried"
        )

    lookup = by_provenance = by_climate = by_category = with_tag = _not_ready
    has_biome = has_provenance = provenances = records = _not_ready

    def __len__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "UninitializedCatalog()"


class BiomeCatalog:
    """Read-only index of biome records."""

    is_ready = True

    def __init__(self, records: Mapping[str, BiomeRecord], version: int = 1):
        """
        Initialize a catalog snapshot.

        Args:
            records: Mapping of biome id to record, in registration order
            version: Monotonic snapshot number, bumped on every reload
        """
        by_provenance: Dict[str, List[BiomeRecord]] = {}
        for record in records.values():
            by_provenance.setdefault(record.provenance, []).append(record)

        self._records = MappingProxyType(dict(records))
        self._by_provenance = MappingProxyType(
            {name: tuple(items) for name, items in by_provenance.items()}
        )
        self.version = version

    @classmethod
    def from_records(cls, records: Iterable[BiomeRecord], version: int = 1) -> "BiomeCatalog":
        builder = CatalogBuilder()
        for record in records:
            builder.register(record)
        return builder.build(version=version)

    def lookup(self, biome_id: str) -> Optional[BiomeRecord]:
        """Get a record by id, or None if unknown."""
        return self._records.get(biome_id)

    def by_provenance(self, provenance: str) -> Tuple[BiomeRecord, ...]:
        """All records from one provenance, empty if none."""
        return self._by_provenance.get(provenance, ())

    def by_climate(self, target: ClimateVector, tolerance: float) -> List[BiomeRecord]:
        """
        Find biomes whose climate lies within tolerance of a target.

        Args:
            target: Target climate
            tolerance: Maximum Euclidean climate distance

        Returns:
            Matching records in registration order
        """
        return [
            record
            for record in self._records.values()
            if record.is_climate_match(target, tolerance)
        ]

    def by_category(self, category: Union[BiomeCategory, str]) -> List[BiomeRecord]:
        category = BiomeCategory(category)
        return [record for record in self._records.values() if record.category == category]

    def with_tag(self, tag: str) -> List[BiomeRecord]:
        return [record for record in self._records.values() if record.has_tag(tag)]

    def has_biome(self, biome_id: str) -> bool:
        return biome_id in self._records

    def has_provenance(self, provenance: str) -> bool:
        return provenance in self._by_provenance

    def provenances(self) -> Tuple[str, ...]:
        return tuple(self._by_provenance)

    def records(self) -> Tuple[BiomeRecord, ...]:
        return tuple(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BiomeRecord]:
        return iter(self._records.values())

    def __contains__(self, biome_id: object) -> bool:
        return biome_id in self._records

    def __repr__(self) -> str:
        return (
            f"BiomeCatalog(biomes={len(self)}, provenances={len(self._by_provenance)}, "
            f"version={self.version})"
        )


class CatalogBuilder:
    """Collects registrations for a new catalog snapshot."""

    def __init__(self):
        self._records: Dict[str, BiomeRecord] = {}

    def register(self, record: BiomeRecord) -> "CatalogBuilder":
        """Add a record; a later registration of the same id replaces the earlier one."""
        if record.id in self._records:
            logger.warning("Biome registered twice, keeping latest", biome=record.id)
        self._records[record.id] = record
        return self

    def register_all(self, records: Iterable[BiomeRecord]) -> "CatalogBuilder":
        for record in records:
            self.register(record)
        return self

    def build(self, version: int = 1) -> BiomeCatalog:
        return BiomeCatalog(self._records, version=version)

    def __len__(self) -> int:
        return len(self._records)


AnyCatalog = Union[BiomeCatalog, UninitializedCatalog]


class CatalogHolder:
    """
    Owns the current catalog snapshot for a world session.

    Writers build a whole new snapshot and swap it in under a lock; readers
    call snapshot() without locking.
    """

    def __init__(self):
        self._snapshot: AnyCatalog = UninitializedCatalog()
        self._write_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._snapshot.is_ready

    def snapshot(self) -> AnyCatalog:
        """Current snapshot; keep the reference for the duration of a query."""
        return self._snapshot

    def ready(self) -> BiomeCatalog:
        """Current snapshot, raising CatalogNotReadyError before population."""
        snapshot = self._snapshot
        if not snapshot.is_ready:
            raise CatalogNotReadyError(
                "Biome catalog must be populated before building biome pools"
            )
        return snapshot

    def populate(self, records: Iterable[BiomeRecord]) -> BiomeCatalog:
        """
        Populate the catalog once per session.

        A second call is ignored and returns the existing snapshot; use
        reload() to replace it.
        """
        with self._write_lock:
            if self._snapshot.is_ready:
                logger.debug("Biome catalog already populated, skipping")
                return self._snapshot
            return self._swap(records, version=1)

    def reload(self, records: Iterable[BiomeRecord]) -> BiomeCatalog:
        """Replace the whole catalog with a freshly built snapshot."""
        with self._write_lock:
            version = self._snapshot.version + 1 if self._snapshot.is_ready else 1
            return self._swap(records, version=version)

    def clear(self) -> None:
        with self._write_lock:
            self._snapshot = UninitializedCatalog()
            logger.debug("Cleared biome catalog")

    def _swap(self, records: Iterable[BiomeRecord], version: int) -> BiomeCatalog:
        catalog = CatalogBuilder().register_all(records).build(version=version)
        self._snapshot = catalog

        logger.info(
            "Captured biome catalog",
            biomes=len(catalog),
            provenances=len(catalog.provenances()),
            version=version,
        )
        for provenance in catalog.provenances():
            logger.debug("Provenance biomes", provenance=provenance, count=len(catalog.by_provenance(provenance)))
        return catalog
