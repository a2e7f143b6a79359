"""Tests for the biome catalog and its holder."""

import threading

import pytest

from py_climategrid.core.biomes import BiomeCategory, BiomeRecord
from py_climategrid.core.catalog import BiomeCatalog, CatalogBuilder, CatalogHolder, UninitializedCatalog
from py_climategrid.core.climate import ClimateVector
from py_climategrid.errors import CatalogNotReadyError


@pytest.fixture
def records():
    """A small mixed catalog."""
    return [
        BiomeRecord.create("minecraft:plains", 0.0, 0.0, BiomeCategory.PLAINS, ["minecraft:is_plains"]),
        BiomeRecord.create("minecraft:desert", 0.9, -0.9, BiomeCategory.DESERT),
        BiomeRecord.create("minecraft:snowy_taiga", -0.8, 0.2, BiomeCategory.TAIGA, ["minecraft:is_taiga"]),
        BiomeRecord.create("terralith:moonlight_grove", 0.1, 0.1, BiomeCategory.FOREST, ["minecraft:is_forest"]),
    ]


class TestUninitializedCatalog:
    """Test the not-yet-populated state."""

    def test_every_query_raises(self):
        catalog = UninitializedCatalog()

        assert not catalog.is_ready
        assert len(catalog) == 0
        with pytest.raises(CatalogNotReadyError):
            catalog.lookup("minecraft:plains")
        with pytest.raises(CatalogNotReadyError):
            catalog.by_provenance("minecraft")
        with pytest.raises(CatalogNotReadyError):
            catalog.by_climate(ClimateVector(0.0, 0.0), 0.2)
        with pytest.raises(CatalogNotReadyError):
            catalog.has_provenance("minecraft")


class TestBiomeCatalog:
    """Test catalog queries."""

    @pytest.fixture
    def catalog(self, records):
        return BiomeCatalog.from_records(records)

    def test_lookup(self, catalog):
        assert catalog.lookup("minecraft:desert").temperature == 0.9
        assert catalog.lookup("minecraft:nope") is None
        assert "minecraft:plains" in catalog
        assert catalog.has_biome("terralith:moonlight_grove")
        assert len(catalog) == 4

    def test_by_provenance(self, catalog):
        vanilla = catalog.by_provenance("minecraft")

        assert [record.id for record in vanilla] == [
            "minecraft:plains",
            "minecraft:desert",
            "minecraft:snowy_taiga",
        ]
        assert catalog.by_provenance("biomesoplenty") == ()
        assert catalog.provenances() == ("minecraft", "terralith")

    def test_by_climate(self, catalog):
        matches = catalog.by_climate(ClimateVector(0.05, 0.0), 0.2)
        assert [record.id for record in matches] == ["minecraft:plains", "terralith:moonlight_grove"]

        assert catalog.by_climate(ClimateVector(-1.0, -1.0), 0.2) == []

    def test_by_category_and_tag(self, catalog):
        assert [r.id for r in catalog.by_category(BiomeCategory.DESERT)] == ["minecraft:desert"]
        assert [r.id for r in catalog.by_category("taiga")] == ["minecraft:snowy_taiga"]
        assert [r.id for r in catalog.with_tag("minecraft:is_forest")] == ["terralith:moonlight_grove"]

    def test_iteration_keeps_registration_order(self, catalog, records):
        assert list(catalog) == records
        assert catalog.records() == tuple(records)

    def test_duplicate_registration_keeps_latest(self, records):
        replacement = BiomeRecord.create("minecraft:plains", 0.2, 0.2)
        builder = CatalogBuilder().register_all(records).register(replacement)
        catalog = builder.build()

        assert len(builder) == 4
        assert catalog.lookup("minecraft:plains").temperature == 0.2


class TestCatalogHolder:
    """Test population and reload of the shared catalog."""

    def test_starts_uninitialized(self):
        holder = CatalogHolder()

        assert not holder.is_ready
        assert isinstance(holder.snapshot(), UninitializedCatalog)
        with pytest.raises(CatalogNotReadyError):
            holder.ready()

    def test_populate(self, records):
        holder = CatalogHolder()
        catalog = holder.populate(records)

        assert holder.is_ready
        assert holder.ready() is catalog
        assert catalog.version == 1
        assert len(catalog) == 4

    def test_populate_twice_keeps_first_snapshot(self, records):
        holder = CatalogHolder()
        first = holder.populate(records)
        second = holder.populate(records[:1])

        assert second is first
        assert len(holder.ready()) == 4

    def test_reload_swaps_whole_snapshot(self, records):
        holder = CatalogHolder()
        old = holder.populate(records)

        new = holder.reload(records[:2])

        assert new.version == 2
        assert holder.snapshot() is new
        assert len(new) == 2
        # Readers holding the old snapshot still see all of it
        assert len(old) == 4
        assert old.lookup("minecraft:snowy_taiga") is not None

    def test_clear(self, records):
        holder = CatalogHolder()
        holder.populate(records)
        holder.clear()

        assert not holder.is_ready
        assert holder.reload(records).version == 1

    def test_concurrent_readers_see_complete_snapshots(self, records):
        holder = CatalogHolder()
        holder.populate(records)
        seen = []

        def read():
            for _ in range(200):
                seen.append(len(holder.snapshot()))

        def write():
            for i in range(50):
                holder.reload(records if i % 2 else records[:2])

        threads = [threading.Thread(target=read) for _ in range(4)]
        threads.append(threading.Thread(target=write))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert set(seen) <= {2, 4}
        assert holder.ready().version == 51
