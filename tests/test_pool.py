"""Tests for candidate pool building."""

import pytest

from py_climategrid.config import BiomeSourceOptions, VanillaDimension
from py_climategrid.core.biomes import BiomeCategory, BiomeRecord
from py_climategrid.core.catalog import BiomeCatalog, UninitializedCatalog
from py_climategrid.core.pool import PoolBuilder, build_pool, pool_stats
from py_climategrid.errors import CatalogNotReadyError, EmptyPoolError


class TestPoolBuilder:
    """Test pool construction from a catalog."""

    @pytest.fixture
    def catalog(self):
        return BiomeCatalog.from_records([
            BiomeRecord.create("minecraft:plains", 0.0, 0.0, BiomeCategory.PLAINS),
            BiomeRecord.create("minecraft:desert", 0.9, -0.9, BiomeCategory.DESERT),
            BiomeRecord.create("minecraft:forest", 0.0, 0.4, BiomeCategory.FOREST),
            BiomeRecord.create("minecraft:nether_wastes", 1.0, -1.0, BiomeCategory.NETHER),
            BiomeRecord.create("minecraft:the_end", 0.0, 0.0, BiomeCategory.END),
            BiomeRecord.create("terralith:moonlight_grove", 0.1, 0.3, BiomeCategory.FOREST),
            BiomeRecord.create("terralith:volcanic_peaks", 0.8, -0.6, BiomeCategory.MOUNTAIN),
        ])

    @pytest.fixture
    def builder(self, catalog):
        return PoolBuilder(catalog)

    def test_vanilla_overworld(self, builder):
        pool = builder.build(include_vanilla=True)
        assert pool.ids == ["minecraft:plains", "minecraft:desert", "minecraft:forest"]

    def test_vanilla_nether_and_end(self, builder):
        assert builder.build(include_vanilla=True, vanilla_dimension="nether").ids == [
            "minecraft:nether_wastes"
        ]
        assert builder.build(include_vanilla=True, vanilla_dimension=VanillaDimension.END).ids == [
            "minecraft:the_end"
        ]

    def test_unknown_vanilla_dimension_keeps_everything(self, builder):
        pool = builder.build(include_vanilla=True, vanilla_dimension="aether")
        assert len(pool) == 5

    @pytest.mark.parametrize("pattern", ["terralith", "terralith:*"])
    def test_provenance_wildcard(self, builder, pattern):
        pool = builder.build(include_provenance_wildcards=[pattern])
        assert pool.ids == ["terralith:moonlight_grove", "terralith:volcanic_peaks"]

    def test_processing_order(self, builder):
        pool = builder.build(
            include_provenance_wildcards=["terralith:*"],
            include_explicit_ids=["minecraft:nether_wastes"],
            include_vanilla=True,
        )

        assert pool.ids == [
            "minecraft:plains",
            "minecraft:desert",
            "minecraft:forest",
            "terralith:moonlight_grove",
            "terralith:volcanic_peaks",
            "minecraft:nether_wastes",
        ]
        assert pool.first.id == "minecraft:plains"

    def test_duplicates_are_added_once(self, builder):
        pool = builder.build(
            include_provenance_wildcards=["terralith"],
            include_explicit_ids=["terralith:volcanic_peaks", "minecraft:plains", "minecraft:plains"],
        )
        assert pool.ids == ["terralith:moonlight_grove", "terralith:volcanic_peaks", "minecraft:plains"]

    def test_unknown_entries_are_skipped(self, builder):
        pool = builder.build(
            include_provenance_wildcards=["biomesoplenty:*"],
            include_explicit_ids=["minecraft:mushroom_fields", "plains", "minecraft:desert"],
        )
        assert pool.ids == ["minecraft:desert"]

    def test_exclusions_apply_last(self, builder):
        pool = builder.build(
            include_provenance_wildcards=["terralith:*"],
            exclude_ids=["terralith:volcanic_peaks", "minecraft:not_a_biome"],
            include_vanilla=True,
        )

        assert "terralith:volcanic_peaks" not in pool
        assert "terralith:moonlight_grove" in pool
        assert len(pool) == 4

    def test_excluding_everything_raises(self, builder):
        with pytest.raises(EmptyPoolError) as excinfo:
            builder.build(
                include_explicit_ids=["minecraft:plains"],
                exclude_ids=["minecraft:plains"],
                dimension="climate_world",
            )
        assert excinfo.value.dimension == "climate_world"

    def test_nothing_requested_raises(self, builder):
        with pytest.raises(EmptyPoolError):
            builder.build(include_provenance_wildcards=["unknown:*"])

    def test_pool_records_catalog_version(self, builder, catalog):
        pool = builder.build(include_vanilla=True, dimension="overworld")
        assert pool.catalog_version == catalog.version
        assert pool.dimension == "overworld"

    def test_build_from_options(self, builder):
        options = BiomeSourceOptions(
            include_vanilla=False,
            include_mods=["terralith:*", "minecraft:plains"],
            include_biomes=["minecraft:desert"],
            exclude_biomes=["terralith:volcanic_peaks"],
        )

        pool = builder.build_from_options(options)

        assert pool.ids == ["terralith:moonlight_grove", "minecraft:plains", "minecraft:desert"]

    def test_build_pool_shorthand(self, catalog):
        pool = build_pool(catalog, ["terralith"], [], [], include_vanilla=True)
        assert len(pool) == 5

    def test_uninitialized_catalog_raises(self):
        with pytest.raises(CatalogNotReadyError):
            PoolBuilder(UninitializedCatalog()).build(include_vanilla=True)


class TestPoolStats:
    """Test pool statistics."""

    def test_counts_and_summary(self):
        pool = [
            BiomeRecord.create("minecraft:plains", 0.0, 0.0, BiomeCategory.PLAINS),
            BiomeRecord.create("minecraft:forest", 0.0, 0.4, BiomeCategory.FOREST),
            BiomeRecord.create("terralith:moonlight_grove", 0.1, 0.3, BiomeCategory.FOREST),
        ]

        stats = pool_stats(pool)

        assert stats.total == 3
        assert stats.by_provenance == {"minecraft": 2, "terralith": 1}
        assert stats.by_category == {BiomeCategory.PLAINS: 1, BiomeCategory.FOREST: 2}

        summary = stats.summary()
        assert "Total Biomes: 3" in summary
        assert "  terralith: 1" in summary
        assert "  Forest: 2" in summary
