"""
Core climate grid biome placement.
"""

from .alea_prng import AleaPRNG
from .noise import NoiseSource, OpenSimplexNoise, FlatNoise
from .climate import ClimateVector, ClimateFieldGenerator, fold_distance
from .biomes import BiomeCategory, BiomeRecord, normalize_temperature, normalize_moisture
from .catalog import BiomeCatalog, CatalogBuilder, CatalogHolder, UninitializedCatalog
from .pool import CandidatePool, PoolBuilder, PoolStats, build_pool, pool_stats
from .selector import ClimateBiomeSelector, WeightedBiome, weighted_choice
from .blobs import OrganicBlobEnforcer, SnappedCoords
from .regions import BiomeRegion, find_regions, mean_region_size, longest_straight_boundary
from .biome_source import DimensionContext, BiomeLookupCache, get_biome_at

__all__ = ['AleaPRNG', 'NoiseSource', 'OpenSimplexNoise', 'FlatNoise',
           'ClimateVector', 'ClimateFieldGenerator', 'fold_distance',
           'BiomeCategory', 'BiomeRecord', 'normalize_temperature', 'normalize_moisture',
           'BiomeCatalog', 'CatalogBuilder', 'CatalogHolder', 'UninitializedCatalog',
           'CandidatePool', 'PoolBuilder', 'PoolStats', 'build_pool', 'pool_stats',
           'ClimateBiomeSelector', 'WeightedBiome', 'weighted_choice',
           'OrganicBlobEnforcer', 'SnappedCoords',
           'BiomeRegion', 'find_regions', 'mean_region_size', 'longest_straight_boundary',
           'DimensionContext', 'BiomeLookupCache', 'get_biome_at']
