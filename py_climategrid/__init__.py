"""
Climate-driven biome placement for generated worlds.
"""

from .core import (
    BiomeCatalog,
    BiomeCategory,
    BiomeRecord,
    CatalogHolder,
    ClimateVector,
    DimensionContext,
    get_biome_at,
)
from .config import BiomeSourceOptions, ClimateGridConfig
from .errors import CatalogNotReadyError, ClimateGridError, ConfigurationError, EmptyPoolError

__version__ = "0.1.0"

__all__ = ['BiomeCatalog', 'BiomeCategory', 'BiomeRecord', 'CatalogHolder',
           'ClimateVector', 'DimensionContext', 'get_biome_at',
           'BiomeSourceOptions', 'ClimateGridConfig',
           'CatalogNotReadyError', 'ClimateGridError', 'ConfigurationError', 'EmptyPoolError']
