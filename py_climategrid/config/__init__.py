"""
Configuration models for climate grid dimensions.
"""

from .grid_config import (
    BiomeSourceOptions,
    ClimateGridConfig,
    MoistureGradient,
    TemperatureGradient,
    VanillaDimension,
    is_wildcard,
    load_grid_config,
    load_source_options,
)
from .settings import Settings, settings

__all__ = ['BiomeSourceOptions', 'ClimateGridConfig', 'MoistureGradient',
           'TemperatureGradient', 'VanillaDimension', 'is_wildcard',
           'load_grid_config', 'load_source_options', 'Settings', 'settings']
