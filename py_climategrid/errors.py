"""
Error taxonomy for climate grid biome placement.

Construction-time problems (bad configuration, empty candidate pools, a
catalog queried before population) raise. Per-query conditions never do.
"""


class ClimateGridError(Exception):
    """Base class for every error raised by py_climategrid."""


class ConfigurationError(ClimateGridError, ValueError):
    """Invalid climate grid or biome source configuration."""


class EmptyPoolError(ClimateGridError):
    """A dimension's candidate pool resolved to no biomes."""

    def __init__(self, dimension: str, message: str = ""):
        self.dimension = dimension
        super().__init__(
            message or f"Biome pool for dimension '{dimension}' is empty"
        )


class CatalogNotReadyError(ClimateGridError, RuntimeError):
    """The biome catalog was queried before it was populated."""
