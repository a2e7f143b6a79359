"""
Climate grid and biome source configuration.

These models are the resolved, validated form of a dimension's climate grid
settings. They are frozen: a dimension context keeps the instance it was
built with for its whole lifetime, and a changed configuration means a new
context.
"""

import math
import re
from enum import Enum
from typing import Any, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import ConfigurationError

WILDCARD_PATTERN = re.compile(r"^[a-z0-9_]+:\*$")


class VanillaDimension(str, Enum):
    """Which vanilla dimension's biomes to include."""

    OVERWORLD = "overworld"
    NETHER = "nether"
    END = "end"


class TemperatureGradient(BaseModel):
    """Temperature endpoints along the north-south axis."""

    model_config = ConfigDict(frozen=True)

    north: float = Field(default=-1.0, ge=-1.0, le=1.0, description="Temperature at the northern boundary")
    south: float = Field(default=1.0, ge=-1.0, le=1.0, description="Temperature at the southern boundary")
    spawn: float = Field(default=0.0, ge=-1.0, le=1.0, description="Temperature at spawn")


class MoistureGradient(BaseModel):
    """Moisture endpoints along the west-east axis."""

    model_config = ConfigDict(frozen=True)

    west: float = Field(default=1.0, ge=-1.0, le=1.0, description="Moisture at the western boundary")
    east: float = Field(default=-1.0, ge=-1.0, le=1.0, description="Moisture at the eastern boundary")
    spawn: float = Field(default=0.0, ge=-1.0, le=1.0, description="Moisture at spawn")


class ClimateGridConfig(BaseModel):
    """Climate grid settings for one dimension."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    spawn_location: Tuple[int, int] = Field(
        default=(0, 0), description="Climate origin [x, z] in chunk coordinates"
    )
    boundary_chunks: int = Field(
        default=2500, gt=0, description="Distance from spawn where gradients reach their endpoints"
    )
    temperature: TemperatureGradient = Field(default_factory=TemperatureGradient)
    moisture: MoistureGradient = Field(default_factory=MoistureGradient)
    reversal: bool = Field(
        default=True, description="Reflect gradients past the boundary instead of saturating"
    )

    # Noise variation
    noise_amplitude: float = Field(
        default=0.1, ge=0.0, description="Weight of the climate noise perturbation"
    )
    blob_noise_scale: float = Field(
        default=0.08, gt=0.0, description="Climate noise scale (sampled at coord / (scale * 100))"
    )

    # Blob control
    min_biome_size_chunks: int = Field(
        default=64, gt=0, description="Target minimum blob area in chunks"
    )
    blob_irregularity: float = Field(
        default=0.7, ge=0.0, le=1.0, description="How much blob centers and edges wobble"
    )
    blob_coherence: float = Field(
        default=0.6, ge=0.0, le=1.0, description="How tightly blob edges hold together"
    )
    climate_tolerance: float = Field(
        default=0.2, ge=0.0, description="Maximum climate distance for a biome to be a candidate"
    )

    @property
    def spawn_x(self) -> int:
        return self.spawn_location[0]

    @property
    def spawn_z(self) -> int:
        return self.spawn_location[1]

    @property
    def blob_cell_size(self) -> int:
        """Side of a blob cell, floor(sqrt(min_biome_size_chunks))."""
        return math.isqrt(self.min_biome_size_chunks)


class BiomeSourceOptions(BaseModel):
    """Which biomes a dimension may draw from."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include_vanilla: bool = Field(default=True, description="Include vanilla biomes")
    vanilla_dimension: VanillaDimension = Field(
        default=VanillaDimension.OVERWORLD, description="Vanilla dimension to take biomes from"
    )
    include_mods: List[str] = Field(
        default_factory=list, description="Wildcards ('namespace:*') or explicit biome ids"
    )
    include_biomes: List[str] = Field(default_factory=list, description="Explicit biome ids")
    exclude_biomes: List[str] = Field(default_factory=list, description="Biome ids to remove")

    @field_validator("include_mods", "include_biomes", "exclude_biomes")
    @classmethod
    def _strip_entries(cls, values: List[str]) -> List[str]:
        return [value.strip() for value in values if value and value.strip()]

    @model_validator(mode="after")
    def _require_a_source(self) -> "BiomeSourceOptions":
        if not self.include_vanilla and not self.include_mods and not self.include_biomes:
            raise ValueError("must set include_vanilla, include_mods or include_biomes")
        return self

    @property
    def wildcard_provenances(self) -> List[str]:
        """Provenance names requested through 'namespace:*' entries."""
        return [entry[:-2] for entry in self.include_mods if is_wildcard(entry)]

    @property
    def explicit_ids(self) -> List[str]:
        """Explicit ids from include_mods followed by include_biomes."""
        explicit = [entry for entry in self.include_mods if not is_wildcard(entry)]
        return explicit + list(self.include_biomes)


def is_wildcard(pattern: str) -> bool:
    """True for 'namespace:*' patterns."""
    return bool(WILDCARD_PATTERN.match(pattern))


ConfigInput = Union[BaseModel, Mapping[str, Any], None]


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def load_grid_config(data: ConfigInput = None) -> ClimateGridConfig:
    """
    Validate climate grid settings.

    Args:
        data: An existing ClimateGridConfig, a mapping of field values, or None for defaults

    Returns:
        Frozen ClimateGridConfig

    Raises:
        ConfigurationError: If any field is invalid
    """
    if isinstance(data, ClimateGridConfig):
        return data
    try:
        return ClimateGridConfig.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid climate grid config: {_format_errors(exc)}") from exc


def load_source_options(data: ConfigInput = None) -> BiomeSourceOptions:
    """Validate biome source options, raising ConfigurationError on failure."""
    if isinstance(data, BiomeSourceOptions):
        return data
    try:
        return BiomeSourceOptions.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid biome source options: {_format_errors(exc)}") from exc
