"""
Biome metadata for climate matching.

This module implements:
- Biome categories derived from registry tags (first match wins)
- Normalisation of host climate values onto the [-1, 1] climate plane
- The immutable BiomeRecord the catalog, pool builder and selector share
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

from .climate import ClimateVector, clamp

VANILLA_PROVENANCE = "minecraft"


class BiomeCategory(str, Enum):
    """Coarse biome classification."""

    OCEAN = "ocean"
    RIVER = "river"
    BEACH = "beach"
    MOUNTAIN = "mountain"
    FOREST = "forest"
    JUNGLE = "jungle"
    TAIGA = "taiga"
    SAVANNA = "savanna"
    DESERT = "desert"
    BADLANDS = "badlands"
    NETHER = "nether"
    END = "end"
    UNDERGROUND = "underground"
    PLAINS = "plains"

    @property
    def display_name(self) -> str:
        return CATEGORY_NAMES[self]

    @classmethod
    def from_tags(
        cls,
        tags: Iterable[str],
        base_temperature: Optional[float] = None,
        downfall: Optional[float] = None,
    ) -> "BiomeCategory":
        """
        Determine a category from biome tags.

        Tags are checked in priority order. Untagged biomes fall back to the
        raw host climate: hot and dry is a desert, cold is underground,
        anything else is plains.
        """
        tag_set = {_tag_path(tag) for tag in tags}
        for tag, category in CATEGORY_TAG_PRIORITY:
            if tag in tag_set:
                return category

        if base_temperature is not None and downfall is not None:
            if base_temperature > 1.0 and downfall < 0.2:
                return cls.DESERT
        if base_temperature is not None and base_temperature < 0.5:
            return cls.UNDERGROUND
        return cls.PLAINS


CATEGORY_NAMES = {
    BiomeCategory.OCEAN: "Ocean",
    BiomeCategory.RIVER: "River",
    BiomeCategory.BEACH: "Beach",
    BiomeCategory.MOUNTAIN: "Mountain",
    BiomeCategory.FOREST: "Forest",
    BiomeCategory.JUNGLE: "Jungle",
    BiomeCategory.TAIGA: "Taiga",
    BiomeCategory.SAVANNA: "Savanna",
    BiomeCategory.DESERT: "Desert",
    BiomeCategory.BADLANDS: "Badlands",
    BiomeCategory.NETHER: "Nether",
    BiomeCategory.END: "End",
    BiomeCategory.UNDERGROUND: "Underground",
    BiomeCategory.PLAINS: "Plains",
}

# Registry tag paths, checked in this order
CATEGORY_TAG_PRIORITY = (
    ("is_ocean", BiomeCategory.OCEAN),
    ("is_river", BiomeCategory.RIVER),
    ("is_beach", BiomeCategory.BEACH),
    ("is_mountain", BiomeCategory.MOUNTAIN),
    ("is_forest", BiomeCategory.FOREST),
    ("is_jungle", BiomeCategory.JUNGLE),
    ("is_taiga", BiomeCategory.TAIGA),
    ("is_savanna", BiomeCategory.SAVANNA),
    ("is_badlands", BiomeCategory.BADLANDS),
    ("is_nether", BiomeCategory.NETHER),
    ("is_end", BiomeCategory.END),
)


def _tag_path(tag: str) -> str:
    """'minecraft:is_forest' and '#minecraft:is_forest' both become 'is_forest'."""
    return tag.lstrip("#").split(":", 1)[-1]


def split_biome_id(biome_id: str):
    """
    Split 'namespace:path' into its parts.

    Raises:
        ValueError: If the id has no namespace or an empty part
    """
    namespace, sep, path = biome_id.partition(":")
    if not sep or not namespace or not path:
        raise ValueError(f"Biome id '{biome_id}' must look like 'namespace:path'")
    return namespace, path


def normalize_temperature(base_temperature: float) -> float:
    """Map host temperature (-0.5 frozen .. 2.0 hot) onto [-1, 1]."""
    return (clamp(base_temperature, -0.5, 2.0) - 0.75) / 1.25


def normalize_moisture(downfall: float) -> float:
    """Map host downfall (0.0 dry .. 1.0 wet) onto [-1, 1]."""
    return clamp(downfall, 0.0, 1.0) * 2.0 - 1.0


@dataclass(frozen=True)
class BiomeRecord:
    """Climate metadata for one registered biome."""

    id: str
    provenance: str
    temperature: float
    moisture: float
    category: BiomeCategory = BiomeCategory.PLAINS
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Normalise containers so records stay hashable and read-only
        object.__setattr__(self, "tags", frozenset(self.tags))
        object.__setattr__(self, "category", BiomeCategory(self.category))
        object.__setattr__(self, "temperature", clamp(float(self.temperature), -1.0, 1.0))
        object.__setattr__(self, "moisture", clamp(float(self.moisture), -1.0, 1.0))

    @classmethod
    def create(
        cls,
        biome_id: str,
        temperature: float,
        moisture: float,
        category: Union[BiomeCategory, str] = BiomeCategory.PLAINS,
        tags: Iterable[str] = (),
        provenance: Optional[str] = None,
    ) -> "BiomeRecord":
        """Build a record, taking provenance from the id's namespace when not given."""
        if provenance is None:
            provenance, _ = split_biome_id(biome_id)
        return cls(
            id=biome_id,
            provenance=provenance,
            temperature=temperature,
            moisture=moisture,
            category=BiomeCategory(category),
            tags=frozenset(tags),
        )

    @classmethod
    def from_registry(
        cls,
        biome_id: str,
        base_temperature: float,
        downfall: float,
        tags: Iterable[str] = (),
        provenance: Optional[str] = None,
    ) -> "BiomeRecord":
        """
        Build a record from raw host registry values.

        Args:
            biome_id: Biome id, e.g. "minecraft:plains"
            base_temperature: Host base temperature (-0.5 .. 2.0)
            downfall: Host downfall (0.0 .. 1.0)
            tags: Registry tags the biome carries
            provenance: Source collection, defaults to the id namespace

        Returns:
            BiomeRecord with normalised climate and a tag-derived category
        """
        tags = frozenset(tags)
        return cls.create(
            biome_id,
            temperature=normalize_temperature(base_temperature),
            moisture=normalize_moisture(downfall),
            category=BiomeCategory.from_tags(tags, base_temperature, downfall),
            tags=tags,
            provenance=provenance,
        )

    @property
    def climate(self) -> ClimateVector:
        return ClimateVector(self.temperature, self.moisture)

    @property
    def is_vanilla(self) -> bool:
        return self.provenance == VANILLA_PROVENANCE

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def climate_distance(self, other: Union["BiomeRecord", ClimateVector]) -> float:
        """Euclidean climate distance to another record or a climate vector."""
        temp_diff = self.temperature - other.temperature
        moist_diff = self.moisture - other.moisture
        return math.sqrt(temp_diff * temp_diff + moist_diff * moist_diff)

    def is_climate_match(self, target: ClimateVector, tolerance: float) -> bool:
        return self.climate_distance(target) <= tolerance

    def __str__(self) -> str:
        return (
            f"BiomeRecord(id={self.id}, provenance={self.provenance}, "
            f"temp={self.temperature:.2f}, moisture={self.moisture:.2f}, "
            f"category={self.category.value})"
        )
