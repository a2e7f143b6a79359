"""
Organic blob enforcement.

Climate matching on its own happily produces one-chunk patches. The blob
enforcer remaps every coordinate to a shared sampling point for its cell
before climate is sampled, so whole neighbourhoods resolve to one biome.

Snapping to a plain grid gives straight seams:

    F F F F | P P P P
    F F F F | P P P P
    --------+--------
    F F F F | P P P P

so cell membership is decided on a coordinate warped by the edge noise
field, each cell's sampling point gets a fixed random offset, and a
continuous noise term wobbles it across the cell:

    F F F P P P P P
    F F F F P P P P
    F F F F F P P P
    F F F F F F P P

Known limitation: minimum size is a tuning target, not a guarantee. Nothing
here measures or enforces blob area, and the edge wobble can split a cell
into several sampling points. With blob_irregularity 0 the warp and the
wobble vanish and the plain grid seams come back; see
tests/test_blobs.py::TestBlobStatistics::test_zero_irregularity_keeps_grid_seams.
"""

import math
from dataclasses import dataclass
from typing import Optional

import structlog

from ..config.grid_config import ClimateGridConfig
from ..utils.random import cell_seed, derive_seeds
from .alea_prng import AleaPRNG
from .noise import NoiseSource, OpenSimplexNoise

logger = structlog.get_logger()

# Axis 1 edge noise is read this far away from axis 0
AXIS_NOISE_OFFSET = 1000.0
# Membership warp reads the edge noise field away from the wobble samples
WARP_NOISE_OFFSET = 2000.0
# Detail octave of the membership warp: frequency multiple and weight
WARP_DETAIL_FREQUENCY = 4.0
WARP_DETAIL_WEIGHT = 0.5


@dataclass(frozen=True)
class SnappedCoords:
    """Effective sampling coordinate for a chunk."""

    x: int
    z: int

    def __iter__(self):
        yield self.x
        yield self.z

    def __str__(self) -> str:
        return f"({self.x}, {self.z})"


class OrganicBlobEnforcer:
    """Remaps chunk coordinates to jittered, noise-perturbed blob centers."""

    def __init__(
        self,
        config: ClimateGridConfig,
        seed: int = 0,
        edge_noise: Optional[NoiseSource] = None,
    ):
        """
        Initialize the enforcer.

        Args:
            config: Validated climate grid configuration
            seed: World seed for per-cell offsets and the default edge noise
            edge_noise: Noise field for edge wobble and the membership warp
        """
        self.cell_size = config.blob_cell_size
        self.irregularity = config.blob_irregularity
        self.coherence = config.blob_coherence
        self.seed = seed

        if edge_noise is None:
            (edge_seed,) = derive_seeds(("blob-edges", seed), 1)
            edge_noise = OpenSimplexNoise(edge_seed)
        self.edge_noise = edge_noise

        self.max_offset = int(self.irregularity * self.cell_size * 0.3)
        self._noise_scale = self.cell_size * (1.0 + self.coherence)
        self._wobble = self.irregularity * self.cell_size * 0.5
        self._warp = self.irregularity * self.cell_size * (1.0 - self.coherence * 0.5)

        logger.debug(
            "Created organic blob enforcer",
            cell_size=self.cell_size,
            irregularity=self.irregularity,
            coherence=self.coherence,
        )

    def cell_of(self, x: int, z: int):
        """Blob cell indices containing a coordinate, after the membership warp."""
        warped_x = x + self.membership_shift(x, z, 0)
        warped_z = z + self.membership_shift(x, z, 1)
        return warped_x // self.cell_size, warped_z // self.cell_size

    def cell_center(self, cell_x: int, cell_z: int):
        """Nominal center of a cell plus its fixed random offset."""
        half = self.cell_size // 2
        return (
            cell_x * self.cell_size + half + self.cell_offset(cell_x, cell_z, 0),
            cell_z * self.cell_size + half + self.cell_offset(cell_x, cell_z, 1),
        )

    def remap(self, x: int, z: int) -> SnappedCoords:
        """
        Snap a chunk coordinate to its blob sampling point.

        Args:
            x: Chunk X coordinate
            z: Chunk Z coordinate

        Returns:
            Coordinate at which climate and biome should be sampled
        """
        center_x, center_z = self.cell_center(*self.cell_of(x, z))

        # int() truncates toward zero
        final_x = center_x + int(self.edge_perturbation(x, z, 0) * self._wobble)
        final_z = center_z + int(self.edge_perturbation(x, z, 1) * self._wobble)

        return SnappedCoords(final_x, final_z)

    def cell_offset(self, cell_x: int, cell_z: int, axis: int) -> int:
        """
        Fixed random offset of a cell's center along one axis.

        Depends only on the world seed and cell position, in
        [-max_offset, max_offset].
        """
        if self.max_offset == 0:
            return 0
        prng = AleaPRNG(cell_seed(self.seed, cell_x, cell_z, axis))
        return prng.randint(-self.max_offset, self.max_offset)

    def edge_perturbation(self, x: int, z: int, axis: int) -> float:
        """
        Continuous edge wobble in [-1, 1] along one axis.

        Higher coherence lowers both the frequency and the amplitude.
        """
        if self.irregularity == 0:
            return 0.0
        shift = axis * AXIS_NOISE_OFFSET
        noise = self.edge_noise.sample2d(x / self._noise_scale + shift, z / self._noise_scale + shift)
        return noise * (1.0 - self.coherence * 0.5)

    def membership_shift(self, x: int, z: int, axis: int) -> int:
        """
        Whole-chunk displacement applied before cell lookup along one axis.

        Two octaves of the edge noise field, so cell borders follow noise
        contours instead of grid lines. At most
        irregularity * cell_size * (1 - coherence / 2) chunks, rounded to the
        nearest chunk so tiny cells are left alone.
        """
        if self.irregularity == 0:
            return 0
        shift = WARP_NOISE_OFFSET + axis * AXIS_NOISE_OFFSET
        nx = x / self._noise_scale + shift
        nz = z / self._noise_scale + shift
        base = self.edge_noise.sample2d(nx, nz)
        detail = self.edge_noise.sample2d(nx * WARP_DETAIL_FREQUENCY, nz * WARP_DETAIL_FREQUENCY)
        warp = (base + WARP_DETAIL_WEIGHT * detail) / (1.0 + WARP_DETAIL_WEIGHT)
        return math.floor(warp * self._warp + 0.5)

    def __repr__(self) -> str:
        return (
            f"OrganicBlobEnforcer(cell_size={self.cell_size}, "
            f"irregularity={self.irregularity}, coherence={self.coherence})"
        )
