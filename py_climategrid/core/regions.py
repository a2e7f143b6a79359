"""
Contiguous biome region analysis.

Groups 4-connected cells of the same biome in a sampled grid into regions.
Used to tune blob settings and to check them: mean region size against the
configured minimum, and the longest run of perfectly straight boundary.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Set, Tuple

import numpy as np
import structlog

logger = structlog.get_logger()


@dataclass
class BiomeRegion:
    """Represents a contiguous biome region."""

    id: int
    biome_index: int
    cells: Set[Tuple[int, int]]
    area: int
    center_cell: Tuple[int, int]


def find_regions(grid: np.ndarray) -> List[BiomeRegion]:
    """
    Label contiguous regions in a biome grid.

    Args:
        grid: 2D integer array of biome indices, shape (rows, cols)

    Returns:
        Regions in scan order
    """
    grid = np.asarray(grid)
    rows, cols = grid.shape
    labels = np.full(grid.shape, -1, dtype=np.int64)
    regions = []

    for row in range(rows):
        for col in range(cols):
            if labels[row, col] != -1:
                continue

            region_id = len(regions)
            biome = grid[row, col]
            cells = _flood(grid, labels, row, col, region_id)

            regions.append(
                BiomeRegion(
                    id=region_id,
                    biome_index=int(biome),
                    cells=cells,
                    area=len(cells),
                    center_cell=_region_center(cells),
                )
            )

    logger.debug("Biome regions found", count=len(regions), cells=int(grid.size))
    return regions


def _flood(grid, labels, start_row, start_col, region_id) -> Set[Tuple[int, int]]:
    rows, cols = grid.shape
    biome = grid[start_row, start_col]
    cells = set()
    queue = deque([(start_row, start_col)])
    labels[start_row, start_col] = region_id

    while queue:
        row, col = queue.popleft()
        cells.add((row, col))

        for n_row, n_col in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
            if (
                0 <= n_row < rows
                and 0 <= n_col < cols
                and labels[n_row, n_col] == -1
                and grid[n_row, n_col] == biome
            ):
                labels[n_row, n_col] = region_id
                queue.append((n_row, n_col))

    return cells


def _region_center(cells: Set[Tuple[int, int]]) -> Tuple[int, int]:
    """Cell closest to the region centroid."""
    points = np.array(sorted(cells))
    centroid = points.mean(axis=0)
    closest = np.argmin(((points - centroid) ** 2).sum(axis=1))
    return int(points[closest][0]), int(points[closest][1])


def mean_region_size(grid: np.ndarray) -> float:
    """Average region area in cells."""
    regions = find_regions(grid)
    if not regions:
        return 0.0
    return float(np.mean([region.area for region in regions]))


def longest_straight_boundary(grid: np.ndarray) -> int:
    """
    Longest run of boundary edges along a single grid line.

    A vertical boundary edge sits between (row, col) and (row, col + 1) when
    the two differ; consecutive rows with such an edge in the same column form
    one straight run. Horizontal edges are measured the same way.
    """
    grid = np.asarray(grid)
    vertical = grid[:, 1:] != grid[:, :-1]
    horizontal = grid[1:, :] != grid[:-1, :]
    # Vertical runs go down a column, horizontal runs along a row
    return max(_longest_run(vertical.T), _longest_run(horizontal))


def _longest_run(lines: np.ndarray) -> int:
    best = 0
    for line in lines:
        run = 0
        for flag in line:
            run = run + 1 if flag else 0
            best = max(best, run)
    return best


def boundary_edges_off_grid(grid: np.ndarray, cell_size: int, origin: Tuple[int, int] = (0, 0)) -> int:
    """
    Count boundary edges that do not lie on blob cell grid lines.

    Args:
        grid: Biome grid, grid[r, c] sampled at (origin_x + c, origin_z + r)
        cell_size: Blob cell side
        origin: (x, z) of grid[0, 0]

    Returns:
        Number of differing neighbour pairs inside a single cell
    """
    grid = np.asarray(grid)
    origin_x, origin_z = origin
    xs = np.arange(grid.shape[1]) + origin_x
    zs = np.arange(grid.shape[0]) + origin_z

    same_cell_x = (xs[1:] // cell_size) == (xs[:-1] // cell_size)
    same_cell_z = (zs[1:] // cell_size) == (zs[:-1] // cell_size)

    vertical = (grid[:, 1:] != grid[:, :-1]) & same_cell_x[np.newaxis, :]
    horizontal = (grid[1:, :] != grid[:-1, :]) & same_cell_z[:, np.newaxis]
    return int(vertical.sum() + horizontal.sum())
