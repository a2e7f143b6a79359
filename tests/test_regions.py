"""Tests for contiguous region analysis."""

import numpy as np
import pytest

from py_climategrid.core.regions import (
    boundary_edges_off_grid,
    find_regions,
    longest_straight_boundary,
    mean_region_size,
)


class TestFindRegions:
    """Test region labelling."""

    @pytest.fixture
    def grid(self):
        return np.array([
            [0, 0, 1],
            [0, 1, 1],
            [2, 2, 1],
        ])

    def test_regions(self, grid):
        regions = find_regions(grid)

        assert [region.biome_index for region in regions] == [0, 1, 2]
        assert [region.area for region in regions] == [3, 4, 2]
        assert regions[1].cells == {(0, 2), (1, 1), (1, 2), (2, 2)}

    def test_same_biome_split_in_two(self):
        grid = np.array([
            [0, 1, 0],
            [0, 1, 0],
        ])

        regions = find_regions(grid)

        assert len(regions) == 3
        assert [region.biome_index for region in regions] == [0, 1, 0]

    def test_diagonal_is_not_connected(self):
        grid = np.array([
            [0, 1],
            [1, 0],
        ])
        assert len(find_regions(grid)) == 4

    def test_region_center_is_a_member(self):
        grid = np.zeros((5, 5), dtype=int)
        region = find_regions(grid)[0]

        assert region.area == 25
        assert region.center_cell == (2, 2)

    def test_mean_region_size(self, grid):
        assert mean_region_size(grid) == 3.0
        assert mean_region_size(np.ones((4, 4))) == 16.0


class TestBoundaries:
    """Test boundary measurements."""

    def test_longest_straight_boundary(self):
        grid = np.array([
            [0, 0, 1],
            [0, 1, 1],
            [2, 2, 1],
        ])
        assert longest_straight_boundary(grid) == 2

    def test_vertical_seam(self):
        grid = np.array([
            [0, 1],
            [0, 1],
            [0, 1],
        ])
        assert longest_straight_boundary(grid) == 3

    def test_uniform_grid_has_no_boundary(self):
        assert longest_straight_boundary(np.zeros((6, 6), dtype=int)) == 0

    def test_edges_on_cell_lines_are_not_counted(self):
        grid = np.zeros((4, 4), dtype=int)
        grid[:, 2:] = 1
        grid[2:, :2] = 2

        assert boundary_edges_off_grid(grid, cell_size=2) == 0

    def test_edges_inside_cells_are_counted(self):
        grid = np.zeros((4, 4), dtype=int)
        grid[0, 0] = 1

        assert boundary_edges_off_grid(grid, cell_size=2) == 2

    def test_origin_shifts_cell_lines(self):
        grid = np.zeros((4, 4), dtype=int)
        grid[:, 2:] = 1

        assert boundary_edges_off_grid(grid, cell_size=2) == 0
        # Grid starting at x=1: the seam between columns 1 and 2 is x=2|3, inside a cell
        assert boundary_edges_off_grid(grid, cell_size=2, origin=(1, 0)) == 4
