# field.py
"""
Samples the potential field and rasterizes its zero-crossing contour.

The potential is evaluated at every cell center of the world (direct
particles plus their 8 periodic images). A cell is then marked as a
boundary cell when it sits on the low-magnitude side of a sign change
with one of its four axis neighbours. This is the dominant cost per frame:
O(9 * N * width * height).
"""
import logging
import numpy as np
from typing import Optional
from numba import jit

from constants import IMAGE_OFFSETS, EMPTY_CELL, BOUNDARY_CELL, PARTICLE_CELL
from forces import potential_component
from particle import ParticleSystem
from world import World

# --- Data Contracts ---
#
# potential_grid(world: World, particles: ParticleSystem) -> PotentialGrid
#   - Outputs: PotentialGrid wrapping a (height, width) float64 array.
#
# classify_boundaries(potential, out=None) -> np.ndarray
#   - Inputs: a PotentialGrid or a 2D float array, fully populated.
#   - Outputs: (height, width) uint8 array of EMPTY_CELL / BOUNDARY_CELL.
#
# sample_field(world, particles, out=None, mark_particles=False) -> np.ndarray
#   - Outputs: the CellGrid for the current particle state.
#   - Invariants: deterministic; repeated calls on an unchanged system
#     return identical grids.


@jit(nopython=True)
def _potential_grid_numba(positions, charges, width, height):
    particle_count = positions.shape[0]
    grid = np.zeros((height, width), dtype=np.float64)

    for i in range(height):
        for j in range(width):
            sample_x = j + 0.5
            sample_y = i + 0.5
            total = 0.0
            for p in range(particle_count):
                total += potential_component(
                    sample_x, sample_y, positions[p, 0], positions[p, 1], charges[p]
                )
            # The shift is applied to the particle, not to the sample point.
            for k in range(IMAGE_OFFSETS.shape[0]):
                offset_x = IMAGE_OFFSETS[k, 0] * width
                offset_y = IMAGE_OFFSETS[k, 1] * height
                for p in range(particle_count):
                    total += potential_component(
                        sample_x, sample_y,
                        positions[p, 0] + offset_x, positions[p, 1] + offset_y, charges[p]
                    )
            grid[i, j] = total

    return grid


@jit(nopython=True)
def _wrapped_at(grid, row, col):
    """Toroidal read shared by the classifier and PotentialGrid.at."""
    height, width = grid.shape
    return grid[(row + height) % height, (col + width) % width]


@jit(nopython=True)
def _is_crossing(value, neighbour):
    return value * neighbour < 0.0 and abs(value) < abs(neighbour)


@jit(nopython=True)
def _classify_numba(grid, cells):
    height, width = grid.shape
    for i in range(height):
        for j in range(width):
            value = grid[i, j]
            if (
                _is_crossing(value, _wrapped_at(grid, i - 1, j))
                or _is_crossing(value, _wrapped_at(grid, i + 1, j))
                or _is_crossing(value, _wrapped_at(grid, i, j - 1))
                or _is_crossing(value, _wrapped_at(grid, i, j + 1))
            ):
                cells[i, j] = BOUNDARY_CELL
            else:
                cells[i, j] = EMPTY_CELL


class PotentialGrid:
    """
    Dense (height, width) buffer of potential samples with toroidal reads.
    """
    def __init__(self, values: np.ndarray):
        self.values = np.ascontiguousarray(values, dtype=np.float64)
        if self.values.ndim != 2:
            raise ValueError(f"Potential grid must be 2D, got shape {self.values.shape}.")

    @property
    def shape(self):
        return self.values.shape

    def at(self, row: int, col: int) -> float:
        """Reads a cell, wrapping row and column around the domain."""
        return float(_wrapped_at(self.values, row, col))


def potential_grid(world: World, particles: ParticleSystem) -> PotentialGrid:
    """Samples the potential at every cell center."""
    values = _potential_grid_numba(
        particles.positions, particles.charges, world.width, world.height
    )
    return PotentialGrid(values)


def _check_buffer(out: Optional[np.ndarray], shape) -> np.ndarray:
    if out is None:
        return np.empty(shape, dtype=np.uint8)
    if out.shape != shape or out.dtype != np.uint8:
        msg = (
            f"Cell buffer must be a uint8 array of shape {shape}, "
            f"got {out.dtype} array of shape {out.shape}."
        )
        logging.error(msg)
        raise ValueError(msg)
    return out


def classify_boundaries(potential, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Marks the lower-magnitude side of every sign change as a boundary cell.

    Equal magnitudes on both sides mark neither cell.
    """
    values = potential.values if isinstance(potential, PotentialGrid) else np.asarray(potential, dtype=np.float64)
    cells = _check_buffer(out, values.shape)
    _classify_numba(values, cells)
    return cells


def mark_particle_cells(cells: np.ndarray, particles: ParticleSystem) -> np.ndarray:
    """Overwrites the cell under each particle with PARTICLE_CELL."""
    height, width = cells.shape
    rows = particles.positions[:, 1].astype(np.int64) % height
    cols = particles.positions[:, 0].astype(np.int64) % width
    cells[rows, cols] = PARTICLE_CELL
    return cells


def sample_field(
    world: World,
    particles: ParticleSystem,
    out: Optional[np.ndarray] = None,
    mark_particles: bool = False,
) -> np.ndarray:
    """
    Computes the CellGrid for the current particle state.

    Args:
        world (World): The periodic domain; sets the grid size.
        particles (ParticleSystem): Read-only particle state.
        out (np.ndarray): Optional (height, width) uint8 buffer to fill.
        mark_particles (bool): Draw PARTICLE_CELL at particle positions.

    Returns:
        np.ndarray: The filled cell buffer.
    """
    cells = _check_buffer(out, world.shape)
    # The grid is complete before classification reads any neighbour.
    potential = potential_grid(world, particles)
    classify_boundaries(potential, cells)
    if mark_particles:
        mark_particle_cells(cells, particles)
    return cells
