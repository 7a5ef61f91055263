import numpy as np
import pytest

from constants import BOUNDARY_CELL, EMPTY_CELL, IMAGE_OFFSETS, PARTICLE_CELL
from field import PotentialGrid, classify_boundaries, potential_grid, sample_field
from forces import pairwise_potential
from particle import ParticleSystem
from world import World

E, B = EMPTY_CELL, BOUNDARY_CELL


def test_lower_magnitude_side_is_marked():
    grid = np.zeros((3, 3))
    grid[1, 1] = 2.0
    grid[1, 2] = -1.0
    cells = classify_boundaries(grid)
    assert cells[1, 1] == EMPTY_CELL
    assert cells[1, 2] == BOUNDARY_CELL
    # Zero has no sign, so its neighbours are never crossings.
    assert np.count_nonzero(cells == BOUNDARY_CELL) == 1


def test_equal_magnitudes_mark_neither_side():
    cells = classify_boundaries(np.array([[1.0, -1.0]]))
    np.testing.assert_array_equal(cells, [[E, E]])


def test_neighbours_wrap_around_the_edges():
    cells = classify_boundaries(np.array([[5.0, -1.0, -1.0, -0.5]]))
    np.testing.assert_array_equal(cells, [[E, B, E, B]])

    column = classify_boundaries(np.array([[-0.5], [-1.0], [-1.0], [5.0]]))
    np.testing.assert_array_equal(column[:, 0], [B, E, B, E])


def test_classify_fills_provided_buffer():
    out = np.full((2, 2), 7, dtype=np.uint8)
    result = classify_boundaries(PotentialGrid(np.ones((2, 2))), out)
    assert result is out
    np.testing.assert_array_equal(out, np.full((2, 2), E))


def test_potential_grid_wrapped_reads():
    values = np.arange(12, dtype=np.float64).reshape(3, 4)
    grid = PotentialGrid(values)
    assert grid.shape == (3, 4)
    assert grid.at(-1, -1) == values[2, 3]
    assert grid.at(3, 4) == values[0, 0]
    assert grid.at(1, 2) == values[1, 2]
    assert grid.at(-7, 9) == values[2, 1]


def test_potential_grid_samples_cell_centers_with_images():
    world = World(8, 6)
    system = (
        ParticleSystem()
        .add_particle((2.0, 3.0), 1.0, 1.5)
        .add_particle((6.5, 0.5), 1.0, -2.0)
    )
    grid = potential_grid(world, system)
    assert grid.shape == (6, 8)

    row, col = 4, 1
    sample = (col + 0.5, row + 0.5)
    expected = 0.0
    for pos, charge in zip(system.positions, system.charges):
        expected += pairwise_potential(sample, pos, charge)
    for ox, oy in IMAGE_OFFSETS:
        for pos, charge in zip(system.positions, system.charges):
            image = (pos[0] + ox * world.width, pos[1] + oy * world.height)
            expected += pairwise_potential(sample, image, charge)
    assert grid.at(row, col) == pytest.approx(expected, rel=1e-12)


def test_like_charges_have_no_boundary():
    world = World(20, 20, seed=0)
    system = ParticleSystem()
    for _ in range(4):
        system.add_particle(world.random_point(), 1.0, 3.0)
    cells = sample_field(world, system)
    assert cells.shape == (20, 20)
    assert np.all(cells == EMPTY_CELL)


def test_opposite_charges_draw_a_contour():
    world = World(40, 20)
    system = (
        ParticleSystem()
        .add_particle((10.3, 10.0), 1.0, 5.0)
        .add_particle((27.0, 10.0), 1.0, -5.0)
    )
    cells = sample_field(world, system)
    assert np.count_nonzero(cells == BOUNDARY_CELL) > 0
    assert set(np.unique(cells)) <= {EMPTY_CELL, BOUNDARY_CELL}


def test_sample_field_is_idempotent():
    world = World(30, 15, seed=11)
    system = ParticleSystem.populate(world, 8, 2.0)
    first = sample_field(world, system).copy()
    second = sample_field(world, system)
    np.testing.assert_array_equal(first, second)
    assert first.tobytes() == second.tobytes()


def test_sample_field_reuses_buffer_and_checks_shape():
    world = World(10, 5)
    system = ParticleSystem().add_particle((2.0, 2.0), 1.0, 1.0)
    out = np.empty((5, 10), dtype=np.uint8)
    assert sample_field(world, system, out=out) is out
    with pytest.raises(ValueError):
        sample_field(world, system, out=np.empty((10, 5), dtype=np.uint8))
    with pytest.raises(ValueError):
        sample_field(world, system, out=np.empty((5, 10), dtype=np.float64))


def test_particle_markers():
    world = World(10, 5)
    system = (
        ParticleSystem()
        .add_particle((3.7, 1.2), 1.0, 1.0)
        .add_particle((9.99, 4.5), 1.0, -1.0)
    )
    cells = sample_field(world, system, mark_particles=True)
    assert cells[1, 3] == PARTICLE_CELL
    assert cells[4, 9] == PARTICLE_CELL
    assert np.count_nonzero(cells == PARTICLE_CELL) == 2
