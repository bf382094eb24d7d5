import numpy as np
import pytest

from gravsnap.classifier import classify_field, classify_nearest_field
from gravsnap.data_models import MassLayout, Particle
from gravsnap.grid import ParticleGrid, render_frame
from gravsnap.layout import MassConfiguration
from gravsnap.physics import FieldPhysics

PHYSICS = FieldPhysics(gravity=30.0, dt=0.1, softening=5.0)


def _triangle(width, height, shape_height):
    return MassConfiguration.derive(MassLayout.TRIANGLE, width, height, shape_height)


def test_initial_grid_is_at_rest_on_pixels():
    grid = ParticleGrid(4, 3)
    assert grid.shape == (3, 4)
    assert grid.iterations == 0
    assert grid.particle(2, 1) == Particle(2.0, 1.0)
    assert grid.particle(3, 2) == Particle(3.0, 2.0)
    assert not grid.xv.any() and not grid.ya.any()
    assert grid.nbytes == 6 * 3 * 4 * 8


@pytest.mark.parametrize("cell", [(4, 0), (0, 3), (-1, 0)])
def test_cell_access_is_bounds_checked(cell):
    grid = ParticleGrid(4, 3)
    with pytest.raises(IndexError):
        grid.particle(*cell)
    with pytest.raises(IndexError):
        grid.set_particle(*cell, Particle())


def test_bad_grid_size():
    with pytest.raises(ValueError):
        ParticleGrid(0, 10)


def test_progressive_frames_equal_one_long_render():
    masses = _triangle(40, 30, 20).positions
    progressive = ParticleGrid(40, 30)
    direct = ParticleGrid(40, 30)
    buf_a = progressive.new_buffer()
    buf_b = direct.new_buffer()

    render_frame(progressive, masses, 25, buf_a, physics=PHYSICS)
    render_frame(progressive, masses, 7, buf_a, physics=PHYSICS)
    render_frame(direct, masses, 32, buf_b, physics=PHYSICS)

    assert progressive.iterations == direct.iterations == 32
    np.testing.assert_array_equal(progressive.snapshot(), direct.snapshot())
    np.testing.assert_array_equal(buf_a, buf_b)


def test_grid_cell_matches_scalar_particle():
    config = _triangle(30, 30, 12)
    grid = ParticleGrid(30, 30)
    render_frame(grid, config.positions, 40, grid.new_buffer(), physics=PHYSICS)

    for col, row in [(0, 0), (15, 11), (29, 29), (7, 22)]:
        p = Particle(float(col), float(row))
        for _ in range(40):
            p.advance(0.1, config.masses, gravity=30.0, softening=5.0)
        cell = grid.particle(col, row)
        assert cell.x == pytest.approx(p.x)
        assert cell.y == pytest.approx(p.y)
        assert cell.xv == pytest.approx(p.xv)
        assert cell.yv == pytest.approx(p.yv)


def test_particles_starting_on_masses_keep_their_color():
    config = _triangle(500, 500, 200)
    grid = ParticleGrid(500, 500)
    out = render_frame(grid, config.positions, 100, grid.new_buffer(), physics=PHYSICS)

    assert grid.iterations == 100
    for channel, mass in enumerate(config.masses):
        col, row = int(round(mass.x)), int(round(mass.y))
        assert out[row, col, channel] == 255


def test_wrong_buffer_shape_is_rejected_before_stepping():
    grid = ParticleGrid(8, 6)
    before = grid.snapshot()
    with pytest.raises(ValueError):
        render_frame(grid, _triangle(8, 6, 4).positions, 5, np.zeros((8, 6, 3), dtype=np.uint8))
    assert grid.iterations == 0
    np.testing.assert_array_equal(grid.snapshot(), before)


def test_zero_increment_only_classifies():
    config = _triangle(10, 10, 6)
    grid = ParticleGrid(10, 10)
    out = render_frame(grid, config.positions, 0, grid.new_buffer())
    assert grid.iterations == 0
    np.testing.assert_array_equal(grid.x, np.indices((10, 10))[1])
    np.testing.assert_array_equal(out, classify_field(grid.x, grid.y, config.positions))


def test_alternate_classifier():
    config = _triangle(12, 12, 6)
    grid = ParticleGrid(12, 12)
    out = render_frame(grid, config.positions, 3, grid.new_buffer(), classifier=classify_nearest_field)
    np.testing.assert_array_equal(out, classify_nearest_field(grid.x, grid.y, config.positions))
