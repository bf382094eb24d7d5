import numpy as np
import pytest

from gravsnap.data_models import Mass, MassLayout
from gravsnap.layout import MassConfiguration, derive_layout


def test_triangle_layout():
    masses = derive_layout(MassLayout.TRIANGLE, 500, 500, 200)
    assert masses[0] == Mass(250.0, pytest.approx(250.0 - 400.0 / 3.0))
    assert masses[1] == Mass(150.0, pytest.approx(250.0 + 200.0 / 3.0))
    assert masses[2] == Mass(350.0, pytest.approx(250.0 + 200.0 / 3.0))


def test_line_layout():
    masses = derive_layout("line", 400, 300, 100)
    assert masses == (Mass(200.0, 150.0), Mass(150.0, 150.0), Mass(250.0, 150.0))


@pytest.mark.parametrize("kind", [MassLayout.TRIANGLE, MassLayout.LINE])
def test_fixed_layouts_are_pure(kind):
    assert derive_layout(kind, 640, 480, 123) == derive_layout(kind, 640, 480, 123)


def test_oversized_shape_is_accepted():
    masses = derive_layout(MassLayout.TRIANGLE, 100, 100, 600)
    assert masses[0].y < 0
    assert masses[1].x < 0 and masses[2].x > 100


def test_random_layout_requires_generator():
    with pytest.raises(ValueError):
        derive_layout(MassLayout.RANDOM, 100, 100, 50)


def test_random_layout_in_bounds_and_reproducible():
    a = derive_layout(MassLayout.RANDOM, 320, 200, 0, rng=np.random.default_rng(7), count=25)
    b = derive_layout(MassLayout.RANDOM, 320, 200, 0, rng=np.random.default_rng(7), count=25)
    assert a == b
    assert len(a) == 25
    for m in a:
        assert 0 <= m.x < 320
        assert 0 <= m.y < 200


def test_preset_layout_has_no_derivation():
    with pytest.raises(ValueError):
        derive_layout(MassLayout.PRESET, 100, 100, 10)


def test_mass_configuration_positions():
    config = MassConfiguration.derive("line", 400, 300, 100)
    assert config.layout is MassLayout.LINE
    assert len(config) == 3
    np.testing.assert_array_equal(config.positions, [[200, 150], [150, 150], [250, 150]])


def test_mass_configuration_from_preset_scales_fractions():
    config = MassConfiguration.from_preset([(0.25, 0.5), (1.0, 0.0)], 200, 100)
    assert config.layout is MassLayout.PRESET
    assert config.masses == (Mass(50.0, 50.0), Mass(200.0, 0.0))


def test_mass_configuration_needs_masses():
    with pytest.raises(ValueError):
        MassConfiguration(masses=(), layout=MassLayout.PRESET, shape_height=0.0)
