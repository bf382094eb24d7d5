from gravsnap.classifier import classify, classify_nearest
from gravsnap.data_models import Particle
from gravsnap.layout import triangle_layout
from gravsnap.probe import ProbeSession

MASSES = triangle_layout(300, 300, 120)


def test_probe_is_idle_until_placed():
    session = ProbeSession(MASSES)
    session.step(10)
    assert not session.active
    assert session.steps == 0
    assert session.position == (0.0, 0.0)


def test_probe_follows_particle_physics():
    session = ProbeSession(MASSES, gravity=30.0, dt=0.1, softening=5.0)
    session.reset(40, 260)
    session.step(25)

    p = Particle(40.0, 260.0)
    for _ in range(25):
        p.advance(0.1, MASSES, gravity=30.0, softening=5.0)
    assert session.particle == p
    assert session.steps == 25


def test_reset_restarts_at_rest():
    session = ProbeSession(MASSES)
    session.reset(10, 10)
    session.step(5)
    session.reset(200, 50)
    assert session.particle == Particle(200.0, 50.0)
    assert session.steps == 0


def test_probe_color_matches_classifier():
    session = ProbeSession(MASSES)
    session.reset(150, 120)
    session.step(3)
    assert session.color() == classify(*session.position, MASSES)

    nearest = ProbeSession(MASSES, classifier="nearest")
    nearest.reset(150, 120)
    assert nearest.color() == classify_nearest(150.0, 120.0, MASSES)
