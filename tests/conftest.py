import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from particle import ParticleSystem
from world import World


@pytest.fixture
def world():
    return World(100, 100, seed=1234)


@pytest.fixture
def symmetric_pair():
    """Two equal positive charges mirrored about x = 50."""
    return (
        ParticleSystem()
        .add_particle((40.0, 50.0), 1.0, 5.0)
        .add_particle((60.0, 50.0), 1.0, 5.0)
    )
