"""
Pytest configuration and fixtures for terrasphere tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from terrasphere.config import Config
from terrasphere.state import FieldState, Material, create_initial_state


# Center at the origin with five neighbors on the axes
STAR_POSITIONS = np.array(
    [
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [-1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0],
        [0.0, 0.0, 1.0],
    ],
    dtype=np.float32,
)


def make_field(materials, positions=None, ids=None) -> FieldState:
    """Build a FieldState from a list of Materials."""
    materials = [Material.parse(m) for m in materials]
    n = len(materials)
    if positions is None:
        positions = STAR_POSITIONS[:n]
    if ids is None:
        ids = np.arange(n)
    return FieldState(
        ids=np.asarray(ids),
        positions=np.asarray(positions, dtype=np.float32),
        materials=np.array([m.value for m in materials], dtype=np.int8),
    )


def make_star(center, neighbors) -> FieldState:
    """Center point plus exactly five neighbors (N = 6, so all are counted)."""
    assert len(neighbors) == 5
    return make_field([center, *neighbors])


@pytest.fixture
def default_config() -> Config:
    """Default configuration for tests."""
    return Config(point_count=200)


@pytest.fixture
def small_config() -> Config:
    """Small point field for fast tests."""
    return Config(point_count=60)


@pytest.fixture
def default_state(default_config: Config) -> FieldState:
    """Default initial state for tests."""
    return create_initial_state(default_config)


@pytest.fixture
def mixed_state(default_config: Config) -> FieldState:
    """Initial state with a few grass and water points painted in."""
    state = create_initial_state(default_config)
    for point_id in (0, 50, 120):
        state.set_material(point_id, Material.GRASS)
    for point_id in (10, 11, 12, 100, 101, 180):
        state.set_material(point_id, Material.WATER)
    return state


@pytest.fixture
def field_factory():
    """Factory building a FieldState from materials (and optional positions, ids)."""
    return make_field


@pytest.fixture
def star():
    """Factory building a six-point star around a center point."""
    return make_star
