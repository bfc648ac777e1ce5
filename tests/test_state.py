"""
Tests for terrasphere point state.
"""

import numpy as np
import pytest

from terrasphere.points import generate
from terrasphere.state import (
    FieldState,
    Material,
    PointState,
    create_initial_state,
    create_uniform_state,
    reset_materials,
)


class TestMaterial:
    """Tests for the Material enum."""

    def test_click_cycle(self):
        assert Material.DIRT.cycled() == Material.GRASS
        assert Material.GRASS.cycled() == Material.WATER
        assert Material.WATER.cycled() == Material.DIRT

    def test_parse(self):
        assert Material.parse("grass") == Material.GRASS
        assert Material.parse(" WATER ") == Material.WATER
        assert Material.parse(0) == Material.DIRT
        assert Material.parse(Material.WATER) == Material.WATER

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Material.parse("lava")
        with pytest.raises(ValueError):
            Material.parse(7)


class TestFieldState:
    """Tests for FieldState."""

    def test_n_points(self, default_state):
        assert default_state.n_points == 200

    def test_positions_read_only(self, default_state):
        """Positions cannot be written through the state."""
        with pytest.raises(ValueError):
            default_state.positions[0, 0] = 5.0

    def test_set_and_read_material(self, default_state):
        default_state.set_material(7, "water")

        assert default_state.material_at(7) == Material.WATER
        assert default_state.material_at(8) == Material.DIRT

    def test_cycle_material(self, default_state):
        assert default_state.cycle_material(3) == Material.GRASS
        assert default_state.cycle_material(3) == Material.WATER
        assert default_state.cycle_material(3) == Material.DIRT

    def test_unknown_id(self, default_state):
        with pytest.raises(KeyError):
            default_state.material_at(10_000)
        with pytest.raises(KeyError):
            default_state.set_material(-1, Material.GRASS)

    def test_lookup_by_id_not_row(self):
        """Ids need not match row numbers."""
        state = FieldState(
            ids=np.array([30, 10, 20]),
            positions=np.zeros((3, 3)),
            materials=np.array([0, 1, 2]),
        )

        assert state.material_at(10) == Material.GRASS
        assert state.material_at(20) == Material.WATER

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="matching lengths"):
            FieldState(ids=np.arange(3), positions=np.zeros((2, 3)), materials=np.zeros(3))

    def test_duplicate_ids(self):
        with pytest.raises(ValueError, match="unique"):
            FieldState(ids=np.array([1, 1]), positions=np.zeros((2, 3)), materials=np.zeros(2))

    def test_invalid_material_code(self):
        with pytest.raises(ValueError, match="materials"):
            FieldState(ids=np.arange(2), positions=np.zeros((2, 3)), materials=np.array([0, 5]))

    def test_clone(self, default_state):
        """Clone creates independent copy."""
        cloned = default_state.clone()
        cloned.set_material(0, Material.WATER)

        assert default_state.material_at(0) == Material.DIRT
        assert np.array_equal(cloned.positions, default_state.positions)

    def test_material_counts(self, mixed_state):
        counts = mixed_state.material_counts()

        assert counts == {Material.DIRT: 191, Material.GRASS: 3, Material.WATER: 6}

    def test_point_states_roundtrip(self, mixed_state):
        """Converting to (Point, Material) pairs and back loses nothing."""
        restored = FieldState.from_point_states(mixed_state.point_states())

        assert np.array_equal(restored.ids, mixed_state.ids)
        assert np.array_equal(restored.positions, mixed_state.positions)
        assert np.array_equal(restored.materials, mixed_state.materials)

    def test_points_match_generator(self, default_state):
        assert default_state.points() == generate(200)

    def test_point_states(self, mixed_state):
        states = mixed_state.point_states()

        assert all(isinstance(s, PointState) for s in states)
        assert states[0].material == Material.GRASS
        assert states[10].material == Material.WATER


class TestCreateInitialState:
    """Tests for state initialization."""

    def test_all_dirt(self, default_config):
        state = create_initial_state(default_config)

        assert state.n_points == default_config.point_count
        assert np.all(state.materials == Material.DIRT.value)

    def test_ids(self, default_config):
        state = create_initial_state(default_config)
        assert state.ids.tolist() == list(range(default_config.point_count))

    def test_reproducibility(self, default_config):
        state1 = create_initial_state(default_config)
        state2 = create_initial_state(default_config)

        assert np.array_equal(state1.positions, state2.positions)

    def test_uniform_state(self):
        state = create_uniform_state(np.zeros((4, 3)), Material.WATER, ids=[5, 6, 7, 8])

        assert state.ids.tolist() == [5, 6, 7, 8]
        assert np.all(state.materials == Material.WATER.value)


class TestResetMaterials:
    """Tests for material reset."""

    def test_all_dirt_positions_kept(self, mixed_state):
        reset = reset_materials(mixed_state)

        assert np.all(reset.materials == Material.DIRT.value)
        assert np.array_equal(reset.positions, mixed_state.positions)
        assert np.array_equal(reset.ids, mixed_state.ids)

    def test_input_untouched(self, mixed_state):
        reset_materials(mixed_state)
        assert mixed_state.material_at(0) == Material.GRASS

    def test_idempotent(self, mixed_state):
        once = reset_materials(mixed_state)
        twice = reset_materials(once)

        assert np.array_equal(once.materials, twice.materials)
