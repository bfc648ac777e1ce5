"""
Point state representation and initialization for terrasphere.

The state consists of:
- Point ids (stable identity for each point)
- Point positions on the unit sphere (never mutated)
- One material per point (Dirt, Grass or Water)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .config import Config
from .points import Point, fibonacci_sphere

logger = logging.getLogger(__name__)


class Material(Enum):
    """Discrete state held by every point."""

    DIRT = 0
    GRASS = 1
    WATER = 2

    def cycled(self) -> "Material":
        """Next material in the click cycle Dirt -> Grass -> Water -> Dirt."""
        return _CYCLE[self]

    @classmethod
    def parse(cls, value: Union["Material", int, str]) -> "Material":
        """Accept a Material, its integer code or its name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown material name: {value!r}") from None
        return cls(int(value))


_CYCLE = {
    Material.DIRT: Material.GRASS,
    Material.GRASS: Material.WATER,
    Material.WATER: Material.DIRT,
}

MATERIALS = tuple(Material)


@dataclass(frozen=True)
class PointState:
    """A point paired with its current material."""

    point: Point
    material: Material


@dataclass(eq=False)
class FieldState:
    """
    Complete state of the point field.

    All arrays share the leading dimension N, which never changes.
    Row order is the order points were generated in; ids are looked up
    through an internal index so callers can address points by identity.

    Attributes:
        ids: Point identities [N] int64
        positions: Point coordinates [N, 3] float32, read-only
        materials: Material codes [N] int8 (see Material values)
    """

    ids: np.ndarray
    positions: np.ndarray
    materials: np.ndarray
    _index: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.ids = np.asarray(self.ids, dtype=np.int64).reshape(-1)
        self.positions = np.array(self.positions, dtype=np.float32).reshape(-1, 3)
        self.materials = np.array(self.materials, dtype=np.int8).reshape(-1)

        n = self.ids.shape[0]
        if self.positions.shape[0] != n or self.materials.shape[0] != n:
            raise ValueError(
                f"ids, positions and materials must have matching lengths, got "
                f"{n}, {self.positions.shape[0]}, {self.materials.shape[0]}"
            )

        valid_codes = [m.value for m in Material]
        if n and not np.isin(self.materials, valid_codes).all():
            raise ValueError(f"materials must be codes in {valid_codes}")

        self._index = {int(point_id): row for row, point_id in enumerate(self.ids)}
        if len(self._index) != n:
            raise ValueError("point ids must be unique")

        self.positions.setflags(write=False)

    @property
    def n_points(self) -> int:
        """Number of points (N)."""
        return int(self.ids.shape[0])

    def row_of(self, point_id: int) -> int:
        """Array row holding the given point id."""
        try:
            return self._index[int(point_id)]
        except KeyError:
            raise KeyError(f"unknown point id: {point_id}") from None

    def material_at(self, point_id: int) -> Material:
        """Current material of a point."""
        return Material(int(self.materials[self.row_of(point_id)]))

    def set_material(self, point_id: int, material: Union[Material, int, str]) -> None:
        """Overwrite the material of a single point in place."""
        self.materials[self.row_of(point_id)] = Material.parse(material).value

    def cycle_material(self, point_id: int) -> Material:
        """Advance a point to the next material in the click cycle."""
        new_material = self.material_at(point_id).cycled()
        self.set_material(point_id, new_material)
        return new_material

    def material_counts(self) -> dict[Material, int]:
        """Number of points holding each material."""
        counts = np.bincount(self.materials.astype(np.int64), minlength=len(MATERIALS))
        return {m: int(counts[m.value]) for m in MATERIALS}

    def with_materials(self, materials: np.ndarray) -> "FieldState":
        """New state sharing ids and positions, with the given materials."""
        return FieldState(ids=self.ids, positions=self.positions, materials=materials)

    def clone(self) -> "FieldState":
        """Create a deep copy of the state."""
        return FieldState(
            ids=self.ids.copy(),
            positions=self.positions.copy(),
            materials=self.materials.copy(),
        )

    def points(self) -> list[Point]:
        """Immutable Point records in row order."""
        return [
            Point(id=int(point_id), position=(float(x), float(y), float(z)))
            for point_id, (x, y, z) in zip(self.ids, self.positions)
        ]

    def point_states(self) -> list[PointState]:
        """Snapshot as (Point, Material) pairs in row order."""
        return [
            PointState(point=point, material=Material(int(code)))
            for point, code in zip(self.points(), self.materials)
        ]

    @classmethod
    def from_point_states(cls, states: Sequence[PointState]) -> "FieldState":
        """Build an array-backed state from (Point, Material) pairs."""
        return cls(
            ids=np.array([s.point.id for s in states], dtype=np.int64),
            positions=np.array([s.point.position for s in states], dtype=np.float32).reshape(-1, 3),
            materials=np.array([s.material.value for s in states], dtype=np.int8),
        )


def create_initial_state(config: Config) -> FieldState:
    """
    Create initial state for simulation.

    Args:
        config: Simulation configuration

    Returns:
        FieldState with spiral positions and every material Dirt
    """
    positions = fibonacci_sphere(config.point_count, config.golden_angle)
    logger.debug("Generated %d points on the sphere", config.point_count)
    return create_uniform_state(positions, Material.DIRT)


def create_uniform_state(
    positions: np.ndarray,
    material: Union[Material, int, str] = Material.DIRT,
    ids: Optional[Iterable[int]] = None,
) -> FieldState:
    """
    Create a state where every point holds the same material (useful for testing).

    Args:
        positions: Point coordinates [N, 3]
        material: Material assigned to all points
        ids: Optional point ids (defaults to 0..N-1)

    Returns:
        FieldState with uniform materials
    """
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    n = positions.shape[0]
    point_ids = np.arange(n, dtype=np.int64) if ids is None else np.fromiter(ids, dtype=np.int64)
    return FieldState(
        ids=point_ids,
        positions=positions,
        materials=np.full(n, Material.parse(material).value, dtype=np.int8),
    )


def reset_materials(state: FieldState) -> FieldState:
    """
    Return a copy of the state with every material set back to Dirt.

    Ids and positions are carried over untouched.
    """
    return state.with_materials(np.full(state.n_points, Material.DIRT.value, dtype=np.int8))
