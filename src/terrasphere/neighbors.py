"""
Nearest-neighbor search over the point field.

Every step each point needs the materials of its k closest other points.
The search is brute force over all pairs: O(N^2) squared distances, with
each point keeping a bounded best-k buffer. Ties at equal distance are
broken by point id (lower id wins), so the result is fully deterministic
and independent of the order pairs are visited in.

Two interchangeable implementations are provided:
- nearest_neighbors_pairwise: visits every unordered pair once and offers
  the shared distance to both sides through a NeighborBuffer
- nearest_neighbors: sorts each distance row with numpy
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .state import MATERIALS, Material

logger = logging.getLogger(__name__)


@dataclass
class NeighborTable:
    """
    Nearest neighbors of every point, nearest first.

    Attributes:
        indices: Row indices of the neighbors [N, K]
        distances: Squared distances to the neighbors [N, K] float32

    K is min(k, N - 1), so it is zero when there are fewer than two points.
    """

    indices: np.ndarray
    distances: np.ndarray

    @property
    def width(self) -> int:
        """Neighbors recorded per point."""
        return int(self.indices.shape[1])


@dataclass(frozen=True)
class NeighborTally:
    """Counts of each material among one point's nearest neighbors."""

    dirt: int = 0
    grass: int = 0
    water: int = 0

    @property
    def total(self) -> int:
        return self.dirt + self.grass + self.water

    def count(self, material: Material) -> int:
        """Count for a single material."""
        return getattr(self, material.name.lower())

    @classmethod
    def from_counts(cls, counts: Sequence[int]) -> "NeighborTally":
        """Build from a row ordered by Material value."""
        return cls(
            dirt=int(counts[Material.DIRT.value]),
            grass=int(counts[Material.GRASS.value]),
            water=int(counts[Material.WATER.value]),
        )

    @classmethod
    def from_materials(cls, materials: Sequence[Material]) -> "NeighborTally":
        """Tally a plain sequence of neighbor materials."""
        return cls(
            dirt=sum(1 for m in materials if m == Material.DIRT),
            grass=sum(1 for m in materials if m == Material.GRASS),
            water=sum(1 for m in materials if m == Material.WATER),
        )


class NeighborBuffer:
    """
    Fixed-capacity buffer keeping the best candidates seen so far.

    Candidates are ranked by (distance, id). The slot holding the current
    worst candidate is tracked so a full buffer only has to compare against
    one entry; it is rescanned only after a replacement.
    """

    __slots__ = ("capacity", "entries", "_worst")

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        # (distance, id, row)
        self.entries: list[tuple[float, int, int]] = []
        self._worst = -1

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def full(self) -> bool:
        return len(self.entries) >= self.capacity

    def worst(self) -> tuple[float, int]:
        """(distance, id) key of the entry that would be evicted next."""
        if not self.entries:
            raise IndexError("buffer is empty")
        distance, point_id, _ = self.entries[self._worst]
        return distance, point_id

    def offer(self, distance: float, point_id: int, row: int) -> bool:
        """
        Offer a candidate; returns True if it was kept.

        While not full every candidate is appended. Once full, a candidate
        replaces the worst entry only if its (distance, id) key is strictly
        smaller.
        """
        if self.capacity == 0:
            return False

        key = (distance, point_id)
        if not self.full:
            self.entries.append((distance, point_id, row))
            if self._worst < 0 or key > self.worst():
                self._worst = len(self.entries) - 1
            return True

        if key >= self.worst():
            return False

        self.entries[self._worst] = (distance, point_id, row)
        self._worst = max(range(len(self.entries)), key=lambda j: self.entries[j][:2])
        return True

    def sorted_entries(self) -> list[tuple[float, int, int]]:
        """Entries nearest first."""
        return sorted(self.entries, key=lambda entry: entry[:2])


def squared_distances(positions: np.ndarray) -> np.ndarray:
    """
    All-pairs squared Euclidean distances.

    The matrix is exactly symmetric and its diagonal is +inf so a point is
    never its own neighbor.

    Args:
        positions: Point coordinates [N, 3]

    Returns:
        Squared distances [N, N] float32
    """
    positions = np.asarray(positions, dtype=np.float32)
    x = positions[:, 0]
    y = positions[:, 1]
    z = positions[:, 2]

    dx = x[:, np.newaxis] - x[np.newaxis, :]
    dy = y[:, np.newaxis] - y[np.newaxis, :]
    dz = z[:, np.newaxis] - z[np.newaxis, :]

    d = dx * dx + dy * dy + dz * dz
    np.fill_diagonal(d, np.inf)
    return d


def _neighbor_width(n: int, k: int) -> int:
    if k < 0:
        raise ValueError(f"neighbor count must be >= 0, got {k}")
    return max(0, min(k, n - 1))


def _empty_table(n: int) -> NeighborTable:
    return NeighborTable(
        indices=np.zeros((n, 0), dtype=np.int64),
        distances=np.zeros((n, 0), dtype=np.float32),
    )


def _check_ids(positions: np.ndarray, ids: np.ndarray) -> None:
    if ids.shape[0] != positions.shape[0]:
        raise ValueError(
            f"ids and positions must have matching lengths, got {ids.shape[0]} and {positions.shape[0]}"
        )


def nearest_neighbors_pairwise(positions: np.ndarray, ids: np.ndarray, k: int = 5) -> NeighborTable:
    """
    Find the k nearest other points by scanning every unordered pair.

    Each pair (a, b) is visited once; the shared squared distance is offered
    to a's buffer as candidate b and to b's buffer as candidate a.

    Args:
        positions: Point coordinates [N, 3]
        ids: Point ids [N], used for tie-breaking
        k: Neighbors per point

    Returns:
        NeighborTable with rows sorted nearest first
    """
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    ids = np.asarray(ids, dtype=np.int64).reshape(-1)
    _check_ids(positions, ids)

    n = positions.shape[0]
    width = _neighbor_width(n, k)
    if width == 0:
        return _empty_table(n)

    logger.debug("Pairwise neighbor scan over %d points (k=%d)", n, width)
    d = squared_distances(positions)
    id_list = [int(point_id) for point_id in ids]

    buffers = [NeighborBuffer(width) for _ in range(n)]
    for a in range(n):
        row = d[a]
        for b in range(a + 1, n):
            distance = float(row[b])
            buffers[a].offer(distance, id_list[b], b)
            buffers[b].offer(distance, id_list[a], a)

    indices = np.zeros((n, width), dtype=np.int64)
    distances = np.zeros((n, width), dtype=np.float32)
    for a, buffer in enumerate(buffers):
        for slot, (distance, _, row) in enumerate(buffer.sorted_entries()):
            indices[a, slot] = row
            distances[a, slot] = distance

    return NeighborTable(indices=indices, distances=distances)


def nearest_neighbors(positions: np.ndarray, ids: np.ndarray, k: int = 5) -> NeighborTable:
    """
    Find the k nearest other points by sorting each distance row.

    Produces the same table as nearest_neighbors_pairwise.

    Args:
        positions: Point coordinates [N, 3]
        ids: Point ids [N], used for tie-breaking
        k: Neighbors per point

    Returns:
        NeighborTable with rows sorted nearest first
    """
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    ids = np.asarray(ids, dtype=np.int64).reshape(-1)
    _check_ids(positions, ids)

    n = positions.shape[0]
    width = _neighbor_width(n, k)
    if width == 0:
        return _empty_table(n)

    logger.debug("Vectorized neighbor search over %d points (k=%d)", n, width)
    d = squared_distances(positions)

    # Sort by distance, then by id among equal distances
    id_grid = np.broadcast_to(ids, (n, n))
    order = np.lexsort((id_grid, d), axis=-1)

    indices = order[:, :width].astype(np.int64)
    distances = np.take_along_axis(d, indices, axis=1)

    return NeighborTable(indices=indices, distances=distances)


def tally(table: NeighborTable, materials: np.ndarray) -> np.ndarray:
    """
    Count neighbor materials for every point.

    Args:
        table: Nearest-neighbor table
        materials: Material codes [N] of the snapshot the table was built from

    Returns:
        Counts [N, 3] int64, columns ordered by Material value
    """
    materials = np.asarray(materials)
    neighbor_materials = materials[table.indices]
    return np.stack(
        [(neighbor_materials == m.value).sum(axis=1) for m in MATERIALS],
        axis=-1,
    ).astype(np.int64)
