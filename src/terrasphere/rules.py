"""
Material transition table for terrasphere.

Each material has an ordered list of rules. A rule fires when the count of
one material among a point's nearest neighbors reaches a threshold; the
first rule that fires decides the next material. If none fires the point
keeps its material.

    Dirt:  grass >= 1 -> Grass,  water >= 2 -> Water
    Grass: water >= 2 -> Water,  dirt >= 4  -> Dirt
    Water: dirt >= 3  -> Dirt
"""

from dataclasses import dataclass

import numpy as np

from .neighbors import NeighborTally
from .state import Material


@dataclass(frozen=True)
class Rule:
    """Become `target` when at least `threshold` neighbors hold `counted`."""

    counted: Material
    threshold: int
    target: Material

    def matches(self, tally: NeighborTally) -> bool:
        return tally.count(self.counted) >= self.threshold


TRANSITION_TABLE: dict[Material, tuple[Rule, ...]] = {
    Material.DIRT: (
        Rule(Material.GRASS, 1, Material.GRASS),
        Rule(Material.WATER, 2, Material.WATER),
    ),
    Material.GRASS: (
        Rule(Material.WATER, 2, Material.WATER),
        Rule(Material.DIRT, 4, Material.DIRT),
    ),
    Material.WATER: (
        Rule(Material.DIRT, 3, Material.DIRT),
    ),
}


def next_material(current: Material, tally: NeighborTally) -> Material:
    """
    Evaluate the transition table for a single point.

    Args:
        current: The point's material before the step
        tally: Neighbor material counts from the pre-step snapshot

    Returns:
        The point's material after the step
    """
    for rule in TRANSITION_TABLE[current]:
        if rule.matches(tally):
            return rule.target
    return current


def apply_transitions(materials: np.ndarray, counts: np.ndarray) -> np.ndarray:
    """
    Evaluate the transition table for every point at once.

    Args:
        materials: Material codes [N] before the step
        counts: Neighbor counts [N, 3], columns ordered by Material value

    Returns:
        New material codes [N]; the inputs are not modified
    """
    materials = np.asarray(materials)
    counts = np.asarray(counts)
    if counts.shape != (materials.shape[0], len(Material)):
        raise ValueError(
            f"counts must have shape ({materials.shape[0]}, {len(Material)}), got {counts.shape}"
        )

    result = materials.copy()
    decided = np.zeros(materials.shape, dtype=bool)

    for current, rules in TRANSITION_TABLE.items():
        is_current = materials == current.value
        for rule in rules:
            fires = is_current & ~decided & (counts[:, rule.counted.value] >= rule.threshold)
            result[fires] = rule.target.value
            decided |= fires

    return result
