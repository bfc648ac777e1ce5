"""
Metrics and analysis utilities for terrasphere.

Provides material census and step-to-step change statistics.
"""

from typing import Optional

import numpy as np

from .state import MATERIALS, FieldState


def material_counts(state: FieldState) -> dict[str, int]:
    """
    Count points holding each material.

    Args:
        state: Field state

    Returns:
        Dictionary with dirt, grass, water counts
    """
    return {m.name.lower(): c for m, c in state.material_counts().items()}


def material_fractions(state: FieldState) -> dict[str, float]:
    """
    Fraction of points holding each material.

    Args:
        state: Field state

    Returns:
        Dictionary with dirt, grass, water fractions (all 0.0 for an empty field)
    """
    counts = material_counts(state)
    n = state.n_points
    return {name: (c / n if n else 0.0) for name, c in counts.items()}


def _check_same_points(before: FieldState, after: FieldState) -> None:
    if before.n_points != after.n_points or not np.array_equal(before.ids, after.ids):
        raise ValueError("states must describe the same points in the same order")


def transition_counts(before: FieldState, after: FieldState) -> np.ndarray:
    """
    Count material moves between two states of the same field.

    Args:
        before: Earlier state
        after: Later state

    Returns:
        Matrix [3, 3] where entry (i, j) counts points that went from
        material value i to material value j
    """
    _check_same_points(before, after)
    n_materials = len(MATERIALS)
    flat = before.materials.astype(np.int64) * n_materials + after.materials.astype(np.int64)
    return np.bincount(flat, minlength=n_materials * n_materials).reshape(n_materials, n_materials)


def changed_points(before: FieldState, after: FieldState) -> list[int]:
    """Ids of points whose material differs between two states."""
    _check_same_points(before, after)
    return [int(i) for i in before.ids[before.materials != after.materials]]


def change_statistics(before: FieldState, after: FieldState) -> dict:
    """
    Summarize what changed between two states.

    Returns:
        Dictionary with number of changed points and named from->to moves
    """
    matrix = transition_counts(before, after)
    moves = {
        f"{src.name.lower()}->{dst.name.lower()}": int(matrix[src.value, dst.value])
        for src in MATERIALS
        for dst in MATERIALS
        if src != dst
    }
    return {
        "changed": int(matrix.sum() - np.trace(matrix)),
        "moves": moves,
    }


def compute_all_metrics(state: FieldState, previous: Optional[FieldState] = None) -> dict:
    """
    Compute all available metrics.

    Args:
        state: Field state
        previous: Optional earlier state of the same field for change statistics

    Returns:
        Comprehensive dictionary of all metrics
    """
    metrics = {
        "points": state.n_points,
        "materials": {
            "counts": material_counts(state),
            "fractions": material_fractions(state),
        },
    }
    if previous is not None:
        metrics["changes"] = change_statistics(previous, state)
    return metrics


def print_metrics_summary(metrics: dict) -> None:
    """
    Print formatted metrics summary.

    Args:
        metrics: Output from compute_all_metrics
    """
    print("\n=== terrasphere Metrics Summary ===\n")

    print(f"Points: {metrics['points']}")

    print("\nMaterials:")
    for name, count in metrics['materials']['counts'].items():
        fraction = metrics['materials']['fractions'][name]
        print(f"  {name}: {count} ({fraction:.1%})")

    if "changes" in metrics:
        changes = metrics['changes']
        print("\nChanges:")
        print(f"  Changed points: {changes['changed']}")
        for move, count in changes['moves'].items():
            if count:
                print(f"  {move}: {count}")

    print()
