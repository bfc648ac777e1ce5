"""
Point field generation on the unit sphere.

Points are laid out along a spiral: heights step linearly from the north
pole towards the south pole while the azimuth advances by a fixed angle per
point. All arithmetic is single precision so placement is reproducible.
"""

from dataclasses import dataclass

import numpy as np


GOLDEN_ANGLE = 1.618034


@dataclass(frozen=True)
class Point:
    """
    A fixed location on the unit sphere.

    Attributes:
        id: Stable identity, unique within a point set
        position: (x, y, z) coordinate
    """

    id: int
    position: tuple[float, float, float]


def fibonacci_sphere(n: int, golden_angle: float = GOLDEN_ANGLE) -> np.ndarray:
    """
    Compute spiral positions for n points on the unit sphere.

    For index i: y = 1 - (i / n) * 2, radius = sqrt(max(0, 1 - y^2)),
    theta = golden_angle * i, x = cos(theta) * radius, z = sin(theta) * radius.

    Args:
        n: Number of points (>= 0)
        golden_angle: Azimuth increment in radians

    Returns:
        Positions [n, 3] as float32
    """
    if n < 0:
        raise ValueError(f"point count must be >= 0, got {n}")

    i = np.arange(n, dtype=np.float32)
    if n == 0:
        return np.zeros((0, 3), dtype=np.float32)

    y = np.float32(1.0) - (i / np.float32(n)) * np.float32(2.0)
    radius = np.sqrt(np.maximum(np.float32(0.0), np.float32(1.0) - y * y))
    theta = np.float32(golden_angle) * i

    x = np.cos(theta) * radius
    z = np.sin(theta) * radius

    return np.stack([x, y, z], axis=-1).astype(np.float32)


def generate(n: int, golden_angle: float = GOLDEN_ANGLE) -> list[Point]:
    """
    Generate n points on the unit sphere with ids 0..n-1.

    Calling twice with the same arguments yields identical positions.
    """
    positions = fibonacci_sphere(n, golden_angle)
    return [
        Point(id=i, position=(float(x), float(y), float(z)))
        for i, (x, y, z) in enumerate(positions)
    ]
