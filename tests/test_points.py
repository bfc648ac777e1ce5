"""
Tests for point field generation.
"""

import math

import numpy as np
import pytest

from terrasphere.points import GOLDEN_ANGLE, Point, fibonacci_sphere, generate


class TestFibonacciSphere:
    """Tests for the spiral position generator."""

    def test_shape_and_dtype(self):
        positions = fibonacci_sphere(100)

        assert positions.shape == (100, 3)
        assert positions.dtype == np.float32

    def test_deterministic(self):
        """Same count yields bit-identical positions."""
        first = fibonacci_sphere(2500)
        second = fibonacci_sphere(2500)

        assert np.array_equal(first, second)

    def test_heights_use_n_as_denominator(self):
        """y steps from +1 by 2/N, so the south pole is never reached."""
        n = 10
        positions = fibonacci_sphere(n)

        expected = [1.0 - (i / n) * 2.0 for i in range(n)]
        assert positions[:, 1].tolist() == pytest.approx(expected, abs=1e-6)
        assert positions[-1, 1] > -1.0

    def test_azimuth_advances_by_golden_angle(self):
        """Each point's azimuth is GOLDEN_ANGLE * i."""
        positions = fibonacci_sphere(50)

        for i in (1, 7, 23, 49):
            x, y, z = positions[i]
            radius = math.sqrt(max(0.0, 1.0 - float(y) ** 2))
            theta = GOLDEN_ANGLE * i
            assert float(x) == pytest.approx(math.cos(theta) * radius, abs=1e-4)
            assert float(z) == pytest.approx(math.sin(theta) * radius, abs=1e-4)

    def test_points_on_unit_sphere(self):
        positions = fibonacci_sphere(500)
        norms = np.linalg.norm(positions, axis=1)

        assert norms == pytest.approx(np.ones(500), abs=1e-5)

    def test_heights_strictly_decreasing(self):
        positions = fibonacci_sphere(300)
        assert np.all(np.diff(positions[:, 1]) < 0)

    def test_empty(self):
        assert fibonacci_sphere(0).shape == (0, 3)

    def test_single_point_at_north_pole(self):
        positions = fibonacci_sphere(1)
        assert positions.tolist() == [[0.0, 1.0, 0.0]]

    def test_negative_count(self):
        with pytest.raises(ValueError):
            fibonacci_sphere(-3)

    def test_golden_angle_literal(self):
        """The increment is the literal 1.618034, not 2.39996."""
        assert GOLDEN_ANGLE == 1.618034

    def test_custom_golden_angle_changes_layout(self):
        assert not np.array_equal(fibonacci_sphere(20), fibonacci_sphere(20, golden_angle=2.39996))


class TestGenerate:
    """Tests for Point record generation."""

    def test_count_and_ids(self):
        points = generate(25)

        assert len(points) == 25
        assert [p.id for p in points] == list(range(25))

    def test_matches_positions(self):
        points = generate(30)
        positions = fibonacci_sphere(30)

        for point, row in zip(points, positions):
            assert point.position == tuple(float(v) for v in row)

    def test_repeatable(self):
        assert generate(40) == generate(40)

    def test_points_are_immutable(self):
        point = generate(1)[0]
        with pytest.raises(AttributeError):
            point.position = (0.0, 0.0, 0.0)

    def test_empty(self):
        assert generate(0) == []

    def test_point_type(self):
        assert all(isinstance(p, Point) for p in generate(3))
