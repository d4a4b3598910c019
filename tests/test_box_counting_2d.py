#!/usr/bin/env python3
"""
Tests for 2D box counting fractal dimension calculation.

Includes tests with generated boundaries of known dimension.
"""

import numpy as np
import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from spherefractal.box_counting_2d import (
    BoxCounter,
    compute_fractal_dimension_2d,
    sample_segments,
)
from spherefractal.fractal import DEFAULT_DIMENSION, FractalSpec
from spherefractal.rng import Random
from spherefractal.subdivision import INITIAL_TRIANGLE, build_plane_curve


def create_fractal_curve(level: int, dimension: float) -> np.ndarray:
    """Create a single-level fractal boundary of the given dimension."""
    spec = FractalSpec(max_level=level, min_level=level, dimension=dimension)
    return build_plane_curve(spec, Random()).vertices


def test_sample_segments():
    """Samples cover every segment with the requested spacing."""
    print("Testing segment sampling...")

    square = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    points = sample_segments(square, 0.1)
    assert len(points) == 40
    gaps = np.linalg.norm(np.diff(np.vstack([points, points[:1]]), axis=0), axis=1)
    assert gaps.max() <= 0.1 + 1e-12

    open_points = sample_segments(square, 0.5, closed=False)
    assert np.array_equal(open_points[0], square[0])
    assert np.array_equal(open_points[-1], square[-1])
    assert len(open_points) == 7

    print("  PASSED!")


def test_box_count_line():
    """A horizontal unit segment crosses 1/δ boxes."""
    counter = BoxCounter(np.array([[0.0, 0.0], [1.0, 0.0]]), closed=False)
    for delta in [0.5, 0.1, 0.01]:
        result = counter.count_boxes(delta)
        assert result.n_boxes == round(1 / delta)
        assert result.grid_dims[1] == 1


def test_box_counter_validation():
    with pytest.raises(ValueError):
        BoxCounter(np.zeros((5, 3)))
    with pytest.raises(ValueError):
        BoxCounter(np.zeros((1, 2)))


def test_triangle_dimension():
    """Test that the initial triangle has dimension ≈ 1.0."""
    print("\nTesting triangle (expected D ≈ 1.0)...")

    result = compute_fractal_dimension_2d(
        INITIAL_TRIANGLE,
        initial_delta=0.25,
        delta_factor=1.5,
        num_steps=8,
    )

    print(f"  Fractal dimension: {result.dimension:.4f}")
    print(f"  R²: {result.r_squared:.6f}")

    assert 0.9 < result.dimension < 1.1, \
        f"Triangle dimension {result.dimension} not close to 1.0"
    print("  PASSED!")


def test_koch_dimension():
    """Test that the Koch boundary has dimension ≈ log(4)/log(3)."""
    print("\nTesting Koch curve (expected D ≈ 1.26)...")

    vertices = create_fractal_curve(level=6, dimension=DEFAULT_DIMENSION)
    print(f"  Vertices: {len(vertices)}")

    result = compute_fractal_dimension_2d(
        vertices,
        initial_delta=0.2,
        delta_factor=1.5,
        num_steps=8,
        verbose=True,
    )

    print(f"  Fractal dimension: {result.dimension:.4f}")
    print(f"  R²: {result.r_squared:.6f}")

    assert abs(result.dimension - DEFAULT_DIMENSION) < 0.1, \
        f"Koch dimension {result.dimension} not close to {DEFAULT_DIMENSION:.4f}"
    assert result.dimension > 1.1
    print("  PASSED!")


def test_insufficient_scales():
    with pytest.raises(ValueError, match="Insufficient scale range"):
        compute_fractal_dimension_2d(INITIAL_TRIANGLE, initial_delta=0.1,
                                     min_delta=0.05, delta_factor=2.0)


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("2D Box Counting Tests")
    print("=" * 60)

    test_sample_segments()
    test_box_count_line()
    test_box_counter_validation()
    test_triangle_dimension()
    test_koch_dimension()
    test_insufficient_scales()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
