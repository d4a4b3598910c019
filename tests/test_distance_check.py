"""
Tests for the closest-distance result checker.
"""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from spherefractal.distance_check import brute_force_closest, check_distance_results
from spherefractal.fixtures import random_point
from spherefractal.geometry import angle_between
from spherefractal.rng import Random


def make_candidates(n: int, seed: int = 1):
    """Random points with their angular distances from a random target."""
    rng = Random(seed)
    target = random_point(rng)
    return [(float(angle_between(target, random_point(rng))), i) for i in range(n)]


def test_identical_results_pass():
    candidates = make_candidates(100)
    expected = brute_force_closest(candidates, max_size=10, max_distance=4.0)
    assert len(expected) == 10
    assert check_distance_results(expected, list(expected), 10, 4.0, 0.0)


def test_distance_limited_results_pass():
    candidates = make_candidates(100)
    expected = brute_force_closest(candidates, max_size=1000, max_distance=1.0)
    assert all(d < 1.0 for d, _ in expected)
    assert check_distance_results(expected, list(expected), 1000, 1.0, 0.0)


def test_missing_item_fails(capsys):
    candidates = make_candidates(50)
    expected = brute_force_closest(candidates, max_size=1000, max_distance=2.0)
    actual = expected[:3] + expected[4:]

    assert not check_distance_results(expected, actual, 1000, 2.0, 0.0)
    out = capsys.readouterr().out
    assert f"Missing distance = {expected[3][0]}, id = {expected[3][1]}" in out


def test_extra_item_fails(capsys):
    expected = [(0.1, "a"), (0.2, "b")]
    actual = [(0.1, "a"), (0.15, "x"), (0.2, "b")]

    assert not check_distance_results(expected, actual, 10, 0.5, 0.0)
    assert "Extra distance = 0.15, id = x" in capsys.readouterr().out


def test_max_error_tolerates_near_ties():
    """With max_size truncation, items within max_error may be swapped."""
    expected = [(0.10, 1), (0.20, 2), (0.30, 3)]
    actual = [(0.10, 1), (0.20, 2), (0.305, 4)]

    assert check_distance_results(expected, actual, 3, 1.0, 0.01)
    assert not check_distance_results(expected, actual, 3, 1.0, 0.001)


def test_items_near_distance_limit_may_be_missed():
    expected = [(0.1, 1), (0.5 - 1e-16, 2)]
    actual = [(0.1, 1)]
    assert check_distance_results(expected, actual, 10, 0.5, 0.0)


def test_unsorted_and_duplicate_results_fail(capsys):
    expected = [(0.1, 1), (0.2, 2)]
    assert not check_distance_results(expected, [(0.2, 2), (0.1, 1)], 10, 1.0, 0.0)
    assert "not sorted" in capsys.readouterr().out

    assert not check_distance_results(expected, [(0.1, 1), (0.1, 1), (0.2, 2)], 10, 1.0, 0.0)
    assert "duplicates" in capsys.readouterr().out


def test_empty_results():
    assert check_distance_results([], [], 5, 1.0, 0.0)
    assert not check_distance_results([(0.3, 1)], [], 5, 1.0, 0.0)


def test_brute_force_closest_orders_by_distance():
    candidates = [(0.3, "c"), (0.1, "a"), (0.9, "z"), (0.2, "b")]
    assert brute_force_closest(candidates, 2, 1.0) == [(0.1, "a"), (0.2, "b")]
    assert brute_force_closest(candidates, 10, 0.25) == [(0.1, "a"), (0.2, "b")]
