"""
Verification of "closest items" query results.

Compares a result set computed by brute force (considering every candidate)
with one computed by a spatial data structure. Items are (distance, id)
pairs with distances in radians.
"""

from typing import Hashable, List, Sequence, Tuple


Result = Tuple[float, Hashable]

# Distance measurements used for pruning cells are not conservative, so a
# few items right at the distance limit may be missed
MAX_PRUNING_ERROR = 1e-15


def _check_result_set(x: Sequence[Result], y: Sequence[Result], max_size: int,
                      max_distance: float, max_error: float,
                      max_pruning_error: float, label: str) -> bool:
    """
    Check that result set ``x`` contains every item of ``y`` it should.

    Also checks that ``x`` is sorted by distance and free of duplicates.
    """
    result = True

    distances = [d for d, _ in x]
    if any(a > b for a, b in zip(distances, distances[1:])):
        print(f"{label}: result set is not sorted by distance")
        result = False

    if len(set(x)) != len(x):
        print(f"{label}: result set contains duplicates")
        result = False

    # X should contain every item of Y closer than "limit"
    limit = 0.0
    if len(x) < max_size:
        # Not truncated by max_size: X holds everything up to max_distance
        limit = max_distance - max_pruning_error
    elif x:
        # Only the closest max_size items, to within max_error
        limit = x[-1][0] - max_error - max_pruning_error

    for item in y:
        distance, item_id = item
        if distance < limit and list(x).count(item) != 1:
            print(f"{label} distance = {distance}, id = {item_id}")
            result = False
    return result


def check_distance_results(expected: Sequence[Result], actual: Sequence[Result],
                           max_size: int, max_distance: float,
                           max_error: float) -> bool:
    """
    Compare brute-force ``expected`` results with ``actual`` results.

    Args:
        expected: (distance, id) pairs found by brute force, sorted
        actual: (distance, id) pairs from the structure under test, sorted
        max_size: Maximum number of results requested
        max_distance: Distance limit of the query
        max_error: Allowed error when choosing which items are closest

    Returns:
        True if neither set is missing an item the other requires. Both
        directions are always checked so every mismatch is reported.
    """
    missing_ok = _check_result_set(actual, expected, max_size, max_distance,
                                   max_error, MAX_PRUNING_ERROR, "Missing")
    extra_ok = _check_result_set(expected, actual, max_size, max_distance,
                                 max_error, 0.0, "Extra")
    return missing_ok and extra_ok


def brute_force_closest(candidates: List[Result], max_size: int,
                        max_distance: float) -> List[Result]:
    """
    Reference result set: the ``max_size`` closest candidates strictly
    within ``max_distance``, sorted by distance.
    """
    within = sorted((item for item in candidates if item[0] < max_distance),
                    key=lambda item: item[0])
    return within[:max_size]
