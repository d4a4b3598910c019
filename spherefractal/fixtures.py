"""
Random and regular geometric fixtures for spherical geometry tests.

Every random fixture takes an explicit ``Random`` so that tests are
reproducible from their own seed.
"""

import numpy as np
from typing import List

from .geometry import (
    Cap,
    LatLngRect,
    Loop,
    from_frame,
    get_frame,
    latlng_to_point,
    normalize,
)
from .rng import Random


# Mean radius of the Earth in kilometers (according to NASA)
EARTH_RADIUS_KM = 6371.01


def km_to_angle(km: float) -> float:
    """Convert a distance on the Earth's surface to an angle in radians."""
    return km / EARTH_RADIUS_KM


def meters_to_angle(meters: float) -> float:
    """Convert a distance on the Earth's surface to an angle in radians."""
    return km_to_angle(0.001 * meters)


def area_to_km2(steradians: float) -> float:
    """Convert an area in steradians to square kilometers on the Earth."""
    return steradians * EARTH_RADIUS_KM ** 2


def area_to_meters2(steradians: float) -> float:
    """Convert an area in steradians to square meters on the Earth."""
    return 1e6 * area_to_km2(steradians)


def random_point(rng: Random) -> np.ndarray:
    """
    Random unit vector.

    Drawn uniformly from the cube [-1, 1)^3 and normalized, which is close
    to but not exactly uniform on the sphere.
    """
    # Draw coordinates in a fixed order
    x = rng.uniform_double(-1, 1)
    y = rng.uniform_double(-1, 1)
    z = rng.uniform_double(-1, 1)
    return normalize(np.array([x, y, z]))


def random_frame_at(z: np.ndarray, rng: Random) -> np.ndarray:
    """
    Random right-handed frame whose z-axis is ``z``.

    Returns:
        3x3 matrix with columns (x, y, z)
    """
    z = normalize(z)
    x = normalize(np.cross(z, random_point(rng)))
    y = normalize(np.cross(z, x))
    return np.column_stack([x, y, z])


def random_frame(rng: Random) -> np.ndarray:
    """Random right-handed frame (three orthonormal column vectors)."""
    return random_frame_at(random_point(rng), rng)


def random_cap(min_area: float, max_area: float, rng: Random) -> Cap:
    """
    Cap with a random center whose log(area) is uniform between the logs of
    ``min_area`` and ``max_area`` (in steradians).
    """
    if not 0 < min_area <= max_area <= 4 * np.pi:
        raise ValueError(
            f"Need 0 < min_area <= max_area <= 4*pi, got {min_area}, {max_area}")
    cap_area = max_area * (min_area / max_area) ** rng.rand_double()
    return Cap.from_center_area(random_point(rng), cap_area)


def sample_point_in_cap(cap: Cap, rng: Random) -> np.ndarray:
    """
    Point chosen uniformly (with respect to area) from the given cap.

    The area of a spherical cap is proportional to its height, so a random
    height is drawn first, then a random point on the circle at that height.
    """
    frame = random_frame_at(cap.center, rng)

    h = rng.rand_double() * cap.height
    theta = 2 * np.pi * rng.rand_double()
    r = np.sqrt(h * (2 - h))  # Radius of the circle at height h

    local = np.array([np.cos(theta) * r, np.sin(theta) * r, 1 - h])
    return normalize(from_frame(frame, local))


def sample_point_in_rect(rect: LatLngRect, rng: Random) -> np.ndarray:
    """
    Point chosen uniformly (with respect to area on the sphere) from the
    given latitude/longitude rectangle.
    """
    # Latitude uniform with respect to area
    lat = np.arcsin(rng.uniform_double(np.sin(rect.lat_lo), np.sin(rect.lat_hi)))

    lng = rect.lng_lo + rng.rand_double() * rect.lng_length
    if lng > np.pi:
        lng -= 2 * np.pi
    return latlng_to_point(lat, lng)


def make_regular_points(center: np.ndarray, radius: float,
                        num_vertices: int) -> np.ndarray:
    """
    Vertices of a regular polygon around ``center``.

    All vertices lie on the circle of angular ``radius`` (radians) measured
    along the sphere, counter-clockwise around the center.

    Returns:
        Array of shape (num_vertices, 3)
    """
    if num_vertices < 1:
        raise ValueError(f"num_vertices must be positive, got {num_vertices}")
    frame = get_frame(center)

    angles = 2 * np.pi * np.arange(num_vertices) / num_vertices
    local = np.column_stack([
        np.sin(radius) * np.cos(angles),
        np.sin(radius) * np.sin(angles),
        np.full(num_vertices, np.cos(radius)),
    ])
    return normalize(from_frame(frame, local))


def make_regular_loop(center: np.ndarray, radius: float,
                      num_vertices: int) -> Loop:
    """Regular loop with ``num_vertices`` vertices (see make_regular_points)."""
    return Loop.from_vertices(make_regular_points(center, radius, num_vertices))


def concentric_loops(center: np.ndarray, num_loops: int,
                     num_vertices_per_loop: int) -> List[Loop]:
    """
    Nested regular loops around ``center``, innermost first.

    Loop i has tangent-plane radius 0.005 * (i + 1) / num_loops.
    """
    if num_loops < 1:
        raise ValueError(f"num_loops must be positive, got {num_loops}")
    frame = get_frame(center)
    angles = 2 * np.pi * np.arange(num_vertices_per_loop) / num_vertices_per_loop

    loops = []
    for i in range(num_loops):
        radius = 0.005 * (i + 1) / num_loops
        local = np.column_stack([
            radius * np.cos(angles),
            radius * np.sin(angles),
            np.ones(num_vertices_per_loop),
        ])
        loops.append(Loop.from_vertices(normalize(from_frame(frame, local))))
    return loops
