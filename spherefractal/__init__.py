"""
Sphere Fractal - Synthetic fixtures for testing spherical geometry code.

This package generates reproducible test geometry on the unit sphere:
random points, frames and caps, regular and concentric loops, and
Koch-style fractal loops with a tunable fractal dimension, plus a checker
for closest-distance query results.
"""

from .rng import Random
from .geometry import (
    Cap,
    LatLngRect,
    Loop,
    DegenerateGeometryError,
    get_frame,
    from_frame,
    to_frame,
    angle_between,
    latlng_to_point,
    point_to_latlng,
)
from .fractal import (
    FractalConfig,
    FractalSpec,
    DEFAULT_DIMENSION,
    MAX_LEVEL,
    level_for_approx_edges,
)
from .subdivision import (
    LevelSelector,
    PlaneCurve,
    build_plane_curve,
    subdivide_edge,
)
from .projection import project_to_sphere
from .fixtures import (
    EARTH_RADIUS_KM,
    km_to_angle,
    meters_to_angle,
    area_to_km2,
    area_to_meters2,
    random_point,
    random_frame,
    random_frame_at,
    random_cap,
    sample_point_in_cap,
    sample_point_in_rect,
    make_regular_points,
    make_regular_loop,
    concentric_loops,
)
from .distance_check import check_distance_results
from .box_counting_2d import (
    compute_fractal_dimension_2d,
    FractalDimensionResult,
)

__version__ = "0.1.0"
__all__ = [
    # Random numbers
    "Random",
    # Geometry
    "Cap",
    "LatLngRect",
    "Loop",
    "DegenerateGeometryError",
    "get_frame",
    "from_frame",
    "to_frame",
    "angle_between",
    "latlng_to_point",
    "point_to_latlng",
    # Fractals
    "FractalConfig",
    "FractalSpec",
    "DEFAULT_DIMENSION",
    "MAX_LEVEL",
    "level_for_approx_edges",
    "LevelSelector",
    "PlaneCurve",
    "build_plane_curve",
    "subdivide_edge",
    "project_to_sphere",
    # Fixtures
    "EARTH_RADIUS_KM",
    "km_to_angle",
    "meters_to_angle",
    "area_to_km2",
    "area_to_meters2",
    "random_point",
    "random_frame",
    "random_frame_at",
    "random_cap",
    "sample_point_in_cap",
    "sample_point_in_rect",
    "make_regular_points",
    "make_regular_loop",
    "concentric_loops",
    # Result checking
    "check_distance_results",
    # Box counting
    "compute_fractal_dimension_2d",
    "FractalDimensionResult",
]
