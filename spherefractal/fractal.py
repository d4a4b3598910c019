"""
Koch-style fractal loops on the unit sphere.

A ``FractalConfig`` is a mutable draft whose setters validate eagerly;
``finalize()`` freezes it into a ``FractalSpec`` that builds loops. Both
expose the conservative radius bounds of the generated boundary.

The fractal dimension d in [1, 2) controls the shape of each bump: every
subdivision replaces an edge by 4 segments of relative length
4**(-1/d), so d = 1 keeps edges straight, log(4)/log(3) gives the classic
Koch snowflake, and d -> 2 approaches a space-filling curve. The west coast
of Britain is roughly d = 1.25; values between 1.02 and 1.50 are
reasonable coastlines.

Example:
    >>> frame = np.eye(3)
    >>> config = FractalConfig()
    >>> config.set_level_for_approx_max_edges(3 * 4**5)
    >>> config.set_min_level(3)
    >>> loop = config.make_loop(frame, np.radians(10), Random(7))
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .geometry import Loop
from .projection import project_to_sphere
from .rng import Random
from .subdivision import PlaneCurve, build_plane_curve


DEFAULT_DIMENSION = np.log(4) / np.log(3)

# Beyond this level the 3 * 4**level edges no longer fit in memory
MAX_LEVEL = 20

# Below this dimension the first-step segment v1-v2 dips inside the
# incircle of the initial triangle, so the incircle radius is the best
# simple lower bound. Equal to -log(4) / log((2 + cbrt(2) - cbrt(4)) / 6).
MIN_DIMENSION_FOR_MIN_RADIUS_AT_LEVEL_1 = 1.0852230903040407


def compute_fractions(dimension: float) -> Tuple[float, float]:
    """
    Derive the subdivision constants for a fractal dimension.

    Each edge of length 1 becomes four segments of length
    e = 4**(-1/d): v1 and v3 on the edge at distance e from either end,
    and the apex v2 above the midpoint at height h. Closing the bump
    requires |v1 v2| = e, i.e. (1/2 - e)**2 + h**2 = e**2, which gives
    h = sqrt(e - 1/4).

    Returns:
        (edge_fraction, offset_fraction)
    """
    edge_fraction = 4.0 ** (-1.0 / dimension)
    offset_fraction = np.sqrt(max(edge_fraction - 0.25, 0.0))
    return float(edge_fraction), float(offset_fraction)


def _check_dimension(dimension: float) -> None:
    if not 1.0 <= dimension < 2.0:
        raise ValueError(f"Fractal dimension must be in [1.0, 2.0), got {dimension}")


def _check_max_level(max_level: int) -> None:
    if max_level < 0:
        raise ValueError(f"max_level must be non-negative, got {max_level}")
    if max_level > MAX_LEVEL:
        raise ValueError(
            f"max_level {max_level} exceeds {MAX_LEVEL} "
            f"({3 * 4**max_level:,} edges)")


def level_for_approx_edges(num_edges: float) -> int:
    """
    Subdivision level whose edge count 3 * 4**level is nearest to num_edges.

    Rounds log4(num_edges / 3) half up and clamps at 0. Rounding up from
    level L happens exactly when num_edges >= 6 * 4**L, so the comparison
    is done on edge counts rather than on a floating point logarithm.
    """
    if num_edges <= 0:
        raise ValueError(f"Edge count must be positive, got {num_edges}")
    level = 0
    while 3 * 4 ** (level + 1) <= 2 * num_edges:
        level += 1
    return level


def radius_factors(min_level: int, dimension: float, edge_fraction: float,
                   offset_fraction: float) -> Tuple[float, float]:
    """
    Conservative bounds on boundary distance relative to the nominal radius.

    Distances are measured in the tangent plane at the fractal's center.
    The minimum is attained at the on-edge vertices v1/v3 of the first
    subdivision, unless the first level may be skipped or the dimension is
    small enough for the segment v1-v2 to come closer; the incircle of the
    initial triangle (1/2) bounds both cases. The maximum is attained at an
    original vertex or at a first-level apex.

    Returns:
        (min_radius_factor, max_radius_factor)
    """
    if min_level == 0 or dimension < MIN_DIMENSION_FOR_MIN_RADIUS_AT_LEVEL_1:
        min_factor = 0.5
    else:
        min_factor = float(np.sqrt(1 + 3 * edge_fraction * (edge_fraction - 1)))
    max_factor = max(1.0, float(offset_fraction * np.sqrt(3) + 0.5))
    return min_factor, max_factor


@dataclass(frozen=True)
class FractalSpec:
    """
    Immutable fractal parameters.

    Reusable: every ``make_loop`` call draws fresh randomness from the
    supplied generator.
    """
    max_level: int
    min_level: int
    dimension: float = DEFAULT_DIMENSION
    edge_fraction: float = 0.0  # Derived from dimension
    offset_fraction: float = 0.0  # Derived from dimension

    def __post_init__(self):
        _check_max_level(self.max_level)
        if not 0 <= self.min_level <= self.max_level:
            raise ValueError(
                f"Need 0 <= min_level <= max_level, got {self.min_level}, {self.max_level}")
        _check_dimension(self.dimension)
        edge_fraction, offset_fraction = compute_fractions(self.dimension)
        object.__setattr__(self, "edge_fraction", edge_fraction)
        object.__setattr__(self, "offset_fraction", offset_fraction)

    @property
    def n_levels(self) -> int:
        """Number of distinct stopping levels."""
        return self.max_level - self.min_level + 1

    @property
    def expected_edges(self) -> float:
        """Expected number of edges in a generated loop."""
        levels = np.arange(self.min_level, self.max_level + 1)
        return float(3 * np.sum(4.0 ** levels) / self.n_levels)

    def min_radius_factor(self) -> float:
        """
        Lower bound on Rmin / R, where R is the nominal radius and Rmin the
        minimum distance from the boundary to the center. Use it to inscribe
        another shape inside the fractal without intersection.
        """
        return radius_factors(self.min_level, self.dimension,
                              self.edge_fraction, self.offset_fraction)[0]

    def max_radius_factor(self) -> float:
        """
        Upper bound on Rmax / R, where Rmax is the maximum distance from the
        boundary to the center. Use it to inscribe the fractal inside
        another shape without intersection.
        """
        return radius_factors(self.min_level, self.dimension,
                              self.edge_fraction, self.offset_fraction)[1]

    def plane_curve(self, rng: Random) -> PlaneCurve:
        """Build the boundary in the tangent plane (unit nominal radius)."""
        return build_plane_curve(self, rng)

    def make_loop(self, frame: np.ndarray, nominal_radius: float,
                  rng: Random) -> Loop:
        """
        Build a fractal loop centered on the z-axis of ``frame``.

        The curve is drawn in the tangent plane at the center, which avoids
        self-intersections, and then projected onto the sphere. The first
        vertex lies in the direction of the frame's x-axis at angular
        distance ``nominal_radius`` from the center.

        Args:
            frame: 3x3 orthonormal right-handed matrix with columns (x, y, z)
            nominal_radius: Radius in radians, in (0, pi/2)
            rng: Random source

        Returns:
            Loop with at least 3 * 4**min_level vertices
        """
        curve = self.plane_curve(rng)
        return project_to_sphere(curve.vertices, frame, nominal_radius)


class FractalConfig:
    """
    Mutable draft of fractal parameters.

    ``set_max_level`` (or ``set_level_for_approx_max_edges``) must be called
    before ``finalize`` or ``make_loop``. Every setter validates its argument
    immediately.
    """

    def __init__(self):
        self._max_level = -1
        self._min_level_arg = -1
        self._dimension = DEFAULT_DIMENSION
        self._edge_fraction, self._offset_fraction = compute_fractions(self._dimension)

    @property
    def max_level(self) -> int:
        """Maximum subdivision level, -1 until set."""
        return self._max_level

    @property
    def min_level(self) -> int:
        """
        Effective minimum subdivision level.

        Equals the value passed to ``set_min_level`` when that value is
        valid for the current max level, and ``max_level`` otherwise.
        """
        if 0 <= self._min_level_arg <= self._max_level:
            return self._min_level_arg
        return self._max_level

    @property
    def min_level_arg(self) -> int:
        """Value passed to ``set_min_level`` (-1 tracks max_level)."""
        return self._min_level_arg

    @property
    def fractal_dimension(self) -> float:
        return self._dimension

    @property
    def edge_fraction(self) -> float:
        """Length of each sub-segment relative to its parent edge."""
        return self._edge_fraction

    @property
    def offset_fraction(self) -> float:
        """Height of the bump apex relative to its parent edge."""
        return self._offset_fraction

    def set_max_level(self, max_level: int) -> None:
        """Set the maximum subdivision level, 0 <= max_level <= MAX_LEVEL."""
        _check_max_level(max_level)
        self._max_level = int(max_level)

    def set_min_level(self, min_level: int) -> None:
        """
        Set the minimum subdivision level.

        The default of -1 makes the min and max levels equal. A min level of
        0 is allowed but gives a significant chance that none of the three
        original edges is subdivided at all.
        """
        if min_level < -1:
            raise ValueError(f"min_level must be >= -1, got {min_level}")
        if min_level > self._max_level:
            raise ValueError(
                f"min_level {min_level} exceeds max_level {self._max_level}")
        self._min_level_arg = int(min_level)

    def set_level_for_approx_min_edges(self, min_edges: float) -> None:
        """Set min_level so that 3 * 4**min_level is close to ``min_edges``."""
        self.set_min_level(level_for_approx_edges(min_edges))

    def set_level_for_approx_max_edges(self, max_edges: float) -> None:
        """Set max_level so that 3 * 4**max_level is close to ``max_edges``."""
        self.set_max_level(level_for_approx_edges(max_edges))

    def set_fractal_dimension(self, dimension: float) -> None:
        """Set the fractal dimension, 1.0 <= dimension < 2.0."""
        _check_dimension(dimension)
        self._dimension = float(dimension)
        self._edge_fraction, self._offset_fraction = compute_fractions(self._dimension)

    def min_radius_factor(self) -> float:
        """See ``FractalSpec.min_radius_factor``."""
        return radius_factors(self.min_level, self._dimension,
                              self._edge_fraction, self._offset_fraction)[0]

    def max_radius_factor(self) -> float:
        """See ``FractalSpec.max_radius_factor``."""
        return radius_factors(self.min_level, self._dimension,
                              self._edge_fraction, self._offset_fraction)[1]

    def finalize(self) -> FractalSpec:
        """Freeze the current parameters into a ``FractalSpec``."""
        if self._max_level < 0:
            raise ValueError(
                "max_level must be set (set_max_level or "
                "set_level_for_approx_max_edges) before building a fractal")
        return FractalSpec(
            max_level=self._max_level,
            min_level=self.min_level,
            dimension=self._dimension,
        )

    def make_loop(self, frame: np.ndarray, nominal_radius: float,
                  rng: Random) -> Loop:
        """Shortcut for ``finalize().make_loop(frame, nominal_radius, rng)``."""
        return self.finalize().make_loop(frame, nominal_radius, rng)
