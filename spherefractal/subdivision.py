"""
Stochastic Koch-style subdivision in the tangent plane.

Starting from an equilateral triangle inscribed in the unit circle, every
edge (v0, v4) is either kept as-is or replaced by four segments of equal
length forming an outward bump:

        v0 ---- v1    v3 ---- v4
                  \\  /
                   v2

The level at which each edge lineage stops subdividing is drawn uniformly
from [min_level, max_level], so the final curve mixes detail from every
level in that range. Expected number of edges stopping at level i is
3 * 4**i / k, where k is the number of levels.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple, TYPE_CHECKING

from .rng import Random

if TYPE_CHECKING:
    from .fractal import FractalSpec


# Equilateral triangle inscribed in the unit circle, counter-clockwise,
# first vertex on the positive x-axis
INITIAL_TRIANGLE = np.array([
    [1.0, 0.0],
    [-0.5, np.sqrt(3) / 2],
    [-0.5, -np.sqrt(3) / 2],
])


class LevelSelector:
    """
    Decides, one level at a time, where an edge lineage stops subdividing.

    At each candidate level the lineage stops with probability
    1 / (number of remaining candidates), which makes the final stopping
    level uniform over [min_level, max_level] using a single forward pass.
    """

    def __init__(self, min_level: int, max_level: int, rng: Random):
        if not 0 <= min_level <= max_level:
            raise ValueError(
                f"Need 0 <= min_level <= max_level, got {min_level}, {max_level}")
        self.min_level = min_level
        self.max_level = max_level
        self.rng = rng

    @property
    def n_levels(self) -> int:
        """Number of candidate stopping levels."""
        return self.max_level - self.min_level + 1

    def should_stop(self, level: int) -> bool:
        """Decide whether a lineage that has reached ``level`` stops there."""
        if level < self.min_level:
            return False
        if level >= self.max_level:
            return True
        return self.rng.one_in(self.max_level - level + 1)

    def select_level(self) -> int:
        """Run a complete lineage and return the level where it stops."""
        level = self.min_level
        while not self.should_stop(level):
            level += 1
        return level


def subdivide_edge(v0: np.ndarray, v4: np.ndarray, edge_fraction: float,
                   offset_fraction: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute the three interior vertices of a Koch bump on edge (v0, v4).

    v1 and v3 lie on the edge at ``edge_fraction`` from each end; v2 sits
    above the edge midpoint at ``offset_fraction`` of the edge length,
    on the right-hand side of the direction v0 -> v4 (outside of a
    counter-clockwise curve).

    Returns:
        (v1, v2, v3)
    """
    v0 = np.asarray(v0, dtype=np.float64)
    v4 = np.asarray(v4, dtype=np.float64)
    direction = v4 - v0
    # Direction rotated 90 degrees counter-clockwise
    normal = np.array([-direction[1], direction[0]])

    v1 = v0 + edge_fraction * direction
    v2 = 0.5 * (v0 + v4) - offset_fraction * normal
    v3 = v4 - edge_fraction * direction
    return v1, v2, v3


@dataclass
class PlaneCurve:
    """
    Closed polygonal curve in the tangent plane.

    Attributes:
        vertices: Nx2 array of vertex coordinates, counter-clockwise
        levels: N array; levels[i] is the subdivision level at which the
            edge from vertex i to vertex i + 1 stopped
    """
    vertices: np.ndarray  # Shape: (N, 2)
    levels: np.ndarray  # Shape: (N,), dtype: int

    @property
    def n_vertices(self) -> int:
        """Number of vertices (equal to the number of edges)."""
        return len(self.vertices)

    def level_counts(self) -> Dict[int, int]:
        """Number of final edges that stopped at each level."""
        levels, counts = np.unique(self.levels, return_counts=True)
        return {int(level): int(count) for level, count in zip(levels, counts)}

    def edge_lengths(self) -> np.ndarray:
        """Length of each edge, edge i running from vertex i to i + 1."""
        return np.linalg.norm(np.roll(self.vertices, -1, axis=0) - self.vertices, axis=1)

    def radii(self) -> np.ndarray:
        """Distance of each vertex from the origin."""
        return np.linalg.norm(self.vertices, axis=1)


def build_plane_curve(spec: 'FractalSpec', rng: Random) -> PlaneCurve:
    """
    Build the fractal boundary in the plane.

    Edges are processed with an explicit stack of (v0, v4, level) triples.
    Sub-edges are pushed in reverse order, so edges are visited depth-first
    in boundary order and random draws happen in that same order. A
    finished edge emits only its first vertex; its last vertex is emitted
    by the edge that follows it.

    Args:
        spec: Finalized fractal parameters
        rng: Random source, advanced by the build

    Returns:
        PlaneCurve with vertices in counter-clockwise order, starting at (1, 0)
    """
    selector = LevelSelector(spec.min_level, spec.max_level, rng)

    vertices = []
    levels = []

    n_corners = len(INITIAL_TRIANGLE)
    stack = [(INITIAL_TRIANGLE[i], INITIAL_TRIANGLE[(i + 1) % n_corners], 0)
             for i in reversed(range(n_corners))]

    while stack:
        v0, v4, level = stack.pop()

        if selector.should_stop(level):
            vertices.append(v0)
            levels.append(level)
            continue

        v1, v2, v3 = subdivide_edge(v0, v4, spec.edge_fraction, spec.offset_fraction)
        stack.extend([
            (v3, v4, level + 1),
            (v2, v3, level + 1),
            (v1, v2, level + 1),
            (v0, v1, level + 1),
        ])

    return PlaneCurve(
        vertices=np.array(vertices, dtype=np.float64).reshape(-1, 2),
        levels=np.array(levels, dtype=np.int64),
    )
