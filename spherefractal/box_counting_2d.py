"""
2D Box Counting for the fractal dimension of planar curves.

Used to check generated boundaries against the dimension they were built
with. For a curve in the plane, the number of boxes of size δ that the
curve passes through satisfies N(δ) ~ δ^(-D).

For smooth curves: D = 1.0
For fractal curves: 1.0 < D < 2.0
"""

import numpy as np
from typing import Tuple, List, Optional
from dataclasses import dataclass
from scipy import stats


@dataclass
class BoxCountResult:
    """Result of a single box count at a specific scale."""
    delta: float  # Box size
    n_boxes: int  # Number of boxes intersecting the curve
    grid_dims: Tuple[int, int]  # Grid dimensions (nx, ny)


@dataclass
class FractalDimensionResult:
    """Result of fractal dimension calculation."""
    dimension: float  # Estimated fractal dimension
    r_squared: float  # R² of log-log regression
    std_error: float  # Standard error of dimension estimate
    intercept: float  # Intercept of log-log regression
    deltas: List[float]  # Box sizes used
    n_boxes: List[int]  # Box counts at each scale
    log_inv_delta: np.ndarray  # log(1/δ) values
    log_n_boxes: np.ndarray  # log(N) values


def sample_segments(vertices: np.ndarray, spacing: float,
                    closed: bool = True) -> np.ndarray:
    """
    Sample points along a polyline with at most ``spacing`` between them.

    Args:
        vertices: Nx2 array of polyline vertices
        spacing: Maximum distance between consecutive samples
        closed: Whether the last vertex connects back to the first

    Returns:
        Mx2 array of sample points, including every vertex
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if closed:
        starts = vertices
        ends = np.roll(vertices, -1, axis=0)
    else:
        starts = vertices[:-1]
        ends = vertices[1:]

    directions = ends - starts
    lengths = np.linalg.norm(directions, axis=1)
    n_samples = np.maximum(np.ceil(lengths / spacing).astype(np.int64), 1)

    # Sample k of segment i sits at t = k / n_samples[i], k < n_samples[i]
    seg_idx = np.repeat(np.arange(len(starts)), n_samples)
    first = np.repeat(np.cumsum(n_samples) - n_samples, n_samples)
    t = (np.arange(len(seg_idx)) - first) / n_samples[seg_idx]

    points = starts[seg_idx] + t[:, None] * directions[seg_idx]
    if not closed:
        points = np.vstack([points, vertices[-1:]])
    return points


class BoxCounter:
    """
    Counts grid boxes crossed by a planar polyline.

    Segments are rasterized by dense sampling (spacing δ/4), which can
    only miss boxes the curve clips at a corner.
    """

    def __init__(self, vertices: np.ndarray, closed: bool = True):
        """
        Initialize counter with a polyline.

        Args:
            vertices: Nx2 array of vertex coordinates
            closed: Whether the curve is a closed loop
        """
        self.vertices = np.asarray(vertices, dtype=np.float64)
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 2:
            raise ValueError(f"Expected an Nx2 vertex array, got shape {self.vertices.shape}")
        if len(self.vertices) < 2:
            raise ValueError("Need at least 2 vertices")
        self.closed = closed
        self.bbox_min = self.vertices.min(axis=0)
        self.bbox_max = self.vertices.max(axis=0)

    @property
    def characteristic_length(self) -> float:
        """Largest side of the bounding box."""
        return float(np.max(self.bbox_max - self.bbox_min))

    def count_boxes(self, delta: float) -> BoxCountResult:
        """
        Count boxes of size delta that intersect the curve.

        Args:
            delta: Box side length

        Returns:
            BoxCountResult with count and grid information
        """
        extent = self.bbox_max - self.bbox_min
        nx = max(1, int(np.ceil(extent[0] / delta)))
        ny = max(1, int(np.ceil(extent[1] / delta)))

        points = sample_segments(self.vertices, delta / 4, closed=self.closed)
        cells = np.floor((points - self.bbox_min) / delta).astype(np.int64)
        # Points on the max edge of the bounding box belong to the last cell
        cells[:, 0] = np.clip(cells[:, 0], 0, nx - 1)
        cells[:, 1] = np.clip(cells[:, 1], 0, ny - 1)

        n_boxes = len(np.unique(cells, axis=0))
        return BoxCountResult(delta=delta, n_boxes=n_boxes, grid_dims=(nx, ny))


def compute_fractal_dimension_2d(vertices: np.ndarray,
                                 initial_delta: Optional[float] = None,
                                 delta_factor: float = 1.5,
                                 num_steps: int = 15,
                                 min_delta: Optional[float] = None,
                                 max_delta: Optional[float] = None,
                                 closed: bool = True,
                                 verbose: bool = False) -> FractalDimensionResult:
    """
    Compute fractal dimension of a planar curve using box counting.

    The fractal dimension D is estimated from the slope of log(N) vs log(1/δ),
    where N(δ) is the number of boxes of size δ that intersect the curve.

    Args:
        vertices: Nx2 array of curve vertices
        initial_delta: Starting box size (default: 1/4 of characteristic length)
        delta_factor: Factor to reduce delta by each step (default: 1.5)
        num_steps: Number of scales to analyze (default: 15)
        min_delta: Minimum box size (default: characteristic_length / 200)
        max_delta: Maximum box size (default: characteristic_length)
        closed: Whether the curve is a closed loop
        verbose: Print the count at each scale

    Returns:
        FractalDimensionResult with dimension estimate and statistics
    """
    counter = BoxCounter(vertices, closed=closed)
    char_len = counter.characteristic_length

    if initial_delta is None:
        initial_delta = char_len / 4

    if min_delta is None:
        min_delta = char_len / 200

    if max_delta is None:
        max_delta = char_len

    # Generate delta sequence (geometric progression)
    deltas = []
    delta = initial_delta
    for _ in range(num_steps):
        if delta < min_delta:
            break
        if delta > max_delta:
            delta = delta / delta_factor
            continue
        deltas.append(delta)
        delta = delta / delta_factor

    if len(deltas) < 3:
        raise ValueError(f"Insufficient scale range: only {len(deltas)} valid delta values")

    n_boxes = []
    for delta in deltas:
        result = counter.count_boxes(delta)
        n_boxes.append(result.n_boxes)
        if verbose:
            print(f"  δ = {delta:.6f}: {result.n_boxes} boxes "
                  f"(grid: {result.grid_dims[0]}×{result.grid_dims[1]})")

    deltas = np.array(deltas)
    n_boxes = np.array(n_boxes)

    # Linear regression in log-log space
    log_inv_delta = np.log(1.0 / deltas)
    log_n_boxes = np.log(n_boxes)

    slope, intercept, r_value, p_value, std_err = stats.linregress(
        log_inv_delta, log_n_boxes
    )

    return FractalDimensionResult(
        dimension=slope,
        r_squared=r_value ** 2,
        std_error=std_err,
        intercept=intercept,
        deltas=deltas.tolist(),
        n_boxes=n_boxes.tolist(),
        log_inv_delta=log_inv_delta,
        log_n_boxes=log_n_boxes,
    )
