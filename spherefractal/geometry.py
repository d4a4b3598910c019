"""
Geometric primitives on the unit sphere.

Points are unit-length numpy vectors of shape (3,), angles are floats in
radians, and a coordinate frame is a 3x3 matrix whose columns are the
orthonormal x, y and z axes.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple


class DegenerateGeometryError(ValueError):
    """Raised when a construction yields a shape with too few vertices."""


def normalize(v: np.ndarray) -> np.ndarray:
    """Scale a vector (or each row of an Nx3 array) to unit length."""
    v = np.asarray(v, dtype=np.float64)
    if v.ndim == 1:
        return v / np.linalg.norm(v)
    return v / np.linalg.norm(v, axis=1, keepdims=True)


def angle_between(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Angle in radians between vector ``a`` and vector(s) ``b``.

    Uses atan2(|a x b|, a . b), which stays accurate for tiny and
    near-antipodal angles where acos loses precision.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    cross = np.cross(a, b)
    return np.arctan2(np.linalg.norm(cross, axis=-1), np.sum(a * b, axis=-1))


def ortho(a: np.ndarray) -> np.ndarray:
    """Return a deterministic unit vector orthogonal to ``a``."""
    a = np.asarray(a, dtype=np.float64)
    k = (int(np.argmax(np.abs(a))) - 1) % 3
    temp = np.array([0.012, 0.0053, 0.00457])
    temp[k] = 1.0
    return normalize(np.cross(a, temp))


def get_frame(z: np.ndarray) -> np.ndarray:
    """
    Deterministic right-handed frame whose third column is ``z``.

    Returns:
        3x3 matrix with columns (x, y, z)
    """
    z = normalize(z)
    y = ortho(z)
    x = np.cross(y, z)
    return np.column_stack([x, y, z])


def from_frame(frame: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Convert point(s) from frame coordinates to world coordinates."""
    return np.asarray(p, dtype=np.float64) @ np.asarray(frame).T


def to_frame(frame: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Convert point(s) from world coordinates to frame coordinates."""
    return np.asarray(q, dtype=np.float64) @ np.asarray(frame)


def is_orthonormal_frame(frame: np.ndarray, tol: float = 1e-9) -> bool:
    """Check that ``frame`` is a 3x3 orthonormal right-handed matrix."""
    frame = np.asarray(frame, dtype=np.float64)
    if frame.shape != (3, 3):
        return False
    if not np.allclose(frame.T @ frame, np.eye(3), atol=tol):
        return False
    return bool(np.linalg.det(frame) > 0)


def latlng_to_point(lat: float, lng: float) -> np.ndarray:
    """Unit vector for a latitude/longitude pair in radians."""
    cos_lat = np.cos(lat)
    return np.array([cos_lat * np.cos(lng), cos_lat * np.sin(lng), np.sin(lat)])


def point_to_latlng(p: np.ndarray) -> Tuple[float, float]:
    """Latitude and longitude in radians of a (not necessarily unit) vector."""
    x, y, z = p
    lat = float(np.arctan2(z, np.hypot(x, y)))
    lng = float(np.arctan2(y, x))
    return lat, lng


@dataclass(frozen=True, eq=False)
class Cap:
    """Spherical cap: all points within angular ``radius`` of ``center``."""
    center: np.ndarray  # Unit vector, shape (3,)
    radius: float  # Angular radius in radians, [0, pi]

    def __post_init__(self):
        if not 0.0 <= self.radius <= np.pi:
            raise ValueError(f"Cap radius must be in [0, pi], got {self.radius}")
        object.__setattr__(self, "center", normalize(self.center))

    @property
    def height(self) -> float:
        """Distance from the cap's base plane to its apex."""
        return 2 * np.sin(0.5 * self.radius) ** 2

    @property
    def area(self) -> float:
        """Cap area in steradians."""
        return 2 * np.pi * self.height

    def contains(self, point: np.ndarray, tol: float = 1e-12) -> bool:
        """Check if a point lies inside the cap."""
        return bool(angle_between(self.center, point) <= self.radius + tol)

    @classmethod
    def from_center_area(cls, center: np.ndarray, area: float) -> 'Cap':
        """Create the cap around ``center`` with the given area in steradians."""
        if area < 0:
            raise ValueError(f"Cap area must be non-negative, got {area}")
        height = min(area / (2 * np.pi), 2.0)
        # 1 - cos(r) = 2 sin^2(r/2), accurate for tiny caps
        return cls(center=center, radius=float(2 * np.arcsin(np.sqrt(0.5 * height))))


@dataclass(frozen=True)
class LatLngRect:
    """
    Latitude/longitude rectangle in radians.

    The longitude interval wraps across the antimeridian when
    ``lng_lo > lng_hi``.
    """
    lat_lo: float
    lat_hi: float
    lng_lo: float
    lng_hi: float

    def __post_init__(self):
        if not -np.pi / 2 <= self.lat_lo <= self.lat_hi <= np.pi / 2:
            raise ValueError(
                f"Invalid latitude range [{self.lat_lo}, {self.lat_hi}]")
        for lng in (self.lng_lo, self.lng_hi):
            if not -np.pi <= lng <= np.pi:
                raise ValueError(f"Longitude {lng} outside [-pi, pi]")

    @property
    def is_inverted(self) -> bool:
        """True if the longitude interval crosses the antimeridian."""
        return self.lng_lo > self.lng_hi

    @property
    def lat_length(self) -> float:
        """Latitude span."""
        return self.lat_hi - self.lat_lo

    @property
    def lng_length(self) -> float:
        """Longitude span, accounting for wrap-around."""
        length = self.lng_hi - self.lng_lo
        if length < 0:
            length += 2 * np.pi
        return length

    @property
    def area(self) -> float:
        """Rectangle area in steradians."""
        return self.lng_length * (np.sin(self.lat_hi) - np.sin(self.lat_lo))

    def contains_latlng(self, lat: float, lng: float, tol: float = 1e-12) -> bool:
        """Check if a latitude/longitude pair lies inside the rectangle."""
        if not self.lat_lo - tol <= lat <= self.lat_hi + tol:
            return False
        offset = (lng - self.lng_lo) % (2 * np.pi)
        return offset <= self.lng_length + tol or offset >= 2 * np.pi - tol

    def contains(self, point: np.ndarray, tol: float = 1e-12) -> bool:
        """Check if a point lies inside the rectangle."""
        return self.contains_latlng(*point_to_latlng(point), tol=tol)


@dataclass(frozen=True, eq=False)
class Loop:
    """
    Closed spherical polygon.

    The last vertex connects back to the first. The vertex array is
    read-only once the loop is constructed.

    Attributes:
        vertices: Nx3 array of unit vectors, N >= 3
    """
    vertices: np.ndarray  # Shape: (N, 3)

    @property
    def num_vertices(self) -> int:
        """Number of vertices."""
        return len(self.vertices)

    def vertex(self, i: int) -> np.ndarray:
        """Vertex ``i``, wrapping around so that vertex(n) == vertex(0)."""
        return self.vertices[i % self.num_vertices]

    def edges(self) -> np.ndarray:
        """
        Get all edges as an Nx2x3 array.

        Edge ``i`` runs from vertex ``i`` to vertex ``i + 1`` (mod N).
        """
        return np.stack([self.vertices, np.roll(self.vertices, -1, axis=0)], axis=1)

    def distances_from(self, center: np.ndarray) -> np.ndarray:
        """Angular distance of every vertex from ``center``."""
        return angle_between(center, self.vertices)

    @classmethod
    def from_vertices(cls, vertices: np.ndarray) -> 'Loop':
        """Create a loop from an ordered sequence of unit vectors."""
        vertices = np.array(vertices, dtype=np.float64)
        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise ValueError(f"Expected an Nx3 vertex array, got shape {vertices.shape}")
        if len(vertices) < 3:
            raise DegenerateGeometryError(
                f"A loop needs at least 3 vertices, got {len(vertices)}")
        vertices.setflags(write=False)
        return cls(vertices=vertices)
