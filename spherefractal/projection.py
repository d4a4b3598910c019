"""
Projection of tangent-plane curves onto the unit sphere.

A planar point (px, py) is mapped through the frame (x, y, z) to
normalize(z + s * px * x + s * py * y), i.e. the gnomonic projection from
the plane touching the sphere at z. With s = tan(R), a planar point at
distance rho from the origin lands at angle atan(rho * tan(R)) from z, so
the unit circle maps exactly onto the circle of angular radius R.
"""

import numpy as np

from .geometry import Loop, from_frame, is_orthonormal_frame, normalize


def tangent_scale(nominal_radius: float) -> float:
    """Planar scale factor that puts the unit circle at angular radius R."""
    if not 0.0 < nominal_radius < np.pi / 2:
        raise ValueError(
            f"nominal_radius must be in (0, pi/2) radians, got {nominal_radius}")
    return float(np.tan(nominal_radius))


def project_to_sphere(points: np.ndarray, frame: np.ndarray,
                      nominal_radius: float) -> Loop:
    """
    Project a closed planar curve onto the sphere around the frame's z-axis.

    Args:
        points: Nx2 array of planar vertices (unit circle = nominal radius)
        frame: 3x3 orthonormal right-handed matrix with columns (x, y, z)
        nominal_radius: Angular radius in radians of the projected unit circle

    Returns:
        Loop whose vertex (1, 0) lies at angle ``nominal_radius`` from z,
        in the direction of x
    """
    frame = np.asarray(frame, dtype=np.float64)
    if not is_orthonormal_frame(frame):
        raise ValueError("frame must be a 3x3 orthonormal right-handed matrix")

    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    scale = tangent_scale(nominal_radius)

    local = np.column_stack([
        points * scale,
        np.ones(len(points)),
    ])
    return Loop.from_vertices(normalize(from_frame(frame, local)))
