"""
Influence coefficients for constant-strength source and vortex panels.

Each kernel returns the velocity induced at a field point by a unit-strength
(per unit length) panel. Evaluation happens in the panel frame - origin at
the panel start, X along the panel, Y to the left of the panel direction:

    source:  u = ln(r1²/r2²) / (4π)      v = (θ2 - θ1) / (2π)
    vortex:  u = (θ2 - θ1) / (2π)        v = -ln(r1²/r2²) / (4π)

with θ1 = atan2(Y, X), θ2 = atan2(Y, X - L). The vortex is the source
velocity rotated by -90° (clockwise circulation positive, so positive
circulation produces positive lift).

Points lying on the panel itself (|Y| below 1e-10 of the reference length
inside the panel span) or on an endpoint get zero velocity.

All array routines broadcast over field points (rows) and panels (columns).
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray

from core.geometry.mesh import Panel, PanelMesh
from core.geometry.primitives import Point2D, Vector2D


SINGULAR_TOLERANCE = 1e-10


def _source_kernel(points: NDArray[np.float64],
                   starts: NDArray[np.float64],
                   angles: NDArray[np.float64],
                   lengths: NDArray[np.float64],
                   reference_length: float) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Global-frame velocity of unit source panels.

    Args:
        points: (M, 2) field points
        starts: (n, 2) panel start points
        angles: (n,) panel headings
        lengths: (n,) panel lengths
        reference_length: Length scale for the singular threshold

    Returns:
        (vx, vy), each (M, n)
    """
    points = np.atleast_2d(points)
    c = np.cos(angles)[None, :]
    s = np.sin(angles)[None, :]
    L = lengths[None, :]

    dx = points[:, 0:1] - starts[None, :, 0]
    dy = points[:, 1:2] - starts[None, :, 1]

    # Panel frame
    X = dx * c + dy * s
    Y = -dx * s + dy * c

    r1_sq = X**2 + Y**2
    r2_sq = (X - L)**2 + Y**2

    tol = SINGULAR_TOLERANCE * reference_length
    on_panel = (np.abs(Y) < tol) & (X >= -tol) & (X <= L + tol)
    singular = on_panel | (r1_sq < tol**2) | (r2_sq < tol**2)

    with np.errstate(divide='ignore', invalid='ignore'):
        u = np.log(r1_sq / r2_sq) / (4.0 * np.pi)
    v = (np.arctan2(Y, X - L) - np.arctan2(Y, X)) / (2.0 * np.pi)

    u = np.where(singular, 0.0, u)
    v = np.where(singular, 0.0, v)

    # Back to global axes
    vx = u * c - v * s
    vy = u * s + v * c
    return vx, vy


def source_velocity(points: NDArray[np.float64],
                    mesh: PanelMesh) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Velocity (vx, vy), each (M, n), of every unit source panel at every point."""
    return _source_kernel(points, mesh.starts, mesh.angles, mesh.lengths,
                          mesh.reference_length)


def vortex_velocity(points: NDArray[np.float64],
                    mesh: PanelMesh) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Velocity (vx, vy), each (M, n), of every unit vortex panel at every point."""
    sx, sy = source_velocity(points, mesh)
    return sy, -sx


# ------------------------------------------------------------------------
# Single-panel API
# ------------------------------------------------------------------------

def _single_panel(point: Point2D, panel: Panel,
                  reference_length: Optional[float]) -> Tuple[float, float]:
    ref = panel.length if reference_length is None else reference_length
    vx, vy = _source_kernel(
        np.array([[point.x, point.y]]),
        np.array([[panel.x1, panel.y1]]),
        np.array([panel.angle]),
        np.array([panel.length]),
        ref,
    )
    return float(vx[0, 0]), float(vy[0, 0])


def source_influence(point: Point2D, panel: Panel, strength: float = 1.0,
                     reference_length: Optional[float] = None) -> Vector2D:
    """
    Velocity induced at `point` by a source panel.

    Args:
        point: Field point
        panel: Source panel
        strength: Source strength per unit length
        reference_length: Singular threshold scale (default: panel length)
    """
    vx, vy = _single_panel(point, panel, reference_length)
    return Vector2D(strength * vx, strength * vy)


def vortex_influence(point: Point2D, panel: Panel, strength: float = 1.0,
                     reference_length: Optional[float] = None) -> Vector2D:
    """Velocity induced at `point` by a vortex panel (clockwise positive)."""
    vx, vy = _single_panel(point, panel, reference_length)
    return Vector2D(strength * vy, -strength * vx)


def source_influence_normal(point: Point2D, panel: Panel, normal: Vector2D,
                            strength: float = 1.0) -> float:
    return source_influence(point, panel, strength).dot(normal)


def source_influence_tangent(point: Point2D, panel: Panel, tangent: Vector2D,
                             strength: float = 1.0) -> float:
    return source_influence(point, panel, strength).dot(tangent)


def vortex_influence_normal(point: Point2D, panel: Panel, normal: Vector2D,
                            strength: float = 1.0) -> float:
    return vortex_influence(point, panel, strength).dot(normal)


def vortex_influence_tangent(point: Point2D, panel: Panel, tangent: Vector2D,
                             strength: float = 1.0) -> float:
    return vortex_influence(point, panel, strength).dot(tangent)


# ------------------------------------------------------------------------
# Matrices and field evaluation
# ------------------------------------------------------------------------

@dataclass(frozen=True)
class InfluenceMatrices:
    """
    Normal/tangential influence at the control points, shape (n, n).

    Entry [i, j] is the velocity component along panel i's normal (or
    tangent) at control point i induced by unit panel j.
    """
    source_normal: NDArray[np.float64]
    source_tangent: NDArray[np.float64]
    vortex_normal: NDArray[np.float64]
    vortex_tangent: NDArray[np.float64]


def influence_matrices(mesh: PanelMesh) -> InfluenceMatrices:
    """Assemble source and vortex influence matrices at the control points."""
    sx, sy = source_velocity(mesh.control_points, mesh)
    nx, ny = mesh.normals[:, 0:1], mesh.normals[:, 1:2]
    tx, ty = mesh.tangents[:, 0:1], mesh.tangents[:, 1:2]

    # Vortex velocity is (sy, -sx)
    return InfluenceMatrices(
        source_normal=sx * nx + sy * ny,
        source_tangent=sx * tx + sy * ty,
        vortex_normal=sy * nx - sx * ny,
        vortex_tangent=sy * tx - sx * ty,
    )


def total_velocity(points: NDArray[np.float64],
                   mesh: PanelMesh,
                   sigma: NDArray[np.float64],
                   gamma: float,
                   freestream: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Total velocity at field points.

    Freestream plus all source panels plus the circulation `gamma` spread
    as a uniform vortex sheet of strength gamma/perimeter over the contour.

    Args:
        points: (M, 2) field points (a single (2,) point is accepted)
        mesh: Panel mesh
        sigma: (n,) source strengths
        gamma: Total circulation (clockwise positive)
        freestream: (2,) freestream velocity vector

    Returns:
        (M, 2) velocity
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    sx, sy = source_velocity(points, mesh)

    sheet = gamma / mesh.perimeter
    vx = freestream[0] + sx @ sigma + sheet * np.sum(sy, axis=1)
    vy = freestream[1] + sy @ sigma - sheet * np.sum(sx, axis=1)
    return np.column_stack([vx, vy])
