"""
Surface velocity, pressure coefficient and force coefficients from panel
strengths.

Conventions:
    - circulation is clockwise positive, so CL = 2Γ/(U∞ c) > 0 means lift
    - normals point into the fluid
    - lift direction is (-sin α, cos α), drag direction (cos α, sin α)
"""

import numpy as np
from numpy.typing import NDArray

from core.geometry.mesh import PanelMesh


def surface_tangential_velocity(mesh: PanelMesh,
                                source_tangent: NDArray[np.float64],
                                vortex_tangent: NDArray[np.float64],
                                sigma: NDArray[np.float64],
                                gamma: float,
                                freestream: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Tangential velocity at each control point.

    Vt_i = V∞·t_i + Σ_j σ_j S_t[i,j] + (Γ/P) Σ_j G_t[i,j]

    where P is the contour perimeter (uniform vortex sheet).
    """
    v_inf_tan = mesh.tangents @ freestream
    sheet = gamma / mesh.perimeter
    return v_inf_tan + source_tangent @ sigma + sheet * np.sum(vortex_tangent, axis=1)


def pressure_coefficient(vt: NDArray[np.float64], velocity: float) -> NDArray[np.float64]:
    """Cp = 1 - (Vt/U∞)²"""
    return 1.0 - (vt / velocity)**2


def lift_coefficient_circulation(gamma: float, velocity: float, chord: float) -> float:
    """Kutta-Joukowski: CL = 2Γ / (U∞ c)"""
    return 2.0 * gamma / (velocity * chord)


def force_coefficients(cp: NDArray[np.float64], mesh: PanelMesh, chord: float) -> NDArray[np.float64]:
    """
    Pressure force coefficient vector (cx, cy) in body axes.

    The pressure on panel i pushes against its outward normal:
    c_F = -Σ Cp_i L_i n_i / c
    """
    return -(cp * mesh.lengths) @ mesh.normals / chord


def lift_coefficient_pressure(cp: NDArray[np.float64], mesh: PanelMesh,
                              alpha: float, chord: float) -> float:
    """Integrated pressure force projected on the lift direction."""
    cx, cy = force_coefficients(cp, mesh, chord)
    return float(-cx * np.sin(alpha) + cy * np.cos(alpha))


def drag_coefficient_pressure(cp: NDArray[np.float64], mesh: PanelMesh,
                              alpha: float, chord: float) -> float:
    """
    Integrated pressure force projected on the freestream direction.

    Zero in exact potential flow; the discrete value measures
    discretization error.
    """
    cx, cy = force_coefficients(cp, mesh, chord)
    return float(cx * np.cos(alpha) + cy * np.sin(alpha))


def moment_coefficient(cp: NDArray[np.float64], mesh: PanelMesh, chord: float,
                       x_ref: float = 0.25) -> float:
    """
    Pitching moment coefficient about (x_ref*c, 0), positive nose up.

    Args:
        cp: (n,) pressure coefficient
        mesh: Panel mesh
        chord: Chord length
        x_ref: Reference point as a chord fraction (default quarter chord)
    """
    f = -(cp * mesh.lengths)[:, None] * mesh.normals    # (n, 2), per q
    rx = mesh.midpoints[:, 0] - x_ref * chord
    ry = mesh.midpoints[:, 1]
    # Counter-clockwise moment is nose down
    mz = np.sum(rx * f[:, 1] - ry * f[:, 0])
    return float(-mz / chord**2)
