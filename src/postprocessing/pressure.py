"""
Dimensional surface pressure and loads using Bernoulli.

Computes:
- Dynamic pressure (q)
- Absolute surface pressure (P = P_inf + q*Cp)
- Total/stagnation pressure (P0)
- Lift per unit span, from circulation and from integrated pressure
"""

from dataclasses import dataclass
from typing import Dict
import numpy as np
from numpy.typing import NDArray


def dynamic_pressure(density: float, velocity: float) -> float:
    """q = 0.5*ρ*V²"""
    return 0.5 * density * velocity**2


@dataclass(frozen=True)
class SurfacePressure:
    """
    Surface pressure at the control points.

    Bernoulli (incompressible, steady, inviscid):
        P + 0.5*ρ*V² = P_inf + 0.5*ρ*V_inf²

    Attributes:
        pressure: Absolute static pressure [Pa] (n,)
        pressure_gauge: P - P_inf [Pa] (n,)
        pressure_total: P + 0.5*ρ*Vt² [Pa] (n,), constant in potential flow
        q_inf: Freestream dynamic pressure [Pa]
        p_inf: Freestream static pressure [Pa]
    """
    pressure: NDArray[np.float64]
    pressure_gauge: NDArray[np.float64]
    pressure_total: NDArray[np.float64]
    q_inf: float
    p_inf: float


def surface_pressure(cp: NDArray[np.float64],
                     vt: NDArray[np.float64],
                     density: float,
                     velocity: float,
                     p_inf: float = 101325.0) -> SurfacePressure:
    """
    Convert Cp and surface speed to dimensional pressures.

    Args:
        cp: Pressure coefficient (n,)
        vt: Tangential surface velocity (n,)
        density: ρ [kg/m³]
        velocity: U_inf [m/s]
        p_inf: Freestream static pressure [Pa]
    """
    q_inf = dynamic_pressure(density, velocity)
    p_gauge = q_inf * cp
    p = p_inf + p_gauge

    return SurfacePressure(
        pressure=p,
        pressure_gauge=p_gauge,
        pressure_total=p + 0.5 * density * vt**2,
        q_inf=q_inf,
        p_inf=p_inf,
    )


def lift_per_span(gamma: float, cl_pressure: float,
                  density: float, velocity: float, chord: float) -> Dict[str, float]:
    """
    Lift per unit span [N/m].

    Returns:
        {'kutta_joukowski': ρ U Γ, 'pressure': q c CL_p}
    """
    q_inf = dynamic_pressure(density, velocity)
    return {
        "kutta_joukowski": float(density * velocity * gamma),
        "pressure": float(q_inf * chord * cl_pressure),
    }
