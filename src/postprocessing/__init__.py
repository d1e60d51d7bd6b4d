"""
Post-processing module.

Turns panel strengths into surface quantities and checks the result.

Key pieces:
- aerodynamics: surface velocity, Cp, lift/drag/moment coefficients
- pressure: dimensional surface pressure and lift per span (Bernoulli)
- validation: plausibility report for a solution
- convergence: panel count study (import postprocessing.convergence directly,
  it depends on the solver package)
"""

from .aerodynamics import (
    surface_tangential_velocity,
    pressure_coefficient,
    lift_coefficient_circulation,
    lift_coefficient_pressure,
    drag_coefficient_pressure,
    moment_coefficient,
    force_coefficients,
)
from .pressure import SurfacePressure, dynamic_pressure, surface_pressure, lift_per_span
from .validation import ValidationReport, SolutionWarning, WarningKind, validate_solution

__all__ = [
    # Coefficients
    "surface_tangential_velocity",
    "pressure_coefficient",
    "lift_coefficient_circulation",
    "lift_coefficient_pressure",
    "drag_coefficient_pressure",
    "moment_coefficient",
    "force_coefficients",
    # Dimensional
    "SurfacePressure",
    "dynamic_pressure",
    "surface_pressure",
    "lift_per_span",
    # Validation
    "ValidationReport",
    "SolutionWarning",
    "WarningKind",
    "validate_solution",
]
