"""
Plausibility checks on a panel solution.

Problems are reported as warnings in the returned report, never raised.
Only a large linear-system residual marks the solution invalid; the other
checks flag results that deserve a second look.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List
import numpy as np

from core.config.schemas import FlowConditions
from core.geometry.airfoil import AirfoilGeometry

if TYPE_CHECKING:
    from solvers.panel2d.hess_smith import PanelSolution


RESIDUAL_LIMIT = 1e-6
LIFT_MISMATCH_LIMIT = 0.1
THIN_AIRFOIL_RELATIVE_LIMIT = 0.5
THIN_AIRFOIL_MIN_ANGLE = 0.01       # rad
CP_MAX_LIMIT = 2.0
CP_MIN_LIMIT = -10.0


class WarningKind(Enum):
    """Category of a solution warning."""
    RESIDUAL = "residual"
    LIFT_MISMATCH = "lift_mismatch"
    THIN_AIRFOIL = "thin_airfoil"
    EXTREME_PRESSURE = "extreme_pressure"


@dataclass(frozen=True)
class SolutionWarning:
    kind: WarningKind
    message: str


@dataclass
class ValidationReport:
    """Outcome of validate_solution."""
    is_valid: bool = True
    warnings: List[SolutionWarning] = field(default_factory=list)

    def has(self, kind: WarningKind) -> bool:
        return any(w.kind == kind for w in self.warnings)

    @property
    def messages(self) -> List[str]:
        return [w.message for w in self.warnings]

    def __str__(self) -> str:
        status = "valid" if self.is_valid else "INVALID"
        if not self.warnings:
            return f"Solution {status}, no warnings"
        lines = [f"Solution {status}, {len(self.warnings)} warning(s):"]
        lines += [f"  - [{w.kind.value}] {w.message}" for w in self.warnings]
        return "\n".join(lines)


def validate_solution(solution: PanelSolution,
                      geometry: AirfoilGeometry,
                      flow: FlowConditions) -> ValidationReport:
    """
    Check a solution for numerical and physical plausibility.

    Checks:
        - residual > 1e-6 (marks the report invalid)
        - |CL_Γ - CL_p| > 0.1
        - CL_Γ more than 50% away from the thin-airfoil value
          2π(α - α_L0), when |α - α_L0| > 0.01 rad
        - max Cp > 2 or min Cp < -10

    Args:
        solution: Panel solution
        geometry: Geometry the solution was computed for (supplies α_L0)
        flow: Flow conditions

    Returns:
        ValidationReport
    """
    report = ValidationReport()

    if solution.residual > RESIDUAL_LIMIT:
        report.is_valid = False
        report.warnings.append(SolutionWarning(
            WarningKind.RESIDUAL,
            f"High residual: {solution.residual:.2e}",
        ))

    gap = abs(solution.cl_gamma - solution.cl_pressure)
    if gap > LIFT_MISMATCH_LIMIT:
        report.warnings.append(SolutionWarning(
            WarningKind.LIFT_MISMATCH,
            f"CL mismatch: circulation {solution.cl_gamma:.4f} vs "
            f"pressure {solution.cl_pressure:.4f}",
        ))

    effective_alpha = flow.angle_of_attack - geometry.zero_lift_angle
    if abs(effective_alpha) > THIN_AIRFOIL_MIN_ANGLE:
        cl_thin = 2.0 * np.pi * effective_alpha
        if abs(solution.cl_gamma - cl_thin) > THIN_AIRFOIL_RELATIVE_LIMIT * abs(cl_thin):
            report.warnings.append(SolutionWarning(
                WarningKind.THIN_AIRFOIL,
                f"CL deviates from thin airfoil theory: {solution.cl_gamma:.4f} "
                f"vs {cl_thin:.4f}",
            ))

    cp_max = float(np.max(solution.cp))
    cp_min = float(np.min(solution.cp))
    if cp_max > CP_MAX_LIMIT or cp_min < CP_MIN_LIMIT:
        report.warnings.append(SolutionWarning(
            WarningKind.EXTREME_PRESSURE,
            f"Extreme Cp values: [{cp_min:.2f}, {cp_max:.2f}]",
        ))

    return report
