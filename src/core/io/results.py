"""
Result exporter - write solved cases to an output folder.

Files:
    surface.csv       per-panel geometry, Cp, Vt, source strength and pressure
    summary.json      circulation, lift coefficients, residual, warnings, loads
    streamlines.json  traced streamlines and their bounds
    convergence.json  panel count study (when run)

Usage:
    exporter = ResultExporter(case.output_dir)
    exporter.export_surface(geometry, solution)
    exporter.export_summary(case.name, geometry, flow, solution, report)
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Union
import json
import numpy as np

from ..config.schemas import FlowConditions
from ..geometry.airfoil import AirfoilGeometry

if TYPE_CHECKING:
    from solvers.panel2d.hess_smith import PanelSolution
    from postprocessing.pressure import SurfacePressure
    from postprocessing.validation import ValidationReport
    from visualization.streamlines import StreamlineField


SURFACE_COLUMNS = ["x1", "y1", "x2", "y2", "xc", "yc", "cp", "vt", "sigma"]
PRESSURE_COLUMNS = ["p", "p_gauge"]


def _to_builtin(value):
    """Convert numpy scalars/arrays for json."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class ResultExporter:
    """Write solution data to an output directory."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def _path(self, filename: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / filename

    def _write_json(self, filename: str, data: Dict) -> Path:
        path = self._path(filename)
        with open(path, 'w') as f:
            json.dump(data, f, indent=2, default=_to_builtin)
        return path

    def export_surface(self,
                       geometry: AirfoilGeometry,
                       solution: PanelSolution,
                       pressure: Optional[SurfacePressure] = None,
                       filename: str = "surface.csv") -> Path:
        """
        One row per panel: endpoints, control point, Cp, Vt, sigma.

        With `pressure` given, absolute and gauge static pressure [Pa] are
        appended as columns p and p_gauge.
        """
        mesh = geometry.mesh
        columns = list(SURFACE_COLUMNS)
        blocks = [
            mesh.starts,
            mesh.ends,
            mesh.control_points,
            solution.cp,
            solution.vt,
            solution.sigma,
        ]
        if pressure is not None:
            columns += PRESSURE_COLUMNS
            blocks += [pressure.pressure, pressure.pressure_gauge]
        table = np.column_stack(blocks)

        path = self._path(filename)
        np.savetxt(path, table, delimiter=",", header=",".join(columns),
                   comments="", fmt="%.10e")
        return path

    def export_summary(self,
                       case_name: str,
                       geometry: AirfoilGeometry,
                       flow: FlowConditions,
                       solution: PanelSolution,
                       report: Optional[ValidationReport] = None,
                       loads: Optional[Dict[str, float]] = None,
                       filename: str = "summary.json") -> Path:
        """Scalar results and validation outcome."""
        data = {
            "name": case_name,
            "airfoil": {
                "designation": geometry.designation,
                "inverted": geometry.inverted,
                "chord": geometry.chord,
                "n_panels": geometry.n_panels,
                "zero_lift_angle_deg": float(np.degrees(geometry.zero_lift_angle)),
            },
            "flow": {
                "velocity": flow.velocity,
                "density": flow.density,
                "alpha_deg": flow.alpha_deg,
            },
            "solution": {
                "gamma": solution.gamma,
                "cl_gamma": solution.cl_gamma,
                "cl_pressure": solution.cl_pressure,
                "residual": solution.residual,
                "iterations": solution.iterations,
                "cp_min": float(np.min(solution.cp)),
                "cp_max": float(np.max(solution.cp)),
            },
        }

        if report is not None:
            data["validation"] = {
                "is_valid": report.is_valid,
                "warnings": [
                    {"kind": w.kind.value, "message": w.message} for w in report.warnings
                ],
            }
        if loads is not None:
            data["lift_per_span"] = loads

        return self._write_json(filename, data)

    def export_streamlines(self,
                           field: StreamlineField,
                           filename: str = "streamlines.json") -> Path:
        """Streamline polylines with completion flag and termination reason."""
        x_min, x_max, y_min, y_max = field.bounds
        data = {
            "bounds": {"x_min": x_min, "x_max": x_max, "y_min": y_min, "y_max": y_max},
            "streamlines": [
                {
                    "complete": line.complete,
                    "termination": line.termination.value,
                    "points": line.points,
                }
                for line in field.streamlines
            ],
        }
        return self._write_json(filename, data)

    def export_convergence(self,
                           results: List[Dict],
                           comparison: Optional[Dict] = None,
                           filename: str = "convergence.json") -> Path:
        """Panel count study results."""
        data = {"results": results}
        if comparison is not None:
            data["comparison"] = comparison
        return self._write_json(filename, data)
