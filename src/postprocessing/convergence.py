"""
Panel count convergence study.

Solves the same section and flow condition at several panel counts and
reports how the lift coefficients and surface quantities settle.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Union
import time
import numpy as np

from core.config.schemas import FlowConditions, NacaParameters, PanelMethodParameters
from core.errors import SingularSystemError
from core.geometry.airfoil import create_airfoil_geometry
from solvers.panel2d.hess_smith import solve_panel_method


def run_panel_convergence(
    naca: Union[NacaParameters, str],
    flow: FlowConditions,
    panel_counts: Sequence[int],
    base_params: Optional[PanelMethodParameters] = None,
    verbose: bool = True
) -> List[Dict]:
    """
    Run the panel method at multiple panel counts.

    Args:
        naca: Section definition or 4-digit string
        flow: Flow conditions
        panel_counts: Panel counts to test (e.g., [60, 120, 240])
        base_params: Other solver settings, n_panels is overridden
        verbose: Print progress

    Returns:
        List of result dictionaries, one per panel count, in the given order

    Raises:
        pydantic.ValidationError: a panel count outside the solver range
    """
    if base_params is None:
        base_params = PanelMethodParameters()
    if isinstance(naca, NacaParameters) and naca.n_points is not None:
        # Point count must follow the panel count
        naca = naca.model_copy(update={"n_points": None})

    # All counts are checked before the first solve
    settings = [
        PanelMethodParameters.model_validate({**base_params.model_dump(), "n_panels": n})
        for n in panel_counts
    ]

    results = []

    for params in settings:
        if verbose:
            print(f"\n{'='*60}")
            print(f"Panel Method: {params.n_panels} panels")
            print(f"{'='*60}")

        result = run_single_resolution(naca, flow, params)
        results.append(result)

        if verbose:
            if result["success"]:
                print(f"  ✓ CL_Γ = {result['cl_gamma']:.5f}, CL_p = {result['cl_pressure']:.5f}, "
                      f"gap = {result['cl_gap']:.2e}, t = {result['solve_time']:.3f}s")
            else:
                print(f"  ✗ {result['error_msg']}")

    return results


def run_single_resolution(
    naca: Union[NacaParameters, str],
    flow: FlowConditions,
    params: PanelMethodParameters
) -> Dict:
    """
    Solve once and collect metrics.

    Returns:
        Dictionary with solver results and metrics; 'success' is False when
        the system was singular
    """
    start = time.perf_counter()
    geometry = create_airfoil_geometry(naca, params)

    try:
        solution = solve_panel_method(geometry, flow, params)
    except SingularSystemError as exc:
        return {
            "n_panels": geometry.n_panels,
            "success": False,
            "error_msg": str(exc),
            "solve_time": time.perf_counter() - start,
        }

    elapsed = time.perf_counter() - start

    return {
        "n_panels": geometry.n_panels,
        "success": True,
        "error_msg": None,
        "solve_time": elapsed,
        "gamma": solution.gamma,
        "cl_gamma": solution.cl_gamma,
        "cl_pressure": solution.cl_pressure,
        "cl_gap": solution.cl_gap,
        "residual": solution.residual,
        "Cp_min": float(np.min(solution.cp)),
        "Cp_max": float(np.max(solution.cp)),
        "Vt_max": float(np.max(np.abs(solution.vt))),
    }


def compare_panel_resolutions(
    results: List[Dict],
    reference_idx: int = -1
) -> Dict:
    """
    Compare results at different panel counts.

    Args:
        results: List of result dictionaries from run_panel_convergence
        reference_idx: Index of reference solution (default: finest, -1)

    Returns:
        Dictionary with relative changes against the reference
    """
    ok = [r for r in results if r["success"]]
    if len(ok) < 2:
        raise ValueError("Need at least 2 successful resolutions for comparison")

    reference = ok[reference_idx]

    convergence = {
        "reference_panels": reference["n_panels"],
        "n_panels": [],
        "cl_gamma_change": [],
        "cl_pressure_change": [],
        "Cp_min_change": [],
        "cl_gap": [],
    }

    def relative(value, ref):
        return float(abs(value - ref) / abs(ref)) if abs(ref) > 1e-12 else float(abs(value - ref))

    for r in ok:
        if r is reference:
            continue
        convergence["n_panels"].append(r["n_panels"])
        convergence["cl_gamma_change"].append(relative(r["cl_gamma"], reference["cl_gamma"]))
        convergence["cl_pressure_change"].append(relative(r["cl_pressure"], reference["cl_pressure"]))
        convergence["Cp_min_change"].append(relative(r["Cp_min"], reference["Cp_min"]))
        convergence["cl_gap"].append(r["cl_gap"])

    return convergence
