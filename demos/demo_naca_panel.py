"""
Demo: Hess-Smith panel method on NACA 0012 and 2412.

Sweeps the angle of attack and compares CL with thin-airfoil theory.
"""

import sys
from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import FlowConditions, PanelMethodParameters
from core.geometry import create_airfoil_geometry
from solvers.panel2d import solve_panel_method
from postprocessing import validate_solution
from visualization import plot_cp_distribution, save_figure


def main():
    print("Running Hess-Smith Panel Method Demo: NACA 0012 / 2412...")

    params = PanelMethodParameters(n_panels=160)
    alphas = np.arange(-4.0, 10.1, 2.0)
    out_dir = Path(__file__).parent / "out"

    fig, ax = plt.subplots(figsize=(8, 6))

    for digits, marker in (("0012", "o"), ("2412", "s")):
        geometry = create_airfoil_geometry(digits, params)
        alpha_l0 = np.degrees(geometry.zero_lift_angle)

        print(f"\n{'='*60}")
        print(f"NACA {digits}: {geometry.n_panels} panels, alpha_L0 = {alpha_l0:.2f} deg")
        print(f"{'='*60}")

        cl = []
        for alpha in alphas:
            flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=alpha)
            solution = solve_panel_method(geometry, flow, params)
            report = validate_solution(solution, geometry, flow)
            cl.append(solution.cl_gamma)

            flag = "✓" if not report.warnings else "!"
            print(f"  {flag} alpha = {alpha:5.1f} deg: CL_Γ = {solution.cl_gamma:7.4f}, "
                  f"CL_p = {solution.cl_pressure:7.4f}")
            for msg in report.messages:
                print(f"      {msg}")

            if digits == "2412" and alpha == 4.0:
                cp_fig = plot_cp_distribution(geometry, solution)
                path = save_figure(cp_fig, out_dir / "demo_naca2412_cp.png")
                print(f"  Cp plot saved to {path}")

        ax.plot(alphas, cl, marker + "-", label=f"NACA {digits} (panel)")
        ax.plot(alphas, 2 * np.pi * np.radians(alphas - alpha_l0), "--",
                label=f"NACA {digits} (thin airfoil)")

    ax.set_xlabel("alpha [deg]")
    ax.set_ylabel("CL")
    ax.set_title("Lift curve: panel method vs thin airfoil theory")
    ax.grid(True)
    ax.legend()

    path = save_figure(fig, out_dir / "demo_lift_curve.png")
    print(f"\nLift curve saved to {path}")


if __name__ == "__main__":
    main()
