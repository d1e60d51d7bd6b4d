"""
Case class - unified container for all case data.

Provides clean access to:
- Airfoil geometry (built on first access)
- Flow conditions
- Solver and streamline settings
- Output paths
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config.schemas import (
    CaseConfig,
    FlowConditions,
    PanelMethodParameters,
    StreamlineParameters,
)
from ..geometry.airfoil import AirfoilGeometry, create_airfoil_geometry


@dataclass
class Case:
    """
    Unified container for an airfoil case.

    Usage:
        from core.io import CaseLoader

        case = CaseLoader.load_case('cases/naca2412')
        print(case.name, case.alpha_deg)
        solution = solve_panel_method(case.geometry, case.flow, case.panel_params)
    """

    config: CaseConfig
    case_dir: Path

    # Cached geometry
    _geometry: Optional[AirfoilGeometry] = None

    @property
    def name(self) -> str:
        """Case name."""
        return self.config.name

    @property
    def description(self) -> str:
        """Case description."""
        return self.config.description

    @property
    def geometry(self) -> AirfoilGeometry:
        """Panelled airfoil (cached)."""
        if self._geometry is None:
            self._geometry = create_airfoil_geometry(self.config.airfoil, self.config.panels)
        return self._geometry

    @property
    def num_panels(self) -> int:
        return self.geometry.n_panels

    # -------------------------------------------------------------------------
    # Flow Conditions
    # -------------------------------------------------------------------------

    @property
    def flow(self) -> FlowConditions:
        """Freestream conditions (angle in radians)."""
        return self.config.flow.to_conditions()

    @property
    def v_inf(self) -> float:
        return self.config.flow.velocity

    @property
    def alpha_deg(self) -> float:
        return self.config.flow.alpha_deg

    @property
    def density(self) -> float:
        """Fluid density [kg/m³]."""
        return self.config.flow.density

    @property
    def reference_pressure(self) -> float:
        """Freestream static pressure [Pa]."""
        return self.config.flow.reference_pressure

    # -------------------------------------------------------------------------
    # Solver Settings
    # -------------------------------------------------------------------------

    @property
    def panel_params(self) -> PanelMethodParameters:
        return self.config.panels

    @property
    def streamline_params(self) -> Optional[StreamlineParameters]:
        """Streamline settings, None when tracing is disabled."""
        return self.config.streamlines

    # -------------------------------------------------------------------------
    # Output Paths
    # -------------------------------------------------------------------------

    @property
    def output_dir(self) -> Path:
        """Output directory path (relative entries resolve against case_dir)."""
        out = Path(self.config.output.directory)
        return out if out.is_absolute() else self.case_dir / out

    def __repr__(self) -> str:
        return (
            f"Case(name='{self.name}', "
            f"airfoil=NACA {self.config.airfoil.digits}, "
            f"alpha={self.alpha_deg:.2f} deg)"
        )
