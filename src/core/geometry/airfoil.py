"""
Airfoil geometry: NACA loop + panel mesh + trailing edge bookkeeping.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from ..config.schemas import NacaParameters, PanelMethodParameters
from ..errors import InvalidSpecError
from .mesh import PanelMesh, panelize
from .naca import NacaShape, naca4_points, parse_naca4, thin_airfoil_zero_lift_angle
from .polygon import points_in_polygon


@dataclass(frozen=True)
class AirfoilGeometry:
    """
    Immutable airfoil boundary and its panels.

    Attributes:
        points: Boundary loop (N, 2), upper TE -> LE -> lower TE
        mesh: Panels joining consecutive points
        chord: Chord length [m]
        te_upper_index: Panel adjacent to the trailing edge on the upper side
        te_lower_index: Panel adjacent to the trailing edge on the lower side
        designation: NACA digits, e.g. "2412"
        shape: Parsed camber/thickness parameters (camber sign applied)
        zero_lift_angle: Thin-airfoil alpha_L0 of the camber line [rad]
    """
    points: NDArray[np.float64]
    mesh: PanelMesh
    chord: float
    te_upper_index: int
    te_lower_index: int
    designation: str
    shape: NacaShape
    zero_lift_angle: float

    @property
    def n_panels(self) -> int:
        return len(self.mesh)

    @property
    def inverted(self) -> bool:
        return self.shape.m < 0.0

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(x_min, x_max, y_min, y_max) of the loop."""
        x, y = self.points[:, 0], self.points[:, 1]
        return float(x.min()), float(x.max()), float(y.min()), float(y.max())

    def contains(self, points: NDArray[np.float64]) -> NDArray[np.bool_]:
        """Mask of query points lying inside the airfoil."""
        return points_in_polygon(points, self.points)

    def __repr__(self) -> str:
        label = f"NACA {self.designation}" + (" (inverted)" if self.inverted else "")
        return (
            f"AirfoilGeometry({label}, "
            f"points={self.points.shape[0]}, "
            f"panels={self.n_panels}, "
            f"chord={self.chord:.4f})"
        )


def create_airfoil_geometry(naca: Union[NacaParameters, str],
                            panel_params: Optional[PanelMethodParameters] = None) -> AirfoilGeometry:
    """
    Build the panelled airfoil.

    Args:
        naca: NacaParameters or a bare 4-digit string
        panel_params: Solver settings (n_panels, epsilon); defaults if None

    Returns:
        AirfoilGeometry

    Raises:
        InvalidSpecError: malformed designation, or an explicit n_points that
            leaves part of the loop without panels
    """
    if panel_params is None:
        panel_params = PanelMethodParameters()

    if isinstance(naca, NacaParameters):
        digits, n_points = naca.digits, naca.n_points
        chord, inverted = naca.chord, naca.inverted
    else:
        digits, n_points, chord, inverted = str(naca), None, 1.0, False

    shape = parse_naca4(digits)
    if inverted:
        shape = shape.inverted()

    n_requested = panel_params.n_panels
    if n_points is None:
        n_points = n_requested

    points = naca4_points(digits, n_points, chord=chord, inverted=inverted)
    if n_requested < points.shape[0] - 1:
        raise InvalidSpecError(
            f"n_points={n_points} gives {points.shape[0] - 1} surface segments "
            f"but only {n_requested} panels were requested"
        )

    mesh = panelize(points, n_requested, panel_params.epsilon)

    return AirfoilGeometry(
        points=points,
        mesh=mesh,
        chord=float(chord),
        te_upper_index=0,
        te_lower_index=len(mesh) - 1,
        designation=shape.designation,
        shape=shape,
        zero_lift_angle=thin_airfoil_zero_lift_angle(shape),
    )
