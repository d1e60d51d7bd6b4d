"""Geometry primitives, NACA sections, panels and containment."""

from .primitives import Point2D, Vector2D, rotation_matrix
from .naca import (
    NacaShape,
    parse_naca4,
    naca4_points,
    camber_line,
    thickness_distribution,
    thin_airfoil_zero_lift_angle,
)
from .mesh import Panel, PanelMesh, panelize, global_to_local, local_to_global
from .polygon import points_in_polygon, point_in_polygon
from .airfoil import AirfoilGeometry, create_airfoil_geometry

__all__ = [
    "Point2D",
    "Vector2D",
    "rotation_matrix",
    "NacaShape",
    "parse_naca4",
    "naca4_points",
    "camber_line",
    "thickness_distribution",
    "thin_airfoil_zero_lift_angle",
    "Panel",
    "PanelMesh",
    "panelize",
    "global_to_local",
    "local_to_global",
    "points_in_polygon",
    "point_in_polygon",
    "AirfoilGeometry",
    "create_airfoil_geometry",
]
