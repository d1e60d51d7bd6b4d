"""
NACA 4-digit section generator.

Designation MPTT:
    M  - maximum camber in percent of chord
    P  - position of maximum camber in tenths of chord
    TT - maximum thickness in percent of chord

Points are cosine-spaced (clustered at both edges) and returned as one loop:
upper surface trailing edge -> leading edge, then lower surface leading
edge -> trailing edge. The trailing edge is left open (standard -0.1015
coefficient), so the first and last points do not coincide.
"""

import re
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import integrate

from ..errors import InvalidSpecError


_NACA4_PATTERN = re.compile(r"^\d{4}$")

# Thickness polynomial coefficients (open trailing edge)
_THICKNESS_COEFFS = (0.2969, -0.1260, -0.3516, 0.2843, -0.1015)


@dataclass(frozen=True)
class NacaShape:
    """Camber/thickness parameters as chord fractions."""
    m: float    # max camber
    p: float    # location of max camber
    t: float    # max thickness
    designation: str = ""

    @property
    def is_symmetric(self) -> bool:
        return self.m == 0.0

    def inverted(self) -> "NacaShape":
        """Mirror image about the chord line (negative camber)."""
        return NacaShape(m=-self.m, p=self.p, t=self.t, designation=self.designation)


def parse_naca4(digits: str) -> NacaShape:
    """
    Parse a NACA 4-digit designation.

    Args:
        digits: e.g. "2412" (an optional "NACA" prefix is accepted)

    Returns:
        NacaShape with m, p, t as chord fractions

    Raises:
        InvalidSpecError: not exactly four decimal digits, zero thickness,
            or non-zero camber with zero camber position
    """
    code = str(digits).strip()
    if code.upper().startswith("NACA"):
        code = code[4:].strip()

    if not _NACA4_PATTERN.match(code):
        raise InvalidSpecError(f"Invalid NACA 4-digit designation: '{digits}'")

    m = int(code[0]) / 100.0
    p = int(code[1]) / 10.0
    t = int(code[2:]) / 100.0

    if t == 0.0:
        raise InvalidSpecError(f"NACA {code}: thickness must be non-zero")
    if m > 0.0 and p == 0.0:
        raise InvalidSpecError(
            f"NACA {code}: cambered section needs a non-zero camber position"
        )

    return NacaShape(m=m, p=p, t=t, designation=code)


def thickness_distribution(xc: NDArray[np.float64], t: float) -> NDArray[np.float64]:
    """Half-thickness yt/c at chord fractions xc."""
    a0, a1, a2, a3, a4 = _THICKNESS_COEFFS
    return 5.0 * t * (a0 * np.sqrt(xc) + a1 * xc + a2 * xc**2 + a3 * xc**3 + a4 * xc**4)


def camber_line(xc: NDArray[np.float64], m: float, p: float):
    """
    Mean camber line yc/c and slope dyc/dx at chord fractions xc.

    Two-piece polynomial, continuous with zero slope at xc = p.

    Returns:
        (yc, dyc_dx) arrays
    """
    xc = np.asarray(xc, dtype=np.float64)
    yc = np.zeros_like(xc)
    dyc = np.zeros_like(xc)

    if m == 0.0:
        return yc, dyc

    fore = xc <= p
    aft = ~fore

    yc[fore] = m / p**2 * (2 * p * xc[fore] - xc[fore]**2)
    dyc[fore] = 2 * m / p**2 * (p - xc[fore])

    yc[aft] = m / (1 - p)**2 * ((1 - 2 * p) + 2 * p * xc[aft] - xc[aft]**2)
    dyc[aft] = 2 * m / (1 - p)**2 * (p - xc[aft])

    return yc, dyc


def naca4_points(digits: str,
                 n_points: int,
                 chord: float = 1.0,
                 inverted: bool = False) -> NDArray[np.float64]:
    """
    Generate the surface loop of a NACA 4-digit section.

    Args:
        digits: 4-digit designation
        n_points: Nominal point count; the loop has 2*(n_points//2) + 1 points
        chord: Chord length [m]
        inverted: Negate the camber

    Returns:
        (2*(n_points//2) + 1, 2) array, upper TE -> LE -> lower TE
    """
    shape = parse_naca4(digits)
    if inverted:
        shape = shape.inverted()

    if chord <= 0:
        raise InvalidSpecError(f"chord must be positive, got {chord}")
    if n_points < 4:
        raise InvalidSpecError(f"n_points must be at least 4, got {n_points}")

    half = n_points // 2
    beta = np.linspace(0.0, np.pi, half + 1)
    xc = 0.5 * (1.0 - np.cos(beta))

    yt = thickness_distribution(xc, shape.t)
    yc, dyc = camber_line(xc, shape.m, shape.p)
    theta = np.arctan(dyc)

    x_upper = xc - yt * np.sin(theta)
    y_upper = yc + yt * np.cos(theta)
    x_lower = xc + yt * np.sin(theta)
    y_lower = yc - yt * np.cos(theta)

    # Upper TE -> LE (excluding LE), then lower LE -> TE
    x = np.concatenate([x_upper[half:0:-1], x_lower])
    y = np.concatenate([y_upper[half:0:-1], y_lower])

    return chord * np.column_stack([x, y])


def thin_airfoil_zero_lift_angle(shape: NacaShape) -> float:
    """
    Zero-lift angle of attack from thin-airfoil theory [rad].

    alpha_L0 = -(1/pi) * integral_0^pi dyc/dx * (cos(theta) - 1) dtheta,
    with x/c = (1 - cos(theta))/2. Zero for symmetric sections.
    """
    if shape.m == 0.0:
        return 0.0

    def integrand(theta):
        xc = 0.5 * (1.0 - np.cos(theta))
        _, dyc = camber_line(np.array([xc]), shape.m, shape.p)
        return dyc[0] * (np.cos(theta) - 1.0)

    # Slope has a kink at the camber break
    theta_p = float(np.arccos(1.0 - 2.0 * shape.p))
    value, _ = integrate.quad(integrand, 0.0, np.pi, points=[theta_p])

    return -value / np.pi
