"""
Pydantic schemas for configuration validation.

The parameter models double as the immutable parameter structs passed into
every solver call; CaseConfig is the top-level YAML case file.
"""

import re
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, field_validator


_NACA4_PATTERN = re.compile(r"^\d{4}$")


class NacaParameters(BaseModel):
    """NACA 4-digit section definition."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    digits: str = Field(
        default="0012",
        description="NACA 4-digit designation, e.g. '2412'"
    )
    n_points: Optional[int] = Field(
        default=None,
        ge=4,
        le=1001,
        description="Surface point count (None = derived from the panel count)"
    )
    chord: float = Field(
        default=1.0,
        gt=0,
        description="Chord length [m]"
    )
    inverted: bool = Field(
        default=False,
        description="Mirror the camber line (negative camber)"
    )

    @field_validator('digits', mode='before')
    @classmethod
    def check_digits(cls, v):
        """Accept ints and padded strings, reject anything but 4 digits."""
        if isinstance(v, int):
            v = f"{v:04d}"
        v = str(v).strip()
        if v.upper().startswith("NACA"):
            v = v[4:].strip()
        if not _NACA4_PATTERN.match(v):
            raise ValueError(f"NACA digits must be 4 digits, got '{v}'")
        return v


class PanelMethodParameters(BaseModel):
    """Panel solver configuration."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    n_panels: int = Field(
        default=120,
        ge=20,
        le=500,
        description="Requested panel count (clamped to available points - 1)"
    )
    epsilon: float = Field(
        default=1e-9,
        gt=0,
        description="Control point offset as a fraction of chord"
    )
    regularization: float = Field(
        default=1e-12,
        ge=0,
        description="Tikhonov term added to every diagonal entry"
    )
    pivot_tolerance: float = Field(
        default=1e-14,
        gt=0,
        description="Smallest acceptable pivot magnitude"
    )
    max_iterations: int = Field(
        default=1000,
        gt=0,
        description="Reserved for iterative solvers (the direct solve ignores it)"
    )
    tolerance: float = Field(
        default=1e-10,
        gt=0,
        description="Linear solver tolerance"
    )


class FlowConditions(BaseModel):
    """Freestream conditions. Angle of attack is in radians."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    velocity: float = Field(default=10.0, gt=0, description="U_inf [m/s]")
    density: float = Field(default=1.225, gt=0, description="rho [kg/m³]")
    angle_of_attack: float = Field(default=0.0, description="alpha [rad], positive nose up")

    @classmethod
    def from_degrees(cls,
                     velocity: float = 10.0,
                     alpha_deg: float = 0.0,
                     density: float = 1.225) -> "FlowConditions":
        """Build from an angle of attack given in degrees."""
        return cls(velocity=velocity, density=density,
                   angle_of_attack=float(np.radians(alpha_deg)))

    @property
    def alpha_deg(self) -> float:
        return float(np.degrees(self.angle_of_attack))

    @property
    def freestream(self) -> NDArray[np.float64]:
        """Freestream velocity vector (2,)."""
        return self.velocity * np.array([np.cos(self.angle_of_attack),
                                         np.sin(self.angle_of_attack)])

    @property
    def dynamic_pressure(self) -> float:
        """q = 0.5*rho*U_inf² [Pa]"""
        return 0.5 * self.density * self.velocity ** 2


class StreamlineParameters(BaseModel):
    """Streamline seeding and integration settings."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    n_streamlines: int = Field(default=15, ge=1, description="Number of seeds")
    step_size: float = Field(default=0.01, gt=0, description="RK2 step length [m]")
    max_steps: int = Field(default=1000, ge=1, description="Step cap per streamline")
    seed_distance: float = Field(
        default=1.5,
        gt=0,
        description="Domain padding upstream/downstream of the airfoil [m]"
    )
    y_range: float = Field(
        default=1.0,
        gt=0,
        description="Domain padding above/below the airfoil [m]"
    )
    min_velocity_fraction: float = Field(
        default=0.01,
        gt=0,
        lt=1,
        description="Stagnation threshold as a fraction of U_inf"
    )
    min_points: int = Field(
        default=6,
        ge=1,
        description="Streamlines with fewer points are dropped"
    )


class FlowConfig(BaseModel):
    """Flow block of a case file (angle in degrees)."""
    model_config = ConfigDict(extra="forbid")

    velocity: float = Field(default=10.0, gt=0, description="U_inf [m/s]")
    density: float = Field(default=1.225, gt=0, description="rho [kg/m³]")
    alpha_deg: float = Field(default=0.0, description="Angle of attack [deg]")
    reference_pressure: float = Field(
        default=101325.0,
        description="Freestream static pressure for Bernoulli [Pa]"
    )

    @field_validator('alpha_deg')
    @classmethod
    def check_alpha(cls, v):
        """Keep the angle in a range where potential flow is meaningful."""
        if abs(v) >= 90.0:
            raise ValueError(f"alpha_deg must be within (-90, 90), got {v}")
        return v

    def to_conditions(self) -> FlowConditions:
        return FlowConditions.from_degrees(self.velocity, self.alpha_deg, self.density)


class OutputConfig(BaseModel):
    """Output configuration."""
    model_config = ConfigDict(extra="forbid")

    directory: str = Field(
        default="out",
        description="Output directory (relative to the case directory)"
    )
    save_surface: bool = Field(default=True, description="Write surface.csv")
    save_summary: bool = Field(default=True, description="Write summary.json")
    save_streamlines: bool = Field(default=True, description="Write streamlines.json")


class VisualizationConfig(BaseModel):
    """Visualization settings."""
    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True, description="Save plots")
    show_panels: bool = Field(default=True, description="Draw panel outline")
    show_normals: bool = Field(default=False, description="Show panel normals")
    figsize: Tuple[float, float] = Field(default=(12.0, 8.0), description="Figure size")
    dpi: int = Field(default=150, gt=0, description="Saved figure resolution")


class CaseConfig(BaseModel):
    """Top-level case configuration."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(..., description="Case name")
    description: str = Field(default="", description="Case description")

    airfoil: NacaParameters = Field(
        default_factory=NacaParameters,
        description="Section definition"
    )
    panels: PanelMethodParameters = Field(
        default_factory=PanelMethodParameters,
        description="Solver settings"
    )
    flow: FlowConfig = Field(
        default_factory=FlowConfig,
        description="Freestream conditions"
    )
    streamlines: Optional[StreamlineParameters] = Field(
        default=None,
        description="Streamline settings (None = skip tracing)"
    )
    convergence: Optional[List[int]] = Field(
        default=None,
        description="Panel counts for a convergence study"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Output settings"
    )
    visualization: VisualizationConfig = Field(
        default_factory=VisualizationConfig,
        description="Visualization settings"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Check name is not blank."""
        if not v or not v.strip():
            raise ValueError("Case name cannot be empty")
        return v.strip()

    @field_validator('convergence')
    @classmethod
    def check_convergence(cls, v):
        """Panel counts must be in the solver range and distinct."""
        if v is None:
            return v
        if len(v) < 2:
            raise ValueError("A convergence study needs at least 2 panel counts")
        bad = [n for n in v if n < 20 or n > 500]
        if bad:
            raise ValueError(f"Panel counts out of range [20, 500]: {bad}")
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate panel counts: {v}")
        return sorted(v)
