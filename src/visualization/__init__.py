"""Streamline tracing and plots for panel method solutions."""

from .streamlines import (
    Streamline,
    StreamlineField,
    TerminationReason,
    field_velocity,
    field_bounds,
    trace_streamline,
    generate_streamline_field,
    velocity_magnitude_field,
    streamline_density,
    find_stagnation_points,
)
from .plots import plot_cp_distribution, plot_streamlines, save_figure

__all__ = [
    'Streamline',
    'StreamlineField',
    'TerminationReason',
    'field_velocity',
    'field_bounds',
    'trace_streamline',
    'generate_streamline_field',
    'velocity_magnitude_field',
    'streamline_density',
    'find_stagnation_points',
    'plot_cp_distribution',
    'plot_streamlines',
    'save_figure',
]
