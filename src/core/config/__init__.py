"""Configuration schemas for validation."""

from .schemas import (
    NacaParameters,
    PanelMethodParameters,
    FlowConditions,
    StreamlineParameters,
    FlowConfig,
    OutputConfig,
    VisualizationConfig,
    CaseConfig,
)

__all__ = [
    "NacaParameters",
    "PanelMethodParameters",
    "FlowConditions",
    "StreamlineParameters",
    "FlowConfig",
    "OutputConfig",
    "VisualizationConfig",
    "CaseConfig",
]
