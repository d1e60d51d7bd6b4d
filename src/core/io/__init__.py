"""I/O utilities for case files and results."""

from .case_loader import CaseLoader
from .case import Case
from .results import ResultExporter

__all__ = [
    "CaseLoader",
    "Case",
    "ResultExporter",
]
