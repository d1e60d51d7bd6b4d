"""
YAML case file loader with validation.
"""

from pathlib import Path
from typing import Union
import yaml

from ..config.schemas import CaseConfig
from .case import Case


class CaseLoader:
    """Load and validate airfoil cases from YAML files."""

    @staticmethod
    def load(filepath: Union[str, Path]) -> CaseConfig:
        """
        Load and validate a case file.

        Args:
            filepath: Path to YAML case file

        Returns:
            Validated config

        Raises:
            FileNotFoundError: file does not exist
            pydantic.ValidationError: invalid or unknown keys
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Case file not found: {filepath}")

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        return CaseConfig(**raw_config)

    @staticmethod
    def validate(filepath: Union[str, Path]) -> bool:
        """
        Validate case file without building anything.

        Returns:
            True if valid, raises ValidationError otherwise
        """
        CaseLoader.load(filepath)
        return True

    @staticmethod
    def load_case(case_path: Union[str, Path]) -> Case:
        """
        Load a case and return a Case object.

        Usage:
            case = CaseLoader.load_case('cases/naca2412')
            solution = solve_panel_method(case.geometry, case.flow, case.panel_params)

        Args:
            case_path: Case directory (containing case.yaml) or a YAML file

        Returns:
            Case with lazily built geometry
        """
        case_path = Path(case_path)
        if case_path.is_dir():
            case_file = case_path / "case.yaml"
            if not case_file.exists():
                raise FileNotFoundError(f"No case.yaml found in {case_path}")
        else:
            case_file = case_path

        config = CaseLoader.load(case_file)

        return Case(config=config, case_dir=case_file.parent)

    @staticmethod
    def save(config: CaseConfig, filepath: Union[str, Path]) -> Path:
        """Write a config back to YAML (round-trips through load)."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        data = config.model_dump(mode="json", exclude_none=True)
        with open(filepath, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

        return filepath
