"""Job file schema and loading system.

This package provides JSON-based job file loading and validation. It
includes Pydantic models for schema validation, a loader with error
handling, and cutting advisory checks.

Public API:
    - JobConfiguration: Root configuration model
    - PieceConfig: One piece entry
    - OutputConfig: Output preferences
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for job file errors
    - ValidationResult: Container for validation results
    - validate_config: Perform full job validation
    - config_to_piece_inputs: Convert configured pieces to piece inputs

Example:
    >>> from pathlib import Path
    >>> from telas.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("job.json"))
    ...     print(f"{len(config.pieces)} piece entries")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from telas.application.config.adapter import config_to_piece_inputs
from telas.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from telas.application.config.schema import (
    SUPPORTED_VERSIONS,
    JobConfiguration,
    OutputConfig,
    PieceConfig,
)
from telas.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    check_cutting_advisories,
    validate_config,
)

__all__ = [
    "ConfigError",
    "JobConfiguration",
    "OutputConfig",
    "PieceConfig",
    "SUPPORTED_VERSIONS",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_cutting_advisories",
    "config_to_piece_inputs",
    "load_config",
    "load_config_from_dict",
    "validate_config",
]
