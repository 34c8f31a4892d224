"""Handles the parsing and validation of the RegexSolve configuration file."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class SolverConfig(BaseModel):
    """The root configuration for RegexSolve."""

    model_config = ConfigDict(extra="forbid")

    match_timeout: float | None = Field(default=5.0, gt=0, description="Time budget in seconds for each engine call.")
    time_precision: int = Field(default=4, ge=0, le=9, description="Decimal places kept in reported elapsed times.")
    max_tests: int | None = Field(default=None, ge=1, description="Maximum number of samples in one batch request.")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SolverConfig":
        """
        Create a SolverConfig object from a dictionary.

        Raises:
            ValueError: If the configuration is invalid.

        """
        try:
            return cls(**data)
        except ValidationError as e:
            msg = f"Invalid or missing configuration: {e}"
            raise ValueError(msg) from e


def load_config(config_path: str) -> SolverConfig:
    """
    Load, parse, and validate the YAML configuration file.

    An empty file yields the default configuration.

    Args:
        config_path: The path to the config.yaml file.

    Returns:
        A SolverConfig object representing the validated configuration.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If there is a syntax error in the YAML file.
        ValueError: If the configuration is invalid.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e

    if data is None:
        logger.debug("Configuration file %s is empty; using defaults.", path)
        return SolverConfig()
    if not isinstance(data, dict):
        msg = "Invalid or missing configuration: config file must be a YAML mapping (dictionary)."
        raise ValueError(msg)  # noqa: TRY004

    return SolverConfig.from_dict(data)
