"""YAML configuration loader for htmlexport."""

from pathlib import Path
from typing import Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .environment import EnvironmentSubstitutionError, substitute_environment_variables
from .models import ProjectConfig
from .pathes import PathesConfiguration

DEFAULT_CONFIG_FILENAME = "htmlexport.yaml"
# Expanded later against path and filename bindings
RESERVED_PLACEHOLDERS = (
    "root",
    "sites",
    "cache",
    "language",
    "country",
)


def find_config_file(start: Union[str, Path, None] = None) -> Path:
    """Locate ``htmlexport.yaml`` in ``start`` or any of its parents.

    Raises:
        FileNotFoundError: If no configuration file is found
    """
    directory = Path(start or Path.cwd()).absolute()
    if directory.is_file():
        return directory
    for candidate in (directory, *directory.parents):
        path = candidate / DEFAULT_CONFIG_FILENAME
        if path.is_file():
            return path
    raise FileNotFoundError(
        f"No {DEFAULT_CONFIG_FILENAME} found in {directory} or its parents. "
        f"Suggestion: Pass --config or create {DEFAULT_CONFIG_FILENAME}."
    )


def load_project_config(
    file_path: Union[str, Path],
    env_strict: bool = False,
) -> ProjectConfig:
    """Load and validate an htmlexport YAML configuration file.

    Args:
        file_path: Path to the YAML configuration file
        env_strict: Whether environment variable substitution is strict

    Returns:
        Validated ProjectConfig object

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the YAML is invalid or doesn't match the schema
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    if path.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigurationError(
            f"Invalid file extension: {path.suffix}. "
            f"Suggestion: Use .yaml or .yml extension for configuration files."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML file {path}: {e}. "
            f"Suggestion: Check YAML syntax using a validator."
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping at the top level"
        )

    try:
        data = substitute_environment_variables(
            data, strict=env_strict, reserved=RESERVED_PLACEHOLDERS
        )
    except EnvironmentSubstitutionError as e:
        raise EnvironmentSubstitutionError(
            f"Environment variable substitution failed in {path}: {e}"
        ) from e

    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed for {path}:\n{e}"
        ) from e


def load_project(
    file_path: Union[str, Path, None] = None,
) -> Tuple[ProjectConfig, PathesConfiguration]:
    """Load a project configuration and its path configuration.

    Relative paths in the configuration are resolved against the directory
    holding the configuration file.
    """
    path = find_config_file(file_path) if file_path is None else Path(file_path)
    config = load_project_config(path)
    pathes = PathesConfiguration(config.pathes, base_path=path.absolute().parent)
    return config, pathes


def describe_project(config: ProjectConfig, environment: Optional[str] = None) -> str:
    """Dump the effective configuration as YAML."""
    data = config.to_dict()
    if environment:
        data["environment"] = environment
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
