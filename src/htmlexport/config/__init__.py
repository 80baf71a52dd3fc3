"""Configuration management for htmlexport."""

from .environment import EnvironmentSubstitutionError, substitute_environment_variables
from .html import HtmlModuleConfiguration
from .loader import (
    describe_project,
    find_config_file,
    load_project,
    load_project_config,
)
from .models import BuildSettings, HtmlSettings, PathesSettings, ProjectConfig
from .pathes import PathesConfiguration

__all__ = [
    # Models
    "ProjectConfig",
    "PathesSettings",
    "HtmlSettings",
    "BuildSettings",
    # Resolved configurations
    "HtmlModuleConfiguration",
    "PathesConfiguration",
    # Loaders
    "find_config_file",
    "load_project",
    "load_project_config",
    "describe_project",
    # Environment
    "EnvironmentSubstitutionError",
    "substitute_environment_variables",
]
