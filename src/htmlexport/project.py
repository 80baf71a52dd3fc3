"""Wires configuration, repository and engine into export tasks."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .config import (
    HtmlModuleConfiguration,
    PathesConfiguration,
    ProjectConfig,
    load_project,
)
from .errors import ErrorReporter
from .model.files import EntityFileMatcher
from .model.repository import FileSystemRepository
from .pipeline.task import ExportHtmlTask
from .templates.engine import TemplateEngine

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A loaded project with its shared collaborators.

    The template engine is shared by every task created from the project.
    """

    config: ProjectConfig
    pathes: PathesConfiguration
    environment: Optional[str] = None

    def __post_init__(self) -> None:
        self.html = HtmlModuleConfiguration.from_config(self.config, self.environment)
        self.repository = FileSystemRepository(self.pathes.sites)
        self.engine = TemplateEngine(self.pathes.sites)
        self._file_matcher: Optional[EntityFileMatcher] = None

    @classmethod
    def load(
        cls,
        config_path: Union[str, Path, None] = None,
        environment: Optional[str] = None,
    ) -> "Project":
        config, pathes = load_project(config_path)
        logger.info(f"Loaded project from {pathes.root} (environment: {environment})")
        return cls(config=config, pathes=pathes, environment=environment)

    @property
    def file_matcher(self) -> EntityFileMatcher:
        if self._file_matcher is None:
            self._file_matcher = EntityFileMatcher(
                self.pathes.sites, self.repository.sites
            )
        return self._file_matcher

    def export_task(
        self, error_reporter: Optional[ErrorReporter] = None, **parameters: Any
    ) -> ExportHtmlTask:
        return ExportHtmlTask(
            self.repository,
            self.engine,
            self.file_matcher,
            self.html,
            error_reporter=error_reporter,
            **parameters,
        )

    async def export_path(self, destination: Union[str, Path, None] = None) -> Path:
        """Resolve the destination directory (``html.exportPath`` by default)."""
        return await self.pathes.resolve(destination or self.html.export_path)
