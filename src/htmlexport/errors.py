"""Exceptions and error reporting for htmlexport."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class HtmlExportError(Exception):
    """Base exception for all htmlexport errors."""

    pass


class ConfigurationError(HtmlExportError):
    """Raised when a project configuration cannot be loaded or validated."""

    pass


class TemplateExpansionError(HtmlExportError):
    """Raised when a `${...}` placeholder cannot be resolved."""

    def __init__(
        self, template: str, placeholder: Optional[str] = None, reason: str = ""
    ) -> None:
        self.template = template
        self.placeholder = placeholder
        if placeholder is None:
            message = f"Template '{template}'"
        else:
            message = f"Cannot expand '${{{placeholder}}}' in template '{template}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FileMatchError(HtmlExportError):
    """Raised when the entity file lookup itself fails."""

    pass


class RenderError(HtmlExportError):
    """Raised when the template engine fails to render a synthesized template."""

    pass


@dataclass
class RenderFailure:
    """A single failed (entity, setting, language) render."""

    entity: str
    setting: Dict[str, Any]
    language: Optional[str]
    error: Exception

    def describe(self) -> str:
        language = self.language or "-"
        return f"<{self.entity}> [{language}] {type(self.error).__name__}: {self.error}"


@dataclass
class ErrorReporter:
    """Collects isolated per-render failures and logs them.

    The export task never lets one failed render abort its siblings; instead
    each failure is handed to a reporter so callers can inspect what went
    missing once the run has finished.
    """

    failures: List[RenderFailure] = field(default_factory=list)

    def report(
        self,
        error: Exception,
        entity: Any = None,
        setting: Optional[Dict[str, Any]] = None,
        language: Optional[str] = None,
    ) -> RenderFailure:
        """Record a failure and log it."""
        failure = RenderFailure(
            entity=getattr(entity, "path_string", str(entity)),
            setting=dict(setting or {}),
            language=language,
            error=error,
        )
        self.failures.append(failure)
        logger.error(f"Export failed for {failure.describe()}")
        return failure

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def clear(self) -> None:
        self.failures = []
