"""Data models for export settings and export results."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import RenderFailure
from ..model.files import OutputFile


class ExportSetting(BaseModel):
    """One export release declared by an entity under ``export.<name>``.

    Attributes:
        macro: Macro to call. Defaults to the entity id with dashes replaced
            by underscores (``m-teaser`` -> ``m_teaser``).
        parameters: Macro arguments in call order (``arguments`` is accepted
            as an alias for older settings).
        type: ``template``, ``page``, ``include`` or unset for a macro call.
            Unset falls back to the entity category type.
        filename: Literal or templated filename, with or without a path.
        file_path_template: Overrides the configured path template.
        file_name_template: Overrides the configured name template.
        configuration: Free-form values exposed as ``__configuration__``.

    Example:
        ExportSetting(
            macro="m_teaser_hero",
            parameters={"classes": "m-foo--teaser", "count": 3},
            filename="${entity.idString}-${language}",
        )
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    macro: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    arguments: Optional[Dict[str, Any]] = None
    type: Optional[str] = None
    filename: Optional[str] = None
    file_path_template: Optional[str] = Field(default=None, alias="filePathTemplate")
    file_name_template: Optional[str] = Field(default=None, alias="fileNameTemplate")
    configuration: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def parse(
        cls, setting: Union["ExportSetting", Mapping[str, Any], None]
    ) -> "ExportSetting":
        if isinstance(setting, ExportSetting):
            return setting
        return cls.model_validate(dict(setting or {}))

    @property
    def macro_arguments(self) -> Dict[str, Any]:
        return dict(self.parameters or self.arguments or {})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)


@dataclass
class TaskParameters:
    """Run parameters of the export task."""

    query: str = "*"
    export_name: Optional[str] = None
    filter_callbacks: Dict[str, Callable] = field(default_factory=dict)
    file_path_template: Optional[str] = None
    file_name_template: Optional[str] = None


@dataclass
class ExportResult:
    """Result of a complete export run."""

    files: List[OutputFile] = field(default_factory=list)
    failures: List[RenderFailure] = field(default_factory=list)
    render_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.files)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def success_rate(self) -> float:
        """Calculate success rate percentage."""
        total = self.success_count + self.error_count
        return (self.success_count / total * 100) if total > 0 else 0.0

    @property
    def is_successful(self) -> bool:
        return not self.failures

    def get_summary(self) -> Dict[str, Any]:
        return {
            "files": self.success_count,
            "failures": self.error_count,
            "success_rate": self.success_rate,
            "render_time": self.render_time,
            **self.metadata,
        }
