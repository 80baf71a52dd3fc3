from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PathesSettings(BaseModel):
    """Logical project paths.

    Values may reference each other through ``${root}``, ``${sites}`` and
    ``${cache}`` placeholders; they are resolved by ``PathesConfiguration``.

    Attributes:
        root: Project root. Defaults to the directory holding the config file.
        sites: Directory containing one folder per site.
        cache: Directory for generated artifacts.
    """

    root: Optional[str] = None
    sites: str = "${root}/sites"
    cache: str = "${root}/.cache"


class HtmlSettings(BaseModel):
    """Settings of the ``html`` configuration block.

    Every field is optional so an environment block can override a single
    value while inheriting the rest from the global block.

    Attributes:
        export_path: Default destination for exported files.
        file_path_template: Template for the directory part of a filename.
        file_name_template: Template for the name part of a filename.
        beautify: Whether exported files are passed through the formatter.
        export_name: Name of the entity export profile to read
            (``export.<export_name>`` in entity properties).

    Example:
        HtmlSettings(
            exportPath="${cache}/html/export",
            fileNameTemplate="${entity.idString}-${language}",
            beautify=True,
        )
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    export_path: Optional[str] = Field(default=None, alias="exportPath")
    file_path_template: Optional[str] = Field(default=None, alias="filePathTemplate")
    file_name_template: Optional[str] = Field(default=None, alias="fileNameTemplate")
    beautify: Optional[bool] = None
    export_name: Optional[str] = Field(default=None, alias="exportName")


class BuildSettings(BaseModel):
    """Overrides applied when a named build environment is active."""

    html: HtmlSettings = Field(default_factory=HtmlSettings)


class ProjectConfig(BaseModel):
    """Root configuration of an htmlexport project.

    Attributes:
        pathes: Logical project paths.
        languages: Languages every entity is rendered in, in render order.
        language: Default language; falls back to the first of ``languages``.
        html: Global html export settings.
        environments: Named build environments overriding ``html``.

    Example:
        ProjectConfig(
            languages=["en_GB", "de_DE"],
            html={"beautify": False},
            environments={"production": {"html": {"beautify": True}}},
        )
    """

    pathes: PathesSettings = Field(default_factory=PathesSettings)
    languages: List[str] = Field(default_factory=lambda: ["en_GB"])
    language: Optional[str] = None
    html: HtmlSettings = Field(default_factory=HtmlSettings)
    environments: Dict[str, BuildSettings] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _default_language(self) -> "ProjectConfig":
        if not self.languages:
            raise ValueError("At least one language must be configured")
        if self.language is None:
            self.language = self.languages[0]
        return self

    def build_settings(self, environment: Optional[str]) -> BuildSettings:
        """Return the overrides of ``environment`` (empty when unknown)."""
        if environment and environment in self.environments:
            return self.environments[environment]
        return BuildSettings()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
