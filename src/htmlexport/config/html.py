"""Html export configuration resolved for one build environment."""

from typing import List, Optional

from .models import BuildSettings, HtmlSettings, ProjectConfig

DEFAULT_EXPORT_PATH = "${cache}/html/export"
DEFAULT_FILE_PATH_TEMPLATE = "${entity.pathString}"
DEFAULT_FILE_NAME_TEMPLATE = "${entity.idString}"
DEFAULT_EXPORT_NAME = "html"


class HtmlModuleConfiguration:
    """Html export settings with build environment overrides applied.

    Each value is taken from the active build environment, then from the
    global ``html`` block, then from the hardcoded default.
    """

    def __init__(
        self,
        languages: Optional[List[str]] = None,
        language: Optional[str] = None,
        html: Optional[HtmlSettings] = None,
        build: Optional[BuildSettings] = None,
    ) -> None:
        self._languages = list(languages or ["en_GB"])
        self._language = language or self._languages[0]
        self._html = html or HtmlSettings()
        self._build = (build or BuildSettings()).html

    @classmethod
    def from_config(
        cls, config: ProjectConfig, environment: Optional[str] = None
    ) -> "HtmlModuleConfiguration":
        return cls(
            languages=config.languages,
            language=config.language,
            html=config.html,
            build=config.build_settings(environment),
        )

    def _get(self, name: str, default):
        for source in (self._build, self._html):
            value = getattr(source, name)
            if value is not None:
                return value
        return default

    @property
    def languages(self) -> List[str]:
        return list(self._languages)

    @languages.setter
    def languages(self, value: List[str]) -> None:
        self._languages = list(value)

    @property
    def language(self) -> str:
        return self._language

    @property
    def export_path(self) -> str:
        return self._get("export_path", DEFAULT_EXPORT_PATH)

    @property
    def file_path_template(self) -> str:
        return self._get("file_path_template", DEFAULT_FILE_PATH_TEMPLATE)

    @property
    def file_name_template(self) -> str:
        return self._get("file_name_template", DEFAULT_FILE_NAME_TEMPLATE)

    @property
    def beautify(self) -> bool:
        return bool(self._get("beautify", False))

    @property
    def export_name(self) -> str:
        return self._get("export_name", DEFAULT_EXPORT_NAME)
