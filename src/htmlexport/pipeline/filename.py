"""Output filename derivation for exported entities."""

import logging
import posixpath
from typing import Any, Dict, Optional

from ..config.html import HtmlModuleConfiguration
from ..errors import TemplateExpansionError
from ..model.entity import Entity
from ..templates.strings import expand_template
from .models import ExportSetting

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


def normalize_path(path: str) -> str:
    """Use forward slashes and drop leading slashes."""
    return path.replace("\\", "/").lstrip("/")


def country_for(language: str) -> str:
    """``de_DE`` -> ``DE``; a bare language tag is its own country."""
    return language.split("_")[-1]


class FilenameResolver:
    """Computes the output path of an (entity, setting, language) render.

    Templates are chosen by precedence: the setting's own template, then the
    task parameter, then the module configuration (build environment, global
    config, hardcoded default). An explicitly empty template is honoured.
    """

    def __init__(self, configuration: HtmlModuleConfiguration) -> None:
        self.configuration = configuration

    def bindings(self, entity: Entity, language: Optional[str] = None) -> Dict[str, Any]:
        language = language or self.configuration.language
        return {
            "entity": entity,
            "entityId": entity.id,
            "site": entity.site,
            "entityCategory": entity.id.category,
            "language": language,
            "country": country_for(language),
        }

    def resolve(
        self,
        entity: Entity,
        language: Optional[str] = None,
        setting: Optional[ExportSetting] = None,
        file_path_template: Optional[str] = None,
        file_name_template: Optional[str] = None,
    ) -> str:
        """Return the relative output filename, always ending in ``.html``.

        Raises:
            TemplateExpansionError: If a template cannot be expanded or the
                result would be an empty filename
        """
        setting = setting or ExportSetting()
        bindings = self.bindings(entity, language)

        path_template = _first_set(
            setting.file_path_template,
            file_path_template,
            self.configuration.file_path_template,
        )
        name_template = setting.filename or _first_set(
            setting.file_name_template,
            file_name_template,
            self.configuration.file_name_template,
        )

        result = expand_template(name_template, bindings)
        if not result.strip():
            raise TemplateExpansionError(name_template, reason="expands to an empty filename")

        # Bare names are placed below the entity path
        if "/" not in result and "\\" not in result:
            filepath = normalize_path(expand_template(path_template, bindings))
            result = posixpath.join(filepath, result)

        result = normalize_path(result)
        if not result.endswith(HTML_SUFFIX):
            result += HTML_SUFFIX

        logger.debug(f"Filename for <{entity}> [{bindings['language']}]: {result}")
        return result


def _first_set(*values: Optional[str]) -> str:
    for value in values:
        if value is not None:
            return value
    return ""
