"""Builds the template source that renders one entity export."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..model.entity import Entity
from ..model.files import EntityFileMatcher
from .filename import normalize_path
from .models import ExportSetting

logger = logging.getLogger(__name__)


class RenderKind(str, Enum):
    """How an entity is turned into markup."""

    MACRO_CALL = "macro"
    EXTENDS = "extends"
    INCLUDE = "include"

    @classmethod
    def for_type(cls, type_name: Optional[str]) -> "RenderKind":
        if type_name == "template":
            return cls.EXTENDS
        if type_name in ("page", "include"):
            return cls.INCLUDE
        return cls.MACRO_CALL


def default_macro_name(entity: Entity) -> str:
    """``m-teaser`` -> ``m_teaser``."""
    return entity.id_string.replace("-", "_")


def template_literal(value: Any) -> str:
    """Render a Python value as a Jinja2 literal."""
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "none"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(template_literal(item) for item in value) + "]"
    if isinstance(value, dict):
        items = (
            f"{template_literal(str(key))}: {template_literal(item)}"
            for key, item in value.items()
        )
        return "{" + ", ".join(items) + "}"
    return str(value)


@dataclass(frozen=True)
class RenderPlan:
    """The resolved render strategy of one export setting.

    ``MACRO_CALL`` plans carry the macro name and its ordered arguments;
    ``EXTENDS``/``INCLUDE`` plans carry the target template path, which is
    None when the entity has no template file (rendering an empty body).
    """

    kind: RenderKind
    macro: Optional[str] = None
    arguments: Tuple[Tuple[str, Any], ...] = ()
    path: Optional[str] = None

    @property
    def source(self) -> str:
        if self.kind is RenderKind.MACRO_CALL:
            arguments = ", ".join(
                f"{name}={template_literal(value)}" for name, value in self.arguments
            )
            return f"{{{{ {self.macro}({arguments}) }}}}"
        if self.path is None:
            return ""
        return f'{{% {self.kind.value} "{self.path}" %}}\n'


class TemplateSynthesizer:
    """Turns an (entity, setting) pair into a ``RenderPlan``."""

    def __init__(
        self,
        file_matcher: EntityFileMatcher,
        sites_path: Union[str, Path],
        extension: str = ".j2",
    ) -> None:
        self.file_matcher = file_matcher
        self.sites_path = Path(sites_path)
        self.extension = extension

    async def synthesize(
        self, entity: Entity, setting: Optional[ExportSetting] = None
    ) -> RenderPlan:
        """Resolve the render strategy for ``entity``.

        Only template/page/include strategies touch the filesystem, through a
        single entity file lookup. A missing file is not an error.

        Raises:
            FileMatchError: If the lookup itself fails
        """
        setting = setting or ExportSetting()
        kind = RenderKind.for_type(setting.type or entity.id.category.type)

        if kind is RenderKind.MACRO_CALL:
            return RenderPlan(
                kind=kind,
                macro=setting.macro or default_macro_name(entity),
                arguments=tuple(setting.macro_arguments.items()),
            )

        relative = f"{entity.path_string}/{entity.id_string}{self.extension}"
        match = await self.file_matcher.match_entity_file(relative)
        if match is None or match.file is None:
            logger.debug(f"No template file for <{entity}>, rendering an empty body")
            return RenderPlan(kind=kind)
        return RenderPlan(kind=kind, path=self._template_name(match.file.filename))

    def _template_name(self, filename: Path) -> str:
        try:
            name = Path(filename).relative_to(self.sites_path).as_posix()
        except ValueError:
            name = str(filename).replace(str(self.sites_path), "", 1)
        return normalize_path(name)
