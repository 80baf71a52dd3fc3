"""`${...}` string templates used for filenames and configured paths."""

import re
from collections.abc import Mapping
from typing import Any

from ..errors import TemplateExpansionError

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    """Convert ``idString`` style names to ``id_string``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def expand_template(template: str, bindings: Mapping) -> str:
    """Expand every ``${dotted.path}`` placeholder against ``bindings``.

    Each dotted segment is looked up as a mapping key first, then as an
    attribute, then as the snake_case form of the attribute name, so both
    ``${entity.idString}`` and ``${entity.id_string}`` resolve.

    Args:
        template: Template string, e.g. ``"${entity.pathString}/${language}"``
        bindings: Root names available to the template

    Returns:
        The expanded string. ``None`` values expand to an empty string.

    Raises:
        TemplateExpansionError: If a placeholder cannot be resolved
    """

    def replace(match: Any) -> str:
        expression = match.group(1).strip()
        if not expression:
            raise TemplateExpansionError(template, expression, "empty placeholder")

        value: Any = bindings
        for segment in expression.split("."):
            value = _resolve_segment(value, segment, template, expression)
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replace, template)


def _resolve_segment(value: Any, segment: str, template: str, expression: str) -> Any:
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        snake = camel_to_snake(segment)
        if snake in value:
            return value[snake]
    if segment and not segment.startswith("_"):
        if hasattr(value, segment):
            return getattr(value, segment)
        snake = camel_to_snake(segment)
        if hasattr(value, snake):
            return getattr(value, snake)
    raise TemplateExpansionError(template, expression, f"'{segment}' is not defined")
