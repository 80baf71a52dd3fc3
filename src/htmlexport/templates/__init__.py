"""Template rendering for htmlexport."""

from .engine import RenderContext, TemplateEngine
from .filters import (
    FILTER_CALLBACKS_KEY,
    callback_filter,
    empty,
    image_url,
    link_url,
    module_classes,
    not_empty,
    register_custom_filters,
)
from .loader import EntityTemplateLoader
from .strings import expand_template

__all__ = [
    "TemplateEngine",
    "RenderContext",
    "EntityTemplateLoader",
    "expand_template",
    "FILTER_CALLBACKS_KEY",
    "callback_filter",
    "module_classes",
    "empty",
    "not_empty",
    "image_url",
    "link_url",
    "register_custom_filters",
]
