"""Custom Jinja2 filters for entity templates.

Every filter can be overridden per render: when the render context carries a
filter callback registered under one of the filter's names, the callback
receives ``(value, *args)`` and its result is used instead of the default.
"""

import functools
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable

from jinja2 import pass_context
from jinja2.runtime import Context

FILTER_CALLBACKS_KEY = "__filter_callbacks__"


def _lookup_callback(context: Context, names: Iterable[str]) -> Any:
    callbacks = context.get(FILTER_CALLBACKS_KEY) or {}
    for name in names:
        if name in callbacks:
            return callbacks[name]
    return None


def callback_filter(*names: str) -> Callable:
    """Wrap a filter so a per-render callback registered under ``names`` wins."""

    def decorator(func: Callable) -> Callable:
        @pass_context
        @functools.wraps(func)
        def wrapper(context: Context, value: Any, *args: Any, **kwargs: Any) -> Any:
            callback = _lookup_callback(context, names)
            if callback is not None:
                return callback(value, *args, **kwargs)
            return func(value, *args, **kwargs)

        wrapper.filter_names = names
        return wrapper

    return decorator


def _split_classes(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(item) for item in value if item]


@callback_filter("module_classes", "moduleClasses")
def module_classes(value: Any, module_class: str = "") -> str:
    """Turn modifier names into BEM modifier classes.

    ``"hero big" | module_classes("m-teaser")`` yields
    ``"m-teaser--hero m-teaser--big"``; classes already prefixed with the
    module class are kept as they are.
    """
    classes = []
    for item in _split_classes(value):
        if not module_class or item.startswith(module_class):
            classes.append(item)
        else:
            classes.append(f"{module_class}--{item}")
    return " ".join(classes)


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, set, dict)):
        return len(value) == 0
    return False


@callback_filter("empty")
def empty(value: Any) -> bool:
    """Check whether a value is None, False or an empty string/container."""
    return _is_empty(value)


@callback_filter("notempty", "not_empty")
def not_empty(value: Any) -> bool:
    return not _is_empty(value)


@callback_filter("image_url", "imageUrl")
def image_url(value: Any, width: int = 0, height: int = 0, force: bool = False) -> str:
    """Build the url of an image asset.

    Absolute urls are returned untouched; asset names are placed below
    ``/images/``. Width and height are appended as a query string.
    """
    url = str(value or "")
    if not url.startswith(("/", "http://", "https://", "data:")):
        url = f"/images/{url}"
    params = []
    if width:
        params.append(f"w={int(width)}")
    if height:
        params.append(f"h={int(height)}")
    if force:
        params.append("force=1")
    if params:
        url += ("&" if "?" in url else "?") + "&".join(params)
    return url


@callback_filter("link_url", "linkUrl")
def link_url(value: Any) -> str:
    """Resolve a link setting to a href (``url`` key or the value itself)."""
    if isinstance(value, Mapping):
        value = value.get("url")
    if isinstance(value, str) and value:
        return value
    return "JavaScript:;"


FILTERS: Dict[str, Callable] = {}
for _filter in (module_classes, empty, not_empty, image_url, link_url):
    for _name in _filter.filter_names:
        FILTERS[_name] = _filter


def register_custom_filters(env: Any) -> None:
    """Register all custom filters with a Jinja2 environment.

    Args:
        env: Jinja2 Environment instance
    """
    env.filters.update(FILTERS)
