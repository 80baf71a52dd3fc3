"""Jinja2 template engine rendering synthesized entity templates."""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from jinja2 import (
    Environment,
    StrictUndefined,
    Template,
    TemplateError,
    sandbox,
    select_autoescape,
)

from ..errors import RenderError
from ..model.entity import Entity, Site
from .filters import FILTER_CALLBACKS_KEY, register_custom_filters
from .loader import EntityTemplateLoader

logger = logging.getLogger(__name__)


@dataclass
class RenderContext:
    """Everything a single render call may see.

    A fresh context is built for every (entity, setting, language) render, so
    nothing set up for one render is visible to the next.
    """

    entity: Entity
    language: Optional[str] = None
    country: Optional[str] = None
    configuration: Dict[str, Any] = field(default_factory=dict)
    filter_callbacks: Mapping[str, Callable] = field(default_factory=dict)
    custom_path: str = ""

    @property
    def site(self) -> Site:
        return self.entity.site

    def to_variables(self) -> Dict[str, Any]:
        """Template variables for this render."""
        return {
            "site": self.site,
            "entity": self.entity,
            "global": {},
            "location": {
                "site": self.site,
                "entity": self.entity,
                "customPath": self.custom_path,
            },
            "request": False,
            "__configuration__": dict(self.configuration),
            FILTER_CALLBACKS_KEY: dict(self.filter_callbacks),
        }


class TemplateEngine:
    """Renders template sources against the entity templates of a sites tree."""

    def __init__(
        self,
        sites_path: Union[str, Path],
        enable_sandbox: bool = False,
        cache_size: int = 128,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = False,
        extension: str = ".j2",
    ) -> None:
        """Initialize the template engine.

        Args:
            sites_path: Root directory holding one folder per site
            enable_sandbox: Use a sandboxed environment for untrusted templates
            cache_size: Size of compiled template cache
            trim_blocks: Remove first newline after block
            lstrip_blocks: Remove leading spaces/tabs from line start
            keep_trailing_newline: Keep trailing newline in templates
            extension: File extension of entity templates
        """
        self.sites_path = Path(sites_path)
        self.enable_sandbox = enable_sandbox
        self.cache_size = cache_size
        self.extension = extension
        self._options = {
            "trim_blocks": trim_blocks,
            "lstrip_blocks": lstrip_blocks,
            "keep_trailing_newline": keep_trailing_newline,
            "cache_size": cache_size,
        }

        # One environment per site, each with its own macro index
        self._environments: Dict[Optional[str], Environment] = {}
        self._template_cache: Dict[Tuple[Optional[str], str], Template] = {}
        self._lock = asyncio.Lock()

    def environment(self, site: Optional[Site] = None) -> Environment:
        """Return the (cached) environment rendering templates of ``site``."""
        key = site.name if site is not None else None
        if key not in self._environments:
            self._environments[key] = self._create_environment(site)
        return self._environments[key]

    def _create_environment(self, site: Optional[Site]) -> Environment:
        environment_class = (
            sandbox.SandboxedEnvironment if self.enable_sandbox else Environment
        )
        loader = EntityTemplateLoader(self.sites_path, site, self.extension)
        env = environment_class(
            loader=loader,
            undefined=StrictUndefined,
            autoescape=select_autoescape(
                enabled_extensions=("html", "htm", "xml"), default_for_string=False
            ),
            enable_async=True,
            **self._options,
        )
        register_custom_filters(env)
        loader.install_macros(env)
        return env

    def compile_template(self, source: str, site: Optional[Site] = None) -> Template:
        """Compile a template source with caching.

        Raises:
            TemplateSyntaxError: If template syntax is invalid
        """
        key = (site.name if site is not None else None, source)
        if key in self._template_cache:
            return self._template_cache[key]

        env = self.environment(site)
        template = env.from_string(source)

        if len(self._template_cache) >= self.cache_size:
            # Remove oldest entry (simple FIFO)
            oldest_key = next(iter(self._template_cache))
            del self._template_cache[oldest_key]

        self._template_cache[key] = template
        return template

    async def render(self, source: str, context: RenderContext) -> str:
        """Render ``source`` for one entity/language.

        Renders are serialized per engine instance.

        Raises:
            RenderError: If compiling or rendering fails
        """
        async with self._lock:
            logger.debug(
                f"Rendering <{context.entity}> [{context.language}]: {source.strip()}"
            )
            try:
                template = self.compile_template(source, context.site)
                return await template.render_async(context.to_variables())
            except TemplateError as e:
                raise RenderError(
                    f"Failed to render <{context.entity}>"
                    f"{f' [{context.language}]' if context.language else ''}: {e}"
                ) from e

    def invalidate(self) -> None:
        """Forget compiled templates and macro indexes."""
        self._environments.clear()
        self._template_cache.clear()
