"""Template loader that makes entity macros available everywhere."""

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, TemplateSyntaxError, nodes, pass_context
from jinja2.runtime import Context

from ..model.entity import Site

logger = logging.getLogger(__name__)


def lazy_macro(template_name: str, macro_name: str) -> Callable:
    """Template global calling ``macro_name`` of ``template_name``.

    The defining template is only loaded when the macro is called, with the
    caller's context, so entity templates may reference each other's macros
    in both directions.
    """

    @pass_context
    async def call(context: Context, *args: Any, **kwargs: Any) -> Any:
        template = context.environment.get_template(template_name)
        module = await template.make_module_async(context.get_all())
        result = getattr(module, macro_name)(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    call.__name__ = macro_name
    return call


class EntityTemplateLoader(FileSystemLoader):
    """FileSystemLoader over the sites root with site-wide macros.

    Entity templates call each other's macros without importing them. Macros
    are collected from all ``*.j2`` files of the site and the sites it
    extends; a macro of the site itself shadows an inherited one. Every
    collected macro is installed as an environment global by
    ``install_macros``. Macros defined in the calling template win over the
    globals.
    """

    def __init__(
        self,
        sites_path: Union[str, Path],
        site: Optional[Site] = None,
        extension: str = ".j2",
    ) -> None:
        super().__init__(str(sites_path))
        self.sites_path = Path(sites_path)
        self.site = site
        self.extension = extension
        self._macros: Optional[Dict[str, str]] = None

    def macros(self, environment: Environment) -> Dict[str, str]:
        """Map of macro name -> template name defining it."""
        if self._macros is None:
            self._macros = self._scan(environment)
        return self._macros

    def _scan(self, environment: Environment) -> Dict[str, str]:
        if self.site is not None:
            roots = [self.sites_path / site.name for site in self.site.lineage]
        else:
            roots = sorted(path for path in self.sites_path.iterdir() if path.is_dir())

        macros: Dict[str, str] = {}
        for root in roots:
            if not root.is_dir():
                continue
            for path in sorted(root.rglob(f"*{self.extension}")):
                name = path.relative_to(self.sites_path).as_posix()
                try:
                    ast = environment.parse(path.read_text(encoding="utf-8"), name=name)
                except TemplateSyntaxError as e:
                    logger.warning(f"Skipping macros of {name}: {e}")
                    continue
                for node in ast.body:
                    if isinstance(node, nodes.Macro):
                        macros.setdefault(node.name, name)

        logger.debug(f"Indexed {len(macros)} macro(s) for site {self.site or '*'}")
        return macros

    def install_macros(self, environment: Environment) -> None:
        """Expose every indexed macro as a global of ``environment``."""
        for macro_name, template_name in self.macros(environment).items():
            environment.globals[macro_name] = lazy_macro(template_name, macro_name)

    def invalidate(self) -> None:
        self._macros = None
