"""Resolution of logical project paths."""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..templates.strings import expand_template
from .models import PathesSettings

logger = logging.getLogger(__name__)


class PathesConfiguration:
    """Resolves ``${root}``/``${sites}``/``${cache}`` based paths to absolute paths."""

    def __init__(
        self,
        settings: Optional[PathesSettings] = None,
        base_path: Union[str, Path, None] = None,
    ) -> None:
        """Initialize the path configuration.

        Args:
            settings: Configured logical paths
            base_path: Directory relative roots are resolved against
                (normally the directory holding the project config file)
        """
        self.settings = settings or PathesSettings()
        base = Path(base_path) if base_path is not None else Path.cwd()

        root = self.settings.root
        self._root = self._absolute(Path(root) if root else base, base)
        self._sites = self._absolute(
            Path(expand_template(self.settings.sites, {"root": self._root})), self._root
        )
        self._cache = self._absolute(
            Path(expand_template(self.settings.cache, {"root": self._root})), self._root
        )

    @staticmethod
    def _absolute(path: Path, base: Path) -> Path:
        path = path.expanduser()
        if not path.is_absolute():
            path = base / path
        return path.absolute()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def sites(self) -> Path:
        return self._sites

    @property
    def cache(self) -> Path:
        return self._cache

    @property
    def bindings(self) -> Dict[str, str]:
        return {
            "root": str(self._root),
            "sites": str(self._sites),
            "cache": str(self._cache),
        }

    async def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a logical path like ``${cache}/html/export``.

        Relative results are taken relative to the project root.

        Raises:
            TemplateExpansionError: If the path references an unknown name
        """
        expanded = expand_template(str(path), self.bindings)
        resolved = self._absolute(Path(expanded), self._root)
        logger.debug(f"Resolved path {path} -> {resolved}")
        return resolved
