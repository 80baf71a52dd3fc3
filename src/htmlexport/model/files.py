"""File records and entity file lookup."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Union

from ..errors import FileMatchError
from .entity import Site

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputFile:
    """An exported file: relative path plus encoded contents."""

    path: str
    contents: bytes

    @classmethod
    def from_text(cls, path: str, text: str, encoding: str = "utf-8") -> "OutputFile":
        return cls(path=path, contents=text.encode(encoding))

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")


@dataclass(frozen=True)
class EntityFile:
    filename: Path


@dataclass(frozen=True)
class FileMatch:
    file: EntityFile
    site: Site


class EntityFileMatcher:
    """Finds entity files, following site inheritance.

    ``extended/pages/p-start/p-start.j2`` matches the extended site's own
    file when present, otherwise the file of the site it extends.
    """

    def __init__(self, sites_path: Union[str, Path], sites: Dict[str, Site]) -> None:
        self.sites_path = Path(sites_path)
        self.sites = sites

    async def match_entity_file(self, relative_path: str) -> Optional[FileMatch]:
        """Look up ``<site>/<category>/<entity>/<file>`` below the sites root.

        Returns:
            The first match along the site lineage, or None

        Raises:
            FileMatchError: If the path does not address a known site
        """
        parts = PurePosixPath(relative_path.replace("\\", "/").lstrip("/")).parts
        if len(parts) < 2:
            raise FileMatchError(f"Not an entity file path: {relative_path}")

        site = self.sites.get(parts[0])
        if site is None:
            raise FileMatchError(f"Unknown site '{parts[0]}' in {relative_path}")

        for candidate in site.lineage:
            filename = self.sites_path.joinpath(candidate.name, *parts[1:])
            if filename.is_file():
                logger.debug(f"Matched {relative_path} -> {filename}")
                return FileMatch(file=EntityFile(filename=filename), site=candidate)

        logger.debug(f"No file matches {relative_path}")
        return None
