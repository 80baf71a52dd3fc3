"""Entity model consumed by the export pipeline."""

from .entity import DEFAULT_CATEGORIES, Entity, EntityCategory, EntityId, Properties, Site
from .files import EntityFile, EntityFileMatcher, FileMatch, OutputFile
from .repository import EntityRepository, FileSystemRepository

__all__ = [
    "Site",
    "EntityCategory",
    "EntityId",
    "Entity",
    "Properties",
    "DEFAULT_CATEGORIES",
    "OutputFile",
    "EntityFile",
    "FileMatch",
    "EntityFileMatcher",
    "EntityRepository",
    "FileSystemRepository",
]
