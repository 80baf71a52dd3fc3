"""Filesystem-backed entity repository."""

import logging
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

import yaml

from ..errors import ConfigurationError
from .entity import DEFAULT_CATEGORIES, Entity, EntityCategory, EntityId, Properties, Site

logger = logging.getLogger(__name__)

SITE_FILENAME = "site.yaml"
ENTITY_FILENAME = "entity.yaml"


class EntityRepository(Protocol):
    """Anything that resolves a query to an ordered list of entities."""

    async def resolve_entities(self, query: str = "*") -> List[Entity]: ...


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


class FileSystemRepository:
    """Reads sites and entities from a ``sites`` directory.

    Layout::

        sites/
          base/
            site.yaml                  # optional, `extends: <site>`
            modules/
              m-teaser/
                entity.yaml            # optional entity properties
                m-teaser.j2

    A site extending another one inherits all of its entities; properties
    declared by the extending site are deep-merged over the inherited ones.
    """

    def __init__(
        self,
        sites_path: Union[str, Path],
        categories: Sequence[EntityCategory] = DEFAULT_CATEGORIES,
    ) -> None:
        self.sites_path = Path(sites_path)
        self.categories = list(categories)
        self._sites: Optional[Dict[str, Site]] = None
        self._entities: Optional[List[Entity]] = None

    @property
    def sites(self) -> Dict[str, Site]:
        """Sites ordered so that every site follows the site it extends."""
        if self._sites is None:
            self._sites = self._load_sites()
        return self._sites

    @property
    def entities(self) -> List[Entity]:
        if self._entities is None:
            self._entities = self._load_entities()
        return self._entities

    def reload(self) -> None:
        self._sites = None
        self._entities = None

    def _load_sites(self) -> Dict[str, Site]:
        if not self.sites_path.is_dir():
            raise ConfigurationError(f"Sites directory does not exist: {self.sites_path}")

        declared: Dict[str, Optional[str]] = {}
        for directory in sorted(self.sites_path.iterdir()):
            if not directory.is_dir() or directory.name.startswith((".", "_")):
                continue
            extends = _read_yaml(directory / SITE_FILENAME).get("extends")
            declared[directory.name] = str(extends) if extends else None

        sites: Dict[str, Site] = {}

        def build(name: str, chain: List[str]) -> Site:
            if name in sites:
                return sites[name]
            if name in chain:
                raise ConfigurationError(
                    f"Circular site inheritance: {' -> '.join(chain + [name])}"
                )
            if name not in declared:
                raise ConfigurationError(f"Site '{chain[-1]}' extends unknown site '{name}'")
            parent_name = declared[name]
            parent = build(parent_name, chain + [name]) if parent_name else None
            sites[name] = Site(name=name, extends=parent)
            return sites[name]

        for name in declared:
            build(name, [])

        logger.debug(f"Loaded {len(sites)} site(s) from {self.sites_path}")
        return sites

    def _load_entities(self) -> List[Entity]:
        entities: List[Entity] = []
        by_site: Dict[str, Dict[tuple, Entity]] = {}

        for site in self.sites.values():
            own: Dict[tuple, Entity] = {}
            for category in self.categories:
                category_path = self.sites_path / site.name / category.long_name
                if not category_path.is_dir():
                    continue
                for directory in sorted(category_path.iterdir()):
                    if not directory.is_dir() or directory.name.startswith((".", "_")):
                        continue
                    properties = _read_yaml(directory / ENTITY_FILENAME)
                    own[(category.long_name, directory.name)] = Entity(
                        id=EntityId(site=site, category=category, name=directory.name),
                        properties=Properties(properties),
                    )

            inherited = by_site.get(site.extends.name, {}) if site.extends else {}
            merged: Dict[tuple, Entity] = {}
            for key, parent_entity in inherited.items():
                properties = parent_entity.properties.to_dict()
                if key in own:
                    properties = _deep_merge(properties, own[key].properties.to_dict())
                merged[key] = Entity(
                    id=EntityId(site=site, category=parent_entity.id.category, name=key[1]),
                    properties=Properties(properties),
                )
            for key, entity in own.items():
                merged.setdefault(key, entity)

            order = {category.long_name: index for index, category in enumerate(self.categories)}
            site_entities = dict(
                sorted(merged.items(), key=lambda item: (order[item[0][0]], item[0][1]))
            )
            by_site[site.name] = site_entities
            entities.extend(site_entities.values())

        logger.debug(f"Loaded {len(entities)} entities from {self.sites_path}")
        return entities

    async def resolve_entities(self, query: str = "*") -> List[Entity]:
        """Resolve entities matching ``query``.

        Supported queries: ``*`` (everything), ``base`` (a site),
        ``base/modules`` (a category of a site), ``base/modules/m-teaser``
        (a single entity). Each segment may use shell wildcards.
        """
        segments = [segment for segment in (query or "*").strip("/").split("/") if segment]
        if not segments or segments == ["*"]:
            return list(self.entities)

        result = []
        for entity in self.entities:
            parts = (entity.site.name, entity.id.category.long_name, entity.id.name)
            if len(segments) > len(parts):
                continue
            if all(fnmatchcase(part, segment) for part, segment in zip(parts, segments)):
                result.append(entity)

        logger.debug(f"Query '{query}' matched {len(result)} entities")
        return result
