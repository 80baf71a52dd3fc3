"""Entity value objects consumed by the export pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class Site:
    """A namespace of entities, optionally extending another site."""

    name: str
    extends: Optional["Site"] = None

    @property
    def lineage(self) -> Iterable["Site"]:
        """This site followed by every site it extends."""
        site: Optional[Site] = self
        while site is not None:
            yield site
            site = site.extends

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class EntityCategory:
    """Category of an entity, e.g. ``modules`` with prefix ``m``."""

    long_name: str
    short_name: str
    type: str

    @property
    def longName(self) -> str:
        return self.long_name

    @property
    def shortName(self) -> str:
        return self.short_name

    def __str__(self) -> str:
        return self.long_name


DEFAULT_CATEGORIES = (
    EntityCategory("elements", "e", "element"),
    EntityCategory("modules", "m", "module"),
    EntityCategory("pages", "p", "page"),
    EntityCategory("templates", "t", "template"),
)


@dataclass(frozen=True)
class EntityId:
    """Hierarchical identifier: site / category / name."""

    site: Site
    category: EntityCategory
    name: str

    @property
    def id_string(self) -> str:
        return self.name

    @property
    def path_string(self) -> str:
        return f"{self.site.name}/{self.category.long_name}/{self.name}"

    def __str__(self) -> str:
        return self.path_string


class Properties:
    """Read-only properties bag queryable by dotted path."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(data or {})

    def get_by_path(self, path: str, default: Any = None) -> Any:
        """Return the value at ``path`` (e.g. ``export.html``) or ``default``."""
        value: Any = self._data
        for key in path.split("."):
            if not isinstance(value, Mapping) or key not in value:
                return default
            value = value[key]
        return value

    getByPath = get_by_path

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __contains__(self, path: str) -> bool:
        marker = object()
        return self.get_by_path(path, marker) is not marker

    def __repr__(self) -> str:
        return f"Properties({self._data!r})"


@dataclass(frozen=True)
class Entity:
    """An addressable UI entity (element, module, page or template)."""

    id: EntityId
    properties: Properties = field(default_factory=Properties, compare=False)

    @property
    def site(self) -> Site:
        return self.id.site

    @property
    def id_string(self) -> str:
        return self.id.id_string

    @property
    def path_string(self) -> str:
        return self.id.path_string

    # camelCase aliases used by `${entity.idString}` style templates
    @property
    def idString(self) -> str:
        return self.id_string

    @property
    def pathString(self) -> str:
        return self.path_string

    def __str__(self) -> str:
        return self.path_string
