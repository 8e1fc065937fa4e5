"""
Relation-path parsing for eager loading.

Clients ask for related records either with dotted paths ("albums.songs")
or with the nested form ({"albums": ["songs", "producer"]}). Both are
turned into a RelationMap: top-level relation -> nested sub-paths.

Usage:
    relations = parse_relations(["albums.songs", {"albums": ["producer"]}])
    relations.to_dict()   # {"albums": ["songs", "producer"]}
    query = select(Artist).options(*relations.to_loader_options(Artist))
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import inspect
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.strategy_options import _AbstractLoad

from shared.config.logging import get_logger
from shared.utils.exceptions import ValidationError

logger = get_logger(__name__)

PATH_SEPARATOR = "."


@dataclass(frozen=True)
class Flat:
    """A relation path given as a (possibly dotted) string."""

    path: str


@dataclass(frozen=True)
class Nested:
    """A relation given in object form: key plus its nested paths."""

    key: str
    children: tuple[str, ...] = ()


RelationSpec = Union[Flat, Nested]


def coerce_relation_spec(raw: Any) -> list[RelationSpec]:
    """
    Convert one raw include element into relation specs.

    Strings become Flat, mappings become one Nested per key. Anything else
    is skipped; non-string children of a nested entry are skipped too.
    """
    if isinstance(raw, (Flat, Nested)):
        return [raw]
    if isinstance(raw, str):
        path = raw.strip()
        return [Flat(path)] if path else []
    if isinstance(raw, Mapping):
        specs: list[RelationSpec] = []
        for key, children in raw.items():
            if not isinstance(key, str) or not key.strip():
                logger.debug("Skipping relation with invalid key", key=key)
                continue
            if isinstance(children, str):
                children = [children]
            if not isinstance(children, (list, tuple)):
                logger.debug("Skipping relation with invalid children", key=key)
                continue
            specs.append(
                Nested(
                    key.strip(),
                    tuple(c.strip() for c in children if isinstance(c, str) and c.strip()),
                )
            )
        return specs
    logger.debug("Skipping malformed relation spec", spec=repr(raw))
    return []


class RelationMap(Mapping[str, tuple[str, ...]]):
    """
    Immutable, ordered map of top-level relation -> nested sub-paths.

    Keys keep first-seen order and nested paths keep append order.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None):
        self._entries: dict[str, tuple[str, ...]] = {
            key: tuple(paths) for key, paths in (entries or {}).items()
        }

    def __getitem__(self, key: str) -> tuple[str, ...]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RelationMap({self.to_dict()!r})"

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(paths) for key, paths in self._entries.items()}

    def cache_payload(self) -> dict[str, list[str]]:
        """Order-independent form used in cache keys."""
        return {key: sorted(paths) for key, paths in self._entries.items()}

    def to_loader_options(self, model: type) -> list[_AbstractLoad]:
        """
        Build selectinload() chains for ``model``.

        Raises ValidationError naming the first relation that does not
        exist on the model (or on a model reached through a nested path).
        """
        options: list[_AbstractLoad] = []
        for key, nested_paths in self._entries.items():
            attr, target = _relationship(model, key, key)
            if not nested_paths:
                options.append(selectinload(attr))
                continue
            for nested in nested_paths:
                loader = selectinload(attr)
                current = target
                walked = key
                for segment in nested.split(PATH_SEPARATOR):
                    walked = f"{walked}{PATH_SEPARATOR}{segment}"
                    nested_attr, current = _relationship(current, segment, walked)
                    loader = loader.selectinload(nested_attr)
                options.append(loader)
        return options


def _relationship(model: type, name: str, path: str) -> tuple[Any, type]:
    relationships = inspect(model).relationships
    if name not in relationships:
        raise ValidationError(f"Unknown relation '{path}'", field=path)
    return getattr(model, name), relationships[name].mapper.class_


def parse_relations(relations: Iterable[Any] | None) -> RelationMap:
    """
    Parse include specifications into a RelationMap.

    - "a.b.c" registers "a" and appends "b.c" under it
    - "a" registers "a" with no nested paths (if not already present)
    - {"a": ["b", "c"]} registers "a" and appends "b" and "c"

    Repeated top-level keys merge; repeated nested paths are kept once.
    """
    entries: dict[str, list[str]] = {}

    def _append(key: str, path: str) -> None:
        paths = entries.setdefault(key, [])
        if path and path not in paths:
            paths.append(path)

    for raw in relations or ():
        for spec in coerce_relation_spec(raw):
            if isinstance(spec, Flat):
                first, _, rest = spec.path.partition(PATH_SEPARATOR)
                if not first:
                    logger.debug("Skipping relation path without a head", path=spec.path)
                    continue
                entries.setdefault(first, [])
                _append(first, rest.strip(PATH_SEPARATOR))
            else:
                entries.setdefault(spec.key, [])
                for child in spec.children:
                    _append(spec.key, child)

    return RelationMap(entries)


def split_relation_param(value: str | None) -> list[str]:
    """Split a comma-separated query-string include list."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
