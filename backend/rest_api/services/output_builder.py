"""
Entity Output Builder.

Converts SQLAlchemy models to JSON-ready dicts through the Pydantic output
schemas, attaching only the relations the client asked for.

Usage:
    from rest_api.services.output_builder import build_output

    payload = build_output(course, CourseOutput, relation_map, translation=view.translation)
"""

from typing import Any, Type

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import inspect

from shared.query.relations import RelationMap, parse_relations


def column_values(entity: Any) -> dict[str, Any]:
    """Mapped column attributes of an entity, keyed by attribute name."""
    return {attr.key: getattr(entity, attr.key) for attr in inspect(entity).mapper.column_attrs}


def related_payload(value: Any, nested_paths: tuple[str, ...] | list[str] = ()) -> Any:
    """
    camelCase dict (or list of dicts) for a loaded relation value, following
    the nested relation paths recursively.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        return [related_payload(item, nested_paths) for item in value]

    data = {to_camel(key): val for key, val in column_values(value).items()}
    nested = parse_relations(nested_paths)
    for key, deeper in nested.items():
        data[to_camel(key)] = related_payload(getattr(value, key), deeper)
    return data


def build_output(
    entity: Any,
    output_schema: Type[BaseModel],
    relations: RelationMap | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """
    Build the wire representation of an entity.

    Columns are auto-mapped, requested relations are attached, and
    ``overrides`` (translation, translations, ...) win over both. Fields
    that were not provided are left out of the result.
    """
    data = column_values(entity)
    for key, nested_paths in (relations or {}).items():
        data[key] = related_payload(getattr(entity, key), nested_paths)
    data.update(overrides)

    return output_schema.model_validate(data).model_dump(
        mode="json", by_alias=True, exclude_unset=True
    )
