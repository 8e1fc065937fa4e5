"""
Base Service Classes.

Services sit between routers and repositories:
    Router (thin) -> Service (cache, transaction, invalidation) -> Repository -> Model

Reads go through the cache (get_or_set). Writes commit, then invalidate
the entity's keys and every cached listing of its domain before returning,
so a response is never sent while stale listings are still cached.

Usage:
    class VenueService(CachedCrudService[Venue]):
        def __init__(self, db: Session, cache: CacheClient):
            super().__init__(
                db=db,
                repository=VenueRepository(db),
                cache=cache,
                output_schema=VenueOutput,
                domain=CacheDomain.VENUE,
            )
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Generic, Iterable, Mapping, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from rest_api.models import Base
from rest_api.repositories.base import BaseRepository
from rest_api.repositories.translatable import TranslatableRepository, TranslatableView
from rest_api.services.output_builder import build_output, column_values
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.cache import (
    CacheClient,
    CacheKeyBuilder,
    get_or_set,
    invalidate_domain,
    invalidate_entity,
    stable_serialize,
)
from shared.infrastructure.db import safe_commit
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.query.relations import RelationMap, parse_relations
from shared.utils.exceptions import ValidationError
from shared.utils.validators import validate_locale, validate_slug

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@lru_cache(maxsize=None)
def embedding_domains(model: type[Base]) -> tuple[str, ...]:
    """
    Cache domains whose payloads can embed ``model`` through a chain of
    relations (?with=a.b.c), following every mapped relationship backwards.

    Models without a ``__cache_domain__`` (translations) are walked through
    but contribute no domain. The model's own domain is included when a
    cycle leads back to it (course -> instructor -> courses).
    """
    embedded_by: dict[type, set[type]] = {}
    for mapper in Base.registry.mappers:
        for rel in mapper.relationships:
            embedded_by.setdefault(rel.mapper.class_, set()).add(mapper.class_)

    reached: set[type] = set()
    pending = [model]
    while pending:
        for parent in embedded_by.get(pending.pop(), ()):
            if parent not in reached:
                reached.add(parent)
                pending.append(parent)

    domains = {getattr(cls, "__cache_domain__", None) for cls in reached}
    domains.discard(None)
    return tuple(sorted(domains))


def as_relation_map(relations: RelationMap | Iterable[Any] | None) -> RelationMap:
    if isinstance(relations, RelationMap):
        return relations
    return parse_relations(relations)


class CachedCrudService(Generic[ModelT]):
    """
    CRUD service with read-through caching and invalidate-on-write.

    Override the _validate_* hooks for entity rules. ``related_domains``
    lists cache domains whose entries embed this entity as a relation;
    left as None it is derived from the mapper graph.
    """

    related_domains: tuple[str, ...] | None = None

    def __init__(
        self,
        db: Session,
        repository: BaseRepository[ModelT],
        cache: CacheClient,
        output_schema: Type[BaseModel],
        domain: str,
        *,
        ttl: int | None = None,
    ):
        self._db = db
        self._repo = repository
        self._cache = cache
        self._output_schema = output_schema
        self._keys = CacheKeyBuilder(domain)
        self._ttl = ttl or settings.cache_ttl_medium
        self._list_ttl = min(self._ttl, settings.cache_ttl_short)
        self._related_domains = (
            self.related_domains
            if self.related_domains is not None
            else embedding_domains(repository.model)
        )

    @property
    def repo(self) -> BaseRepository[ModelT]:
        return self._repo

    @property
    def keys(self) -> CacheKeyBuilder:
        return self._keys

    @property
    def entity_name(self) -> str:
        return self._repo.entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get(self, entity_id: int, *, relations: RelationMap | Iterable[Any] | None = None) -> dict[str, Any]:
        """
        Get one entity as a JSON-ready dict.

        Raises:
            NotFoundError: If entity not found (misses are never cached).
        """
        relation_map = as_relation_map(relations)
        variant = stable_serialize({"with": relation_map.cache_payload()}) if relation_map else None
        key = self._keys.by_id(entity_id, variant)
        return get_or_set(
            self._cache, key, lambda: self._load_one(entity_id, relation_map), self._ttl
        )

    def paginate(self, request: PaginatedRequest) -> dict[str, Any]:
        """
        Paginated listing as the camelCase envelope dict.

        The request is validated against the entity's fields before the
        cache is consulted, so invalid input never produces a cache key.
        """
        self._repo.validate(request)
        key = self._keys.paginated(request)
        return get_or_set(self._cache, key, lambda: self._load_page(request), self._list_ttl)

    def _load_one(self, entity_id: int, relation_map: RelationMap) -> dict[str, Any]:
        return self.to_output(self._repo.find_by_id(entity_id, relation_map), relation_map)

    def _load_page(self, request: PaginatedRequest) -> dict[str, Any]:
        page = self._repo.paginate(request)
        relation_map = request.relation_map
        data = [self.to_output(item, relation_map) for item in page.data]
        return PaginatedResponse.build(data, page.total, page.page, page.limit).to_dict()

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create entity, commit, invalidate, return the fresh output.

        Raises:
            ValidationError: If data is invalid.
            ConflictError: On unique constraint violations.
        """
        data = dict(data)
        self._validate_create(data)
        entity = self._repo.create(data)
        entity_id = entity.id

        safe_commit(self._db, f"create {self.entity_name}")
        self._invalidate(entity_id)

        logger.info(f"{self.entity_name} created", entity_id=entity_id)
        return self._load_one(entity_id, RelationMap())

    def update(self, entity_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Update entity, commit, invalidate, return the fresh output.

        Raises:
            NotFoundError: If entity not found.
        """
        data = dict(data)
        self._validate_update(entity_id, data)
        self._repo.update(entity_id, data)

        safe_commit(self._db, f"update {self.entity_name}")
        self._invalidate(entity_id)

        logger.info(f"{self.entity_name} updated", entity_id=entity_id, fields=sorted(data))
        return self._load_one(entity_id, RelationMap())

    def delete(self, entity_id: int) -> None:
        """
        Hard delete entity, commit, invalidate.

        Raises:
            NotFoundError: If entity not found.
        """
        self._repo.delete(entity_id)

        safe_commit(self._db, f"delete {self.entity_name}")
        self._invalidate(entity_id)

        logger.info(f"{self.entity_name} deleted", entity_id=entity_id)

    def _invalidate(self, entity_id: int) -> None:
        invalidate_entity(self._cache, self._keys, entity_id)
        # Entries of any domain can embed this entity through ?with=...
        for domain in self._related_domains:
            invalidate_domain(self._cache, CacheKeyBuilder(domain))

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: Any, relation_map: RelationMap | None = None) -> dict[str, Any]:
        return build_output(entity, self._output_schema, relation_map)

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        """Validate (and normalize in place) data before create."""
        if "slug" in data:
            data["slug"] = validate_slug(data["slug"])

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        """Validate (and normalize in place) data before update."""
        if data.get("slug") is not None:
            data["slug"] = validate_slug(data["slug"])

    def _check_reference(self, model: type[Base], entity_id: int | None, field: str) -> None:
        """Reject a foreign key that points at a missing row."""
        if entity_id is not None and self._db.get(model, entity_id) is None:
            raise ValidationError(
                f"{model.__name__} with ID {entity_id} does not exist",
                field=field,
            )

    def _check_parent(self, model: type[Base], data: Mapping[str, Any], key: str, field: str) -> None:
        """Like _check_reference for a non-nullable foreign key that may be absent from a patch."""
        if key not in data:
            return
        if data[key] is None:
            raise ValidationError(f"{field} cannot be null", field=field)
        self._check_reference(model, data[key], field)


class TranslatableCrudService(CachedCrudService[ModelT]):
    """
    CRUD service for entities with per-locale translations.

    Create/update accept a ``translations`` list that is upserted in the same
    transaction as the entity. Reads resolve the translation for the
    requested locale (one fallback hop to the default locale).
    """

    _repo: TranslatableRepository

    def get(
        self,
        entity_id: int,
        *,
        locale: str | None = None,
        include_all_translations: bool = False,
        relations: RelationMap | Iterable[Any] | None = None,
    ) -> dict[str, Any]:
        locale = validate_locale(locale)
        relation_map = as_relation_map(relations)

        variant_payload: dict[str, Any] = {}
        if locale:
            variant_payload["locale"] = locale
        if include_all_translations:
            variant_payload["all"] = True
        if relation_map:
            variant_payload["with"] = relation_map.cache_payload()
        variant = stable_serialize(variant_payload) if variant_payload else None

        key = self._keys.by_id(entity_id, variant)
        return get_or_set(
            self._cache,
            key,
            lambda: self._load_view(entity_id, relation_map, locale, include_all_translations),
            self._ttl,
        )

    def _load_view(
        self,
        entity_id: int,
        relation_map: RelationMap,
        locale: str | None,
        include_all_translations: bool,
    ) -> dict[str, Any]:
        view = self._repo.find_by_id(
            entity_id,
            relation_map,
            locale=locale,
            include_all_translations=include_all_translations,
        )
        return self.to_output(view, relation_map)

    def _load_one(self, entity_id: int, relation_map: RelationMap) -> dict[str, Any]:
        return self._load_view(entity_id, relation_map, None, True)

    def to_output(self, view: TranslatableView, relation_map: RelationMap | None = None) -> dict[str, Any]:
        # translations are always rendered keyed by locale, never as a raw relation
        if relation_map and "translations" in relation_map:
            relation_map = RelationMap(
                {key: paths for key, paths in relation_map.items() if key != "translations"}
            )
        overrides: dict[str, Any] = {
            "translation": column_values(view.translation) if view.translation is not None else None,
        }
        if view.translations is not None:
            overrides["translations"] = {
                locale: column_values(translation) for locale, translation in view.translations.items()
            }
        return build_output(view.entity, self._output_schema, relation_map, **overrides)

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        data = dict(data)
        translations = data.pop("translations", None) or []
        self._validate_create(data)
        entity = self._repo.create(data)
        entity_id = entity.id
        if translations:
            self._repo.upsert_translations(entity_id, translations)

        safe_commit(self._db, f"create {self.entity_name}")
        self._invalidate(entity_id)

        logger.info(
            f"{self.entity_name} created",
            entity_id=entity_id,
            locales=sorted(t["locale"] for t in translations),
        )
        return self._load_one(entity_id, RelationMap())

    def update(self, entity_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        data = dict(data)
        translations = data.pop("translations", None)
        self._validate_update(entity_id, data)
        if data:
            self._repo.update(entity_id, data)
        else:
            self._repo.require(entity_id)
        if translations:
            self._repo.upsert_translations(entity_id, translations)

        safe_commit(self._db, f"update {self.entity_name}")
        self._invalidate(entity_id)

        logger.info(f"{self.entity_name} updated", entity_id=entity_id, fields=sorted(data))
        return self._load_one(entity_id, RelationMap())

    def delete_translation(self, entity_id: int, locale: str) -> bool:
        """
        Remove one locale's translation.

        Raises:
            NotFoundError: If the entity does not exist.
        """
        self._repo.require(entity_id)
        locale = validate_locale(locale) or locale
        deleted = self._repo.delete_translation(entity_id, locale)
        if deleted:
            safe_commit(self._db, f"delete {self.entity_name} translation")
            self._invalidate(entity_id)
        return deleted
