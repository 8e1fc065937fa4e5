"""
Base Repository implementation.
Provides common data access patterns driven by validated filter/sort input.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.orm import Session, aliased
from sqlalchemy.orm.relationships import RelationshipProperty

from shared.infrastructure.db import safe_flush
from shared.query.filters import (
    EntityFields,
    LocalField,
    RelationField,
    ResolvedCondition,
    ResolvedSort,
    SortOrder,
    normalize_filter,
    normalize_sort,
)
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.query.relations import RelationMap, parse_relations
from shared.query.sql import operator_clause, order_clause, render_filter
from shared.utils.exceptions import InternalError, NotFoundError, UnknownFieldError

from rest_api.models import Base

ModelT = TypeVar("ModelT", bound=Base)

# Columns managed by the database, never written from client data
READ_ONLY_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class QueryBuilder:
    """
    Compiles resolved filters and sorts for one model.

    Locale-aware relation fields join their table once, constrained to the
    requested locale. Without a locale, relation filters match when any
    related row matches (EXISTS) and relation sorts use MIN for ascending
    and MAX for descending order.
    """

    def __init__(self, model: type, locale: str | None = None):
        self._model = model
        self._locale = locale
        self._joins: dict[str, Any] = {}

    def condition(self, condition: ResolvedCondition) -> Any:
        resolved = condition.field
        if isinstance(resolved, LocalField):
            column = getattr(self._model, resolved.column)
            return operator_clause(column, condition.operator, condition.value)

        prop = self._relationship(resolved)
        if resolved.locale_aware and self._locale:
            column = getattr(self._locale_join(prop), resolved.column)
            return operator_clause(column, condition.operator, condition.value)

        target = prop.mapper.class_
        criterion = operator_clause(getattr(target, resolved.column), condition.operator, condition.value)
        attr = getattr(self._model, prop.key)
        return attr.any(criterion) if prop.uselist else attr.has(criterion)

    def sort_column(self, sort: ResolvedSort) -> Any:
        resolved = sort.field
        if isinstance(resolved, LocalField):
            return getattr(self._model, resolved.column)

        prop = self._relationship(resolved)
        if resolved.locale_aware and self._locale:
            return getattr(self._locale_join(prop), resolved.column)

        target_column = getattr(prop.mapper.class_, resolved.column)
        aggregate = func.max if sort.order is SortOrder.DESC else func.min
        return (
            select(aggregate(target_column))
            .where(prop.primaryjoin)
            .correlate(self._model)
            .scalar_subquery()
        )

    def apply_joins(self, query: Select) -> Select:
        for key, alias in self._joins.items():
            attr = getattr(self._model, key).of_type(alias)
            query = query.outerjoin(attr.and_(alias.locale == self._locale))
        return query

    def _relationship(self, resolved: RelationField) -> RelationshipProperty:
        relationships = inspect(self._model).relationships
        name = resolved.model_attribute
        if name not in relationships:
            raise InternalError(
                f"{self._model.__name__} has no relationship '{name}'",
                relation=resolved.relation,
            )
        return relationships[name]

    def _locale_join(self, prop: RelationshipProperty) -> Any:
        alias = self._joins.get(prop.key)
        if alias is None:
            alias = aliased(prop.mapper.class_)
            self._joins[prop.key] = alias
        return alias


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: the SQLAlchemy model class
    - fields: the EntityFields allow-list for filters and sorts

    Writes flush but never commit; the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @property
    @abstractmethod
    def fields(self) -> EntityFields:
        """Return the filterable/sortable field allow-list."""
        ...

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    @property
    def db(self) -> Session:
        return self._db

    # =========================================================================
    # Query building
    # =========================================================================

    def _base_query(self) -> Select:
        return select(self.model)

    def _loader_options(self, relations: RelationMap | Iterable[Any] | None) -> list[Any]:
        if not relations:
            return []
        if not isinstance(relations, RelationMap):
            relations = parse_relations(relations)
        return relations.to_loader_options(self.model)

    def _build_query(self, filters: Any = None, sort: Any = None, locale: str | None = None) -> Select:
        """Filtered and ordered query; ties always break on primary key."""
        resolved_filter = normalize_filter(filters, self.fields)
        resolved_sort = normalize_sort(sort, self.fields)
        builder = QueryBuilder(self.model, locale)

        query = self._base_query()
        clause = render_filter(resolved_filter, builder.condition)
        if clause is not None:
            query = query.where(clause)

        ordering = [order_clause(builder.sort_column(s), s) for s in resolved_sort]
        query = builder.apply_joins(query)
        return query.order_by(*ordering, self.model.id)

    def _count_query(self, query: Select) -> int:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        return self._db.scalar(count_query) or 0

    def validate(self, request: PaginatedRequest) -> None:
        """
        Raise ValidationError if the request's filter, sort or relations do
        not fit this entity. Used before cache lookups.
        """
        normalize_filter(request.filter, self.fields)
        normalize_sort(request.sort, self.fields)
        self._loader_options(request.relation_map)

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, entity_id: int, relations: RelationMap | Iterable[Any] | None = None) -> ModelT | None:
        """Find entity by ID, or None."""
        query = (
            self._base_query()
            .where(self.model.id == entity_id)
            .options(*self._loader_options(relations))
        )
        return self._db.scalar(query)

    def require(self, entity_id: int, relations: RelationMap | Iterable[Any] | None = None) -> ModelT:
        """
        Find entity by ID.

        Raises:
            NotFoundError: no row with this ID
        """
        entity = self.get(entity_id, relations)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def find_by_id(self, entity_id: int, relations: RelationMap | Iterable[Any] | None = None) -> Any:
        """Public lookup; raises NotFoundError on a miss."""
        return self.require(entity_id, relations)

    def find_one(
        self,
        filters: Any = None,
        sort: Any = None,
        relations: RelationMap | Iterable[Any] | None = None,
    ) -> ModelT | None:
        query = self._build_query(filters, sort).options(*self._loader_options(relations))
        return self._db.scalar(query.limit(1))

    def find_many(
        self,
        filters: Any = None,
        sort: Any = None,
        limit: int | None = None,
        relations: RelationMap | Iterable[Any] | None = None,
    ) -> Sequence[ModelT]:
        query = self._build_query(filters, sort).options(*self._loader_options(relations))
        if limit is not None:
            query = query.limit(limit)
        return self._db.execute(query).scalars().all()

    def count(self, filters: Any = None) -> int:
        return self._count_query(self._build_query(filters))

    def exists(self, filters: Any = None) -> bool:
        query = self._build_query(filters).order_by(None)
        return bool(self._db.scalar(select(query.exists())))

    def paginate(self, request: PaginatedRequest) -> PaginatedResponse:
        """
        Run a paginated query.

        Returns the envelope with ORM entities as data.
        """
        query = self._build_query(request.filter, request.sort, request.locale)
        total = self._count_query(query)

        page_query = (
            query.options(*self._loader_options(request.relation_map))
            .offset(request.offset)
            .limit(request.limit)
        )
        items = self._db.execute(page_query).scalars().all()
        return PaginatedResponse.build(list(items), total, request.page, request.limit)

    # =========================================================================
    # Writes
    # =========================================================================

    def _column_values(self, data: Mapping[str, Any]) -> dict[str, Any]:
        writable = {attr.key for attr in inspect(self.model).column_attrs} - READ_ONLY_COLUMNS
        for key in data:
            if key not in writable:
                raise UnknownFieldError(key, entity=self.entity_name)
        return dict(data)

    def save(self, entity: ModelT) -> ModelT:
        """
        Save entity (insert or update).
        """
        self._db.add(entity)
        safe_flush(self._db, f"save {self.entity_name}")
        self._db.refresh(entity)
        return entity

    def create(self, data: Mapping[str, Any]) -> ModelT:
        return self.save(self.model(**self._column_values(data)))

    def update(self, entity_id: int, data: Mapping[str, Any]) -> ModelT:
        entity = self.require(entity_id)
        for key, value in self._column_values(data).items():
            setattr(entity, key, value)
        return self.save(entity)

    def delete(self, entity_id: int) -> None:
        """
        Hard delete entity. Related rows follow the schema's cascade rules.

        Raises:
            NotFoundError: no row with this ID
        """
        entity = self.require(entity_id)
        self._db.delete(entity)
        safe_flush(self._db, f"delete {self.entity_name}")
