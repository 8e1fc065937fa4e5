"""
Pagination request and response envelope shared by every list endpoint.

Usage:
    request = PaginatedRequest(page=2, limit=20, filter='{"field": "level", "value": "beginner"}')
    page = repository.paginate(request)
    return PaginatedResponse.build(items, total, request.page, request.limit)
"""

from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from shared.config.constants import Limits
from shared.query.filters import decode_query_value
from shared.query.relations import RelationMap, parse_relations, split_relation_param
from shared.utils.exceptions import ValidationError
from shared.utils.validators import validate_locale

T = TypeVar("T")


class PaginatedRequest(BaseModel):
    """
    Inbound list query.

    ``filter`` and ``sort`` accept JSON strings (decoded permissively) or
    already-decoded values. Out-of-range values raise the application
    ValidationError naming the offending field, never pydantic's.
    """

    filter: Any = None
    sort: Any = None
    page: int = Field(default=Limits.DEFAULT_PAGE, ge=1)
    limit: int = Field(default=Limits.DEFAULT_PAGE_SIZE, ge=1, le=Limits.MAX_PAGE_SIZE)
    locale: str | None = None
    include_all_translations: bool = Field(default=False, alias="includeAllTranslations")
    relations: list[Any] = Field(default_factory=list, alias="with")

    model_config = {"populate_by_name": True, "frozen": True}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise ValidationError(
                f"Invalid value for '{field}': {error['msg']}",
                field=field,
                value=repr(error.get("input")),
            ) from None

    @field_validator("filter", "sort", mode="before")
    @classmethod
    def _decode(cls, value: Any) -> Any:
        return decode_query_value(value)

    @field_validator("relations", mode="before")
    @classmethod
    def _split_relations(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            decoded = decode_query_value(value)
            if isinstance(decoded, list):
                return decoded
            if isinstance(decoded, dict):
                return [decoded]
            return split_relation_param(value)
        return value

    @field_validator("locale", mode="before")
    @classmethod
    def _check_locale(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return validate_locale(value)
        return value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def relation_map(self) -> RelationMap:
        return parse_relations(self.relations)

    def cache_payload(self) -> dict[str, Any]:
        """Everything that changes the query result, in a serializable form."""
        return {
            "page": self.page,
            "limit": self.limit,
            "filter": self.filter,
            "sort": self.sort,
            "locale": self.locale,
            "includeAllTranslations": self.include_all_translations,
            "with": self.relation_map.cache_payload(),
        }


class PaginatedResponse(BaseModel, Generic[T]):
    """
    List envelope: data, total, page, limit, totalPages, hasNext, hasPrev.
    """

    data: list[T]
    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, data: list[T], total: int, page: int, limit: int) -> "PaginatedResponse[T]":
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
