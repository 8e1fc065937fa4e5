"""
Query layer: relation includes, filter/sort normalization, pagination.
"""

from shared.query.filters import (
    EntityFields,
    FieldType,
    FilterOperator,
    LocalField,
    LogicalOperator,
    NullsPosition,
    RelationField,
    RelationFields,
    ResolvedCondition,
    ResolvedGroup,
    ResolvedSort,
    SortOrder,
    decode_query_value,
    normalize_filter,
    normalize_sort,
)
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.query.relations import (
    Flat,
    Nested,
    RelationMap,
    coerce_relation_spec,
    parse_relations,
)

__all__ = [
    # filters
    "EntityFields",
    "FieldType",
    "FilterOperator",
    "LocalField",
    "LogicalOperator",
    "NullsPosition",
    "RelationField",
    "RelationFields",
    "ResolvedCondition",
    "ResolvedGroup",
    "ResolvedSort",
    "SortOrder",
    "decode_query_value",
    "normalize_filter",
    "normalize_sort",
    # pagination
    "PaginatedRequest",
    "PaginatedResponse",
    # relations
    "Flat",
    "Nested",
    "RelationMap",
    "coerce_relation_spec",
    "parse_relations",
]
