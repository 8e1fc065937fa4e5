"""
Standardized list-query parameters for all routers.

Usage:
    from rest_api.routers._common.pagination import get_paginated_request

    @router.get("/courses")
    def list_courses(
        request: PaginatedRequest = Depends(get_paginated_request),
        service: CourseService = Depends(get_course_service),
    ):
        return service.paginate(request)
"""

from fastapi import Query

from shared.query.pagination import PaginatedRequest


def get_paginated_request(
    filter: str | None = Query(
        default=None,
        description='JSON filter ({"field": "level", "value": "beginner"}) or a free-text search',
    ),
    sort: str | None = Query(
        default=None,
        description='"-createdAt", "name:asc" or a JSON sort object/list',
    ),
    # page/limit stay strings here so range errors come back as 400 with the
    # field named, like every other query validation error
    page: str | None = Query(default=None, description="1-based page number"),
    limit: str | None = Query(default=None, description="Items per page (1-100)"),
    locale: str | None = Query(default=None, description="Requested translation locale"),
    include_all_translations: bool = Query(default=False, alias="includeAllTranslations"),
    relations: str | None = Query(
        default=None,
        alias="with",
        description='Relations to load: "instructor,lessons" or a JSON list',
    ),
) -> PaginatedRequest:
    """
    FastAPI dependency building the normalized list request.

    Raises:
        ValidationError: On out-of-range page/limit or an unsupported locale.
    """
    data = {
        "filter": filter,
        "sort": sort,
        "locale": locale,
        "includeAllTranslations": include_all_translations,
        "with": relations,
    }
    if page is not None:
        data["page"] = page
    if limit is not None:
        data["limit"] = limit
    return PaginatedRequest(**data)
