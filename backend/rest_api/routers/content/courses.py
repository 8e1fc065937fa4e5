"""
Course endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import CourseService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.exceptions import NotFoundError
from shared.utils.schemas import CourseCreate, CourseOutput, CourseUpdate


router = APIRouter(prefix="/api/courses", tags=["courses"])


def get_course_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> CourseService:
    return CourseService(db, cache)


@router.get(
    "",
    response_model=PaginatedResponse[CourseOutput],
    response_model_exclude_unset=True,
)
def list_courses(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: CourseService = Depends(get_course_service),
) -> dict[str, Any]:
    """
    List courses.

    Filter on course columns, ``translation.name`` (locale-aware),
    ``instructor.name`` or ``danceStyle.slug``; a plain string filter
    searches name and description.
    """
    return service.paginate(request)


@router.get("/{course_id}", response_model=CourseOutput, response_model_exclude_unset=True)
def get_course(
    course_id: int,
    locale: str | None = None,
    include_all_translations: bool = Query(default=False, alias="includeAllTranslations"),
    relations: str | None = Query(default=None, alias="with"),
    service: CourseService = Depends(get_course_service),
) -> dict[str, Any]:
    """Get a course with its translation for ``locale`` (default locale fallback)."""
    return service.get(
        course_id,
        locale=locale,
        include_all_translations=include_all_translations,
        relations=parse_with_param(relations),
    )


@router.post(
    "",
    response_model=CourseOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_course(
    body: CourseCreate,
    service: CourseService = Depends(get_course_service),
) -> dict[str, Any]:
    """Create a course together with its translations."""
    return service.create(body.model_dump())


@router.patch("/{course_id}", response_model=CourseOutput, response_model_exclude_unset=True)
def update_course(
    course_id: int,
    body: CourseUpdate,
    service: CourseService = Depends(get_course_service),
) -> dict[str, Any]:
    """Update a course. Translations in the body are upserted by locale."""
    return service.update(course_id, body.model_dump(exclude_unset=True))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: int,
    service: CourseService = Depends(get_course_service),
) -> None:
    service.delete(course_id)


@router.delete("/{course_id}/translations/{locale}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course_translation(
    course_id: int,
    locale: str,
    service: CourseService = Depends(get_course_service),
) -> None:
    if not service.delete_translation(course_id, locale):
        raise NotFoundError("CourseTranslation", locale, course_id=course_id)
