"""
Lesson endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import LessonService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.exceptions import NotFoundError
from shared.utils.schemas import LessonCreate, LessonOutput, LessonUpdate


router = APIRouter(prefix="/api/lessons", tags=["lessons"])


def get_lesson_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> LessonService:
    return LessonService(db, cache)


@router.get(
    "",
    response_model=PaginatedResponse[LessonOutput],
    response_model_exclude_unset=True,
)
def list_lessons(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: LessonService = Depends(get_lesson_service),
) -> dict[str, Any]:
    """List lessons. Use ``filter={"field": "courseId", "value": 1}`` for one course."""
    return service.paginate(request)


@router.get("/{lesson_id}", response_model=LessonOutput, response_model_exclude_unset=True)
def get_lesson(
    lesson_id: int,
    locale: str | None = None,
    include_all_translations: bool = Query(default=False, alias="includeAllTranslations"),
    relations: str | None = Query(default=None, alias="with"),
    service: LessonService = Depends(get_lesson_service),
) -> dict[str, Any]:
    return service.get(
        lesson_id,
        locale=locale,
        include_all_translations=include_all_translations,
        relations=parse_with_param(relations),
    )


@router.post(
    "",
    response_model=LessonOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_lesson(
    body: LessonCreate,
    service: LessonService = Depends(get_lesson_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@router.patch("/{lesson_id}", response_model=LessonOutput, response_model_exclude_unset=True)
def update_lesson(
    lesson_id: int,
    body: LessonUpdate,
    service: LessonService = Depends(get_lesson_service),
) -> dict[str, Any]:
    return service.update(lesson_id, body.model_dump(exclude_unset=True))


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lesson(
    lesson_id: int,
    service: LessonService = Depends(get_lesson_service),
) -> None:
    service.delete(lesson_id)


@router.delete("/{lesson_id}/translations/{locale}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lesson_translation(
    lesson_id: int,
    locale: str,
    service: LessonService = Depends(get_lesson_service),
) -> None:
    if not service.delete_translation(lesson_id, locale):
        raise NotFoundError("LessonTranslation", locale, lesson_id=lesson_id)
