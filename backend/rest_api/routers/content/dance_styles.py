"""
Dance style endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import DanceStyleService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.exceptions import NotFoundError
from shared.utils.schemas import DanceStyleCreate, DanceStyleOutput, DanceStyleUpdate


router = APIRouter(prefix="/api/dance-styles", tags=["dance-styles"])


def get_dance_style_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> DanceStyleService:
    return DanceStyleService(db, cache)


@router.get(
    "",
    response_model=PaginatedResponse[DanceStyleOutput],
    response_model_exclude_unset=True,
)
def list_dance_styles(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: DanceStyleService = Depends(get_dance_style_service),
) -> dict[str, Any]:
    return service.paginate(request)


@router.get("/{dance_style_id}", response_model=DanceStyleOutput, response_model_exclude_unset=True)
def get_dance_style(
    dance_style_id: int,
    locale: str | None = None,
    include_all_translations: bool = Query(default=False, alias="includeAllTranslations"),
    relations: str | None = Query(default=None, alias="with"),
    service: DanceStyleService = Depends(get_dance_style_service),
) -> dict[str, Any]:
    return service.get(
        dance_style_id,
        locale=locale,
        include_all_translations=include_all_translations,
        relations=parse_with_param(relations),
    )


@router.post(
    "",
    response_model=DanceStyleOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_dance_style(
    body: DanceStyleCreate,
    service: DanceStyleService = Depends(get_dance_style_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@router.patch("/{dance_style_id}", response_model=DanceStyleOutput, response_model_exclude_unset=True)
def update_dance_style(
    dance_style_id: int,
    body: DanceStyleUpdate,
    service: DanceStyleService = Depends(get_dance_style_service),
) -> dict[str, Any]:
    return service.update(dance_style_id, body.model_dump(exclude_unset=True))


@router.delete("/{dance_style_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_dance_style(
    dance_style_id: int,
    service: DanceStyleService = Depends(get_dance_style_service),
) -> None:
    service.delete(dance_style_id)


@router.delete(
    "/{dance_style_id}/translations/{locale}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_dance_style_translation(
    dance_style_id: int,
    locale: str,
    service: DanceStyleService = Depends(get_dance_style_service),
) -> None:
    if not service.delete_translation(dance_style_id, locale):
        raise NotFoundError("DanceStyleTranslation", locale, dance_style_id=dance_style_id)
