"""
User endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import UserService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.schemas import UserCreate, UserOutput, UserUpdate


router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> UserService:
    return UserService(db, cache)


@router.get(
    "",
    response_model=PaginatedResponse[UserOutput],
    response_model_exclude_unset=True,
)
def list_users(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    return service.paginate(request)


@router.get("/{user_id}", response_model=UserOutput, response_model_exclude_unset=True)
def get_user(
    user_id: int,
    relations: str | None = Query(default=None, alias="with"),
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    return service.get(user_id, relations=parse_with_param(relations))


@router.post(
    "",
    response_model=UserOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    body: UserCreate,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@router.patch("/{user_id}", response_model=UserOutput, response_model_exclude_unset=True)
def update_user(
    user_id: int,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    return service.update(user_id, body.model_dump(exclude_unset=True))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> None:
    service.delete(user_id)
