"""
Venue endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import VenueService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.schemas import VenueCreate, VenueOutput, VenueUpdate


router = APIRouter(prefix="/api/venues", tags=["venues"])


def get_venue_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> VenueService:
    return VenueService(db, cache)


@router.get(
    "",
    response_model=PaginatedResponse[VenueOutput],
    response_model_exclude_unset=True,
)
def list_venues(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: VenueService = Depends(get_venue_service),
) -> dict[str, Any]:
    """List venues. A plain string filter searches name and city."""
    return service.paginate(request)


@router.get("/{venue_id}", response_model=VenueOutput, response_model_exclude_unset=True)
def get_venue(
    venue_id: int,
    relations: str | None = Query(default=None, alias="with"),
    service: VenueService = Depends(get_venue_service),
) -> dict[str, Any]:
    return service.get(venue_id, relations=parse_with_param(relations))


@router.post(
    "",
    response_model=VenueOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_venue(
    body: VenueCreate,
    service: VenueService = Depends(get_venue_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@router.patch("/{venue_id}", response_model=VenueOutput, response_model_exclude_unset=True)
def update_venue(
    venue_id: int,
    body: VenueUpdate,
    service: VenueService = Depends(get_venue_service),
) -> dict[str, Any]:
    return service.update(venue_id, body.model_dump(exclude_unset=True))


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_venue(
    venue_id: int,
    service: VenueService = Depends(get_venue_service),
) -> None:
    service.delete(venue_id)
