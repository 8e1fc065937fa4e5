"""
User Service.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import User
from rest_api.repositories import get_user_repository
from rest_api.services.base_service import CachedCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.exceptions import DuplicateEntityError
from shared.utils.schemas import UserOutput


class UserService(CachedCrudService[User]):
    """Service for user management. Emails are stored lowercased and unique."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_user_repository(db),
            cache=cache,
            output_schema=UserOutput,
            domain=CacheDomain.USER,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        data["email"] = str(data["email"]).strip().lower()
        if self._repo.find_by_email(data["email"]) is not None:
            raise DuplicateEntityError("User", data["email"], field="email")
