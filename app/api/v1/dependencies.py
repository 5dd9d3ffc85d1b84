"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the DB session, the request principal, its
ownership scope and the task use case. Routes depend only on these; a
scope, repository and service are built fresh for every request so no
principal state outlives it.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import ITaggedCache
from app.application.services.cache_invalidator import CacheInvalidator
from app.application.use_cases.tasks import TaskService
from app.core.config import get_settings
from app.domain.principal import Principal
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import TaskRepository
from app.infrastructure.persistence.scoping import OwnerScope
from app.infrastructure.security.jwt import principal_from_token

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


def get_cache(request: Request) -> ITaggedCache | None:
    """Tagged cache set in app lifespan (app.state.cache); None disables caching."""
    return getattr(request.app.state, "cache", None)


async def get_principal_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> Principal | None:
    """Principal from the bearer token's sub claim; None when absent or invalid."""
    if not credentials:
        return None
    try:
        return principal_from_token(credentials.credentials)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None


def get_owner_scope(
    principal: Annotated[Principal | None, Depends(get_principal_optional)],
) -> OwnerScope:
    """Per-request ownership scope. Unbound (no principal) scopes raise on first use."""
    return OwnerScope.for_principal(principal)


async def get_task_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
    scope: Annotated[OwnerScope, Depends(get_owner_scope)],
    cache: Annotated[ITaggedCache | None, Depends(get_cache)],
) -> TaskRepository:
    """Scoped task repository; committed writes invalidate the cache."""
    return TaskRepository(db, scope, invalidator=CacheInvalidator(cache))


async def get_task_service(
    repo: Annotated[TaskRepository, Depends(get_task_repo)],
    cache: Annotated[ITaggedCache | None, Depends(get_cache)],
) -> TaskService:
    """Task use case bound to this request's scope."""
    return TaskService(repo, cache, cache_ttl=get_settings().cache_ttl_records)
