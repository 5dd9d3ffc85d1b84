"""Base scoped repository: ownership-filtered CRUD and lifecycle hooks (cache invalidation)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.pagination import PageRequest
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.scoping import OwnerScope, get_record_type

if TYPE_CHECKING:
    from app.application.interfaces.services import ICacheInvalidator


ModelType = TypeVar("ModelType", bound=Base)


class ScopedRepository(Generic[ModelType]):
    """Repository whose every query is built through the request's OwnerScope.

    Writes commit before the _on_after_* hooks run, so the hooks (cache
    invalidation) only ever observe committed data. Subclasses override
    _apply_filters for their filter set.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        scope: OwnerScope,
        invalidator: ICacheInvalidator | None = None,
    ) -> None:
        self.db = db
        self.model = model
        self.scope = scope
        self.invalidator = invalidator
        self.record_type = get_record_type(model)

    def query(self) -> Select[Any]:
        """SELECT of the model already constrained to the scope's owner."""
        return self.scope.apply(select(self.model), self.model)

    async def find_by_id(self, entity_id: str) -> ModelType | None:
        """Return the record by primary key if visible through the scope, else None."""
        model: Any = self.model
        result = await self.db.execute(self.query().where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def paginate(
        self, filters: Mapping[str, Any], page_request: PageRequest
    ) -> tuple[list[ModelType], int]:
        """Return (rows of the requested page, total matching rows)."""
        stmt = self._apply_filters(self.query(), filters)
        total = await self.db.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        result = await self.db.execute(
            stmt.order_by(*self._ordering())
            .offset(page_request.offset)
            .limit(page_request.page_size)
        )
        return list(result.scalars().all()), int(total or 0)

    async def create(self, obj: ModelType) -> ModelType:
        """Assign the owner from the scope, persist, commit, then run _on_after_create."""
        setattr(obj, self.record_type.owner_field, self.scope.principal_id)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType, data: Mapping[str, Any]) -> ModelType:
        """Apply data to a visible record, commit, then run _on_after_update.

        Raises:
            ResourceNotFoundException: Record is not visible through the scope.
            ValidationException: data targets the id, the owner field, or an unknown field.
        """
        self._ensure_visible(obj)
        protected = {"id", self.record_type.owner_field}
        for field_name, value in data.items():
            if field_name in protected:
                raise ValidationException(f"{field_name} cannot be changed", field=field_name)
            if not hasattr(self.model, field_name):
                raise ValidationException(f"Unknown field: {field_name}", field=field_name)
            setattr(obj, field_name, value)
        await self._commit()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete a visible record, commit, then run _on_after_delete."""
        self._ensure_visible(obj)
        await self.db.delete(obj)
        await self._commit()
        await self._on_after_delete(obj)

    def _ensure_visible(self, obj: ModelType) -> None:
        if not self.scope.owns(getattr(obj, self.record_type.owner_field)):
            raise ResourceNotFoundException(self.record_type.name, str(getattr(obj, "id", "")))

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    def _apply_filters(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        """Override in subclasses to translate filter names into WHERE clauses."""
        return stmt

    def _ordering(self) -> tuple[Any, ...]:
        model: Any = self.model
        return (model.created_at.desc(), model.id.desc())

    async def _on_after_create(self, obj: ModelType) -> None:
        """Drop cached list pages: a new record changes every list of its type."""
        if self.invalidator is not None:
            await self.invalidator.record_created(self.record_type)

    async def _on_after_update(self, obj: ModelType) -> None:
        """Drop the record's item entry and every cached list page."""
        if self.invalidator is not None:
            await self.invalidator.record_changed(self.record_type, obj.id)

    async def _on_after_delete(self, obj: ModelType) -> None:
        """Drop the record's item entry and every cached list page."""
        if self.invalidator is not None:
            await self.invalidator.record_changed(self.record_type, obj.id)
