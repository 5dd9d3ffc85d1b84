"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain types only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:
    from app.application.dtos.pagination import PageRequest
    from app.application.dtos.task import TaskCreate, TaskResult
    from app.domain.record_type import RecordType


# Ownership scope interface
class IOwnerScope(Protocol):
    """Protocol for the per-request ownership scope bound to a repository."""

    @property
    def principal_id(self) -> str:
        """Id of the bound principal; raises UnauthenticatedAccessException when none."""

    def owns(self, owner_id: Any) -> bool:
        """True if a record owned by owner_id is visible through this scope."""


ResultT = TypeVar("ResultT")


# Scoped record repository interface (read side used by cached retrieval)
class IScopedRecordRepository(Protocol[ResultT]):
    """Protocol for a repository whose queries are constrained by an IOwnerScope."""

    record_type: RecordType
    scope: IOwnerScope

    async def get_result_by_id(self, record_id: str) -> ResultT | None:
        """Return the record if it exists and is visible through the scope."""

    async def list_results(
        self, filters: Mapping[str, Any], page_request: PageRequest
    ) -> tuple[list[ResultT], int]:
        """Return (page of visible records matching filters, total matches)."""

    def serialize(self, result: ResultT) -> dict[str, Any]:
        """Return the JSON-safe dict stored in the cache."""

    def deserialize(self, cached: dict[str, Any]) -> ResultT:
        """Rebuild a result from its cached dict."""


# Task repository interface
class ITaskRepository(IScopedRecordRepository["TaskResult"], Protocol):
    """Protocol for the task repository (scoped reads plus writes)."""

    async def find_by_id(self, entity_id: str) -> Any:
        """Return the Task ORM entity if visible through the scope, else None."""

    async def create_task(self, data: TaskCreate) -> Any:
        """Create a task owned by the scope's principal; returns the ORM entity."""

    async def update(self, obj: Any, data: Mapping[str, Any]) -> Any:
        """Update a visible task and commit; returns the ORM entity."""

    async def delete(self, obj: Any) -> None:
        """Delete a visible task and commit."""

    def to_result(self, task: Any) -> TaskResult:
        """Map the ORM entity to TaskResult."""
