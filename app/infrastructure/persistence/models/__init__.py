"""ORM models. Importing this package registers every scoped record type."""

from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.task import TASK_RECORD_TYPE, Task
from app.infrastructure.persistence.scoping import register_record_type

register_record_type(Task)

__all__ = [
    "CuidMixin",
    "OwnedModel",
    "TASK_RECORD_TYPE",
    "Task",
    "TimestampMixin",
]
