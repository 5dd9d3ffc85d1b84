"""Task ORM model. Owned by exactly one principal (user_id)."""

from typing import ClassVar

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import TaskStatus
from app.domain.record_type import RecordType
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OwnedModel

TASK_RECORD_TYPE = RecordType(name="task", collection="tasks", owner_field="user_id")


class Task(OwnedModel, Base):
    """Task owned by a principal. Table: task."""

    __tablename__ = "task"
    __record_type__: ClassVar[RecordType] = TASK_RECORD_TYPE

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=TaskStatus.PENDING.value,
        server_default=TaskStatus.PENDING.value,
    )

    __table_args__ = (Index("ix_task_owner_status", "user_id", "status"),)
