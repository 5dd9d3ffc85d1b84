"""Domain layer: principal, record-type declarations, enums, exceptions.

No infrastructure imports; SQLAlchemy, Redis and FastAPI live outside.
"""

from app.domain.enums import TaskStatus
from app.domain.principal import Principal, require_principal
from app.domain.record_type import RecordType

__all__ = [
    "Principal",
    "RecordType",
    "TaskStatus",
    "require_principal",
]
