"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IOwnerScope,
    IScopedRecordRepository,
    ITaskRepository,
)
from app.application.interfaces.services import ICacheInvalidator, ITaggedCache

__all__ = [
    "ICacheInvalidator",
    "IOwnerScope",
    "IScopedRecordRepository",
    "ITaggedCache",
    "ITaskRepository",
]
