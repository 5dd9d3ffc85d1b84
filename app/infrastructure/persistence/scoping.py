"""Ownership scope: restricts every record query to the current principal's rows.

An OwnerScope is built once per request and passed explicitly to each scoped
repository, which routes every SELECT it builds through OwnerScope.apply().
There is no query parameter that disables it. The only way around it is
OwnerScope.unrestricted(), an administrative override that is written to the
audit log each time it is applied.

Record types are registered at import time (see models/__init__.py); the
owner column is resolved and validated then, not per query.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, inspect as sa_inspect
from sqlalchemy.orm import ColumnProperty

from app.domain.exceptions import UnauthenticatedAccessException
from app.domain.principal import Principal
from app.domain.record_type import RecordType
from app.shared.logging import get_audit_logger

audit_logger = get_audit_logger()

_record_types: dict[type, RecordType] = {}


def register_record_type(model: type) -> RecordType:
    """Validate and register the RecordType declared on an ORM model.

    Raises:
        ValueError: Missing declaration, or owner_field is not a mapped column.
    """
    record_type = model.__dict__.get("__record_type__")
    if not isinstance(record_type, RecordType):
        raise ValueError(f"{model.__name__} must declare __record_type__ = RecordType(...)")
    mapper = sa_inspect(model)
    prop = mapper.attrs.get(record_type.owner_field)
    if not isinstance(prop, ColumnProperty):
        raise ValueError(
            f"{model.__name__}.{record_type.owner_field} is not a mapped column; "
            "cannot be used as owner field"
        )
    for other_model, other in _record_types.items():
        if other_model is not model and other.name == record_type.name:
            raise ValueError(f"Record type name {record_type.name!r} is already registered")
    _record_types[model] = record_type
    return record_type


def get_record_type(model: type) -> RecordType:
    """Return the registered RecordType of model."""
    try:
        return _record_types[model]
    except KeyError:
        raise ValueError(f"{model.__name__} is not a registered record type") from None


def owner_column(model: type) -> Any:
    """Mapped owner attribute of model (e.g. Task.user_id)."""
    return getattr(model, get_record_type(model).owner_field)


class OwnerScope:
    """Per-request ownership constraint bound to one principal.

    Use for_principal() for normal requests and unrestricted() only for
    audited administrative jobs.
    """

    __slots__ = ("_principal", "_override_reason", "_override_actor")

    def __init__(
        self,
        principal: Principal | None,
        *,
        override_reason: str | None = None,
        override_actor: str | None = None,
    ) -> None:
        self._principal = principal
        self._override_reason = override_reason
        self._override_actor = override_actor

    @classmethod
    def for_principal(cls, principal: Principal | None) -> OwnerScope:
        """Scope bound to principal. An unbound scope fails when a query runs."""
        return cls(principal)

    @classmethod
    def unrestricted(cls, reason: str, actor: str) -> OwnerScope:
        """Administrative override: no owner filter. Every apply() is audited.

        Args:
            reason: Why the override is needed (recorded in the audit log).
            actor: Who or what requests it (operator, job name).
        """
        if not reason or not actor:
            raise ValueError("Ownership override requires a reason and an actor")
        return cls(None, override_reason=reason, override_actor=actor)

    @property
    def is_override(self) -> bool:
        return self._override_reason is not None

    @property
    def principal(self) -> Principal:
        """Bound principal; raises UnauthenticatedAccessException when none."""
        if self._principal is None:
            raise UnauthenticatedAccessException()
        return self._principal

    @property
    def principal_id(self) -> str:
        return self.principal.id

    def apply(self, stmt: Select[Any], model: type) -> Select[Any]:
        """Return stmt constrained to rows owned by the bound principal.

        Raises:
            UnauthenticatedAccessException: No principal bound and not an override.
        """
        if self.is_override:
            audit_logger.warning(
                "Ownership scope bypassed on %s by %s: %s",
                get_record_type(model).name,
                self._override_actor,
                self._override_reason,
            )
            return stmt
        return stmt.where(owner_column(model) == self.principal_id)

    def owns(self, owner_id: Any) -> bool:
        """True if a record owned by owner_id is visible through this scope."""
        if self.is_override:
            return True
        return owner_id == self.principal_id
