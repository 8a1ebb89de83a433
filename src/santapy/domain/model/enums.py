"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PartyStatus(StrEnum):
    CREATED = "created"
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (PartyStatus.COMPLETED, PartyStatus.CANCELLED)

    def can_transition_to(self, target: PartyStatus) -> bool:
        """Status only moves forward; cancelled is reachable from any non-terminal state."""

        if target is self:
            return True
        if self.is_terminal:
            return False
        if target is PartyStatus.CANCELLED:
            return True
        return _STATUS_ORDER.index(target) > _STATUS_ORDER.index(self)


_STATUS_ORDER: tuple[PartyStatus, ...] = (
    PartyStatus.CREATED,
    PartyStatus.PENDING,
    PartyStatus.ACTIVE,
    PartyStatus.COMPLETED,
)


class AssignmentLifecycle(StrEnum):
    UNGENERATED = "ungenerated"
    GENERATING = "generating"
    GENERATED = "generated"
    REGENERATING = "regenerating"
    DELETING = "deleting"


class SourceKind(StrEnum):
    """Where a resolved assignment state came from."""

    TOKEN = "token"
    SESSION = "session"
    SNAPSHOT = "snapshot"
