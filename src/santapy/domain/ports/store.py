"""Port for the remote party/assignment store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from santapy.domain.model import (
        Assignment,
        Exclusion,
        ParticipantId,
        Party,
        PartyId,
        PartySnapshot,
        PartyStatus,
        ReceiverView,
        SessionUser,
    )


@dataclass(frozen=True, slots=True)
class RemoteAssignments:
    """Assignment state exactly as one store query reported it."""

    generated: bool
    assignments: tuple[Assignment, ...] = ()
    my_assignment: ReceiverView | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class GenerationRequest:
    regenerate: bool
    force_regenerate: bool
    send_emails: bool
    lock_after_generation: bool
    max_attempts: int
    seed: int


@dataclass(frozen=True, slots=True, kw_only=True)
class GenerationSummary:
    """Whatever the store tells us about a finished draw."""

    assignments_created: int | None = None
    emails_sent: int | None = None
    attempts: int | None = None
    seed: int | None = None
    locked: bool | None = None
    assignments: tuple[Assignment, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True, kw_only=True)
class PartyUpdate:
    host_can_see_all: bool | None = None
    status: PartyStatus | None = None

    @property
    def is_empty(self) -> bool:
        return self.host_can_see_all is None and self.status is None


@runtime_checkable
class PartyStore(Protocol):
    """Request/response contract of the remote store.

    Every method raises a :class:`~santapy.domain.errors.PartyStoreError` subclass
    when the call fails; there is no partial success.
    """

    async def fetch_party(self, party_id: PartyId) -> PartySnapshot: ...

    async def fetch_party_by_token(self, access_token: str) -> PartySnapshot: ...

    async def fetch_assignments(self, party_id: PartyId) -> RemoteAssignments: ...

    async def fetch_assignments_by_token(
        self, party_id: PartyId, access_token: str
    ) -> RemoteAssignments: ...

    async def generate_assignments(
        self, party_id: PartyId, request: GenerationRequest
    ) -> GenerationSummary: ...

    async def delete_assignments(self, party_id: PartyId) -> None: ...

    async def list_exclusions(self, party_id: PartyId) -> list[Exclusion]: ...

    async def add_exclusion(
        self, party_id: PartyId, participant1_id: ParticipantId, participant2_id: ParticipantId
    ) -> Exclusion: ...

    async def remove_exclusion(
        self, party_id: PartyId, participant1_id: ParticipantId, participant2_id: ParticipantId
    ) -> None: ...

    async def update_party(self, party_id: PartyId, update: PartyUpdate) -> Party: ...

    async def fetch_current_user(self) -> SessionUser: ...


__all__ = [
    "GenerationRequest",
    "GenerationSummary",
    "PartyStore",
    "PartyUpdate",
    "RemoteAssignments",
]
