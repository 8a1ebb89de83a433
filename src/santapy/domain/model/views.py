"""Public-field views of participants used in projections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from santapy.domain.model.party import AssignmentId, Participant, ParticipantId


@dataclass(frozen=True, slots=True, kw_only=True)
class PersonRef:
    """Identity fields of a participant that may be shown to other viewers."""

    id: ParticipantId
    name: str
    email: str

    @classmethod
    def of(cls, participant: Participant) -> PersonRef:
        return cls(id=participant.id, name=participant.name, email=participant.email)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReceiverView:
    """What a giver learns about the person they were drawn for."""

    receiver: PersonRef
    wishlist: str | None = None
    wishlist_description: str | None = None

    @classmethod
    def of(cls, participant: Participant) -> ReceiverView:
        return cls(
            receiver=PersonRef.of(participant),
            wishlist=participant.wishlist,
            wishlist_description=participant.wishlist_description,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class AssignmentRow:
    """One row of the host table: identities only, never wishlist content."""

    id: AssignmentId
    giver: PersonRef
    receiver: PersonRef
