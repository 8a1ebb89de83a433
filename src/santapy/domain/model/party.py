"""Party aggregate: the party itself, its roster, pairings and exclusions.

All of these are read-only views of what the remote store returned. The core
never edits them in place; ``Party.with_status`` returns a new instance so that
a status change can be validated before it is sent to the store.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from santapy.domain.errors import InvalidStatusTransition, RosterInvariantViolation

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from santapy.domain.model.enums import PartyStatus

type PartyId = str
type ParticipantId = int
type AssignmentId = int


def normalize_email(email: str) -> str:
    return email.strip().casefold()


@dataclass(frozen=True, slots=True, kw_only=True)
class Party:
    id: PartyId
    status: PartyStatus
    host_email: str
    host_can_see_all: bool = False
    access_token: str | None = None
    user_id: int | None = None
    party_date: datetime | None = None
    location: str | None = None
    max_amount: float | None = None
    personal_message: str | None = None

    def with_status(self, target: PartyStatus) -> Party:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(
                f"Party {self.id} cannot move from {self.status} to {target}"
            )
        return replace(self, status=target)


@dataclass(frozen=True, slots=True, kw_only=True)
class Participant:
    id: ParticipantId
    party_id: PartyId
    name: str
    email: str
    is_host: bool = False
    user_id: int | None = None
    assigned_to: ParticipantId | None = None
    wishlist: str | None = None
    wishlist_description: str | None = None
    access_token: str | None = field(default=None, repr=False)

    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)


@dataclass(frozen=True, slots=True, kw_only=True)
class Assignment:
    """One giver -> receiver pairing.

    The store may inline the giver/receiver display fields; they are optional
    because the flat snapshot rows only carry ids.
    """

    id: AssignmentId
    party_id: PartyId
    giver_id: ParticipantId
    receiver_id: ParticipantId
    giver_name: str | None = None
    giver_email: str | None = None
    receiver_name: str | None = None
    receiver_email: str | None = None


@dataclass(frozen=True, slots=True, init=False)
class Exclusion:
    """Unordered pair of participants that must not be matched either way."""

    party_id: PartyId
    first_id: ParticipantId
    second_id: ParticipantId
    id: int | None = field(default=None, compare=False)

    def __init__(
        self,
        party_id: PartyId,
        participant_a: ParticipantId,
        participant_b: ParticipantId,
        *,
        id: int | None = None,  # noqa: A002
    ) -> None:
        if participant_a == participant_b:
            raise ValueError("An exclusion needs two different participants")
        low, high = sorted((participant_a, participant_b))
        object.__setattr__(self, "party_id", party_id)
        object.__setattr__(self, "first_id", low)
        object.__setattr__(self, "second_id", high)
        object.__setattr__(self, "id", id)

    @property
    def pair(self) -> frozenset[ParticipantId]:
        return frozenset((self.first_id, self.second_id))

    def forbids(self, giver_id: ParticipantId, receiver_id: ParticipantId) -> bool:
        return {giver_id, receiver_id} == {self.first_id, self.second_id}


def ensure_unique_emails(participants: Iterable[Participant]) -> None:
    counts = Counter(participant.normalized_email for participant in participants)
    duplicates = sorted(email for email, count in counts.items() if count > 1)
    if duplicates:
        raise RosterInvariantViolation(f"Duplicate participant emails: {', '.join(duplicates)}")


def ensure_single_host(participants: Iterable[Participant]) -> None:
    hosts = [participant.id for participant in participants if participant.is_host]
    if len(hosts) != 1:
        raise RosterInvariantViolation(f"Expected exactly one host, found {len(hosts)}")


@dataclass(frozen=True, slots=True, kw_only=True)
class PartySnapshot:
    """Transient per-view copy of a party as one fetch returned it."""

    party: Party
    participants: tuple[Participant, ...] = ()
    assignments: tuple[Assignment, ...] = ()
    user_participant: Participant | None = None

    def __post_init__(self) -> None:
        ensure_unique_emails(self.participants)
        if self.participants:
            ensure_single_host(self.participants)

    @property
    def participant_ids(self) -> frozenset[ParticipantId]:
        return frozenset(participant.id for participant in self.participants)

    def participant(self, participant_id: ParticipantId) -> Participant | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    @property
    def host(self) -> Participant | None:
        return next((p for p in self.participants if p.is_host), None)
