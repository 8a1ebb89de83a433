"""Translate party store payloads into domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from santapy.domain.model import (
    Assignment,
    Exclusion,
    Participant,
    Party,
    PartySnapshot,
    PartyStatus,
    PersonRef,
    ReceiverView,
    SessionUser,
)
from santapy.domain.ports import GenerationSummary, RemoteAssignments

if TYPE_CHECKING:
    from santapy.domain.model import PartyId

    from .schema import (
        AccountPayload,
        AssignmentPayload,
        AssignmentsPayload,
        ExclusionPayload,
        GenerationSummaryPayload,
        MyAssignmentPayload,
        ParticipantPayload,
        PartyDetailsPayload,
        PartyPayload,
    )


def parse_party(payload: PartyPayload) -> Party:
    return Party(
        id=payload.id,
        status=PartyStatus(payload.status),
        host_email=payload.host_email,
        host_can_see_all=payload.host_can_see_all,
        access_token=payload.access_token,
        user_id=payload.user_id,
        party_date=payload.party_date,
        location=payload.location,
        max_amount=payload.max_amount,
        personal_message=payload.personal_message,
    )


def parse_participant(payload: ParticipantPayload, *, party_id: PartyId) -> Participant:
    return Participant(
        id=payload.id,
        party_id=payload.party_id or party_id,
        name=payload.name,
        email=payload.email,
        is_host=payload.is_host,
        user_id=payload.user_id,
        assigned_to=payload.assigned_to,
        wishlist=payload.wishlist,
        wishlist_description=payload.wishlist_description,
        access_token=payload.access_token,
    )


def parse_assignment(payload: AssignmentPayload, *, party_id: PartyId) -> Assignment:
    return Assignment(
        id=payload.id,
        party_id=payload.party_id or party_id,
        giver_id=payload.giver_id,
        receiver_id=payload.receiver_id,
        giver_name=payload.giver_name,
        giver_email=payload.giver_email,
        receiver_name=payload.receiver_name,
        receiver_email=payload.receiver_email,
    )


def parse_my_assignment(payload: MyAssignmentPayload) -> ReceiverView:
    receiver = payload.receiver
    return ReceiverView(
        receiver=PersonRef(id=receiver.id, name=receiver.name, email=receiver.email),
        wishlist=payload.wishlist,
        wishlist_description=payload.wishlist_description,
    )


def parse_snapshot(payload: PartyDetailsPayload) -> PartySnapshot:
    party = parse_party(payload.party)
    return PartySnapshot(
        party=party,
        participants=tuple(parse_participant(p, party_id=party.id) for p in payload.participants),
        assignments=tuple(parse_assignment(a, party_id=party.id) for a in payload.assignments),
        user_participant=(
            parse_participant(payload.user_participant, party_id=party.id)
            if payload.user_participant is not None
            else None
        ),
    )


def parse_remote_assignments(
    payload: AssignmentsPayload, *, party_id: PartyId
) -> RemoteAssignments:
    if not payload.generated:
        return RemoteAssignments(generated=False)
    return RemoteAssignments(
        generated=True,
        assignments=tuple(parse_assignment(a, party_id=party_id) for a in payload.assignments),
        my_assignment=(
            parse_my_assignment(payload.my_assignment) if payload.my_assignment else None
        ),
    )


def parse_exclusion(payload: ExclusionPayload, *, party_id: PartyId) -> Exclusion:
    return Exclusion(
        payload.party_id or party_id,
        payload.participant1_id,
        payload.participant2_id,
        id=payload.id,
    )


def parse_generation_summary(
    payload: GenerationSummaryPayload, *, party_id: PartyId
) -> GenerationSummary:
    return GenerationSummary(
        assignments_created=payload.assignments_created,
        emails_sent=payload.emails_sent,
        attempts=payload.attempts,
        seed=payload.seed,
        locked=payload.locked,
        assignments=tuple(parse_assignment(a, party_id=party_id) for a in payload.assignments),
    )


def parse_session_user(payload: AccountPayload) -> SessionUser:
    user = payload.user
    return SessionUser(id=user.id, email=user.email, full_name=user.full_name)
