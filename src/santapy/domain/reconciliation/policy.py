"""Disclosure policy: which pairing facts a viewer may see.

``project`` is a pure function of its inputs. Rules, in order:

1. find the viewer's own participant record
2. ``my_assignment`` is the receiver the viewer gives to, with wishlist
3. ``all_assignments`` only for a signed-in host of a party with
   ``host_can_see_all`` set; identities only
4. nothing at all while the party is not generated

Wishlist content is only ever attached to the viewer's own receiver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from santapy.domain.model import (
    AnonymousViewer,
    AssignmentRow,
    AuthenticatedViewer,
    PersonRef,
    ReceiverView,
    normalize_email,
)

from .contracts import EMPTY_PROJECTION, AssignmentProjection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from santapy.domain.model import (
        Assignment,
        Participant,
        ParticipantId,
        Party,
        ViewerContext,
    )

    from .contracts import RawAssignmentState


def identify_viewer_participant(
    viewer: ViewerContext,
    participants: Sequence[Participant],
    *,
    reported: Participant | None = None,
) -> Participant | None:
    """Match the viewer to a roster entry.

    Session users match on linked user id first, then on email. Token holders
    match on the participant access token. Either way, ``reported`` (the
    participant the store said the request belongs to) is used when no roster
    entry matches directly.
    """

    if isinstance(viewer, AuthenticatedViewer):
        user = viewer.user
        by_user = next((p for p in participants if p.user_id == user.id), None)
        if by_user is not None:
            return by_user
        email = normalize_email(user.email)
        by_email = next((p for p in participants if p.normalized_email == email), None)
        if by_email is not None:
            return by_email
        return _roster_entry(reported, participants)

    if not isinstance(viewer, AnonymousViewer) or not viewer.access_token:
        return None
    by_token = next((p for p in participants if p.access_token == viewer.access_token), None)
    if by_token is not None:
        return by_token
    return _roster_entry(reported, participants)


def _roster_entry(
    reported: Participant | None, participants: Sequence[Participant]
) -> Participant | None:
    if reported is None:
        return None
    return next((p for p in participants if p.id == reported.id), reported)


def _person(
    participant_id: ParticipantId,
    roster: dict[ParticipantId, Participant],
    *,
    name: str | None,
    email: str | None,
) -> PersonRef:
    participant = roster.get(participant_id)
    if participant is not None:
        return PersonRef.of(participant)
    return PersonRef(id=participant_id, name=name or "", email=email or "")


def _own_assignment(
    raw: RawAssignmentState,
    viewer_participant: Participant,
    roster: dict[ParticipantId, Participant],
) -> ReceiverView | None:
    if raw.my_assignment is not None:
        return raw.my_assignment
    mine: Assignment | None = next(
        (row for row in raw.assignments if row.giver_id == viewer_participant.id), None
    )
    if mine is None:
        return None
    receiver = roster.get(mine.receiver_id)
    if receiver is not None:
        return ReceiverView.of(receiver)
    return ReceiverView(
        receiver=PersonRef(
            id=mine.receiver_id,
            name=mine.receiver_name or "",
            email=mine.receiver_email or "",
        )
    )


def _host_table(
    raw: RawAssignmentState, roster: dict[ParticipantId, Participant]
) -> tuple[AssignmentRow, ...]:
    return tuple(
        AssignmentRow(
            id=row.id,
            giver=_person(row.giver_id, roster, name=row.giver_name, email=row.giver_email),
            receiver=_person(
                row.receiver_id, roster, name=row.receiver_name, email=row.receiver_email
            ),
        )
        for row in raw.assignments
    )


def may_see_all(party: Party, viewer: ViewerContext, participant: Participant | None) -> bool:
    return (
        party.host_can_see_all
        and participant is not None
        and participant.is_host
        and isinstance(viewer, AuthenticatedViewer)
    )


def project(
    raw: RawAssignmentState,
    party: Party,
    viewer: ViewerContext,
    participants: Sequence[Participant],
    *,
    reported_participant: Participant | None = None,
) -> AssignmentProjection:
    """Filter ``raw`` down to what ``viewer`` is entitled to see."""

    viewer_participant = identify_viewer_participant(
        viewer, participants, reported=reported_participant
    )
    if not raw.generated:
        if viewer_participant is None:
            return EMPTY_PROJECTION
        return AssignmentProjection(
            generated=False,
            viewer_participant_id=viewer_participant.id,
            viewer_is_host=viewer_participant.is_host,
        )

    if viewer_participant is None:
        return AssignmentProjection(generated=True)

    roster = {participant.id: participant for participant in participants}
    return AssignmentProjection(
        generated=True,
        my_assignment=_own_assignment(raw, viewer_participant, roster),
        all_assignments=(
            _host_table(raw, roster) if may_see_all(party, viewer, viewer_participant) else None
        ),
        viewer_participant_id=viewer_participant.id,
        viewer_is_host=viewer_participant.is_host,
    )
