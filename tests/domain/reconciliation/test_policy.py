from __future__ import annotations

import itertools
from dataclasses import replace

import pytest

from santapy.domain.model import (
    AnonymousViewer,
    AuthenticatedViewer,
    PersonRef,
    ReceiverView,
    SessionUser,
    ViewerContext,
)
from santapy.domain.reconciliation import (
    NOT_GENERATED,
    RawAssignmentState,
    identify_viewer_participant,
    project,
)
from tests.helpers.party_store import make_cycle, make_party, make_roster

ROSTER = tuple(make_roster(4))
GENERATED = RawAssignmentState(generated=True, assignments=tuple(make_cycle([1, 2, 3, 4])))

VIEWERS: dict[str, ViewerContext] = {
    "host-session": AuthenticatedViewer(SessionUser(id=1, email="alice@example.com")),
    "guest-session": AuthenticatedViewer(SessionUser(id=2, email="bob@example.com")),
    "host-token": AnonymousViewer("token-1"),
    "guest-token": AnonymousViewer("token-3"),
    "stranger": AnonymousViewer(),
}


@pytest.mark.parametrize(
    ("viewer_name", "host_can_see_all"),
    list(itertools.product(VIEWERS, (True, False))),
)
def test_not_generated_discloses_nothing(viewer_name: str, host_can_see_all: bool) -> None:
    party = make_party(host_can_see_all=host_can_see_all)

    projection = project(NOT_GENERATED, party, VIEWERS[viewer_name], ROSTER)

    assert not projection.generated
    assert projection.my_assignment is None
    assert projection.all_assignments is None


@pytest.mark.parametrize(
    ("viewer_name", "host_can_see_all", "expected"),
    [
        ("host-session", True, True),
        ("host-session", False, False),
        ("guest-session", True, False),
        ("host-token", True, False),
        ("guest-token", True, False),
        ("stranger", True, False),
    ],
)
def test_host_table_needs_flag_and_signed_in_host(
    viewer_name: str, host_can_see_all: bool, expected: bool
) -> None:
    party = make_party(host_can_see_all=host_can_see_all)

    projection = project(GENERATED, party, VIEWERS[viewer_name], ROSTER)

    assert projection.generated
    assert (projection.all_assignments is not None) is expected


def test_host_table_carries_identities_only() -> None:
    projection = project(GENERATED, make_party(), VIEWERS["host-session"], ROSTER)

    assert projection.all_assignments is not None
    first = projection.all_assignments[0]
    assert first.giver == PersonRef(id=1, name="Alice", email="alice@example.com")
    assert first.receiver == PersonRef(id=2, name="Bob", email="bob@example.com")
    assert projection.assignment_ids == (100, 101, 102, 103)


def test_own_assignment_carries_receiver_wishlist_only() -> None:
    projection = project(GENERATED, make_party(), VIEWERS["guest-session"], ROSTER)

    assert projection.viewer_participant_id == 2
    assert not projection.viewer_is_host
    assert projection.my_assignment == ReceiverView(
        receiver=PersonRef(id=3, name="Carol", email="carol@example.com"),
        wishlist="Carol's wishlist",
        wishlist_description="notes for Carol",
    )


def test_store_provided_own_assignment_wins() -> None:
    reported = ReceiverView(receiver=PersonRef(id=4, name="Dave", email="dave@example.com"))
    raw = RawAssignmentState(generated=True, my_assignment=reported)

    projection = project(raw, make_party(), VIEWERS["guest-token"], ROSTER)

    assert projection.my_assignment is reported
    assert projection.all_assignments is None


def test_session_user_matches_by_email_when_not_linked() -> None:
    viewer = AuthenticatedViewer(SessionUser(id=99, email=" DAVE@example.COM"))

    participant = identify_viewer_participant(viewer, ROSTER)

    assert participant is not None
    assert participant.id == 4


def test_token_viewer_falls_back_to_reported_participant() -> None:
    roster = tuple(replace(p, access_token=None) for p in ROSTER)

    participant = identify_viewer_participant(
        AnonymousViewer("opaque"), roster, reported=ROSTER[2]
    )

    assert participant is not None
    assert participant.id == 3


def test_session_user_falls_back_to_reported_host() -> None:
    roster = tuple(replace(p, user_id=None) for p in ROSTER)
    viewer = AuthenticatedViewer(SessionUser(id=1, email="alice.work@example.com"))

    party = make_party(host_can_see_all=True)

    projection = project(GENERATED, party, viewer, roster, reported_participant=roster[0])

    assert projection.viewer_participant_id == 1
    assert projection.viewer_is_host
    assert projection.my_assignment is not None
    assert projection.my_assignment.receiver.name == "Bob"
    assert projection.all_assignments is not None
    assert len(projection.all_assignments) == 4


def test_unknown_viewer_gets_generated_flag_only() -> None:
    projection = project(GENERATED, make_party(), VIEWERS["stranger"], ROSTER)

    assert projection.generated
    assert projection.my_assignment is None
    assert projection.all_assignments is None
    assert projection.viewer_participant_id is None
