"""Public domain model surface."""

from __future__ import annotations

from santapy.domain.model.enums import AssignmentLifecycle, PartyStatus, SourceKind
from santapy.domain.model.party import (
    Assignment,
    AssignmentId,
    Exclusion,
    Participant,
    ParticipantId,
    Party,
    PartyId,
    PartySnapshot,
    ensure_single_host,
    ensure_unique_emails,
    normalize_email,
)
from santapy.domain.model.viewer import (
    AnonymousViewer,
    AuthenticatedViewer,
    SessionUser,
    ViewerContext,
)
from santapy.domain.model.views import AssignmentRow, PersonRef, ReceiverView

__all__ = [  # noqa: RUF022
    # party
    "Party",
    "Participant",
    "Assignment",
    "Exclusion",
    "PartySnapshot",
    "PartyId",
    "ParticipantId",
    "AssignmentId",
    "ensure_single_host",
    "ensure_unique_emails",
    "normalize_email",
    # views
    "AssignmentRow",
    "PersonRef",
    "ReceiverView",
    # viewer
    "AnonymousViewer",
    "AuthenticatedViewer",
    "SessionUser",
    "ViewerContext",
    # enums
    "AssignmentLifecycle",
    "PartyStatus",
    "SourceKind",
]
