"""Shared reconciliation contract components.

This module intentionally holds only the values passed between stages:
- ``RawAssignmentState`` produced by the source resolver
- ``AssignmentProjection`` produced by the disclosure policy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from santapy.domain.model import (
        Assignment,
        AssignmentId,
        AssignmentRow,
        ParticipantId,
        ReceiverView,
        SourceKind,
    )
    from santapy.domain.ports import RemoteAssignments


@dataclass(frozen=True, slots=True)
class RawAssignmentState:
    """Unfiltered assignment facts, before any disclosure rule is applied."""

    generated: bool
    assignments: tuple[Assignment, ...] = ()
    my_assignment: ReceiverView | None = None
    source: SourceKind | None = None

    @classmethod
    def from_remote(cls, remote: RemoteAssignments, *, source: SourceKind) -> RawAssignmentState:
        return cls(
            generated=remote.generated,
            assignments=remote.assignments,
            my_assignment=remote.my_assignment,
            source=source,
        )


NOT_GENERATED = RawAssignmentState(generated=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class AssignmentProjection:
    """Viewer-scoped subset of the assignment state.

    ``all_assignments`` is ``None`` when the viewer is not entitled to the host
    table, and an empty tuple never stands in for "hidden".
    """

    generated: bool
    my_assignment: ReceiverView | None = None
    all_assignments: tuple[AssignmentRow, ...] | None = None
    viewer_participant_id: ParticipantId | None = None
    viewer_is_host: bool = False

    @property
    def assignment_ids(self) -> tuple[AssignmentId, ...]:
        if self.all_assignments is None:
            return ()
        return tuple(row.id for row in self.all_assignments)


EMPTY_PROJECTION = AssignmentProjection(generated=False)
