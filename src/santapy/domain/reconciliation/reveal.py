"""On-demand disclosure of host-visible rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from santapy.domain.model import AssignmentId


@dataclass(slots=True)
class RevealState:
    """Set of assignment ids the viewer has explicitly chosen to show.

    Every row starts hidden; nothing here is persisted or shared between viewers.
    """

    _revealed: set[AssignmentId] = field(default_factory=set["AssignmentId"])

    @property
    def revealed(self) -> frozenset[AssignmentId]:
        return frozenset(self._revealed)

    def is_visible(self, assignment_id: AssignmentId) -> bool:
        return assignment_id in self._revealed

    def toggle(self, assignment_id: AssignmentId) -> bool:
        """Flip one row and return whether it is now visible."""

        if assignment_id in self._revealed:
            self._revealed.discard(assignment_id)
            return False
        self._revealed.add(assignment_id)
        return True

    def reveal_all(self, assignment_ids: Iterable[AssignmentId]) -> None:
        self._revealed.update(assignment_ids)

    def hide_all(self) -> None:
        self._revealed.clear()

    reset = hide_all
