"""Per-party view state: resolve, project, reveal.

A view is bound to one party id for as long as the caller looks at that
party. Each refresh takes a sequence number; a result whose number is no longer
the latest (a newer refresh started, the view was invalidated or closed) is
dropped without being applied or reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from santapy.domain.errors import AssignmentFetchFailed, PartyNotFound, StaleView
from santapy.domain.model import AnonymousViewer
from santapy.domain.ports import PartyUpdate

from .contracts import EMPTY_PROJECTION, NOT_GENERATED, AssignmentProjection
from .policy import project
from .reveal import RevealState

if TYPE_CHECKING:
    from santapy.domain.model import (
        AssignmentId,
        AssignmentRow,
        Party,
        PartyId,
        PartySnapshot,
        PartyStatus,
        ViewerContext,
    )
    from santapy.domain.ports import IdentityProvider, PartyStore

    from .generation import GenerationOrchestrator
    from .resolve import SourceResolver

log = getLogger(__name__)


@dataclass(slots=True, eq=False)
class PartyAssignmentView:
    party_id: PartyId
    store: PartyStore
    identity: IdentityProvider
    resolver: SourceResolver
    orchestrator: GenerationOrchestrator
    access_token: str | None = None
    reveal: RevealState = field(default_factory=RevealState)
    snapshot: PartySnapshot | None = None
    _projection: AssignmentProjection | None = None
    _generated: bool = False
    _sequence: int = 0
    _closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def generated(self) -> bool:
        return self._generated

    @property
    def cached_projection(self) -> AssignmentProjection | None:
        return self._projection

    async def viewer(self) -> ViewerContext:
        """A link token always wins over the signed-in session."""

        if self.access_token:
            return AnonymousViewer(self.access_token)
        return await self.identity.current_viewer()

    async def projection(self) -> AssignmentProjection:
        if self._projection is not None:
            return self._projection
        refreshed = await self.refresh()
        if refreshed is not None:
            return refreshed
        return self._projection or EMPTY_PROJECTION

    async def refresh(self, snapshot: PartySnapshot | None = None) -> AssignmentProjection | None:
        """Re-derive the projection; ``None`` when the result went stale meanwhile."""

        if self._closed:
            raise StaleView(f"View for party {self.party_id} is closed")
        self._sequence += 1
        sequence = self._sequence

        try:
            viewer = await self.viewer()
            self._check_current(sequence)
            current = snapshot or await self._load_snapshot(viewer)
            self._check_current(sequence)
            try:
                raw = await self.resolver.resolve(self.party_id, viewer, snapshot=current)
            except AssignmentFetchFailed as exc:
                self._check_current(sequence)
                if self._generated:
                    log.error("Failed to load assignments for party %s: %s", self.party_id, exc)
                    raise
                log.info(
                    "Suppressing assignment fetch failure for party %s: %s", self.party_id, exc
                )
                raw = NOT_GENERATED
            self._check_current(sequence)
        except StaleView:
            log.debug("Discarding stale refresh %s for party %s", sequence, self.party_id)
            return None
        except Exception:
            if self._is_current(sequence):
                raise
            log.debug("Discarding failed stale refresh %s for party %s", sequence, self.party_id)
            return None

        projection = project(
            raw,
            current.party,
            viewer,
            current.participants,
            reported_participant=current.user_participant,
        )
        self._apply(current, projection)
        return projection

    def invalidate(self) -> None:
        """Drop the cached projection; the next ``projection()`` re-resolves."""

        self._sequence += 1
        self._projection = None

    def mark_generated(self) -> None:
        self._generated = True
        self.invalidate()

    def clear(self) -> None:
        """Forget every pairing after a confirmed remote deletion."""

        self._sequence += 1
        self._generated = False
        self.reveal.hide_all()
        previous = self._projection
        self._projection = AssignmentProjection(
            generated=False,
            viewer_participant_id=previous.viewer_participant_id if previous else None,
            viewer_is_host=previous.viewer_is_host if previous else False,
        )

    def close(self) -> None:
        self._closed = True
        self._sequence += 1
        self._projection = None
        self.snapshot = None
        self.reveal.hide_all()

    def toggle(self, assignment_id: AssignmentId) -> bool:
        if assignment_id not in self._visible_ids():
            raise KeyError(f"Assignment {assignment_id} is not in the current host table")
        return self.reveal.toggle(assignment_id)

    def is_visible(self, assignment_id: AssignmentId) -> bool:
        return self.reveal.is_visible(assignment_id)

    def rows(self) -> list[tuple[AssignmentRow, bool]]:
        """Host table rows paired with whether each one is currently revealed."""

        if self._projection is None or self._projection.all_assignments is None:
            return []
        return [(row, self.reveal.is_visible(row.id)) for row in self._projection.all_assignments]

    async def update_settings(
        self,
        *,
        host_can_see_all: bool | None = None,
        status: PartyStatus | None = None,
    ) -> Party:
        update = PartyUpdate(host_can_see_all=host_can_see_all, status=status)
        current = self.snapshot or await self._load_snapshot(await self.viewer())
        if update.is_empty:
            return current.party
        if status is not None:
            current.party.with_status(status)
        party = await self.store.update_party(self.party_id, update)
        log.info("Updated party %s: %s", self.party_id, update)
        self.snapshot = None
        self.invalidate()
        return party

    async def _load_snapshot(self, viewer: ViewerContext) -> PartySnapshot:
        if isinstance(viewer, AnonymousViewer) and viewer.access_token:
            snapshot = await self.store.fetch_party_by_token(viewer.access_token)
            if snapshot.party.id != self.party_id:
                raise PartyNotFound(
                    f"Access token does not belong to party {self.party_id}", status_code=404
                )
            return snapshot
        return await self.store.fetch_party(self.party_id)

    def _apply(self, snapshot: PartySnapshot, projection: AssignmentProjection) -> None:
        self.snapshot = snapshot
        self._projection = projection
        self._generated = projection.generated
        self.reveal.reset()
        self.orchestrator.observe(self.party_id, generated=projection.generated)

    def _visible_ids(self) -> tuple[AssignmentId, ...]:
        if self._projection is None:
            return ()
        return self._projection.assignment_ids

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    def _check_current(self, sequence: int) -> None:
        if not self._is_current(sequence):
            raise StaleView(f"Refresh {sequence} for party {self.party_id} superseded")
