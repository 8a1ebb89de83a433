"""Source resolution: find the assignment state a viewer's request can reach.

Candidate sources are an ordered list of strategies tried strictly one after
the other. Each strategy either returns a ``RawAssignmentState`` or ``None``
("nothing for this viewer here"). A store failure inside a strategy is turned
into ``SourceUnavailable``, logged, and the next strategy runs. Only errors that
are not store failures escape, as ``AssignmentFetchFailed``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from santapy.domain.errors import AssignmentFetchFailed, PartyStoreError, SourceUnavailable
from santapy.domain.model import AnonymousViewer, AuthenticatedViewer, SourceKind

from .contracts import NOT_GENERATED, RawAssignmentState
from .integrity import find_pairing_violations

if TYPE_CHECKING:
    from collections.abc import Sequence

    from santapy.domain.model import PartyId, PartySnapshot, ViewerContext
    from santapy.domain.ports import PartyStore

log = getLogger(__name__)


class AssignmentSource(Protocol):
    """One way of obtaining assignment state for a party."""

    kind: SourceKind

    async def __call__(
        self,
        party_id: PartyId,
        viewer: ViewerContext,
        *,
        snapshot: PartySnapshot | None,
    ) -> RawAssignmentState | None: ...


@dataclass(slots=True)
class TokenScopedSource:
    """Public assignment query authorised by a participant access token."""

    store: PartyStore
    kind: SourceKind = SourceKind.TOKEN

    async def __call__(
        self,
        party_id: PartyId,
        viewer: ViewerContext,
        *,
        snapshot: PartySnapshot | None,
    ) -> RawAssignmentState | None:
        del snapshot
        if not isinstance(viewer, AnonymousViewer) or not viewer.access_token:
            return None
        try:
            remote = await self.store.fetch_assignments_by_token(party_id, viewer.access_token)
        except PartyStoreError as exc:
            raise SourceUnavailable(self.kind, exc) from exc
        return RawAssignmentState.from_remote(remote, source=self.kind)


@dataclass(slots=True)
class SessionScopedSource:
    """Assignment query authorised by the signed-in session."""

    store: PartyStore
    kind: SourceKind = SourceKind.SESSION

    async def __call__(
        self,
        party_id: PartyId,
        viewer: ViewerContext,
        *,
        snapshot: PartySnapshot | None,
    ) -> RawAssignmentState | None:
        del snapshot
        if not isinstance(viewer, AuthenticatedViewer):
            return None
        try:
            remote = await self.store.fetch_assignments(party_id)
        except PartyStoreError as exc:
            raise SourceUnavailable(self.kind, exc) from exc
        return RawAssignmentState.from_remote(remote, source=self.kind)


@dataclass(slots=True)
class SnapshotSource:
    """Derive assignment state from rows embedded in an already fetched party."""

    kind: SourceKind = SourceKind.SNAPSHOT

    async def __call__(
        self,
        party_id: PartyId,
        viewer: ViewerContext,
        *,
        snapshot: PartySnapshot | None,
    ) -> RawAssignmentState | None:
        del viewer
        if snapshot is None:
            return None
        if snapshot.party.id != party_id:
            raise AssignmentFetchFailed(
                f"Party snapshot {snapshot.party.id} does not belong to party {party_id}"
            )
        if not snapshot.assignments:
            return None
        return RawAssignmentState(
            generated=True,
            assignments=snapshot.assignments,
            source=self.kind,
        )


def default_sources(store: PartyStore) -> tuple[AssignmentSource, ...]:
    return (TokenScopedSource(store), SessionScopedSource(store), SnapshotSource())


@dataclass(slots=True)
class SourceResolver:
    sources: Sequence[AssignmentSource] = field(default_factory=tuple)

    async def resolve(
        self,
        party_id: PartyId,
        viewer: ViewerContext,
        *,
        snapshot: PartySnapshot | None = None,
    ) -> RawAssignmentState:
        """Return the first state any source yields, or ``NOT_GENERATED``."""

        for source in self.sources:
            try:
                state = await source(party_id, viewer, snapshot=snapshot)
            except SourceUnavailable as exc:
                log.warning("Falling through for party %s: %s", party_id, exc)
                continue
            except AssignmentFetchFailed:
                raise
            except (LookupError, TypeError, ValueError) as exc:
                raise AssignmentFetchFailed(
                    f"{source.kind} source failed for party {party_id}: {exc}"
                ) from exc
            if state is None:
                continue
            return self._checked(party_id, state, snapshot=snapshot)

        log.debug("No assignment source produced data for party %s", party_id)
        return NOT_GENERATED

    @staticmethod
    def _checked(
        party_id: PartyId,
        state: RawAssignmentState,
        *,
        snapshot: PartySnapshot | None,
    ) -> RawAssignmentState:
        if not state.generated:
            return NOT_GENERATED
        participant_ids = snapshot.participant_ids if snapshot and snapshot.participants else None
        violations = find_pairing_violations(state.assignments, participant_ids=participant_ids)
        if violations:
            log.warning(
                "Discarding malformed assignments for party %s from %s source: %s",
                party_id,
                state.source,
                "; ".join(violations),
            )
            return NOT_GENERATED
        return state
