"""Composition root for the reconciliation subsystem.

The engine wires stage objects together but does not prescribe concrete
adapters: any ``PartyStore`` and ``IdentityProvider`` will do.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from santapy.domain.model import AssignmentLifecycle

from .exclusions import ExclusionManager
from .generation import GenerationOrchestrator
from .guard import PartyOperationGuard
from .resolve import SourceResolver, default_sources
from .view import PartyAssignmentView

if TYPE_CHECKING:
    from collections.abc import Sequence

    from santapy.domain.model import PartyId
    from santapy.domain.ports import GenerationSummary, IdentityProvider, PartyStore

    from .generation import ConfirmationGate, GenerationOptions
    from .resolve import AssignmentSource

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Own one view per party and keep it in step with remote mutations."""

    store: PartyStore
    identity: IdentityProvider
    sources: Sequence[AssignmentSource] | None = None
    guard: PartyOperationGuard = field(default_factory=PartyOperationGuard)
    resolver: SourceResolver = field(init=False)
    orchestrator: GenerationOrchestrator = field(init=False)
    exclusions: ExclusionManager = field(init=False)
    _views: dict[PartyId, PartyAssignmentView] = field(
        default_factory=dict[str, PartyAssignmentView], init=False
    )

    def __post_init__(self) -> None:
        sources = self.sources if self.sources is not None else default_sources(self.store)
        self.resolver = SourceResolver(tuple(sources))
        self.orchestrator = GenerationOrchestrator(self.store, self.guard)
        self.exclusions = ExclusionManager(self.store, self.guard)
        self.orchestrator.subscribe(self._on_lifecycle)

    def open_view(
        self, party_id: PartyId, *, access_token: str | None = None
    ) -> PartyAssignmentView:
        existing = self._views.get(party_id)
        if existing is not None:
            if existing.access_token == access_token:
                return existing
            self.close_view(party_id)

        view = PartyAssignmentView(
            party_id=party_id,
            store=self.store,
            identity=self.identity,
            resolver=self.resolver,
            orchestrator=self.orchestrator,
            access_token=access_token,
        )
        self._views[party_id] = view
        log.debug("Opened view for party %s", party_id)
        return view

    def view(self, party_id: PartyId) -> PartyAssignmentView | None:
        return self._views.get(party_id)

    def close_view(self, party_id: PartyId) -> None:
        view = self._views.pop(party_id, None)
        if view is not None:
            view.close()
        self.orchestrator.forget(party_id)
        log.debug("Closed view for party %s", party_id)

    def close(self) -> None:
        for party_id in list(self._views):
            self.close_view(party_id)

    async def generate(
        self,
        party_id: PartyId,
        options: GenerationOptions | None = None,
        *,
        confirm: ConfirmationGate,
    ) -> GenerationSummary | None:
        return await self.orchestrator.generate(party_id, options, confirm=confirm)

    async def delete(self, party_id: PartyId, *, confirm: ConfirmationGate) -> bool:
        return await self.orchestrator.delete(party_id, confirm=confirm)

    def _on_lifecycle(self, party_id: PartyId, state: AssignmentLifecycle) -> None:
        view = self._views.get(party_id)
        if view is None:
            return
        if state is AssignmentLifecycle.GENERATED:
            view.mark_generated()
        elif state is AssignmentLifecycle.UNGENERATED:
            view.clear()
