"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from santapy.adapters.identity import StoreSessionIdentity
from santapy.adapters.party_store import PartyStoreClient
from santapy.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from santapy.config import StoreConfig
    from santapy.domain.model import Exclusion, ParticipantId, Party, PartyId, PartyStatus
    from santapy.domain.ports import GenerationSummary, IdentityProvider, PartyStore
    from santapy.domain.reconciliation import (
        AssignmentProjection,
        ConfirmationGate,
        GenerationOptions,
        PartyAssignmentView,
    )

log = getLogger(__name__)


def build_engine(
    *,
    store: PartyStore | None = None,
    identity: IdentityProvider | None = None,
    config: StoreConfig | None = None,
) -> ReconciliationEngine:
    """Wire the reconciliation engine to the configured adapters."""

    if store is None:
        store = PartyStoreClient(config) if config is not None else PartyStoreClient()
    if identity is None:
        has_session = True
        if isinstance(store, PartyStoreClient):
            has_session = store.config.has_session
        identity = StoreSessionIdentity(store, has_session=has_session)
    return ReconciliationEngine(store=store, identity=identity)


async def load_party_view(
    engine: ReconciliationEngine,
    party_id: PartyId,
    *,
    access_token: str | None = None,
) -> tuple[PartyAssignmentView, AssignmentProjection]:
    """Open the party's view and resolve what the current viewer may see."""

    view = engine.open_view(party_id, access_token=access_token)
    projection = await view.projection()
    log.info(
        "Loaded party %s: generated=%s, host_table=%s",
        party_id,
        projection.generated,
        projection.all_assignments is not None,
    )
    return view, projection


async def generate_assignments(
    engine: ReconciliationEngine,
    party_id: PartyId,
    options: GenerationOptions | None = None,
    *,
    confirm: ConfirmationGate,
) -> GenerationSummary | None:
    # the lifecycle is only known once the party has been resolved
    await load_party_view(engine, party_id)
    summary = await engine.generate(party_id, options, confirm=confirm)
    if summary is not None:
        log.info(
            "Generation finished for party %s: created=%s, emails=%s",
            party_id,
            summary.assignments_created,
            summary.emails_sent,
        )
    return summary


async def delete_assignments(
    engine: ReconciliationEngine,
    party_id: PartyId,
    *,
    confirm: ConfirmationGate,
) -> bool:
    await load_party_view(engine, party_id)
    return await engine.delete(party_id, confirm=confirm)


async def list_exclusions(engine: ReconciliationEngine, party_id: PartyId) -> list[Exclusion]:
    return await engine.exclusions.list(party_id)


async def add_exclusion(
    engine: ReconciliationEngine,
    party_id: PartyId,
    participant_a: ParticipantId,
    participant_b: ParticipantId,
) -> Exclusion:
    return await engine.exclusions.add(party_id, participant_a, participant_b)


async def remove_exclusion(
    engine: ReconciliationEngine,
    party_id: PartyId,
    participant_a: ParticipantId,
    participant_b: ParticipantId,
) -> None:
    await engine.exclusions.remove(party_id, participant_a, participant_b)


async def update_party_settings(
    engine: ReconciliationEngine,
    party_id: PartyId,
    *,
    host_can_see_all: bool | None = None,
    status: PartyStatus | None = None,
) -> Party:
    view = engine.open_view(party_id)
    return await view.update_settings(host_can_see_all=host_can_see_all, status=status)
