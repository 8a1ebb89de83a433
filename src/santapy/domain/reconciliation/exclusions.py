"""Host-managed forbidden pairs."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from santapy.domain.model import Exclusion

if TYPE_CHECKING:
    from santapy.domain.model import ParticipantId, PartyId
    from santapy.domain.ports import PartyStore

    from .guard import PartyOperationGuard

log = getLogger(__name__)


@dataclass(slots=True)
class ExclusionManager:
    """Add, remove and list exclusions with unordered-pair semantics.

    The store enforces who may do this; its errors pass through untouched.
    Mutations take the party guard, so they never overlap a generate/delete.
    Nothing is cached: every ``add`` checks the store's current list.
    """

    store: PartyStore
    guard: PartyOperationGuard

    async def list(self, party_id: PartyId) -> list[Exclusion]:
        records = await self.store.list_exclusions(party_id)
        unique: dict[frozenset[ParticipantId], Exclusion] = {}
        for record in records:
            unique.setdefault(record.pair, record)
        return list(unique.values())

    async def add(
        self, party_id: PartyId, participant_a: ParticipantId, participant_b: ParticipantId
    ) -> Exclusion:
        wanted = Exclusion(party_id, participant_a, participant_b)
        for existing in await self.list(party_id):
            if existing.pair == wanted.pair:
                log.debug(
                    "Exclusion %s already present for party %s", sorted(wanted.pair), party_id
                )
                return existing

        with self.guard.hold(party_id, "add exclusion"):
            created = await self.store.add_exclusion(party_id, participant_a, participant_b)
        log.info("Added exclusion %s for party %s", sorted(created.pair), party_id)
        return created

    async def remove(
        self, party_id: PartyId, participant_a: ParticipantId, participant_b: ParticipantId
    ) -> None:
        target = Exclusion(party_id, participant_a, participant_b)
        with self.guard.hold(party_id, "remove exclusion"):
            await self.store.remove_exclusion(party_id, target.first_id, target.second_id)
        log.info("Removed exclusion %s for party %s", sorted(target.pair), party_id)
