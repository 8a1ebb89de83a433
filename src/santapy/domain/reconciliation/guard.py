"""Per-party in-flight tracking for remote mutations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from santapy.domain.errors import ConcurrentOperationRejected

if TYPE_CHECKING:
    from types import TracebackType

    from santapy.domain.model import PartyId

log = getLogger(__name__)


class PartyOperationGuard:
    """At most one mutation per party may be outstanding.

    ``hold`` checks and marks the party in one synchronous step, so two
    coroutines can never both pass it; the mark is dropped when the ``with``
    block exits, whatever the outcome.
    """

    def __init__(self) -> None:
        self._in_flight: dict[PartyId, str] = {}

    def in_flight(self, party_id: PartyId) -> str | None:
        return self._in_flight.get(party_id)

    def hold(self, party_id: PartyId, operation: str) -> _Held:
        current = self._in_flight.get(party_id)
        if current is not None:
            log.info("Rejecting %s for party %s: %s in flight", operation, party_id, current)
            raise ConcurrentOperationRejected(party_id, requested=operation, in_flight=current)
        self._in_flight[party_id] = operation
        return _Held(self, party_id)

    def _release(self, party_id: PartyId) -> None:
        self._in_flight.pop(party_id, None)


class _Held:
    def __init__(self, guard: PartyOperationGuard, party_id: PartyId) -> None:
        self._guard = guard
        self._party_id = party_id

    def __enter__(self) -> None:
        return None

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._guard._release(self._party_id)  # noqa: SLF001
