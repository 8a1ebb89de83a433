"""Generate / regenerate / delete lifecycle for a party's assignments.

::

    ungenerated --generate--> generating --ok--> generated
    generated --generate(force)--> regenerating --ok--> generated
    generated --delete--> deleting --ok--> ungenerated

A failed remote call puts the party back where it was and re-raises the store
error unchanged. Nothing is retried here; retrying is the user's call.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from inspect import isawaitable
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from santapy.domain.errors import InvalidLifecycleTransition, PartyStoreError
from santapy.domain.model import AssignmentLifecycle
from santapy.domain.ports import GenerationRequest

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from santapy.domain.model import PartyId
    from santapy.domain.ports import GenerationSummary, PartyStore

    from .guard import PartyOperationGuard

log = getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000


def _epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True, kw_only=True)
class GenerationOptions:
    send_emails: bool = True
    lock_after_generation: bool = False
    force_regenerate: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: int | None = None

    def to_request(self, *, clock: Callable[[], int] = _epoch_millis) -> GenerationRequest:
        return GenerationRequest(
            regenerate=self.force_regenerate,
            force_regenerate=self.force_regenerate,
            send_emails=self.send_emails,
            lock_after_generation=self.lock_after_generation,
            max_attempts=self.max_attempts,
            seed=self.seed if self.seed is not None else clock(),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfirmationPrompt:
    title: str
    message: str
    confirm_text: str
    destructive: bool = False


class ConfirmationGate(Protocol):
    """Yes/no question asked before any remote mutation."""

    def __call__(self, prompt: ConfirmationPrompt) -> bool | Awaitable[bool]: ...


GENERATE_PROMPT = ConfirmationPrompt(
    title="Generate Assignments?",
    message=(
        "This will generate Secret Santa assignments for all participants. "
        "Participants will be notified via email."
    ),
    confirm_text="Generate",
)
GENERATE_SILENT_PROMPT = ConfirmationPrompt(
    title="Generate Assignments?",
    message="This will generate Secret Santa assignments for all participants.",
    confirm_text="Generate",
)
REGENERATE_PROMPT = ConfirmationPrompt(
    title="Regenerate Assignments?",
    message="This will replace every existing assignment with a new draw.",
    confirm_text="Regenerate",
    destructive=True,
)
DELETE_PROMPT = ConfirmationPrompt(
    title="Delete Assignments?",
    message=(
        "This will delete all Secret Santa assignments. "
        "You can generate new ones afterward."
    ),
    confirm_text="Delete",
    destructive=True,
)

type LifecycleListener = Callable[[PartyId, AssignmentLifecycle], None]


async def _ask(confirm: ConfirmationGate, prompt: ConfirmationPrompt) -> bool:
    answer = confirm(prompt)
    if isawaitable(answer):
        answer = await answer
    return bool(answer)


@dataclass(slots=True)
class GenerationOrchestrator:
    store: PartyStore
    guard: PartyOperationGuard
    clock: Callable[[], int] = _epoch_millis
    _states: dict[PartyId, AssignmentLifecycle] = field(
        default_factory=dict[str, AssignmentLifecycle]
    )
    _listeners: list[LifecycleListener] = field(default_factory=list["LifecycleListener"])

    def subscribe(self, listener: LifecycleListener) -> None:
        self._listeners.append(listener)

    def state(self, party_id: PartyId) -> AssignmentLifecycle:
        return self._states.get(party_id, AssignmentLifecycle.UNGENERATED)

    def observe(self, party_id: PartyId, *, generated: bool) -> None:
        """Align the lifecycle with freshly resolved state, unless a call is running."""

        if self.guard.in_flight(party_id) is not None:
            return
        self._states[party_id] = (
            AssignmentLifecycle.GENERATED if generated else AssignmentLifecycle.UNGENERATED
        )

    def forget(self, party_id: PartyId) -> None:
        if self.guard.in_flight(party_id) is None:
            self._states.pop(party_id, None)

    async def generate(
        self,
        party_id: PartyId,
        options: GenerationOptions | None = None,
        *,
        confirm: ConfirmationGate,
    ) -> GenerationSummary | None:
        """Draw assignments; ``None`` means the confirmation was declined."""

        opts = options or GenerationOptions()
        with self.guard.hold(party_id, "generate"):
            before = self.state(party_id)
            if before is AssignmentLifecycle.GENERATED and not opts.force_regenerate:
                raise InvalidLifecycleTransition(
                    f"Assignments for party {party_id} already exist; force regeneration to redraw"
                )
            if before not in (AssignmentLifecycle.UNGENERATED, AssignmentLifecycle.GENERATED):
                raise InvalidLifecycleTransition(
                    f"Cannot generate party {party_id} while {before}"
                )

            if before is AssignmentLifecycle.GENERATED:
                prompt = REGENERATE_PROMPT
            else:
                prompt = GENERATE_PROMPT if opts.send_emails else GENERATE_SILENT_PROMPT
            if not await _ask(confirm, prompt):
                log.info("Generation for party %s declined", party_id)
                return None

            self._states[party_id] = (
                AssignmentLifecycle.REGENERATING
                if before is AssignmentLifecycle.GENERATED
                else AssignmentLifecycle.GENERATING
            )
            request = opts.to_request(clock=self.clock)
            outcome = before
            try:
                summary = await self.store.generate_assignments(party_id, request)
                outcome = AssignmentLifecycle.GENERATED
            except PartyStoreError as exc:
                log.warning("Generation for party %s failed: %s", party_id, exc)
                raise
            finally:
                self._states[party_id] = outcome

        log.info("Generated assignments for party %s (seed=%s)", party_id, request.seed)
        self._notify(party_id, AssignmentLifecycle.GENERATED)
        return summary

    async def delete(self, party_id: PartyId, *, confirm: ConfirmationGate) -> bool:
        """Delete every assignment; returns ``False`` when the confirmation was declined."""

        with self.guard.hold(party_id, "delete"):
            before = self.state(party_id)
            if before is not AssignmentLifecycle.GENERATED:
                raise InvalidLifecycleTransition(
                    f"Cannot delete assignments for party {party_id} while {before}"
                )

            if not await _ask(confirm, DELETE_PROMPT):
                log.info("Deletion for party %s declined", party_id)
                return False

            self._states[party_id] = AssignmentLifecycle.DELETING
            outcome = before
            try:
                await self.store.delete_assignments(party_id)
                outcome = AssignmentLifecycle.UNGENERATED
            except PartyStoreError as exc:
                log.warning("Deleting assignments for party %s failed: %s", party_id, exc)
                raise
            finally:
                self._states[party_id] = outcome

        log.info("Deleted assignments for party %s", party_id)
        self._notify(party_id, AssignmentLifecycle.UNGENERATED)
        return True

    def _notify(self, party_id: PartyId, state: AssignmentLifecycle) -> None:
        for listener in self._listeners:
            listener(party_id, state)
