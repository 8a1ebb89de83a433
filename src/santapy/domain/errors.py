"""Error taxonomy for the assignment reconciliation core.

Store errors are raised by adapters implementing :class:`~santapy.domain.ports.PartyStore`
and surfaced to callers verbatim. ``SourceUnavailable`` and ``StaleView`` never leave
the reconciliation package.
"""

from __future__ import annotations


class PartyStoreError(RuntimeError):
    """Raised when the remote party store rejects or fails a call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreUnavailable(PartyStoreError):
    """Transport-level failure; the store could not be reached."""


class AuthorizationDenied(PartyStoreError):
    """The store refused the call for lack of privilege (not the host, bad token)."""


class PartyNotFound(PartyStoreError):
    """The party (or token) does not exist."""


class GenerationInfeasible(PartyStoreError):
    """The store could not draw a pairing that satisfies the exclusions."""


class GenerationConflict(PartyStoreError):
    """Assignments already exist and regeneration was not forced."""


class SourceUnavailable(RuntimeError):
    """One candidate assignment source failed; the resolver falls through."""

    def __init__(self, source: str, cause: PartyStoreError) -> None:
        super().__init__(f"{source} source unavailable: {cause}")
        self.source = source
        self.cause = cause


class AssignmentFetchFailed(RuntimeError):
    """Assignment resolution failed in a way no source could recover from."""


class ConcurrentOperationRejected(RuntimeError):
    """A mutation was requested while another one is in flight for the same party."""

    def __init__(self, party_id: str, *, requested: str, in_flight: str) -> None:
        super().__init__(
            f"Cannot {requested} party {party_id}: {in_flight} is already in progress"
        )
        self.party_id = party_id
        self.requested = requested
        self.in_flight = in_flight


class StaleView(RuntimeError):
    """A response arrived for a view that has since been refreshed or torn down."""


class InvalidLifecycleTransition(RuntimeError):
    """The requested generate/delete is not valid from the current lifecycle state."""


class InvalidStatusTransition(ValueError):
    """A party status change would move backwards or leave a terminal state."""


class RosterInvariantViolation(ValueError):
    """Participant roster breaks email uniqueness or the single-host rule."""
