"""Domain port definitions for adapters."""

from __future__ import annotations

from .identity import IdentityProvider
from .store import (
    GenerationRequest,
    GenerationSummary,
    PartyStore,
    PartyUpdate,
    RemoteAssignments,
)

__all__ = [
    "GenerationRequest",
    "GenerationSummary",
    "IdentityProvider",
    "PartyStore",
    "PartyUpdate",
    "RemoteAssignments",
]
