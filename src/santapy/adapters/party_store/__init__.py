"""Public interface for the party store adapter."""

from __future__ import annotations

from .client import PartyStoreClient, error_for_status
from .schema import AssignmentPayload, AssignmentsPayload, Envelope, PartyDetailsPayload
from .translator import parse_remote_assignments, parse_snapshot

__all__ = [
    "AssignmentPayload",
    "AssignmentsPayload",
    "Envelope",
    "PartyDetailsPayload",
    "PartyStoreClient",
    "error_for_status",
    "parse_remote_assignments",
    "parse_snapshot",
]
