"""Assignment reconciliation and disclosure core.

Layered flow for one party view:
1) resolve raw assignment state from ordered sources
2) check pairing integrity
3) project the state down to what the viewer may see
4) gate individual host-table rows through the reveal tracker

Generation and exclusion changes run through the orchestrator and exclusion
manager, which share one per-party in-flight guard and invalidate the view.
"""

from __future__ import annotations

from .contracts import (
    EMPTY_PROJECTION,
    NOT_GENERATED,
    AssignmentProjection,
    RawAssignmentState,
)
from .engine import ReconciliationEngine
from .exclusions import ExclusionManager
from .generation import (
    DELETE_PROMPT,
    GENERATE_PROMPT,
    GENERATE_SILENT_PROMPT,
    REGENERATE_PROMPT,
    ConfirmationGate,
    ConfirmationPrompt,
    GenerationOptions,
    GenerationOrchestrator,
)
from .guard import PartyOperationGuard
from .integrity import cycle_lengths, find_pairing_violations
from .policy import identify_viewer_participant, may_see_all, project
from .resolve import (
    AssignmentSource,
    SessionScopedSource,
    SnapshotSource,
    SourceResolver,
    TokenScopedSource,
    default_sources,
)
from .reveal import RevealState
from .view import PartyAssignmentView

__all__ = [
    "DELETE_PROMPT",
    "EMPTY_PROJECTION",
    "GENERATE_PROMPT",
    "GENERATE_SILENT_PROMPT",
    "NOT_GENERATED",
    "REGENERATE_PROMPT",
    "AssignmentProjection",
    "AssignmentSource",
    "ConfirmationGate",
    "ConfirmationPrompt",
    "ExclusionManager",
    "GenerationOptions",
    "GenerationOrchestrator",
    "PartyAssignmentView",
    "PartyOperationGuard",
    "RawAssignmentState",
    "ReconciliationEngine",
    "RevealState",
    "SessionScopedSource",
    "SnapshotSource",
    "SourceResolver",
    "TokenScopedSource",
    "cycle_lengths",
    "default_sources",
    "find_pairing_violations",
    "identify_viewer_participant",
    "may_see_all",
    "project",
]
