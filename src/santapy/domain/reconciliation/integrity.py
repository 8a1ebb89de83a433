"""Structural checks for assignment sets returned by the store."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from santapy.domain.model import Assignment, ParticipantId


def find_pairing_violations(
    assignments: Iterable[Assignment],
    *,
    participant_ids: Collection[ParticipantId] | None = None,
) -> list[str]:
    """Describe every way ``assignments`` fails to be part of a derangement.

    The list may be partial (a token-scoped fetch only embeds some rows), so
    completeness is not checked. Ids are checked against ``participant_ids``
    only when a roster is known.
    """

    rows = list(assignments)
    violations: list[str] = []

    givers = Counter(row.giver_id for row in rows)
    receivers = Counter(row.receiver_id for row in rows)
    violations.extend(
        f"participant {giver} is a giver {count} times"
        for giver, count in sorted(givers.items())
        if count > 1
    )
    violations.extend(
        f"participant {receiver} is a receiver {count} times"
        for receiver, count in sorted(receivers.items())
        if count > 1
    )
    violations.extend(
        f"assignment {row.id} pairs participant {row.giver_id} with themselves"
        for row in rows
        if row.giver_id == row.receiver_id
    )

    if participant_ids is not None:
        known = set(participant_ids)
        for row in rows:
            orphans = [pid for pid in (row.giver_id, row.receiver_id) if pid not in known]
            violations.extend(
                f"assignment {row.id} references unknown participant {pid}" for pid in orphans
            )

    return violations


def cycle_lengths(pairs: Iterable[tuple[ParticipantId, ParticipantId]]) -> list[int]:
    """Lengths of the giver -> receiver cycles, longest first.

    Chains that do not close (partial tables) are skipped.
    """

    successor = dict(pairs)
    seen: set[ParticipantId] = set()
    lengths: list[int] = []
    for start in successor:
        if start in seen:
            continue
        length = 0
        current: ParticipantId | None = start
        path: set[ParticipantId] = set()
        while current is not None and current not in path and current not in seen:
            path.add(current)
            length += 1
            current = successor.get(current)
        seen |= path
        if current == start:
            lengths.append(length)
    return sorted(lengths, reverse=True)
