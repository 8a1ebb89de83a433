#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from santapy.app import (
    add_exclusion,
    build_engine,
    delete_assignments,
    generate_assignments,
    list_exclusions,
    load_party_view,
    remove_exclusion,
    update_party_settings,
)
from santapy.common import configure_logging
from santapy.domain.model import PartyStatus
from santapy.domain.reconciliation import GenerationOptions, cycle_lengths
from santapy.domain.reconciliation.generation import DEFAULT_MAX_ATTEMPTS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from santapy.domain.reconciliation import (
        AssignmentProjection,
        ConfirmationGate,
        ConfirmationPrompt,
        PartyAssignmentView,
        ReconciliationEngine,
    )

log = logging.getLogger(__name__)

HIDDEN = "••••••••"


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean: {value}")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Secret Santa assignment viewer and manager")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Show the assignments you may see")
    show.add_argument("party_id", help="Party identifier")
    show.add_argument("--token", help="Participant access token from an invitation link")
    show.add_argument(
        "--reveal",
        type=int,
        action="append",
        default=[],
        metavar="ASSIGNMENT_ID",
        help="Reveal one row of the host table (repeatable)",
    )
    show.add_argument("--reveal-all", action="store_true", help="Reveal every host table row")

    generate = subparsers.add_parser("generate", help="Draw assignments for a party")
    generate.add_argument("party_id", help="Party identifier")
    generate.add_argument(
        "--force", action="store_true", help="Replace existing assignments with a new draw"
    )
    generate.add_argument(
        "--no-emails", action="store_true", help="Do not notify participants by email"
    )
    generate.add_argument("--lock", action="store_true", help="Lock the party after generation")
    generate.add_argument("--seed", type=int, help="Seed for the draw (defaults to now)")
    generate.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Maximum draw attempts (default: %(default)s)",
    )
    generate.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    delete = subparsers.add_parser("delete", help="Delete all assignments for a party")
    delete.add_argument("party_id", help="Party identifier")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    exclusions = subparsers.add_parser("exclusions", help="Manage forbidden pairs")
    exclusions_sub = exclusions.add_subparsers(dest="exclusions_command", required=True)
    exclusions_list = exclusions_sub.add_parser("list", help="List exclusions")
    exclusions_list.add_argument("party_id", help="Party identifier")
    for name, help_text in (("add", "Add an exclusion"), ("remove", "Remove an exclusion")):
        sub = exclusions_sub.add_parser(name, help=help_text)
        sub.add_argument("party_id", help="Party identifier")
        sub.add_argument("participant_a", type=int, help="First participant id")
        sub.add_argument("participant_b", type=int, help="Second participant id")

    settings = subparsers.add_parser("settings", help="Update party settings")
    settings.add_argument("party_id", help="Party identifier")
    settings.add_argument(
        "--host-can-see-all",
        type=_parse_bool,
        help="Whether the host may see every pairing (true/false)",
    )
    settings.add_argument(
        "--status",
        type=PartyStatus,
        choices=list(PartyStatus),
        help="New party status",
    )

    return parser.parse_args(list(argv))


def _confirmation_gate(*, assume_yes: bool) -> ConfirmationGate:
    def ask(prompt: ConfirmationPrompt) -> bool:
        if assume_yes:
            return True
        print(prompt.title)
        print(prompt.message)
        answer = input(f"{prompt.confirm_text}? [y/N] ")
        return answer.strip().lower() in {"y", "yes"}

    return ask


def _render_projection(view: PartyAssignmentView, projection: AssignmentProjection) -> None:
    snapshot = view.snapshot
    if snapshot is not None:
        party = snapshot.party
        print(f"Party {party.id} ({party.status})")

    if not projection.generated:
        print("Assignments have not been generated yet.")
        return

    mine = projection.my_assignment
    if mine is not None:
        print(f"You are giving to: {mine.receiver.name} <{mine.receiver.email}>")
        if mine.wishlist:
            print(f"  Wishlist: {mine.wishlist}")
        if mine.wishlist_description:
            print(f"  Notes: {mine.wishlist_description}")
    elif projection.viewer_participant_id is None:
        print("You are not a participant of this party.")

    if projection.all_assignments is None:
        return
    rows = view.rows()
    lengths = cycle_lengths((row.giver.id, row.receiver.id) for row, _ in rows)
    if lengths:
        print(f"All assignments ({len(rows)} rows, cycles: {lengths}):")
    else:
        print(f"All assignments ({len(rows)} rows):")
    for row, visible in rows:
        if visible:
            print(f"  [{row.id}] {row.giver.name} -> {row.receiver.name}")
        else:
            print(f"  [{row.id}] {row.giver.name} -> {HIDDEN}")


async def _show(engine: ReconciliationEngine, args: argparse.Namespace) -> None:
    view, projection = await load_party_view(engine, args.party_id, access_token=args.token)
    if args.reveal_all:
        view.reveal.reveal_all(projection.assignment_ids)
    for assignment_id in args.reveal:
        view.toggle(assignment_id)
    _render_projection(view, projection)


async def _run(engine: ReconciliationEngine, args: argparse.Namespace) -> None:
    if args.command == "show":
        await _show(engine, args)
    elif args.command == "generate":
        options = GenerationOptions(
            send_emails=not args.no_emails,
            lock_after_generation=args.lock,
            force_regenerate=args.force,
            max_attempts=args.max_attempts,
            seed=args.seed,
        )
        summary = await generate_assignments(
            engine, args.party_id, options, confirm=_confirmation_gate(assume_yes=args.yes)
        )
        if summary is None:
            print("Cancelled.")
        else:
            seed = f" (seed {summary.seed})" if summary.seed is not None else ""
            print(f"Assignments generated{seed}.")
    elif args.command == "delete":
        deleted = await delete_assignments(
            engine, args.party_id, confirm=_confirmation_gate(assume_yes=args.yes)
        )
        print("Assignments deleted." if deleted else "Cancelled.")
    elif args.command == "exclusions":
        await _run_exclusions(engine, args)
    elif args.command == "settings":
        party = await update_party_settings(
            engine,
            args.party_id,
            host_can_see_all=args.host_can_see_all,
            status=args.status,
        )
        print(f"Party {party.id}: status={party.status}, host_can_see_all={party.host_can_see_all}")
    else:
        raise ValueError(f"Unsupported command: {args.command}")


async def _run_exclusions(engine: ReconciliationEngine, args: argparse.Namespace) -> None:
    if args.exclusions_command == "list":
        records = await list_exclusions(engine, args.party_id)
        if not records:
            print("No exclusions.")
        for record in records:
            print(f"  {record.first_id} <-> {record.second_id}")
    elif args.exclusions_command == "add":
        record = await add_exclusion(engine, args.party_id, args.participant_a, args.participant_b)
        print(f"Excluded {record.first_id} <-> {record.second_id}")
    else:
        await remove_exclusion(engine, args.party_id, args.participant_a, args.participant_b)
        print("Exclusion removed.")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.WARNING)

    try:
        engine = build_engine()
        asyncio.run(_run(engine, parsed_args))
    except Exception as e:  # noqa: BLE001
        log.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
