from __future__ import annotations

import pytest

from santapy import main as main_module
from santapy.domain.reconciliation import ReconciliationEngine
from tests.helpers.party_store import FakeIdentity, FakePartyStore, host_viewer, make_cycle


def _install_engine(monkeypatch: pytest.MonkeyPatch, store: FakePartyStore) -> None:
    def fake_build_engine() -> ReconciliationEngine:
        return ReconciliationEngine(store=store, identity=FakeIdentity(host_viewer()))

    monkeypatch.setattr(main_module, "build_engine", fake_build_engine)


def test_show_hides_host_table_until_revealed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    store = FakePartyStore(assignments=make_cycle([1, 2, 3, 4]))
    _install_engine(monkeypatch, store)

    main_module.main(["show", "party-1", "--reveal", "101"])

    out = capsys.readouterr().out
    assert "You are giving to: Bob <bob@example.com>" in out
    assert "Wishlist: Bob's wishlist" in out
    assert "All assignments (4 rows, cycles: [4]):" in out
    assert f"[100] Alice -> {main_module.HIDDEN}" in out
    assert "[101] Bob -> Carol" in out


def test_show_before_generation(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _install_engine(monkeypatch, FakePartyStore())

    main_module.main(["show", "party-1"])

    assert "Assignments have not been generated yet." in capsys.readouterr().out


def test_generate_with_yes_skips_prompt(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    store = FakePartyStore()
    _install_engine(monkeypatch, store)

    def fail_input(_prompt: str) -> str:
        raise AssertionError("prompted despite --yes")

    monkeypatch.setattr("builtins.input", fail_input)

    main_module.main(["generate", "party-1", "--yes", "--seed", "7", "--no-emails"])

    assert "Assignments generated (seed 7)." in capsys.readouterr().out
    assert len(store.assignments) == 4
    (_, _, request) = next(call for call in store.calls if call[0] == "generate_assignments")
    assert request.seed == 7
    assert not request.send_emails


def test_declined_delete_keeps_assignments(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    store = FakePartyStore(assignments=make_cycle([1, 2, 3, 4]))
    _install_engine(monkeypatch, store)
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")

    main_module.main(["delete", "party-1"])

    out = capsys.readouterr().out
    assert "Delete Assignments?" in out
    assert "Cancelled." in out
    assert store.count("delete_assignments") == 0
    assert len(store.assignments) == 4


def test_exclusion_commands(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    store = FakePartyStore()
    _install_engine(monkeypatch, store)

    main_module.main(["exclusions", "add", "party-1", "3", "1"])
    main_module.main(["exclusions", "list", "party-1"])

    out = capsys.readouterr().out
    assert "Excluded 1 <-> 3" in out
    assert "  1 <-> 3" in out
    assert frozenset((1, 3)) in store.exclusions


def test_store_errors_exit_with_status_one(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _install_engine(monkeypatch, FakePartyStore())

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["show", "missing-party"])

    assert excinfo.value.code == 1
    assert "Error: Party not found" in capsys.readouterr().err


def test_invalid_arguments_exit_with_status_two(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(monkeypatch, FakePartyStore())

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["settings", "party-1", "--status", "bogus"])

    assert excinfo.value.code == 2
