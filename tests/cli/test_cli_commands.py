from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import pytest

import plansync.cli as cli
from plansync import (
    ConfigError,
    ImportValidationError,
    PermissionDeniedError,
    PlanSync,
    RemoteUnavailableError,
    StorageError,
    SyncError,
    SyncInProgressError,
)
from plansync.cli import build_parser, main
from plansync.core.contracts.identity import Identity
from plansync.core.contracts.record import SyncStatus
from plansync.core.storage.file import FileKeyValueStore
from tests.fakes.documents import remote_document
from tests.fakes.remote import SpyRemoteStore


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "plansync.json"
    path.write_text(json.dumps({"storage_dir": "store", "user_id": "ada"}), encoding="utf-8")
    return path


@pytest.fixture
def plans_file(tmp_path: Path) -> Path:
    path = tmp_path / "plans.json"
    path.write_text(
        json.dumps(
            [
                {"id": "mech", "name": "Mechanics", "subjectName": "Physics", "chapters": []},
                {"id": "alg", "name": "Algebra", "subjectName": "Maths", "chapters": []},
            ]
        ),
        encoding="utf-8",
    )
    return path


class _Answer:
    def __init__(self, value: bool | None) -> None:
        self.value = value

    def ask(self) -> bool | None:
        return self.value


def _answer_prompts(monkeypatch: pytest.MonkeyPatch, value: bool | None) -> list[str]:
    asked: list[str] = []

    def _confirm(message: str, **_kwargs: object) -> _Answer:
        asked.append(message)
        return _Answer(value)

    monkeypatch.setattr("plansync.cli.common.questionary.confirm", _confirm)
    return asked


def _use_remote(monkeypatch: pytest.MonkeyPatch, remote: SpyRemoteStore) -> None:
    """Make every CLI invocation share *remote* instead of a fresh in-memory one."""

    async def _from_config(config: Any, *, progress: Any = None) -> PlanSync:
        return PlanSync(
            storage=FileKeyValueStore(config.storage_dir),
            remote=remote,
            identity=Identity(user_id=config.user_id, is_privileged=config.is_privileged),
            progress=progress,
        )

    monkeypatch.setattr("plansync.cli.PlanSync.from_config", _from_config)


def _local_statuses(config_path: Path) -> dict[str, SyncStatus]:
    raw = json.loads(FileKeyValueStore(config_path.parent / "store").read("local_study_plans") or b"{}")
    return {record_id: SyncStatus(record["syncStatus"]) for record_id, record in raw.get("records", {}).items()}


def test_build_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([])

    assert exc.value.code == 2


def test_build_parser_version_prints_and_exits(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])

    assert exc.value.code == 0
    assert "plansync" in capsys.readouterr().out


def test_build_parser_pull_flags() -> None:
    args = build_parser().parse_args(["pull", "--dry-run", "-y", "--config", "x.json"])

    assert (args.command, args.dry_run, args.yes, args.config, args.verbose) == ("pull", True, True, "x.json", False)


def test_list_on_empty_store(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list", "--config", str(config_path)]) == 0
    assert "No local records." in capsys.readouterr().out


def test_import_status_push_list_flow(
    config_path: Path, plans_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    remote = SpyRemoteStore()
    _use_remote(monkeypatch, remote)

    assert main(["import", str(plans_file), "--config", str(config_path)]) == 0
    assert main(["status", "--config", str(config_path)]) == 0
    status_out = capsys.readouterr().out
    assert "Unsynced edits: 2" in status_out
    assert "alg, mech" in status_out

    assert main(["push", "--yes", "--config", str(config_path)]) == 0
    assert "plansync - push complete (apply)" in capsys.readouterr().out
    assert sorted(remote.documents) == ["alg", "mech"]
    assert _local_statuses(config_path) == {"mech": SyncStatus.SYNCED, "alg": SyncStatus.SYNCED}

    assert main(["list", "--config", str(config_path)]) == 0
    listing = capsys.readouterr().out
    assert "mech" in listing and "synced" in listing and "Mechanics" in listing


def test_push_declined_uploads_nothing(
    config_path: Path, plans_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    remote = SpyRemoteStore()
    _use_remote(monkeypatch, remote)
    asked = _answer_prompts(monkeypatch, False)
    main(["import", str(plans_file), "--config", str(config_path)])

    assert main(["push", "--config", str(config_path)]) == 0

    assert asked == ["Upload 2 unsynced edits to the remote store?"]
    assert remote.operations == ()
    assert set(_local_statuses(config_path).values()) == {SyncStatus.NEW}


def test_push_dry_run_does_not_prompt_or_upload(
    config_path: Path, plans_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    remote = SpyRemoteStore()
    _use_remote(monkeypatch, remote)
    asked = _answer_prompts(monkeypatch, True)
    main(["import", str(plans_file), "--config", str(config_path)])

    assert main(["push", "--dry-run", "--config", str(config_path)]) == 0

    assert asked == []
    assert remote.operations == ()
    assert "[dry-run] No changes were made" in capsys.readouterr().out


@pytest.mark.parametrize(("answer", "expected_name"), [(False, "Mechanics"), (True, "Remote mechanics")])
def test_pull_confirms_before_discarding_local_edits(
    config_path: Path,
    plans_file: Path,
    monkeypatch: pytest.MonkeyPatch,
    answer: bool,
    expected_name: str,
) -> None:
    remote = SpyRemoteStore([remote_document("mech", "Remote mechanics")])
    _use_remote(monkeypatch, remote)
    asked = _answer_prompts(monkeypatch, answer)
    main(["import", str(plans_file), "--config", str(config_path)])

    assert main(["pull", "--config", str(config_path)]) == 0

    assert len(asked) == 1 and "1 unsynced local edit" in asked[0]
    raw = json.loads(FileKeyValueStore(config_path.parent / "store").read("local_study_plans") or b"{}")
    assert raw["records"]["mech"]["payload"]["name"] == expected_name
    assert raw["records"]["alg"]["syncStatus"] == "new"


def test_pull_without_conflicts_does_not_prompt(
    config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _use_remote(monkeypatch, SpyRemoteStore([remote_document("C")]))
    asked = _answer_prompts(monkeypatch, False)

    assert main(["pull", "--config", str(config_path)]) == 0

    assert asked == []
    assert "Adopted:   C" in capsys.readouterr().out
    assert _local_statuses(config_path) == {"C": SyncStatus.SYNCED}


def test_remove_after_push_tombstones_remote(
    config_path: Path, plans_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    remote = SpyRemoteStore()
    _use_remote(monkeypatch, remote)
    main(["import", str(plans_file), "--config", str(config_path)])
    main(["push", "--yes", "--config", str(config_path)])

    assert main(["remove", "mech", "--config", str(config_path)]) == 0

    assert "marked it deleted remotely" in capsys.readouterr().out
    assert remote.documents["mech"]["isDeleted"] is True
    assert "mech" not in _local_statuses(config_path)


def test_export_and_browse(
    config_path: Path,
    plans_file: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _use_remote(monkeypatch, SpyRemoteStore([remote_document("R1", "Remote one")]))
    main(["import", str(plans_file), "--config", str(config_path)])
    target = tmp_path / "out.json"

    assert main(["export", str(target), "--config", str(config_path)]) == 0
    assert main(["browse", "--config", str(config_path)]) == 0
    assert main(["browse", "--config", str(config_path)]) == 0

    out = capsys.readouterr().out
    assert "Exported 2 plans" in out
    assert "1 remote plan (fetched from remote)" in out
    assert "1 remote plan (from cache," in out
    assert {document["id"] for document in json.loads(target.read_text(encoding="utf-8"))} == {"mech", "alg"}


def test_clear_with_yes_removes_local_data(config_path: Path, plans_file: Path) -> None:
    main(["import", str(plans_file), "--config", str(config_path)])

    assert main(["clear", "--yes", "--config", str(config_path)]) == 0

    assert FileKeyValueStore(config_path.parent / "store").keys() == ["storage_version"]


def test_student_cannot_run_mutating_commands(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "plansync.json"
    config_path.write_text(json.dumps({"storage_dir": "store", "user_id": "sam", "role": "STUDENT"}), encoding="utf-8")

    assert main(["push", "--yes", "--config", str(config_path)]) == 4
    assert "not allowed" in capsys.readouterr().err
    assert main(["list", "--config", str(config_path)]) == 0


def test_missing_config_and_invalid_import_exit_3(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([{"name": "no subject"}]), encoding="utf-8")

    assert main(["list", "--config", str(tmp_path / "absent.json")]) == 3
    assert main(["import", str(bad), "--config", str(config_path)]) == 3
    assert "Missing 'subjectName' field" in capsys.readouterr().err


def test_main_enables_verbose_logging(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    captured: dict[str, object] = {}

    def _fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("plansync.cli.logging.basicConfig", _fake_basic_config)

    main(["list", "--config", str(config_path), "--verbose"])

    assert captured["level"] == logging.DEBUG
    assert captured["stream"] == sys.stderr


@pytest.mark.parametrize(
    ("error", "exit_code"),
    [
        (ConfigError("bad config"), 3),
        (ImportValidationError(["Plan 1: Missing 'name' field"]), 3),
        (StorageError("disk"), 3),
        (RemoteUnavailableError("offline"), 4),
        (PermissionDeniedError("nope"), 4),
        (SyncError("mismatch"), 5),
        (SyncInProgressError("busy"), 5),
        (RuntimeError("boom"), 1),
    ],
)
def test_main_maps_errors_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], error: Exception, exit_code: int
) -> None:
    def _raise(_args: object) -> None:
        raise error

    monkeypatch.setitem(cli.COMMANDS, "status", _raise)

    assert main(["status"]) == exit_code
    assert capsys.readouterr().err.startswith("error: ")


def test_main_reports_interrupt(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def _interrupt(_args: object) -> None:
        raise KeyboardInterrupt

    monkeypatch.setitem(cli.COMMANDS, "push", _interrupt)

    assert main(["push"]) == 130
    assert capsys.readouterr().err.strip() == "interrupted"


def test_every_parser_command_is_dispatched() -> None:
    parser = build_parser()
    subparsers = next(action for action in parser._actions if action.dest == "command")

    assert set(subparsers.choices) == set(cli.COMMANDS)
