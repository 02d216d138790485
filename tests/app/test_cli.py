from __future__ import annotations

from datetime import UTC, datetime

import pytest

from devicesync.domain.errors import FeedRunNotFoundError
from devicesync.domain.model import TenantStatusSnapshot
from devicesync.domain.reconciliation import GateVerdict, ReconcileResult
from devicesync.domain.reporting import RunSummary
from devicesync.ui import cli as cli_module

PROCESSED_AT = datetime(2026, 10, 1, 7, 0, tzinfo=UTC)


def _result(tenant_id: int | None = None, *, valid: bool = True) -> ReconcileResult:
    verdict = GateVerdict.valid() if valid else GateVerdict.invalid("no staging records for scope")
    return ReconcileResult(
        run_id=5, tenant_id=tenant_id, processed_at=PROCESSED_AT, verdict=verdict
    )


def test_reconcile_command_passes_run_and_tenant(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[tuple[int, int | None]] = []

    def fake_reconcile(run_id: int, tenant_id: int | None = None) -> ReconcileResult:
        captured.append((run_id, tenant_id))
        return _result(tenant_id)

    monkeypatch.setattr(cli_module, "reconcile_feed_run", fake_reconcile)

    cli_module.main(["reconcile", "--run-id", "5", "--tenant-id", "2"])
    cli_module.main(["reconcile", "--run-id", "5"])

    assert captured == [(5, 2), (5, None)]


def test_reconcile_each_tenant_flag(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(
        cli_module,
        "reconcile_each_tenant",
        lambda run_id: [_result(1), _result(2, valid=False)],
    )

    with caplog.at_level("INFO", logger=cli_module.__name__):
        cli_module.main(["reconcile", "--run-id", "5", "--each-tenant"])

    assert "no staging records for scope" in caplog.text
    assert "tenant=1" in caplog.text


def test_summary_command_logs_counts(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    summary = RunSummary(
        run_id=5,
        tenant_scope=None,
        is_valid=True,
        processed_at=PROCESSED_AT,
        unknown_flip_count=3,
        snapshots=(TenantStatusSnapshot(run_id=5, tenant_id=1, unknown_count=3),),
    )
    monkeypatch.setattr(cli_module, "summarize_feed_run", lambda run_id: summary)

    with caplog.at_level("INFO", logger=cli_module.__name__):
        cli_module.main(["summary", "--run-id", "5"])

    assert "unknown_flips=3" in caplog.text
    assert "unknown=3" in caplog.text


@pytest.mark.parametrize(
    "argv",
    [
        ["reconcile"],
        ["reconcile", "--run-id", "zero"],
        ["reconcile", "--run-id", "0"],
        ["reconcile", "--run-id", "1", "--tenant-id", "2", "--each-tenant"],
    ],
)
def test_invalid_arguments_exit_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_fatal_errors_exit_with_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reconcile(run_id: int, tenant_id: int | None = None) -> ReconcileResult:
        raise FeedRunNotFoundError(run_id)

    monkeypatch.setattr(cli_module, "reconcile_feed_run", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile", "--run-id", "9"])

    assert excinfo.value.code == 1


def test_bad_log_level_exits_before_running(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVICESYNC_LOG_LEVEL", "chatty")
    monkeypatch.setattr(cli_module, "reconcile_feed_run", pytest.fail)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile", "--run-id", "5"])

    assert "DEVICESYNC_LOG_LEVEL" in str(excinfo.value.code)
