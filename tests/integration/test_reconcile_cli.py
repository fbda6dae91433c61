"""Integration tests for the reconciliation command"""

from datetime import timedelta
from decimal import Decimal

import httpx
import pytest

from accountability_gateway.domain.exceptions import StoreUnavailableError
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.schema import DEBT
from accountability_gateway.scripts.reconcile import build_parser, main, run


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.uber_earnings == Decimal("0")
    assert args.interest_only is False
    assert args.no_notify is False


def test_parser_rejects_negative_earnings():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--uber-earnings", "-5"])


def test_missing_configuration_exits_nonzero(monkeypatch):
    monkeypatch.setattr("accountability_gateway.scripts.reconcile.settings.notion_cardio_db_id", None)
    assert main([]) == 1


async def test_run_prints_summary_and_notifies(ledger_services, notifier, sent_messages, clock, capsys):
    clock.today -= timedelta(days=1)
    await ledger_services.cardio.assign("run", 30)
    clock.today += timedelta(days=1)

    code = await run(build_parser().parse_args([]), ledger_services, notifier)

    assert code == 0
    out = capsys.readouterr().out
    assert "Nightly Reconciliation Summary" in out
    # Summary first, then the escalation for the outstanding debt
    assert len(sent_messages) == 2
    assert sent_messages[0].startswith("```")
    assert "$65.00" in sent_messages[1]


async def test_run_without_notify(services, notifier, sent_messages):
    code = await run(build_parser().parse_args(["--no-notify"]), services, notifier)

    assert code == 0
    assert sent_messages == []


async def test_interest_only(services, capsys):
    await services.debt.create(Decimal("50"))

    code = await run(build_parser().parse_args(["--interest-only"]), services)

    assert code == 0
    assert "Interest applied to 1 debts: $15.00" in capsys.readouterr().out
    assert (await services.debt.get_total()).total_debt == Decimal("65.00")


async def test_failed_run_exits_nonzero(services, store):
    store.fail("query", "cardio-db", StoreUnavailableError("Record store unreachable"))

    assert await run(build_parser().parse_args([]), services) == 1


async def test_unexpected_error_exits_nonzero(services, store):
    store.fail("query", "cardio-db", ValueError("unparseable row"))

    assert await run(build_parser().parse_args([]), services) == 1


async def test_escalation_failure_keeps_successful_exit(services, store):
    """Test a store error while escalating after the summary is posted"""
    posted = []

    def handler(request: httpx.Request) -> httpx.Response:
        posted.append(request)
        store.fail("query", "debt-db", StoreUnavailableError("store down"))
        return httpx.Response(204)

    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", transport=httpx.MockTransport(handler))

    code = await run(build_parser().parse_args([]), services, notifier)

    assert code == 0
    assert len(posted) == 1


async def test_escalation_with_undated_debt(services, notifier, sent_messages, store):
    await store.create(
        "debt-db",
        {
            DEBT.original_amount: props.number_value(20),
            DEBT.current_amount: props.number_value(20),
            DEBT.interest_rate: props.number_value(0.30),
            DEBT.status: props.select_value("active"),
        },
        "Hand-entered debt",
    )

    code = await run(build_parser().parse_args([]), services, notifier)

    assert code == 0
    assert len(sent_messages) == 2
    assert "$26.00" in sent_messages[1]
