"""Integration tests for the webhook notifier"""

import json
import random
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import httpx

from accountability_gateway.infrastructure.clients.discord import DiscordNotifier

WEBHOOK = "https://discord.test/api/webhooks/1/token"


def make_notifier(handler, **kwargs) -> DiscordNotifier:
    return DiscordNotifier(
        webhook_url=WEBHOOK,
        backoff_base=0.01,
        rng=random.Random(3),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_no_webhook_only_logs():
    notifier = DiscordNotifier(webhook_url=None)
    assert await notifier.send_message("hello") is False


async def test_posts_content_and_username():
    payloads = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(204)

    notifier = make_notifier(handler, username="Coach")

    assert await notifier.send_debt_assignment(Decimal("50"), "Missed cardio: bike") is True
    assert payloads[0]["username"] == "Coach"
    assert "$50.00" in payloads[0]["content"]
    assert "Missed cardio: bike" in payloads[0]["content"]


@patch("accountability_gateway.infrastructure.clients.discord.asyncio.sleep", new_callable=AsyncMock)
async def test_retries_with_exponential_backoff(mock_sleep: AsyncMock):
    """Test two failures then success sleeps base, then 2*base"""
    responses = iter([httpx.Response(500), httpx.Response(429), httpx.Response(204)])
    notifier = make_notifier(lambda request: next(responses))

    assert await notifier.send_message("hello") is True
    assert [call.args[0] for call in mock_sleep.await_args_list] == [0.01, 0.02]


@patch("accountability_gateway.infrastructure.clients.discord.asyncio.sleep", new_callable=AsyncMock)
async def test_gives_up_after_max_retries(mock_sleep: AsyncMock):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("down", request=request)

    notifier = make_notifier(handler, max_retries=3)

    assert await notifier.send_message("hello") is False
    assert len(attempts) == 3
    assert mock_sleep.await_count == 2


async def test_summary_is_fenced():
    payloads = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(204)

    notifier = make_notifier(handler)
    await notifier.send_reconciliation_summary("🌙 **Nightly Reconciliation Summary**")

    assert payloads[0]["content"] == "```\n🌙 **Nightly Reconciliation Summary**\n```"
