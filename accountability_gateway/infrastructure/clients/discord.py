"""Discord webhook notifier with exponential backoff retry logic"""

import asyncio
import logging
import random
from typing import Optional

import httpx

from accountability_gateway.domain.messages import render_message, wrap_code_block
from accountability_gateway.infrastructure.observability.metrics import (
    notification_failure_counter,
    notification_latency_histogram,
)
from accountability_gateway.utils.money import format_currency

logger = logging.getLogger(__name__)


class DiscordNotifier:
    """Best-effort sink for summaries and coaching messages"""

    def __init__(
        self,
        webhook_url: str | None = None,
        username: str = "Accountability Coach",
        max_retries: int = 3,
        backoff_base: float = 1.0,
        timeout: float = 10.0,
        rng: Optional[random.Random] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.username = username
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.transport = transport

        if not self.webhook_url:
            logger.warning("No Discord webhook URL configured; notifications will only be logged")

    async def send_message(self, content: str) -> bool:
        """
        Post a message to the webhook with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... (base^attempt)
        - Retries on non-2xx responses and network failures
        - Never raises: delivery failure is logged and reported as False

        Returns:
            True when the webhook accepted the message
        """
        if not self.webhook_url:
            logger.info("Notification not sent (no webhook)", extra={"content": content})
            return False

        payload = {"content": content, "username": self.username}
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                    return True

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    notification_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Notification delivery failed: {e}",
                            extra={"attempts": attempt},
                        )
                        return False

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
        return False

    async def send_reconciliation_summary(self, summary: str) -> bool:
        return await self.send_message(wrap_code_block(summary))

    async def send_debt_assignment(self, amount, reason: str) -> bool:
        message = render_message("debt_assigned", self.rng, amount=format_currency(amount), reason=reason)
        return await self.send_message(message)

    async def send_cardio_assignment(self, kind: str, minutes: int, reason: str) -> bool:
        message = render_message("cardio_assigned", self.rng, kind=kind, minutes=minutes, reason=reason)
        return await self.send_message(message)

    async def send_good_boy_bonus(self, amount, reason: str) -> bool:
        message = render_message("good_boy_bonus", self.rng, amount=format_currency(amount), reason=reason)
        return await self.send_message(message)

    async def send_debt_escalation(self, current_debt, days_since_assigned: int) -> bool:
        message = render_message(
            "debt_escalation",
            self.rng,
            amount=format_currency(current_debt),
            days=days_since_assigned,
        )
        return await self.send_message(message)

    async def send_workout_earning(self, kind: str, amount) -> bool:
        message = render_message("workout_earning", self.rng, kind=kind, amount=format_currency(amount))
        return await self.send_message(message)

    async def send_choice_presentation(self, debt_amount) -> bool:
        message = render_message("choice_presentation", self.rng, amount=format_currency(debt_amount))
        return await self.send_message(message)
