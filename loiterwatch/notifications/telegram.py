"""Outbound notifications for newly opened loitering events."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from loiterwatch.domain.tracking import LoiteringEvent

logger = logging.getLogger("loiterwatch.notifications")


class Notifier(Protocol):
    async def notify_new_event(self, event: LoiteringEvent) -> None:
        """Deliver a notification; must not raise for delivery failures."""


def format_event_message(event: LoiteringEvent, public_base_url: str | None = None) -> str:
    """Markdown body describing a new loitering event."""

    state = event.aircraft_state
    label = f"{event.callsign} ({event.icao})" if event.callsign else event.icao
    lines = [
        "*Loitering aircraft detected*",
        f"Aircraft: `{label}`",
        f"Position: {state.position.latitude:.4f}, {state.position.longitude:.4f}",
        f"Altitude: {state.altitude:.0f} ft",
        f"Speed: {state.speed:.0f} kt",
        f"Heading: {state.heading:.0f}°",
        f"Crossings: {len(event.intersection_points)}",
    ]
    if public_base_url:
        lines.append(f"[Open event]({public_base_url.rstrip('/')}/api/loitering/{event.id})")
    return "\n".join(lines)


class LoggingNotifier:
    """Notifier used when no chat delivery is configured."""

    async def notify_new_event(self, event: LoiteringEvent) -> None:
        logger.info(
            "Loitering event %s opened for %s (%s)",
            event.id,
            event.icao,
            event.callsign or "no callsign",
        )


class TelegramNotifier:
    """Send event messages through the Telegram Bot API ``sendMessage`` call."""

    def __init__(
        self,
        *,
        bot_token: str,
        chat_id: str,
        api_base: str = "https://api.telegram.org",
        public_base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_base = api_base.rstrip("/")
        self.public_base_url = public_base_url
        self.timeout = timeout
        self.transport = transport

    async def send_message(self, text: str) -> bool:
        url = f"{self.api_base}/bot{self.bot_token}/sendMessage"
        body = {"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, json=body)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            # The token is part of the URL, so only the error type is logged.
            logger.warning("Failed to send Telegram message: %s", type(exc).__name__)
            return False
        return True

    async def notify_new_event(self, event: LoiteringEvent) -> None:
        if await self.send_message(format_event_message(event, self.public_base_url)):
            logger.info("Sent Telegram notification for event %s", event.id)
