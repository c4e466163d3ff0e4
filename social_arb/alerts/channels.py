"""Notification Channels.

Delivery of notification payloads. The Discord channel posts embeds
to a webhook and runs in demo mode (log only) when no webhook URL is
configured.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable

import httpx

from social_arb.alerts.payloads import NotificationPayload
from social_arb.errors import DeliveryError
from social_arb.logging_config import PerformanceTimer

logger = logging.getLogger(__name__)


@dataclass
class DeliveryAck:
    """Result of a successful delivery."""
    channel: str = ""
    message_id: str = ""
    demo: bool = False
    delivered_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "message_id": self.message_id,
            "demo": self.demo,
            "delivered_at": self.delivered_at.isoformat(),
        }


@runtime_checkable
class Notifier(Protocol):
    """Delivers payloads; raises DeliveryError on failure."""

    async def deliver(self, payload: NotificationPayload) -> DeliveryAck: ...


def to_discord_embed(payload: NotificationPayload) -> dict:
    embed = {
        "title": payload.title[:256],
        "description": payload.body[:4096],
        "color": payload.color,
        "fields": [
            {"name": f.name[:256], "value": f.value[:1024], "inline": f.inline}
            for f in payload.fields[:25]
        ],
    }
    if payload.url:
        embed["url"] = payload.url
    if payload.footer:
        embed["footer"] = {"text": payload.footer[:2048]}
    if payload.timestamp:
        embed["timestamp"] = payload.timestamp.isoformat()
    return embed


class DiscordNotifier:
    """Discord webhook channel.

    Example:
        notifier = DiscordNotifier(settings.discord_webhook_url)
        ack = await notifier.deliver(build_signal_payload(signal))
    """

    kind = "discord"

    def __init__(
        self,
        webhook_url: str = "",
        timeout: float = 15.0,
        username: str = "Social Arbitrage",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.username = username
        self._transport = transport
        self._demo = not bool(webhook_url)

    def is_configured(self) -> bool:
        return not self._demo

    async def deliver(self, payload: NotificationPayload) -> DeliveryAck:
        if self._demo:
            logger.info(f"[DISCORD] {payload.title}: {payload.body}")
            return DeliveryAck(channel=self.kind, message_id=f"discord_{id(payload)}", demo=True)

        body = {"username": self.username, "embeds": [to_discord_embed(payload)]}
        try:
            with PerformanceTimer("discord_webhook"):
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    resp = await client.post(
                        self.webhook_url, params={"wait": "true"}, json=body
                    )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Discord webhook request failed: {e}") from e

        if resp.status_code >= 400:
            raise DeliveryError(
                f"Discord webhook returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        message_id = ""
        if resp.status_code == 200 and resp.content:
            try:
                message_id = str(resp.json().get("id", ""))
            except (ValueError, AttributeError):
                logger.warning(f"Discord webhook reply was not a message object: {resp.text[:200]}")
        logger.info(f"Delivered to Discord: {payload.title}")
        return DeliveryAck(channel=self.kind, message_id=message_id)
