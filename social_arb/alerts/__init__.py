"""Alert Delivery.

Payload builders for signals, research and status, plus the Discord
webhook channel.
"""

from social_arb.alerts.payloads import (
    NotificationPayload,
    PayloadField,
    build_research_payload,
    build_signal_payload,
    build_status_payload,
)
from social_arb.alerts.channels import (
    DeliveryAck,
    DiscordNotifier,
    Notifier,
    to_discord_embed,
)

__all__ = [
    # Payloads
    "NotificationPayload",
    "PayloadField",
    "build_research_payload",
    "build_signal_payload",
    "build_status_payload",
    # Channels
    "DeliveryAck",
    "DiscordNotifier",
    "Notifier",
    "to_discord_embed",
]
