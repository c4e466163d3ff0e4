"""Notification Payloads.

Channel-neutral payloads built from signals, research signals and
engine status. Channels decide how to render them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from social_arb.research.models import ResearchSignal
from social_arb.signal_engine.models import EngineStatus, Signal

# Embed colors
RISK_COLORS = {
    "MEDIUM": 0xF59E0B,
    "HIGH": 0xEF4444,
    "VERY HIGH": 0x7F1D1D,
}
DEFAULT_COLOR = 0x6B7280
STATUS_COLOR = 0x666666
STRONG_RESEARCH_COLOR = 0x22C55E
MODERATE_RESEARCH_COLOR = 0xF59E0B

REACTION_HINT = "React: ✅=entered 📈=watching 🚫=pass"


@dataclass
class PayloadField:
    name: str
    value: str
    inline: bool = True


@dataclass
class NotificationPayload:
    """A notification ready for a channel."""
    title: str = ""
    body: str = ""
    fields: list = field(default_factory=list)  # list[PayloadField]
    color: int = DEFAULT_COLOR
    url: str = ""
    footer: str = ""
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "body": self.body,
            "fields": [
                {"name": f.name, "value": f.value, "inline": f.inline}
                for f in self.fields
            ],
            "color": self.color,
            "url": self.url,
            "footer": self.footer,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


def _truncate(text: str, length: int) -> str:
    return text if len(text) <= length else text[:length] + "..."


def build_signal_payload(signal: Signal) -> NotificationPayload:
    """Payload for an emitted batch signal."""
    swing = signal.swing_score
    return NotificationPayload(
        title=f"🎯 {signal.keyword.upper()} | ${signal.ticker or 'N/A'}",
        body=signal.thesis,
        fields=[
            PayloadField("📊 Confidence", f"{signal.confidence:.0f}%"),
            PayloadField("📈 Momentum", f"+{signal.momentum * 100:.0f}%"),
            PayloadField("💬 Mentions", f"{signal.mentions:,}"),
            PayloadField("⏱️ Timeframe", swing.timeframe),
            PayloadField("⚠️ Risk", swing.risk_level),
            PayloadField("🚪 Exit", swing.exit_trigger),
        ],
        color=RISK_COLORS.get(swing.risk_level, DEFAULT_COLOR),
        footer=f"Signal {signal.signal_type} • {REACTION_HINT}",
        timestamp=signal.timestamp,
    )


def build_research_payload(signal: ResearchSignal, top_posts: int = 3) -> NotificationPayload:
    """Payload for an accepted research signal, with its top posts."""
    m = signal.metrics
    fields = [
        PayloadField("📊 Signal Strength", f"{signal.confidence}/100"),
        PayloadField("🎭 Sentiment", signal.sentiment.upper()),
        PayloadField("🔔 Signal Type", signal.signal_type.replace("_", " ").upper()),
        PayloadField("💬 Mentions", str(m.total_mentions)),
        PayloadField("❤️ Avg Likes", f"{m.avg_engagement:.0f}"),
        PayloadField("🔥 High Engagement", f"{m.high_engagement_posts} posts"),
    ]
    for i, post in enumerate(signal.top_posts[:top_posts], start=1):
        fields.append(PayloadField(
            f"{i}. @{post.username} • {post.likes} likes",
            f'> "{_truncate(post.text, 60)}"\n[🔗 Open in X]({post.url})',
            inline=False,
        ))

    if signal.confidence >= 80:
        color = STRONG_RESEARCH_COLOR
    elif signal.confidence >= 60:
        color = MODERATE_RESEARCH_COLOR
    else:
        color = DEFAULT_COLOR

    return NotificationPayload(
        title=f"🔍 {signal.keyword.upper()} | ${signal.ticker}",
        body=signal.thesis,
        fields=fields,
        color=color,
        footer=f"X research signal • Based on {m.total_mentions} posts analyzed",
        timestamp=signal.timestamp,
    )


def build_status_payload(status: EngineStatus) -> NotificationPayload:
    """Payload summarizing the rate limit, recent signals and cooldowns."""
    fields = []
    if status.next_signal_in_hours > 0:
        fields.append(PayloadField(
            "⏳ Rate Limit", f"Next signal in ~{status.next_signal_in_hours:.0f}h"
        ))
    if status.recent_signals:
        fields.append(PayloadField(
            "🕒 Recent Signals",
            "\n".join(f"{r.keyword} ({r.hours_ago:.0f}h ago)" for r in status.recent_signals),
            inline=False,
        ))
    if status.cooldown_keywords:
        fields.append(PayloadField(
            "🔒 In Cooldown",
            ", ".join(f"{c.keyword} ({c.hours_remaining:.0f}h)" for c in status.cooldown_keywords),
            inline=False,
        ))
    if not fields:
        fields.append(PayloadField("Status", "Monitoring for signals...", inline=False))

    return NotificationPayload(
        title="📊 Social Arbitrage Status",
        body="High-quality swing trade signals from social data",
        fields=fields,
        color=STATUS_COLOR,
        timestamp=datetime.now(timezone.utc),
    )
