"""
Send session notices to a Discord channel via webhook.
Requires DISCORD_WEBHOOK_URL in env (settings.discord_webhook_url). If not configured,
notify_confirmed and notify_preliminary no-op (log and return).
"""
import logging
from datetime import datetime, timezone

import httpx

from app.config import settings
from app.services.matchmaking.types import PlannedSession

logger = logging.getLogger(__name__)

COLOR_CONFIRMED = 0x2ECC71
COLOR_PRELIMINARY = 0xE67E22
START_FORMAT = "%d/%m %H:%M UTC"
REQUEST_TIMEOUT_SECONDS = 10.0


def build_embed(session: PlannedSession, game_title: str, *, confirmed: bool, frontend_url: str) -> dict:
    """One Discord embed for a session: title, start, duration, player count, accept link."""
    minutes = int(session.duration.total_seconds() // 60)
    if confirmed:
        title = f"Session confirmed: {game_title}"
        players_label = "Players"
    else:
        title = f"Preliminary session (starting soon): {game_title}"
        players_label = "Current players"
    return {
        "title": title,
        "color": COLOR_CONFIRMED if confirmed else COLOR_PRELIMINARY,
        "description": f"Accept the session **[here]({frontend_url})**",
        "fields": [
            {"name": "Start", "value": session.start_time.strftime(START_FORMAT), "inline": True},
            {"name": "Duration", "value": f"{minutes} minutes", "inline": True},
            {"name": players_label, "value": str(len(session.players)), "inline": True},
        ],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def player_mentions(session: PlannedSession) -> str:
    """`<@id>` for every player whose user id is a Discord snowflake (numeric); others are skipped."""
    return " ".join(f"<@{p.user_id}>" for p in session.players if p.user_id.isdigit())


class DiscordNotifier:
    """NotificationDispatcher over a Discord webhook. Failures are logged, never raised."""

    def __init__(
        self,
        game_titles: dict[str, str] | None = None,
        webhook_url: str | None = None,
        frontend_url: str | None = None,
    ):
        self.game_titles = game_titles or {}
        self.webhook_url = settings.discord_webhook_url if webhook_url is None else webhook_url
        self.frontend_url = settings.frontend_url if frontend_url is None else frontend_url

    def notify_confirmed(self, sessions: list[PlannedSession]) -> None:
        for s in sessions:
            # Confirmed notices ping the whole channel
            self._send(s, confirmed=True, content="@here")

    def notify_preliminary(self, sessions: list[PlannedSession]) -> None:
        for s in sessions:
            # Preliminary notices ping only the players of the session
            self._send(s, confirmed=False, content=player_mentions(s))

    def _send(self, session: PlannedSession, *, confirmed: bool, content: str) -> bool:
        if not self.webhook_url:
            logger.debug("DISCORD_WEBHOOK_URL not set; skipping notice for session %s", session.id)
            return False
        title = self.game_titles.get(session.game_id) or "Game session"
        payload = {
            "content": content,
            "embeds": [build_embed(session, title, confirmed=confirmed, frontend_url=self.frontend_url)],
        }
        try:
            with httpx.Client(timeout=REQUEST_TIMEOUT_SECONDS) as client:
                resp = client.post(self.webhook_url, json=payload)
            if resp.status_code in (200, 204):
                logger.info("Sent %s notice for session %s", "confirmed" if confirmed else "preliminary", session.id)
                return True
            logger.warning("Discord webhook returned %s for session %s: %s", resp.status_code, session.id, resp.text)
            return False
        except Exception as e:
            logger.warning("Discord webhook request failed for session %s: %s", session.id, e, exc_info=True)
            return False
