"""
Notification Service

Delivers timer notices and end-of-session notifications
"""

import asyncio
import logging
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Set

import httpx
from pydantic import BaseModel

from pomo.features.timer.domain import Mode
from pomo.features.timer.ports import NotificationSink

logger = logging.getLogger(__name__)

MAX_RECENT_NOTICES = 50


class Notice(BaseModel):
    """A message shown to the user"""
    kind: str  # 'notice', 'sound' or 'system'
    title: Optional[str] = None
    body: str
    created_at: datetime


def system_notification_text(mode: Mode, use_emoji: bool) -> Optional[Dict[str, str]]:
    """Title and body for the mode that just ended, or None for NO_TIMER"""
    if mode == Mode.POMO:
        emoji = " 🏖" if use_emoji else ""
        body = f"End of the pomodoro, time to take a break{emoji}"
    elif mode.is_break:
        emoji = " 🍅" if use_emoji else ""
        body = f"End of the break, time for the next pomodoro{emoji}"
    else:
        return None

    title = "Pomodoro 🍅" if use_emoji else "Pomodoro"
    return {"title": title, "body": body}


class LoggingNotificationSink(NotificationSink):
    """Logs notifications and keeps the most recent ones for clients to poll"""

    def __init__(self, max_recent: int = MAX_RECENT_NOTICES):
        self._recent: Deque[Notice] = deque(maxlen=max_recent)
        self.ambient_playing = False

    def recent(self) -> List[Notice]:
        return list(self._recent)

    def _record(self, kind: str, body: str, title: Optional[str] = None) -> Notice:
        notice = Notice(kind=kind, title=title, body=body, created_at=datetime.now().astimezone())
        self._recent.append(notice)
        return notice

    def play_sound(self) -> None:
        self._record("sound", "End of session sound")
        logger.info("🔔 End of session sound")

    def show_system_notification(self, mode: Mode, use_emoji: bool) -> None:
        text = system_notification_text(mode, use_emoji)
        if text is None:
            return
        self._record("system", text["body"], title=text["title"])
        logger.info(f"{text['title']}: {text['body']}")

    def notice(self, message: str) -> None:
        self._record("notice", message)
        logger.info(f"Notice: {message}")

    def start_ambient(self) -> None:
        self.ambient_playing = True
        logger.debug("White noise started")

    def stop_ambient(self) -> None:
        self.ambient_playing = False
        logger.debug("White noise stopped")


class WebhookNotificationSink(LoggingNotificationSink):
    """
    Also forwards system notifications to a webhook as JSON.

    Deliveries run as background tasks on the running event loop so a slow
    webhook never holds up the timer.
    """

    def __init__(
        self,
        webhook_url: str,
        max_recent: int = MAX_RECENT_NOTICES,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(max_recent)
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport
        self._deliveries: Set[asyncio.Task] = set()

    def show_system_notification(self, mode: Mode, use_emoji: bool) -> None:
        super().show_system_notification(mode, use_emoji)
        text = system_notification_text(mode, use_emoji)
        if text is None:
            return

        payload = {**text, "mode": mode.value}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, webhook notification not sent")
            return

        task = loop.create_task(self._post(payload))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def drain(self) -> None:
        """Wait for deliveries still in flight"""
        if self._deliveries:
            await asyncio.gather(*list(self._deliveries))

    async def _post(self, payload: Dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={
                        "Content-Type": "application/json",
                        "Accept": "application/json",
                    },
                )
            if response.status_code >= 400:
                logger.error(f"Webhook notification failed: {response.status_code} {response.text}")
        except httpx.HTTPError as e:
            # A lost notification must not break the timer
            logger.error(f"Error sending webhook notification: {e}")
