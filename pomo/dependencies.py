"""Process-wide timer services"""
import logging
from pathlib import Path
from typing import Optional

from pomo.config import AppSettings, ConfirmationMode, get_settings
from pomo.features.notes.resolver import VaultNoteResolver
from pomo.features.prompts.service import AutoConfirmationGateway, PromptBroker
from pomo.features.session_log.service import SessionLogger
from pomo.features.timer.service import TimerCore
from pomo.infra.storage.file_log_store import FileLogStore
from pomo.services.notification_service import LoggingNotificationSink, WebhookNotificationSink
from pomo.utils.datetime_helper import SystemClock

logger = logging.getLogger(__name__)


class TimerServices:
    """Wires one TimerCore with its collaborators"""

    def __init__(self, settings: AppSettings):
        self.settings = settings
        self.clock = SystemClock()
        self.notes = VaultNoteResolver(settings.timer)
        self.store = FileLogStore(Path(settings.vault_dir))

        if settings.notification_webhook_url:
            self.notifications = WebhookNotificationSink(settings.notification_webhook_url)
        else:
            self.notifications = LoggingNotificationSink()

        self.prompts: Optional[PromptBroker] = None
        if settings.confirmation_mode == ConfirmationMode.PROMPT:
            self.prompts = PromptBroker()
            gateway = self.prompts
        else:
            gateway = AutoConfirmationGateway()

        self.session_logger = SessionLogger(settings.timer, self.store, self.clock, self.notes)
        self.timer = TimerCore(
            settings.timer,
            self.clock,
            gateway,
            self.session_logger,
            self.notifications,
            self.notes,
        )
        logger.info(
            f"Timer services ready (vault={settings.vault_dir}, "
            f"confirmation={settings.confirmation_mode.value})"
        )


_services: Optional[TimerServices] = None


def get_services() -> TimerServices:
    """Get or create the services singleton"""
    global _services

    if _services is None:
        _services = TimerServices(get_settings())

    return _services


def reset_services():
    """Reset the services singleton (useful for testing)"""
    global _services
    _services = None
