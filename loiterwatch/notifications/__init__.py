"""Notification delivery for loitering events."""

import logging

from loiterwatch.config import Settings, resolve_telegram_token

from .telegram import (
    LoggingNotifier,
    Notifier,
    TelegramNotifier,
    format_event_message,
)

logger = logging.getLogger("loiterwatch.notifications")


def build_notifier(config: Settings) -> Notifier:
    """Telegram when enabled and fully configured, logging otherwise."""

    if config.telegram_enabled:
        token = resolve_telegram_token(config)
        if token and config.telegram_chat_id:
            return TelegramNotifier(
                bot_token=token,
                chat_id=config.telegram_chat_id,
                api_base=config.telegram_api_base,
                public_base_url=config.public_base_url,
            )
        logger.warning(
            "Telegram enabled but token or chat id missing; falling back to log output"
        )
    return LoggingNotifier()


__all__ = [
    "LoggingNotifier",
    "Notifier",
    "TelegramNotifier",
    "build_notifier",
    "format_event_message",
]
