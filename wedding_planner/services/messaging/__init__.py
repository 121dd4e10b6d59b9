"""Outbound messaging: deep links and the platform URL dispatcher."""

from wedding_planner.services.messaging.deeplinks import (
    clean_phone,
    encode_message,
    normalize_phone,
    sms_link,
    whatsapp_link,
)
from wedding_planner.services.messaging.dispatcher import (
    MessagingError,
    MessagingService,
    MessagingUnavailableError,
    RecordingDispatcher,
    UrlDispatcher,
    WebbrowserDispatcher,
)

__all__ = [
    # Deep links
    "clean_phone",
    "encode_message",
    "normalize_phone",
    "sms_link",
    "whatsapp_link",
    # Dispatch
    "MessagingError",
    "MessagingService",
    "MessagingUnavailableError",
    "RecordingDispatcher",
    "UrlDispatcher",
    "WebbrowserDispatcher",
]
