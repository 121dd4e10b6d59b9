"""
Outbound Messaging Service

DESIGN DECISION: We never send messages ourselves. We build a deep link
and hand it to the platform, which opens the messaging app with the
recipients and text pre-filled. The user presses send.

If the platform cannot open the link, the caller gets a
MessagingUnavailableError and no fallback is attempted.
"""

import asyncio
import webbrowser
from abc import ABC, abstractmethod
from typing import Iterable, Optional
from urllib.parse import urlsplit

from wedding_planner.config import get_settings
from wedding_planner.services.messaging.deeplinks import sms_link, whatsapp_link


class MessagingError(Exception):
    """Base exception for messaging operations."""
    pass


class MessagingUnavailableError(MessagingError):
    """The messaging app / URL scheme is not available on this device."""

    def __init__(self, channel: str, url: str = ""):
        self.channel = channel
        self.url = url
        super().__init__(f"{channel} is not available on this device")


class UrlDispatcher(ABC):
    """The platform's 'open this URL' capability."""

    @abstractmethod
    async def can_open(self, url: str) -> bool:
        """Can some installed application handle this URL?"""
        pass

    @abstractmethod
    async def open(self, url: str) -> bool:
        """Open the URL. Returns True if the platform accepted it."""
        pass


class WebbrowserDispatcher(UrlDispatcher):
    """
    Dispatcher backed by the standard webbrowser module.

    Desktop browsers forward custom schemes (sms:, whatsapp:) to the
    registered handler application.
    """

    def __init__(self, schemes: Optional[Iterable[str]] = None):
        self._schemes = set(schemes) if schemes is not None else {"sms", "whatsapp"}

    async def can_open(self, url: str) -> bool:
        if urlsplit(url).scheme not in self._schemes:
            return False
        try:
            await asyncio.to_thread(webbrowser.get)
        except webbrowser.Error:
            return False
        return True

    async def open(self, url: str) -> bool:
        return await asyncio.to_thread(webbrowser.open, url)


class RecordingDispatcher(UrlDispatcher):
    """
    Dispatcher that only records what it was asked to open.

    Used by tests and by the web page, which renders the link as a
    button instead of opening it server-side.
    """

    def __init__(self, schemes: Optional[Iterable[str]] = None):
        self._schemes = set(schemes) if schemes is not None else None
        self.opened: list[str] = []

    async def can_open(self, url: str) -> bool:
        return self._schemes is None or urlsplit(url).scheme in self._schemes

    async def open(self, url: str) -> bool:
        self.opened.append(url)
        return True


class MessagingService:
    """Builds deep links and dispatches them."""

    def __init__(
        self,
        dispatcher: Optional[UrlDispatcher] = None,
        country_code: Optional[str] = None,
    ):
        self._dispatcher = dispatcher or WebbrowserDispatcher()
        self._country_code = country_code or get_settings().messaging.default_country_code

    @property
    def dispatcher(self) -> UrlDispatcher:
        return self._dispatcher

    async def _dispatch(self, channel: str, url: str) -> str:
        if not await self._dispatcher.can_open(url):
            raise MessagingUnavailableError(channel, url)
        if not await self._dispatcher.open(url):
            raise MessagingUnavailableError(channel, url)
        return url

    async def send_whatsapp(self, phone: str, message: str = "") -> str:
        """
        Open a WhatsApp chat with one person.

        Returns:
            The URL that was opened

        Raises:
            ValueError: If the phone number has no digits
            MessagingUnavailableError: If WhatsApp cannot be opened
        """
        url = whatsapp_link(phone, message, self._country_code)
        return await self._dispatch("whatsapp", url)

    async def send_sms(self, phones: Iterable[str], message: str) -> str:
        """
        Open the SMS composer addressed to every number at once.

        Returns:
            The URL that was opened

        Raises:
            ValueError: If no usable phone number is given
            MessagingUnavailableError: If SMS is not supported
        """
        url = sms_link(phones, message)
        return await self._dispatch("sms", url)
