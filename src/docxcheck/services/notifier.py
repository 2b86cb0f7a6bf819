"""SMS delivery of one-time passwords.

Two implementations share the :class:`Notifier` interface:

- :class:`TwilioNotifier` sends a real SMS through the Twilio REST API.
- :class:`ConsoleNotifier` writes the code to the log. It is the explicit
  degraded mode used when Twilio credentials are not configured.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from docxcheck.core.settings import Settings

logger = logging.getLogger(__name__)


class NotifierError(RuntimeError):
    """Raised when a message could not be handed to the delivery provider."""


class Notifier(ABC):
    """Delivers a short text message to a phone number."""

    #: True when messages only reach the server log.
    test_mode: bool = False

    @abstractmethod
    async def send(self, phone: str, message: str) -> None:
        """Deliver ``message`` to ``phone``.

        Raises:
            NotifierError: If the provider rejected or failed the delivery.
        """


class ConsoleNotifier(Notifier):
    """Logs messages instead of sending them."""

    test_mode = True

    async def send(self, phone: str, message: str) -> None:
        logger.warning("[TEST MODE] SMS to %s: %s", phone, message)


class TwilioNotifier(Notifier):
    """Sends SMS through Twilio's programmable messaging API."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str) -> None:
        self.client = Client(account_sid, auth_token)
        self.from_number = from_number

    async def send(self, phone: str, message: str) -> None:
        # The Twilio SDK is blocking; keep it off the event loop.
        try:
            message_obj = await asyncio.to_thread(
                self.client.messages.create,
                body=message,
                from_=self.from_number,
                to=phone,
            )
        except TwilioException as err:
            raise NotifierError(f"Twilio API error: {err}") from err
        logger.info("[SMS] Message sent to %s, SID: %s", phone, message_obj.sid)


def build_notifier(settings: Settings) -> Notifier:
    """Return the Twilio notifier when configured, otherwise the console one."""
    if settings.twilio_enabled:
        logger.info("[SMS] Using Twilio notifier")
        return TwilioNotifier(
            settings.twilio_account_sid,  # type: ignore[arg-type]
            settings.twilio_auth_token,  # type: ignore[arg-type]
            settings.twilio_phone_number,  # type: ignore[arg-type]
        )
    logger.warning("[SMS] Twilio not configured; OTP codes will be written to the log")
    return ConsoleNotifier()
