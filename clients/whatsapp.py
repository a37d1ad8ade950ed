"""Twilio WhatsApp sender."""

import logging

from twilio.rest import Client

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "whatsapp:"


def as_whatsapp_address(number: str) -> str:
    number = number.strip()
    if number.startswith(CHANNEL_PREFIX):
        return number
    return CHANNEL_PREFIX + number


class WhatsAppClient:
    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        self.from_number = as_whatsapp_address(from_number)
        self._client = Client(account_sid, auth_token)

    def send(self, to: str, body: str):
        message = self._client.messages.create(
            from_=self.from_number,
            to=as_whatsapp_address(to),
            body=body,
        )
        logger.info("WhatsApp message %s queued for %s", message.sid, to)
        return message
