"""Discord escalation: notifies the operator via webhook."""

import logging

from clients.discord import DiscordWebhookClient
from escalation.base_escalation import BaseEscalation

logger = logging.getLogger(__name__)


class DiscordEscalation(BaseEscalation):
    """Escalates by posting the conversation summary to a Discord channel."""

    def __init__(
        self,
        client: DiscordWebhookClient,
        message_prefix: str = "",
        agent_name: str = "Hazel",
    ):
        self._client = client
        self._message_prefix = message_prefix
        self._agent_name = agent_name

    def escalate(self, sender: str, message: str, reply: str) -> str:
        parts = [p for p in [self._message_prefix, f"Escalated inquiry from {sender}"] if p]
        content = " ".join(parts)
        fields = {
            "From": sender,
            "Message": message,
            f"{self._agent_name} replied": reply,
        }

        try:
            response = self._client.send(content, fields=fields, title="🚨 Escalated Inquiry")
            if response.status_code in (200, 204):
                logger.info("Discord escalation succeeded (status %d)", response.status_code)
                return f"Escalation for {sender} posted to Discord."
            else:
                logger.warning(
                    "Discord escalation returned unexpected status %d", response.status_code
                )
                return (
                    f"Escalation attempt returned an unexpected status ({response.status_code}). "
                    f"Reach {sender} directly."
                )
        except Exception as e:
            logger.exception("Discord escalation failed: %s", e)
            return f"Failed to post escalation for {sender} due to a technical error."
