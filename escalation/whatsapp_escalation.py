"""WhatsApp escalation: messages the operator's personal number."""

import logging

from clients.whatsapp import WhatsAppClient
from escalation.base_escalation import BaseEscalation, format_summary

logger = logging.getLogger(__name__)


class WhatsAppEscalation(BaseEscalation):
    """Sends the escalation summary to the operator over WhatsApp.

    Send failures propagate to the caller.
    """

    def __init__(self, client: WhatsAppClient, operator: str, agent_name: str = "Hazel"):
        self._client = client
        self._operator = operator
        self._agent_name = agent_name

    def escalate(self, sender: str, message: str, reply: str) -> str:
        self._client.send(self._operator, format_summary(sender, message, reply, self._agent_name))
        logger.info("Escalated %s to operator over WhatsApp", sender)
        return f"Escalation for {sender} sent to the operator on WhatsApp."
