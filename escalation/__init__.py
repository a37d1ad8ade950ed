from escalation.base_escalation import BaseEscalation, format_summary
from escalation.detector import DEFAULT_TRIGGERS, ESCALATION_TAG, should_escalate, split_escalation_tag
from escalation.discord_escalation import DiscordEscalation
from escalation.whatsapp_escalation import WhatsAppEscalation

__all__ = [
    "BaseEscalation",
    "format_summary",
    "DEFAULT_TRIGGERS",
    "ESCALATION_TAG",
    "should_escalate",
    "split_escalation_tag",
    "DiscordEscalation",
    "WhatsAppEscalation",
]
