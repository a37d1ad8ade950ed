"""Abstract escalation contract."""

from abc import ABC, abstractmethod


def format_summary(sender: str, message: str, reply: str, agent_name: str = "Hazel") -> str:
    """Operator-facing summary of an escalated conversation."""
    return (
        f"🚨 *Escalated Inquiry*\n\n"
        f"From: {sender}\n"
        f'Message: "{message}"\n\n'
        f'{agent_name} replied: "{reply}"\n\n'
        f"Reply to {sender} directly to take over."
    )


class BaseEscalation(ABC):
    """Contract for escalation handlers.

    An escalation hands a live WhatsApp conversation to a human operator. It
    performs the side effect (a WhatsApp message to the operator, a Discord
    post, ...) and returns a short plain-English result string that callers
    log.
    """

    @abstractmethod
    def escalate(self, sender: str, message: str, reply: str) -> str:
        """Notify the operator about ``sender``'s conversation.

        ``message`` is what the sender wrote (without any context annotation)
        and ``reply`` is the generated answer that triggered the escalation.
        """
        ...
