"""Decide whether a generated reply hands the conversation to a human.

Two signals: an explicit tag the model is asked to append, and, as a fallback,
a case-insensitive match against phrases the persona uses when escalating.
"""

# NOTE: of these phrases only "connect you directly" appears in the persona's
# own escalation sentence (see relay_engine/prompts.py).
DEFAULT_TRIGGERS = (
    "connect you directly",
    "gio will reach out",
    "loop gio in",
)

ESCALATION_TAG = "[[ESCALATE]]"


def should_escalate(reply: str, triggers=DEFAULT_TRIGGERS) -> bool:
    lowered = reply.lower()
    return any(t.lower() in lowered for t in triggers)


def split_escalation_tag(reply: str) -> tuple[str, bool]:
    """Return the reply without the tag, and whether the tag was present."""
    if ESCALATION_TAG not in reply:
        return reply, False
    return reply.replace(ESCALATION_TAG, "").strip(), True
