"""Relay engine: one inbound WhatsApp message in, one reply out.

Purpose
-------
The engine owns "handle this message" for a WhatsApp conversation. Adapters
(the Twilio webhook, the terminal chatbot) pass the sender, the text and the
optional display name; the engine loads the sender's history, asks the model
for a reply, stores the updated history, delivers the reply and, when the
reply hands off to a human, escalates to the operator.

Interface contract
------------------
- **Input:** sender identity + message body (+ optional profile name).
- **Output:** the ``Reply`` that was delivered.
- **Errors:** completion and messaging failures propagate unchanged. The engine
  never retries; adapters decide what the outside world sees. History store
  failures are absorbed by the store itself.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from openai import OpenAI

from escalation.base_escalation import BaseEscalation
from escalation.detector import DEFAULT_TRIGGERS, should_escalate, split_escalation_tag
from relay_engine.prompts import ESCALATION_TAG_CLAUSE, FOLLOW_UP_CLAUSE, SYSTEM_PROMPT
from relay_engine.store import HistoryStore, InMemoryHistoryStore, Turn

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_OUTPUT_TOKENS = 300


def _truncate(s: str, max_len: int = 400) -> str:
    if not isinstance(s, str):
        s = str(s)
    return s[:max_len] + "..." if len(s) > max_len else s


class EmptyReplyError(RuntimeError):
    """The completion API answered without any text."""
    pass


@dataclass(frozen=True)
class Reply:
    text: str
    escalation_requested: bool = False


def annotate_first_message(body: str, sender: str, profile_name: str | None = None) -> str:
    return f"[New inquiry from {profile_name or 'unknown'} at {sender}]\n\n{body}"


class RelayEngine:
    """Turns inbound WhatsApp messages into model replies.

    History lives in a ``HistoryStore`` (in-memory or KV); replies go out
    through ``whatsapp`` (anything with ``send(to, body)``); escalations go
    through a ``BaseEscalation``.
    """

    def __init__(
        self,
        openai_api_key: str,
        whatsapp=None,
        store: HistoryStore | None = None,
        escalation: BaseEscalation | None = None,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        base_url: str | None = None,
        prompt_path: str | Path | None = None,
        triggers=DEFAULT_TRIGGERS,
    ):
        self._client = OpenAI(api_key=openai_api_key, base_url=base_url)
        self._whatsapp = whatsapp
        self._store = store or InMemoryHistoryStore()
        self._escalation = escalation
        self._model = model
        self._max_tokens = max_tokens
        self._system_prompt = (
            Path(prompt_path).read_text(encoding="utf-8") if prompt_path else SYSTEM_PROMPT
        )
        self._triggers = tuple(triggers)

    def handle_inbound(self, sender: str, body: str, profile_name: str | None = None) -> Reply:
        """Reply to one inbound message and escalate if the reply calls for it."""
        if self._whatsapp is None:
            raise RuntimeError("RelayEngine has no WhatsApp client configured")

        logger.info("📱 %s: %s", profile_name or sender, _truncate(body, 120))

        is_first = not self._store.read(sender)
        message = annotate_first_message(body, sender, profile_name) if is_first else body

        reply = self.generate_reply(sender, message, is_first)
        self._whatsapp.send(sender, reply.text)
        logger.info("✅ Replied to %s", sender)

        if self.needs_escalation(reply):
            if self._escalation is None:
                logger.warning("Reply to %s asks for escalation but none is configured", sender)
            else:
                result = self._escalation.escalate(sender, body, reply.text)
                logger.info("🚨 %s", result)

        return reply

    def generate_reply(self, identity: str, message: str, is_first: bool) -> Reply:
        history = self._store.read(identity)
        history.append(Turn("user", message))

        logger.info(
            "Calling %s for %s (first=%s, turns=%d)", self._model, identity, is_first, len(history)
        )
        response = self._client.chat.completions.create(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[
                {"role": "system", "content": self._build_system_prompt(is_first)},
                *(t.as_message() for t in history),
            ],
        )
        text, tagged = split_escalation_tag((response.choices[0].message.content or "").strip())
        if not text:
            raise EmptyReplyError(f"Model {self._model} returned no text for {identity}")

        history.append(Turn("assistant", text))
        self._store.write(identity, history)

        logger.info("Reply for %s: %s", identity, _truncate(text, 150))
        return Reply(text=text, escalation_requested=tagged)

    def needs_escalation(self, reply: Reply) -> bool:
        return reply.escalation_requested or should_escalate(reply.text, self._triggers)

    def _build_system_prompt(self, is_first: bool) -> str:
        prompt = self._system_prompt
        if not is_first:
            prompt += FOLLOW_UP_CLAUSE
        return prompt + ESCALATION_TAG_CLAUSE
