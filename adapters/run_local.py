"""Local terminal chatbot: type as a WhatsApp sender, see what the relay would send."""

import logging
import os

from escalation import WhatsAppEscalation
from relay_engine.engine import RelayEngine
from tenant import load_tenant

LOCAL_SENDER = "whatsapp:+10000000000"
LOCAL_OPERATOR = "whatsapp:+19999999999"


class ConsoleWhatsApp:
    """Stands in for the Twilio client and prints outgoing messages."""

    def send(self, to: str, body: str) -> None:
        label = "Operator" if to == LOCAL_OPERATOR else "Bot"
        print(f"{label}: {body}\n")


def _configure_logging() -> None:
    level = getattr(logging, os.getenv("LOG_LEVEL", "ERROR").upper(), logging.ERROR)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    _configure_logging()
    tenant = load_tenant(os.environ.get("TENANT_CONFIG", ""))
    console = ConsoleWhatsApp()

    engine = RelayEngine(
        openai_api_key=tenant.llm_api_key,
        whatsapp=console,
        escalation=WhatsAppEscalation(console, LOCAL_OPERATOR, tenant.agent_name),
        model=tenant.model,
        max_tokens=tenant.max_tokens,
        base_url=tenant.llm_base_url,
        prompt_path=tenant.prompt_path,
        triggers=tenant.escalation_triggers,
    )

    name = input("Your display name (optional): ").strip() or None
    print(f"{tenant.agent_name}. Type 'quit' or 'exit' to stop.\n")
    while True:
        try:
            user_input = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye.")
            break
        if not user_input:
            continue
        if user_input.lower() in ("quit", "exit", "q"):
            print("Bye.")
            break
        engine.handle_inbound(LOCAL_SENDER, user_input, name)


if __name__ == "__main__":
    main()
