"""Tenant config loader.

Each tenant (one WhatsApp persona) has a YAML file under tenants/ that declares
non-secret config inline and references secret values by env var name. Call
load_tenant() with the path from the TENANT_CONFIG environment variable.

Usage:
    tenant = load_tenant(os.environ.get("TENANT_CONFIG", ""))
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

from escalation.detector import DEFAULT_TRIGGERS
from relay_engine.engine import DEFAULT_MODEL, MAX_OUTPUT_TOKENS

load_dotenv()

HISTORY_BACKENDS = ("memory", "kv")
ESCALATION_CHANNELS = ("whatsapp", "discord")


@dataclass
class TenantConfig:
    tenant_id: str
    agent_name: str
    llm_api_key: str
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_whatsapp_number: str
    operator_whatsapp: str
    model: str = DEFAULT_MODEL
    max_tokens: int = MAX_OUTPUT_TOKENS
    llm_base_url: str | None = None
    prompt_path: Path | None = None
    history_backend: str = "memory"
    kv_url: str = ""
    kv_token: str = ""
    escalation_channel: str = "whatsapp"
    escalation_triggers: tuple[str, ...] = DEFAULT_TRIGGERS
    discord_webhook_url: str = ""
    discord_role_id: str = ""
    escalation_message_prefix: str = ""
    alerts_webhook_url: str = ""
    webhook_path: str = "/api/whatsapp"
    validate_signature: bool = False
    proxy_hops: int = 1
    port: int = 8000


def load_tenant(config_path: str) -> TenantConfig:
    """Load and validate a tenant config from a YAML file.

    Secrets are never stored in the YAML; the YAML holds the env var *name*
    and this function resolves the actual value from the environment. Exits
    with a clear error message if TENANT_CONFIG is unset, the file is missing,
    a referenced env var is not set, a choice field has an unknown value, or
    escalation.triggers is not a list of phrases.
    """
    if not config_path:
        sys.exit("TENANT_CONFIG environment variable is not set.")

    path = Path(config_path)
    if not path.exists():
        sys.exit(f"Tenant config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    def _env(key_name: str) -> str:
        val = (os.environ.get(key_name) or "").strip()
        if not val:
            sys.exit(f"Missing required env var '{key_name}' (referenced in {path})")
        return val

    def _choice(value: str, allowed: tuple[str, ...], name: str) -> str:
        if value not in allowed:
            sys.exit(f"Invalid {name} '{value}' in {path}; expected one of {list(allowed)}")
        return value

    agent = raw.get("agent", {})
    env = raw.get("env", {})
    history = raw.get("history", {})
    esc = raw.get("escalation", {})
    esc_discord = esc.get("discord_webhook", {})
    alerts = raw.get("alerts", {}).get("discord_webhook", {})
    webhook = raw.get("webhook", {})

    backend = _choice(history.get("backend", "memory"), HISTORY_BACKENDS, "history backend")
    channel = _choice(esc.get("channel", "whatsapp"), ESCALATION_CHANNELS, "escalation channel")

    triggers = esc.get("triggers")
    if triggers is not None and (
        not isinstance(triggers, list) or not all(isinstance(t, str) and t.strip() for t in triggers)
    ):
        sys.exit(f"escalation.triggers in {path} must be a YAML list of phrases, got {triggers!r}")

    prompt_path = agent.get("prompt_path")
    if prompt_path:
        # Relative prompt paths are resolved next to the tenant file.
        prompt_path = path.parent / prompt_path
        if not prompt_path.exists():
            sys.exit(f"Prompt file not found: {prompt_path} (referenced in {path})")

    return TenantConfig(
        tenant_id=raw["tenant_id"],
        agent_name=agent.get("name", raw["tenant_id"]),
        llm_api_key=_env(env["llm_api_key_env_key"]),
        twilio_account_sid=_env(env["twilio_account_sid_env_key"]),
        twilio_auth_token=_env(env["twilio_auth_token_env_key"]),
        twilio_whatsapp_number=_env(env["twilio_whatsapp_number_env_key"]),
        operator_whatsapp=_env(env["operator_whatsapp_env_key"]),
        model=agent.get("model", DEFAULT_MODEL),
        max_tokens=int(agent.get("max_tokens", MAX_OUTPUT_TOKENS)),
        llm_base_url=agent.get("base_url") or None,
        prompt_path=prompt_path or None,
        history_backend=backend,
        kv_url=_env(history["kv_url_env_key"]) if backend == "kv" else "",
        kv_token=_env(history["kv_token_env_key"]) if backend == "kv" else "",
        escalation_channel=channel,
        escalation_triggers=tuple(triggers or DEFAULT_TRIGGERS),
        discord_webhook_url=(
            _env(esc_discord["webhook_url_env_key"]) if channel == "discord" else ""
        ),
        discord_role_id=str(esc_discord.get("mention_role_id", "")),
        escalation_message_prefix=esc_discord.get("message_prefix", ""),
        # Alerts are optional: an unset env var just disables them.
        alerts_webhook_url=(os.environ.get(alerts.get("webhook_url_env_key", "")) or "").strip(),
        webhook_path=webhook.get("path", "/api/whatsapp"),
        validate_signature=bool(webhook.get("validate_signature", False)),
        proxy_hops=int(webhook.get("proxy_hops", 1)),
        port=int(webhook.get("port", 8000)),
    )
