"""Entrypoint: load the tenant, wire layers, run the Twilio webhook server.

For a WSGI server use the factory, e.g. ``gunicorn 'run_local:create_wsgi_app()'``.
"""

import logging
import os

from flask import Flask
from twilio.request_validator import RequestValidator

from adapters.twilio_webhook import create_app
from clients.discord import DiscordWebhookClient
from clients.kv import KVRestClient
from clients.whatsapp import WhatsAppClient
from escalation import BaseEscalation, DiscordEscalation, WhatsAppEscalation
from relay_engine.engine import RelayEngine
from relay_engine.kv_store import KVHistoryStore
from relay_engine.store import HistoryStore, InMemoryHistoryStore
from tenant import TenantConfig, load_tenant

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_store(tenant: TenantConfig) -> HistoryStore:
    if tenant.history_backend == "kv":
        return KVHistoryStore(KVRestClient(tenant.kv_url, tenant.kv_token))
    return InMemoryHistoryStore()


def build_escalation(tenant: TenantConfig, whatsapp: WhatsAppClient) -> BaseEscalation:
    if tenant.escalation_channel == "discord":
        client = DiscordWebhookClient(tenant.discord_webhook_url, tenant.discord_role_id)
        return DiscordEscalation(client, tenant.escalation_message_prefix, tenant.agent_name)
    return WhatsAppEscalation(whatsapp, tenant.operator_whatsapp, tenant.agent_name)


def build_engine(tenant: TenantConfig) -> RelayEngine:
    whatsapp = WhatsAppClient(
        tenant.twilio_account_sid,
        tenant.twilio_auth_token,
        tenant.twilio_whatsapp_number,
    )
    return RelayEngine(
        openai_api_key=tenant.llm_api_key,
        whatsapp=whatsapp,
        store=build_store(tenant),
        escalation=build_escalation(tenant, whatsapp),
        model=tenant.model,
        max_tokens=tenant.max_tokens,
        base_url=tenant.llm_base_url,
        prompt_path=tenant.prompt_path,
        triggers=tenant.escalation_triggers,
    )


def build_app(tenant: TenantConfig) -> Flask:
    validator = RequestValidator(tenant.twilio_auth_token) if tenant.validate_signature else None
    alerts = DiscordWebhookClient(tenant.alerts_webhook_url) if tenant.alerts_webhook_url else None
    return create_app(
        build_engine(tenant), validator, alerts, path=tenant.webhook_path, proxy_hops=tenant.proxy_hops
    )


def create_wsgi_app() -> Flask:
    _configure_logging()
    return build_app(load_tenant(os.environ.get("TENANT_CONFIG", "")))


def main() -> None:
    _configure_logging()
    tenant = load_tenant(os.environ.get("TENANT_CONFIG", ""))
    app = build_app(tenant)
    logger.info(
        "%s (%s) listening on :%d%s with %s history",
        tenant.agent_name,
        tenant.tenant_id,
        tenant.port,
        tenant.webhook_path,
        tenant.history_backend,
    )
    app.run(host="0.0.0.0", port=tenant.port)


if __name__ == "__main__":
    main()
