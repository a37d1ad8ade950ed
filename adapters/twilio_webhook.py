"""Twilio WhatsApp webhook adapter.

Twilio POSTs form-encoded ``From`` / ``Body`` / ``ProfileName``. Whatever
happens inside the engine, Twilio gets ``200`` with an empty TwiML document;
replies are sent out-of-band through the REST API.
"""

import logging

from flask import Flask, Response, jsonify, request
from twilio.request_validator import RequestValidator
from werkzeug.middleware.proxy_fix import ProxyFix

from relay_engine.engine import RelayEngine

logger = logging.getLogger(__name__)

EMPTY_TWIML = "<Response></Response>"
DEFAULT_PATH = "/api/whatsapp"


def _ack() -> Response:
    return Response(EMPTY_TWIML, status=200, mimetype="text/xml")


def create_app(
    engine: RelayEngine,
    validator: RequestValidator | None = None,
    alerts=None,
    *,
    path: str = DEFAULT_PATH,
    proxy_hops: int = 1,
) -> Flask:
    """Build the webhook app.

    ``validator`` enables Twilio signature checks. Twilio signs the public
    ``https://`` URL, so with a validator the app trusts ``X-Forwarded-*``
    headers from ``proxy_hops`` proxies in front of it (0 turns that off).
    ``alerts`` is an optional ``DiscordWebhookClient`` that is told about every
    failed relay.
    """
    app = Flask(__name__)
    if validator is not None and proxy_hops > 0:
        app.wsgi_app = ProxyFix(
            app.wsgi_app, x_for=proxy_hops, x_proto=proxy_hops, x_host=proxy_hops, x_port=proxy_hops
        )

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify(error="Method not allowed"), 405

    @app.route(path, methods=["POST"])
    def whatsapp_webhook():
        if validator is not None:
            signature = request.headers.get("X-Twilio-Signature", "")
            if not validator.validate(request.url, request.form.to_dict(), signature):
                logger.warning("Rejected webhook call with invalid Twilio signature")
                return Response("Invalid signature", status=403)

        sender = ""
        try:
            sender = request.form.get("From", "")
            body = request.form.get("Body", "")
            if not sender or not body.strip():
                return _ack()

            engine.handle_inbound(sender, body, request.form.get("ProfileName") or None)
        except Exception as e:
            logger.exception("❌ Failed to relay message from %s", sender or "<unknown>")
            _report_failure(alerts, sender, e)

        return _ack()

    return app


def _report_failure(alerts, sender: str, error: Exception) -> None:
    if alerts is None:
        return
    try:
        alerts.send(
            f"WhatsApp relay failed for {sender or '<unknown>'}: {type(error).__name__}",
            fields={"Error": str(error) or repr(error)},
            title="Relay failure",
        )
    except Exception:
        logger.exception("Could not deliver failure alert")
