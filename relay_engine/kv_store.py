"""Remote history store on top of the KV REST client.

Each sender's history is one JSON blob under ``chat:<normalized identity>``,
re-written in full on every save with a fresh 7 day expiry. Store failures are
logged and degrade to "no history" so a flaky KV never breaks a reply.
"""

import json
import logging

import requests

from clients.kv import KVError, KVRestClient
from relay_engine.store import Turn, normalize_identity, trim_history

logger = logging.getLogger(__name__)

HISTORY_TTL_SECONDS = 7 * 24 * 60 * 60
KEY_PREFIX = "chat:"

_STORE_ERRORS = (requests.RequestException, KVError, ValueError, KeyError, TypeError)


class KVHistoryStore:
    def __init__(self, client: KVRestClient, ttl_seconds: int = HISTORY_TTL_SECONDS):
        self._client = client
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def key_for(identity: str) -> str:
        return KEY_PREFIX + normalize_identity(identity)

    def read(self, identity: str) -> list[Turn]:
        key = self.key_for(identity)
        try:
            raw = self._client.get(key)
            if not raw:
                return []
            return [Turn.from_message(m) for m in json.loads(raw)]
        except _STORE_ERRORS as e:
            logger.warning("KV read error for %s: %s", key, e)
            return []

    def write(self, identity: str, turns: list[Turn]) -> bool:
        key = self.key_for(identity)
        payload = json.dumps([t.as_message() for t in trim_history(turns)])
        try:
            ok = self._client.set(key, payload, ex=self._ttl_seconds)
        except _STORE_ERRORS as e:
            logger.warning("KV write error for %s: %s", key, e)
            return False
        if not ok:
            logger.warning("KV write for %s was not acknowledged", key)
        return ok
