"""Unit tests for the KV REST client and the KV-backed history store."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from clients.kv import KVError, KVRestClient
from relay_engine.kv_store import HISTORY_TTL_SECONDS, KVHistoryStore
from relay_engine.store import HISTORY_LIMIT, Turn

KV_URL = "https://kv.example.upstash.io"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _response(payload, status: int = 200) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


def _make_client() -> tuple[KVRestClient, MagicMock]:
    session = MagicMock()
    session.headers = {}
    client = KVRestClient(KV_URL + "/", "kv-token", session=session)
    return client, session


# ---------------------------------------------------------------------------
# KVRestClient
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_client_sets_bearer_token():
    _, session = _make_client()
    assert session.headers["Authorization"] == "Bearer kv-token"


@pytest.mark.unit
def test_get_returns_result():
    client, session = _make_client()
    session.get.return_value = _response({"result": "[]"})

    assert client.get("chat:15550001") == "[]"
    session.get.assert_called_once_with(f"{KV_URL}/get/chat:15550001", timeout=10.0)


@pytest.mark.unit
def test_get_missing_key_returns_none():
    client, session = _make_client()
    session.get.return_value = _response({"result": None})
    assert client.get("chat:nobody") is None


@pytest.mark.unit
def test_set_sends_value_as_body_and_expiry_as_param():
    client, session = _make_client()
    session.post.return_value = _response({"result": "OK"})

    value = json.dumps([{"role": "user", "content": "hi / there? ✨"}])
    assert client.set("chat:15550001", value, ex=604800) is True

    session.post.assert_called_once_with(
        f"{KV_URL}/set/chat:15550001",
        params={"EX": 604800},
        data=value.encode("utf-8"),
        timeout=10.0,
    )


@pytest.mark.unit
def test_set_without_expiry_sends_no_params():
    client, session = _make_client()
    session.post.return_value = _response({"result": "OK"})

    client.set("chat:15550001", "[]")

    assert session.post.call_args.kwargs["params"] is None


@pytest.mark.unit
def test_error_body_raises_kv_error():
    client, session = _make_client()
    session.get.return_value = _response({"error": "WRONGPASS invalid token"})
    with pytest.raises(KVError):
        client.get("chat:15550001")


@pytest.mark.unit
@pytest.mark.parametrize("body", [["unexpected"], "Unauthorized", None, 42])
def test_non_object_body_raises_kv_error(body):
    client, session = _make_client()
    session.get.return_value = _response(body)
    session.post.return_value = _response(body)

    with pytest.raises(KVError, match="Unexpected KV response"):
        client.get("chat:15550001")
    with pytest.raises(KVError, match="Unexpected KV response"):
        client.set("chat:15550001", "[]", ex=60)


# ---------------------------------------------------------------------------
# KVHistoryStore
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_key_uses_prefix_and_normalized_identity():
    assert KVHistoryStore.key_for("whatsapp:+1 555-0001") == "chat:whatsapp15550001"


@pytest.mark.unit
def test_read_parses_stored_json():
    kv = MagicMock()
    kv.get.return_value = json.dumps(
        [{"role": "user", "content": "hello"}, {"role": "assistant", "content": "hi"}]
    )
    store = KVHistoryStore(kv)

    assert store.read("whatsapp:+15550001") == [Turn("user", "hello"), Turn("assistant", "hi")]
    kv.get.assert_called_once_with("chat:whatsapp15550001")


@pytest.mark.unit
def test_read_unknown_key_is_empty():
    kv = MagicMock()
    kv.get.return_value = None
    assert KVHistoryStore(kv).read("whatsapp:+15550001") == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "failure",
    [
        requests.ConnectionError("kv down"),
        requests.HTTPError("500"),
        KVError("ERR"),
    ],
)
def test_read_failure_is_treated_as_empty(failure):
    """
    Story: The KV store is unreachable or answers with an error. Reading the
    sender's history does not raise; it behaves like an unknown sender.
    """
    kv = MagicMock()
    kv.get.side_effect = failure
    assert KVHistoryStore(kv).read("whatsapp:+15550001") == []


@pytest.mark.unit
def test_read_malformed_blob_is_treated_as_empty():
    kv = MagicMock()
    kv.get.return_value = '{"not": "a list"'
    assert KVHistoryStore(kv).read("whatsapp:+15550001") == []


@pytest.mark.unit
def test_write_trims_and_sets_ttl():
    kv = MagicMock()
    kv.set.return_value = True
    store = KVHistoryStore(kv)
    turns = [Turn("user", f"m{i}") for i in range(HISTORY_LIMIT + 5)]

    assert store.write("whatsapp:+15550001", turns) is True

    key, payload = kv.set.call_args.args
    assert key == "chat:whatsapp15550001"
    assert kv.set.call_args.kwargs == {"ex": HISTORY_TTL_SECONDS}
    stored = json.loads(payload)
    assert len(stored) == HISTORY_LIMIT
    assert stored[0] == {"role": "user", "content": "m5"}
    assert stored[-1] == {"role": "user", "content": f"m{HISTORY_LIMIT + 4}"}


@pytest.mark.unit
def test_write_failure_returns_false():
    kv = MagicMock()
    kv.set.side_effect = requests.Timeout("slow")
    assert KVHistoryStore(kv).write("whatsapp:+15550001", [Turn("user", "hi")]) is False


@pytest.mark.unit
def test_round_trip_through_client():
    """
    Story: A history written through the store, then read back through the same
    REST client, comes back with identical turns in identical order.
    """
    client, session = _make_client()
    saved = {}

    def fake_post(url, params=None, data=None, timeout=None):
        saved["url"] = url
        saved["data"] = data
        return _response({"result": "OK"})

    session.post.side_effect = fake_post
    store = KVHistoryStore(client)
    turns = [Turn("user", "Keynote at GITEX?"), Turn("assistant", "Sure, what's the date?")]
    assert store.write("whatsapp:+15550001", turns) is True

    assert saved["url"] == f"{KV_URL}/set/chat:whatsapp15550001"
    session.get.return_value = _response({"result": saved["data"].decode("utf-8")})

    assert store.read("whatsapp:+15550001") == turns


@pytest.mark.unit
def test_full_history_of_long_turns_is_written():
    """
    Story: A sender has a long conversation with chatty replies. The full
    30-turn history, around 30 KB of JSON, is saved and the request URL stays
    as short as for an empty history.
    """
    client, session = _make_client()
    session.post.return_value = _response({"result": "OK"})
    store = KVHistoryStore(client)
    turns = [
        Turn("user" if i % 2 == 0 else "assistant", f"Turn {i}: " + "déjà vu, 100% sure? " * 50)
        for i in range(HISTORY_LIMIT)
    ]

    assert store.write("whatsapp:+15550001", turns) is True

    call = session.post.call_args
    assert call.args == (f"{KV_URL}/set/chat:whatsapp15550001",)
    assert call.kwargs["params"] == {"EX": HISTORY_TTL_SECONDS}
    assert len(call.kwargs["data"]) > HISTORY_LIMIT * 1000
    stored = json.loads(call.kwargs["data"].decode("utf-8"))
    assert [Turn.from_message(m) for m in stored] == turns


@pytest.mark.unit
@pytest.mark.parametrize("body", [["unexpected"], "Unauthorized"])
def test_store_degrades_on_non_object_body(body):
    """
    Story: Something in front of the KV store answers with JSON that is not an
    object. Reading gives an empty history and writing reports failure; neither
    raises.
    """
    client, session = _make_client()
    session.get.return_value = _response(body)
    session.post.return_value = _response(body)
    store = KVHistoryStore(client)

    assert store.read("whatsapp:+15550001") == []
    assert store.write("whatsapp:+15550001", [Turn("user", "hi")]) is False
