from relay_engine.engine import EmptyReplyError, RelayEngine, Reply
from relay_engine.kv_store import KVHistoryStore
from relay_engine.store import HISTORY_LIMIT, HistoryStore, InMemoryHistoryStore, Turn

__all__ = [
    "EmptyReplyError", "RelayEngine", "Reply",
    "KVHistoryStore",
    "HISTORY_LIMIT", "HistoryStore", "InMemoryHistoryStore", "Turn",
]
