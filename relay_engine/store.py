import re
import threading
from dataclasses import dataclass
from typing import Iterable, Protocol

HISTORY_LIMIT = 30
ROLES = ("user", "assistant")

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class Turn:
    role: str
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role: {self.role!r}")

    def as_message(self) -> dict:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_message(cls, message: dict) -> "Turn":
        return cls(role=message["role"], content=message["content"])


def normalize_identity(identity: str) -> str:
    """Phone numbers arrive as e.g. 'whatsapp:+971 50-123'; keep only letters and digits."""
    return _NON_ALNUM.sub("", identity)


def trim_history(turns: Iterable[Turn]) -> list[Turn]:
    return list(turns)[-HISTORY_LIMIT:]


class HistoryStore(Protocol):
    def read(self, identity: str) -> list[Turn]: ...
    def write(self, identity: str, turns: list[Turn]) -> bool: ...


class InMemoryHistoryStore:
    """Process-local history. Lives as long as the process does."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[Turn, ...]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def read(self, identity: str) -> list[Turn]:
        key = normalize_identity(identity)
        with self._lock_for(key):
            return list(self._data.get(key, ()))

    def write(self, identity: str, turns: list[Turn]) -> bool:
        key = normalize_identity(identity)
        with self._lock_for(key):
            self._data[key] = tuple(trim_history(turns))
        return True
