"""Vercel KV / Upstash REST wrapper."""

import requests


class KVError(Exception):
    """Raised when the store answers with an error or an unexpected body."""
    pass


class KVRestClient:
    def __init__(
        self,
        url: str,
        token: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    def get(self, key: str) -> str | None:
        response = self._session.get(f"{self.url}/get/{key}", timeout=self.timeout)
        return self._result(response)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        # The value goes in the request body; a long history does not fit in a URL.
        response = self._session.post(
            f"{self.url}/set/{key}",
            params={"EX": ex} if ex is not None else None,
            data=value.encode("utf-8"),
            timeout=self.timeout,
        )
        return self._result(response) == "OK"

    @staticmethod
    def _result(response: requests.Response):
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise KVError(f"Unexpected KV response: {data!r}")
        if "error" in data:
            raise KVError(data["error"])
        return data.get("result")
