"""Fake HTTP session and clock used by the client tests."""

from __future__ import annotations

import json
from typing import Any, Dict, List
from urllib.parse import urlsplit


class FakeResponse:
    """Just enough of ``requests.Response`` for the client."""

    def __init__(
        self,
        status_code: int = 200,
        *,
        json_data: Any = None,
        content: bytes | None = None,
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self.reason = reason or ("OK" if status_code < 400 else "Error")
        if content is None:
            content = json.dumps(json_data).encode("utf-8") if json_data is not None else b""
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Routes requests by URL path to queued responses and records every call.

    The last response queued for a path is repeated once the others are used.
    """

    def __init__(self, routes: Dict[str, List[Any]] | None = None) -> None:
        self.routes: Dict[str, List[Any]] = {path: list(items) for path, items in (routes or {}).items()}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = urlsplit(url).path
        self.calls.append({"method": method, "url": url, "path": path, **kwargs})
        queue = self.routes.get(path)
        if not queue:
            return FakeResponse(404, content=f"no route for {path}".encode("utf-8"), reason="Not Found")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
