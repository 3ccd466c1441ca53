"""
Fake requests objects so no test touches the network.
"""

import json
import threading
from typing import Any, Callable, Dict, List, Optional, Union


class FakeResponse:
    def __init__(
        self,
        body: Any = None,
        status_code: int = 200,
        reason: str = "OK",
    ) -> None:
        self._body = body
        self.status_code = status_code
        self.reason = reason

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


Reply = Union[FakeResponse, Exception, Callable[[], FakeResponse]]


class FakeSession:
    """Records posts and answers them from a scripted list of replies.

    The last reply is repeated once the script runs out.
    """

    def __init__(self, *replies: Reply) -> None:
        self.headers: Dict[str, str] = {}
        self.replies: List[Reply] = list(replies) or [success()]
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self.posted = threading.Event()
        self._lock = threading.Lock()

    def post(self, url, data=None, headers=None, timeout=None):
        if hasattr(data, "read"):
            data = data.read()
        with self._lock:
            self.calls.append(
                {"url": url, "data": data, "headers": dict(headers or {}), "timeout": timeout}
            )
            reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        self.posted.set()
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply()
        return reply

    def close(self) -> None:
        self.closed = True

    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(call["data"]) for call in self.calls]


def success(message: Optional[str] = None) -> FakeResponse:
    body = {"status": "success"}
    if message:
        body["message"] = message
    return FakeResponse(body)


def bad_param(message: str = "Missing parameter") -> FakeResponse:
    return FakeResponse({"status": "error/client/badParam", "message": message}, 400, "Bad Request")


def server_error() -> FakeResponse:
    return FakeResponse({"status": "error/server"}, 500, "Internal Server Error")
