"""Test client for larvatus applications.

Drives the app through its ASGI interface in-process — no sockets —
and returns the same ``OutboundResponse`` the transport would write.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urlencode

from larvatus.app import App
from larvatus.http.response import OutboundResponse


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for larvatus applications.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/users/42")
            assert response.status == 200
            assert response.json() == {"id": "42"}

    ``messages`` holds the raw ASGI messages sent for the most recent
    request, for asserting on exactly what reached the transport.
    """

    __slots__ = ("app", "messages")

    def __init__(self, app: App) -> None:
        self.app = app
        self.messages: list[MutableMapping[str, Any]] = []

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def get(self, path: str, *, headers: Mapping[str, str] | None = None) -> OutboundResponse:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
        form: Mapping[str, str] | None = None,
    ) -> OutboundResponse:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body, json=json, form=form)

    async def put(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
        form: Mapping[str, str] | None = None,
    ) -> OutboundResponse:
        """Send a PUT request."""
        return await self.request("PUT", path, headers=headers, body=body, json=json, form=form)

    async def delete(
        self, path: str, *, headers: Mapping[str, str] | None = None
    ) -> OutboundResponse:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
        form: Mapping[str, str] | None = None,
    ) -> OutboundResponse:
        """Send an arbitrary request and collect the response."""
        extra_headers: dict[str, str] = {}
        request_body = body or b""

        if json is not None:
            request_body = json_module.dumps(json).encode("utf-8")
            extra_headers["content-type"] = "application/json"
        elif form is not None:
            request_body = urlencode(form).encode("utf-8")
            extra_headers["content-type"] = "application/x-www-form-urlencoded"

        if request_body:
            extra_headers["content-length"] = str(len(request_body))

        merged = {**extra_headers, **(headers or {})}
        raw_path, _, query = path.partition("?")
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "path": raw_path,
            "raw_path": raw_path.encode("latin-1"),
            "query_string": query.encode("latin-1"),
            "root_path": "",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in merged.items()
            ],
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 12345),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if body_sent:
                return {"type": "http.disconnect"}
            body_sent = True
            return {"type": "http.request", "body": request_body, "more_body": False}

        messages: list[MutableMapping[str, Any]] = []

        async def send(message: MutableMapping[str, Any]) -> None:
            messages.append(message)

        await self.app(scope, receive, send)
        self.messages = messages
        return _outbound_from_messages(messages)


def _outbound_from_messages(messages: list[MutableMapping[str, Any]]) -> OutboundResponse:
    starts = [m for m in messages if m["type"] == "http.response.start"]
    if not starts:
        msg = "The application did not send a response."
        raise AssertionError(msg)
    start = starts[0]
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")
    headers = tuple(
        (name.decode("latin-1"), value.decode("latin-1")) for name, value in start["headers"]
    )
    return OutboundResponse(status=start["status"], headers=headers, body=body)
