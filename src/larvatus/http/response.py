"""Outbound HTTP response builder.

A ``Response`` is created empty (status 200, no headers, no body) for
every request and mutated by middleware and the handler. ``send()``
freezes it into an :class:`OutboundResponse`; later mutations and sends
are ignored. The server boundary writes the frozen snapshot to the
client once the middleware chain returns.
"""

from __future__ import annotations

import json as json_module
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("larvatus.server")

JSON_CONTENT_TYPE = "application/json"
DEFAULT_CSP = "default-src 'self'"


@dataclass(frozen=True, slots=True)
class OutboundResponse:
    """What the transport writes back: status line, headers, body."""

    status: int
    headers: tuple[tuple[str, str], ...]
    body: bytes

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Body decoded as JSON."""
        return json_module.loads(self.body)


class Response:
    """A mutable HTTP response for a single request.

    Usage inside a handler, sync or async::

        def show(request, response):
            response.set_status(201).set_header("X-Id", "42")
            response.json({"id": 42})
            response.send()
    """

    __slots__ = ("_body", "_csp", "_headers", "_outbound", "_status")

    def __init__(self, *, content_security_policy: str = DEFAULT_CSP) -> None:
        self._status = 200
        self._headers: dict[str, str] = {}
        self._body = bytearray()
        self._outbound: OutboundResponse | None = None
        self._csp = content_security_policy

    # -- Read access --

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> dict[str, str]:
        """A copy of the headers, in the order they were first set."""
        return dict(self._headers)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def sent(self) -> bool:
        """True once ``send()`` has taken effect."""
        return self._outbound is not None

    @property
    def outbound(self) -> OutboundResponse | None:
        """The snapshot taken by ``send()``, or ``None`` before it."""
        return self._outbound

    def get_header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        key = self._find_header(name)
        return None if key is None else self._headers[key]

    # -- Mutation --

    def set_status(self, status: int) -> Response:
        if self._ignored("set_status"):
            return self
        self._status = status
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Set a header, replacing any existing header of the same name.

        Names compare case-insensitively; a replaced header keeps its
        original spelling and position.
        """
        if self._ignored("set_header"):
            return self
        self._headers[self._find_header(name) or name] = value
        return self

    def write(self, data: str | bytes) -> Response:
        """Append *data* to the body. Strings are encoded as UTF-8."""
        if self._ignored("write"):
            return self
        self._body.extend(data.encode("utf-8") if isinstance(data, str) else data)
        return self

    def json(self, data: Any) -> Response:
        """Replace the body with *data* serialized as JSON.

        Sets ``Content-Type: application/json`` and, unless disabled in
        the app config, a ``Content-Security-Policy`` header.
        """
        if self._ignored("json"):
            return self
        payload = json_module.dumps(data).encode("utf-8")
        self.set_header("Content-Type", JSON_CONTENT_TYPE)
        if self._csp:
            self.set_header("Content-Security-Policy", self._csp)
        self._body = bytearray(payload)
        return self

    # -- Terminal --

    def to_outbound(self) -> OutboundResponse:
        """Snapshot the current status, headers, and body."""
        return OutboundResponse(
            status=self._status,
            headers=tuple(self._headers.items()),
            body=bytes(self._body),
        )

    def send(self) -> bool:
        """Freeze the response for delivery.

        Only the first call per request has any effect; it returns
        ``True``. Subsequent calls return ``False``. Code after ``send()``
        still runs, but cannot change what the client receives.
        """
        if self._outbound is not None:
            logger.debug("Response already sent; ignoring repeated send()")
            return False
        self._outbound = self.to_outbound()
        return True

    # -- Internal --

    def _find_header(self, name: str) -> str | None:
        name_lower = name.lower()
        for key in self._headers:
            if key.lower() == name_lower:
                return key
        return None

    def _ignored(self, operation: str) -> bool:
        if self._outbound is not None:
            logger.warning("Response.%s() called after send(); ignored", operation)
            return True
        return False

    def __repr__(self) -> str:
        state = "sent" if self.sent else "pending"
        return f"<Response {self._status} {state} {len(self._body)} bytes>"
