"""Inbound HTTP request snapshot.

Everything the request carries (method, URL, headers, body, query,
parsed form, uploads) is captured once, before the middleware chain
runs. Only ``params`` is filled in afterwards, by the dispatcher, once
a route matches.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from larvatus._internal.types import Scope
from larvatus.http.forms import UploadedFile, media_type, parse_body
from larvatus.http.headers import Headers
from larvatus.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request, frozen at construction.

    ``params`` is the one mutable field: the dispatcher replaces its
    contents with the captured path parameters after a successful
    match. Handlers may mutate it further.

    ``state`` is a free-form dict for middleware to hand values to
    downstream links and handlers (authenticated user, timing, ...).
    """

    method: str
    url: str
    path: str
    headers: Headers
    body: bytes = b""
    query: QueryParams = field(default_factory=QueryParams)
    parsed_body: Mapping[str, Any] = field(default_factory=dict)
    files: tuple[UploadedFile, ...] = ()
    params: dict[str, str] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def media_type(self) -> str:
        """Content-Type without parameters, lowercased."""
        return media_type(self.content_type)

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Decode the body as JSON. Raises ``ValueError`` if malformed."""
        return json_module.loads(self.body)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, body: bytes = b"") -> Request:
        """Snapshot an ASGI HTTP scope and its fully-read body."""
        headers = Headers(tuple(scope.get("headers", ())))
        query_string: bytes = scope.get("query_string", b"")
        path: str = scope["path"]
        url = f"{path}?{query_string.decode('latin-1')}" if query_string else path
        parsed_body, files = parse_body(body, headers.get("content-type"))
        return cls(
            method=scope["method"],
            url=url,
            path=path,
            headers=headers,
            body=body,
            query=QueryParams(query_string),
            parsed_body=MappingProxyType(parsed_body),
            files=files,
        )
