"""ASGI handler — the transport boundary.

The only component that touches raw ASGI directly. Reads the inbound
request, builds the per-request ``Request``/``Response`` pair, runs the
middleware chain with routing as its terminal step, and writes exactly
one response once the chain returns.
"""

import logging
from typing import Any

from larvatus._internal.invoke import invoke
from larvatus._internal.types import Receive, Scope, Send
from larvatus.config import AppConfig
from larvatus.errors import ClientDisconnected
from larvatus.http.request import Request
from larvatus.http.response import OutboundResponse, Response
from larvatus.middleware.chain import MiddlewareChain
from larvatus.middleware.errors import error_response
from larvatus.middleware.protocol import Terminal
from larvatus.routing.router import Router
from larvatus.server.sender import send_outbound

logger = logging.getLogger("larvatus.server")

# Host-level last resort: status only, no body
_UNSENT = OutboundResponse(status=500, headers=(), body=b"")


async def read_body(receive: Receive, limit: int) -> bytes | None:
    """Read the full request body.

    Returns ``None`` as soon as more than *limit* bytes have arrived.
    Raises ``ClientDisconnected`` if the client goes away before the
    body is complete.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise ClientDisconnected
        chunk = message.get("body", b"")
        size += len(chunk)
        if size > limit:
            return None
        if chunk:
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def make_dispatch(router: Router) -> Terminal:
    """Build the terminal step of the chain: match, then call the handler."""

    async def dispatch(request: Request, response: Response) -> Any:
        match = router.match(request.method, request.path)
        if match is None:
            logger.debug("404 %s %s", request.method, request.path)
            error_response(response, 404, "Not Found")
            return None

        request.params.clear()
        request.params.update(match.params)
        return await invoke(match.handler, request, response)

    return dispatch


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    chain: MiddlewareChain,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    response = Response(content_security_policy=config.content_security_policy)

    declared = scope_content_length(scope)
    body = None
    if declared is None or declared <= config.max_content_length:
        try:
            body = await read_body(receive, config.max_content_length)
        except ClientDisconnected:
            logger.debug("Client disconnected during %s %s", scope["method"], scope["path"])
            return
    if body is None:
        logger.debug("413 %s %s", scope["method"], scope["path"])
        error_response(response, 413, "Payload Too Large")
        await send_outbound(response.outbound or _UNSENT, send)
        return

    request = Request.from_asgi(scope, body)

    try:
        await chain.run(request, response, make_dispatch(router))
    except Exception:
        # Only reachable when the error-handling link itself failed
        logger.exception("Unhandled failure for %s %s", request.method, request.path)

    if response.outbound is None:
        logger.warning("No response sent for %s %s; responding 500", request.method, request.path)
    await send_outbound(response.outbound or _UNSENT, send)


def scope_content_length(scope: Scope) -> int | None:
    """The declared Content-Length, or ``None`` if absent or invalid."""
    for name, value in scope.get("headers", ()):
        if name.lower() == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None
