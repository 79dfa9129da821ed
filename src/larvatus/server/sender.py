"""ASGI response sending — translates an OutboundResponse to ASGI messages."""

from larvatus._internal.types import Send
from larvatus.http.response import OutboundResponse


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_outbound(outbound: OutboundResponse, send: Send) -> None:
    """Emit ``http.response.start`` and a single ``http.response.body``.

    Header names are lowercased. ``content-length`` is always computed
    here; a value set by the handler is dropped.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in outbound.headers
        if name.lower() != "content-length"
    ]

    body = outbound.body if _body_allowed(outbound.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": outbound.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
