"""ASGI response sending — translates a finished Response into ASGI messages."""

from ganglion._internal.asgi import Send
from ganglion.http.response import Response


async def send_response(response: Response, send: Send) -> None:
    """Translate a ganglion Response into ASGI send() calls."""
    status, headers, body = response.finish()
    await send_triple(status, headers, body, send)


async def send_triple(
    status: int,
    headers: list[tuple[str, str]],
    body: bytes,
    send: Send,
) -> None:
    """Send an already finished ``(status, headers, body)`` triple."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers
    ]
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
