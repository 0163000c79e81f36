import typing

import h11

from .exceptions import ResponseParseError
from .models import MethodType, Origin, Response, method_name

if typing.TYPE_CHECKING:
    from .request import Request


def serialize_request_head(request: "Request", absolute_form: bool = False) -> bytes:
    """Renders the request line and header block, blank line included.
    Forwarding proxies need the absolute URI as the request target,
    everything else gets the origin-form path and query.
    """
    url = request.url
    target = url.absolute_uri if absolute_form else url.request_target
    lines = [
        f"{method_name(request.method)} {target} HTTP/1.1",
        f"Host: {request.origin.authority}",
        "Connection: Close",
    ]
    if request.body is not None:
        lines.append(f"Content-Length: {len(request.body)}")
    for name, value in request.headers:
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def serialize_connect_head(origin: Origin) -> bytes:
    return (
        f"CONNECT {origin.authority} HTTP/1.1\r\n"
        f"Host: {origin.authority}\r\n"
        "\r\n"
    ).encode("utf-8")


def parse_response(raw: bytes, method: MethodType) -> Response:
    """Parses a complete response read up to the point the server closed
    the connection. 'method' is the method of the request that was sent,
    responses to 'HEAD' never have a body regardless of their headers.
    """
    if not raw:
        raise ResponseParseError("server closed the connection without a response")

    conn = h11.Connection(h11.CLIENT)
    # Only h11's state machine is primed here, the bytes it would
    # produce are discarded since the request was framed by us.
    conn.send(
        h11.Request(
            method=method_name(method), target="/", headers=[("Host", "minihttp")]
        )
    )
    conn.send(h11.EndOfMessage())
    conn.receive_data(raw)
    conn.receive_data(b"")

    history: typing.List[Response] = []
    response: typing.Optional[Response] = None
    body: typing.List[bytes] = []

    while True:
        try:
            event = conn.next_event()
        except h11.RemoteProtocolError as e:
            raise ResponseParseError(f"malformed response: {e}", error=e) from e

        if isinstance(event, h11.InformationalResponse):
            history.append(_event_to_response(event))
        elif isinstance(event, h11.Response):
            response = _event_to_response(event)
        elif isinstance(event, h11.Data):
            body.append(bytes(event.data))
        elif isinstance(event, (h11.EndOfMessage, h11.ConnectionClosed)):
            break
        elif event is h11.PAUSED and response is not None:
            # 'Upgrade' and 'CONNECT' responses hand the stream over
            # to another protocol, whatever follows isn't ours.
            break
        else:
            raise ResponseParseError(f"incomplete response, got {event!r}")

    if response is None:
        raise ResponseParseError("server closed the connection without a response")
    response.content = b"".join(body)
    response.history = history
    return response


def _event_to_response(
    event: typing.Union[h11.Response, h11.InformationalResponse]
) -> Response:
    return Response(
        status_code=event.status_code,
        http_version=f"HTTP/{event.http_version.decode()}",
        headers=[
            (name.decode("latin-1"), value.decode("latin-1"))
            # h11 lowercases names for its own use, the raw items keep
            # the casing the server sent.
            for name, value in event.headers.raw_items()
        ],
        reason=event.reason.decode("latin-1"),
    )

