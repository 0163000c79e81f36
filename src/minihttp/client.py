import typing

from .models import HeadersType, Method, MethodType, Response
from .request import Request
from .transport import Transport


class Client:
    """
    Holds one Request and sends it with whichever method is asked for.
    Body, timeout and headers are configured up front and kept across
    sends, so the same Client can 'GET' and then 'POST' to the same URL.
    """

    def __init__(self, url: str, *, transport: typing.Optional[Transport] = None):
        self.request = Request(url)
        self.transport = transport

    def body(self, body: typing.Union[str, bytes]) -> "Client":
        if isinstance(body, str):
            self.request.set_body_from_text(body)
        else:
            self.request.set_body(body)
        return self

    def timeout(self, seconds: float) -> "Client":
        self.request.set_timeout(seconds)
        return self

    def headers(self, headers: HeadersType) -> "Client":
        self.request.set_headers(headers)
        return self

    def proxy(self, proxy: str) -> "Client":
        self.request.set_proxy(proxy)
        return self

    def verify(self, verify: bool) -> "Client":
        self.request.set_verify(verify)
        return self

    def send(self, method: MethodType) -> Response:
        return self.request.set_method(method).send(self.transport)

    def get(self) -> Response:
        return self.send(Method.GET)

    def post(self) -> Response:
        return self.send(Method.POST)

    def head(self) -> Response:
        return self.send(Method.HEAD)

    def delete(self) -> Response:
        return self.send(Method.DELETE)

    def put(self) -> Response:
        return self.send(Method.PUT)

    def options(self) -> Response:
        return self.send(Method.OPTIONS)
