import typing

from .exceptions import ConfigError, MinihttpError, ParseError, ProxyConfigError
from .http1 import parse_response
from .models import (
    URL,
    HeadersType,
    Method,
    MethodType,
    Origin,
    Proxy,
    Response,
    normalize_method,
)
from .transport import Transport
from .utils import DEFAULT_TIMEOUT, is_token, is_valid_header_value

SUPPORTED_SCHEMES = frozenset(("http", "https"))


class Request:
    """Everything needed to put one HTTP/1.1 request on the wire.

    Setters mutate the Request in place and return it so calls can be
    chained. Nothing touches the network until '.send()' which may be
    called any number of times, each call opening fresh sockets.
    A single Request isn't safe to send from several threads at once.
    """

    def __init__(self, url: typing.Union[str, URL]):
        self._url = URL.parse(url)
        if self._url.scheme not in SUPPORTED_SCHEMES:
            raise ParseError(f"unsupported url scheme {self._url.scheme!r}")
        # Raises ParseError when there's no host.
        self._origin = self._url.origin

        self._method: MethodType = Method.GET
        self._headers: typing.List[typing.Tuple[str, str]] = []
        self._body: typing.Optional[bytes] = None
        self._timeout: float = DEFAULT_TIMEOUT
        self._proxy: typing.Optional[Proxy] = None
        self._verify = True

    @property
    def url(self) -> URL:
        return self._url

    @property
    def origin(self) -> Origin:
        return self._origin

    @property
    def method(self) -> MethodType:
        return self._method

    @property
    def headers(self) -> typing.List[typing.Tuple[str, str]]:
        return list(self._headers)

    @property
    def body(self) -> typing.Optional[bytes]:
        return self._body

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def proxy(self) -> typing.Optional[Proxy]:
        return self._proxy

    @property
    def verify(self) -> bool:
        return self._verify

    def set_method(self, method: MethodType) -> "Request":
        self._method = normalize_method(method)
        return self

    def set_headers(self, headers: HeadersType) -> "Request":
        """Replaces every configured header. Pairs are sent in the
        order given, duplicates included.
        """
        items = list(headers.items() if hasattr(headers, "items") else headers)
        for name, value in items:
            if not isinstance(name, str) or not is_token(name):
                raise ConfigError(f"invalid header name {name!r}")
            if not isinstance(value, str) or not is_valid_header_value(value):
                raise ConfigError(f"invalid value for header {name!r}")
        self._headers = [(name, value) for name, value in items]
        return self

    def set_body(self, data: typing.Optional[bytes]) -> "Request":
        if isinstance(data, str):
            raise ConfigError("body must be bytes, use set_body_from_text() for str")
        self._body = None if data is None else bytes(data)
        return self

    def set_body_from_text(self, text: str, encoding: str = "utf-8") -> "Request":
        self._body = text.encode(encoding)
        return self

    def set_timeout(self, seconds: float) -> "Request":
        if seconds <= 0:
            raise ConfigError("timeout must be > 0")
        self._timeout = seconds
        return self

    def set_verify(self, verify: bool) -> "Request":
        if self._origin.scheme != "https":
            raise ConfigError("Verify setting only for https")
        self._verify = verify
        return self

    def set_proxy(self, proxy: typing.Union[str, URL]) -> "Request":
        url = URL.parse(proxy)
        if url.scheme not in SUPPORTED_SCHEMES:
            raise ParseError(f"unsupported proxy scheme {url.scheme!r}")
        # Plain 'http' proxies only ever relay plaintext requests,
        # they're refused for https targets rather than downgrading.
        if self._origin.scheme == "https" and url.scheme == "http":
            raise ProxyConfigError("Http proxy can only use http scheme.")
        self._proxy = Proxy(*url.origin)
        return self

    def send(self, transport: typing.Optional[Transport] = None) -> Response:
        if transport is None:
            transport = Transport()
        try:
            raw = transport.send(self)
            response = parse_response(raw, self._method)
        except MinihttpError as e:
            e.request = self
            raise
        response.request = self
        return response

    def __repr__(self) -> str:
        return f"<Request [{self._method}]>"
