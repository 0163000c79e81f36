import enum
import json
import os
import pathlib
import ssl
import typing
import urllib.parse

import certifi

from .exceptions import ConfigError, ParseError
from .utils import detect_encoding, is_known_encoding, is_token, parse_mimetype

PathType = typing.Union[str, pathlib.Path]
CACertsType = typing.Union[PathType, bytes]
URLType = typing.Union[str, "URL"]
HeadersType = typing.Union[
    typing.Mapping[str, str], typing.Iterable[typing.Tuple[str, str]],
]


class Origin(typing.NamedTuple):
    scheme: str
    host: str
    port: int

    @property
    def authority(self) -> str:
        """'host:port' as written in a 'Host' header or CONNECT target"""
        return f"{_bracket_host(self.host)}:{self.port}"


class Proxy(typing.NamedTuple):
    scheme: str
    host: str
    port: int

    @property
    def tunnels(self) -> bool:
        """Any proxy that isn't plain 'http' is spoken to via CONNECT"""
        return self.scheme != "http"

    @property
    def authority(self) -> str:
        return f"{_bracket_host(self.host)}:{self.port}"


class URL:
    DEFAULT_PORT_BY_SCHEME: typing.Dict[str, int] = {
        "http": 80,
        "https": 443,
    }

    def __init__(
        self,
        *,
        scheme: typing.Optional[str] = None,
        host: typing.Optional[str] = None,
        port: typing.Optional[int] = None,
        path: str = "",
        query: str = "",
    ):
        self.scheme = scheme
        self.host = host
        self.port = port
        self.path = path
        self.query = query

    @classmethod
    def parse(cls, url: URLType) -> "URL":
        if isinstance(url, URL):
            return url
        try:
            parts = urllib.parse.urlsplit(url.strip())
            # Accessing '.port' is what validates it.
            port = parts.port
        except ValueError as e:
            raise ParseError(f"url parse error: {url!r}", error=e) from e
        return cls(
            scheme=parts.scheme.lower() or None,
            host=_encode_host(parts.hostname or None),
            port=port,
            path=urllib.parse.quote(parts.path, safe=_PATH_SAFE),
            query=urllib.parse.quote(parts.query, safe=_QUERY_SAFE),
        )

    @property
    def origin(self) -> Origin:
        if self.scheme is None or self.host is None:
            raise ParseError("url parse error: no host")
        if self.port is None:
            if self.scheme not in self.DEFAULT_PORT_BY_SCHEME:
                raise ParseError(f"Unknown default port for scheme '{self.scheme}'")
            port = self.DEFAULT_PORT_BY_SCHEME[self.scheme]
        else:
            port = self.port
        return Origin(self.scheme, self.host, port)

    @property
    def request_target(self) -> str:
        """Origin-form request target, path and query only"""
        return f"{self.path or '/'}{'?' + self.query if self.query else ''}"

    @property
    def absolute_uri(self) -> str:
        """Absolute-form request target for forwarding proxies"""
        authority = _bracket_host(self.host or "")
        if self.port is not None:
            authority += f":{self.port}"
        return f"{self.scheme}://{authority}{self.request_target}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URL):
            return NotImplemented
        return self.absolute_uri == other.absolute_uri

    def __hash__(self) -> int:
        return hash(self.absolute_uri)

    def __str__(self) -> str:
        return self.absolute_uri

    def __repr__(self) -> str:
        return f"<URL {self.absolute_uri!r}>"


# Characters left as typed in the request target. Everything else,
# whitespace and control characters included, is percent-encoded.
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"


def _encode_host(host: typing.Optional[str]) -> typing.Optional[str]:
    """Internationalised host names are converted to their
    ASCII 'xn--' form, which is what goes on the wire.
    """
    if host is None or host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise ParseError(f"invalid host name {host!r}", error=e) from e


def _bracket_host(host: str) -> str:
    return f"[{host}]" if ":" in host else host


class Method(enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value


# Anything other than the members above travels as a custom token string.
MethodType = typing.Union[Method, str]


def normalize_method(method: MethodType) -> MethodType:
    if isinstance(method, Method):
        return method
    try:
        return Method(method)
    except ValueError:
        pass
    if not isinstance(method, str) or not is_token(method):
        raise ConfigError(f"invalid method token {method!r}")
    return method


def method_name(method: MethodType) -> str:
    return method.value if isinstance(method, Method) else method


class Headers:
    """Ordered multi-map of header fields. Every field is kept in the
    order it was received, lookups by name are case-insensitive.
    """

    def __init__(self, values: HeadersType = ()):
        self._items: typing.List[typing.Tuple[str, str]] = []
        if values:
            self.extend(values)

    def add(self, key: str, value: str) -> None:
        self._items.append((key, value))

    def extend(self, items: HeadersType) -> None:
        for k, v in items.items() if hasattr(items, "items") else items:
            self.add(k, v)

    def get(
        self, key: str, default: typing.Optional[str] = None
    ) -> typing.Optional[str]:
        key = key.lower()
        for k, v in self._items:
            if k.lower() == key:
                return v
        return default

    def get_all(self, key: str) -> typing.List[str]:
        key = key.lower()
        return [v for k, v in self._items if k.lower() == key]

    def get_folded(self, key: str) -> str:
        return ", ".join(self.get_all(key))

    def keys(self) -> typing.List[str]:
        seen: typing.Dict[str, str] = {}
        for k, _ in self._items:
            seen.setdefault(k.lower(), k)
        return list(seen.values())

    def items(self) -> typing.List[typing.Tuple[str, str]]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and self.get(item) is not None

    def __getitem__(self, item: str) -> str:
        value = self.get(item)
        if value is None:
            raise KeyError(item)
        return value

    def __iter__(self) -> typing.Iterator[typing.Tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"<Headers {self._items!r}>"

    __str__ = __repr__


class Response:
    def __init__(
        self,
        status_code: int,
        http_version: str,
        headers: HeadersType,
        content: bytes = b"",
        reason: str = "",
        request: typing.Any = None,
    ):
        self.status_code = status_code
        self.http_version = http_version
        self.headers = headers
        self.content = content
        self.reason = reason
        self.request = request

        # Informational (1XX) responses received before this one.
        self.history: typing.List[Response] = []

        self._encoding: typing.Optional[str] = None

    @property
    def headers(self) -> Headers:
        return self._headers

    @headers.setter
    def headers(self, value: HeadersType) -> None:
        if not isinstance(value, Headers):
            value = Headers(value)
        self._headers = value

    @property
    def content_type(self) -> str:
        """Gets the effective 'Content-Type' of the response either from headers
        or returns 'application/octet-stream' if no such header if found.
        """
        if "content-type" not in self.headers:
            return "application/octet-stream"
        return str(parse_mimetype(self.headers.get_folded("content-type")))

    @property
    def content_length(self) -> typing.Optional[int]:
        values = self.headers.get_all("content-length")
        if values and len(set(values)) == 1 and values[0].isdigit():
            return int(values[0])
        return None

    @property
    def encoding(self) -> str:
        """Returns the 'encoding' of the response body.
        - If encoding has been set manually, always use that value.
        - If the response has no body, return 'ascii'.
        - If there is a 'charset=X' within the 'Content-Type' header
          and its an encoding that Python understands.
        - Otherwise the body is handed to chardet.
        """
        if self._encoding:
            return self._encoding
        if not self.content:
            self._encoding = "ascii"
        elif "content-type" in self.headers:
            mimetype = parse_mimetype(self.headers.get_folded("content-type"))
            charset = mimetype.parameters.get("charset")
            if charset:
                self._encoding = is_known_encoding(charset)
        if not self._encoding:
            self._encoding = detect_encoding(self.content)
        return self._encoding

    @encoding.setter
    def encoding(self, value: str) -> None:
        self._encoding = value

    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> typing.Any:
        """Attempts to decode self.text() into JSON."""
        return json.loads(self.text())

    def __repr__(self) -> str:
        return "<Response [%d]>" % self.status_code


def create_ssl_context(
    verify: bool = True, ca_certs: typing.Optional[CACertsType] = None,
) -> ssl.SSLContext:
    """Builds the context used for both direct and tunnelled TLS.
    Without verification the certificate chain and hostname are
    not checked at all.
    """
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    ctx.options |= ssl.OP_NO_COMPRESSION
    ctx.set_alpn_protocols(["http/1.1"])

    if not verify:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx

    if ca_certs is None:
        ca_certs = certifi.where()
    if isinstance(ca_certs, bytes):
        ctx.load_verify_locations(cadata=ca_certs.decode("ascii"))
    elif os.path.isdir(ca_certs):
        ctx.load_verify_locations(capath=ca_certs)
    elif os.path.isfile(ca_certs):
        ctx.load_verify_locations(cafile=ca_certs)
    else:
        raise ConfigError(f"CA certificates not found at {ca_certs!r}")

    ctx.verify_mode = ssl.CERT_REQUIRED
    ctx.check_hostname = True
    return ctx
