from .exceptions import (
    MinihttpError,
    ParseError,
    ConfigError,
    ProxyConfigError,
    HTTPError,
    RemoteProtocolError,
    ResponseParseError,
    TransportError,
    TimeoutError,
    ConnectTimeout,
    ReadTimeout,
    WriteTimeout,
    ConnectionError,
    NameResolutionError,
    ProxyError,
    TLSError,
    TLSHandshakeError,
    CertificateError,
    CertificateHostnameMismatch,
    SelfSignedCertificate,
    ExpiredCertificate,
)
from .models import URL, Headers, Method, Origin, Proxy, Response
from .request import Request
from .transport import Transport, TransportPath, select_path
from .client import Client
from .api import request, get, post, head, delete, put, options

__all__ = [
    "URL",
    "Headers",
    "Method",
    "Origin",
    "Proxy",
    "Request",
    "Response",
    "Transport",
    "TransportPath",
    "select_path",
    "Client",
    "request",
    "get",
    "post",
    "head",
    "delete",
    "put",
    "options",
    "MinihttpError",
    "ParseError",
    "ConfigError",
    "ProxyConfigError",
    "HTTPError",
    "RemoteProtocolError",
    "ResponseParseError",
    "TransportError",
    "TimeoutError",
    "ConnectTimeout",
    "ReadTimeout",
    "WriteTimeout",
    "ConnectionError",
    "NameResolutionError",
    "ProxyError",
    "TLSError",
    "TLSHandshakeError",
    "CertificateError",
    "CertificateHostnameMismatch",
    "SelfSignedCertificate",
    "ExpiredCertificate",
]

__version__ = "0.1.0"
