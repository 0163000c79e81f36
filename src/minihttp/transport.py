import enum
import logging
import typing

from ._backends import SyncBackend, SyncSocket, get_backend
from .exceptions import ProxyError
from .http1 import serialize_connect_head, serialize_request_head
from .models import CACertsType, create_ssl_context
from .utils import CONNECT_REPLY_SIZE

if typing.TYPE_CHECKING:
    from .request import Request

log = logging.getLogger(__name__)


class TransportPath(enum.Enum):
    PROXY_FORWARD = "proxy-forward"
    PROXY_TUNNEL = "proxy-tunnel"
    DIRECT_PLAIN = "direct-plain"
    DIRECT_TLS = "direct-tls"


# (proxy scheme or None, target scheme) -> path. A plain 'http' proxy
# relays whatever it's given in plaintext, the https target row is
# never reached through Request.set_proxy() which refuses that pairing.
_PATHS: typing.Dict[typing.Tuple[typing.Optional[str], str], TransportPath] = {
    ("http", "http"): TransportPath.PROXY_FORWARD,
    ("http", "https"): TransportPath.PROXY_FORWARD,
    ("https", "http"): TransportPath.PROXY_TUNNEL,
    ("https", "https"): TransportPath.PROXY_TUNNEL,
    (None, "http"): TransportPath.DIRECT_PLAIN,
    (None, "https"): TransportPath.DIRECT_TLS,
}


def select_path(
    proxy_scheme: typing.Optional[str], target_scheme: str
) -> TransportPath:
    try:
        return _PATHS[(proxy_scheme, target_scheme)]
    except KeyError:
        raise ValueError(
            f"no transport for proxy={proxy_scheme!r} target={target_scheme!r}"
        ) from None


def check_connect_reply(reply: bytes) -> None:
    """Raises ProxyError unless the proxy agreed to open the tunnel"""
    try:
        text = reply.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProxyError("parse proxy server response error.", error=e) from e
    if "connection established" not in text.lower():
        raise ProxyError("Proxy server response error.")


class Transport:
    """Sends one Request over a freshly opened connection and returns
    every byte the server sent until it closed the connection.
    Holds no state between calls so a single instance may be shared.
    """

    def __init__(
        self,
        backend: typing.Optional[SyncBackend] = None,
        ca_certs: typing.Optional[CACertsType] = None,
    ):
        self.backend = backend if backend is not None else get_backend()
        self.ca_certs = ca_certs

    def send(self, request: "Request") -> bytes:
        proxy = request.proxy
        path = select_path(proxy.scheme if proxy else None, request.origin.scheme)
        handler = {
            TransportPath.PROXY_FORWARD: self._proxy_forward,
            TransportPath.PROXY_TUNNEL: self._proxy_tunnel,
            TransportPath.DIRECT_PLAIN: self._direct_plain,
            TransportPath.DIRECT_TLS: self._direct_tls,
        }[path]
        log.debug("Sending %s via %s", request.url, path.value)
        return handler(request)

    def _proxy_forward(self, request: "Request") -> bytes:
        assert request.proxy is not None
        with self._connect(request.proxy.host, request.proxy.port, request) as sock:
            return self._exchange(sock, request, absolute_form=True)

    def _proxy_tunnel(self, request: "Request") -> bytes:
        assert request.proxy is not None
        origin = request.origin
        with self._connect(request.proxy.host, request.proxy.port, request) as sock:
            sock.send_all(serialize_connect_head(origin))
            reply = sock.receive_head(CONNECT_REPLY_SIZE)
            check_connect_reply(reply)
            log.debug("Tunnel to %s established", origin.authority)

            if origin.scheme == "http":
                return self._exchange(sock, request)
            with self._start_tls(sock, request) as tls_sock:
                return self._exchange(tls_sock, request)

    def _direct_plain(self, request: "Request") -> bytes:
        origin = request.origin
        with self._connect(origin.host, origin.port, request) as sock:
            return self._exchange(sock, request)

    def _direct_tls(self, request: "Request") -> bytes:
        origin = request.origin
        with self._connect(origin.host, origin.port, request) as sock:
            with self._start_tls(sock, request) as tls_sock:
                return self._exchange(tls_sock, request)

    def _connect(self, host: str, port: int, request: "Request") -> SyncSocket:
        log.debug("Connecting to %s:%d", host, port)
        return self.backend.connect(host, port, timeout=request.timeout)

    def _start_tls(self, sock: SyncSocket, request: "Request") -> SyncSocket:
        ssl_context = create_ssl_context(request.verify, ca_certs=self.ca_certs)
        return sock.start_tls(request.origin.host, ssl_context)

    def _exchange(
        self, sock: SyncSocket, request: "Request", absolute_form: bool = False
    ) -> bytes:
        sock.send_all(serialize_request_head(request, absolute_form=absolute_form))
        if request.body is not None:
            sock.send_all(request.body)
        # 'Connection: Close' is always sent so the server ends the
        # response by closing, no framing is interpreted here.
        raw = sock.receive_until_closed()
        log.debug("Received %d bytes from %s", len(raw), request.origin.authority)
        return raw
