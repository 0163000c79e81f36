import socket
import ssl
import typing

from .base import Operation, wrap_exceptions
from minihttp import utils


class SyncBackend(object):
    def connect(self, host: str, port: int, timeout: float) -> "SyncSocket":
        # The timeout given here stays on the socket for every later
        # read and write, including the TLS handshake.
        with wrap_exceptions(Operation.CONNECT):
            conn = socket.create_connection((host, port), timeout)
        return SyncSocket(conn)


class SyncSocket(object):
    """Blocking socket that closes itself when used as a context manager"""

    def __init__(self, sock: typing.Union[socket.socket, ssl.SSLSocket]):
        self._sock = sock

    def start_tls(
        self, server_hostname: str, ssl_context: ssl.SSLContext
    ) -> "SyncSocket":
        with wrap_exceptions(Operation.HANDSHAKE):
            wrapped = ssl_context.wrap_socket(
                self._sock, server_hostname=server_hostname
            )
        return SyncSocket(wrapped)

    def send_all(self, data: bytes) -> None:
        with wrap_exceptions(Operation.WRITE):
            self._sock.sendall(data)

    def receive_some(self, max_bytes: int = utils.CHUNK_SIZE) -> bytes:
        with wrap_exceptions(Operation.READ):
            return self._sock.recv(max_bytes)

    def receive_until_closed(self) -> bytes:
        chunks = []
        while True:
            chunk = self.receive_some()
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)

    def receive_head(self, limit: int) -> bytes:
        """Reads at most 'limit' bytes, returning early once a blank
        line has been seen or the peer closes the connection.
        """
        data = bytearray()
        while len(data) < limit and b"\r\n\r\n" not in data:
            chunk = self.receive_some(limit - len(data))
            if not chunk:
                break
            data += chunk
        return bytes(data)

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> "SyncSocket":
        return self

    def __exit__(self, *_: typing.Any) -> None:
        self.close()
