import socket
import threading
import typing

import pytest


class FakeSocket:
    """Stands in for SyncSocket, records everything into a shared log
    and answers reads from a list of canned replies.
    """

    def __init__(self, backend: "FakeBackend", tls: bool = False):
        self.backend = backend
        self.tls = tls
        self.closed = False

    def start_tls(self, server_hostname, ssl_context):
        self.backend.log.append(("start_tls", server_hostname, ssl_context))
        return FakeSocket(self.backend, tls=True)

    def send_all(self, data: bytes) -> None:
        self.backend.log.append(("send", self.tls, bytes(data)))

    def receive_head(self, limit: int) -> bytes:
        self.backend.log.append(("receive_head", limit))
        return self.backend.replies.pop(0)[:limit]

    def receive_until_closed(self) -> bytes:
        self.backend.log.append(("receive_until_closed", self.tls))
        return self.backend.replies.pop(0)

    def close(self) -> None:
        self.closed = True
        self.backend.log.append(("close", self.tls))

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()


class FakeBackend:
    def __init__(self, replies: typing.Sequence[bytes] = ()):
        self.replies = list(replies)
        self.log: typing.List[tuple] = []

    def connect(self, host: str, port: int, timeout: float) -> FakeSocket:
        self.log.append(("connect", host, port, timeout))
        return FakeSocket(self)

    def sent(self, tls: typing.Optional[bool] = None) -> bytes:
        return b"".join(
            entry[2]
            for entry in self.log
            if entry[0] == "send" and (tls is None or entry[1] == tls)
        )

    def entries(self, kind: str) -> typing.List[tuple]:
        return [entry for entry in self.log if entry[0] == kind]


OK_RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"Content-Length: 5\r\n"
    b"\r\n"
    b"hello"
)
CONNECT_OK = b"HTTP/1.1 200 Connection Established\r\n\r\n"


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def ok_response():
    return OK_RESPONSE


@pytest.fixture
def connect_ok():
    return CONNECT_OK


@pytest.fixture
def fake_backend():
    return FakeBackend([OK_RESPONSE])


def read_http_message(conn: socket.socket) -> bytes:
    """Reads one request head plus a 'Content-Length' body"""
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = conn.recv(4096)
        if not chunk:
            return data
        data += chunk
    head, _, body = data.partition(b"\r\n\r\n")
    length = 0
    for line in head.split(b"\r\n")[1:]:
        name, _, value = line.partition(b":")
        if name.strip().lower() == b"content-length":
            length = int(value.strip())
    while len(body) < length:
        body += conn.recv(4096)
    return head + b"\r\n\r\n" + body


class LoopbackServer:
    """Accepts a single connection and plays back 'script': each step
    reads one HTTP message then sends the step's bytes. The connection
    is closed after the last step.
    """

    def __init__(self, script: typing.Sequence[bytes]):
        self.script = list(script)
        self.received: typing.List[bytes] = []
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        conn, _ = self._sock.accept()
        with conn:
            for reply in self.script:
                self.received.append(read_http_message(conn))
                conn.sendall(reply)

    def close(self) -> None:
        self._thread.join(timeout=5)
        self._sock.close()


@pytest.fixture
def loopback_server():
    servers = []

    def start(*script: bytes) -> LoopbackServer:
        server = LoopbackServer(script)
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.close()
