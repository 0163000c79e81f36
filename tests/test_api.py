import pytest
import minihttp


@pytest.mark.parametrize(
    ["func", "method"],
    [
        (minihttp.get, b"GET"),
        (minihttp.post, b"POST"),
        (minihttp.put, b"PUT"),
        (minihttp.delete, b"DELETE"),
        (minihttp.options, b"OPTIONS"),
    ],
)
def test_api_methods(fake_backend, func, method):
    resp = func(
        "http://example.com/x",
        transport=minihttp.Transport(backend=fake_backend),
    )

    assert resp.status_code == 200
    assert resp.text() == "hello"
    assert fake_backend.sent().startswith(method + b" /x HTTP/1.1\r\n")


def test_api_head(make_backend):
    backend = make_backend([b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\n"])

    resp = minihttp.head(
        "http://example.com/", transport=minihttp.Transport(backend=backend)
    )

    assert resp.content == b""
    assert resp.content_length == 5


def test_api_request_passes_options(make_backend, connect_ok, ok_response):
    backend = make_backend([connect_ok, ok_response])

    resp = minihttp.request(
        "PATCH",
        "https://example.com/item",
        headers={"Content-Type": "text/plain"},
        body="hi",
        timeout=3,
        proxy="https://proxy:1080",
        verify=False,
        transport=minihttp.Transport(backend=backend),
    )

    assert resp.request.method == "PATCH"
    assert backend.entries("connect") == [("connect", "proxy", 1080, 3)]
    [(_, _, ctx)] = backend.entries("start_tls")
    assert not ctx.check_hostname
    assert backend.sent(tls=True) == (
        b"PATCH /item HTTP/1.1\r\n"
        b"Host: example.com:443\r\n"
        b"Connection: Close\r\n"
        b"Content-Length: 2\r\n"
        b"Content-Type: text/plain\r\n"
        b"\r\n"
        b"hi"
    )


def test_api_bytes_body(fake_backend):
    minihttp.post(
        "http://example.com/",
        body=b"\x00\x01",
        transport=minihttp.Transport(backend=fake_backend),
    )

    assert fake_backend.sent().endswith(b"Content-Length: 2\r\n\r\n\x00\x01")


def test_api_invalid_url():
    with pytest.raises(minihttp.ParseError):
        minihttp.get("ftp://example.com/")


def test_response_carries_request(fake_backend):
    resp = minihttp.get(
        "http://example.com/", transport=minihttp.Transport(backend=fake_backend)
    )

    assert isinstance(resp.request, minihttp.Request)
    assert resp.request.url == minihttp.URL.parse("http://example.com/")


def test_transport_error_carries_request(make_backend):
    backend = make_backend([b"HTTP/1.1 403 Forbidden\r\n\r\n"])
    req = minihttp.Request("https://example.com/").set_proxy("https://proxy:1080")

    with pytest.raises(minihttp.ProxyError) as e:
        req.send(minihttp.Transport(backend=backend))

    assert e.value.request is req
    assert isinstance(e.value, minihttp.TransportError)
    assert isinstance(e.value, minihttp.MinihttpError)


def test_parse_error_carries_request(make_backend):
    backend = make_backend([b"garbage\r\n\r\n"])
    req = minihttp.Request("http://example.com/")

    with pytest.raises(minihttp.ResponseParseError) as e:
        req.send(minihttp.Transport(backend=backend))

    assert e.value.request is req


def test_client_reuses_configuration(make_backend, ok_response):
    backend = make_backend([ok_response, ok_response])
    client = (
        minihttp.Client(
            "http://example.com/form", transport=minihttp.Transport(backend=backend)
        )
        .headers([("Accept", "*/*")])
        .body("a=1")
        .timeout(4)
    )

    assert client.get().status_code == 200
    assert client.post().status_code == 200

    sends = [entry[2] for entry in backend.entries("send")]
    assert sends[0].startswith(b"GET /form HTTP/1.1\r\n")
    assert sends[2].startswith(b"POST /form HTTP/1.1\r\n")
    assert b"Accept: */*\r\n" in sends[2]
    assert sends[1] == sends[3] == b"a=1"
    assert [entry[3] for entry in backend.entries("connect")] == [4, 4]


@pytest.mark.parametrize(
    ["name", "method"],
    [
        ("head", b"HEAD"),
        ("delete", b"DELETE"),
        ("put", b"PUT"),
        ("options", b"OPTIONS"),
    ],
)
def test_client_methods(fake_backend, name, method):
    client = minihttp.Client(
        "http://example.com/", transport=minihttp.Transport(backend=fake_backend)
    )

    getattr(client, name)()

    assert fake_backend.sent().startswith(method + b" / HTTP/1.1\r\n")


def test_client_proxy_and_verify(make_backend, connect_ok, ok_response):
    backend = make_backend([connect_ok, ok_response])
    client = (
        minihttp.Client(
            "https://example.com/", transport=minihttp.Transport(backend=backend)
        )
        .proxy("https://proxy:1080")
        .verify(False)
    )

    assert client.get().content == b"hello"
    assert backend.entries("connect")[0][1:3] == ("proxy", 1080)


def test_client_verify_requires_https():
    with pytest.raises(minihttp.ConfigError):
        minihttp.Client("http://example.com/").verify(False)
