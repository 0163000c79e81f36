import typing

from .models import HeadersType, Method, MethodType, Response
from .request import Request
from .transport import Transport


def request(
    method: MethodType,
    url: str,
    *,
    headers: typing.Optional[HeadersType] = None,
    body: typing.Optional[typing.Union[str, bytes]] = None,
    timeout: typing.Optional[float] = None,
    proxy: typing.Optional[str] = None,
    verify: typing.Optional[bool] = None,
    transport: typing.Optional[Transport] = None,
) -> Response:
    req = Request(url).set_method(method)
    if headers is not None:
        req.set_headers(headers)
    if isinstance(body, str):
        req.set_body_from_text(body)
    elif body is not None:
        req.set_body(body)
    if timeout is not None:
        req.set_timeout(timeout)
    if proxy is not None:
        req.set_proxy(proxy)
    if verify is not None:
        req.set_verify(verify)
    return req.send(transport)


def get(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.GET, url, **kwargs)


def post(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.POST, url, **kwargs)


def head(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.HEAD, url, **kwargs)


def delete(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.DELETE, url, **kwargs)


def put(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.PUT, url, **kwargs)


def options(url: str, **kwargs: typing.Any) -> Response:
    return request(Method.OPTIONS, url, **kwargs)
