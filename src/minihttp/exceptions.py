import typing

if typing.TYPE_CHECKING:
    from .models import Response
    from .request import Request


class MinihttpError(Exception):
    """Base error type for 'minihttp' which may carry the Request
    that was being sent, the Response if one was parsed, and the
    encapsulated error if this error wraps a different exception.
    """

    def __init__(
        self,
        message: str,
        request: typing.Optional["Request"] = None,
        response: typing.Optional["Response"] = None,
        error: typing.Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.request = request
        self.response = response
        self.error = error


class ParseError(MinihttpError):
    """Error while parsing a URL or proxy URL"""


class ConfigError(MinihttpError):
    """Error raised when a Request is configured with invalid values"""


class ProxyConfigError(ConfigError):
    """Error raised when a proxy can't be used with the target's scheme"""


class HTTPError(MinihttpError):
    """Generic error relating to HTTP"""


class RemoteProtocolError(HTTPError):
    """Error raised when the remote peer violates the HTTP spec"""


class ResponseParseError(RemoteProtocolError):
    """Error raised when the bytes received can't be parsed as a response"""


class TransportError(MinihttpError):
    """Generic error raised while reading from or writing to a socket"""


class TimeoutError(TransportError):
    """Error raised when an operation times out"""


class ConnectTimeout(TimeoutError):
    """Error raised when a socket connection times out"""


class ReadTimeout(TimeoutError):
    """Error raised when reading from a socket times out"""


class WriteTimeout(TimeoutError):
    """Error raised when writing to a socket times out"""


class ConnectionError(TransportError):
    """Generic error raised while attempting to setup a connection"""


class NameResolutionError(ConnectionError):
    """Error raised when DNS fails to resolve a hostname"""


class ProxyError(ConnectionError):
    """Error raised when a proxy fails to establish a tunnel"""


class TLSError(ConnectionError):
    """Generic error related to the TLS protocol"""


class TLSHandshakeError(TLSError):
    """Error raised when the TLS handshake with the server fails"""


class CertificateError(TLSHandshakeError):
    """Generic error related to certificate verification"""


class CertificateHostnameMismatch(CertificateError):
    """Certificate was valid but didn't have the correct
    'subjectAltName' or 'commonName' (if no subjectAltName)
    """


class SelfSignedCertificate(CertificateError):
    """Certificate was self-signed, can't verify unless
    the request is sent with verification disabled
    """


class ExpiredCertificate(CertificateError):
    """Certificate is past its 'notAfter' date"""
