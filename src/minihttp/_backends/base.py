import contextlib
import enum
import socket
import ssl
import typing

from minihttp.exceptions import (
    CertificateError,
    CertificateHostnameMismatch,
    ConnectionError,
    ConnectTimeout,
    ExpiredCertificate,
    NameResolutionError,
    ReadTimeout,
    SelfSignedCertificate,
    TLSError,
    TLSHandshakeError,
    WriteTimeout,
)


class Operation(enum.Enum):
    """What the socket was doing when an error was raised"""

    CONNECT = "connect"
    HANDSHAKE = "handshake"
    READ = "read"
    WRITE = "write"


_TIMEOUTS = {
    Operation.CONNECT: ConnectTimeout,
    Operation.HANDSHAKE: ConnectTimeout,
    Operation.READ: ReadTimeout,
    Operation.WRITE: WriteTimeout,
}


@contextlib.contextmanager
def wrap_exceptions(operation: Operation) -> typing.Iterator[None]:
    """Wraps socket and TLS exceptions into minihttp.MinihttpErrors.
    These are especially helpful for TLS and certificate errors
    because the caller can tell a bad certificate apart from a
    peer that went away mid-handshake.
    """

    def rewrite_exception(err: Exception) -> None:
        if isinstance(err, socket.gaierror):
            raise NameResolutionError("dns error", error=err) from err
        elif isinstance(err, socket.timeout):
            raise _TIMEOUTS[operation](f"{operation.value} timeout", error=err) from err
        elif isinstance(err, ssl.SSLCertVerificationError):
            msg = str(err).lower()
            if "self" in msg and "signed" in msg:
                raise SelfSignedCertificate("self signed", error=err) from err
            elif "hostname" in msg and "mismatch" in msg:
                raise CertificateHostnameMismatch(
                    "hostname mismatch", error=err
                ) from err
            elif "expired" in msg:
                raise ExpiredCertificate("cert is expired", error=err) from err
            else:
                raise CertificateError("cert error", error=err) from err
        elif isinstance(err, ssl.SSLError):
            if operation is Operation.HANDSHAKE:
                raise TLSHandshakeError("tls handshake error", error=err) from err
            raise TLSError("tls error", error=err) from err
        elif isinstance(err, OSError):
            raise ConnectionError(f"{operation.value} error: {err}", error=err) from err

    try:
        yield
    except Exception as err:
        rewrite_exception(err)
        # Anything that wasn't rewritten above propagates untouched.
        raise
