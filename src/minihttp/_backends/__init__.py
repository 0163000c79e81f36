from .base import Operation, wrap_exceptions
from .sync import SyncSocket, SyncBackend

__all__ = [
    "Operation",
    "SyncSocket",
    "SyncBackend",
    "get_backend",
    "wrap_exceptions",
]


def get_backend() -> SyncBackend:
    """Gets the backend used to open sockets. Only blocking
    sockets are supported so this is always the sync backend.
    """
    return SyncBackend()
