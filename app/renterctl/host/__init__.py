"""Host access: session interfaces, service clients, and backend discovery."""

from renterctl.host.backends import (
    ENTRY_POINT_GROUP,
    SessionBackendError,
    available_backends,
    load_session_opener,
)
from renterctl.host.base import (
    HostError,
    HostKeyResolver,
    HostListError,
    HostSession,
    HostUnreachableError,
    HostWriteError,
    SessionOpener,
    connect,
    open_session,
)
from renterctl.host.muse import MuseClient
from renterctl.host.service import ServiceError
from renterctl.host.shard import ShardClient

__all__ = [
    "ENTRY_POINT_GROUP",
    "HostError",
    "HostKeyResolver",
    "HostListError",
    "HostSession",
    "HostUnreachableError",
    "HostWriteError",
    "MuseClient",
    "ServiceError",
    "SessionBackendError",
    "SessionOpener",
    "ShardClient",
    "available_backends",
    "connect",
    "load_session_opener",
    "open_session",
]
