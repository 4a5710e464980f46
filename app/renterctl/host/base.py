"""Abstract interfaces for talking to storage hosts.

The encrypted host protocol lives in a separate session backend. This
module defines the surface renterctl needs from it: resolving a host's
network address, opening a session under a contract, listing the
host's sector roots, and submitting a batch of write actions.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

from renterctl.models.action import WriteAction
from renterctl.models.host import Contract, HostPublicKey, SectorRoot, short_key

logger = logging.getLogger(__name__)


class HostError(Exception):
    """Base exception for failures scoped to a single host.

    Attributes:
        host_key: Public key of the host the failure concerns.
    """

    def __init__(self, host_key: HostPublicKey, message: str) -> None:
        self.host_key = host_key
        super().__init__(message)

    @property
    def short_key(self) -> str:
        """Abbreviated host key for display."""
        return short_key(self.host_key)


class HostUnreachableError(HostError):
    """Raised when a host's address cannot be resolved or no session opens."""


class HostListError(HostError):
    """Raised when a host fails to return its sector roots."""


class HostWriteError(HostError):
    """Raised when a host rejects or fails a write batch."""


class HostSession(ABC):
    """An open, authenticated session with one host under one contract.

    Sessions are context managers; leaving the block closes the session.
    """

    @abstractmethod
    def sector_roots(self) -> list[SectorRoot]:
        """Return every sector root stored under the contract, in on-host order.

        Returns:
            List of 32-byte roots; position ``i`` is sector index ``i``.
        """

    @abstractmethod
    def write(self, actions: list[WriteAction]) -> None:
        """Apply a batch of write actions atomically.

        Args:
            actions: Actions applied in order as a single revision.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the session."""

    def __enter__(self) -> "HostSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class SessionOpener(ABC):
    """Factory for host sessions, provided by a session backend."""

    @abstractmethod
    def open(self, address: str, contract: Contract) -> HostSession:
        """Open a session with the host at ``address``.

        Args:
            address: Network address of the host (host:port).
            contract: Contract the session operates under.

        Returns:
            An open HostSession.
        """


class HostKeyResolver(ABC):
    """Resolves host public keys to network addresses."""

    @abstractmethod
    def resolve_host_key(self, host_key: HostPublicKey) -> str:
        """Return the announced network address of a host.

        Args:
            host_key: Public key of the host.

        Returns:
            Network address (host:port).
        """


def connect(
    resolver: HostKeyResolver,
    opener: SessionOpener,
    contract: Contract,
) -> HostSession:
    """Resolve a contract's host and open a session with it.

    Args:
        resolver: Host address resolver.
        opener: Session factory.
        contract: Contract to open the session under.

    Returns:
        An open HostSession; the caller must close it.

    Raises:
        HostUnreachableError: If resolution or session setup fails.
    """
    try:
        address = resolver.resolve_host_key(contract.host_key)
    except Exception as e:
        msg = f"could not resolve host address: {e}"
        raise HostUnreachableError(contract.host_key, msg) from e

    try:
        return opener.open(address, contract)
    except Exception as e:
        msg = f"could not open session with {address}: {e}"
        raise HostUnreachableError(contract.host_key, msg) from e


@contextmanager
def open_session(
    resolver: HostKeyResolver,
    opener: SessionOpener,
    contract: Contract,
) -> Iterator[HostSession]:
    """Context manager around :func:`connect` that always closes the session.

    Errors raised while closing are logged, not propagated.

    Raises:
        HostUnreachableError: If resolution or session setup fails.
    """
    session = connect(resolver, opener, contract)
    try:
        yield session
    finally:
        try:
            session.close()
        except Exception as e:
            logger.warning("Error closing session with host %s: %s", contract.short_key, e)
