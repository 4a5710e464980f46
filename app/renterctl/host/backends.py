"""Session backend discovery.

Session backends implement the encrypted host protocol and are shipped
as separate packages. A backend registers a factory under the
``renterctl.session_backends`` entry-point group::

    [project.entry-points."renterctl.session_backends"]
    siamux = "renterctl_siamux:create_opener"

The factory is called with the loaded :class:`RenterConfig` and the
current block height, and must return a :class:`SessionOpener`.
"""

import logging
from collections.abc import Callable
from importlib import metadata

from renterctl.core.config import RenterConfig
from renterctl.host.base import SessionOpener

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "renterctl.session_backends"

SessionBackendFactory = Callable[[RenterConfig, int], SessionOpener]


class SessionBackendError(Exception):
    """Raised when no usable session backend can be loaded."""


def available_backends() -> list[str]:
    """List the names of installed session backends.

    Returns:
        Sorted entry-point names in the backend group.
    """
    return sorted(ep.name for ep in metadata.entry_points(group=ENTRY_POINT_GROUP))


def load_session_opener(config: RenterConfig, current_height: int) -> SessionOpener:
    """Load the configured session backend and build its opener.

    If ``config.session_backend`` is unset and exactly one backend is
    installed, that backend is used.

    Args:
        config: Loaded client configuration.
        current_height: Current block height, as reported by SHARD.

    Returns:
        SessionOpener produced by the backend factory.

    Raises:
        SessionBackendError: If the backend is missing, ambiguous, or fails to load.
    """
    entry_points = {ep.name: ep for ep in metadata.entry_points(group=ENTRY_POINT_GROUP)}

    name = config.session_backend
    if name is None:
        if not entry_points:
            msg = (
                "No session backend installed. Install a package providing the "
                f"'{ENTRY_POINT_GROUP}' entry point."
            )
            raise SessionBackendError(msg)
        if len(entry_points) > 1:
            msg = (
                f"Multiple session backends installed ({', '.join(sorted(entry_points))}); "
                "set session_backend in the config file."
            )
            raise SessionBackendError(msg)
        name = next(iter(entry_points))

    entry = entry_points.get(name)
    if entry is None:
        msg = f"Session backend '{name}' is not installed"
        raise SessionBackendError(msg)

    try:
        factory: SessionBackendFactory = entry.load()
        opener = factory(config, current_height)
    except Exception as e:
        msg = f"Session backend '{name}' failed to load: {e}"
        raise SessionBackendError(msg) from e

    if not isinstance(opener, SessionOpener):
        msg = f"Session backend '{name}' did not return a SessionOpener"
        raise SessionBackendError(msg)

    logger.debug("Using session backend %s (%s)", name, entry.value)
    return opener
