"""Shared HTTP plumbing for the muse and SHARD service clients."""

import logging
from types import TracebackType
from typing import Any, Self

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ServiceError(Exception):
    """Raised when a network service request fails or returns bad data."""


class ServiceClient:
    """Minimal JSON-over-HTTP client bound to one base URL.

    Args:
        base_url: Service address; ``http://`` is assumed when no scheme is given.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    SERVICE_NAME = "service"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            msg = f"No {self.SERVICE_NAME} address specified"
            raise ServiceError(msg)
        if "://" not in base_url:
            base_url = f"http://{base_url}"
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Normalized service base URL."""
        return self._base_url

    def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Args:
            path: Request path relative to the base URL.
            params: Optional query parameters.

        Returns:
            Decoded JSON value.

        Raises:
            ServiceError: On transport errors, non-2xx status, or invalid JSON.
        """
        logger.debug("GET %s%s %s", self._base_url, path, params or "")
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text.strip() or e.response.reason_phrase
            msg = f"{self.SERVICE_NAME} returned {e.response.status_code} for {path}: {detail}"
            raise ServiceError(msg) from e
        except httpx.HTTPError as e:
            msg = f"could not reach {self.SERVICE_NAME} at {self._base_url}: {e}"
            raise ServiceError(msg) from e

        try:
            return response.json()
        except ValueError as e:
            msg = f"{self.SERVICE_NAME} returned invalid JSON for {path}: {e}"
            raise ServiceError(msg) from e

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
