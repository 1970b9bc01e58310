"""HTTP client for backend query requests."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from journey_tracker.adapters.api_request_logger import log_api_request
from journey_tracker.adapters.backend_api.constants import DEFAULT_HEADERS, QUERY_ENDPOINT

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)


class BackendApiError(Exception):
    """Raised when a backend query fails.

    The message includes the HTTP status in parentheses, e.g.
    "Backend query trainStops:getTrainSchedule failed (502)".
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with a message and optional HTTP status code."""
        super().__init__(message)
        self.status_code = status_code


class BackendHttpClient:
    """Runs named queries against the backend's HTTP query endpoint."""

    def __init__(self, session: ClientSession, base_url: str, timeout_seconds: float = 10) -> None:
        """Initialize with an aiohttp session.

        Args:
            session: Shared aiohttp session.
            base_url: Backend deployment URL, e.g. "https://example.convex.cloud".
            timeout_seconds: Total timeout per request.
        """
        self._session = session
        self._url = base_url.rstrip("/") + QUERY_ENDPOINT
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def _handle_response(self, response: ClientResponse, path: str) -> Any:
        """Unwrap the query envelope or raise BackendApiError."""
        if response.status != 200:
            body = await response.text()
            logger.error(f"Backend returned status {response.status} for {path}: {body[:200]}")
            raise BackendApiError(
                f"Backend query {path} failed ({response.status})", status_code=response.status
            )

        data = await response.json()
        if not isinstance(data, dict):
            raise BackendApiError(f"Backend query {path} returned an unexpected payload")
        if data.get("status") != "success":
            message = data.get("errorMessage", "unknown error")
            raise BackendApiError(f"Backend query {path} failed: {message}")
        return data.get("value")

    async def query(self, path: str, args: dict[str, Any] | None = None) -> Any:
        """Run a named query and return its value.

        Args:
            path: Query name, e.g. "trainStops:getTrainSchedule".
            args: Query arguments.

        Raises:
            BackendApiError: On HTTP, transport or query errors.
        """
        payload = {"path": path, "args": args or {}, "format": "json"}
        log_api_request("POST", self._url, headers=DEFAULT_HEADERS, payload=payload)

        try:
            async with self._session.post(
                self._url, json=payload, headers=DEFAULT_HEADERS, timeout=self._timeout
            ) as response:
                return await self._handle_response(response, path)
        except BackendApiError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Error calling backend query {path}: {e}")
            raise BackendApiError(f"Backend query {path} unreachable: {e}") from e
