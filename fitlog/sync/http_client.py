"""Thin HTTP transport for the FitLog REST API."""

import asyncio
import logging
from typing import Any, Optional

import requests

from ..errors import FitLogError

__all__ = [
    "RemoteClient",
    "RemoteError",
    "NetworkError",
    "HttpError",
    "ServerRejection",
    "ServerFault",
    "DecodeError",
]

logger = logging.getLogger(__name__)


class RemoteError(FitLogError):
    """Any failure talking to the FitLog API."""

    pass


class NetworkError(RemoteError):
    """No connectivity, or the request timed out."""

    pass


class HttpError(RemoteError):
    """Non-2xx response."""

    def __init__(self, status: int, message: str = ""):
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}" + (f": {message}" if message else ""))

    @classmethod
    def for_status(cls, status: int, message: str = "") -> "HttpError":
        """Pick the subclass matching the status code."""
        if status >= 500:
            return ServerFault(status, message)
        if 400 <= status < 500:
            return ServerRejection(status, message)
        return cls(status, message)


class ServerRejection(HttpError):
    """4xx - the server permanently refused the request."""

    pass


class ServerFault(HttpError):
    """5xx - the server failed; the request may succeed later."""

    pass


class DecodeError(RemoteError):
    """Response body is not valid JSON."""

    pass


class RemoteClient:
    """Issues authenticated requests against the FitLog API.

    No retries and no caching: callers decide what to do with failures.
    ``requests`` is blocking, so every call runs in a worker thread.
    """

    USER_AGENT = "FitLog-DataLayer/1.0.0"

    def __init__(
        self,
        api_url: str,
        auth=None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            api_url: API base URL (paths such as ``/api/routines`` are appended)
            auth: Object with a ``token`` attribute (usually an AuthGate)
            timeout: Default request timeout in seconds
            session: Optional requests session (for dependency injection/testing)
        """
        self.api_url = api_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def _get_headers(self) -> dict:
        """Get request headers with authentication."""
        headers = {
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }
        token = getattr(self.auth, "token", None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        path: str,
        data: Optional[Any],
        params: Optional[dict],
        timeout: float,
    ) -> Any:
        url = self._url(path)
        kwargs: dict = {"timeout": timeout, "headers": self._get_headers()}
        if params:
            kwargs["params"] = params
        if data is not None and method.upper() != "GET":
            kwargs["json"] = data

        try:
            response = self._session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise NetworkError("Request timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError("Cannot connect to FitLog API") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(str(e)) from e

        if not response.ok:
            error_detail = ""
            try:
                body = response.json()
                if isinstance(body, dict):
                    error_detail = body.get("error") or body.get("message") or ""
            except ValueError:
                pass
            raise HttpError.for_status(response.status_code, error_detail)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {method} {path}") from e

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Any] = None,
        params: Optional[dict] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Make a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: API path relative to api_url
            data: JSON body (ignored for GET)
            params: Query string parameters
            timeout: Per-call timeout override in seconds

        Returns:
            Decoded JSON value, or ``{}`` for an empty body

        Raises:
            NetworkError: Connection failure or timeout
            ServerRejection: 4xx response
            ServerFault: 5xx response
            DecodeError: Body is not JSON
        """
        return await asyncio.to_thread(
            self._send,
            method.upper(),
            path,
            data,
            params,
            timeout if timeout is not None else self.timeout,
        )

    def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None
