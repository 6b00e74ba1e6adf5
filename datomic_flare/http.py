"""HTTP transport to a Flare server."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from datomic_flare.config import FlareConfig
from datomic_flare.exceptions import FlareConnectionError, RequestError

logger = logging.getLogger(__name__)


class HTTPClient:
    """Sends JSON payloads to Flare operation paths."""

    def __init__(self, config: FlareConfig | None = None):
        self.config = config or FlareConfig()

    @property
    def address(self) -> str:
        return self.config.address

    def url(self, path: str) -> str:
        """Construct the URL for an operation path."""
        return f"{self.address}/{path}"

    def request(
        self,
        path: str,
        payload: Any = None,
        *,
        debug: bool = False,
        request_method: str = "POST",
    ) -> Any:
        """
        Send a payload to a Flare operation.

        Args:
            path: Operation path, e.g. ``datomic/transact``.
            payload: JSON-serializable body, or None for no body.
            debug: If True, nothing is sent; the request that would have
                been sent is returned as ``{"method", "url", "body"}``.
            request_method: HTTP method.

        Returns:
            The decoded JSON response, or the unsent request in debug mode.

        Raises:
            FlareConnectionError: If Flare cannot be reached or times out.
            RequestError: For any other transport failure or an error status.

        """
        url = self.url(path)
        method = request_method.strip().upper()

        if debug:
            debug_payload: dict[str, Any] = {"method": method, "url": url}
            if payload is not None:
                debug_payload["body"] = json.loads(json.dumps(payload))
            return debug_payload

        kwargs: dict[str, Any] = {
            "headers": {"Content-Type": "application/json"},
            "timeout": self.config.request.to_httpx(),
        }
        if payload is not None:
            kwargs["json"] = payload

        logger.debug("Flare request: %s %s", method, url)
        try:
            with httpx.Client() as client:
                r = client.request(method, url, **kwargs)
        except httpx.ConnectError as e:
            raise FlareConnectionError(
                f"Failed to connect to {url}: {e}", request=e, payload=payload
            ) from e
        except httpx.TimeoutException as e:
            raise FlareConnectionError(
                f"Request to {url} timed out: {e}", request=e, payload=payload
            ) from e
        except httpx.HTTPError as e:
            raise RequestError(f"Request to {url} failed: {e}", request=e, payload=payload) from e

        if r.status_code >= 400:
            raise RequestError(
                f"Request failed with status {r.status_code}: {r.text}",
                request=r,
                payload=payload,
            )

        try:
            return r.json()
        except ValueError as e:
            raise RequestError(
                f"Invalid JSON in response from {url}: {e}", request=r, payload=payload
            ) from e
