"""Client configuration.

Configuration is immutable once the client is built. It can be given as
keyword arguments, as the nested mapping used by other Flare clients::

    {
        "credentials": {"address": "http://localhost:3042"},
        "options": {"connection": {"request": {"timeout": 10}}},
        "dangerously_override": {"database": {"name": "my-db"}},
    }

or read from the environment (``FLARE_ADDRESS``, ``FLARE_TIMEOUT``).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

import httpx

from datomic_flare.overrides import OverridePolicy

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "http://localhost:3042"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class RequestOptions:
    """Per-request timeouts, in seconds.

    Attributes:
        timeout: Default for every phase without its own value.
        open_timeout: Time allowed to establish the connection.
        read_timeout: Time allowed to wait for response data.
        write_timeout: Time allowed to send the request body.
    """

    timeout: float | None = DEFAULT_TIMEOUT
    open_timeout: float | None = None
    read_timeout: float | None = None
    write_timeout: float | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> RequestOptions:
        """Build from a mapping, ignoring keys that are not timeouts."""
        options = options or {}
        allowed = {f.name for f in fields(cls)}
        ignored = set(options) - allowed
        if ignored:
            logger.debug("Ignoring unsupported request options: %s", sorted(ignored))
        return cls(**{k: v for k, v in options.items() if k in allowed})

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.timeout,
            connect=self.open_timeout if self.open_timeout is not None else self.timeout,
            read=self.read_timeout if self.read_timeout is not None else self.timeout,
            write=self.write_timeout if self.write_timeout is not None else self.timeout,
        )


def normalize_address(address: str | None) -> str:
    """Blank addresses fall back to the default; a trailing slash is dropped."""
    address = str(address or "").strip()
    if not address:
        return DEFAULT_ADDRESS
    return address.removesuffix("/")


@dataclass(frozen=True)
class FlareConfig:
    """Connection settings and overrides for a Flare client.

    Attributes:
        address: Base URL of the Flare server.
        request: Request timeouts.
        dangerously_override: Forced database selector fields.
    """

    address: str = DEFAULT_ADDRESS
    request: RequestOptions = field(default_factory=RequestOptions)
    dangerously_override: OverridePolicy = field(default_factory=OverridePolicy)

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address))
        if not isinstance(self.dangerously_override, OverridePolicy):
            object.__setattr__(
                self,
                "dangerously_override",
                OverridePolicy.from_mapping(self.dangerously_override),
            )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> FlareConfig:
        """Load the nested ``credentials`` / ``options`` / ``dangerously_override`` shape."""
        config = config or {}
        request = ((config.get("options") or {}).get("connection") or {}).get("request")
        return cls(
            address=(config.get("credentials") or {}).get("address"),
            request=RequestOptions.from_mapping(request),
            dangerously_override=OverridePolicy.from_mapping(config.get("dangerously_override")),
        )

    @classmethod
    def from_env(cls) -> FlareConfig:
        """Load configuration from environment variables."""
        timeout = os.getenv("FLARE_TIMEOUT")
        return cls(
            address=os.getenv("FLARE_ADDRESS", DEFAULT_ADDRESS),
            request=RequestOptions(timeout=float(timeout) if timeout else DEFAULT_TIMEOUT),
        )
