"""Flare client."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from datomic_flare.api import API
from datomic_flare.config import FlareConfig
from datomic_flare.dsl import DSL
from datomic_flare.http import HTTPClient
from datomic_flare.overrides import OverridePolicy, apply_dangerous_overrides_to_payload

logger = logging.getLogger(__name__)


class Flare:
    """
    Entry point for talking to Datomic through a Flare server.

    Args:
        config: A :class:`FlareConfig`, or the nested mapping form accepted
            by :meth:`FlareConfig.from_mapping`.
        address: Flare's base URL; overrides ``config``.
        timeout: Request timeout in seconds; overrides ``config``.
        dangerously_override: Forced database selector, e.g.
            ``{"database": {"name": "staging"}}``; overrides ``config``.

    Example:
        flare = Flare(address="http://localhost:3042")
        flare.dsl.query(datalog="[:find ?e :where [?e :post/title]]")
        flare.api.datoms({"database": {"latest": True}, "index": "eavt"})

    """

    def __init__(
        self,
        config: FlareConfig | Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        timeout: float | None = None,
        dangerously_override: Mapping[str, Any] | OverridePolicy | None = None,
    ):
        if not isinstance(config, FlareConfig):
            config = FlareConfig.from_mapping(config)

        changes: dict[str, Any] = {}
        if address is not None:
            changes["address"] = address
        if timeout is not None:
            changes["request"] = dataclasses.replace(config.request, timeout=timeout)
        if dangerously_override is not None:
            changes["dangerously_override"] = OverridePolicy.from_mapping(dangerously_override)

        self.config = dataclasses.replace(config, **changes) if changes else config
        self._http_client = HTTPClient(self.config)
        self._api: API | None = None
        self._dsl: DSL | None = None

    @property
    def dangerously_override(self) -> OverridePolicy:
        return self.config.dangerously_override

    @property
    def api(self) -> API:
        if self._api is None:
            self._api = API(self)
        return self._api

    @property
    def dsl(self) -> DSL:
        if self._dsl is None:
            self._dsl = DSL(self)
        return self._dsl

    def meta(self, debug: bool = False) -> Any:
        """Flare's metadata, including the ``mode`` (peer or client) it runs in."""
        return self.request("meta", request_method="GET", debug=debug)

    def request(
        self,
        path: str,
        payload: Any = None,
        *,
        debug: bool = False,
        request_method: str = "POST",
    ) -> Any:
        """Apply the override policy to ``payload`` and send it to ``path``."""
        shaped = apply_dangerous_overrides_to_payload(path, self.dangerously_override, payload)
        if shaped is not payload:
            logger.debug("Applied database overrides to %s payload", path)
        return self._http_client.request(
            path, shaped, debug=debug, request_method=request_method
        )


def new(*args: Any, **kwargs: Any) -> Flare:
    """Shortcut for :class:`Flare`."""
    return Flare(*args, **kwargs)
