"""Gene lookup broker — routes tagged lookup requests to the gene adapters.

The pipeline never calls the adapters directly. It sends a ``BrokerRequest``
through a transport and gets back a ``BrokerSuccess`` or ``BrokerFailure``.
``LocalTransport`` dispatches in-process; ``HttpTransport`` posts to the
``/api/broker`` endpoint of a running ``ntrcheck serve``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from ntrcheck.models import (
    BrokerFailure,
    BrokerRequest,
    BrokerResponse,
    BrokerSuccess,
    GeneQuery,
    GeneRecord,
)
from ntrcheck.services import hgnc, ncbi

logger = logging.getLogger(__name__)

Handler = Callable[[httpx.AsyncClient, GeneQuery], Awaitable[GeneRecord | None]]

_response_adapter: TypeAdapter[BrokerResponse] = TypeAdapter(BrokerResponse)


class GeneLookupBroker:
    """Closed registry of lookup actions, one adapter per action."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http
        self._handlers: dict[str, Handler] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        self._handlers["lookupHuman"] = _lookup_human
        self._handlers["lookupNonHuman"] = _lookup_non_human

    @property
    def actions(self) -> list[str]:
        return list(self._handlers)

    async def handle(self, request: BrokerRequest) -> BrokerResponse:
        handler = self._handlers.get(request.action)
        if handler is None:
            return BrokerFailure(message=f"Unknown action: {request.action}")

        logger.info("Broker received %s: %s", request.action, request.data.model_dump(by_alias=True))
        try:
            details = await handler(self.http, request.data)
        except Exception as exc:
            logger.error("%s lookup failed: %s", request.action, exc)
            return BrokerFailure(message=str(exc) or type(exc).__name__)
        return BrokerSuccess(details=details)

    async def handle_message(self, payload: Any) -> BrokerResponse:
        """Validate an untyped message, then dispatch it."""
        try:
            request = BrokerRequest.model_validate(payload)
        except ValidationError as exc:
            action = payload.get("action") if isinstance(payload, dict) else None
            if action is not None and action not in self._handlers:
                return BrokerFailure(message=f"Unknown action: {action}")
            return BrokerFailure(message=f"Malformed broker request: {exc.error_count()} error(s)")
        return await self.handle(request)


async def _lookup_human(http: httpx.AsyncClient, query: GeneQuery) -> GeneRecord | None:
    if not query.gene_symbol:
        return None
    return await hgnc.search_gene(http, query.gene_symbol)


async def _lookup_non_human(http: httpx.AsyncClient, query: GeneQuery) -> GeneRecord | None:
    if not query.gene_symbol or not query.animal:
        return None
    return await ncbi.search_gene(http, query.gene_symbol, query.animal)


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------

class BrokerTransport(Protocol):
    async def send(self, request: BrokerRequest) -> BrokerResponse: ...


class LocalTransport:
    """Dispatch to a broker living in the same process."""

    def __init__(self, broker: GeneLookupBroker) -> None:
        self.broker = broker

    async def send(self, request: BrokerRequest) -> BrokerResponse:
        return await self.broker.handle(request)


class HttpTransport:
    """Dispatch to a broker behind the ``/api/broker`` endpoint."""

    def __init__(self, http: httpx.AsyncClient, base_url: str) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def send(self, request: BrokerRequest) -> BrokerResponse:
        try:
            resp = await self.http.post(
                f"{self.base_url}/api/broker",
                json=request.model_dump(mode="json", by_alias=True),
            )
            resp.raise_for_status()
            return _response_adapter.validate_python(resp.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            logger.warning("Broker round trip failed: %s", exc)
            return BrokerFailure(message=f"Broker unreachable: {exc}")
