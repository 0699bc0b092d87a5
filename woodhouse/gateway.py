"""QueryGateway: one ServerQuery round trip per call, with failure/warning/action signals."""

import asyncio
import json
import logging
from collections.abc import Collection
from typing import Any

from woodhouse.errors import QueryError, QueryTimeoutError
from woodhouse.events import ActionRecord, Failure, SignalBus, Signals
from woodhouse.query.contract import (
    QueryRequest,
    QueryResponse,
    QueryResult,
    QueryTransport,
)

logger = logging.getLogger(__name__)


class QueryGateway:
    """Sends queries through the transport. No queuing: concurrent calls interleave freely."""

    def __init__(
        self, transport: QueryTransport, bus: SignalBus, timeout: float = 30.0
    ) -> None:
        self._transport = transport
        self._bus = bus
        self._timeout = timeout

    async def execute(
        self,
        action: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
        expected_errors: Collection[int] = (),
    ) -> QueryResult:
        """Send action with params; return the round trip or raise QueryError.

        Errors whose error_id is in expected_errors are still raised but do not
        emit the failure signal; the caller decides what they mean.
        """
        request = QueryRequest(action=action, params=dict(params or {}))
        limit = self._timeout if timeout is None else timeout
        logger.debug("Query: %s with params: %s", action, _dump(request.params))
        try:
            response = await asyncio.wait_for(self._transport.send(request), timeout=limit)
        except asyncio.TimeoutError:
            err: QueryError = QueryTimeoutError(
                f"No response within {limit}s", action=action, params=request.params
            )
            await self._fail(request, err)
            raise err from None
        except QueryError as e:
            if e.action is None:
                e.action = action
                e.params = request.params
            if e.error_id is not None and e.error_id in expected_errors:
                logger.debug("Expected error for %s: %s", action, e)
                await self._record(request, error=e)
            else:
                await self._fail(request, e)
            raise
        except Exception as e:
            err = QueryError(f"Transport error: {e}", action=action, params=request.params)
            await self._fail(request, err)
            raise err from e

        logger.debug("Response: %s", _dump(response.data))
        await self._record(request, response=response)
        if not response.ok:
            await self.warn(f"Bad Response! {action}: status={response.status!r}")
        return QueryResult(request=request, response=response)

    async def warn(self, message: str) -> None:
        logger.warning("%s", message)
        await self._bus.emit(Signals.WARNING, message)

    async def _fail(self, request: QueryRequest, error: QueryError) -> None:
        message = (
            f"Action failed! Action: {request.action} | Params: {_dump(request.params)}"
        )
        logger.error("%s: %s", message, error)
        await self._bus.emit(Signals.FAILURE, Failure(message=message, error=error))
        await self._record(request, error=error)

    async def _record(
        self,
        request: QueryRequest,
        response: QueryResponse | None = None,
        error: QueryError | None = None,
    ) -> None:
        await self._bus.emit(
            Signals.ACTION,
            ActionRecord(
                action=request.action, request=request, response=response, error=error
            ),
        )


def _dump(value: Any) -> str:
    if isinstance(value, dict):
        value = {k: ("***" if "password" in str(k) else v) for k, v in value.items()}
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)
