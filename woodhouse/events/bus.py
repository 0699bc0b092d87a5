"""In-process signal bus: subscribe handlers, deliver payloads in order.
No persistence, no retries. Handler errors are logged and never reach the emitter."""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class SignalBus:
    """Delivers each signal to its handlers in subscription order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._pending: set[asyncio.Task[Any]] = set()

    def on(self, signal: str, handler: Handler) -> None:
        """Subscribe handler (sync or async) to signal."""
        self._subscribers[signal].append(handler)

    def off(self, signal: str, handler: Handler) -> None:
        """Remove a previously registered subscription."""
        if signal in self._subscribers:
            self._subscribers[signal] = [
                h for h in self._subscribers[signal] if h != handler
            ]

    def once(self, signal: str, handler: Handler) -> None:
        """Subscribe handler for the next emission of signal only."""

        def _wrapper(payload: Any) -> Any:
            self.off(signal, _wrapper)
            return handler(payload)

        self.on(signal, _wrapper)

    def has_subscribers(self, signal: str) -> bool:
        return bool(self._subscribers.get(signal))

    async def emit(self, signal: str, payload: Any = None) -> None:
        """Dispatch payload to every handler, awaiting async ones one by one."""
        for handler in list(self._subscribers.get(signal, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception("Signal handler error [%s]: %s", signal, e)

    def emit_nowait(self, signal: str, payload: Any = None) -> None:
        """Dispatch from synchronous code. Async handlers are scheduled on the running loop."""
        for handler in list(self._subscribers.get(signal, [])):
            try:
                result = handler(payload)
            except Exception as e:
                logger.exception("Signal handler error [%s]: %s", signal, e)
                continue
            if inspect.isawaitable(result):
                self._schedule(signal, result)

    def _schedule(self, signal: str, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running loop; dropped async handler for [%s]", signal)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = loop.create_task(self._guard(signal, awaitable))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _guard(signal: str, awaitable: Any) -> None:
        try:
            await awaitable
        except Exception as e:
            logger.exception("Signal handler error [%s]: %s", signal, e)
