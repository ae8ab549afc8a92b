"""
Dispatchers for CTA refreshes.

refresh_cta() gathers its state through a Dispatcher supplied by the
caller. Tests pass an ImmediateDispatcher so everything runs on the test's
own event loop; the app passes a BackgroundLoopDispatcher so store I/O
runs on a dedicated event loop thread, off the UI loop.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Dispatcher(ABC):
    """Runs an async unit of work in a chosen execution context."""

    @abstractmethod
    async def dispatch(self, work: Callable[[], Awaitable[T]]) -> T:
        """
        Run `work` and return its result to the calling coroutine.

        Args:
            work: Zero-argument coroutine function
        """
        pass


class ImmediateDispatcher(Dispatcher):
    """Runs work directly on the caller's event loop."""

    async def dispatch(self, work: Callable[[], Awaitable[T]]) -> T:
        return await work()


class BackgroundLoopDispatcher(Dispatcher):
    """
    Runs work on an event loop owned by a background thread.

    Usage:
        dispatcher = BackgroundLoopDispatcher()
        dispatcher.start()
        cta = await view_model.refresh_cta(dispatcher, is_browser_showing=False)
        dispatcher.stop()
    """

    def __init__(self, name: str = "cta-io"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._started.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        self._started.wait()
        logger.debug(f"Dispatcher thread {self._name} started")

    def _run(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._started.set()
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    def stop(self, timeout: float = 5.0) -> None:
        if not self.is_running:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        self._thread = None
        self._loop = None
        logger.debug(f"Dispatcher thread {self._name} stopped")

    async def dispatch(self, work: Callable[[], Awaitable[T]]) -> T:
        if not self.is_running:
            raise RuntimeError(f"Dispatcher {self._name} is not running")
        future = asyncio.run_coroutine_threadsafe(work(), self._loop)
        return await asyncio.wrap_future(future)
