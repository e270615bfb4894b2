"""
Bridge between the Qt GUI thread and the asyncio positioning loop
"""

import asyncio
import concurrent.futures
import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot  # type: ignore

logger = logging.getLogger(__name__)


class AsyncBridge(QObject):
    """
    Runs an asyncio event loop on a background thread.

    Qt stays the host (main thread, ``app.exec()``); the positioning engine is the
    guest and only ever runs on the loop thread. Widgets are touched from the
    loop through ``call_in_gui``, which is delivered as a queued signal.
    """

    _invoke = pyqtSignal(object)  # (func, args, concurrent.futures.Future)

    def __init__(self):
        super().__init__()
        self.loop: asyncio.AbstractEventLoop | None = None
        self.thread: threading.Thread | None = None
        self._ready = threading.Event()
        self._invoke.connect(self._run_in_gui)

    def start(self) -> None:
        """Start AsyncIO event loop in background thread."""
        logger.info("Starting AsyncIO bridge in background thread")
        self.thread = threading.Thread(target=self._run_event_loop, name="PositioningLoop", daemon=True)
        self.thread.start()
        self._ready.wait()
        logger.info("AsyncIO event loop running in background (thread %s)", self.thread.ident)

    def _run_event_loop(self) -> None:
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.loop.call_soon(self._ready.set)
        self.loop.run_forever()
        logger.debug("AsyncIO loop stopped")

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self.loop is None:
            raise RuntimeError("AsyncIO loop not started")
        return self.loop

    def run_coroutine(self, coro) -> concurrent.futures.Future:
        """Schedule a coroutine on the loop (callable from the GUI thread)."""
        return asyncio.run_coroutine_threadsafe(coro, self._require_loop())

    def call_soon(self, func, *args) -> None:
        """Run a plain function on the loop thread."""
        self._require_loop().call_soon_threadsafe(func, *args)

    def call_in_gui(self, func, *args) -> concurrent.futures.Future:
        """Run a function on the GUI thread; the returned future carries its result."""
        future: concurrent.futures.Future = concurrent.futures.Future()
        self._invoke.emit((func, args, future))
        return future

    async def gui(self, func, *args):
        """Await ``func(*args)`` executed on the GUI thread (loop side)."""
        return await asyncio.wrap_future(self.call_in_gui(func, *args))

    @pyqtSlot(object)
    def _run_in_gui(self, payload) -> None:
        func, args, future = payload
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args))
        except Exception as e:
            future.set_exception(e)

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loop and wait for its thread."""
        if self.loop is None:
            return
        logger.info("Stopping AsyncIO bridge")
        self.loop.call_soon_threadsafe(self.loop.stop)
        if self.thread is not None:
            self.thread.join(timeout)
            if self.thread.is_alive():
                logger.warning("AsyncIO loop thread did not stop within %.1fs", timeout)
                return
        self.loop.close()
        self.loop = None
