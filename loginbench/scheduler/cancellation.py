from __future__ import annotations

import asyncio
import logging
import os
import signal
import threading
from typing import Callable

LOG = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130


class CancellationToken:
    """
    One-shot abort signal checked by the scheduler before admitting a task.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[CancellationToken], None]] = []
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self.reason = reason
            self._event.set()
            callbacks = list(self._callbacks)

        LOG.warning("Aborting%s", f" ({reason})" if reason else "")
        for callback in callbacks:
            callback(self)
        return True

    def add_callback(self, callback: Callable[[CancellationToken], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback(self)


def _hard_exit() -> None:
    os._exit(INTERRUPTED_EXIT_CODE)


class Watchdog:
    """
    Terminates the process a fixed grace period after it is armed, whatever
    the tasks in flight are doing. Results of tasks still running at that
    point are lost.
    """

    def __init__(
        self,
        grace_period: float = 5.0,
        terminate: Callable[[], None] | None = None,
    ):
        if grace_period <= 0:
            raise ValueError(f"grace_period must be positive, got {grace_period}")
        self.grace_period = grace_period
        self._terminate = terminate if terminate is not None else _hard_exit
        self._timer: threading.Timer | None = None
        self.fired = False

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def attach(self, token: CancellationToken) -> None:
        token.add_callback(lambda _token: self.arm())

    def arm(self) -> None:
        if self._timer is not None:
            return
        LOG.info("Forcing exit in %ss unless the run finishes first", self.grace_period)
        self._timer = threading.Timer(self.grace_period, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self.fired = True
        LOG.error("Grace period of %ss elapsed, terminating", self.grace_period)
        self._terminate()


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, token: CancellationToken
) -> None:
    for sig in (signal.SIGINT, signal.SIGTERM):
        reason = f"received {sig.name}"
        try:
            loop.add_signal_handler(sig, token.cancel, reason)
        except (NotImplementedError, RuntimeError):
            signal.signal(
                sig,
                lambda _signum, _frame, reason=reason: loop.call_soon_threadsafe(
                    token.cancel, reason
                ),
            )
