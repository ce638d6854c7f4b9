"""Cancel-and-reschedule of a single pending deferred call.

The scheduler is injected so the same :class:`Debouncer` works synchronously
on the calling thread, on a plain timer thread, on the Tk event loop
(``after``/``after_cancel``), and under tests with a manual clock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

__all__ = [
    "ScheduledHandle",
    "Scheduler",
    "ImmediateScheduler",
    "ThreadingScheduler",
    "TkScheduler",
    "Debouncer",
]


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledHandle: ...


class _DoneHandle:
    def cancel(self) -> None:
        return None


class ImmediateScheduler:
    """Run callbacks at once on the calling thread; the delay is ignored."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledHandle:
        callback()
        return _DoneHandle()


class ThreadingScheduler:
    """Run callbacks on a daemon :class:`threading.Timer`."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledHandle:
        timer = threading.Timer(max(0, delay_ms) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer


class _TkHandle:
    def __init__(self, widget: Any, after_id: str) -> None:
        self._widget = widget
        self._after_id = after_id

    def cancel(self) -> None:
        try:
            self._widget.after_cancel(self._after_id)
        except Exception as exc:
            # Widget already destroyed
            logger.debug("after_cancel failed for %s: %s", self._after_id, exc)


class TkScheduler:
    """Run callbacks on the Tk event loop of *widget*."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledHandle:
        return _TkHandle(self._widget, self._widget.after(max(0, delay_ms), callback))


class Debouncer:
    """Collapse bursts of calls into one call after a quiet period.

    At most one call is outstanding; each :meth:`call` cancels the previous
    one before scheduling the new one.
    """

    def __init__(self, delay_ms: int = 200, scheduler: Optional[Scheduler] = None) -> None:
        self.delay_ms = int(delay_ms)
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._handle: Optional[ScheduledHandle] = None
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            fired = False

            def _fire() -> None:
                nonlocal fired
                with self._lock:
                    # A superseded callback may still fire if cancel lost a race
                    if generation != self._generation:
                        return
                    fired = True
                    self._handle = None
                try:
                    fn(*args, **kwargs)
                except Exception:
                    logger.exception("Debounced call failed")

            handle = self._scheduler.schedule(self.delay_ms, _fire)
            # Synchronous schedulers have already fired
            if not fired:
                self._handle = handle

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1

    def _cancel_locked(self) -> None:
        if self._handle is not None:
            try:
                self._handle.cancel()
            finally:
                self._handle = None
