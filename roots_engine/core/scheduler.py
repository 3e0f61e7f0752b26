"""
Deferred one-shot callbacks driven by the frame tick.

Anything that has to happen "N seconds from now" (stopping a sound, loading
a scene after a short pause) is armed here instead of sleeping. Each armed
call is an explicit record that can be cancelled before it fires.

Usage:
    call = scheduler.arm(0.5, lambda: loader.load(scene_id))
    ...
    call.cancel()          # e.g. player left the zone
    ...
    scheduler.update(dt)   # once per tick
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class DeferredCall:
    """
    An armed callback.

    Attributes:
        id: Unique id
        delay: Seconds between arming and firing
        callback: Called with no arguments when due
        label: Free-form tag for logs
        elapsed: Seconds accumulated since arming
        armed_tick: Scheduler tick count when the call was armed
        cancelled: Cancelled calls never fire
        fired: Set once the callback has run
    """
    id: int
    delay: float
    callback: Callable[[], None]
    label: str = ""
    elapsed: float = 0.0
    armed_tick: int = 0
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        """True until the call fires or is cancelled."""
        return not (self.cancelled or self.fired)

    @property
    def remaining(self) -> float:
        """Seconds left before the call fires."""
        return max(0.0, self.delay - self.elapsed)

    def cancel(self) -> None:
        """Disarm the call. Safe to call more than once."""
        self.cancelled = True


class Scheduler:
    """
    Tick-driven scheduler for DeferredCalls.
    """

    _ids = itertools.count(1)

    def __init__(self):
        self._calls: list[DeferredCall] = []
        self._tick_count = 0

    @property
    def tick_count(self) -> int:
        """Number of update() calls so far."""
        return self._tick_count

    @property
    def pending(self) -> list[DeferredCall]:
        """Calls that are still armed."""
        return [c for c in self._calls if c.pending]

    def arm(self, delay: float, callback: Callable[[], None], label: str = "") -> DeferredCall:
        """
        Arm a one-shot callback.

        Args:
            delay: Seconds until the callback fires (clamped to >= 0)
            callback: Function to call
            label: Name used in logs

        Returns:
            The DeferredCall record, usable for cancel()
        """
        call = DeferredCall(
            id=next(Scheduler._ids),
            delay=max(0.0, delay),
            callback=callback,
            label=label,
            armed_tick=self._tick_count,
        )
        self._calls.append(call)
        logger.debug("Armed %s (#%d) for %.2fs", label or "callback", call.id, call.delay)
        return call

    def cancel(self, call: DeferredCall | None) -> None:
        """Cancel a call if it is still pending."""
        if call is not None and call.pending:
            call.cancel()
            logger.debug("Cancelled %s (#%d)", call.label or "callback", call.id)

    def cancel_all(self) -> None:
        """Cancel every pending call."""
        for call in self._calls:
            self.cancel(call)
        self._calls.clear()

    def update(self, dt: float) -> None:
        """
        Advance all armed calls by dt and fire the ones that are due.

        Calls armed from inside a callback start counting on the next update.
        """
        self._tick_count += 1
        due: list[DeferredCall] = []

        for call in list(self._calls):
            if not call.pending:
                continue
            call.elapsed += dt
            if call.elapsed >= call.delay:
                due.append(call)

        for call in due:
            # A callback fired earlier this tick may have cancelled it
            if not call.pending:
                continue
            call.fired = True
            call.callback()

        self._calls = [c for c in self._calls if c.pending]
