"""
Timer abstraction used by the GameEngine.

Any asyncio event loop satisfies `Scheduler` as-is (`loop.call_later` and
`loop.time`). `VirtualClock` is a deterministic stand-in that only moves
forward when told to, used for tests and instant batch runs.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(
        self,
        delay: float,
        callback: Callable[[], object],
    ) -> TimerHandle: ...

    def time(self) -> float: ...


@dataclass
class ScaledScheduler:
    """Wraps another scheduler and divides every delay by `speed`."""

    inner: Scheduler
    speed: float = 1.0

    def __post_init__(self) -> None:
        if self.speed <= 0:
            msg = f"Speed must be positive, got {self.speed}"
            raise ValueError(msg)

    def call_later(
        self,
        delay: float,
        callback: Callable[[], object],
    ) -> TimerHandle:
        return self.inner.call_later(delay / self.speed, callback)

    def time(self) -> float:
        return self.inner.time()


@dataclass(order=True)
class ScheduledCall:
    when: float
    serial: int
    callback: Callable[[], object] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class VirtualClock:
    """Heap-based clock. Calls fire in (time, insertion) order."""

    now: float = 0.0
    queue: list[ScheduledCall] = field(default_factory=list)
    serial: int = 0

    def time(self) -> float:
        return self.now

    def call_later(
        self,
        delay: float,
        callback: Callable[[], object],
    ) -> ScheduledCall:
        if delay < 0:
            delay = 0.0
        self.serial += 1
        call = ScheduledCall(self.now + delay, self.serial, callback)
        heapq.heappush(self.queue, call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for c in self.queue if not c.cancelled)

    def _pop_due(self, until: float | None) -> ScheduledCall | None:
        while self.queue:
            head = self.queue[0]
            if head.cancelled:
                heapq.heappop(self.queue)
                continue
            if until is not None and head.when > until:
                return None
            return heapq.heappop(self.queue)
        return None

    def step(self) -> bool:
        """Jump to the next pending call and fire it. False if nothing is pending."""
        call = self._pop_due(None)
        if call is None:
            return False
        self.now = max(self.now, call.when)
        call.callback()
        return True

    def advance(self, seconds: float) -> int:
        """Move time forward, firing every call due on the way. Returns calls fired."""
        target = self.now + seconds
        fired = 0
        while (call := self._pop_due(target)) is not None:
            self.now = max(self.now, call.when)
            call.callback()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_calls: int = 100_000) -> int:
        """Fire calls until nothing is pending. Returns calls fired."""
        fired = 0
        while (call := self._pop_due(None)) is not None:
            if fired >= max_calls:
                msg = f"VirtualClock did not go idle after {max_calls} calls"
                raise RuntimeError(msg)
            self.now = max(self.now, call.when)
            call.callback()
            fired += 1
        return fired
