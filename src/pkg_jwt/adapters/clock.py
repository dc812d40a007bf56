import time
from dataclasses import dataclass

from ..domain.ports import Clock


class SystemClock(Clock):
    """Wall-clock time, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Always returns the same instant. Handy for tests and replays."""

    timestamp: int

    def now(self) -> int:
        return self.timestamp
