"""
hold.py — Press-and-Hold Auto-Repeat
====================================
A small clock-driven state machine behind the "hold Next / hold
Previous" buttons:

    IDLE  →  press()                    →  DEBOUNCING
    DEBOUNCING  →  (debounce elapsed)   →  REPEATING
    REPEATING   →  (step hits a bound)  →  IDLE
    any   →  release()                  →  IDLE

There are no timer handles to leak: the repeater only holds deadlines,
and `release()` simply forgets them, so it can be called any number of
times.
"""

from enum import Enum
from typing import Callable, Optional


class HoldPhase(Enum):
    IDLE       = "idle"
    DEBOUNCING = "debouncing"
    REPEATING  = "repeating"


class HoldRepeater:
    """
    Attributes:
        phase     : Current HoldPhase.
        direction : +1 (forward) or -1 (backward) while held, else 0.
        debounce  : Seconds between the press and the first repeat window.
    """

    def __init__(self, debounce: float = 0.25):
        self.debounce:  float     = debounce
        self.phase:     HoldPhase = HoldPhase.IDLE
        self.direction: int       = 0

        self._deadline: float = 0.0
        self._interval: float = 0.0

    def press(self, direction: int, now: float, interval: float) -> None:
        """Start debouncing.  The caller has already taken the immediate step."""
        self.phase      = HoldPhase.DEBOUNCING
        self.direction  = 1 if direction > 0 else -1
        self._deadline  = now + self.debounce
        self._interval  = interval

    def release(self) -> bool:
        """Forget any pending debounce or repeat.  True if something was active."""
        was_active = self.active
        self.phase     = HoldPhase.IDLE
        self.direction = 0
        return was_active

    def tick(self, now: float, step: Callable[[int], bool]) -> int:
        """
        Fire every repeat that is due.  `step(direction)` performs one move
        and returns False at a bound, which ends the hold.
        """
        if self.phase is HoldPhase.DEBOUNCING:
            if now < self._deadline:
                return 0
            self.phase      = HoldPhase.REPEATING
            self._deadline += self._interval

        fired = 0
        while self.phase is HoldPhase.REPEATING and self._deadline <= now:
            if not step(self.direction):
                self.release()
                break
            fired += 1
            self._deadline += self._interval
        return fired

    def seconds_until_due(self, now: float) -> Optional[float]:
        if not self.active:
            return None
        return max(0.0, self._deadline - now)

    @property
    def active(self) -> bool:
        return self.phase is not HoldPhase.IDLE
