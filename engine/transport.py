"""
transport.py — Playback / Transport Controller
==============================================
Random access into a RunLog: previous / next, seek, and press-and-hold
auto-repeat.  The transport never writes to the log; it only moves the
index of the state that is "current".

Every move publishes the full AlgorithmState at the new index through
`on_move`, never a patch against the previous one, so the published
picture cannot drift from the log.
"""

import time
from typing import Callable, Optional

from algorithms.step import AlgorithmState
from engine.config import PlaybackConfig
from engine.hold import HoldRepeater
from engine.recorder import RunLog


class Transport:
    """
    Attributes:
        index   : Index of the current state in the log (-1 when empty).
        hold    : The HoldRepeater driving press-and-hold stepping.
        on_move : Optional callback(index, state) fired on every move.
    """

    def __init__(
        self,
        log: RunLog,
        config: Optional[PlaybackConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        repeat_interval: Optional[Callable[[], float]] = None,
        on_move: Optional[Callable[[int, AlgorithmState], None]] = None,
    ):
        self.log    = log
        self.config = config or PlaybackConfig()
        self.clock  = clock
        self.index: int = -1
        self.hold = HoldRepeater(self.config.hold_debounce)
        self.on_move = on_move
        self._repeat_interval = repeat_interval or (
            lambda: self.config.base_interval / self.config.default_speed_multiplier
        )

    # ------------------------------------------------------------------
    # Single steps
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one state.  Returns False if already at the end."""
        if self.at_end:
            return False
        self._goto(self.index + 1)
        return True

    def step_backward(self) -> bool:
        """Rewind one state.  Returns False if already at the start."""
        if self.at_start:
            return False
        self._goto(self.index - 1)
        return True

    def step(self, direction: int) -> bool:
        return self.step_forward() if direction > 0 else self.step_backward()

    def seek(self, idx: int) -> bool:
        """Jump to a recorded index.  Out-of-range requests are ignored."""
        if not (0 <= idx < len(self.log)):
            return False
        self._goto(idx)
        return True

    def follow(self, idx: int) -> None:
        """Track the live tail while the scheduler appends."""
        self.index = idx

    # ------------------------------------------------------------------
    # Press-and-hold
    # ------------------------------------------------------------------
    def hold_forward(self, now: Optional[float] = None) -> bool:
        return self._press(1, now)

    def hold_backward(self, now: Optional[float] = None) -> bool:
        return self._press(-1, now)

    def release_hold(self) -> bool:
        return self.hold.release()

    def tick(self, now: Optional[float] = None) -> int:
        """Fire any due auto-repeat steps.  Returns how many were taken."""
        if not self.hold.active:
            return 0
        now = self.clock() if now is None else now
        fired = self.hold.tick(now, self.step)
        if self.hold.active and self._at_bound(self.hold.direction):
            self.hold.release()
        return fired

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current(self) -> Optional[AlgorithmState]:
        if 0 <= self.index < len(self.log):
            return self.log[self.index]
        return None

    @property
    def at_start(self) -> bool:
        return self.index <= 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.log) - 1

    def reset(self) -> None:
        self.hold.release()
        self.index = -1

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _press(self, direction: int, now: Optional[float]) -> bool:
        self.hold.release()
        if not self.step(direction):
            return False
        if not self._at_bound(direction):
            now = self.clock() if now is None else now
            self.hold.press(direction, now, self._repeat_interval())
        return True

    def _at_bound(self, direction: int) -> bool:
        return self.at_end if direction > 0 else self.at_start

    def _goto(self, idx: int) -> None:
        self.index = idx
        if self.on_move:
            self.on_move(idx, self.log[idx])
