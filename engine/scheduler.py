"""
scheduler.py — Real-Time Execution Scheduler
============================================
Turns the lazy stream of AlgorithmStates into a paced, observable run.
It owns the iterator, is the only writer of the RunLog, and exposes
pause / resume / speed / cancel.

State machine:
    IDLE     →  start()            →  RUNNING
    RUNNING  →  pause()            →  PAUSED
    PAUSED   →  resume()           →  RUNNING
    RUNNING  →  (final state)      →  COMPLETED
    RUNNING / PAUSED  →  cancel()  →  IDLE      (log kept, frozen)
    any      →  reset()            →  IDLE      (log cleared)

Timing:
  The scheduler never sleeps.  The host calls `tick(now)` from its
  event loop (a polling endpoint, a Tk `after`, an asyncio task …) and
  every state whose deadline has elapsed is pulled, in order.  The
  deadline for the next state is fixed when a state is emitted:

      due = emitted_at + base_interval / effective_multiplier

  so speed changes only ever affect future waits.  The effective
  multiplier is 1, or the configured speed multiplier while "hold to
  speed up" is engaged.

Thread safety:
  Not thread-safe.  Every call must come from the same thread.
"""

import logging
import time
from enum import Enum
from typing import Callable, Iterator, Optional

from algorithms.step import AlgorithmState
from engine.config import PlaybackConfig
from engine.recorder import RunLog


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class RunPhase(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class Scheduler:
    """
    Attributes:
        phase            : Current RunPhase.
        log              : The RunLog this scheduler appends to.
        speed_multiplier : Multiplier applied while speeding up (positive int).
        speeding_up      : True while "hold to speed up" is engaged.
        on_state         : Optional callback(index, state) fired after every append.
    """

    def __init__(
        self,
        log: RunLog,
        config: Optional[PlaybackConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        on_state: Optional[Callable[[int, AlgorithmState], None]] = None,
    ):
        self.log:              RunLog         = log
        self.config:           PlaybackConfig = config or PlaybackConfig()
        self.clock:            Callable[[], float] = clock
        self.on_state = on_state

        self.phase:            RunPhase = RunPhase.IDLE
        self.speed_multiplier: int      = self.config.default_speed_multiplier
        self.speeding_up:      bool     = False

        self._states: Optional[Iterator[AlgorithmState]] = None
        self._due:    float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, states: Iterator[AlgorithmState], now: Optional[float] = None) -> bool:
        """
        Attach a fresh state stream and emit its first state right away.
        Refused (returns False) while another run is active.
        """
        if self.is_active:
            logger.warning("start refused: a run is already %s", self.phase.value)
            return False

        now = self._now(now)
        if self.log.frozen or len(self.log):
            # leftovers from the previous run
            self.log.clear()
        self._states     = iter(states)
        self.phase       = RunPhase.RUNNING
        self.speeding_up = False
        logger.info("run started")

        if not self._pull(now):
            # nothing to play at all
            self.phase = RunPhase.IDLE
        return True

    def cancel(self) -> bool:
        """Stop pulling states.  The log stays exactly as far as it got."""
        if not self.is_active:
            return False
        self._close()
        self.log.freeze()
        self.phase       = RunPhase.IDLE
        self.speeding_up = False
        logger.info("run cancelled after %d state(s)", len(self.log))
        return True

    def reset(self) -> None:
        """Back to IDLE with an empty log."""
        self._close()
        self.log.clear()
        self.phase       = RunPhase.IDLE
        self.speeding_up = False
        logger.info("run reset")

    # ------------------------------------------------------------------
    # Pause / Resume
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        if self.phase is not RunPhase.RUNNING:
            return False
        self.phase       = RunPhase.PAUSED
        self.speeding_up = False
        return True

    def resume(self, now: Optional[float] = None) -> bool:
        if self.phase is not RunPhase.PAUSED:
            return False
        now = self._now(now)
        # a deadline that passed while paused fires on the next tick, once
        if self._due < now:
            self._due = now
        self.phase = RunPhase.RUNNING
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed_multiplier(self, value: int) -> bool:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            logger.warning("ignoring invalid speed multiplier %r", value)
            return False
        self.speed_multiplier = value
        return True

    def speed_up(self) -> bool:
        """Engage "hold to speed up".  Only meaningful while RUNNING."""
        if self.phase is not RunPhase.RUNNING:
            return False
        self.speeding_up = True
        return True

    def release_speed_up(self) -> None:
        self.speeding_up = False

    @property
    def interval(self) -> float:
        """Seconds the next emitted state will wait before its successor."""
        multiplier = self.speed_multiplier if self.speeding_up else 1
        return self.config.base_interval / multiplier

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> int:
        """
        Emit every state whose deadline has elapsed.  Returns how many
        states were appended to the log.
        """
        if self.phase is not RunPhase.RUNNING:
            return 0
        now = self._now(now)
        emitted = 0
        while self.phase is RunPhase.RUNNING and self._due <= now:
            if not self._pull(self._due):
                break
            emitted += 1
        return emitted

    def run_to_completion(self) -> int:
        """Drain the remaining states without pacing ("jump to end")."""
        if not self.is_active:
            return 0
        now = self.clock()
        self.phase = RunPhase.RUNNING
        emitted = 0
        while self.phase is RunPhase.RUNNING and self._pull(now):
            emitted += 1
        return emitted

    def seconds_until_due(self, now: Optional[float] = None) -> Optional[float]:
        """Time left before the next state, or None when nothing is scheduled."""
        if self.phase is not RunPhase.RUNNING:
            return None
        return max(0.0, self._due - self._now(now))

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.phase in (RunPhase.RUNNING, RunPhase.PAUSED)

    @property
    def is_running(self) -> bool:
        return self.phase is RunPhase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is RunPhase.PAUSED

    @property
    def is_completed(self) -> bool:
        return self.phase is RunPhase.COMPLETED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _pull(self, emitted_at: float) -> bool:
        """Pull one state into the log.  False once the stream is exhausted."""
        if self._states is None:
            return False
        try:
            state = next(self._states)
        except StopIteration:
            self._complete()
            return False

        idx = self.log.append(state)
        self._due = emitted_at + self.interval
        logger.debug("state %d: %s", idx, state.label)
        if getattr(state, "is_final", False):
            self._complete()
        if self.on_state:
            self.on_state(idx, state)
        return True

    def _complete(self) -> None:
        self._close()
        self.log.freeze()
        self.phase       = RunPhase.COMPLETED
        self.speeding_up = False
        logger.info("run completed with %d state(s)", len(self.log))

    def _close(self) -> None:
        if self._states is not None:
            close = getattr(self._states, "close", None)
            if close:
                close()
        self._states = None

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now
