"""
session.py — Playback Session
=============================
The ONLY object the UI talks to during a run.  It owns the RunLog, the
Scheduler that fills it and the Transport that navigates it, and it
publishes one consistent view after every change.

    session = PlaybackSession(config)
    session.subscribe(render)                  # render(view_dict)
    session.begin_run(nodes, edges, directed=False, source=0)
    ...                                        # host loop calls session.tick()
    session.pause(); session.step_backward(); session.resume()

Rules:
  - Expected conditions never raise: refused requests return False and
    leave the published view untouched.
  - Malformed graph input (edge to an unknown node, unknown source)
    raises ValueError from begin_run before anything changes.
  - While RUNNING the current state is the live tail of the log and
    navigation is a no-op.  Once PAUSED, COMPLETED, or cancelled, the
    recorded states can be stepped through freely.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from algorithms import DEFAULT_ALGORITHM, get_algorithm
from algorithms.step import AlgorithmState
from engine.config import PlaybackConfig
from engine.recorder import RunLog, RunMetrics
from engine.scheduler import RunPhase, Scheduler
from engine.transport import Transport
from graph import Edge, Node


logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], None]


class PlaybackSession:
    """
    Attributes:
        config    : PlaybackConfig with the timing knobs.
        log       : RunLog of the current (or last) run.
        scheduler : Scheduler pacing the run.
        transport : Transport navigating the log.
    """

    def __init__(
        self,
        config: Optional[PlaybackConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        info = get_algorithm(algorithm)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algorithm}")

        self.config    = config or PlaybackConfig()
        self.clock     = clock
        self.algorithm = info
        self.log       = RunLog()
        self.scheduler = Scheduler(self.log, self.config, clock, on_state=self._on_state)
        self.transport = Transport(
            self.log,
            self.config,
            clock,
            repeat_interval=lambda: self.config.base_interval / self.scheduler.speed_multiplier,
            on_move=self._on_move,
        )
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    def begin_run(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        directed: bool = False,
        source: int = 0,
    ) -> bool:
        if not nodes:
            logger.warning("run refused: graph has no nodes")
            return False
        if self.scheduler.is_active:
            logger.warning("run refused: a run is already %s", self.scheduler.phase.value)
            return False

        # raises ValueError on malformed input, before any state changes
        states = self.algorithm.fn(nodes, edges, directed, source)

        self.transport.reset()
        self.log.begin(nodes, edges, directed, source)
        logger.info(
            "starting %s on %d node(s), %d edge(s), source=%s, %s",
            self.algorithm.key, len(nodes), len(edges), source,
            "directed" if directed else "undirected",
        )
        return self.scheduler.start(states, self.clock())

    def pause(self) -> bool:
        if not self.scheduler.pause():
            return False
        self._publish()
        return True

    def resume(self) -> bool:
        if not self.scheduler.resume(self.clock()):
            return False
        self.transport.release_hold()
        self._publish()
        return True

    def toggle_pause(self) -> bool:
        if self.scheduler.is_paused:
            return self.resume()
        return self.pause()

    def cancel(self) -> bool:
        """Stop the run and keep what was recorded.  Phase returns to IDLE."""
        self.transport.release_hold()
        self.scheduler.release_speed_up()
        if not self.scheduler.cancel():
            return False
        self._publish()
        return True

    def reset(self) -> None:
        """Stop any run and discard its log and published state."""
        self.transport.reset()
        self.scheduler.reset()
        self._publish()

    def finish(self) -> int:
        """Compute every remaining state now and land on the summary."""
        self.transport.release_hold()
        self.scheduler.release_speed_up()
        return self.scheduler.run_to_completion()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed_multiplier(self, value: int) -> bool:
        if not self.scheduler.set_speed_multiplier(value):
            return False
        self._publish()
        return True

    def speed_up(self) -> bool:
        if not self.scheduler.speed_up():
            return False
        self._publish()
        return True

    def release_speed_up(self) -> None:
        was = self.scheduler.speeding_up
        self.scheduler.release_speed_up()
        if was:
            self._publish()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        return self.can_navigate and self.transport.step_forward()

    def step_backward(self) -> bool:
        return self.can_navigate and self.transport.step_backward()

    def seek(self, idx: int) -> bool:
        return self.can_navigate and self.transport.seek(idx)

    def hold_forward(self) -> bool:
        return self.can_navigate and self.transport.hold_forward(self.clock())

    def hold_backward(self) -> bool:
        return self.can_navigate and self.transport.hold_backward(self.clock())

    def release_hold(self) -> bool:
        return self.transport.release_hold()

    @property
    def can_navigate(self) -> bool:
        return self.scheduler.phase is not RunPhase.RUNNING and len(self.log) > 0

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> int:
        """Advance the run and any held button.  Returns states/moves taken."""
        now = self.clock() if now is None else now
        taken = self.scheduler.tick(now)
        if self.can_navigate:
            taken += self.transport.tick(now)
        return taken

    def seconds_until_next_event(self, now: Optional[float] = None) -> Optional[float]:
        now = self.clock() if now is None else now
        waits = [
            w for w in (self.scheduler.seconds_until_due(now), self.transport.hold.seconds_until_due(now))
            if w is not None
        ]
        return min(waits) if waits else None

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(view); returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def current_state(self) -> Optional[AlgorithmState]:
        return self.transport.current

    @property
    def phase(self) -> RunPhase:
        return self.scheduler.phase

    @property
    def current_index(self) -> int:
        return self.transport.index

    @property
    def log_length(self) -> int:
        return len(self.log)

    @property
    def is_active(self) -> bool:
        return self.scheduler.is_active

    def metrics(self) -> RunMetrics:
        return self.log.metrics()

    def view(self) -> Dict[str, Any]:
        """Everything the renderer needs, as plain JSON-ready data."""
        state = self.current_state()
        body = state.to_dict() if state else {
            "step_number":     None,
            "visited":         [],
            "mst_edges":       [],
            "current_edge":    None,
            "distance_table":  [],
            "changed_nodes":   [],
            "label":           "",
            "pseudocode_line": -1,
            "is_final":        False,
        }
        hold = self.transport.hold
        body.update({
            "phase":             self.phase.value,
            "current_index":     self.current_index,
            "log_length":        self.log_length,
            "speed_multiplier":  self.scheduler.speed_multiplier,
            "speeding_up":       self.scheduler.speeding_up,
            "holding":           {1: "forward", -1: "backward"}.get(hold.direction) if hold.active else None,
            "can_step_backward": self.can_navigate and not self.transport.at_start,
            "can_step_forward":  self.can_navigate and not self.transport.at_end,
            "completed":         self.log.is_complete,
        })
        return body

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_state(self, idx: int, state: AlgorithmState) -> None:
        self.transport.follow(idx)
        self._publish()

    def _on_move(self, idx: int, state: AlgorithmState) -> None:
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
