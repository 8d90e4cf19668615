"""
recorder.py — Run Log & Analytics
=================================
The append-only log of every AlgorithmState a run produced, plus the
summary metrics the UI shows once the run is over.

Usage:
    log = RunLog()
    log.begin(nodes, edges, directed=False, source=0)
    log.append(state)                # the Scheduler is the only writer
    log.freeze()                     # run completed / cancelled
    metrics = log.metrics()          # the analytics card
    log.export()                     # serialisable snapshot for replay

Index 0 is always the pre-start state.  Once frozen, `append` refuses
further states until the log is cleared for the next run.
"""

import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Optional, Sequence

from algorithms.step import AlgorithmState
from graph import Edge, Node


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    total_steps:    int   = 0
    node_count:     int   = 0
    nodes_visited:  int   = 0
    mst_edges:      int   = 0
    total_weight:   float = 0.0
    spanning:       bool  = False      # every node reached?
    completed:      bool  = False      # final summary state recorded?
    wall_time_ms:   float = 0.0        # first append → last append

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LogFrozenError(RuntimeError):
    """Raised when something tries to append to a frozen RunLog."""


# ---------------------------------------------------------------------------
# RunLog
# ---------------------------------------------------------------------------
class RunLog:
    """
    Attributes:
        states   : Every AlgorithmState appended so far, in order.
        frozen   : True once the run completed or was cancelled.
        nodes    : Node snapshot the run was started with.
        edges    : Edge snapshot the run was started with.
        directed : Directedness of the run.
        source   : Source node id of the run.
    """

    def __init__(self):
        self.states:   List[AlgorithmState] = []
        self.frozen:   bool                 = False
        self.nodes:    Sequence[Node]       = ()
        self.edges:    Sequence[Edge]       = ()
        self.directed: bool                 = False
        self.source:   Optional[int]        = None

        self._first_append: float = 0.0
        self._last_append:  float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def begin(self, nodes: Sequence[Node], edges: Sequence[Edge], directed: bool, source: int) -> None:
        """Start a fresh log for a new run."""
        self.clear()
        self.nodes    = tuple(nodes)
        self.edges    = tuple(edges)
        self.directed = directed
        self.source   = source

    def append(self, state: AlgorithmState) -> int:
        """Record one state and return its index."""
        if self.frozen:
            raise LogFrozenError("Run log is frozen; reset before recording a new run")
        now = time.monotonic()
        if not self.states:
            self._first_append = now
        self._last_append = now
        self.states.append(state)
        return len(self.states) - 1

    def freeze(self) -> None:
        self.frozen = True

    def clear(self) -> None:
        self.states   = []
        self.frozen   = False
        self.nodes    = ()
        self.edges    = ()
        self.directed = False
        self.source   = None
        self._first_append = self._last_append = 0.0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.states)

    def __getitem__(self, idx: int) -> AlgorithmState:
        return self.states[idx]

    def __iter__(self) -> Iterator[AlgorithmState]:
        return iter(self.states)

    @property
    def last(self) -> Optional[AlgorithmState]:
        return self.states[-1] if self.states else None

    @property
    def is_complete(self) -> bool:
        return bool(self.states) and self.states[-1].is_final

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    def metrics(self) -> RunMetrics:
        last = self.last
        if last is None:
            return RunMetrics(node_count=len(self.nodes))
        return RunMetrics(
            total_steps=len(self.states),
            node_count=len(self.nodes),
            nodes_visited=len(last.visited),
            mst_edges=len(last.mst_edges),
            total_weight=last.total_weight,
            spanning=bool(self.nodes) and len(last.visited) == len(self.nodes),
            completed=last.is_final,
            wall_time_ms=round((self._last_append - self._first_append) * 1000, 2),
        )

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "directed": self.directed,
            "source":   self.source,
            "frozen":   self.frozen,
            "graph": {
                "directed": self.directed,
                "nodes": [n.to_dict() for n in self.nodes],
                "edges": [e.to_dict() for e in self.edges],
            },
            "metrics": self.metrics().to_dict(),
            "states":  [s.to_dict() for s in self.states],
        }
