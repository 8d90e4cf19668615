"""
step.py — Algorithm State Snapshot
==================================
The MST generator yields AlgorithmState objects.  An AlgorithmState
is a frozen-in-time picture of everything the visualizer needs to
render one frame:

    • Which nodes are visited
    • Which edges are in the tree so far, in the order they were added
    • The edge being considered right now (with its traversal direction)
    • The distance table, and which of its rows changed this step
    • A plain-English label for the step

Design decisions:
  - Every field is an immutable container (tuple / frozenset / frozen
    dataclass).  A recorded state can never be altered by the working
    variables of the algorithm that produced it, which is what makes
    rewinding safe.
  - StateBuilder is the only mutable piece.  `build()` copies its
    scratch-pad into fresh immutable containers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple


INFINITY = float("inf")


# ---------------------------------------------------------------------------
# Traversal direction of a tree edge relative to its stored orientation
# ---------------------------------------------------------------------------
class Direction(Enum):
    FORWARD  = "forward"    # source was in the tree, target joins it
    BACKWARD = "backward"   # target was in the tree, source joins it


@dataclass(frozen=True)
class TreeEdge:
    """An edge as the algorithm saw it: stored orientation plus direction tag."""

    source:    int
    target:    int
    weight:    float
    direction: Direction = Direction.FORWARD

    @property
    def inside(self) -> int:
        """Endpoint that was already in the tree."""
        return self.source if self.direction is Direction.FORWARD else self.target

    @property
    def outside(self) -> int:
        """Endpoint that joins the tree through this edge."""
        return self.target if self.direction is Direction.FORWARD else self.source

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source":    self.source,
            "target":    self.target,
            "weight":    self.weight,
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class DistanceRow:
    """
    One row of the distance table.

    Attributes:
        node_id     : Node the row describes.
        node_name   : Its display name.
        visited     : Already part of the tree?
        distance    : Weight of the cheapest known edge into the tree (inf if none).
        previous_id : Tree neighbour achieving `distance`, or None.
        previous    : Display name of `previous_id`, or "-".
    """

    node_id:     int
    node_name:   str
    visited:     bool
    distance:    float          = INFINITY
    previous_id: Optional[int]  = None
    previous:    str            = "-"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId":   self.node_id,
            "nodeName": self.node_name,
            "visited":  self.visited,
            "distance": "∞" if self.distance == INFINITY else self.distance,
            "previous": self.previous,
        }


@dataclass(frozen=True)
class AlgorithmState:
    """
    Attributes:
        step_number     : 0-based index of this state in the run log.
        visited         : Node ids already in the tree.
        mst_edges       : Tree edges in the order they were committed.
        current_edge    : Edge being considered right now (or None).
        distance_table  : One DistanceRow per node, in node order.
        changed_nodes   : Node ids whose row changed in this step.
        label           : Human-readable description of the step.
        pseudocode_line : 0-based index into the PSEUDOCODE listing.
        is_final        : True on the summary state that ends the run.
    """

    step_number:     int                       = 0
    visited:         FrozenSet[int]            = frozenset()
    mst_edges:       Tuple[TreeEdge, ...]      = ()
    current_edge:    Optional[TreeEdge]        = None
    distance_table:  Tuple[DistanceRow, ...]   = ()
    changed_nodes:   FrozenSet[int]            = frozenset()
    label:           str                       = ""
    pseudocode_line: int                       = 0
    is_final:        bool                      = False

    @property
    def total_weight(self) -> float:
        return sum(e.weight for e in self.mst_edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "visited":         sorted(self.visited),
            "mst_edges":       [e.to_dict() for e in self.mst_edges],
            "current_edge":    self.current_edge.to_dict() if self.current_edge else None,
            "distance_table":  [row.to_dict() for row in self.distance_table],
            "changed_nodes":   sorted(self.changed_nodes),
            "label":           self.label,
            "pseudocode_line": self.pseudocode_line,
            "is_final":        self.is_final,
        }


# ---------------------------------------------------------------------------
# Convenience builder so the generator doesn't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StateBuilder:
    """
    Mutable scratch-pad the MST generator works on.

    Usage inside the generator:
        sb = StateBuilder(names)
        sb.visited.add(0)
        sb.distance[1] = 5
        sb.label = "Step 1: …"
        yield sb.build()

    `names` fixes the row order of the distance table.
    """

    def __init__(self, names: Dict[int, str]):
        self.names = dict(names)
        self.step_number = 0
        self.reset()

    def reset(self):
        self.visited:         set                       = set()
        self.mst_edges:       list                      = []
        self.current_edge:    Optional[TreeEdge]        = None
        self.distance:        Dict[int, float]          = {nid: INFINITY for nid in self.names}
        self.previous:        Dict[int, Optional[int]]  = {nid: None for nid in self.names}
        self.changed:         set                       = set()
        self.label:           str                       = ""
        self.pseudocode_line: int                       = 0

    # -- helpers --
    def visit(self, node_id: int):
        self.visited.add(node_id)

    def relax(self, node_id: int, weight: float, via: int):
        self.distance[node_id] = weight
        self.previous[node_id] = via
        self.changed.add(node_id)

    def mark_changed(self, nodes: Iterable[int]):
        self.changed = set(nodes)

    def table(self, visited: Optional[Iterable[int]] = None) -> Tuple[DistanceRow, ...]:
        seen = self.visited if visited is None else set(visited)
        rows = []
        for nid, name in self.names.items():
            prev = self.previous[nid]
            rows.append(DistanceRow(
                node_id=nid,
                node_name=name,
                visited=nid in seen,
                distance=self.distance[nid],
                previous_id=prev,
                previous=self.names[prev] if prev is not None else "-",
            ))
        return tuple(rows)

    def build(self, visited: Optional[Iterable[int]] = None, is_final: bool = False) -> AlgorithmState:
        """Freeze the scratch-pad.  `visited` overrides the visited set for this one state."""
        seen = frozenset(self.visited if visited is None else visited)
        state = AlgorithmState(
            step_number=self.step_number,
            visited=seen,
            mst_edges=tuple(self.mst_edges),
            current_edge=self.current_edge,
            distance_table=self.table(seen),
            changed_nodes=frozenset(self.changed),
            label=self.label,
            pseudocode_line=self.pseudocode_line,
            is_final=is_final,
        )
        self.step_number += 1
        return state
