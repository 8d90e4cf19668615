"""
graph.py — Graph Container
==========================
The mutable node/edge collection the user edits.  A run never reads
this object directly; it takes a `snapshot()` so later edits cannot
leak into a recorded run.

Responsibilities:
  1. CRUD on nodes & edges                  (add / move / rename / remove)
  2. Editing-time checks                    (unknown ids, self-loops, duplicates,
                                             non-finite weights)
  3. Snapshot for a run                     (independent copies, edge order kept)
  4. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Nodes live in a dict keyed by id (insertion order = table order).
  - Edges live in a plain list: their order is the tie-break order Prim
    uses, so it must be stable and visible.
  - Every successful edit bumps `version`, so a client can tell whether
    the graph it drew is the one the server holds.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from graph.node import Node
from graph.edge import Edge


logger = logging.getLogger(__name__)


class GraphError(ValueError):
    """An edit the graph refuses (unknown node, self-loop, duplicate edge)."""


class Graph:
    """
    Attributes:
        nodes    : {node_id: Node}
        edges    : [Edge, …] in insertion order
        directed : bool – graph-level directedness
        version  : int – bumped on every successful edit
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[int, Node] = {}
        self.edges:    List[Edge]      = []
        self.directed: bool            = directed
        self.version:  int             = 0
        self._next_id: int             = 0

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float, y: float, name: Optional[str] = None) -> Node:
        node = Node(self._next_id, x=x, y=y, name=name)
        self.nodes[node.id] = node
        self._next_id += 1
        self._touch()
        return node

    def move_node(self, node_id: int, x: float, y: float) -> Node:
        node = self._require(node_id)
        node.x, node.y = x, y
        self._touch()
        return node

    def rename_node(self, node_id: int, name: Optional[str]) -> Node:
        node = self._require(node_id)
        name = (name or "").strip()
        node.name = name or str(node.id)
        self._touch()
        return node

    def remove_node(self, node_id: int) -> None:
        self._require(node_id)
        self.edges = [e for e in self.edges if not e.touches(node_id)]
        del self.nodes[node_id]
        self._touch()

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, source: int, target: int, weight: Optional[float] = None) -> Edge:
        """
        Connect two existing nodes.  Without an explicit weight the edge
        gets the scaled distance between its endpoints.
        """
        src = self._require(source)
        dst = self._require(target)
        if source == target:
            raise GraphError(f"Self-loop on node {source} is not allowed")
        if self.get_edge_between(source, target) is not None:
            raise GraphError(f"Edge between {source} and {target} already exists")

        if weight is None:
            weight = src.distance_to(dst)
        _check_weight(weight)
        edge = Edge(source, target, weight)
        self.edges.append(edge)
        self._touch()
        return edge

    def set_edge_weight(self, source: int, target: int, weight: float) -> Edge:
        edge = self.get_edge_between(source, target)
        if edge is None:
            raise GraphError(f"No edge between {source} and {target}")
        _check_weight(weight)
        edge.weight = weight
        self._touch()
        return edge

    def remove_edge(self, source: int, target: int) -> None:
        edge = self.get_edge_between(source, target)
        if edge is None:
            raise GraphError(f"No edge between {source} and {target}")
        self.edges.remove(edge)
        self._touch()

    def get_edge_between(self, a: int, b: int) -> Optional[Edge]:
        """First edge connecting a and b (direction-aware)."""
        for e in self.edges:
            if e.connects(a, b, self.directed):
                return e
        return None

    # ==================================================================
    # GRAPH-LEVEL
    # ==================================================================
    def set_directed(self, directed: bool) -> None:
        self.directed = bool(directed)
        self._touch()

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
        self._next_id = 0
        self._touch()

    def snapshot(self) -> Tuple[Tuple[Node, ...], Tuple[Edge, ...]]:
        """Independent copies of nodes and edges, order preserved."""
        return (
            tuple(n.copy() for n in self.nodes.values()),
            tuple(e.copy() for e in self.edges),
        )

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=data.get("directed", False))
        for nd in data.get("nodes", []):
            node = Node.from_dict(nd)
            g.nodes[node.id] = node
            g._next_id = max(g._next_id, node.id + 1)
        for ed in data.get("edges", []):
            edge = Edge.from_dict(ed)
            g.add_edge(edge.source, edge.target, edge.weight)
        g.version = 0
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def _require(self, node_id: int) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise GraphError(f"Unknown node id: {node_id}")
        return node

    def _touch(self) -> None:
        self.version += 1
        logger.debug("graph edited (version %d)", self.version)

    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return f"Graph({kind}, nodes={self.node_count()}, edges={self.edge_count()})"


def _check_weight(weight: float) -> None:
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight):
        raise GraphError(f"Edge weight must be a finite number, got {weight!r}")
