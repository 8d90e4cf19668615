"""
prim.py — Prim's Minimum Spanning Tree
======================================
Generator-based Prim, edge-list variant (no priority queue).

Yields an AlgorithmState at:
  0. Start                       →  nothing visited, source distance 0
  1. Source enters the tree      →  changed = {source}
  2. For every round:
       a. "considering"          →  relaxed distances, chosen crossing edge
       b. "committed"            →  edge in the tree, new node visited
  3. Summary                     →  edge count and total weight

Selection rule: among crossing edges whose weight equals the current
distance of their outside endpoint, the smallest weight wins; on a tie
the edge that comes first in the edge list wins.  When no crossing edge
is left the remaining nodes are unreachable and the run ends with a
partial spanning forest.

Directed mode only follows edges source → target.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence

from graph import Edge, Node
from algorithms.step import AlgorithmState, Direction, StateBuilder, TreeEdge


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Prim(graph, source):",                              # 0
    "    dist ← {v: ∞ for v in V};  dist[source] ← 0",      # 1
    "    visited ← {source};  mst ← []",                    # 2
    "    while |visited| < |V|:",                            # 3
    "        for (u, v, w) crossing the cut:",               # 4
    "            if w < dist[v]: dist[v] ← w; prev[v] ← u",  # 5
    "        (u, v) ← lightest crossing edge with w = dist[v]",  # 6
    "        if none: break",                                # 7
    "        visited.add(v);  mst.append((u, v))",           # 8
    "    return mst",                                        # 9
]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def prim(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    directed: bool = False,
    source: int = 0,
) -> Iterator[AlgorithmState]:
    """
    Validate the input, then return a lazy iterator over the run's states.

    Raises ValueError for malformed input (duplicate node ids, an edge
    pointing at an unknown node, a source that is not a node).  An empty
    node list yields nothing.
    """
    if not nodes:
        return iter(())
    validate(nodes, edges, source)
    return _prim_steps(list(nodes), list(edges), directed, source)


def validate(nodes: Sequence[Node], edges: Sequence[Edge], source: int) -> None:
    ids = [n.id for n in nodes]
    known = set(ids)
    if len(known) != len(ids):
        raise ValueError("Duplicate node ids in graph input")
    if source not in known:
        raise ValueError(f"Source node {source} is not in the graph")
    for e in edges:
        if e.source not in known or e.target not in known:
            raise ValueError(f"{e!r} references a node that does not exist")


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def _prim_steps(
    nodes: List[Node],
    edges: List[Edge],
    directed: bool,
    source: int,
) -> Iterator[AlgorithmState]:

    names: Dict[int, str] = {n.id: n.name for n in nodes}
    sb = StateBuilder(names)

    # --- start ---
    sb.distance[source] = 0
    sb.pseudocode_line  = 1
    sb.label            = "Starting Prim's Algorithm..."
    yield sb.build()

    # --- source enters the tree ---
    sb.visit(source)
    sb.mark_changed([source])
    sb.pseudocode_line = 2
    sb.label           = f"Step 1: Starting from node {names[source]}"
    yield sb.build()

    step = 2
    while len(sb.visited) < len(nodes):
        # -- relax --
        sb.changed = set()
        for e in edges:
            if e.source in sb.visited and e.target not in sb.visited:
                if e.weight < sb.distance[e.target]:
                    sb.relax(e.target, e.weight, via=e.source)
            elif not directed and e.target in sb.visited and e.source not in sb.visited:
                if e.weight < sb.distance[e.source]:
                    sb.relax(e.source, e.weight, via=e.target)

        # -- select --
        chosen = _lightest_crossing_edge(edges, sb.visited, sb.distance, directed)
        if chosen is None:
            logger.debug("no crossing edge left, %d node(s) unreachable",
                         len(nodes) - len(sb.visited))
            break

        from_name, to_name = names[chosen.source], names[chosen.target]
        weight = _fmt(chosen.weight)

        sb.current_edge    = chosen
        sb.pseudocode_line = 6
        sb.label           = f"Step {step}: Considering edge ({from_name}, {to_name}) with weight {weight}"
        yield sb.build()

        # -- commit --
        sb.visit(chosen.outside)
        sb.mst_edges.append(chosen)
        sb.current_edge    = None
        sb.mark_changed([chosen.outside])
        sb.pseudocode_line = 8
        sb.label           = (
            f"Step {step + 1}: Added edge ({from_name}, {to_name}) to MST. "
            f"Node {names[chosen.outside]} is now visited."
        )
        yield sb.build()

        step += 2

    # --- summary ---
    sb.current_edge    = None
    sb.changed         = set()
    sb.pseudocode_line = 9
    total = sum(e.weight for e in sb.mst_edges)
    sb.label = f"Algorithm complete! MST has {len(sb.mst_edges)} edges with total weight: {_fmt(total)}"
    unreachable = len(nodes) - len(sb.visited)
    if unreachable:
        sb.label += f" ({unreachable} unreachable node(s) left out)"
    yield sb.build(is_final=True)


def _lightest_crossing_edge(
    edges: List[Edge],
    visited: set,
    distance: Dict[int, float],
    directed: bool,
) -> Optional[TreeEdge]:
    best: Optional[TreeEdge] = None
    best_weight = float("inf")
    for e in edges:
        if e.source in visited and e.target not in visited and e.weight == distance[e.target]:
            if e.weight < best_weight:
                best_weight = e.weight
                best = TreeEdge(e.source, e.target, e.weight, Direction.FORWARD)
        elif (not directed and e.target in visited and e.source not in visited
                and e.weight == distance[e.source]):
            if e.weight < best_weight:
                best_weight = e.weight
                best = TreeEdge(e.source, e.target, e.weight, Direction.BACKWARD)
    return best


def _fmt(value: float):
    """5.0 → 5, 2.5 → 2.5"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
