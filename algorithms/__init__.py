"""
algorithms/__init__.py — Algorithm Registry
===========================================
Single source of truth for the algorithms the visualizer can run.

    from algorithms import REGISTRY, get_algorithm

Only Prim's MST is registered; the registry keeps the engine and the
web layer from importing the generator module directly.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from algorithms.prim import prim as _prim, PSEUDOCODE as _prim_pc
from algorithms.step import (
    AlgorithmState,
    Direction,
    DistanceRow,
    StateBuilder,
    TreeEdge,
    INFINITY,
)


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "prim"
    label:             str                    # human label
    fn:                Callable               # prim(nodes, edges, directed, source) → iterator
    pseudocode:        List[str]              # lines for the side-panel
    tags:              List[str] = field(default_factory=list)
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "prim": AlgoInfo(
        key="prim", label="Prim's Algorithm", fn=_prim, pseudocode=_prim_pc,
        tags=["weighted", "spanning-tree"],
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Grows one tree from the source, always adding the lightest edge that leaves it.",
    ),
}

DEFAULT_ALGORITHM = "prim"


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "DEFAULT_ALGORITHM",
    "get_algorithm",
    "list_algorithms",
    "AlgorithmState",
    "Direction",
    "DistanceRow",
    "StateBuilder",
    "TreeEdge",
    "INFINITY",
]
