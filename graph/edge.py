"""
edge.py — Graph Edge
====================
Connects two nodes by id and carries a numeric weight.

Design decisions:
  - `source` and `target` are node ids, NOT Node references, so edges
    stay serialisable and cheap to copy into a run snapshot.
  - Edges have no id of their own: an edge is identified by its
    endpoint pair (ordered when directed, unordered otherwise).
  - The stored orientation is kept even in undirected graphs so the
    renderer can draw the edge the way the user dragged it.
"""


class Edge:
    """
    Attributes:
        source : Id of the node the edge was drawn from.
        target : Id of the node the edge was drawn to.
        weight : Numeric cost.
    """

    __slots__ = ("source", "target", "weight")

    def __init__(self, source: int, target: int, weight: float = 1.0):
        self.source: int   = source
        self.target: int   = target
        self.weight: float = weight

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def connects(self, node_a: int, node_b: int, directed: bool = False) -> bool:
        """True if this edge links node_a ↔ node_b (respects directedness)."""
        if self.source == node_a and self.target == node_b:
            return True
        return not directed and self.source == node_b and self.target == node_a

    def touches(self, node_id: int) -> bool:
        return node_id in (self.source, self.target)

    def copy(self) -> "Edge":
        return Edge(self.source, self.target, self.weight)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(int(data["source"]), int(data["target"]), data.get("weight", 1.0))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.source} - {self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Edge)
            and self.source == other.source
            and self.target == other.target
            and self.weight == other.weight
        )

    def __hash__(self) -> int:
        return hash((self.source, self.target, self.weight))
