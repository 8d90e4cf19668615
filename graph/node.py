"""
node.py — Graph Node
====================
A point on the drawing surface.  The algorithm only cares about `id`
and `name`; the position feeds the distance-based default edge weight.
"""

from typing import Optional


# Pixels → weight units for the default edge weight
SCALE_FACTOR = 0.05


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Attributes:
        id    : Integer identifier, unique within a Graph and never reused.
        name  : Label shown on the canvas and in the distance table.
        x, y  : Canvas coordinates in pixels.
    """

    __slots__ = ("id", "name", "x", "y")

    def __init__(self, node_id: int, x: float = 0.0, y: float = 0.0, name: Optional[str] = None):
        self.id:   int   = node_id
        self.name: str   = name or str(node_id)
        self.x:    float = x
        self.y:    float = y

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        """Scaled Euclidean distance, rounded to one decimal place."""
        raw = ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5
        return round(raw * SCALE_FACTOR, 1)

    def copy(self) -> "Node":
        return Node(self.id, x=self.x, y=self.y, name=self.name)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":   self.id,
            "name": self.name,
            "x":    self.x,
            "y":    self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(int(data["id"]), x=data.get("x", 0.0), y=data.get("y", 0.0), name=data.get("name"))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, name={self.name}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
