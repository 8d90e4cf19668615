"""Shared fixtures: a controllable clock and a few small graphs."""

import pytest

from engine import PlaybackConfig, PlaybackSession
from graph import Edge, Graph, Node


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def make_nodes(count):
    return [Node(i, x=i * 100.0, y=0.0) for i in range(count)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    # 1 s per state at 1x, 0.25 s between hold repeats (1.0 / 4)
    return PlaybackConfig(base_interval=1.0, hold_debounce=0.25, default_speed_multiplier=4)


@pytest.fixture
def session(config, clock):
    return PlaybackSession(config, clock=clock)


@pytest.fixture
def triangle():
    """0-1 (5), 1-2 (3), 0-2 (10): the MST is 0-1, 1-2 with weight 8."""
    nodes = make_nodes(3)
    edges = [Edge(0, 1, 5), Edge(1, 2, 3), Edge(0, 2, 10)]
    return nodes, edges


@pytest.fixture
def split_graph():
    """Two components: {0, 1} and {2, 3}."""
    nodes = make_nodes(4)
    edges = [Edge(0, 1, 2), Edge(2, 3, 1)]
    return nodes, edges


@pytest.fixture
def square_graph():
    g = Graph()
    for x, y in [(0, 0), (100, 0), (100, 100), (0, 100)]:
        g.add_node(x, y)
    g.add_edge(0, 1, 4)
    g.add_edge(1, 2, 2)
    g.add_edge(2, 3, 6)
    g.add_edge(3, 0, 1)
    g.add_edge(0, 2, 5)
    return g
