"""Shared test fixtures for pipeline editor backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure app package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.engine.graph import Edge, Graph, Node, NodeType


def make_graph(names: str, edges: list[tuple[str, str]]) -> Graph:
    """Build a snapshot where each node's id and name are the same letter."""
    nodes = tuple(Node(id=n, name=n) for n in names)
    return Graph(
        nodes=nodes,
        edges=tuple(
            Edge(id=f"e{i}", source=s, target=t) for i, (s, t) in enumerate(edges, 1)
        ),
    )


@pytest.fixture
def chain_graph():
    """src -> clean -> out."""
    nodes = (
        Node(id="src", name="Ingest", node_type=NodeType.SOURCE),
        Node(id="clean", name="Clean", node_type=NodeType.TRANSFORM),
        Node(id="out", name="Warehouse", node_type=NodeType.SINK),
    )
    edges = (
        Edge(id="e1", source="src", target="clean"),
        Edge(id="e2", source="clean", target="out"),
    )
    return Graph(nodes=nodes, edges=edges)


@pytest.fixture
def diamond_graph():
    """A -> B, A -> C, B -> D, C -> D."""
    return make_graph("ABCD", [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])


@pytest.fixture
def cyclic_graph():
    """A -> B -> C -> A."""
    return make_graph("ABC", [("A", "B"), ("B", "C"), ("C", "A")])
