"""Graph data structures shared by the validator and the layout engine."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class NodeType(str, Enum):
    SOURCE = "source"
    TRANSFORM = "transform"
    SINK = "sink"


@dataclass
class Node:
    id: str
    name: str
    node_type: NodeType = NodeType.TRANSFORM
    x: float = 0.0
    y: float = 0.0


@dataclass
class Edge:
    id: str
    source: str  # "from" node id
    target: str  # "to" node id


@dataclass(frozen=True)
class Graph:
    """Point-in-time snapshot handed to the core. Order is insertion order."""
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()


@dataclass
class GraphIndex:
    """Adjacency and in-degree lookups built once per core call.

    Node ids are de-duplicated (first occurrence wins). Edges pointing at
    unknown node ids are dropped.
    """
    nodes: list[Node] = field(default_factory=list)
    by_id: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    outgoing: dict[str, list[Edge]] = field(default_factory=dict)
    in_degree: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "GraphIndex":
        index = cls()
        for node in nodes:
            if node.id in index.by_id:
                continue
            index.nodes.append(node)
            index.by_id[node.id] = node
            index.outgoing[node.id] = []
            index.in_degree[node.id] = 0

        for edge in edges:
            if edge.source not in index.by_id or edge.target not in index.by_id:
                continue
            index.edges.append(edge)
            index.outgoing[edge.source].append(edge)
            index.in_degree[edge.target] += 1
        return index

    def get_outgoing_edges(self, node_id: str) -> list[Edge]:
        return self.outgoing.get(node_id, [])

    def get_successors(self, node_id: str) -> list[str]:
        return [e.target for e in self.get_outgoing_edges(node_id)]

    def connected_ids(self) -> set[str]:
        """Ids that appear as either endpoint of some edge."""
        ids: set[str] = set()
        for edge in self.edges:
            ids.add(edge.source)
            ids.add(edge.target)
        return ids
