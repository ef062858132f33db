"""Layered auto-layout: Kahn-style topological layering plus coordinates."""
from dataclasses import dataclass, replace
from typing import Iterable

from .graph import Edge, GraphIndex, Node


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 120
    layer_height: float = 150
    canvas_width: float = 800
    origin_x: float = 100
    origin_y: float = 50


@dataclass(frozen=True)
class NodePosition:
    layer: int
    slot: int
    x: float
    y: float


def assign_layers(index: GraphIndex) -> list[list[str]]:
    """Group node ids into topological layers.

    Layer 0 holds the in-degree-0 nodes in insertion order. Each following
    layer holds nodes in the order their last incoming edge was consumed.
    Nodes that never reach in-degree 0 (cycle members and everything only
    reachable through a cycle) go into a single trailing layer in insertion
    order.
    """
    in_degree = dict(index.in_degree)
    placed: set[str] = set()
    layers: list[list[str]] = []

    current = [n.id for n in index.nodes if in_degree[n.id] == 0]
    while current:
        layers.append(current)
        placed.update(current)
        following: list[str] = []
        for node_id in current:
            for succ in index.get_successors(node_id):
                in_degree[succ] -= 1
                if in_degree[succ] == 0 and succ not in placed:
                    following.append(succ)
        current = following

    unresolved = [n.id for n in index.nodes if n.id not in placed]
    if unresolved:
        layers.append(unresolved)
    return layers


def compute_layout(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    config: LayoutConfig | None = None,
) -> dict[str, NodePosition]:
    """Return {node_id: NodePosition} for every node in the snapshot."""
    config = config or LayoutConfig()
    index = GraphIndex.build(nodes, edges)

    positions: dict[str, NodePosition] = {}
    for layer, members in enumerate(assign_layers(index)):
        offset = (config.canvas_width - len(members) * config.node_width) / 2
        y = config.origin_y + layer * config.layer_height
        for slot, node_id in enumerate(members):
            positions[node_id] = NodePosition(
                layer=layer,
                slot=slot,
                x=config.origin_x + slot * config.node_width + offset,
                y=y,
            )
    return positions


def apply_layout(nodes: Iterable[Node], layout: dict[str, NodePosition]) -> list[Node]:
    """Copy of `nodes` with x/y taken from `layout` where present."""
    result: list[Node] = []
    for node in nodes:
        pos = layout.get(node.id)
        result.append(replace(node, x=pos.x, y=pos.y) if pos else replace(node))
    return result
